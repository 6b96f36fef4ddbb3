from __future__ import annotations

from pathlib import Path

from caurss.static_site.assets import copy_static


def test_copy_static_overlays_without_removing_generated_files(tmp_path: Path) -> None:
    static_dir = tmp_path / "static"
    (static_dir / "img").mkdir(parents=True)
    (static_dir / "style.css").write_text("body {}", encoding="utf-8")
    (static_dir / "img" / "logo.svg").write_text("<svg/>", encoding="utf-8")

    output_dir = tmp_path / "public"
    (output_dir / "cau" / "notice").mkdir(parents=True)
    (output_dir / "index.html").write_text("<html></html>", encoding="utf-8")
    (output_dir / "cau" / "notice" / "rss").write_text("<rss/>", encoding="utf-8")

    assert copy_static(static_dir, output_dir) is True

    assert (output_dir / "style.css").read_text(encoding="utf-8") == "body {}"
    assert (output_dir / "img" / "logo.svg").exists()
    assert (output_dir / "index.html").read_text(encoding="utf-8") == "<html></html>"
    assert (output_dir / "cau" / "notice" / "rss").read_text(encoding="utf-8") == "<rss/>"


def test_copy_static_skips_missing_directory(tmp_path: Path) -> None:
    output_dir = tmp_path / "public"
    output_dir.mkdir()

    assert copy_static(tmp_path / "missing", output_dir) is False
    assert list(output_dir.iterdir()) == []


def test_copy_static_logs_copy_errors(tmp_path: Path, monkeypatch, caplog) -> None:
    static_dir = tmp_path / "static"
    static_dir.mkdir()

    def fail_copytree(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("caurss.static_site.assets.shutil.copytree", fail_copytree)

    assert copy_static(static_dir, tmp_path / "public") is False
    assert "disk full" in caplog.text
