from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest
from jinja2 import TemplateNotFound

from caurss.config import AppConfig, BoardConfig, GeneratorSettings, SiteConfig
from caurss.models import SEOUL_TZ, Article
from caurss.services.crawler import CrawlError
from caurss.static_site import runner
from caurss.static_site.runner import generate_static, prepare_output_dir


def make_site(key: str, *, board: bool = True) -> SiteConfig:
    return SiteConfig(
        key=key,
        name=key.rsplit("/", 1)[-1],
        url=f"https://example.com/{key}",
        board=BoardConfig() if board else None,
    )


CONFIG = AppConfig(
    sites=[
        make_site("notice"),
        make_site("dormitory/seoul/bluemir"),
        make_site("dormitory/seoul/future_house"),
        make_site("dormitory/seoul/global_house"),
        make_site("dormitory/seoul/all", board=False),
        make_site("cse"),
    ]
)


def fake_fetch(key: str) -> list[Article]:
    if key == "cse":
        raise CrawlError("timeout")
    return [
        Article(
            title=f"{key} notice",
            url=f"https://example.com/{key}/view/1",
            date=datetime(2024, 10, len(key) % 28 + 1, tzinfo=SEOUL_TZ),
        )
    ]


def test_prepare_output_dir_replaces_previous_contents(tmp_path: Path) -> None:
    output_dir = tmp_path / "public"
    (output_dir / "stale").mkdir(parents=True)
    (output_dir / "stale" / "rss").write_text("old", encoding="utf-8")

    result = prepare_output_dir(output_dir)

    assert result == output_dir
    assert output_dir.is_dir()
    assert list(output_dir.iterdir()) == []


def test_prepare_output_dir_creates_missing_directory(tmp_path: Path) -> None:
    output_dir = tmp_path / "nested" / "public"

    assert prepare_output_dir(output_dir).is_dir()


def test_prepare_output_dir_fails_when_wipe_fails(tmp_path: Path, monkeypatch) -> None:
    output_dir = tmp_path / "public"
    output_dir.mkdir()
    (output_dir / "rss").write_text("old", encoding="utf-8")

    def fail_rmtree(path, *args, **kwargs):
        raise PermissionError(f"cannot remove {path}")

    monkeypatch.setattr("caurss.static_site.runner.shutil.rmtree", fail_rmtree)

    with pytest.raises(PermissionError):
        prepare_output_dir(output_dir)


def test_generate_static_builds_the_site(tmp_path: Path, capsys) -> None:
    output_dir = tmp_path / "public"
    (output_dir / "cau" / "old").mkdir(parents=True)
    (output_dir / "cau" / "old" / "rss").write_text("stale", encoding="utf-8")
    settings = GeneratorSettings(output_dir=output_dir, web_address="rss.example.net")

    response = generate_static(settings, config=CONFIG, fetch_articles=fake_fetch)

    assert len(response.success) == 5
    assert [item.site_info.key for item in response.failure] == ["cse"]
    assert not (output_dir / "cau" / "old").exists()

    for key in ("notice", "dormitory/seoul/bluemir", "dormitory/seoul/all"):
        for name in ("rss", "atom", "json"):
            assert (output_dir / "cau" / key / name).read_text(encoding="utf-8").strip()
    assert not (output_dir / "cau" / "cse").exists()

    aggregate = json.loads((output_dir / "cau" / "dormitory" / "seoul" / "all" / "json").read_text(encoding="utf-8"))
    assert len(aggregate["items"]) == 3

    index = (output_dir / "index.html").read_text(encoding="utf-8")
    assert "https://rss.example.net/cau/cse/rss" in index
    assert (output_dir / "style.css").exists()

    captured = capsys.readouterr()
    assert f"Static site generated to {output_dir} (entries: 5, failures: 1)" in captured.out


def test_generate_static_aborts_when_template_is_missing(tmp_path: Path) -> None:
    settings = GeneratorSettings(output_dir=tmp_path / "public", templates_dir=tmp_path / "missing")

    with pytest.raises(TemplateNotFound):
        generate_static(settings, config=CONFIG, fetch_articles=fake_fetch)


def test_main_exits_when_registry_is_missing(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("CAU_RSS_SITES_PATH", str(tmp_path / "missing.json"))
    monkeypatch.setenv("CAU_RSS_OUTPUT_DIR", str(tmp_path / "public"))

    with pytest.raises(SystemExit) as excinfo:
        runner.main()

    assert excinfo.value.code == 1
    assert not (tmp_path / "public").exists()


def test_main_runs_the_generator(tmp_path: Path, monkeypatch) -> None:
    sites_path = tmp_path / "sites.json"
    CONFIG.dump(sites_path)
    monkeypatch.setenv("CAU_RSS_SITES_PATH", str(sites_path))
    monkeypatch.setenv("CAU_RSS_OUTPUT_DIR", str(tmp_path / "public"))

    captured = {}

    def fake_generate_static(settings, *, config):
        captured["settings"] = settings
        captured["config"] = config

    monkeypatch.setattr(runner, "generate_static", fake_generate_static)

    runner.main()

    assert captured["settings"].output_dir == tmp_path / "public"
    assert [site.key for site in captured["config"].sites] == [site.key for site in CONFIG.sites]
