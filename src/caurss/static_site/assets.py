"""Copy the static asset tree over the generated output."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

__all__ = ["copy_static"]

logger = logging.getLogger(__name__)


def copy_static(static_dir: Path | str, output_dir: Path | str) -> bool:
    """Recursively copy ``static_dir`` into ``output_dir``.

    Existing files in ``output_dir`` are kept unless the asset tree has a file
    with the same path. Copy problems are logged and reported through the
    return value; they never abort the run.
    """

    source = Path(static_dir)
    if not source.is_dir():
        logger.warning("Static directory %s does not exist; nothing to copy", source)
        return False

    try:
        shutil.copytree(source, output_dir, dirs_exist_ok=True)
    except (shutil.Error, OSError) as exc:
        logger.warning("Failed to copy static assets from %s: %s", source, exc)
        return False
    return True
