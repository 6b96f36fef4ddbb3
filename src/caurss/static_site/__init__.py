"""Static site pipeline: orchestrator, renderer, asset finalizer and run driver."""

from __future__ import annotations

from .assets import copy_static  # noqa: F401
from .orchestrator import collect_feed_data, get_all_seoul_dormitory_articles  # noqa: F401
from .renderer import (  # noqa: F401
    build_feed_metadata,
    create_environment,
    feed_html_table,
    generate_feed_files,
    generate_index,
)
from .runner import generate_static, main  # noqa: F401

__all__ = [
    "build_feed_metadata",
    "collect_feed_data",
    "copy_static",
    "create_environment",
    "feed_html_table",
    "generate_feed_files",
    "generate_index",
    "generate_static",
    "get_all_seoul_dormitory_articles",
    "main",
]
