"""Run the whole static site build: crawl, render, write feeds, copy assets.

Usage::

    from caurss.static_site.runner import generate_static
    response = generate_static()
    print(len(response.success), len(response.failure))
"""

from __future__ import annotations

import logging
import shutil
import sys
from pathlib import Path

from caurss.config import AppConfig, GeneratorSettings
from caurss.models import FeedDataResponse
from caurss.services.crawler import SiteCrawler

from .assets import copy_static
from .orchestrator import FetchArticles, collect_feed_data
from .renderer import create_environment, feed_html_table, generate_feed_files, generate_index

__all__ = ["generate_static", "main", "prepare_output_dir"]

logger = logging.getLogger(__name__)


def prepare_output_dir(output_dir: Path | str) -> Path:
    """Remove ``output_dir`` if present and create it empty.

    Failing to remove an existing tree is fatal so stale feeds never survive.
    """

    path = Path(output_dir)
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    path.mkdir(parents=True, exist_ok=True)
    return path


def generate_static(
    settings: GeneratorSettings | None = None,
    *,
    config: AppConfig | None = None,
    fetch_articles: FetchArticles | None = None,
) -> FeedDataResponse:
    """Build the static site described by ``settings`` and return what was crawled.

    ``config`` defaults to the registry at ``settings.sites_path`` and
    ``fetch_articles`` to a :class:`SiteCrawler` over that registry. Anything
    other than a per-site crawl failure propagates and aborts the build,
    possibly leaving a partially written output directory behind.
    """

    settings = settings or GeneratorSettings.from_env()
    config = config or AppConfig.from_file(settings.sites_path)
    if fetch_articles is None:
        fetch_articles = SiteCrawler(config).fetch_articles_for_key

    environment = create_environment(settings.templates_dir)
    output_dir = prepare_output_dir(settings.output_dir)

    response = collect_feed_data(config.iter_sites(), fetch_articles)

    table = feed_html_table(config.iter_sites(), settings.web_address, environment)
    generate_index(output_dir, table, settings.web_address, environment)
    generate_feed_files(output_dir, response)
    copy_static(settings.static_dir, output_dir)

    print(
        f"Static site generated to {output_dir} "
        f"(entries: {len(response.success)}, failures: {len(response.failure)})"
    )
    return response


def main() -> None:
    """Console entry point."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    settings = GeneratorSettings.from_env()
    try:
        config = AppConfig.from_file(settings.sites_path)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Could not load site configuration: %s", exc)
        sys.exit(1)

    print("Starting static site generation...")
    generate_static(settings, config=config)


if __name__ == "__main__":
    main()
