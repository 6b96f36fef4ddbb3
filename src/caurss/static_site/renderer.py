"""Render the index page and the per-site feed files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Sequence
from urllib.parse import quote_plus

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from markupsafe import Markup

from caurss.config import SiteConfig
from caurss.models import Article, FeedDataResponse
from caurss.services.feeds import FeedFormat, FeedMetadata, generate_feed

__all__ = [
    "FEED_ROOT",
    "build_feed_metadata",
    "create_environment",
    "feed_html_table",
    "generate_feed_files",
    "generate_index",
]

logger = logging.getLogger(__name__)

FEED_ROOT = "cau"
INDEX_TEMPLATE = "index.html"
TABLE_TEMPLATE = "feed_table.html"

FeedSerializer = Callable[[FeedMetadata, Sequence[Article], FeedFormat], str]


def create_environment(templates_dir: Path | str) -> Environment:
    """Return a Jinja2 environment loading templates from ``templates_dir``."""

    environment = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
    )
    environment.filters["encode_uri"] = quote_plus
    return environment


def feed_html_table(sites: Iterable[SiteConfig], web_address: str, environment: Environment) -> str:
    """Render the table of every registered site with links to its three feeds."""

    rows = [
        {
            "name": site.display_name,
            "url": str(site.url),
            "key": site.key,
            "feeds": {
                fmt.value: f"https://{web_address}/{FEED_ROOT}/{site.key}/{fmt.value}"
                for fmt in FeedFormat
            },
        }
        for site in sites
    ]
    return environment.get_template(TABLE_TEMPLATE).render(rows=rows)


def generate_index(output_dir: Path | str, table: str, web_address: str, environment: Environment) -> Path:
    """Write ``index.html`` at the root of ``output_dir``.

    Template lookup or syntax errors propagate to the caller.
    """

    template = environment.get_template(INDEX_TEMPLATE)
    index_path = Path(output_dir) / "index.html"
    with index_path.open("w", encoding="utf-8") as handle:
        template.stream(table=Markup(table), webAddress=web_address).dump(handle)
    logger.info("Wrote %s", index_path)
    return index_path


def build_feed_metadata(site: SiteConfig) -> FeedMetadata:
    """Return the channel title, link and description for ``site``."""

    name = site.display_name
    return FeedMetadata(
        title=f"{name} 공지사항",
        link=str(site.url),
        description=f"{name}의 공지사항입니다",
    )


def generate_feed_files(
    output_dir: Path | str,
    response: FeedDataResponse,
    serializer: FeedSerializer = generate_feed,
) -> None:
    """Write ``cau/<key>/{rss,atom,json}`` for every successful site.

    Serialisation and filesystem errors are not caught: one bad site aborts
    the whole run.
    """

    for item in response.success:
        metadata = build_feed_metadata(item.site_info)
        rendered = {fmt: serializer(metadata, item.articles, fmt) for fmt in FeedFormat}

        feed_dir = Path(output_dir) / FEED_ROOT / item.site_info.key
        feed_dir.mkdir(parents=True, exist_ok=True)
        for fmt, body in rendered.items():
            (feed_dir / fmt.value).write_text(body, encoding="utf-8")

        logger.info("Wrote %d articles to %s", len(item.articles), feed_dir)
