"""Serialise article lists as RSS 2.0, Atom 1.0 or JSON Feed 1.1."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence

from feedgen.feed import FeedGenerator
from pydantic import BaseModel, Field

from caurss.models import Article

__all__ = ["FeedFormat", "FeedMetadata", "generate_feed"]

FEED_LANGUAGE = "ko"
JSON_FEED_VERSION = "https://jsonfeed.org/version/1.1"


class FeedFormat(str, Enum):
    RSS = "rss"
    ATOM = "atom"
    JSON = "json"


class FeedMetadata(BaseModel):
    """Channel level information shared by every format."""

    title: str
    link: str
    description: str


class _JSONFeedAuthor(BaseModel):
    name: str


class _JSONFeedItem(BaseModel):
    id: str
    url: str
    title: str
    content_text: str
    date_published: datetime
    authors: Optional[List[_JSONFeedAuthor]] = None


class _JSONFeed(BaseModel):
    version: str = JSON_FEED_VERSION
    title: str
    home_page_url: str
    description: str
    language: str = FEED_LANGUAGE
    items: List[_JSONFeedItem] = Field(default_factory=list)


def _build_generator(metadata: FeedMetadata, articles: Sequence[Article]) -> FeedGenerator:
    fg = FeedGenerator()
    fg.id(metadata.link)
    fg.title(metadata.title)
    fg.link(href=metadata.link, rel="alternate")
    fg.description(metadata.description)
    fg.language(FEED_LANGUAGE)
    if articles:
        fg.updated(max(article.date for article in articles))

    for article in articles:
        url = str(article.url)
        # feedgen prepends by default; keep the caller's order.
        entry = fg.add_entry(order="append")
        entry.id(url)
        entry.guid(url, permalink=True)
        entry.title(article.title)
        entry.link(href=url)
        entry.published(article.date)
        entry.updated(article.date)
        if article.summary:
            entry.description(article.summary)
        if article.author:
            entry.author(name=article.author)
    return fg


def _build_json_feed(metadata: FeedMetadata, articles: Sequence[Article]) -> str:
    feed = _JSONFeed(
        title=metadata.title,
        home_page_url=metadata.link,
        description=metadata.description,
        items=[
            _JSONFeedItem(
                id=str(article.url),
                url=str(article.url),
                title=article.title,
                content_text=article.summary or article.title,
                date_published=article.date,
                authors=[_JSONFeedAuthor(name=article.author)] if article.author else None,
            )
            for article in articles
        ],
    )
    return feed.model_dump_json(indent=2, exclude_none=True)


def generate_feed(metadata: FeedMetadata, articles: Sequence[Article], fmt: FeedFormat) -> str:
    """Return ``articles`` serialised in ``fmt``.

    Raises :class:`ValueError` for an unknown format or when feedgen rejects
    the data (missing required fields, naive datetimes).
    """

    if fmt is FeedFormat.RSS:
        return _build_generator(metadata, articles).rss_str(pretty=True).decode("utf-8")
    if fmt is FeedFormat.ATOM:
        return _build_generator(metadata, articles).atom_str(pretty=True).decode("utf-8")
    if fmt is FeedFormat.JSON:
        return _build_json_feed(metadata, articles)
    raise ValueError(f"Unsupported feed format: {fmt!r}")
