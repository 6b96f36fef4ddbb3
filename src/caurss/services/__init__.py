"""Service layer entry points for CAU RSS."""

from __future__ import annotations

from .crawler import CrawlError, SiteCrawler, parse_kr_date  # noqa: F401
from .feeds import FeedFormat, FeedMetadata, generate_feed  # noqa: F401

__all__ = ["CrawlError", "FeedFormat", "FeedMetadata", "SiteCrawler", "generate_feed", "parse_kr_date"]
