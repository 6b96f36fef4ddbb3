"""Notice board crawler used by the static site generator."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Iterator, List
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError

from caurss.config import AppConfig, BoardConfig, SiteConfig
from caurss.models import SEOUL_TZ, Article

__all__ = ["CrawlError", "SiteCrawler", "parse_kr_date"]

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = (10, 60)
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/129.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,*/*;q=0.8"
    ),
    "Accept-Language": "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
}

_FULL_DATE = re.compile(r"(?<!\d)(\d{4})\s*[./-]\s*(\d{1,2})\s*[./-]\s*(\d{1,2})(?!\d)")
_SHORT_DATE = re.compile(r"(?<!\d)(\d{2})\s*\.\s*(\d{1,2})\s*\.\s*(\d{1,2})(?!\d)")
_WHITESPACE = re.compile(r"\s+")


class CrawlError(RuntimeError):
    """Raised when a site cannot be crawled. The run records it and moves on."""


def parse_kr_date(text: str | None) -> datetime | None:
    """Parse a board date such as ``2024.10.05`` or ``24.10.05`` as midnight in Seoul."""

    if not text:
        return None
    match = _FULL_DATE.search(text)
    if match:
        year, month, day = map(int, match.groups())
    else:
        match = _SHORT_DATE.search(text)
        if not match:
            return None
        year, month, day = map(int, match.groups())
        year += 2000

    try:
        return datetime(year, month, day, tzinfo=SEOUL_TZ)
    except ValueError:
        return None


def _clean(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


class SiteCrawler:
    """Fetches one notice board page per site and turns its rows into articles."""

    def __init__(self, config: AppConfig, session: requests.Session | None = None) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._session.headers.update(DEFAULT_HEADERS)

    def fetch_articles_for_key(self, key: str) -> List[Article]:
        """Crawl the site registered under ``key``.

        Every failure mode is reported as :class:`CrawlError` so callers only
        have one exception to treat as a per-site failure.
        """

        try:
            site = self._config.get_site(key)
        except KeyError as exc:
            raise CrawlError(f"Unknown site key: {key}") from exc

        try:
            articles = self.fetch(site)
        except requests.RequestException as exc:
            raise CrawlError(f"Failed to fetch {site.list_url}: {exc}") from exc

        if not articles:
            raise CrawlError(f"No articles found on {site.list_url}")
        return articles

    def fetch(self, site: SiteConfig) -> List[Article]:
        """Download the board list page of ``site`` and extract its articles."""

        if site.board is None:
            raise CrawlError(f"Site {site.key} has no board to crawl")

        url = site.list_url
        response = self._session.get(url, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()

        if site.board.encoding:
            response.encoding = site.board.encoding
        elif not response.encoding or response.encoding.lower() == "iso-8859-1":
            response.encoding = response.apparent_encoding or "utf-8"

        return self.extract_articles(response.text, site)

    def extract_articles(self, html: str, site: SiteConfig) -> List[Article]:
        """Return the articles found in ``html`` in page order, without duplicate links."""

        if site.board is None:
            raise CrawlError(f"Site {site.key} has no board to crawl")

        soup = BeautifulSoup(html, "lxml")
        return list(self._iter_articles(soup, site.board, site.list_url))

    def _iter_articles(self, soup: BeautifulSoup, board: BoardConfig, base_url: str) -> Iterator[Article]:
        excluded: set[int] = set()
        if board.exclude_selector:
            excluded = {id(tag) for tag in soup.select(board.exclude_selector)}

        seen: set[str] = set()
        for row in soup.select(board.row_selector):
            if id(row) in excluded:
                continue

            article = self._parse_row(row, board, base_url)
            if article is None:
                continue

            link = str(article.url)
            if link in seen:
                continue
            seen.add(link)
            yield article

    def _parse_row(self, row: Tag, board: BoardConfig, base_url: str) -> Article | None:
        title_el = row.select_one(board.title_selector)
        if title_el is None:
            logger.debug("Skipping row without title: %s", _clean(row.get_text(" ")))
            return None
        title = _clean(title_el.get_text(" "))

        link_el = row.select_one(board.link_selector) if board.link_selector else title_el
        href = link_el.get(board.link_attribute) if link_el is not None else None
        if not title or not href:
            logger.debug("Skipping row without title or link: %s", title)
            return None

        link = urljoin(base_url, str(href).strip()).split("#", 1)[0]
        if urlparse(link).scheme not in {"http", "https"}:
            logger.debug("Skipping non-http link %s", link)
            return None

        date = self._find_date(row, board)
        if date is None:
            logger.debug("Skipping row without date: %s", title)
            return None

        author = None
        if board.author_selector:
            author_el = row.select_one(board.author_selector)
            if author_el is not None:
                author = _clean(author_el.get_text(" ")) or None

        try:
            return Article(title=title, url=link, date=date, author=author)
        except ValidationError as exc:
            logger.debug("Skipping invalid article %s: %s", link, exc)
            return None

    @staticmethod
    def _find_date(row: Tag, board: BoardConfig) -> datetime | None:
        if board.date_selector:
            date_el = row.select_one(board.date_selector)
            return parse_kr_date(date_el.get_text(" ")) if date_el is not None else None

        for cell in reversed(row.find_all("td")):
            date = parse_kr_date(cell.get_text(" "))
            if date is not None:
                return date
        return None
