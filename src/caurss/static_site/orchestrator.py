"""Crawl every registered site once and derive the combined Seoul dormitory feed."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, List, Sequence

from caurss.config import SiteConfig
from caurss.models import Article, CrawlFailureItem, CrawlSuccessItem, FeedDataResponse
from caurss.services.crawler import CrawlError

__all__ = [
    "AGGREGATE_SITE_KEY",
    "SEOUL_DORMITORY_KEYS",
    "collect_feed_data",
    "get_all_seoul_dormitory_articles",
]

logger = logging.getLogger(__name__)

AGGREGATE_SITE_KEY = "dormitory/seoul/all"
SEOUL_DORMITORY_KEYS = frozenset(
    {
        "dormitory/seoul/bluemir",
        "dormitory/seoul/future_house",
        "dormitory/seoul/global_house",
    }
)

FetchArticles = Callable[[str], List[Article]]


def get_all_seoul_dormitory_articles(items: Sequence[CrawlSuccessItem]) -> List[Article]:
    """Concatenate the Seoul dormitory boards and sort oldest first.

    ``sorted`` is stable, so articles sharing a date keep the order in which
    their boards appear in ``items``.
    """

    articles: List[Article] = []
    for item in items:
        if item.site_info.key in SEOUL_DORMITORY_KEYS:
            articles.extend(item.articles)
    return sorted(articles, key=lambda article: article.date)


def collect_feed_data(
    sites: Iterable[SiteConfig],
    fetch_articles: FetchArticles,
    *,
    clock: Callable[[], float] = time.time,
) -> FeedDataResponse:
    """Crawl each site once, recording successes and failures.

    A failing site never stops the run. The aggregate placeholder is not
    crawled; its entry is built from the dormitory successes and appended last.
    """

    success: List[CrawlSuccessItem] = []
    failure: List[CrawlFailureItem] = []
    aggregate_site: SiteConfig | None = None

    for site in sites:
        if site.key == AGGREGATE_SITE_KEY:
            aggregate_site = site
            continue

        logger.info("Crawling %s (%s)", site.key, site.list_url)
        try:
            articles = fetch_articles(site.key)
        except CrawlError as exc:
            logger.warning("Failed to crawl %s: %s", site.key, exc)
            failure.append(
                CrawlFailureItem(site_info=site, timestamp=int(clock()), error=str(exc))
            )
            continue

        logger.info("Found %d articles for %s", len(articles), site.key)
        success.append(
            CrawlSuccessItem(site_info=site, articles=list(articles), timestamp=int(clock()))
        )

    if aggregate_site is None:
        logger.warning("No %s site registered; skipping the combined dormitory feed", AGGREGATE_SITE_KEY)
    else:
        success.append(
            CrawlSuccessItem(
                site_info=aggregate_site,
                articles=get_all_seoul_dormitory_articles(success),
                timestamp=int(clock()),
            )
        )

    return FeedDataResponse(success=success, failure=failure)
