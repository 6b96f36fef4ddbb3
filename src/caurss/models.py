"""Domain models used across the application."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from caurss.config import SiteConfig

SEOUL_TZ = ZoneInfo("Asia/Seoul")


class Article(BaseModel):
    """One announcement scraped from a notice board."""

    model_config = ConfigDict(frozen=True)

    title: str
    url: HttpUrl
    date: datetime
    author: Optional[str] = None
    summary: Optional[str] = None

    @field_validator("date")
    @classmethod
    def _localize(cls, value: datetime) -> datetime:
        # Boards publish dates without offsets; they are Korean local time.
        if value.tzinfo is None:
            return value.replace(tzinfo=SEOUL_TZ)
        return value


class CrawlSuccessItem(BaseModel):
    """Articles fetched for one site."""

    site_info: SiteConfig
    articles: List[Article] = Field(default_factory=list)
    timestamp: int


class CrawlFailureItem(BaseModel):
    """A site whose crawl failed during this run."""

    site_info: SiteConfig
    timestamp: int
    error: str = ""


class FeedDataResponse(BaseModel):
    """Everything one generator run collected."""

    success: List[CrawlSuccessItem] = Field(default_factory=list)
    failure: List[CrawlFailureItem] = Field(default_factory=list)
