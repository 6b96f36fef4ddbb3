"""Configuration models and helpers for the CAU RSS generator."""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Iterable, List

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, ValidationError, field_validator, model_validator

__all__ = [
    "AppConfig",
    "BoardConfig",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_STATIC_DIR",
    "DEFAULT_TEMPLATES_DIR",
    "DEFAULT_WEB_ADDRESS",
    "FEED_FILENAMES",
    "GeneratorSettings",
    "SiteConfig",
]

_PACKAGE_DIR = Path(__file__).resolve().parent

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "data" / "sites.json"
DEFAULT_STATIC_DIR = _PACKAGE_DIR / "static"
DEFAULT_TEMPLATES_DIR = _PACKAGE_DIR / "templates"
DEFAULT_OUTPUT_DIR = Path("public")
DEFAULT_WEB_ADDRESS = "rss.puang.network"

_KEY_PATTERN = re.compile(r"^[a-z0-9_-]+(?:/[a-z0-9_-]+)*$")

#: File names written under ``cau/<key>/``; must match ``FeedFormat`` values.
FEED_FILENAMES = frozenset({"rss", "atom", "json"})


class BoardConfig(BaseModel):
    """CSS selectors describing how to read one notice board list page."""

    model_config = ConfigDict(frozen=True)

    list_url: HttpUrl | None = Field(
        default=None,
        description="Page holding the notice list. Defaults to the site URL when omitted.",
    )
    row_selector: str = Field(default="table tbody tr", description="Selector matching one notice row")
    title_selector: str = Field(default="a[href]", description="Selector for the title inside a row")
    link_selector: str | None = Field(
        default=None,
        description="Selector for the element carrying the article link. Defaults to the title selector.",
    )
    link_attribute: str = Field(default="href", description="Attribute holding the article link")
    date_selector: str | None = Field(
        default=None,
        description=(
            "Selector for the date cell. When omitted the row cells are scanned "
            "right to left for the first date-looking text."
        ),
    )
    author_selector: str | None = Field(default=None, description="Optional selector for the author cell")
    exclude_selector: str | None = Field(
        default=None,
        description="Rows matching this selector are skipped (pinned duplicates, headers)",
    )
    encoding: str | None = Field(default=None, description="Force a response encoding, e.g. 'euc-kr'")


class SiteConfig(BaseModel):
    """A single announcement board identified by a hierarchical key."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Hierarchical key such as 'dormitory/seoul/bluemir'")
    name: str = Field(..., description="Short display name")
    long_name: str = Field(default="", description="Optional long display name")
    url: HttpUrl = Field(..., description="Canonical board URL")
    board: BoardConfig | None = Field(
        default=None,
        description="Scraping rules. Sites without a board are aggregates and are never crawled.",
    )

    @field_validator("key")
    @classmethod
    def _validate_key(cls, value: str) -> str:
        if not _KEY_PATTERN.match(value):
            raise ValueError(
                f"Invalid site key {value!r}: use lowercase '/'-separated segments of [a-z0-9_-]"
            )
        return value

    @property
    def display_name(self) -> str:
        """Return the long name when configured, otherwise the short name."""

        return self.long_name or self.name

    @property
    def list_url(self) -> str:
        """Return the URL of the notice list page for this site."""

        if self.board is not None and self.board.list_url is not None:
            return str(self.board.list_url)
        return str(self.url)


class AppConfig(BaseModel):
    """The site registry: every board the generator knows about, in output order."""

    sites: List[SiteConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_keys(self) -> "AppConfig":
        seen: set[str] = set()
        for site in self.sites:
            if site.key in seen:
                raise ValueError(f"Duplicate site key: {site.key}")
            seen.add(site.key)

        # Each key becomes a directory holding the rss/atom/json files.
        for key in seen:
            parent, _, leaf = key.rpartition("/")
            if parent in seen and leaf in FEED_FILENAMES:
                raise ValueError(f"Site key {key} collides with the {leaf} feed of {parent}")
        return self

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> "AppConfig":
        """Load the registry from a JSON file."""

        config_path = Path(path) if path else DEFAULT_CONFIG_PATH
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Configuration file not found: {config_path}") from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in configuration file: {config_path}") from exc

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Configuration file is invalid: {config_path}\n{exc}") from exc

    def dump(self, path: Path | str | None = None) -> None:
        """Persist the registry back to disk as JSON."""

        config_path = Path(path) if path else DEFAULT_CONFIG_PATH
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(
            self.model_dump_json(indent=2, exclude_none=True), encoding="utf-8"
        )

    def iter_sites(self) -> Iterable[SiteConfig]:
        """Iterate over configured sites in registry order."""

        return iter(self.sites)

    def get_site(self, key: str) -> SiteConfig:
        """Return the site registered under ``key``."""

        for site in self.sites:
            if site.key == key:
                return site
        raise KeyError(key)


class GeneratorSettings(BaseModel):
    """Paths and addresses used by a generator run."""

    output_dir: Path = DEFAULT_OUTPUT_DIR
    web_address: str = DEFAULT_WEB_ADDRESS
    sites_path: Path = DEFAULT_CONFIG_PATH
    static_dir: Path = DEFAULT_STATIC_DIR
    templates_dir: Path = DEFAULT_TEMPLATES_DIR

    @classmethod
    def from_env(cls) -> "GeneratorSettings":
        """Build settings from ``CAU_RSS_*`` environment variables, falling back to defaults."""

        env_names = {
            "output_dir": "CAU_RSS_OUTPUT_DIR",
            "web_address": "CAU_RSS_WEB_ADDRESS",
            "sites_path": "CAU_RSS_SITES_PATH",
            "static_dir": "CAU_RSS_STATIC_DIR",
            "templates_dir": "CAU_RSS_TEMPLATES_DIR",
        }
        values = {
            field: os.environ[name]
            for field, name in env_names.items()
            if os.environ.get(name, "").strip()
        }
        return cls.model_validate(values)
