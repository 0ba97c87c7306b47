"""
Data models for Listing Probe
Defines structure for queries, listings, selectors and session config
"""

from typing import List, Optional, Tuple
from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

UNKNOWN = "Unknown"

DEFAULT_SEARCH_URL = "https://www.linkedin.com/jobs/search/?keywords={keyword}&location={location}"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class SearchQuery(BaseModel):
    """Represents a single search query"""

    model_config = ConfigDict(frozen=True)

    keyword: str
    location: str

    def build_url(self, template: str = DEFAULT_SEARCH_URL) -> str:
        """Interpolate the URL-encoded keyword and location into a search URL"""
        return template.format(
            keyword=quote_plus(self.keyword),
            location=quote_plus(self.location),
        )

    def __str__(self) -> str:
        return f"'{self.keyword}' in {self.location}"


class ListingRecord(BaseModel):
    """Represents a single listing card extracted from the results page"""

    model_config = ConfigDict(frozen=True)

    title: str
    organization: str = UNKNOWN
    location: str = UNKNOWN
    link: str  # resolved href, kept as the page reports it

    @field_validator("title", "link")
    @classmethod
    def _must_resolve(cls, value: str, info) -> str:
        value = value.strip()
        if not value:
            raise ValueError(f"{info.field_name} must not be empty")
        return value

    @field_validator("organization", "location", mode="before")
    @classmethod
    def _default_unknown(cls, value: Optional[str]) -> str:
        value = (value or "").strip()
        return value or UNKNOWN

    def __str__(self) -> str:
        return f"{self.title} at {self.organization} ({self.location})"


class ExtractionResult(BaseModel):
    """Ordered, bounded listings in document order"""

    records: List[ListingRecord] = Field(default_factory=list)
    limit: int = 2
    candidates: int = 0  # raw container matches considered, before the validity gate

    @model_validator(mode="after")
    def _check_bounds(self) -> "ExtractionResult":
        if self.limit <= 0:
            raise ValueError("limit must be positive")
        if self.candidates > self.limit:
            raise ValueError(f"candidates ({self.candidates}) exceed limit ({self.limit})")
        if len(self.records) > self.candidates:
            raise ValueError("more records than candidate containers")
        return self

    @property
    def dropped(self) -> int:
        return self.candidates - len(self.records)

    def __len__(self) -> int:
        return len(self.records)


class SelectorFallbackSpec(BaseModel):
    """Ordered alternative CSS selectors for one logical field"""

    model_config = ConfigDict(frozen=True)

    name: str
    selectors: Tuple[str, ...]

    @field_validator("selectors", mode="before")
    @classmethod
    def _non_empty(cls, value):
        if isinstance(value, str):
            value = [value]
        cleaned = tuple(s.strip() for s in (value or ()) if s and s.strip())
        if not cleaned:
            raise ValueError("at least one selector is required")
        return cleaned

    def union(self) -> str:
        """Single selector list matching any alternative"""
        return ", ".join(self.selectors)

    def __str__(self) -> str:
        return f"{self.name}: {' | '.join(self.selectors)}"


class FieldSelectors(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: SelectorFallbackSpec
    organization: SelectorFallbackSpec
    location: SelectorFallbackSpec
    link: SelectorFallbackSpec


class ListingSelectors(BaseModel):
    """Everything the ready detector and extractor need to know about the markup"""

    model_config = ConfigDict(frozen=True)

    ready: Tuple[SelectorFallbackSpec, ...]
    containers: SelectorFallbackSpec
    fields: FieldSelectors

    @field_validator("ready")
    @classmethod
    def _ready_non_empty(cls, value):
        if not value:
            raise ValueError("at least one ready candidate is required")
        return value


class Viewport(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = 1366
    height: int = 768

    @field_validator("width", "height")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("viewport dimensions must be positive")
        return value


class SessionConfig(BaseModel):
    """Browser launch settings, consumed once by the session manager"""

    model_config = ConfigDict(frozen=True)

    headless: bool = True
    executable_path: Optional[str] = None
    launch_args: Tuple[str, ...] = (
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
    )
    viewport: Viewport = Field(default_factory=Viewport)
    user_agent: str = DEFAULT_USER_AGENT
    launch_timeout_ms: int = 60000
    use_stealth: bool = True
