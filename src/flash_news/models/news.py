import re
from typing import FrozenSet, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


ALLOWED_CATEGORIES: FrozenSet[str] = frozenset(
    {
        "business",
        "entertainment",
        "general",
        "health",
        "science",
        "sports",
        "technology",
        "politics",
    }
)

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100

Endpoint = Literal["headlines", "discovery"]

_LEADING_INT = re.compile(r"\s*[+-]?\d+")


def _lenient_int(value: object, default: int) -> int:
    """Read the leading integer of a query value ("5.5" and "5abc" give 5)."""

    if value is None or isinstance(value, bool):
        return default
    match = _LEADING_INT.match(str(value))
    if match is None:
        return default
    return int(match.group(0)) or default


class Article(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    url: Optional[str] = None
    image: Optional[str] = None
    published_at: Optional[str] = Field(default=None, alias="publishedAt")


class NewsPage(BaseModel):
    articles: List[Article] = []
    total_results: int = 0


class QueryParams(BaseModel):
    """Filters for one inbound news request.

    `country` is only what the caller supplied; the configured default is
    applied through `effective_country` so routing can still tell the two
    apart. Blank strings count as absent and pagination values are clamped
    rather than rejected.
    """

    text: Optional[str] = None
    category: Optional[str] = None
    country: Optional[str] = None
    page_size: int = DEFAULT_PAGE_SIZE
    page: int = 1

    @field_validator("text", "category", "country", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("page_size", mode="before")
    @classmethod
    def _clamp_page_size(cls, value: object) -> int:
        return max(1, min(_lenient_int(value, DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE))

    @field_validator("page", mode="before")
    @classmethod
    def _clamp_page(cls, value: object) -> int:
        return max(_lenient_int(value, 1), 1)

    def effective_country(self, default: str) -> str:
        return self.country or default


class UpstreamQuery(BaseModel):
    endpoint: Endpoint
    q: Optional[str] = None
    category: Optional[str] = None
    country: Optional[str] = None
    language: Optional[str] = None
    sort_by: Optional[str] = None
    page_size: int = DEFAULT_PAGE_SIZE
    page: int = 1


class Resolution(BaseModel):
    articles: List[Article]
    total_results: int
    cached: bool = False
    endpoint: Optional[Endpoint] = None
    fallback_used: bool = False
