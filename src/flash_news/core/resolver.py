from typing import Protocol

from ..errors import InvalidCategoryError
from ..logging_config import get_logger
from ..models.news import ALLOWED_CATEGORIES, NewsPage, QueryParams, Resolution, UpstreamQuery
from ..tools.cache import TTLCache, make_cache_key


logger = get_logger("core.resolver")

BREAKING_NEWS_QUERY = "flash OR breaking OR latest OR breaking-news"
INDIA_CLAUSE = "(india OR indian)"

# Categories too broad to be useful as a free-text search term.
_UNSEARCHABLE_CATEGORIES = {"general", "politics"}


class UpstreamClient(Protocol):
    async def fetch(self, query: UpstreamQuery) -> NewsPage:
        ...


def select_endpoint(params: QueryParams, default_country: str) -> UpstreamQuery:
    """Pick the primary upstream query for a request.

    Headlines serve any request with a category other than politics or an
    explicitly chosen country. Everything else goes to the discovery search,
    newest first and English only.
    """

    if (params.category and params.category != "politics") or params.country:
        return UpstreamQuery(
            endpoint="headlines",
            category=params.category,
            country=params.effective_country(default_country),
            q=params.text,
            page_size=params.page_size,
            page=params.page,
        )
    return UpstreamQuery(
        endpoint="discovery",
        q=params.text or BREAKING_NEWS_QUERY,
        sort_by="publishedAt",
        language="en",
        page_size=params.page_size,
        page=params.page,
    )


def build_fallback_query(params: QueryParams, default_country: str) -> UpstreamQuery:
    if params.category and params.category not in _UNSEARCHABLE_CATEGORIES:
        term = params.category
    else:
        term = params.text or BREAKING_NEWS_QUERY

    if params.effective_country(default_country).lower() == "in":
        term = f"{term} AND {INDIA_CLAUSE}"

    return UpstreamQuery(
        endpoint="discovery",
        q=term,
        sort_by="publishedAt",
        page_size=params.page_size,
        page=params.page,
    )


class QueryResolver:
    """Answer news queries from the cache or the upstream provider.

    A cache miss issues one primary fetch. When that fetch used the
    headlines endpoint and came back empty, a single discovery search
    replaces it. Upstream failures propagate as UpstreamError without retry.
    """

    def __init__(self, upstream: UpstreamClient, cache: TTLCache, default_country: str) -> None:
        self.upstream = upstream
        self.cache = cache
        self.default_country = default_country

    async def resolve(self, params: QueryParams) -> Resolution:
        if params.category and params.category not in ALLOWED_CATEGORIES:
            raise InvalidCategoryError(params.category)

        query = select_endpoint(params, self.default_country)
        key = make_cache_key(params, self.default_country, query.endpoint)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info("resolve_cache_hit", cache_key=key, results=len(cached.articles))
            return Resolution(
                articles=cached.articles,
                total_results=cached.total_results,
                cached=True,
            )

        logger.info("resolve_fetch", cache_key=key, endpoint=query.endpoint)
        page = await self.upstream.fetch(query)

        fallback_used = False
        if query.endpoint == "headlines" and not page.articles:
            query = build_fallback_query(params, self.default_country)
            logger.info("resolve_fallback", cache_key=key, q=query.q)
            page = await self.upstream.fetch(query)
            fallback_used = True

        total_results = page.total_results or len(page.articles)
        self.cache.set(key, page.articles, total_results)
        logger.info(
            "resolve_done",
            cache_key=key,
            endpoint=query.endpoint,
            fallback_used=fallback_used,
            results=len(page.articles),
        )
        return Resolution(
            articles=page.articles,
            total_results=total_results,
            endpoint=query.endpoint,
            fallback_used=fallback_used,
        )
