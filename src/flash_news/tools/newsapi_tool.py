from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from ..errors import UpstreamError
from ..logging_config import get_logger
from ..models.news import Article, NewsPage, UpstreamQuery


logger = get_logger("tools.newsapi")

_PATHS = {
    "headlines": "/top-headlines",
    "discovery": "/everything",
}


def normalize_article(item: Dict[str, Any]) -> Article:
    """Project a NewsAPI article onto the Article shape.

    Missing fields come back as None; a missing or malformed `source`
    object yields no source name.
    """

    source = item.get("source")
    source_name = source.get("name") if isinstance(source, dict) else None
    return Article(
        title=item.get("title"),
        description=item.get("description"),
        source=source_name or None,
        url=item.get("url"),
        image=item.get("urlToImage"),
        published_at=item.get("publishedAt"),
    )


def build_params(query: UpstreamQuery, api_key: Optional[str]) -> Dict[str, Any]:
    params: Dict[str, Any] = {"pageSize": query.page_size, "page": query.page}
    if api_key:
        params["apiKey"] = api_key
    if query.category:
        params["category"] = query.category
    if query.country:
        params["country"] = query.country
    if query.q:
        params["q"] = query.q
    if query.sort_by:
        params["sortBy"] = query.sort_by
    if query.language:
        params["language"] = query.language
    return params


class NewsAPIClient:
    """Async adapter for the NewsAPI.org v2 REST API.

    This is the only place that knows NewsAPI paths, parameter names and the
    article schema; everything it returns is already normalized.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://newsapi.org/v2",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, query: UpstreamQuery) -> NewsPage:
        url = self.base_url + _PATHS[query.endpoint]
        params = build_params(query, self.api_key)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=params)
        except httpx.TimeoutException as exc:
            raise UpstreamError(f"News provider timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"News provider request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = None
        payload = data if isinstance(data, dict) else None

        logger.info(
            "newsapi_response",
            endpoint=query.endpoint,
            status_code=response.status_code,
        )

        if response.is_error:
            raise UpstreamError(
                f"News provider returned HTTP {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )
        if payload is None:
            raise UpstreamError(
                "News provider returned a non-JSON body",
                status_code=response.status_code,
            )
        if payload.get("status") == "error":
            raise UpstreamError(
                payload.get("message") or "News provider reported an error",
                status_code=response.status_code,
                payload=payload,
            )

        raw_articles = payload.get("articles") or []
        try:
            articles: List[Article] = [
                normalize_article(item) for item in raw_articles if isinstance(item, dict)
            ]
        except ValidationError as exc:
            raise UpstreamError(
                f"News provider returned malformed articles: {exc.error_count()} invalid field(s)",
                status_code=response.status_code,
            ) from exc
        total = payload.get("totalResults")
        return NewsPage(
            articles=articles,
            total_results=total if isinstance(total, int) else 0,
        )
