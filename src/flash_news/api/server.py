from contextlib import asynccontextmanager
from datetime import timedelta
from typing import List, Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..config import settings
from ..core.resolver import QueryResolver
from ..errors import InvalidCategoryError, UpstreamError
from ..logging_config import bind_request_context, get_logger
from ..models.news import Article, QueryParams
from ..tools.cache import TTLCache
from ..tools.newsapi_tool import NewsAPIClient


logger = get_logger("api.server")

cache = TTLCache(
    ttl=timedelta(seconds=settings.cache_ttl_seconds),
    max_entries=settings.cache_max_entries,
)
_resolver: QueryResolver | None = None


def get_resolver() -> QueryResolver:
    """Return the process-wide resolver, building it on first use."""

    global _resolver
    if _resolver is None:
        upstream = NewsAPIClient(
            api_key=settings.newsapi_key,
            base_url=settings.newsapi_base_url,
            timeout=settings.upstream_timeout_seconds,
        )
        _resolver = QueryResolver(upstream, cache, default_country=settings.default_country)
    return _resolver


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.newsapi_key:
        logger.warning("newsapi_key_missing", hint="Set NEWSAPI_KEY in the environment or .env")
    logger.info("server_started", default_country=settings.default_country)
    yield


app = FastAPI(
    title="Flash News API",
    description="Caching proxy for headline and search news queries",
    version="1.0.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


class NewsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    total_results: int = Field(alias="totalResults")
    articles: List[Article]
    cached: bool
    page: int


@app.middleware("http")
async def bind_request_id(request: Request, call_next):
    bind_request_context(request_id=uuid4().hex, path=request.url.path)
    return await call_next(request)


@app.get("/")
def root() -> dict:
    return {"ok": True, "msg": "Flash news backend running"}


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/api/news", response_model=NewsResponse)
async def get_news(
    q: Optional[str] = None,
    category: Optional[str] = None,
    country: Optional[str] = None,
    page_size: Optional[str] = Query(default=None, alias="pageSize"),
    page: Optional[str] = None,
    resolver: QueryResolver = Depends(get_resolver),
):
    params = QueryParams(
        text=q,
        category=category,
        country=country,
        page_size=page_size,
        page=page,
    )
    logger.info(
        "news_request",
        q=params.text,
        category=params.category,
        country=params.country,
        page_size=params.page_size,
        page=params.page,
    )

    try:
        result = await resolver.resolve(params)
    except InvalidCategoryError as exc:
        logger.warning("news_invalid_category", category=exc.category)
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Invalid category"},
        )
    except UpstreamError as exc:
        logger.error(
            "news_fetch_error",
            error=str(exc),
            status_code=exc.status_code,
            upstream=exc.payload,
        )
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Failed to fetch news", "error": exc.detail},
        )
    except Exception as exc:
        logger.error("news_fetch_error", error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Failed to fetch news", "error": str(exc)},
        )

    return NewsResponse(
        total_results=result.total_results,
        articles=result.articles,
        cached=result.cached,
        page=params.page,
    )
