from .news import (  # noqa: F401
    ALLOWED_CATEGORIES,
    Article,
    NewsPage,
    QueryParams,
    Resolution,
    UpstreamQuery,
)
