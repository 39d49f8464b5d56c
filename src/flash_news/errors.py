from typing import Any, Dict, Optional


class NewsProxyError(Exception):
    """Base class for errors raised while resolving a news query."""


class InvalidCategoryError(NewsProxyError):
    def __init__(self, category: str) -> None:
        super().__init__(f"Invalid category: {category!r}")
        self.category = category


class UpstreamError(NewsProxyError):
    """The news provider could not be reached or answered with an error.

    `payload` holds the provider's decoded error body when one was returned,
    so callers can pass the provider's own message through.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload

    @property
    def detail(self) -> str:
        if self.payload and self.payload.get("message"):
            return str(self.payload["message"])
        return str(self)
