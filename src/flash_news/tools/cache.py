from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from pydantic import BaseModel

from ..models.news import Article, Endpoint, QueryParams


Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheEntry(BaseModel):
    articles: List[Article]
    total_results: int
    expires_at: datetime


def make_cache_key(params: QueryParams, default_country: str, endpoint: Endpoint) -> str:
    """Fingerprint the effective query, with the default country applied.

    The primary endpoint is part of the key: a request that names the default
    country explicitly is routed differently from one that leaves it implied,
    so the two must not share results.
    """

    return (
        f"q:{params.text or ''}"
        f":cat:{params.category or ''}"
        f":cty:{params.effective_country(default_country) or ''}"
        f":ps:{params.page_size}"
        f":p:{params.page}"
        f":ep:{endpoint}"
    )


class TTLCache:
    """In-memory result cache whose entries go stale `ttl` after insertion.

    Stale entries are skipped by `get` but stay in memory until overwritten,
    purged, or evicted. With `max_entries` unset the store grows with the
    number of distinct keys; setting it evicts the least recently used key.
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(seconds=60),
        max_entries: Optional[int] = None,
        clock: Clock = _utcnow,
    ) -> None:
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._store: "OrderedDict[str, CacheEntry]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._store)

    def get(self, key: str) -> CacheEntry | None:
        entry = self._store.get(key)
        if entry is None or entry.expires_at <= self._clock():
            return None
        self._store.move_to_end(key)
        return entry

    def set(self, key: str, articles: List[Article], total_results: int) -> CacheEntry:
        entry = CacheEntry(
            articles=articles,
            total_results=total_results,
            expires_at=self._clock() + self.ttl,
        )
        self._store[key] = entry
        self._store.move_to_end(key)
        if self.max_entries is not None:
            while len(self._store) > self.max_entries:
                self._store.popitem(last=False)
        return entry

    def purge_expired(self) -> int:
        now = self._clock()
        stale = [key for key, entry in self._store.items() if entry.expires_at <= now]
        for key in stale:
            del self._store[key]
        return len(stale)

    def clear(self) -> None:
        self._store.clear()
