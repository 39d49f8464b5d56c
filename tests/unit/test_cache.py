from datetime import datetime, timedelta, timezone

from src.flash_news.models.news import Article, QueryParams
from src.flash_news.tools.cache import TTLCache, make_cache_key


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def _article(title: str) -> Article:
    return Article(title=title, url=f"https://example.com/{title}")


def test_make_cache_key_is_deterministic() -> None:
    first = QueryParams(text="ai", category="technology", country="us", page_size="5", page="2")
    second = QueryParams(text="ai", category="technology", country="us", page_size=5, page=2)
    assert make_cache_key(first, "in", "headlines") == make_cache_key(second, "in", "headlines")
    assert make_cache_key(first, "in", "headlines") == "q:ai:cat:technology:cty:us:ps:5:p:2:ep:headlines"


def test_make_cache_key_applies_default_country() -> None:
    implicit = QueryParams(category="sports")
    explicit = QueryParams(category="sports", country="in")
    assert make_cache_key(implicit, "in", "headlines") == make_cache_key(explicit, "in", "headlines")
    assert make_cache_key(QueryParams(), "in", "discovery") == "q::cat::cty:in:ps:12:p:1:ep:discovery"


def test_make_cache_key_differs_by_pagination() -> None:
    base = QueryParams(category="health", page_size=10, page=1)
    keys = {
        make_cache_key(base, "us", "headlines"),
        make_cache_key(QueryParams(category="health", page_size=10, page=2), "us", "headlines"),
        make_cache_key(QueryParams(category="health", page_size=20, page=1), "us", "headlines"),
    }
    assert len(keys) == 3


def test_make_cache_key_differs_by_primary_endpoint() -> None:
    params = QueryParams(text="bitcoin")
    assert make_cache_key(params, "in", "discovery") != make_cache_key(params, "in", "headlines")


def test_get_returns_entry_before_expiry() -> None:
    clock = FakeClock()
    cache = TTLCache(ttl=timedelta(seconds=60), clock=clock)
    cache.set("k", [_article("a")], 1)

    clock.advance(59)
    entry = cache.get("k")
    assert entry is not None
    assert entry.total_results == 1
    assert [a.title for a in entry.articles] == ["a"]


def test_get_treats_expired_entry_as_miss() -> None:
    clock = FakeClock()
    cache = TTLCache(ttl=timedelta(seconds=60), clock=clock)
    cache.set("k", [_article("a")], 1)

    clock.advance(60)
    assert cache.get("k") is None
    # Stale entries are ignored, not removed.
    assert len(cache) == 1


def test_set_overwrites_and_restamps_expiry() -> None:
    clock = FakeClock()
    cache = TTLCache(ttl=timedelta(seconds=60), clock=clock)
    cache.set("k", [_article("old")], 1)
    clock.advance(50)
    cache.set("k", [_article("new")], 7)
    clock.advance(50)

    entry = cache.get("k")
    assert entry is not None
    assert entry.total_results == 7
    assert entry.articles[0].title == "new"


def test_purge_expired_removes_only_stale_entries() -> None:
    clock = FakeClock()
    cache = TTLCache(ttl=timedelta(seconds=60), clock=clock)
    cache.set("old", [], 0)
    clock.advance(30)
    cache.set("fresh", [], 0)
    clock.advance(40)

    assert cache.purge_expired() == 1
    assert len(cache) == 1
    assert cache.get("fresh") is not None


def test_max_entries_evicts_least_recently_used() -> None:
    cache = TTLCache(max_entries=2)
    cache.set("a", [], 0)
    cache.set("b", [], 0)
    assert cache.get("a") is not None
    cache.set("c", [], 0)

    assert len(cache) == 2
    assert cache.get("b") is None
    assert cache.get("a") is not None
    assert cache.get("c") is not None


def test_unbounded_by_default() -> None:
    cache = TTLCache()
    for i in range(500):
        cache.set(f"k{i}", [], 0)
    assert len(cache) == 500
    cache.clear()
    assert len(cache) == 0
