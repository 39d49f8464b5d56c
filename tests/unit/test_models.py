import pytest

from src.flash_news.models.news import Article, QueryParams


def test_query_params_defaults() -> None:
    params = QueryParams()
    assert params.text is None
    assert params.category is None
    assert params.country is None
    assert params.page_size == 12
    assert params.page == 1


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("5", 5),
        ("5.5", 5),
        ("12abc", 12),
        ("250", 100),
        ("-3", 1),
        ("0", 12),
        ("abc", 12),
        (None, 12),
    ],
)
def test_page_size_is_clamped(raw, expected) -> None:
    assert QueryParams(page_size=raw).page_size == expected


@pytest.mark.parametrize("raw, expected", [("3", 3), ("2.9", 2), ("-2", 1), ("0", 1), ("x", 1)])
def test_page_is_clamped(raw, expected) -> None:
    assert QueryParams(page=raw).page == expected


def test_blank_strings_are_absent() -> None:
    params = QueryParams(text="", category="  ", country="")
    assert params.text is None
    assert params.category is None
    assert params.country is None


def test_effective_country_prefers_explicit_value() -> None:
    assert QueryParams().effective_country("in") == "in"
    assert QueryParams(country="us").effective_country("in") == "us"


def test_article_serializes_published_at_with_upstream_name() -> None:
    article = Article(title="T", published_at="2024-01-01T00:00:00Z")
    dumped = article.model_dump(by_alias=True)
    assert dumped["publishedAt"] == "2024-01-01T00:00:00Z"
    assert dumped["source"] is None
    assert dumped["image"] is None
