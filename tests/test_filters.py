from datetime import UTC, datetime, timedelta

import pytest

from filters import (
    dedupe_by_link,
    filter_window,
    keyword_filter,
    matches_keywords,
    window_and_dedup,
)
from models import Article

_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def _article(
    link: str,
    title: str = "Title",
    content: str = "",
    age_hours: float = 1,
    feed_url: str = "",
) -> Article:
    return Article(
        title=title,
        link=link,
        published_at=_NOW - timedelta(hours=age_hours),
        content=content,
        feed_url=feed_url,
    )


# ---------------------------------------------------------------------------
# Window
# ---------------------------------------------------------------------------

def test_window_excludes_articles_at_or_before_cutoff() -> None:
    articles = [
        _article("a", age_hours=47.9),
        _article("b", age_hours=48),  # exactly on the cutoff → excluded
        _article("c", age_hours=72),
    ]
    kept = filter_window(articles, hours_lookback=48, now=_NOW)
    assert [a.link for a in kept] == ["a"]


def test_window_keeps_articles_defaulted_to_fetch_time() -> None:
    """An undated item is stamped with fetch time and is always fresh."""
    undated = Article(title="Untitled", link="x", published_at=_NOW, content="")
    assert filter_window([undated], hours_lookback=1, now=_NOW) == [undated]


# ---------------------------------------------------------------------------
# Dedup
# ---------------------------------------------------------------------------

def test_dedup_keeps_first_occurrence_in_feed_order() -> None:
    first = _article("https://example.com/story", feed_url="feed-1")
    other = _article("https://example.com/other", feed_url="feed-1")
    duplicate = _article("https://example.com/story", feed_url="feed-2")

    kept = dedupe_by_link([first, other, duplicate])

    assert kept == [first, other]
    assert kept[0].feed_url == "feed-1"


def test_dedup_empty_links_collide() -> None:
    kept = dedupe_by_link([_article(""), _article(""), _article("a")])
    assert [a.link for a in kept] == ["", "a"]


def test_dedup_drops_links_seen_in_previous_runs() -> None:
    kept = dedupe_by_link([_article("old"), _article("new")], already_seen={"old"})
    assert [a.link for a in kept] == ["new"]


def test_window_and_dedup_windows_before_deduplicating() -> None:
    """A stale first copy must not shadow a fresh later copy of the same link."""
    stale = _article("same", age_hours=100, feed_url="feed-1")
    fresh = _article("same", age_hours=2, feed_url="feed-2")

    kept = window_and_dedup([stale, fresh], hours_lookback=48, now=_NOW)

    assert kept == [fresh]


# ---------------------------------------------------------------------------
# Keywords
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("title,content", [
    ("EU AI ACT deadline announced", ""),
    ("Weekly roundup", "New guidance on the ai act for SMEs"),
    ("Compliance", "nothing else"),
])
def test_matches_keywords_is_case_insensitive_substring(title: str, content: str) -> None:
    article = _article("x", title=title, content=content)
    assert matches_keywords(article, ["AI Act", "complian"]) is True


def test_matches_keywords_false_when_nothing_matches() -> None:
    article = _article("x", title="Football results", content="Ajax won again")
    assert matches_keywords(article, ["ai act", "iso 42001"]) is False


def test_keyword_filter_drops_only_non_matching() -> None:
    relevant = _article("a", title="ISO 42001 certification guide")
    irrelevant = _article("b", title="Celebrity gossip")

    assert keyword_filter([relevant, irrelevant], ["iso 42001"]) == [relevant]


def test_keyword_filter_disabled_without_keywords() -> None:
    articles = [_article("a"), _article("b")]
    assert keyword_filter(articles, []) == articles
