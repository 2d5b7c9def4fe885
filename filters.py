"""Window, dedup and keyword pre-filters (no LLM calls)."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from models import Article

LOGGER = logging.getLogger(__name__)


def filter_window(
    articles: Iterable[Article],
    hours_lookback: int,
    now: datetime | None = None,
) -> list[Article]:
    """Keep articles published strictly after now - hours_lookback."""
    cutoff = (now or datetime.now(UTC)) - timedelta(hours=hours_lookback)
    return [article for article in articles if article.published_at > cutoff]


def dedupe_by_link(
    articles: Iterable[Article],
    already_seen: Iterable[str] = (),
) -> list[Article]:
    """Drop every article whose link appeared earlier in the input.

    First occurrence wins, so the kept copy follows feed-iteration order.
    Links in already_seen (e.g. from previous runs) are dropped as well.
    Empty links collide with each other like any other value.
    """
    seen: set[str] = set(already_seen)
    kept: list[Article] = []
    for article in articles:
        if article.link in seen:
            continue
        seen.add(article.link)
        kept.append(article)
    return kept


def window_and_dedup(
    articles: Iterable[Article],
    hours_lookback: int,
    now: datetime | None = None,
    already_seen: Iterable[str] = (),
) -> list[Article]:
    """Apply the lookback window, then cross-feed link dedup."""
    candidates = list(articles)
    fresh = filter_window(candidates, hours_lookback, now=now)
    unique = dedupe_by_link(fresh, already_seen=already_seen)
    LOGGER.info(
        "Window/dedup: total=%s fresh=%s unique=%s",
        len(candidates),
        len(fresh),
        len(unique),
    )
    return unique


def matches_keywords(article: Article, keywords: Iterable[str]) -> bool:
    """Return True if title or content contains any keyword (case-insensitive).

    Intentionally coarse: a false positive only costs a judge call, a false
    negative loses a story, so plain substring matching is used.
    """
    text = f"{article.title} {article.content or ''}".lower()
    return any(keyword.lower() in text for keyword in keywords if keyword)


def keyword_filter(articles: Iterable[Article], keywords: Iterable[str]) -> list[Article]:
    """Keep articles matching at least one keyword; no keywords disables the stage."""
    candidates = list(articles)
    terms = [keyword for keyword in keywords if keyword]
    if not terms:
        return candidates

    kept = [article for article in candidates if matches_keywords(article, terms)]
    LOGGER.info(
        "Keyword filter: total=%s kept=%s dropped=%s",
        len(candidates),
        len(kept),
        len(candidates) - len(kept),
    )
    return kept
