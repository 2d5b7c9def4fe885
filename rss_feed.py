"""RSS/Atom feed ingestion and normalization into Article records."""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

import feedparser
import requests

from models import Article

REQUEST_TIMEOUT_SECONDS = 20
USER_AGENT = "daily-brief/1.0 (RSS reader)"
UNTITLED = "Untitled"

LOGGER = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


class FeedUnavailable(RuntimeError):
    """A single feed could not be fetched or parsed."""

    def __init__(self, feed_url: str, reason: str) -> None:
        super().__init__(f"Feed unavailable: {feed_url}: {reason}")
        self.feed_url = feed_url
        self.reason = reason


def fetch_feed(feed_url: str, max_items: int, now: datetime | None = None) -> list[Article]:
    """Fetch one feed and normalize at most max_items of its entries.

    Entries are taken in document order; feeds are assumed to be roughly
    newest-first, so this is a truncation, not a relevance cut.

    Raises:
        FeedUnavailable: on transport errors, timeouts, HTTP errors, or a
            document feedparser cannot make any entries out of.
    """
    fetched_at = now or datetime.now(UTC)

    try:
        response = requests.get(
            feed_url,
            timeout=REQUEST_TIMEOUT_SECONDS,
            headers={"User-Agent": USER_AGENT},
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        raise FeedUnavailable(feed_url, str(exc)) from exc

    parsed = feedparser.parse(response.content)
    entries = list(parsed.get("entries") or [])
    if parsed.get("bozo") and not entries:
        raise FeedUnavailable(feed_url, f"unparseable document: {parsed.get('bozo_exception')}")

    return [normalize_entry(entry, feed_url, fetched_at) for entry in entries[:max_items]]


def fetch_all_feeds(
    feed_urls: Iterable[str],
    max_items: int,
    now: datetime | None = None,
) -> tuple[list[Article], int]:
    """Fetch every feed in order, isolating failures per feed.

    Returns:
        (articles in feed order, number of feeds that failed)
    """
    urls = list(feed_urls)
    articles: list[Article] = []
    failed = 0

    for index, feed_url in enumerate(urls, start=1):
        try:
            items = fetch_feed(feed_url, max_items=max_items, now=now)
        except FeedUnavailable as exc:
            failed += 1
            LOGGER.warning("Feed %s/%s failed, skipping: %s", index, len(urls), exc)
            continue

        articles.extend(items)
        if items:
            LOGGER.info("Feed %s/%s: %s articles", index, len(urls), len(items))

    LOGGER.info(
        "Feed fetch: feeds=%s failed=%s articles=%s", len(urls), failed, len(articles)
    )
    return articles, failed


def normalize_entry(entry: Any, feed_url: str, fetched_at: datetime) -> Article:
    """Turn one feedparser entry into an Article, filling in missing fields."""
    return Article(
        title=_as_text(entry.get("title")) or UNTITLED,
        link=_as_str(entry.get("link")) or "",
        published_at=_entry_datetime(entry) or fetched_at,
        content=_entry_content(entry),
        feed_url=feed_url,
    )


def _entry_datetime(entry: Any) -> datetime | None:
    # feedparser normalizes parseable dates to UTC struct_time.
    for key in ("published_parsed", "updated_parsed"):
        value = entry.get(key)
        if value:
            try:
                return datetime(*value[:6], tzinfo=UTC)
            except (TypeError, ValueError):
                continue
    return None


def _entry_content(entry: Any) -> str:
    blocks = entry.get("content")
    if isinstance(blocks, list):
        for block in blocks:
            text = _as_text(block.get("value") if hasattr(block, "get") else None)
            if text:
                return text

    for key in ("summary", "description"):
        text = _as_text(entry.get(key))
        if text:
            return text
    return ""


def _as_text(value: Any) -> str | None:
    """Strip markup and collapse whitespace; None for empty results."""
    raw = _as_str(value)
    if raw is None:
        return None
    text = _WS_RE.sub(" ", html.unescape(_TAG_RE.sub(" ", raw))).strip()
    return text or None


def _as_str(value: Any) -> str | None:
    return value.strip() if isinstance(value, str) and value.strip() else None
