"""Shared typed models for the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

TAG_VOCABULARY: tuple[str, ...] = ("Regulatory", "Market", "Jobs", "Technology", "Risk")


@dataclass(frozen=True, slots=True)
class Article:
    """Normalized feed item used across ingestion and filtering."""

    title: str
    link: str
    published_at: datetime
    content: str
    feed_url: str = ""


@dataclass(frozen=True, slots=True)
class AnalyzedArticle:
    """Judged article that cleared the relevance threshold."""

    score: int
    title: str
    summary: tuple[str, ...]
    why_matters: str
    tags: tuple[str, ...]
    url: str
    opportunity: str | None = None


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Outcome of one pipeline run, returned to whoever triggered it."""

    status: str
    fetched: int = 0
    filtered: int = 0
    selected: int = 0
    feeds_failed: int = 0
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status != "failed"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
