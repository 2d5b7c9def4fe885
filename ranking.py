"""Aggregate analyzed articles into the final ranked selection."""

from __future__ import annotations

from collections.abc import Iterable

from models import AnalyzedArticle


def rank_articles(analyzed: Iterable[AnalyzedArticle], max_items: int) -> list[AnalyzedArticle]:
    """Sort by score descending and keep the top max_items.

    sorted() is stable, so equal scores keep the order the batches emitted them in.
    """
    ranked = sorted(analyzed, key=lambda article: article.score, reverse=True)
    return ranked[: max(max_items, 0)]
