"""Relevance analysis: batch articles through the LLM judge and validate its verdicts."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Sequence
from json import JSONDecodeError
from typing import Any

from models import TAG_VOCABULARY, AnalyzedArticle, Article
from profiles import DigestProfile

BATCH_SIZE = 5
BATCH_DELAY_SECONDS = 1.0
SUMMARY_MAX_WORDS = 18
MAX_CONTENT_CHARS = 3000
MIN_SCORE = 1
MAX_SCORE = 10

LOGGER = logging.getLogger(__name__)

Judge = Callable[[str], str]

_TAGS_BY_KEY: dict[str, str] = {tag.lower(): tag for tag in TAG_VOCABULARY}

_RECORD_SCHEMA = """{
  "score": X,
  "title": "article title",
  "summary": ["bullet 1 (max 18 words)", "bullet 2 (max 18 words)", "bullet 3 (max 18 words)"],
  "whyMatters": "Why this matters for %(audience)s (one sentence)",
  "tags": ["%(tags)s"],
  "url": "article url",
  "opportunity": "Specific opportunity for %(brand)s product or positioning (only if genuinely applicable)"
}"""


class JudgeParseError(RuntimeError):
    """The judge reply contained no usable array of records."""


def build_prompt(batch: Sequence[Article], profile: DigestProfile, min_score: int) -> str:
    """Build the single judge request for one batch of articles."""
    schema = _RECORD_SCHEMA % {
        "audience": profile.audience,
        "tags": " or ".join(TAG_VOCABULARY),
        "brand": profile.brand,
    }
    articles_block = "\n---\n".join(
        f"\nArticle {idx}:\nTitle: {article.title}\nURL: {article.link}\n"
        f"Content: {_clip(article.content)}\n"
        for idx, article in enumerate(batch, start=1)
    )

    return (
        f"{profile.analyst_role}\n\n"
        f"FOCUS ON:\n{_bullets(profile.focus_areas)}\n\n"
        f"PRIORITIZE articles about:\n{_bullets(profile.priority_areas)}\n\n"
        f"IGNORE articles about:\n{_bullets(profile.ignore_areas)}\n\n"
        "For each article:\n"
        f"1. Score relevance (1-10) for {profile.audience}\n"
        f'2. If score < {min_score}, output: {{"score": X, "skip": true}}\n'
        f"3. Otherwise produce JSON:\n{schema}\n\n"
        f"Articles:\n{articles_block}\n\n"
        "Return a JSON array with one result per article, in the same order."
    )


def extract_json_array(content: str) -> list[dict[str, Any]]:
    """Return the first well-formed JSON array of objects found in content.

    The judge is asked for bare JSON but often wraps it in prose or code
    fences, so the whole text is tried first and then every "[" is scanned.
    Arrays of non-objects (citations like "[1]", nested tag lists) are skipped.
    """
    try:
        parsed = json.loads(content)
    except JSONDecodeError:
        parsed = None
    if _is_record_array(parsed):
        return parsed

    decoder = json.JSONDecoder()
    for index, char in enumerate(content):
        if char != "[":
            continue
        try:
            candidate, _ = decoder.raw_decode(content, index)
        except JSONDecodeError:
            continue
        if _is_record_array(candidate):
            return candidate
    raise JudgeParseError("Could not extract a JSON array of records from judge output")


def parse_judge_response(
    content: str,
    batch: Sequence[Article],
    min_score: int,
) -> list[AnalyzedArticle]:
    """Parse and strictly validate one judge reply.

    Records marked skip, scoring below min_score (whatever the judge claims),
    or missing required fields are dropped; nothing partial is kept.

    Raises:
        JudgeParseError: if the reply holds no array of records at all.
    """
    records = extract_json_array(content)
    positional = len(records) == len(batch)
    links = {article.link: article for article in batch if article.link}

    analyzed: list[AnalyzedArticle] = []
    for index, raw in enumerate(records):
        source = links.get(_as_text(raw.get("url")))
        if source is None and positional:
            source = batch[index]
        article = _to_analyzed(raw, source, min_score)
        if article is not None:
            analyzed.append(article)
    return analyzed


def analyze_articles(
    articles: Sequence[Article],
    profile: DigestProfile,
    min_score: int,
    judge: Judge,
    batch_size: int = BATCH_SIZE,
    delay_seconds: float = BATCH_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> list[AnalyzedArticle]:
    """Run every batch through the judge and return only the relevant articles."""
    analyzed, _ = judge_batches(
        articles,
        profile,
        min_score,
        judge,
        batch_size=batch_size,
        delay_seconds=delay_seconds,
        sleep=sleep,
    )
    return analyzed


def judge_batches(
    articles: Sequence[Article],
    profile: DigestProfile,
    min_score: int,
    judge: Judge,
    batch_size: int = BATCH_SIZE,
    delay_seconds: float = BATCH_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> tuple[list[AnalyzedArticle], list[Article]]:
    """Run every batch through the judge, one at a time.

    A batch whose judge call or parse fails contributes nothing; the run
    continues with the next batch. The delay is skipped after the last batch.

    Returns:
        (relevant articles, every input article whose batch got a usable verdict)
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    batches = [articles[i : i + batch_size] for i in range(0, len(articles), batch_size)]
    analyzed: list[AnalyzedArticle] = []
    judged: list[Article] = []
    failed = 0

    for number, batch in enumerate(batches, start=1):
        prompt = build_prompt(batch, profile, min_score)
        try:
            reply = judge(prompt)
            relevant = parse_judge_response(reply, batch, min_score)
        except JudgeParseError as exc:
            failed += 1
            LOGGER.warning("Batch %s/%s: unparseable judge reply: %s", number, len(batches), exc)
        except Exception as exc:  # broad by design: one bad batch must not end the run
            failed += 1
            LOGGER.warning("Batch %s/%s: judge call failed: %s", number, len(batches), exc)
        else:
            analyzed.extend(relevant)
            judged.extend(batch)
            LOGGER.info(
                "Batch %s/%s: %s/%s passed", number, len(batches), len(relevant), len(batch)
            )

        if number < len(batches):
            sleep(delay_seconds)

    LOGGER.info(
        "Analysis complete: articles=%s batches=%s failed_batches=%s relevant=%s",
        len(articles),
        len(batches),
        failed,
        len(analyzed),
    )
    return analyzed, judged


def _to_analyzed(
    raw: dict[str, Any],
    source: Article | None,
    min_score: int,
) -> AnalyzedArticle | None:
    if _is_skip(raw.get("skip")):
        return None
    score = _coerce_score(raw.get("score"))
    if score is None:
        LOGGER.warning("Dropping judge record with invalid score: %r", raw.get("score"))
        return None
    if score < min_score:
        return None

    title = _as_text(raw.get("title")) or (source.title if source else None)
    summary = _clean_bullets(raw.get("summary"))
    why_matters = _as_text(raw.get("whyMatters")) or _as_text(raw.get("why_matters"))
    if not title or not summary or not why_matters:
        LOGGER.warning("Dropping incomplete judge record: title=%r", title)
        return None

    return AnalyzedArticle(
        score=score,
        title=title,
        summary=summary,
        why_matters=why_matters,
        tags=_clean_tags(raw.get("tags")),
        url=source.link if source else (_as_text(raw.get("url")) or ""),
        opportunity=_as_text(raw.get("opportunity")),
    )


def _coerce_score(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if not isinstance(value, int) or not MIN_SCORE <= value <= MAX_SCORE:
        return None
    return value


def _is_skip(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def _clean_bullets(value: Any) -> tuple[str, ...]:
    items = [value] if isinstance(value, str) else value
    if not isinstance(items, list):
        return ()
    bullets: list[str] = []
    for item in items:
        text = _as_text(item)
        if text:
            bullets.append(" ".join(text.split()[:SUMMARY_MAX_WORDS]))
    return tuple(bullets)


def _clean_tags(value: Any) -> tuple[str, ...]:
    """Map judge labels onto the fixed vocabulary; unknown labels are dropped."""
    if isinstance(value, str):
        value = value.replace(" or ", ",").split(",")
    if not isinstance(value, list):
        return ()
    tags: list[str] = []
    for item in value:
        tag = _TAGS_BY_KEY.get((_as_text(item) or "").lower())
        if tag and tag not in tags:
            tags.append(tag)
    return tuple(tags)


def _is_record_array(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, dict) for item in value)


def _bullets(lines: Sequence[str]) -> str:
    return "\n".join(f"- {line}" for line in lines)


def _clip(text: str, max_len: int = MAX_CONTENT_CHARS) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 1] + "…"


def _as_text(value: Any) -> str | None:
    return value.strip() if isinstance(value, str) and value.strip() else None
