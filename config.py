"""Process-wide pipeline configuration, read once from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from profiles import DEFAULT_PROFILE, DigestProfile, get_profile

JUDGE_PROVIDERS: frozenset[str] = frozenset({"anthropic", "openai"})

_DEFAULT_MAX_ARTICLES_PER_FEED = 3
_DEFAULT_HOURS_LOOKBACK = 48
_DEFAULT_MIN_RELEVANCE_SCORE = 5
_DEFAULT_MAX_ARTICLES_IN_BRIEF = 15
_DEFAULT_BATCH_SIZE = 5
_DEFAULT_BATCH_DELAY_SECONDS = 1.0
_DEFAULT_SENDER = "AI Analyst <onboarding@resend.dev>"

_TRUE_VALUES: frozenset[str] = frozenset({"1", "true", "yes", "on"})


class ConfigError(ValueError):
    """Raised when an environment setting cannot be turned into a valid config."""


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Immutable settings for one pipeline run."""

    profile: DigestProfile
    feeds: tuple[str, ...]
    keywords: tuple[str, ...] = ()
    max_articles_per_feed: int = _DEFAULT_MAX_ARTICLES_PER_FEED
    hours_lookback: int = _DEFAULT_HOURS_LOOKBACK
    min_relevance_score: int = _DEFAULT_MIN_RELEVANCE_SCORE
    max_articles_in_brief: int = _DEFAULT_MAX_ARTICLES_IN_BRIEF
    batch_size: int = _DEFAULT_BATCH_SIZE
    batch_delay_seconds: float = _DEFAULT_BATCH_DELAY_SECONDS
    recipient_email: str = ""
    sender: str = _DEFAULT_SENDER
    judge_provider: str = "anthropic"
    seen_links_path: str | None = None

    @property
    def keyword_filter_enabled(self) -> bool:
        return bool(self.keywords)


def load_config(
    environ: Mapping[str, str] | None = None,
    profile_name: str | None = None,
) -> PipelineConfig:
    """Build a PipelineConfig from environment variables.

    Args:
        environ: Mapping to read from; defaults to os.environ.
        profile_name: Overrides DIGEST_PROFILE when given (e.g. from the CLI).
    """
    env = os.environ if environ is None else environ

    name = profile_name or env.get("DIGEST_PROFILE") or DEFAULT_PROFILE
    try:
        profile = get_profile(name)
    except KeyError as exc:
        raise ConfigError(str(exc.args[0])) from exc

    feeds = _split_list(env.get("DIGEST_FEEDS")) or profile.feeds

    keywords: tuple[str, ...] = ()
    if env.get("KEYWORD_FILTER_ENABLED", "").strip().lower() in _TRUE_VALUES:
        keywords = _split_list(env.get("DIGEST_KEYWORDS")) or profile.keywords

    judge_provider = env.get("JUDGE_PROVIDER", "anthropic").strip().lower()
    if judge_provider not in JUDGE_PROVIDERS:
        raise ConfigError(
            f"JUDGE_PROVIDER must be one of {sorted(JUDGE_PROVIDERS)}, got {judge_provider!r}"
        )

    min_score = _int_setting(env, "MIN_RELEVANCE_SCORE", _DEFAULT_MIN_RELEVANCE_SCORE)
    if not 1 <= min_score <= 10:
        raise ConfigError(f"MIN_RELEVANCE_SCORE must be between 1 and 10, got {min_score}")

    delay_raw = env.get("BATCH_DELAY_SECONDS")
    try:
        batch_delay = float(delay_raw) if delay_raw else _DEFAULT_BATCH_DELAY_SECONDS
    except ValueError as exc:
        raise ConfigError(f"BATCH_DELAY_SECONDS must be a number, got {delay_raw!r}") from exc
    if batch_delay < 0:
        raise ConfigError("BATCH_DELAY_SECONDS must not be negative")

    return PipelineConfig(
        profile=profile,
        feeds=feeds,
        keywords=keywords,
        max_articles_per_feed=_positive_int(env, "MAX_ARTICLES_PER_FEED", _DEFAULT_MAX_ARTICLES_PER_FEED),
        hours_lookback=_positive_int(env, "HOURS_LOOKBACK", _DEFAULT_HOURS_LOOKBACK),
        min_relevance_score=min_score,
        max_articles_in_brief=_positive_int(env, "MAX_ARTICLES_IN_BRIEF", _DEFAULT_MAX_ARTICLES_IN_BRIEF),
        batch_size=_positive_int(env, "BATCH_SIZE", _DEFAULT_BATCH_SIZE),
        batch_delay_seconds=batch_delay,
        recipient_email=env.get("RECIPIENT_EMAIL", "").strip(),
        sender=env.get("DIGEST_SENDER", "").strip() or _DEFAULT_SENDER,
        judge_provider=judge_provider,
        seen_links_path=env.get("SEEN_LINKS_PATH", "").strip() or None,
    )


def _split_list(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _int_setting(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc


def _positive_int(env: Mapping[str, str], key: str, default: int) -> int:
    value = _int_setting(env, key, default)
    if value < 1:
        raise ConfigError(f"{key} must be at least 1, got {value}")
    return value
