import dataclasses

import pytest

from config import ConfigError, PipelineConfig, load_config
from profiles import AI_GOVERNANCE, get_profile


def test_load_config_defaults() -> None:
    config = load_config({})

    assert config.profile is AI_GOVERNANCE
    assert config.feeds == AI_GOVERNANCE.feeds
    assert config.keywords == ()
    assert config.keyword_filter_enabled is False
    assert config.max_articles_per_feed == 3
    assert config.hours_lookback == 48
    assert config.min_relevance_score == 5
    assert config.max_articles_in_brief == 15
    assert config.batch_size == 5
    assert config.batch_delay_seconds == 1.0
    assert config.judge_provider == "anthropic"
    assert config.seen_links_path is None


def test_load_config_overrides() -> None:
    config = load_config({
        "DIGEST_FEEDS": "https://a.example/rss, https://b.example/rss,",
        "KEYWORD_FILTER_ENABLED": "true",
        "DIGEST_KEYWORDS": "ai act,iso 42001",
        "MAX_ARTICLES_PER_FEED": "10",
        "HOURS_LOOKBACK": "24",
        "MIN_RELEVANCE_SCORE": "7",
        "MAX_ARTICLES_IN_BRIEF": "5",
        "BATCH_DELAY_SECONDS": "0",
        "RECIPIENT_EMAIL": " me@example.com ",
        "JUDGE_PROVIDER": "OpenAI",
        "SEEN_LINKS_PATH": "seen.csv",
    })

    assert config.feeds == ("https://a.example/rss", "https://b.example/rss")
    assert config.keywords == ("ai act", "iso 42001")
    assert config.max_articles_per_feed == 10
    assert config.hours_lookback == 24
    assert config.min_relevance_score == 7
    assert config.max_articles_in_brief == 5
    assert config.batch_delay_seconds == 0.0
    assert config.recipient_email == "me@example.com"
    assert config.judge_provider == "openai"
    assert config.seen_links_path == "seen.csv"


def test_keyword_filter_enabled_falls_back_to_profile_keywords() -> None:
    config = load_config({"KEYWORD_FILTER_ENABLED": "1"})
    assert config.keywords == AI_GOVERNANCE.keywords
    assert config.keyword_filter_enabled is True


@pytest.mark.parametrize("env,message", [
    ({"MIN_RELEVANCE_SCORE": "11"}, "MIN_RELEVANCE_SCORE"),
    ({"MAX_ARTICLES_PER_FEED": "zero"}, "MAX_ARTICLES_PER_FEED"),
    ({"BATCH_SIZE": "0"}, "BATCH_SIZE"),
    ({"BATCH_DELAY_SECONDS": "-1"}, "BATCH_DELAY_SECONDS"),
    ({"JUDGE_PROVIDER": "gemini"}, "JUDGE_PROVIDER"),
    ({"DIGEST_PROFILE": "crypto"}, "crypto"),
])
def test_load_config_rejects_invalid_values(env: dict, message: str) -> None:
    with pytest.raises(ConfigError, match=message):
        load_config(env)


def test_config_is_immutable() -> None:
    config = load_config({})
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.min_relevance_score = 1  # type: ignore[misc]


def test_profile_argument_overrides_environment() -> None:
    config = load_config({"DIGEST_PROFILE": "missing"}, profile_name="ai_governance")
    assert config.profile is get_profile("ai_governance")


def test_pipeline_config_keyword_flag_follows_keywords() -> None:
    config = PipelineConfig(profile=AI_GOVERNANCE, feeds=(), keywords=("ai",))
    assert config.keyword_filter_enabled is True
