"""Thin wrapper around the Anthropic Messages API."""

from __future__ import annotations

import logging
import os
from typing import Any

import anthropic

DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-5-20250929"
JUDGE_MAX_TOKENS = 4000

LOGGER = logging.getLogger(__name__)


def claude_chat(messages: list[dict[str, str]], max_tokens: int = 1024) -> str:
    """Call the Claude API and return the assistant reply as a string.

    Args:
        messages: List of message dicts with "role" and "content" keys.
                  A "system" role message is extracted and passed via the
                  Anthropic API's dedicated system= parameter.
        max_tokens: Hard cap on output tokens.
    """
    api_key = os.getenv("ANTHROPIC_API_KEY")
    if not api_key:
        raise RuntimeError("ANTHROPIC_API_KEY environment variable is required")

    claude_model = os.getenv("CLAUDE_MODEL", DEFAULT_CLAUDE_MODEL)
    client = anthropic.Anthropic(api_key=api_key)

    system: str | None = None
    filtered: list[dict[str, Any]] = []
    for msg in messages:
        if msg["role"] == "system":
            system = msg["content"]
        else:
            filtered.append({"role": msg["role"], "content": msg["content"]})

    kwargs: dict[str, Any] = {
        "model": claude_model,
        "max_tokens": max_tokens,
        "messages": filtered,
    }
    if system:
        kwargs["system"] = system

    LOGGER.debug("Calling Claude model=%s max_tokens=%s", claude_model, max_tokens)
    response = client.messages.create(**kwargs)
    return "".join(
        block.text for block in response.content if getattr(block, "type", "text") == "text"
    )


def judge(prompt: str) -> str:
    """Send one judge prompt as a single user turn and return the raw reply."""
    return claude_chat([{"role": "user", "content": prompt}], max_tokens=JUDGE_MAX_TOKENS)
