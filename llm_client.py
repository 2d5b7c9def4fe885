"""OpenAI GPT-based judge transport, the alternative to Claude."""

from __future__ import annotations

import logging
import os

from openai import OpenAI

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-5.2")
OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0.1"))
JUDGE_MAX_COMPLETION_TOKENS = 4000

LOGGER = logging.getLogger(__name__)


def judge(prompt: str) -> str:
    """Send one judge prompt to OpenAI and return the raw reply text.

    No JSON response_format is requested: the judge answers with an array,
    and the analyzer extracts it from whatever text comes back.
    """
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise RuntimeError("OPENAI_API_KEY environment variable is required")

    client = OpenAI(api_key=api_key)
    LOGGER.debug("Calling OpenAI model=%s", OPENAI_MODEL)

    response = client.chat.completions.create(
        model=OPENAI_MODEL,
        temperature=OPENAI_TEMPERATURE,
        max_completion_tokens=JUDGE_MAX_COMPLETION_TOKENS,
        messages=[{"role": "user", "content": prompt}],
    )

    content = response.choices[0].message.content
    if not content:
        raise RuntimeError("OpenAI returned an empty response")
    return content
