"""Resend API client for delivering the digest email."""

from __future__ import annotations

import json
import logging
import os
import time
from typing import Any

import requests

RESEND_API_URL = "https://api.resend.com/emails"
REQUEST_TIMEOUT_SECONDS = 30
MAX_RETRIES = 3

LOGGER = logging.getLogger(__name__)


class MailDeliveryError(RuntimeError):
    """The mail API rejected the message or stayed unreachable after retries."""


def send_email(sender: str, recipient: str, subject: str, html: str) -> str | None:
    """Send one HTML email through Resend and return the message id, if any."""
    api_key = os.getenv("RESEND_API_KEY")
    if not api_key:
        raise RuntimeError("RESEND_API_KEY environment variable is required")
    if not recipient:
        raise RuntimeError("RECIPIENT_EMAIL is not configured")

    payload = {
        "from": sender,
        "to": [recipient],
        "subject": subject,
        "html": html,
    }
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    response = _post_with_backoff(headers=headers, json_payload=payload)
    try:
        message_id = response.json().get("id")
    except (ValueError, AttributeError):
        message_id = None

    LOGGER.info("Email sent to %s (id=%s)", recipient, message_id)
    return message_id


def _post_with_backoff(
    *,
    headers: dict[str, str],
    json_payload: dict[str, Any],
) -> requests.Response:
    """POST to Resend with simple exponential backoff for rate limits."""
    delay_seconds = 1.0
    last_error: Exception | None = None

    for attempt in range(1, MAX_RETRIES + 1):
        try:
            response = requests.post(
                RESEND_API_URL,
                headers=headers,
                json=json_payload,
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
            if response.status_code == 429 and attempt < MAX_RETRIES:
                time.sleep(delay_seconds)
                delay_seconds *= 2
                continue
            response.raise_for_status()
            return response
        except requests.HTTPError as exc:
            last_error = exc
            # Client errors other than rate limiting will not succeed on retry.
            if exc.response is not None and 400 <= exc.response.status_code < 500:
                break
            if attempt >= MAX_RETRIES:
                break
            time.sleep(delay_seconds)
            delay_seconds *= 2
        except requests.RequestException as exc:
            last_error = exc
            if attempt >= MAX_RETRIES:
                break
            time.sleep(delay_seconds)
            delay_seconds *= 2

    response_text = ""
    if isinstance(last_error, requests.HTTPError) and last_error.response is not None:
        try:
            response_text = json.dumps(last_error.response.json())
        except ValueError:
            response_text = last_error.response.text

    raise MailDeliveryError(f"Resend API request failed after retries: {last_error} {response_text}")
