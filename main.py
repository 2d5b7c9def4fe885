"""CLI entrypoint and run-now operation for the daily brief pipeline."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from dotenv import load_dotenv

import seen_store
from analyzer import Judge, judge_batches
from config import ConfigError, PipelineConfig, load_config
from digest import build_subject, render_digest
from filters import keyword_filter, window_and_dedup
from mailer import send_email
from models import RunSummary
from profiles import PROFILES
from ranking import rank_articles
from rss_feed import fetch_all_feeds

Sender = Callable[[str, str, str, str], object]

LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Collect feeds, judge relevance, and mail the daily brief")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch, judge and render the digest without sending email",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Also write the rendered HTML digest to this file",
    )
    parser.add_argument(
        "--profile",
        choices=sorted(PROFILES),
        default=None,
        help="Digest profile to run (defaults to DIGEST_PROFILE or the built-in profile)",
    )
    return parser.parse_args(argv)


def default_judge(provider: str) -> Judge:
    """Return the judge transport for the configured provider."""
    if provider == "openai":
        from llm_client import judge  # noqa: PLC0415 — lazy import
    else:
        from anthropic_client import judge  # noqa: PLC0415 — lazy import
    return judge


def run_digest(
    config: PipelineConfig,
    *,
    judge: Judge | None = None,
    send: Sender | None = None,
    dry_run: bool = False,
    now: datetime | None = None,
    sleep: Callable[[float], None] = time.sleep,
    output: Path | None = None,
) -> RunSummary:
    """Run one full pipeline cycle and report what happened.

    Never raises: per-feed and per-batch failures are absorbed by their
    stages, and anything else becomes a "failed" summary.
    """
    started = now or datetime.now(UTC)
    fetched = filtered = feeds_failed = 0

    try:
        LOGGER.info("Starting daily brief: profile=%s feeds=%s", config.profile.name, len(config.feeds))
        articles, feeds_failed = fetch_all_feeds(
            config.feeds, max_items=config.max_articles_per_feed, now=started
        )
        fetched = len(articles)

        already_seen: set[str] = set()
        if config.seen_links_path:
            already_seen = seen_store.load_seen_links(config.seen_links_path)

        candidates = window_and_dedup(
            articles, config.hours_lookback, now=started, already_seen=already_seen
        )
        candidates = keyword_filter(candidates, config.keywords)
        filtered = len(candidates)

        if not candidates:
            message = (
                f"No articles found: {fetched} fetched, none survived the "
                f"{config.hours_lookback}h window, dedup and keyword filters"
            )
            LOGGER.warning("%s", message)
            return RunSummary(
                status="no_articles",
                fetched=fetched,
                feeds_failed=feeds_failed,
                message=message,
            )

        analyzed, judged = judge_batches(
            candidates,
            config.profile,
            config.min_relevance_score,
            judge or default_judge(config.judge_provider),
            batch_size=config.batch_size,
            delay_seconds=config.batch_delay_seconds,
            sleep=sleep,
        )
        selected = rank_articles(analyzed, config.max_articles_in_brief)
        LOGGER.info("%s articles selected", len(selected))

        if not selected:
            LOGGER.warning("No relevant articles found by the judge")
            if config.seen_links_path and not dry_run and judged:
                seen_store.record_links(config.seen_links_path, (a.link for a in judged), now=started)
            return RunSummary(
                status="no_relevant_articles",
                fetched=fetched,
                filtered=filtered,
                feeds_failed=feeds_failed,
                message=(
                    f"No relevant articles: none of {filtered} candidates scored "
                    f"at least {config.min_relevance_score}"
                ),
            )

        today = started.date()
        html = render_digest(selected, config.profile, sources_monitored=len(config.feeds), today=today)
        subject = build_subject(config.profile, len(selected), today=today)
        if output is not None:
            output.write_text(html, encoding="utf-8")
            LOGGER.info("Wrote digest HTML to %s", output)

        if dry_run:
            LOGGER.info("[dry-run] Would send %r to %s", subject, config.recipient_email or "<unset>")
            return RunSummary(
                status="dry_run",
                fetched=fetched,
                filtered=filtered,
                selected=len(selected),
                feeds_failed=feeds_failed,
                message=subject,
            )

        (send or send_email)(config.sender, config.recipient_email, subject, html)
        if config.seen_links_path:
            seen_store.record_links(config.seen_links_path, (a.link for a in judged), now=started)

        LOGGER.info("Email sent successfully")
        return RunSummary(
            status="sent",
            fetched=fetched,
            filtered=filtered,
            selected=len(selected),
            feeds_failed=feeds_failed,
            message=subject,
        )
    except Exception as exc:  # broad by design: the caller always gets a summary
        LOGGER.exception("Daily brief run failed: %s", exc)
        return RunSummary(
            status="failed",
            fetched=fetched,
            filtered=filtered,
            feeds_failed=feeds_failed,
            message=str(exc),
        )


def main(argv: list[str] | None = None) -> int:
    """Initialize config and execute the pipeline."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    try:
        config = load_config(profile_name=args.profile)
    except ConfigError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return 1

    summary = run_digest(config, dry_run=args.dry_run, output=args.output)
    logging.info(
        "Run complete. status=%s fetched=%s filtered=%s selected=%s feeds_failed=%s",
        summary.status,
        summary.fetched,
        summary.filtered,
        summary.selected,
        summary.feeds_failed,
    )
    return 0 if summary.ok else 1


if __name__ == "__main__":
    sys.exit(main())
