"""CSV-backed store of links already judged in earlier delivered runs."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

LOGGER = logging.getLogger(__name__)

SEEN_COLUMNS = ["link", "first_seen_at"]


def load_seen_links(path: str | Path) -> set[str]:
    """Return every link recorded in the store; empty set if the file is missing."""
    store = Path(path)
    if not store.exists() or store.stat().st_size == 0:
        return set()

    with store.open(newline="", encoding="utf-8") as fh:
        links = {row["link"] for row in csv.DictReader(fh) if row.get("link")}

    LOGGER.info("Seen store: loaded %s links from %s", len(links), store)
    return links


def record_links(path: str | Path, links: Iterable[str], now: datetime | None = None) -> int:
    """Append links not yet in the store. Returns how many were written."""
    store = Path(path)
    existing = load_seen_links(store)
    stamp = (now or datetime.now(UTC)).isoformat()

    new_links: list[str] = []
    for link in links:
        if link and link not in existing:
            existing.add(link)
            new_links.append(link)

    if not new_links:
        return 0

    write_header = not store.exists() or store.stat().st_size == 0
    store.parent.mkdir(parents=True, exist_ok=True)
    with store.open("a", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=SEEN_COLUMNS)
        if write_header:
            writer.writeheader()
        writer.writerows({"link": link, "first_seen_at": stamp} for link in new_links)

    LOGGER.info("Seen store: recorded %s new links in %s", len(new_links), store)
    return len(new_links)
