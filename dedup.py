"""Batch-local deduplication on the natural key."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from models import Record

LOGGER = logging.getLogger(__name__)


def identity_key(value: Any) -> str | None:
    """Case- and whitespace-insensitive identity for a natural key value."""
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    return key or None


def dedupe(records: Iterable[Record], key_field: str) -> list[Record]:
    """Keep the first record seen for each natural key, in input order."""
    seen: set[str] = set()
    unique: list[Record] = []
    dropped = 0
    for record in records:
        key = identity_key(record.get(key_field))
        if key is None:
            continue
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        unique.append(record)

    if dropped:
        LOGGER.info("Dedup: kept=%s dropped=%s on %s", len(unique), dropped, key_field)
    return unique
