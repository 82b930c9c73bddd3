"""Identity and freshness stamping for discovered records."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import UTC, datetime

from models import Record

LOGGER = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def derive_id(natural_key: str) -> str:
    """Map a natural key to a slug: lowercase alphanumerics joined by single hyphens.

    >>> derive_id("Schunk SVH 5-Finger Hand")
    'schunk-svh-5-finger-hand'
    """
    return _NON_ALNUM.sub("-", natural_key.lower()).strip("-")


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


def normalize(partial: Record, key_field: str, now: str | None = None) -> Record | None:
    """Return a copy of ``partial`` with ``id`` and ``lastUpdated`` set, or None to reject.

    Only the key field is checked; every other attribute passes through as-is.
    """
    key = partial.get(key_field)
    if not isinstance(key, str) or not key.strip():
        LOGGER.debug("Dropping record without usable %s: %s", key_field, partial)
        return None

    record_id = derive_id(key)
    if not record_id:
        LOGGER.debug("Dropping record whose %s has no alphanumerics: %r", key_field, key)
        return None

    record = dict(partial)
    record["id"] = record_id
    record["lastUpdated"] = now or utc_now_iso()
    return record


def normalize_batch(partials: Iterable[Record], key_field: str, now: str | None = None) -> list[Record]:
    stamp = now or utc_now_iso()
    normalized = [normalize(p, key_field, now=stamp) for p in partials]
    return [record for record in normalized if record is not None]
