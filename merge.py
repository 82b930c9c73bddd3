"""Last-discovery-wins merge of a discovery batch into a persisted collection.

Field precedence for a matched record, lowest to highest:

1. fields of the existing record,
2. fields present on the incoming record (a present key always wins, even when
   its value is ``None``; nested dicts/lists are replaced wholesale),
3. ``lastUpdated``, which is always set to the merge time.

Fields the incoming record omits keep their existing values.
"""

from __future__ import annotations

from collections.abc import Iterable

from dedup import identity_key
from models import Record
from normalizer import utc_now_iso


def overlay(existing: Record, incoming: Record, now: str) -> Record:
    """Shallow field overlay of ``incoming`` onto ``existing``."""
    merged = dict(existing)
    merged.update(incoming)
    merged["lastUpdated"] = now
    return merged


def merge_records(
    existing: Iterable[Record],
    incoming: Iterable[Record],
    key_field: str,
    now: str | None = None,
    sort_by_recency: bool = True,
) -> list[Record]:
    """Combine ``incoming`` into ``existing`` keyed case-insensitively on ``key_field``.

    Inputs are not mutated. Existing records without a usable key are kept but
    never matched; incoming records without one are skipped.
    """
    stamp = now or utc_now_iso()
    merged: list[Record] = [dict(record) for record in existing]
    index: dict[str, int] = {}
    for position, record in enumerate(merged):
        key = identity_key(record.get(key_field))
        if key is not None and key not in index:
            index[key] = position

    for record in incoming:
        key = identity_key(record.get(key_field))
        if key is None:
            continue
        position = index.get(key)
        if position is None:
            index[key] = len(merged)
            merged.append(overlay({}, record, stamp))
        else:
            merged[position] = overlay(merged[position], record, stamp)

    if sort_by_recency:
        merged.sort(key=lambda r: str(r.get("lastUpdated") or ""), reverse=True)
    return merged
