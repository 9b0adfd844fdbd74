"""Helpers shared by the record types."""

from __future__ import annotations

from typing import Optional

# Ids of records the caller built but the store has not seen yet.
UNASSIGNED_ID = 0


def is_persisted(record_id: Optional[int]) -> bool:
    """Return True when ``record_id`` is a store-assigned identifier."""

    return record_id is not None and record_id > UNASSIGNED_ID
