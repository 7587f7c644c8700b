"""Query-time display rule for the submitter's pending queue.

Approved rows drop out of the queue once they have been approved (last
touched) longer ago than the visibility window. Aggregation never uses this.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from ..core.constants import DEFAULT_APPROVED_VISIBILITY_HOURS
from ..core.enums import RecordStatus
from .model import HourBearingRecord


def approved_visibility_cutoff(now: datetime, window_hours: float = DEFAULT_APPROVED_VISIBILITY_HOURS) -> datetime:
    return now - timedelta(hours=window_hours)


def is_visible_in_pending_queue(
    record: HourBearingRecord,
    *,
    now: datetime,
    window_hours: float = DEFAULT_APPROVED_VISIBILITY_HOURS,
) -> bool:
    if record.deleted:
        return False
    if record.status != RecordStatus.APPROVED:
        return True
    if record.updated_at is None:
        return False
    return record.updated_at >= approved_visibility_cutoff(now, window_hours)


def filter_pending_queue(
    records: Iterable[HourBearingRecord],
    *,
    now: datetime,
    window_hours: float = DEFAULT_APPROVED_VISIBILITY_HOURS,
) -> list[HourBearingRecord]:
    return [r for r in records if is_visible_in_pending_queue(r, now=now, window_hours=window_hours)]
