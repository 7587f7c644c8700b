"""Aggregator: sums record minutes into weekly buckets.

Feeds the dashboard totals and the estimated pay. Buckets partition the
total: a record lands in at most one interval, and only records that land in
an interval count towards ``total_minutes``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ..core.enums import RecordStatus
from ..cycles.model import Week
from ..records.model import HourBearingRecord, LeaveRequest


@dataclass(frozen=True)
class Aggregate:
    per_week_minutes: dict[str, int] = field(default_factory=dict)
    total_minutes: int = 0

    @property
    def whole_hours(self) -> int:
        return self.total_minutes // 60

    @property
    def remaining_minutes(self) -> int:
        return self.total_minutes % 60


def record_minutes(record: HourBearingRecord) -> int:
    return record.duration_minutes() if record.minute_based else 0


def is_countable(record: HourBearingRecord, *, approved_only: bool = False, include_deleted: bool = False) -> bool:
    if record.is_draft or record.status == RecordStatus.DRAFT:
        return False
    if record.deleted and not include_deleted:
        return False
    if approved_only and record.status not in (RecordStatus.APPROVED, RecordStatus.COMPLETED):
        return False
    return True


def aggregate(
    records: Iterable[HourBearingRecord],
    weeks: Sequence[Week],
    *,
    approved_only: bool = False,
    include_deleted: bool = False,
) -> Aggregate:
    """Bucket minute-based records by week.

    ``approved_only`` is for leave/training payroll totals; work entries are
    summed regardless of approval. ``include_deleted`` keeps archived approved
    rows for historical recalculation.
    """

    buckets = {w.key: 0 for w in weeks}
    total = 0
    for record in records:
        if not record.minute_based or not is_countable(
            record, approved_only=approved_only, include_deleted=include_deleted
        ):
            continue
        for week in weeks:
            if week.contains(record.record_date):
                minutes = record_minutes(record)
                buckets[week.key] += minutes
                total += minutes
                break
    return Aggregate(per_week_minutes=buckets, total_minutes=total)


def aggregate_leave_days(
    leave_requests: Iterable[HourBearingRecord],
    weeks: Sequence[Week],
    *,
    include_deleted: bool = False,
) -> float:
    """Whole-day leave is counted in days: approved requests starting inside the weeks."""
    total = 0.0
    for record in leave_requests:
        if not isinstance(record, LeaveRequest):
            continue
        if not is_countable(record, approved_only=True, include_deleted=include_deleted):
            continue
        if any(w.contains(record.start_date) for w in weeks):
            total += float(record.total_days)
    return total


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"


def format_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
