from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import RecordKind
from .model import HourBearingRecord, LeaveHours, LeaveRequest, TrainingRecord, WorkEntry


@dataclass(frozen=True)
class RecordKindPolicy:
    """What differs between record kinds; the lifecycle itself does not."""

    kind: RecordKind
    record_type: type[HourBearingRecord]
    table: str
    date_column: str
    label: str
    # approved rows of this kind are archived instead of refused on delete
    soft_delete_when_approved: bool
    completable: bool = False
    tracks_weekly_summary: bool = False


WORK_ENTRY_POLICY = RecordKindPolicy(
    kind=RecordKind.WORK_ENTRY,
    record_type=WorkEntry,
    table="work_entries",
    date_column="work_date",
    label="Timesheet entry",
    soft_delete_when_approved=False,
    tracks_weekly_summary=True,
)

LEAVE_REQUEST_POLICY = RecordKindPolicy(
    kind=RecordKind.LEAVE_REQUEST,
    record_type=LeaveRequest,
    table="leave_requests",
    date_column="start_date",
    label="Leave request",
    soft_delete_when_approved=False,
)

LEAVE_HOURS_POLICY = RecordKindPolicy(
    kind=RecordKind.LEAVE_HOURS,
    record_type=LeaveHours,
    table="leave_hours",
    date_column="work_date",
    label="Leave hours",
    soft_delete_when_approved=True,
)

TRAINING_POLICY = RecordKindPolicy(
    kind=RecordKind.TRAINING,
    record_type=TrainingRecord,
    table="training_records",
    date_column="work_date",
    label="Training record",
    soft_delete_when_approved=True,
    completable=True,
)

POLICIES: dict[RecordKind, RecordKindPolicy] = {
    p.kind: p for p in (WORK_ENTRY_POLICY, LEAVE_REQUEST_POLICY, LEAVE_HOURS_POLICY, TRAINING_POLICY)
}


def policy_for(kind: RecordKind | str) -> RecordKindPolicy:
    return POLICIES[RecordKind(kind)]
