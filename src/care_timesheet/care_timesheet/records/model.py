from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import ClassVar, Optional

from ..core.enums import LeaveHoursType, LeaveType, RecordKind, RecordStatus, TrainingType


@dataclass(frozen=True, kw_only=True)
class HourBearingRecord:
    """Domain entity shared by every record that contributes hours to payroll.

    Lifecycle columns live here; each subclass adds its own payload and says
    how its duration is measured.
    """

    kind: ClassVar[RecordKind]
    minute_based: ClassVar[bool] = True

    record_id: Optional[int] = None
    user_id: str
    user_name: str
    status: RecordStatus = RecordStatus.PENDING
    is_draft: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    deleted: bool = False
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None
    deletion_reason: Optional[str] = None

    @property
    def record_date(self) -> date:
        raise NotImplementedError

    def duration_minutes(self) -> int:
        raise NotImplementedError

    def to_dict(self) -> dict:
        out: dict = {}
        for name, value in vars(self).items():
            if isinstance(value, (RecordStatus, LeaveType, LeaveHoursType, TrainingType)):
                value = value.value
            elif isinstance(value, time):
                value = value.strftime("%H:%M")
            elif isinstance(value, (date, datetime)):
                value = value.isoformat()
            out[name] = value
        out["kind"] = self.kind.value
        out["minutes"] = self.duration_minutes()
        return out


@dataclass(frozen=True, kw_only=True)
class WorkEntry(HourBearingRecord):
    kind: ClassVar[RecordKind] = RecordKind.WORK_ENTRY

    work_date: date
    start_time: time
    end_time: time

    @property
    def record_date(self) -> date:
        return self.work_date

    def duration_minutes(self) -> int:
        start = self.start_time.hour * 60 + self.start_time.minute
        end = self.end_time.hour * 60 + self.end_time.minute
        if end < start:
            # shift crosses midnight
            end += 24 * 60
        return end - start


@dataclass(frozen=True, kw_only=True)
class LeaveRequest(HourBearingRecord):
    """Day-based leave; tracked in days, never in minutes."""

    kind: ClassVar[RecordKind] = RecordKind.LEAVE_REQUEST
    minute_based: ClassVar[bool] = False

    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: float
    reason: str = ""

    @property
    def record_date(self) -> date:
        return self.start_date

    def duration_minutes(self) -> int:
        return 0


@dataclass(frozen=True, kw_only=True)
class LeaveHours(HourBearingRecord):
    kind: ClassVar[RecordKind] = RecordKind.LEAVE_HOURS

    leave_type: LeaveHoursType
    work_date: date
    hours: float
    reason: str = ""

    @property
    def record_date(self) -> date:
        return self.work_date

    def duration_minutes(self) -> int:
        return int(round(float(self.hours) * 60))


@dataclass(frozen=True, kw_only=True)
class TrainingRecord(HourBearingRecord):
    kind: ClassVar[RecordKind] = RecordKind.TRAINING

    training_type: TrainingType
    title: str
    work_date: date
    hours: float
    description: str = ""
    provider: str = ""
    location: str = ""
    completed_at: Optional[datetime] = None

    @property
    def record_date(self) -> date:
        return self.work_date

    def duration_minutes(self) -> int:
        return int(round(float(self.hours) * 60))
