from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Mapping

from ..common.datetime_utils import parse_clock_time, require_iso_date
from ..common.validators import require_choice, require_non_empty, require_number_in_range
from ..core.constants import MAX_LEAVE_DAYS, MAX_RECORD_HOURS, MIN_LEAVE_DAYS, MIN_RECORD_HOURS
from ..core.enums import LeaveHoursType, LeaveType, RecordKind, RecordStatus, TrainingType
from ..core.exceptions import ValidationError
from ..users.model import Identity
from .model import HourBearingRecord, LeaveRequest

FieldParser = Callable[[Mapping, bool], dict]


def _wants(payload: Mapping, key: str, partial: bool) -> bool:
    return not partial or key in payload


def _optional_text(payload: Mapping, key: str) -> str:
    return str(payload.get(key) or "").strip()


def parse_is_draft(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _work_entry_fields(payload: Mapping, partial: bool) -> dict:
    out: dict = {}
    if _wants(payload, "date", partial):
        out["work_date"] = require_iso_date(payload.get("date"), "Date")
    if _wants(payload, "start", partial):
        out["start_time"] = parse_clock_time(payload.get("start"), "Start time")
    if _wants(payload, "end", partial):
        out["end_time"] = parse_clock_time(payload.get("end"), "End time")
    return out


def _leave_request_fields(payload: Mapping, partial: bool) -> dict:
    out: dict = {}
    if _wants(payload, "leaveType", partial):
        out["leave_type"] = require_choice(payload.get("leaveType"), LeaveType, "Leave type")
    if _wants(payload, "startDate", partial):
        out["start_date"] = require_iso_date(payload.get("startDate"), "Start date")
    if _wants(payload, "endDate", partial):
        out["end_date"] = require_iso_date(payload.get("endDate"), "End date")
    if _wants(payload, "totalDays", partial):
        out["total_days"] = require_number_in_range(
            payload.get("totalDays"), "Total days", minimum=MIN_LEAVE_DAYS, maximum=MAX_LEAVE_DAYS
        )
    if _wants(payload, "reason", partial):
        out["reason"] = _optional_text(payload, "reason")
    return out


def _leave_hours_fields(payload: Mapping, partial: bool) -> dict:
    out: dict = {}
    if _wants(payload, "leaveType", partial):
        out["leave_type"] = require_choice(payload.get("leaveType"), LeaveHoursType, "Leave type")
    if _wants(payload, "date", partial):
        out["work_date"] = require_iso_date(payload.get("date"), "Date")
    if _wants(payload, "hours", partial):
        out["hours"] = require_number_in_range(
            payload.get("hours"), "Hours", minimum=MIN_RECORD_HOURS, maximum=MAX_RECORD_HOURS
        )
    if _wants(payload, "reason", partial):
        out["reason"] = _optional_text(payload, "reason")
    return out


def _training_fields(payload: Mapping, partial: bool) -> dict:
    out: dict = {}
    if _wants(payload, "trainingType", partial):
        out["training_type"] = require_choice(payload.get("trainingType"), TrainingType, "Training type")
    if _wants(payload, "title", partial):
        out["title"] = require_non_empty(payload.get("title"), "Title")
    if _wants(payload, "date", partial):
        out["work_date"] = require_iso_date(payload.get("date"), "Date")
    if _wants(payload, "duration", partial):
        out["hours"] = require_number_in_range(
            payload.get("duration"), "Duration", minimum=MIN_RECORD_HOURS, maximum=MAX_RECORD_HOURS
        )
    for key in ("description", "provider", "location"):
        if _wants(payload, key, partial):
            out[key] = _optional_text(payload, key)
    return out


_PARSERS: dict[RecordKind, FieldParser] = {
    RecordKind.WORK_ENTRY: _work_entry_fields,
    RecordKind.LEAVE_REQUEST: _leave_request_fields,
    RecordKind.LEAVE_HOURS: _leave_hours_fields,
    RecordKind.TRAINING: _training_fields,
}


def _check_consistency(record: HourBearingRecord) -> None:
    if isinstance(record, LeaveRequest) and record.end_date < record.start_date:
        raise ValidationError("End date must not be before start date")


@dataclass
class RecordFactory:
    """Factory Pattern: turn request payloads into validated records and patches."""

    def build(
        self,
        record_type: type[HourBearingRecord],
        payload: Mapping,
        *,
        owner: Identity,
        now: datetime,
    ) -> HourBearingRecord:
        fields = _PARSERS[record_type.kind](payload, False)
        is_draft = parse_is_draft(payload.get("isDraft", False))
        record = record_type(
            user_id=owner.user_id,
            user_name=owner.display_name,
            status=RecordStatus.DRAFT if is_draft else RecordStatus.PENDING,
            is_draft=is_draft,
            created_at=now,
            updated_at=now,
            **fields,
        )
        _check_consistency(record)
        return record

    def changes_for(self, record: HourBearingRecord, patch: Mapping) -> dict:
        """Validated column changes for an edit; lifecycle fields are never patchable."""
        changes = _PARSERS[record.kind](patch, True)
        if not changes:
            raise ValidationError("Nothing to update")
        _check_consistency(replace(record, **changes))
        return changes
