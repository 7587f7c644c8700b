from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_APPROVED_VISIBILITY_HOURS, DEFAULT_DELETION_REASON
from ..core.enums import Permission, RecordStatus
from ..core.exceptions import (
    AlreadyApprovedError,
    AlreadyRejectedError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from ..summaries.tracker import WeeklySummaryTracker
from ..users.model import Identity
from .factory import RecordFactory
from .kinds import RecordKindPolicy
from .model import HourBearingRecord, WorkEntry
from .repository import RecordRepository
from .visibility import filter_pending_queue

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = (RecordStatus.DRAFT, RecordStatus.PENDING)
APPROVED_STATUSES = (RecordStatus.APPROVED, RecordStatus.COMPLETED)
REJECTABLE_STATUSES = (RecordStatus.DRAFT, RecordStatus.PENDING)


@dataclass(frozen=True)
class DeletionResult:
    record: HourBearingRecord
    soft_deleted: bool
    message: str


class RecordLifecycleService:
    """State machine shared by work entries, leave requests, leave hours and training.

    draft -> pending -> approved | rejected (training: approved -> completed).
    Every transition is one conditional update against the repository, so two
    concurrent decisions on the same record cannot both succeed.
    """

    def __init__(
        self,
        policy: RecordKindPolicy,
        records: RecordRepository,
        *,
        factory: Optional[RecordFactory] = None,
        summary_tracker: Optional[WeeklySummaryTracker] = None,
        visibility_hours: float = DEFAULT_APPROVED_VISIBILITY_HOURS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._policy = policy
        self._records = records
        self._factory = factory or RecordFactory()
        self._summaries = summary_tracker if policy.tracks_weekly_summary else None
        self._visibility_hours = float(visibility_hours)
        self._clock = clock

    @property
    def policy(self) -> RecordKindPolicy:
        return self._policy

    @property
    def _label(self) -> str:
        return self._policy.label

    # -------- helpers --------
    def _load(self, record_id: int) -> HourBearingRecord:
        record = self._records.get(record_id=int(record_id))
        if not record or record.deleted:
            raise NotFoundError(f"{self._label} not found")
        return record

    def _require_owner(self, current: Identity, record: HourBearingRecord) -> None:
        if record.user_id != current.user_id:
            raise ForbiddenError(f"{self._label} belongs to another user")

    @staticmethod
    def _require_permission(current: Identity, permission: Permission) -> None:
        if not current.has_permission(permission):
            raise ForbiddenError("Forbidden: admin access required")

    def _raise_for_lost_transition(self, record_id: int, action: str) -> None:
        """Explain why a conditional update matched no row."""
        record = self._records.get(record_id=int(record_id))
        if not record or record.deleted:
            raise NotFoundError(f"{self._label} not found")
        if record.status == RecordStatus.APPROVED and action in ("approve", "reject"):
            raise AlreadyApprovedError(f"{self._label} is already approved")
        if record.status == RecordStatus.REJECTED and action == "reject":
            raise AlreadyRejectedError(f"{self._label} is already rejected")
        raise ForbiddenError(f"Cannot {action} a {record.status.value} {self._label.lower()}")

    def _track_added(self, record: HourBearingRecord) -> None:
        if self._summaries and isinstance(record, WorkEntry) and not record.is_draft:
            self._summaries.entry_added(record)

    def _track_removed(self, record: HourBearingRecord) -> None:
        if self._summaries and isinstance(record, WorkEntry) and not record.is_draft:
            self._summaries.entry_removed(record)

    # -------- owner actions --------
    def create(self, *, current: Identity, payload: Mapping) -> HourBearingRecord:
        now = self._clock()
        record = self._factory.build(self._policy.record_type, payload, owner=current, now=now)

        if isinstance(record, WorkEntry):
            same_day = self._records.list_records(
                user_id=current.user_id,
                start=record.work_date,
                end=record.work_date,
                include_drafts=True,
            )
            for other in same_day:
                if other.start_time == record.start_time and other.end_time == record.end_time:
                    raise ValidationError("Time entry has already been logged for this period.")

        record_id = self._records.create(record)
        created = self._load(record_id)
        self._track_added(created)
        logger.info("created %s #%s (%s) for %s", self._policy.table, record_id, created.status.value, current.user_id)
        return created

    def get(self, *, record_id: int) -> HourBearingRecord:
        """Fetch by id; soft-deleted rows are still returned."""
        record = self._records.get(record_id=int(record_id))
        if not record:
            raise NotFoundError(f"{self._label} not found")
        return record

    def submit_draft(self, *, current: Identity, record_id: int) -> HourBearingRecord:
        record = self._load(record_id)
        self._require_owner(current, record)
        if record.status != RecordStatus.DRAFT:
            raise ForbiddenError(f"Only draft {self._label.lower()}s can be submitted")

        ok = self._records.update(
            record_id=int(record_id),
            changes={"status": RecordStatus.PENDING, "is_draft": False, "updated_at": self._clock()},
            expected_statuses=(RecordStatus.DRAFT,),
        )
        if not ok:
            self._raise_for_lost_transition(record_id, "submit")

        submitted = self._load(record_id)
        self._track_added(submitted)
        logger.info("submitted %s #%s", self._policy.table, record_id)
        return submitted

    def edit(self, *, current: Identity, record_id: int, patch: Mapping) -> HourBearingRecord:
        record = self._load(record_id)
        self._require_owner(current, record)
        if record.status not in EDITABLE_STATUSES:
            raise ForbiddenError(f"Cannot edit {record.status.value} {self._label.lower()}")

        changes = self._factory.changes_for(record, patch)
        changes["updated_at"] = self._clock()
        ok = self._records.update(record_id=int(record_id), changes=changes, expected_statuses=(record.status,))
        if not ok:
            self._raise_for_lost_transition(record_id, "edit")

        edited = self._load(record_id)
        if self._summaries and isinstance(record, WorkEntry) and not record.is_draft:
            self._summaries.entry_changed(record, edited)
        return edited

    def delete(
        self,
        *,
        current: Identity,
        record_id: int,
        reason: Optional[str] = None,
        as_admin: bool = False,
    ) -> DeletionResult:
        """Hard delete unless approved; approved rows are archived (soft delete) or refused."""
        record = self._load(record_id)
        if as_admin:
            self._require_permission(current, Permission.DELETE_RECORDS)
        else:
            self._require_owner(current, record)

        if record.status in APPROVED_STATUSES:
            if not self._policy.soft_delete_when_approved:
                raise ForbiddenError(
                    f"Cannot delete approved {self._label.lower()}. "
                    "Approved records are preserved for payroll calculations."
                )
            ok = self._records.update(
                record_id=int(record_id),
                changes={
                    "deleted": True,
                    "deleted_at": self._clock(),
                    "deleted_by": current.display_name or current.actor_label,
                    "deletion_reason": (reason or "").strip() or DEFAULT_DELETION_REASON,
                },
                expected_statuses=APPROVED_STATUSES,
            )
            if not ok:
                self._raise_for_lost_transition(record_id, "delete")
            logger.info("archived approved %s #%s by %s", self._policy.table, record_id, current.actor_label)
            return DeletionResult(
                record=self.get(record_id=record_id),
                soft_deleted=True,
                message=f"Approved {self._label.lower()} archived (preserved for payment calculations)",
            )

        ok = self._records.delete(record_id=int(record_id), expected_statuses=(record.status,))
        if not ok:
            self._raise_for_lost_transition(record_id, "delete")
        self._track_removed(record)
        logger.info("deleted %s #%s by %s", self._policy.table, record_id, current.actor_label)
        return DeletionResult(record=record, soft_deleted=False, message=f"{self._label} deleted successfully")

    # -------- admin decisions --------
    def approve(self, *, current: Identity, record_id: int) -> HourBearingRecord:
        self._require_permission(current, Permission.APPROVE_RECORDS)
        now = self._clock()
        ok = self._records.update(
            record_id=int(record_id),
            changes={
                "status": RecordStatus.APPROVED,
                "is_draft": False,
                "approved_by": current.actor_label,
                "approved_at": now,
                "updated_at": now,
            },
            expected_statuses=(RecordStatus.PENDING,),
        )
        if not ok:
            self._raise_for_lost_transition(record_id, "approve")
        logger.info("approved %s #%s by %s", self._policy.table, record_id, current.actor_label)
        return self._load(record_id)

    def reject(self, *, current: Identity, record_id: int, reason: str) -> HourBearingRecord:
        self._require_permission(current, Permission.APPROVE_RECORDS)
        reason = require_non_empty(reason, "Rejection reason")
        before = self._records.get(record_id=int(record_id))
        now = self._clock()
        ok = self._records.update(
            record_id=int(record_id),
            changes={
                "status": RecordStatus.REJECTED,
                "is_draft": False,
                "rejected_by": current.actor_label,
                "rejected_at": now,
                "rejection_reason": reason,
                "updated_at": now,
            },
            expected_statuses=REJECTABLE_STATUSES,
        )
        if not ok:
            self._raise_for_lost_transition(record_id, "reject")
        rejected = self._load(record_id)
        if before is not None and before.is_draft:
            # rejecting clears is_draft, so the entry joins the cycle total
            self._track_added(rejected)
        logger.info("rejected %s #%s by %s", self._policy.table, record_id, current.actor_label)
        return rejected

    def complete(self, *, current: Identity, record_id: int) -> HourBearingRecord:
        if not self._policy.completable:
            raise ForbiddenError(f"{self._label}s cannot be completed")
        self._require_permission(current, Permission.APPROVE_RECORDS)
        now = self._clock()
        ok = self._records.update(
            record_id=int(record_id),
            changes={"status": RecordStatus.COMPLETED, "completed_at": now, "updated_at": now},
            expected_statuses=(RecordStatus.APPROVED,),
        )
        if not ok:
            self._raise_for_lost_transition(record_id, "complete")
        logger.info("completed %s #%s", self._policy.table, record_id)
        return self._load(record_id)

    # -------- queries --------
    def list_for_owner(
        self,
        *,
        current: Identity,
        start: Optional[date] = None,
        end: Optional[date] = None,
        include_drafts: bool = False,
        status: Optional[RecordStatus] = None,
    ) -> Sequence[HourBearingRecord]:
        records = self._records.list_records(
            user_id=current.user_id,
            start=start,
            end=end,
            include_drafts=include_drafts,
            status=status,
        )
        if include_drafts:
            # the pending-queue view: stale approvals drop out
            return filter_pending_queue(records, now=self._clock(), window_hours=self._visibility_hours)
        return list(records)

    def list_for_admin(
        self,
        *,
        current: Identity,
        user_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        include_drafts: bool = False,
        status: Optional[RecordStatus] = None,
        include_deleted: bool = False,
    ) -> Sequence[HourBearingRecord]:
        self._require_permission(current, Permission.APPROVE_RECORDS)
        return list(
            self._records.list_records(
                user_id=user_id,
                start=start,
                end=end,
                include_drafts=include_drafts,
                status=status,
                include_deleted=include_deleted,
            )
        )
