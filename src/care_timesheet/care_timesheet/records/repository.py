from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import RecordStatus
from .model import HourBearingRecord


class RecordRepository(Protocol):
    """Persistence collaborator for one record kind.

    ``update`` and ``delete`` are conditional: they only touch a row whose
    current status is in ``expected_statuses`` (and that is not soft-deleted),
    as a single atomic statement, and report whether a row was affected.
    """

    def create(self, record: HourBearingRecord) -> int:
        raise NotImplementedError

    def get(self, *, record_id: int) -> Optional[HourBearingRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        user_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        include_drafts: bool = False,
        status: Optional[RecordStatus] = None,
        include_deleted: bool = False,
        limit: Optional[int] = 500,
    ) -> Sequence[HourBearingRecord]:
        """Newest first; ``start``/``end`` filter the kind's date column inclusively.

        ``limit=None`` returns every matching row.
        """

        raise NotImplementedError

    def update(
        self,
        *,
        record_id: int,
        changes: Mapping[str, Any],
        expected_statuses: Sequence[RecordStatus],
    ) -> bool:
        raise NotImplementedError

    def delete(self, *, record_id: int, expected_statuses: Sequence[RecordStatus]) -> bool:
        raise NotImplementedError

    def count_active(self, *, user_id: str, start: date, end: date) -> int:
        """Non-draft, non-deleted rows for ``user_id`` dated within [start, end]."""

        raise NotImplementedError
