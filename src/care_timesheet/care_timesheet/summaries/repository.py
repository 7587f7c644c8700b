from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import WeeklySummary


class WeeklySummaryRepository(Protocol):
    def increment(
        self,
        *,
        user_id: str,
        user_name: str,
        start_date: date,
        end_date: date,
        minutes: int,
    ) -> None:
        """Atomically add ``minutes`` (may be negative) to the (user, cycle) total, creating it if missing."""

        raise NotImplementedError

    def get(self, *, user_id: str, start_date: date) -> Optional[WeeklySummary]:
        raise NotImplementedError

    def delete(self, *, user_id: str, start_date: date) -> bool:
        raise NotImplementedError

    def list_for_cycle(self, *, start_date: date) -> Sequence[WeeklySummary]:
        raise NotImplementedError
