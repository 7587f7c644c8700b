from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..cycles.calculator import cycle_containing
from ..cycles.model import Cycle, CycleConfig
from ..records.model import WorkEntry
from ..records.repository import RecordRepository
from .model import WeeklySummary
from .repository import WeeklySummaryRepository

logger = logging.getLogger(__name__)


class WeeklySummaryTracker:
    """Keeps the per-(user, cycle) work-minute totals in step with submitted entries."""

    def __init__(
        self,
        summaries: WeeklySummaryRepository,
        entries: RecordRepository,
        cycle_config: CycleConfig,
    ):
        self._summaries = summaries
        self._entries = entries
        self._cycle_config = cycle_config

    def _cycle_for(self, entry: WorkEntry):
        return cycle_containing(entry.work_date, self._cycle_config.reference_date)

    def entry_added(self, entry: WorkEntry) -> None:
        cycle = self._cycle_for(entry)
        minutes = entry.duration_minutes()
        self._summaries.increment(
            user_id=entry.user_id,
            user_name=entry.user_name,
            start_date=cycle.start,
            end_date=cycle.end,
            minutes=minutes,
        )
        logger.debug("weekly summary %s %s +%d min", entry.user_id, cycle.start, minutes)

    def entry_removed(self, entry: WorkEntry) -> None:
        cycle = self._cycle_for(entry)
        remaining = self._entries.count_active(user_id=entry.user_id, start=cycle.start, end=cycle.end)
        if remaining == 0:
            self._summaries.delete(user_id=entry.user_id, start_date=cycle.start)
            logger.debug("weekly summary %s %s removed (no entries left)", entry.user_id, cycle.start)
            return
        self._summaries.increment(
            user_id=entry.user_id,
            user_name=entry.user_name,
            start_date=cycle.start,
            end_date=cycle.end,
            minutes=-entry.duration_minutes(),
        )

    def entry_changed(self, before: WorkEntry, after: WorkEntry) -> None:
        self.entry_removed(before)
        self.entry_added(after)

    def summary_for(self, *, user_id: str, entry_date) -> Optional[WeeklySummary]:
        cycle = cycle_containing(entry_date, self._cycle_config.reference_date)
        return self._summaries.get(user_id=user_id, start_date=cycle.start)

    def summaries_for_cycle(self, cycle: Cycle) -> Sequence[WeeklySummary]:
        return self._summaries.list_for_cycle(start_date=cycle.start)
