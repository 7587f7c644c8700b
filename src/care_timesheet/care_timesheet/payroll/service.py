from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Mapping, Optional

from ..common.datetime_utils import now_local
from ..core.enums import RecordKind
from ..cycles.grace import payment_cycle_info, resolve_display_cycle
from ..cycles.model import Cycle, CycleConfig, DisplayCycle, PaymentCycleInfo
from ..records.repository import RecordRepository
from .aggregator import aggregate, aggregate_leave_days, format_minutes
from .calculator.base import PayCalculator
from .calculator.standard_calculator import LinearPayCalculator

@dataclass(frozen=True)
class CycleReport:
    cycle: Cycle
    is_grace_period: bool
    message: str
    rows: list[dict]

    def to_dict(self) -> dict:
        return {
            "cycle": self.cycle.to_dict(),
            "isGracePeriod": self.is_grace_period,
            "message": self.message,
            "rows": self.rows,
        }


class CycleReportService:
    """Per-user totals for a pay cycle across every record kind, plus estimated pay."""

    def __init__(
        self,
        repositories: Mapping[RecordKind, RecordRepository],
        cycle_config: CycleConfig,
        *,
        calculator: Optional[PayCalculator] = None,
        hourly_rate: float = 0.0,
        clock: Callable[[], datetime] = now_local,
    ):
        self._repos = repositories
        self._cycle_config = cycle_config
        self._calculator = calculator or LinearPayCalculator()
        self._hourly_rate = float(hourly_rate)
        self._clock = clock

    def display_cycle(self, now: Optional[datetime | date] = None) -> DisplayCycle:
        return resolve_display_cycle(now or self._clock(), self._cycle_config.reference_date)

    def payment_cycle_info(self, now: Optional[datetime | date] = None) -> PaymentCycleInfo:
        return payment_cycle_info(now or self._clock(), self._cycle_config.reference_date)

    def build_cycle_report(
        self,
        *,
        cycle: Optional[Cycle] = None,
        now: Optional[datetime | date] = None,
        user_id: Optional[str] = None,
        hourly_rate: Optional[float] = None,
        include_deleted: bool = False,
    ) -> CycleReport:
        if cycle is None:
            display = self.display_cycle(now)
            cycle, is_grace, message = display.cycle, display.is_grace_period, display.message
        else:
            is_grace, message = False, f"Showing payment period {cycle.start:%d %b %Y} - {cycle.end:%d %b %Y}"

        rate = self._hourly_rate if hourly_rate is None else float(hourly_rate)

        by_user: dict[str, dict] = {}
        for kind, repo in self._repos.items():
            records = repo.list_records(
                user_id=user_id,
                start=cycle.start,
                end=cycle.end,
                include_drafts=False,
                include_deleted=include_deleted,
                limit=None,
            )
            for r in records:
                bucket = by_user.setdefault(r.user_id, {"user_name": r.user_name, "records": {}})
                bucket["records"].setdefault(kind, []).append(r)

        rows: list[dict] = []
        for uid, bucket in by_user.items():
            rows.append(self._build_row(uid, bucket["user_name"], bucket["records"], cycle, rate, include_deleted))

        rows.sort(key=lambda x: x["user_name"].lower())
        return CycleReport(cycle=cycle, is_grace_period=is_grace, message=message, rows=rows)

    def _build_row(
        self,
        user_id: str,
        user_name: str,
        records: Mapping[RecordKind, list],
        cycle: Cycle,
        rate: float,
        include_deleted: bool,
    ) -> dict:
        weeks = cycle.weeks
        work = aggregate(records.get(RecordKind.WORK_ENTRY, []), weeks, include_deleted=include_deleted)
        leave = aggregate(
            records.get(RecordKind.LEAVE_HOURS, []), weeks, approved_only=True, include_deleted=include_deleted
        )
        training = aggregate(
            records.get(RecordKind.TRAINING, []), weeks, approved_only=True, include_deleted=include_deleted
        )
        leave_days = aggregate_leave_days(
            records.get(RecordKind.LEAVE_REQUEST, []), weeks, include_deleted=include_deleted
        )

        total = work.total_minutes + leave.total_minutes + training.total_minutes
        return {
            "user_id": user_id,
            "user_name": user_name,
            "weekly": [
                {
                    "week": w.label,
                    "start": w.start.isoformat(),
                    "end": w.end.isoformat(),
                    "minutes": work.per_week_minutes[w.key],
                    "hours_worked": format_minutes(work.per_week_minutes[w.key]),
                }
                for w in weeks
            ],
            "work_minutes": work.total_minutes,
            "leave_minutes": leave.total_minutes,
            "training_minutes": training.total_minutes,
            "leave_days": leave_days,
            "total_minutes": total,
            "total_worked": format_minutes(total),
            "estimated_pay": self._calculator.estimate_pay(total, rate),
        }
