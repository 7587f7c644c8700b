from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..common.datetime_utils import as_date, parse_iso_date
from ..core.constants import CYCLE_CONFIG_VERSION, DEFAULT_REFERENCE_DATE
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Week:
    """One 7-day interval of a pay cycle; both ends inclusive."""

    start: date
    end: date

    def contains(self, day: date | datetime) -> bool:
        return self.start <= as_date(day) <= self.end

    @property
    def key(self) -> str:
        return f"{self.start:%Y-%m-%d}/{self.end:%Y-%m-%d}"

    @property
    def label(self) -> str:
        return f"{self.start.day} {self.start:%b} - {self.end.day} {self.end:%b}"

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class Cycle:
    """A 28-day pay cycle: four contiguous weeks.

    ``index`` counts cycles from the reference date (negative before it).
    """

    index: int
    weeks: tuple[Week, ...]

    @property
    def start(self) -> date:
        return self.weeks[0].start

    @property
    def end(self) -> date:
        return self.weeks[-1].end

    def contains(self, day: date | datetime) -> bool:
        return self.start <= as_date(day) <= self.end

    def week_for(self, day: date | datetime) -> Optional[Week]:
        for week in self.weeks:
            if week.contains(day):
                return week
        return None

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "weeks": [w.to_dict() for w in self.weeks],
        }


@dataclass(frozen=True)
class CycleConfig:
    """The one reference date every cycle computation is anchored to.

    Built once from settings and injected wherever cycle math runs, so the
    anchor cannot drift between call sites. ``version`` is bumped whenever the
    anchor changes.
    """

    reference_date: date = DEFAULT_REFERENCE_DATE
    version: int = CYCLE_CONFIG_VERSION

    def __post_init__(self):
        if self.reference_date.weekday() != 0:
            raise ValidationError(
                f"Cycle reference date must be a Monday, got {self.reference_date.isoformat()}"
            )

    @classmethod
    def from_settings(cls, settings) -> "CycleConfig":
        raw = getattr(settings, "CYCLE_REFERENCE_DATE", None) or DEFAULT_REFERENCE_DATE
        ref = raw if isinstance(raw, date) else parse_iso_date(str(raw))
        return cls(
            reference_date=ref,
            version=int(getattr(settings, "CYCLE_CONFIG_VERSION", CYCLE_CONFIG_VERSION)),
        )


@dataclass(frozen=True)
class GracePeriod:
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    @property
    def days(self) -> int:
        return (self.end.date() - self.start.date()).days + 1


@dataclass(frozen=True)
class DisplayCycle:
    cycle: Cycle
    is_grace_period: bool
    message: str

    def to_dict(self) -> dict:
        return {
            "cycle": self.cycle.to_dict(),
            "isGracePeriod": self.is_grace_period,
            "message": self.message,
        }


@dataclass(frozen=True)
class PaymentCycleInfo:
    current_cycle: Cycle
    previous_cycle: Cycle
    is_grace_period: bool
    grace_period: GracePeriod
    payment_cutoff: datetime

    @property
    def display_cycle(self) -> Cycle:
        return self.previous_cycle if self.is_grace_period else self.current_cycle

    def to_dict(self) -> dict:
        return {
            "currentCycle": self.current_cycle.to_dict(),
            "previousCycle": self.previous_cycle.to_dict(),
            "isGracePeriod": self.is_grace_period,
            "shouldShowPreviousCycle": self.is_grace_period,
            "gracePeriod": {
                "start": self.grace_period.start.isoformat(),
                "end": self.grace_period.end.isoformat(),
            },
            "paymentCutoffDate": self.payment_cutoff.isoformat(),
        }


def days(n: int) -> timedelta:
    return timedelta(days=n)
