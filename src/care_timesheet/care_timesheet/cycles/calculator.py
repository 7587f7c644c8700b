"""Cycle calculator: partitions the calendar into 28-day pay cycles.

Cycles are anchored to a reference Monday and tile the whole timeline in both
directions. Everything here is pure and safe to call from any request.
"""

from __future__ import annotations

from datetime import date, datetime

from ..common.datetime_utils import as_date
from ..core.constants import DAYS_PER_CYCLE, DAYS_PER_WEEK, DEFAULT_REFERENCE_DATE, WEEKS_PER_CYCLE
from .model import Cycle, Week, days


def cycle_index(day: date | datetime, reference_date: date | datetime = DEFAULT_REFERENCE_DATE) -> int:
    # floor division so dates before the reference land in negative cycles
    return (as_date(day) - as_date(reference_date)).days // DAYS_PER_CYCLE


def build_cycle(index: int, reference_date: date | datetime = DEFAULT_REFERENCE_DATE) -> Cycle:
    cycle_start = as_date(reference_date) + days(index * DAYS_PER_CYCLE)
    weeks = []
    for n in range(WEEKS_PER_CYCLE):
        week_start = cycle_start + days(n * DAYS_PER_WEEK)
        weeks.append(Week(start=week_start, end=week_start + days(DAYS_PER_WEEK - 1)))
    return Cycle(index=index, weeks=tuple(weeks))


def cycle_containing(day: date | datetime, reference_date: date | datetime = DEFAULT_REFERENCE_DATE) -> Cycle:
    """Return the cycle whose four weeks contain ``day``."""
    return build_cycle(cycle_index(day, reference_date), reference_date)


def previous_cycle(cycle: Cycle) -> Cycle:
    return _shifted(cycle, -1)


def next_cycle(cycle: Cycle) -> Cycle:
    return _shifted(cycle, 1)


def _shifted(cycle: Cycle, offset: int) -> Cycle:
    # a cycle's own start is a valid anchor for its neighbours
    shifted = build_cycle(offset, cycle.start)
    return Cycle(index=cycle.index + offset, weeks=shifted.weeks)


def is_date_in_cycle(day: date | datetime, cycle: Cycle) -> bool:
    return cycle.contains(day)
