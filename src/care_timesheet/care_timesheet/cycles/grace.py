"""Grace period resolver.

After a cycle closes, administrators get Monday..Saturday to finish approvals.
While that window is open the previous cycle stays the one shown on
dashboards instead of the freshly started one.
"""

from __future__ import annotations

from datetime import date, datetime

from ..common.datetime_utils import as_date, end_of_day, start_of_day
from ..core.constants import DEFAULT_REFERENCE_DATE, GRACE_PERIOD_DAYS
from .calculator import cycle_containing, previous_cycle
from .model import Cycle, DisplayCycle, GracePeriod, PaymentCycleInfo, days

GRACE_MESSAGE = "Showing previous payment period (grace period until Saturday)"
CURRENT_MESSAGE = "Showing current payment period"


def _as_moment(now: date | datetime) -> datetime:
    return now if isinstance(now, datetime) else start_of_day(now)


def grace_period_after(cycle: Cycle) -> GracePeriod:
    """Monday on/after the day following ``cycle.end`` through Saturday 23:59:59.999."""
    day_after = cycle.end + days(1)
    # weekday(): Monday == 0
    start_day = day_after + days((7 - day_after.weekday()) % 7)
    end_day = start_day + days(GRACE_PERIOD_DAYS - 1)
    return GracePeriod(start=start_of_day(start_day), end=end_of_day(end_day))


def resolve_display_cycle(now: date | datetime, reference_date: date = DEFAULT_REFERENCE_DATE) -> DisplayCycle:
    moment = _as_moment(now)
    current = cycle_containing(moment, reference_date)
    previous = previous_cycle(current)
    if grace_period_after(previous).contains(moment):
        return DisplayCycle(cycle=previous, is_grace_period=True, message=GRACE_MESSAGE)
    return DisplayCycle(cycle=current, is_grace_period=False, message=CURRENT_MESSAGE)


def next_payment_cutoff(now: date | datetime) -> datetime:
    """Next Saturday 23:59:59.999; a full week ahead when ``now`` is already Saturday."""
    today = as_date(now)
    until_saturday = (5 - today.weekday()) % 7
    return end_of_day(today + days(until_saturday or 7))


def payment_cycle_info(now: date | datetime, reference_date: date = DEFAULT_REFERENCE_DATE) -> PaymentCycleInfo:
    moment = _as_moment(now)
    current = cycle_containing(moment, reference_date)
    previous = previous_cycle(current)
    grace = grace_period_after(previous)
    return PaymentCycleInfo(
        current_cycle=current,
        previous_cycle=previous,
        is_grace_period=grace.contains(moment),
        grace_period=grace,
        payment_cutoff=next_payment_cutoff(moment),
    )
