from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from src.care_timesheet.care_timesheet.core.exceptions import ValidationError
from src.care_timesheet.care_timesheet.cycles.calculator import (
    cycle_containing,
    cycle_index,
    is_date_in_cycle,
    next_cycle,
    previous_cycle,
)
from src.care_timesheet.care_timesheet.cycles.model import CycleConfig

REF = date(2025, 3, 3)


def test_reference_date_starts_cycle_zero():
    cycle = cycle_containing(REF)
    assert cycle.index == 0
    assert cycle.start == REF
    assert cycle.end == date(2025, 3, 30)


def test_weeks_of_cycle_containing_mid_march():
    cycle = cycle_containing(date(2025, 3, 17))
    assert [(w.start, w.end) for w in cycle.weeks] == [
        (date(2025, 3, 3), date(2025, 3, 9)),
        (date(2025, 3, 10), date(2025, 3, 16)),
        (date(2025, 3, 17), date(2025, 3, 23)),
        (date(2025, 3, 24), date(2025, 3, 30)),
    ]
    assert cycle.week_for(date(2025, 3, 17)) == cycle.weeks[2]


def test_dates_before_reference_use_negative_cycles():
    cycle = cycle_containing(date(2025, 3, 2))
    assert cycle_index(date(2025, 3, 2)) == -1
    assert cycle.index == -1
    assert cycle.start == date(2025, 2, 3)
    assert cycle.end == date(2025, 3, 2)


def test_cycles_tile_ten_years_around_reference():
    day = REF - timedelta(days=5 * 365)
    last = REF + timedelta(days=5 * 365)
    while day <= last:
        cycle = cycle_containing(day)
        assert cycle.contains(day)
        assert sum(1 for w in cycle.weeks if w.contains(day)) == 1
        assert cycle.start.weekday() == 0
        assert (cycle.start - REF).days % 28 == 0
        assert (cycle.end - cycle.start).days == 27
        day += timedelta(days=1)


def test_neighbouring_cycles_are_contiguous():
    cycle = cycle_containing(date(2025, 6, 11))
    nxt = next_cycle(cycle)
    prev = previous_cycle(cycle)
    assert nxt.start == cycle.end + timedelta(days=1)
    assert prev.end == cycle.start - timedelta(days=1)
    assert nxt.index == cycle.index + 1
    assert prev.index == cycle.index - 1
    assert previous_cycle(nxt) == cycle


def test_is_date_in_cycle_boundaries_inclusive():
    cycle = cycle_containing(REF)
    assert is_date_in_cycle(date(2025, 3, 3), cycle)
    assert is_date_in_cycle(date(2025, 3, 30), cycle)
    assert not is_date_in_cycle(date(2025, 3, 31), cycle)
    assert not is_date_in_cycle(date(2025, 3, 2), cycle)


def test_custom_reference_date():
    cycle = cycle_containing(date(2024, 1, 10), date(2024, 1, 1))
    assert cycle.start == date(2024, 1, 1)


def test_cycle_config_requires_monday():
    with pytest.raises(ValidationError):
        CycleConfig(reference_date=date(2025, 3, 4))


def test_cycle_config_from_settings():
    settings = SimpleNamespace(CYCLE_REFERENCE_DATE="2025-03-31", CYCLE_CONFIG_VERSION=2)
    config = CycleConfig.from_settings(settings)
    assert config.reference_date == date(2025, 3, 31)
    assert config.version == 2

    defaults = CycleConfig.from_settings(SimpleNamespace())
    assert defaults.reference_date == REF
