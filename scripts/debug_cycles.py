"""Print the pay cycle, its weeks and the grace status for a date.

Usage: python scripts/debug_cycles.py [YYYY-MM-DD]
"""

from __future__ import annotations

import sys
from datetime import date, datetime
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.care_timesheet.care_timesheet.common.datetime_utils import parse_iso_date, start_of_day
from src.care_timesheet.care_timesheet.cycles.calculator import cycle_containing, cycle_index
from src.care_timesheet.care_timesheet.cycles.grace import payment_cycle_info, resolve_display_cycle
from src.care_timesheet.care_timesheet.cycles.model import CycleConfig


def describe(day: date, cycle_config: CycleConfig) -> list[str]:
    ref = cycle_config.reference_date
    cycle = cycle_containing(day, ref)
    moment = start_of_day(day)
    info = payment_cycle_info(moment, ref)
    display = resolve_display_cycle(moment, ref)

    lines = [
        f"reference date : {ref.isoformat()} (config v{cycle_config.version})",
        f"date           : {day.isoformat()} ({day:%A})",
        f"cycle index    : {cycle_index(day, ref)}",
        f"cycle          : {cycle.start.isoformat()} .. {cycle.end.isoformat()}",
    ]
    for n, week in enumerate(cycle.weeks, start=1):
        marker = "  <-" if week.contains(day) else ""
        lines.append(f"  week {n}       : {week.label}{marker}")
    lines.extend(
        [
            f"grace period   : {info.grace_period.start:%Y-%m-%d} .. {info.grace_period.end:%Y-%m-%d}"
            f" ({'active' if info.is_grace_period else 'inactive'})",
            f"display cycle  : {display.cycle.start.isoformat()} .. {display.cycle.end.isoformat()}",
            f"message        : {display.message}",
            f"payment cutoff : {info.payment_cutoff.isoformat()}",
        ]
    )
    return lines


def main(argv: list[str]) -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    cycle_config = CycleConfig.from_settings(settings)
    day = parse_iso_date(argv[1]) if len(argv) > 1 else datetime.now().date()
    print("\n".join(describe(day, cycle_config)))


if __name__ == "__main__":
    main(sys.argv)
