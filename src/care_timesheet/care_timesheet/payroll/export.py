from __future__ import annotations

import io
from typing import Iterable

import pandas as pd

from ..records.model import WorkEntry
from .service import CycleReport

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _format_hours_decimal(minutes: int) -> str:
    # "hours.minutes" with padded minutes, e.g. 8h 5m -> "8.05"
    return f"{minutes // 60}.{minutes % 60:02d}"


def cycle_report_to_xlsx(report: CycleReport) -> bytes:
    records = []
    for row in report.rows:
        item = {"Staff": row["user_name"]}
        for week in row["weekly"]:
            item[week["week"]] = week["hours_worked"]
        item.update(
            {
                "Work": _format_hours_decimal(row["work_minutes"]),
                "Leave hours": _format_hours_decimal(row["leave_minutes"]),
                "Training": _format_hours_decimal(row["training_minutes"]),
                "Leave days": row["leave_days"],
                "Total": row["total_worked"],
                "Estimated pay": row["estimated_pay"],
            }
        )
        records.append(item)

    columns = ["Staff"] + [w.label for w in report.cycle.weeks] + [
        "Work", "Leave hours", "Training", "Leave days", "Total", "Estimated pay",
    ]
    df = pd.DataFrame(records, columns=columns)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Cycle summary")
    return output.getvalue()


def work_entries_to_xlsx(entries: Iterable[WorkEntry]) -> bytes:
    rows = [
        {
            "Date": e.work_date.strftime("%d %b %y %a"),
            "Start Time": e.start_time.strftime("%H:%M"),
            "End Time": e.end_time.strftime("%H:%M"),
            "Hours Worked": _format_hours_decimal(e.duration_minutes()),
        }
        for e in sorted(entries, key=lambda e: e.work_date)
    ]
    df = pd.DataFrame(rows, columns=["Date", "Start Time", "End Time", "Hours Worked"])

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Timesheets")
    return output.getvalue()
