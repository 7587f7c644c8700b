from datetime import date, datetime
from io import BytesIO

import pandas as pd
import pytest

from src.care_timesheet.care_timesheet.core.enums import RecordKind
from src.care_timesheet.care_timesheet.payroll.export import cycle_report_to_xlsx, work_entries_to_xlsx
from src.care_timesheet.care_timesheet.payroll.service import CycleReportService


@pytest.fixture
def report_service(record_repos, cycle_config, clock):
    return CycleReportService(record_repos, cycle_config, hourly_rate=20, clock=clock)


@pytest.fixture
def seeded(services, staff, other_staff, admin):
    work = services[RecordKind.WORK_ENTRY]
    work.create(current=staff, payload={"date": "2025-03-18", "start": "09:00", "end": "17:30"})
    work.create(current=staff, payload={"date": "2025-03-04", "start": "08:00", "end": "12:00"})
    work.create(current=other_staff, payload={"date": "2025-03-10", "start": "10:00", "end": "12:00"})

    leave = services[RecordKind.LEAVE_HOURS]
    approved = leave.create(current=staff, payload={"leaveType": "sick", "date": "2025-03-19", "hours": 4.5})
    leave.approve(current=admin, record_id=approved.record_id)
    leave.create(current=staff, payload={"leaveType": "annual", "date": "2025-03-20", "hours": 2})

    training = services[RecordKind.TRAINING]
    course = training.create(
        current=staff,
        payload={"trainingType": "safety", "title": "Fire safety", "date": "2025-03-12", "duration": 1},
    )
    training.approve(current=admin, record_id=course.record_id)

    requests = services[RecordKind.LEAVE_REQUEST]
    holiday = requests.create(
        current=staff,
        payload={"leaveType": "annual", "startDate": "2025-03-24", "endDate": "2025-03-25", "totalDays": 2},
    )
    requests.approve(current=admin, record_id=holiday.record_id)
    return services


def test_report_totals_per_user(report_service, seeded, staff):
    report = report_service.build_cycle_report()
    assert report.cycle.start == date(2025, 3, 3)
    assert not report.is_grace_period
    assert [r["user_name"] for r in report.rows] == ["Jane Carer", "Tom Nurse"]

    jane = report.rows[0]
    assert jane["work_minutes"] == 510 + 240
    assert jane["leave_minutes"] == 270
    assert jane["training_minutes"] == 60
    assert jane["leave_days"] == 2.0
    assert jane["total_minutes"] == 750 + 270 + 60
    assert jane["total_worked"] == "18h 0m"
    assert jane["estimated_pay"] == 360.0
    assert [w["minutes"] for w in jane["weekly"]] == [240, 0, 510, 0]


def test_report_uses_previous_cycle_during_grace(report_service, seeded):
    report = report_service.build_cycle_report(now=datetime(2025, 4, 2, 9, 0), user_id="auth0|staff-2")
    assert report.is_grace_period
    assert report.cycle.start == date(2025, 3, 3)
    assert len(report.rows) == 1
    assert report.rows[0]["work_minutes"] == 120


def test_archived_leave_only_in_history(report_service, seeded, staff):
    leave = seeded[RecordKind.LEAVE_HOURS]
    archived = [r for r in leave.list_for_owner(current=staff) if r.status.value == "approved"][0]
    leave.delete(current=staff, record_id=archived.record_id)

    assert report_service.build_cycle_report(user_id=staff.user_id).rows[0]["leave_minutes"] == 0
    history = report_service.build_cycle_report(user_id=staff.user_id, include_deleted=True)
    assert history.rows[0]["leave_minutes"] == 270


def test_hourly_rate_override(report_service, seeded, staff):
    report = report_service.build_cycle_report(user_id=staff.user_id, hourly_rate=10)
    assert report.rows[0]["estimated_pay"] == 180.0


def test_cycle_report_xlsx(report_service, seeded):
    content = cycle_report_to_xlsx(report_service.build_cycle_report())
    assert content[:2] == b"PK"

    df = pd.read_excel(BytesIO(content), engine="openpyxl")
    assert list(df["Staff"]) == ["Jane Carer", "Tom Nurse"]
    assert list(df["Total"]) == ["18h 0m", "2h 0m"]


def test_work_entries_xlsx(services, staff):
    work = services[RecordKind.WORK_ENTRY]
    work.create(current=staff, payload={"date": "2025-03-18", "start": "09:00", "end": "17:05"})
    content = work_entries_to_xlsx(work.list_for_owner(current=staff))

    df = pd.read_excel(BytesIO(content), engine="openpyxl", dtype=str)
    assert list(df.columns) == ["Date", "Start Time", "End Time", "Hours Worked"]
    assert df.iloc[0]["Date"] == "18 Mar 25 Tue"
    assert df.iloc[0]["Hours Worked"] == "8.05"


def test_report_includes_every_row_in_busy_cycle(report_service, services, record_repos, staff):
    entry = services[RecordKind.WORK_ENTRY].create(
        current=staff, payload={"date": "2025-03-18", "start": "09:00", "end": "09:30"}
    )
    for _ in range(600):
        record_repos[RecordKind.WORK_ENTRY].create(entry)

    row = report_service.build_cycle_report(user_id=staff.user_id).rows[0]
    assert row["work_minutes"] == 601 * 30
