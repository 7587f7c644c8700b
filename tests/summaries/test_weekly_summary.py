from datetime import date

from src.care_timesheet.care_timesheet.core.enums import RecordKind
from src.care_timesheet.care_timesheet.cycles.calculator import cycle_containing

WORK = {"date": "2025-03-18", "start": "09:00", "end": "17:30"}
CYCLE_START = date(2025, 3, 3)


def test_submitted_entry_increments_cycle_summary(services, summary_repo, staff):
    services[RecordKind.WORK_ENTRY].create(current=staff, payload=WORK)

    summary = summary_repo.get(user_id=staff.user_id, start_date=CYCLE_START)
    assert summary.total_minutes == 510
    assert summary.end_date == date(2025, 3, 30)
    assert summary.user_name == "Jane Carer"


def test_draft_counts_only_once_submitted(services, summary_repo, staff):
    svc = services[RecordKind.WORK_ENTRY]
    draft = svc.create(current=staff, payload={**WORK, "isDraft": True})
    assert summary_repo.get(user_id=staff.user_id, start_date=CYCLE_START) is None

    svc.submit_draft(current=staff, record_id=draft.record_id)
    assert summary_repo.get(user_id=staff.user_id, start_date=CYCLE_START).total_minutes == 510


def test_deleting_entries_decrements_then_removes_summary(services, summary_repo, staff):
    svc = services[RecordKind.WORK_ENTRY]
    first = svc.create(current=staff, payload=WORK)
    second = svc.create(current=staff, payload={"date": "2025-03-19", "start": "22:00", "end": "06:00"})
    assert summary_repo.get(user_id=staff.user_id, start_date=CYCLE_START).total_minutes == 510 + 480

    svc.delete(current=staff, record_id=second.record_id)
    assert summary_repo.get(user_id=staff.user_id, start_date=CYCLE_START).total_minutes == 510

    svc.delete(current=staff, record_id=first.record_id)
    assert summary_repo.get(user_id=staff.user_id, start_date=CYCLE_START) is None


def test_edit_moves_minutes_between_cycles(services, summary_repo, staff):
    svc = services[RecordKind.WORK_ENTRY]
    entry = svc.create(current=staff, payload=WORK)
    svc.edit(current=staff, record_id=entry.record_id, patch={"date": "2025-04-01"})

    assert summary_repo.get(user_id=staff.user_id, start_date=CYCLE_START) is None
    assert summary_repo.get(user_id=staff.user_id, start_date=date(2025, 3, 31)).total_minutes == 510


def test_edit_within_cycle_updates_total(services, summary_tracker, staff):
    svc = services[RecordKind.WORK_ENTRY]
    entry = svc.create(current=staff, payload=WORK)
    svc.create(current=staff, payload={"date": "2025-03-20", "start": "08:00", "end": "12:00"})
    svc.edit(current=staff, record_id=entry.record_id, patch={"end": "18:00"})

    summary = summary_tracker.summary_for(user_id=staff.user_id, entry_date=date(2025, 3, 18))
    assert summary.total_minutes == 540 + 240


def test_other_kinds_do_not_touch_summary(services, summary_repo, staff):
    services[RecordKind.LEAVE_HOURS].create(
        current=staff, payload={"leaveType": "annual", "date": "2025-03-18", "hours": 8}
    )
    assert summary_repo.rows == {}


def test_rejected_draft_joins_summary(services, summary_repo, staff, admin):
    svc = services[RecordKind.WORK_ENTRY]
    draft = svc.create(current=staff, payload={**WORK, "isDraft": True})
    svc.reject(current=admin, record_id=draft.record_id, reason="Wrong shift")

    assert summary_repo.get(user_id=staff.user_id, start_date=CYCLE_START).total_minutes == 510


def test_summaries_for_cycle(services, summary_tracker, staff, other_staff):
    svc = services[RecordKind.WORK_ENTRY]
    svc.create(current=staff, payload=WORK)
    svc.create(current=other_staff, payload={"date": "2025-03-10", "start": "10:00", "end": "12:00"})
    svc.create(current=other_staff, payload={"date": "2025-04-01", "start": "10:00", "end": "12:00"})

    cycle = cycle_containing(date(2025, 3, 17))
    totals = {s.user_id: s.total_minutes for s in summary_tracker.summaries_for_cycle(cycle)}
    assert totals == {staff.user_id: 510, other_staff.user_id: 120}
