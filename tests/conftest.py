from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from src.care_timesheet.care_timesheet.core.enums import Permission, RecordKind
from src.care_timesheet.care_timesheet.cycles.model import CycleConfig
from src.care_timesheet.care_timesheet.records.kinds import POLICIES
from src.care_timesheet.care_timesheet.records.service import RecordLifecycleService
from src.care_timesheet.care_timesheet.summaries.model import WeeklySummary
from src.care_timesheet.care_timesheet.summaries.tracker import WeeklySummaryTracker
from src.care_timesheet.care_timesheet.users.model import Identity


class FakeRecordRepo:
    """In-memory RecordRepository; update/delete honour the expected-status guard."""

    def __init__(self):
        self._next_id = 1
        self.rows = {}

    def create(self, record):
        rid = self._next_id
        self._next_id += 1
        self.rows[rid] = replace(record, record_id=rid)
        return rid

    def get(self, *, record_id):
        return self.rows.get(int(record_id))

    def list_records(
        self,
        *,
        user_id=None,
        start=None,
        end=None,
        include_drafts=False,
        status=None,
        include_deleted=False,
        limit=500,
    ):
        out = []
        for r in self.rows.values():
            if user_id is not None and r.user_id != str(user_id):
                continue
            if start is not None and r.record_date < start:
                continue
            if end is not None and r.record_date > end:
                continue
            if not include_drafts and r.is_draft:
                continue
            if status is not None and r.status != status:
                continue
            if not include_deleted and r.deleted:
                continue
            out.append(r)
        out.sort(key=lambda r: (r.created_at or datetime.min, r.record_id), reverse=True)
        return out if limit is None else out[:limit]

    def update(self, *, record_id, changes, expected_statuses):
        r = self.rows.get(int(record_id))
        if not r or r.deleted or r.status not in expected_statuses:
            return False
        self.rows[int(record_id)] = replace(r, **changes)
        return True

    def delete(self, *, record_id, expected_statuses):
        r = self.rows.get(int(record_id))
        if not r or r.deleted or r.status not in expected_statuses:
            return False
        del self.rows[int(record_id)]
        return True

    def count_active(self, *, user_id, start, end):
        return sum(
            1
            for r in self.rows.values()
            if r.user_id == str(user_id) and start <= r.record_date <= end and not r.is_draft and not r.deleted
        )


class FakeSummaryRepo:
    def __init__(self):
        self.rows = {}

    def increment(self, *, user_id, user_name, start_date, end_date, minutes):
        key = (str(user_id), start_date)
        current = self.rows.get(key)
        total = (current.total_minutes if current else 0) + int(minutes)
        self.rows[key] = WeeklySummary(
            user_id=str(user_id),
            user_name=user_name,
            start_date=start_date,
            end_date=end_date,
            total_minutes=max(total, 0),
        )

    def get(self, *, user_id, start_date):
        return self.rows.get((str(user_id), start_date))

    def delete(self, *, user_id, start_date):
        return self.rows.pop((str(user_id), start_date), None) is not None

    def list_for_cycle(self, *, start_date):
        return [s for (_, start), s in self.rows.items() if start == start_date]


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 3, 20, 9, 0, 0))


@pytest.fixture
def cycle_config():
    return CycleConfig()


@pytest.fixture
def staff():
    return Identity.build(user_id="auth0|staff-1", given_name="Jane", family_name="Carer", email="jane@example.com")


@pytest.fixture
def other_staff():
    return Identity.build(user_id="auth0|staff-2", given_name="Tom", family_name="Nurse", email="tom@example.com")


@pytest.fixture
def admin():
    return Identity.build(
        user_id="auth0|admin-1",
        given_name="Ada",
        family_name="Manager",
        email="ada@example.com",
        permissions=[p.value for p in Permission],
    )


@pytest.fixture
def record_repos():
    return {kind: FakeRecordRepo() for kind in POLICIES}


@pytest.fixture
def summary_repo():
    return FakeSummaryRepo()


@pytest.fixture
def summary_tracker(summary_repo, record_repos, cycle_config):
    return WeeklySummaryTracker(summary_repo, record_repos[RecordKind.WORK_ENTRY], cycle_config)


@pytest.fixture
def services(record_repos, summary_tracker, clock):
    return {
        kind: RecordLifecycleService(policy, record_repos[kind], summary_tracker=summary_tracker, clock=clock)
        for kind, policy in POLICIES.items()
    }
