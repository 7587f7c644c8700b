from __future__ import annotations

import pytest
from flask import Flask

from src.care_timesheet.care_timesheet.container import Container
from src.care_timesheet.care_timesheet.core.enums import Permission, RecordKind
from src.care_timesheet.care_timesheet.core.exceptions import DatabaseError
from src.care_timesheet.care_timesheet.main import register_routes
from src.care_timesheet.care_timesheet.payroll.service import CycleReportService


@pytest.fixture
def app(services, record_repos, summary_repo, summary_tracker, cycle_config, clock):
    app = Flask(__name__)
    app.secret_key = "test-secret"
    container = Container(
        conn=None,
        cycle_config=cycle_config,
        record_repos=record_repos,
        summaries_repo=summary_repo,
        summary_tracker=summary_tracker,
        lifecycle_services=services,
        cycle_report_service=CycleReportService(record_repos, cycle_config, hourly_rate=15, clock=clock),
    )
    register_routes(app, container)
    return app


def _login(client, identity):
    with client.session_transaction() as sess:
        sess["user_id"] = identity.user_id
        sess["name"] = identity.display_name
        sess["email"] = identity.email
        sess["permissions"] = sorted(identity.permissions)


@pytest.fixture
def staff_client(app, staff):
    client = app.test_client()
    _login(client, staff)
    return client


@pytest.fixture
def admin_client(app, admin):
    client = app.test_client()
    _login(client, admin)
    return client


def test_requires_login(app):
    resp = app.test_client().get("/api/records/work-entries")
    assert resp.status_code == 401


def test_create_and_list_work_entries(staff_client):
    resp = staff_client.post(
        "/api/records/work-entries", json={"date": "2025-03-18", "start": "09:00", "end": "17:30"}
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["status"] == "pending"
    assert body["minutes"] == 510

    listed = staff_client.get("/api/records/work-entries?startDate=2025-03-01&endDate=2025-03-31").get_json()
    assert [r["record_id"] for r in listed] == [body["record_id"]]


def test_validation_error_is_400(staff_client):
    resp = staff_client.post("/api/records/leave-hours", json={"leaveType": "sick", "date": "2025-03-18", "hours": 99})
    assert resp.status_code == 400
    assert "Hours" in resp.get_json()["error"]


def test_unknown_kind_is_404(staff_client):
    assert staff_client.get("/api/records/overtime").status_code == 404


def test_approve_requires_permission(staff_client, admin_client):
    created = staff_client.post(
        "/api/records/leave-hours", json={"leaveType": "sick", "date": "2025-03-18", "hours": 4.5}
    ).get_json()
    rid = created["record_id"]

    assert staff_client.post(f"/api/admin/records/leave-hours/{rid}/approve").status_code == 403

    resp = admin_client.post(f"/api/admin/records/leave-hours/{rid}/approve")
    assert resp.status_code == 200
    assert resp.get_json()["approved_by"] == "ada@example.com"

    again = admin_client.post(f"/api/admin/records/leave-hours/{rid}/reject", json={"reason": "late"})
    assert again.status_code == 409

    deleted = staff_client.delete(f"/api/records/leave-hours/{rid}")
    assert deleted.status_code == 200
    assert deleted.get_json()["softDeleted"] is True


def test_approved_work_entry_delete_is_403(staff_client, admin_client):
    rid = staff_client.post(
        "/api/records/work-entries", json={"date": "2025-03-18", "start": "09:00", "end": "17:30"}
    ).get_json()["record_id"]
    admin_client.post(f"/api/admin/records/work-entries/{rid}/approve")
    resp = staff_client.delete(f"/api/records/work-entries/{rid}")
    assert resp.status_code == 403


def test_other_users_record_hidden(app, staff_client, other_staff):
    rid = staff_client.post(
        "/api/records/training",
        json={"trainingType": "skills", "title": "Dementia care", "date": "2025-03-18", "duration": 2},
    ).get_json()["record_id"]
    other = app.test_client()
    _login(other, other_staff)
    assert other.get(f"/api/records/training/{rid}").status_code == 403
    assert staff_client.get(f"/api/records/training/{rid}").status_code == 200


def test_payment_cycle_endpoint(staff_client):
    body = staff_client.get("/api/cycle").get_json()
    assert body["currentCycle"]["start"] == "2025-03-03"
    assert body["isGracePeriod"] is False
    assert body["displayCycle"]["message"] == "Showing current payment period"


def test_admin_summary_and_export(staff_client, admin_client):
    staff_client.post("/api/records/work-entries", json={"date": "2025-03-18", "start": "09:00", "end": "17:00"})

    assert staff_client.get("/api/admin/cycle/summary").status_code == 403

    summary = admin_client.get("/api/admin/cycle/summary").get_json()
    assert summary["rows"][0]["total_minutes"] == 480
    assert summary["rows"][0]["estimated_pay"] == 120.0

    xlsx = admin_client.get("/api/admin/cycle/summary.xlsx")
    assert xlsx.status_code == 200
    assert xlsx.data[:2] == b"PK"
    assert "cycle-summary-2025-03-03.xlsx" in xlsx.headers["Content-Disposition"]


def test_admin_weekly_summaries(staff_client, admin_client):
    staff_client.post("/api/records/work-entries", json={"date": "2025-03-18", "start": "09:00", "end": "17:30"})

    assert staff_client.get("/api/admin/cycle/weekly-summaries").status_code == 403

    body = admin_client.get("/api/admin/cycle/weekly-summaries").get_json()
    assert body["cycle"]["start"] == "2025-03-03"
    assert body["isGracePeriod"] is False
    assert len(body["summaries"]) == 1
    assert body["summaries"][0]["userId"] == "auth0|staff-1"
    assert body["summaries"][0]["startDate"] == "2025-03-03"
    assert body["summaries"][0]["totalMinutes"] == 510


def test_database_error_message_is_generic(app, staff_client, services, monkeypatch):
    def boom(**_):
        raise DatabaseError("Database operation failed")

    monkeypatch.setattr(services[RecordKind.WORK_ENTRY], "list_for_owner", boom)
    resp = staff_client.get("/api/records/work-entries")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal server error"}


def test_admin_delete_uses_reason(staff_client, admin_client, admin):
    assert Permission.DELETE_RECORDS.value in admin.permissions
    rid = staff_client.post(
        "/api/records/training",
        json={"trainingType": "safety", "title": "Fire", "date": "2025-03-18", "duration": 1},
    ).get_json()["record_id"]
    admin_client.post(f"/api/admin/records/training/{rid}/approve")

    resp = admin_client.delete(f"/api/admin/records/training/{rid}", json={"reason": "Duplicate entry"})
    assert resp.status_code == 200
    assert resp.get_json()["softDeleted"] is True

    record = admin_client.get(f"/api/records/training/{rid}").get_json()
    assert record["deleted"] is True
    assert record["deletion_reason"] == "Duplicate entry"
