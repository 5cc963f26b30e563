from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest
import pytz

from church_attendance.checkin.model import QRSession
from church_attendance.container import wire_services
from church_attendance.core.exceptions import ConfigurationError
from church_attendance.main import create_app
from fakes import InMemoryAttendance, InMemoryDepartments, InMemoryMembers, InMemoryQRSessions, member, rec


@pytest.fixture
def store():
    attendance = InMemoryAttendance(
        [
            rec("a", "2026-02-01"),
            rec("b", "2026-02-01", present=False),
            rec("a", "2026-02-03", "department_meeting"),
        ]
    )
    sessions = InMemoryQRSessions(
        [
            QRSession(
                id="qr_open",
                date="2026-02-04",
                session_type="midweek_fellowship",
                session_name="midweek fellowship - 2026-02-04",
                expires_at=datetime.now(pytz.UTC) + timedelta(hours=1),
            ),
            QRSession(
                id="qr_old",
                date="2026-01-28",
                session_type="midweek_fellowship",
                session_name="midweek fellowship - 2026-01-28",
                expires_at=datetime(2026, 1, 28, 22, tzinfo=pytz.UTC),
            ),
        ]
    )
    return attendance, sessions


@pytest.fixture
def app(store, monkeypatch):
    monkeypatch.setattr("church_attendance.stats.service.today_in", lambda tz: date(2026, 2, 4))
    attendance, sessions = store
    container = wire_services(
        members_repo=InMemoryMembers([member("a", phone="0712345678"), member("b")]),
        departments_repo=InMemoryDepartments({"choir": ["a"]}),
        attendance_repo=attendance,
        qr_sessions_repo=sessions,
        site_url="https://church.example",
    )
    return create_app(settings_module="config.testing", container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def test_stats_envelope(client):
    resp = client.get("/api/attendance/stats?period=monthly")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["period"] == {"type": "monthly", "startDate": "2026-02-01", "endDate": "2026-02-04"}
    assert data["overview"]["presentCount"] == 2
    assert data["overview"]["absentCount"] == 1
    assert data["overview"]["attendanceRate"] == 66.67
    assert data["overview"]["totalSessions"] == 2
    assert data["trendData"][0] == {
        "date": "2026-02-01",
        "church_services": 50.0,
        "department_meetings": 0.0,
        "zone_meetings": 0.0,
    }


def test_stats_department_and_type_filters(client):
    data = client.get("/api/attendance/stats?department_id=choir&type=sunday_service").get_json()["data"]

    assert data["overview"]["totalMembers"] == 1
    assert data["overview"]["presentCount"] == 1
    assert [s["type"] for s in data["typeStats"]] == ["sunday_service"]


def test_stats_rejects_unknown_period(client):
    resp = client.get("/api/attendance/stats?period=daily")

    assert resp.status_code == 400
    assert "daily" in resp.get_json()["error"]


def test_stats_fetch_failure_hides_details_in_production(client, store):
    attendance, _ = store
    attendance.failing_ranges.add(("2026-02-01", "2026-02-04"))

    resp = client.get("/api/attendance/stats")

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to fetch attendance data"}


def test_stats_fetch_failure_includes_details_in_debug(app, store):
    app.config["DEBUG"] = True
    attendance, _ = store
    attendance.failing_ranges.add(("2026-02-01", "2026-02-04"))

    body = app.test_client().get("/api/attendance/stats").get_json()

    assert body["error"] == "Failed to fetch attendance data"
    assert body["details"] == "store unavailable"


def test_weekly_stats_survive_previous_week_failure(client, store):
    attendance, _ = store
    attendance.failing_ranges.add(("2026-01-25", "2026-01-31"))

    resp = client.get("/api/attendance/stats?period=weekly")

    assert resp.status_code == 200
    assert resp.get_json()["data"]["overview"]["weeklyTrend"] == 0


def test_stats_csv_export(client):
    resp = client.get("/api/attendance/stats.csv?period=monthly")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attendance_monthly_2026-02-01_2026-02-04.csv" in resp.headers["Content-Disposition"]
    text = resp.data.decode("utf-8-sig").splitlines()
    assert text[0] == "date,attendance_type,present,absent,total,percentage"
    assert text[1] == "2026-02-01,sunday_service,1,1,2,50.00"


def test_save_attendance(client, store):
    attendance, sessions = store

    resp = client.post(
        "/api/attendance",
        json={
            "attendanceRecords": [{"member_id": "a", "present": True}, {"member_id": "b", "present": True}],
            "sessionInfo": {"date": "2026-02-08", "attendance_type": "sunday_service", "recorded_by": "usher"},
        },
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["data"]["recordCount"] == 2
    assert sessions.get("2026-02-08_sunday_service_regular").check_ins == 2
    assert len([r for r in attendance.records if r.date == "2026-02-08"]) == 2


@pytest.mark.parametrize(
    "payload, message",
    [
        ({}, "Missing required fields: attendanceRecords and sessionInfo"),
        (
            {"attendanceRecords": [{"member_id": "a", "present": True}], "sessionInfo": {"date": "2026-02-08"}},
            "Missing required session info: date and attendance_type",
        ),
        (
            {
                "attendanceRecords": [{"member_id": "a"}],
                "sessionInfo": {"date": "2026-02-08", "attendance_type": "sunday_service"},
            },
            "Each attendance record must have member_id and present fields",
        ),
    ],
)
def test_save_attendance_validation(client, payload, message):
    resp = client.post("/api/attendance", json=payload)

    assert resp.status_code == 400
    assert resp.get_json() == {"error": message}


def test_list_attendance(client):
    body = client.get("/api/attendance?date=2026-02-01&type=sunday_service").get_json()

    assert body["message"] == "Found 2 attendance records"
    assert client.get("/api/attendance").status_code == 400


def test_member_summary_route(client):
    assert client.get("/api/members/a/attendance-summary").get_json()["data"]["total_sessions"] == 2
    assert client.get("/api/members/zzz/attendance-summary").status_code == 404


def test_qr_session_lifecycle(client):
    created = client.post(
        "/api/attendance/qr-session",
        json={"date": "2026-02-08", "attendance_type": "sunday_service", "recorded_by": "pastor"},
    )
    assert created.status_code == 200
    session_id = created.get_json()["data"]["session_id"]
    assert created.get_json()["data"]["check_in_url"] == f"https://church.example/attendance/qr-checkin/{session_id}"

    info = client.get(f"/api/attendance/qr-session?session_id={session_id}").get_json()["data"]
    assert info["session_name"] == "sunday service - 2026-02-08"

    png = client.get(f"/api/attendance/qr-session/{session_id}/qr.png")
    assert png.mimetype == "image/png"
    assert png.data.startswith(b"\x89PNG")


def test_qr_session_missing_and_expired(client):
    assert client.get("/api/attendance/qr-session?session_id=nope").status_code == 404
    assert client.get("/api/attendance/qr-session?session_id=qr_old").status_code == 410
    assert client.get("/api/attendance/qr-session").status_code == 400


def test_qr_checkin_and_stats(client):
    resp = client.post("/api/attendance/qr-checkin", json={"session_id": "qr_open", "phone_number": "0712345678"})

    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Welcome! Firsta Lasta has been checked in successfully."

    stats = client.get("/api/attendance/qr-checkin?session_id=qr_open").get_json()["data"]
    assert stats["qr_checkins"] == 1
    assert stats["session_status"] == "active"


def test_qr_checkin_unknown_member(client):
    resp = client.post("/api/attendance/qr-checkin", json={"session_id": "qr_open", "member_number": "X-1"})

    assert resp.status_code == 404
    assert "Member number: X-1" in resp.get_json()["error"]


def test_unknown_timezone_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        wire_services(
            members_repo=InMemoryMembers(),
            departments_repo=InMemoryDepartments(),
            attendance_repo=InMemoryAttendance(),
            qr_sessions_repo=InMemoryQRSessions(),
            timezone="Mars/Olympus",
        )


@pytest.mark.parametrize(
    "path",
    ["/api/attendance", "/api/attendance/qr-session", "/api/attendance/qr-checkin"],
)
def test_post_with_non_object_body_is_rejected(client, path):
    resp = client.post(path, json=[{"member_id": "a", "present": True}])

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Request body must be a JSON object"}


def test_save_attendance_with_string_session_info(client, store):
    attendance, _ = store

    resp = client.post(
        "/api/attendance",
        json={"attendanceRecords": [{"member_id": "a", "present": True}], "sessionInfo": "x"},
    )

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "sessionInfo must be a JSON object"}
    assert len(attendance.records) == 3
