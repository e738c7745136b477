from __future__ import annotations

from datetime import date
from decimal import Decimal

from staff_tracker.attendance.model import AttendanceRecord
from staff_tracker.core.enums import ExpenseCategory
from staff_tracker.expenses.model import ExpenseDraft

TODAY = date(2025, 3, 15)


def _messages(resp):
    return [n["message"] for n in resp.get_json()["notifications"]]


def _seed(attendance_repo, expenses_repo):
    attendance_repo.mark(AttendanceRecord(1, TODAY, True))
    attendance_repo.mark(AttendanceRecord(2, TODAY, False))
    attendance_repo.mark(AttendanceRecord(3, date(2025, 3, 10), True))
    expenses_repo.create(ExpenseDraft(2, TODAY, Decimal("150.00"), ExpenseCategory.MATERIALS, "Paint"))


# --- session gate -----------------------------------------------------


def test_protected_pages_redirect_to_login(client):
    for path in ("/dashboard", "/attendance", "/expenses", "/reports", "/employees", "/menu", "/attendance/calendar"):
        resp = client.get(path)
        assert resp.status_code == 302, path
        assert resp.headers["Location"].endswith("/login")


def test_root_redirects_to_login_when_signed_out(client):
    resp = client.get("/")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")
    assert client.get("/login").status_code == 200


def test_signed_in_users_skip_the_login_page(auth_client):
    for path in ("/", "/login"):
        resp = auth_client.get(path)
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/dashboard")


def test_login(client):
    resp = client.post("/login", data={"password": "nope"})
    assert resp.status_code == 401
    assert "Invalid password" in _messages(resp)

    resp = client.post("/login", data={"password": "secret"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard")
    with client.session_transaction() as s:
        assert s["auth_token"] == "tok-123"


def test_logout_clears_the_session(auth_client, auth_repo):
    resp = auth_client.post("/logout")
    assert resp.status_code == 302
    assert auth_repo.logged_out
    with auth_client.session_transaction() as s:
        assert "auth_token" not in s


def test_verify_and_menu(auth_client):
    assert auth_client.get("/auth/verify").get_json() == {"success": True}
    items = auth_client.get("/menu").get_json()["items"]
    assert [i["href"] for i in items] == ["/dashboard", "/attendance", "/expenses", "/employees", "/reports"]


def test_api_rejecting_the_token_signs_the_user_out(auth_client, attendance_repo):
    attendance_repo.unauthorized = True

    resp = auth_client.get("/reports")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")
    with auth_client.session_transaction() as s:
        assert "auth_token" not in s


# --- dashboard --------------------------------------------------------


def test_dashboard(auth_client, attendance_repo, expenses_repo):
    _seed(attendance_repo, expenses_repo)

    data = auth_client.get("/dashboard").get_json()

    assert data["date"] == "2025-03-15"
    assert (data["total_employees"], data["present_today"], data["absent_today"]) == (3, 1, 1)
    assert data["total_expenses_today"] == "150.00"
    assert len(data["recent_activity"]) == 5
    assert data["recent_activity"][0]["message"] == "Alice borrowed Ladder (due: Mar 22, 2025)"


def test_dashboard_renders_empty_state_when_the_api_is_down(auth_client, employees_repo):
    employees_repo.fail_reads = True

    resp = auth_client.get("/dashboard")

    assert resp.status_code == 200
    assert resp.get_json()["total_employees"] == 0
    assert "Failed to load data. Please try again." in _messages(resp)


# --- attendance -------------------------------------------------------


def test_attendance_defaults_to_today(auth_client):
    data = auth_client.get("/attendance").get_json()

    assert data["date"] == "2025-03-15"
    assert [r["status"] for r in data["rows"]] == [None, None, None]
    assert data["summary"] == {"present": 0, "absent": 0, "unmarked": 3, "total": 3}
    assert len(data["calendar"]["weeks"]) == 6
    assert data["calendar"]["month"] == "2025-03"


def test_mark_and_save(auth_client, attendance_repo):
    auth_client.get("/attendance?date=2025-03-14")
    auth_client.post("/attendance/toggle", data={"employee_id": "1", "present": "1"})
    resp = auth_client.post("/attendance/toggle", data={"employee_id": "2", "present": "0"})
    assert resp.get_json()["summary"] == {"present": 1, "absent": 1, "unmarked": 1, "total": 3}

    resp = auth_client.post("/attendance/save")

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["dirty"] is False
    assert attendance_repo.for_date(date(2025, 3, 14)) == {1: True, 2: False}
    days = {d["date"]: d for week in data["calendar"]["weeks"] for d in week}
    assert days["2025-03-14"]["has_attendance"] is True


def test_toggle_twice_clears(auth_client):
    auth_client.get("/attendance?date=2025-03-14")
    auth_client.post("/attendance/toggle", data={"employee_id": "1", "present": "1"})
    resp = auth_client.post("/attendance/toggle", data={"employee_id": "1", "present": "1"})
    assert resp.get_json()["status"] is None

    resp = auth_client.post("/attendance/clear", data={"employee_id": "2"})
    assert resp.get_json()["status"] is None


def test_switching_dates_with_unsaved_changes_needs_confirmation(auth_client):
    auth_client.get("/attendance?date=2025-03-14")
    auth_client.post("/attendance/toggle", data={"employee_id": "1", "present": "1"})

    resp = auth_client.get("/attendance?date=2025-03-13")
    assert resp.status_code == 409
    data = resp.get_json()
    assert data["date"] == "2025-03-14"
    assert data["pending_date"] == "2025-03-13"
    assert data["rows"][0]["status"] == "present"

    resp = auth_client.get("/attendance?date=2025-03-13&confirm=1")
    assert resp.status_code == 200
    assert resp.get_json()["date"] == "2025-03-13"
    assert resp.get_json()["dirty"] is False


def test_failed_save_stays_dirty(auth_client, attendance_repo):
    attendance_repo.fail_for = {2}
    auth_client.get("/attendance?date=2025-03-14")
    auth_client.post("/attendance/toggle", data={"employee_id": "1", "present": "1"})
    auth_client.post("/attendance/toggle", data={"employee_id": "2", "present": "1"})

    resp = auth_client.post("/attendance/save")

    assert resp.status_code == 502
    data = resp.get_json()
    assert data["dirty"] is True
    assert (data["saved"], data["failed"]) == ([1], [2])
    assert "Failed to save attendance. Please try again." in _messages(resp)


def test_toggle_rejects_unknown_employee(auth_client):
    auth_client.get("/attendance?date=2025-03-14")
    resp = auth_client.post("/attendance/toggle", data={"employee_id": "42", "present": "1"})
    assert resp.status_code == 400


def _same_session(app, client):
    """A second browser tab sharing the signed-in session cookie."""
    name = app.config["SESSION_COOKIE_NAME"]
    other = app.test_client()
    other.set_cookie(name, client.get_cookie(name).value)
    return other


def test_overlapping_date_loads_keep_the_newest(app, auth_client, attendance_repo):
    attendance_repo.mark(AttendanceRecord(1, date(2025, 3, 10), True))
    attendance_repo.mark(AttendanceRecord(1, date(2025, 3, 12), False))
    auth_client.get("/attendance")
    other_tab = _same_session(app, auth_client)
    inner = []
    # The 03-12 request starts and finishes while the 03-10 read is still pending.
    attendance_repo.on_read = lambda: inner.append(other_tab.get("/attendance?date=2025-03-12"))

    resp = auth_client.get("/attendance?date=2025-03-10")

    assert inner[0].get_json()["date"] == "2025-03-12"
    data = resp.get_json()
    assert data["date"] == "2025-03-12"
    assert data["superseded"] == "2025-03-10"
    assert data["rows"][0]["status"] == "absent"
    assert auth_client.get("/attendance").get_json()["date"] == "2025-03-12"


def test_edits_for_a_date_the_board_left_are_rejected(auth_client, attendance_repo):
    auth_client.get("/attendance?date=2025-03-14")
    auth_client.get("/attendance?date=2025-03-13")

    resp = auth_client.post("/attendance/toggle", data={"employee_id": "1", "present": "1", "date": "2025-03-14"})
    assert resp.status_code == 409
    assert resp.get_json()["date"] == "2025-03-13"

    assert auth_client.post("/attendance/clear", data={"employee_id": "1", "date": "2025-03-14"}).status_code == 409
    assert auth_client.post("/attendance/save", data={"date": "2025-03-14"}).status_code == 409
    assert attendance_repo.mark_calls == []

    resp = auth_client.post("/attendance/toggle", data={"employee_id": "1", "present": "1", "date": "2025-03-13"})
    assert resp.status_code == 200


def test_failed_load_still_lets_the_user_mark_and_save(auth_client, attendance_repo):
    auth_client.get("/attendance")
    attendance_repo.fail_reads = True

    resp = auth_client.get("/attendance?date=2025-03-12")

    assert "Failed to load attendance data for selected date." in _messages(resp)
    data = resp.get_json()
    assert data["date"] == "2025-03-12"
    assert [r["status"] for r in data["rows"]] == [None, None, None]

    attendance_repo.fail_reads = False
    resp = auth_client.post("/attendance/toggle", data={"employee_id": "1", "present": "1"})
    assert resp.status_code == 200
    resp = auth_client.post("/attendance/save")
    assert resp.status_code == 200
    assert attendance_repo.for_date(date(2025, 3, 12)) == {1: True}


def test_saving_with_nothing_marked_is_not_reported_as_saved(auth_client, attendance_repo):
    auth_client.get("/attendance?date=2025-03-12")

    resp = auth_client.post("/attendance/save")

    assert resp.status_code == 200
    messages = _messages(resp)
    assert "Mark at least one employee before saving" in messages
    assert not any(m.startswith("Attendance saved successfully") for m in messages)
    days = {d["date"]: d for week in resp.get_json()["calendar"]["weeks"] for d in week}
    assert days["2025-03-12"]["has_attendance"] is False
    assert attendance_repo.mark_calls == []


def test_calendar_navigation(auth_client):
    data = auth_client.get("/attendance/calendar?month=2025-01&direction=next").get_json()
    assert data["calendar"]["month"] == "2025-02"

    data = auth_client.get("/attendance/calendar?direction=prev").get_json()
    assert data["calendar"]["month"] == "2025-01"


# --- expenses / employees --------------------------------------------


def test_expense_form(auth_client, expenses_repo):
    resp = auth_client.post("/expenses", data={"employee_id": "", "amount": "10", "description": "x"})
    assert resp.status_code == 400
    assert "Please select an employee" in _messages(resp)
    assert expenses_repo.created == []

    resp = auth_client.post(
        "/expenses", data={"employee_id": "2", "amount": "150", "category": "Materials", "description": "Paint"}
    )
    assert resp.status_code == 200
    (row,) = resp.get_json()["expenses"]
    assert (row["employee"], row["amount"], row["date"]) == ("Bob", "150.00", "2025-03-15")

    resp = auth_client.post(f"/expenses/{row['id']}/delete")
    assert resp.status_code == 200
    assert resp.get_json()["expenses"] == []


def test_employee_roster(auth_client):
    resp = auth_client.post("/employees", data={"name": "Dave", "position": "Helper"})
    assert resp.status_code == 200
    assert "Dave" in [e["name"] for e in resp.get_json()["employees"]]

    assert auth_client.post("/employees", data={"name": ""}).status_code == 400
    assert auth_client.post("/employees/99", data={"name": "X"}).status_code == 404
    assert auth_client.post("/employees/1/delete").status_code == 200


# --- reports ----------------------------------------------------------


def test_reports_default_filters(auth_client, attendance_repo, expenses_repo):
    _seed(attendance_repo, expenses_repo)

    data = auth_client.get("/reports").get_json()

    assert data["filters"]["month"] == "2025-03"
    assert data["attendance"]["stats"]["total_records"] == 3
    assert data["expenses"]["stats"] == {"total_amount": "150.00", "expense_count": 1}
    assert [g["date"] for g in data["attendance"]["groups"]] == ["2025-03-15", "2025-03-10"]
    assert len(data["recent_activity"]) <= 10
    assert len(data["month_options"]) == 13


def test_reports_search(auth_client, attendance_repo, expenses_repo):
    _seed(attendance_repo, expenses_repo)

    data = auth_client.get("/reports?q=carol").get_json()

    assert data["attendance"]["stats"]["total_records"] == 1
    assert data["expenses"]["rows"] == []


def test_export_attendance(auth_client, attendance_repo, expenses_repo):
    _seed(attendance_repo, expenses_repo)

    resp = auth_client.get("/reports/export/attendance?month=2025-03")

    assert resp.status_code == 200
    assert resp.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert "attendance-report-2025-03.xlsx" in resp.headers["Content-Disposition"]


def test_export_without_rows_redirects_back(auth_client):
    resp = auth_client.get("/reports/export/expenses?month=2025-03")
    assert resp.status_code == 302
    assert "/reports" in resp.headers["Location"]


def test_pages_read_each_collection_once(auth_client, attendance_repo, expenses_repo):
    _seed(attendance_repo, expenses_repo)

    auth_client.get("/reports")
    assert (attendance_repo.get_all_calls, expenses_repo.get_all_calls) == (1, 1)

    auth_client.get("/dashboard")
    assert (attendance_repo.get_all_calls, expenses_repo.get_all_calls) == (2, 2)
