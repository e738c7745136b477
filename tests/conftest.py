from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from staff_tracker.activity.lending import StubLendingRepository
from staff_tracker.attendance.model import AttendanceRecord
from staff_tracker.auth.model import AuthResult
from staff_tracker.container import assemble
from staff_tracker.core.exceptions import ApiError, ApiUnauthorizedError
from staff_tracker.employees.model import Employee, EmployeeFields
from staff_tracker.expenses.model import Expense, ExpenseDraft

FIXED_NOW = datetime(2025, 3, 15, 10, 0, 0)
TODAY = FIXED_NOW.date()


class InMemoryEmployees:
    def __init__(self, employees=()):
        self._by_id: Dict[int, Employee] = {e.employee_id: e for e in employees}
        self._next_id = max(self._by_id, default=0) + 1
        self.fail_reads = False

    def get_all(self) -> List[Employee]:
        if self.fail_reads:
            raise ApiError("down", status_code=503, path="/api/employees")
        return list(self._by_id.values())

    def create(self, fields: EmployeeFields) -> Employee:
        e = Employee(self._next_id, fields.name, fields.position, fields.email, fields.phone)
        self._by_id[e.employee_id] = e
        self._next_id += 1
        return e

    def update(self, employee_id: int, fields: EmployeeFields) -> Employee:
        if employee_id not in self._by_id:
            raise ApiError("not found", status_code=404, path=f"/api/employees/{employee_id}")
        e = Employee(employee_id, fields.name, fields.position, fields.email, fields.phone)
        self._by_id[employee_id] = e
        return e

    def delete(self, employee_id: int) -> bool:
        if employee_id not in self._by_id:
            raise ApiError("not found", status_code=404, path=f"/api/employees/{employee_id}")
        del self._by_id[employee_id]
        return True


class InMemoryAttendance:
    def __init__(self, records=()):
        self._by_key: Dict[Tuple[int, date], AttendanceRecord] = {}
        for r in records:
            self._by_key[(r.employee_id, r.work_date)] = r
        self.fail_for: set = set()
        self.fail_reads = False
        self.unauthorized = False
        self.mark_calls: List[AttendanceRecord] = []
        self.on_mark: Optional[Callable[[], None]] = None
        self.on_read: Optional[Callable[[], None]] = None
        self.get_all_calls = 0

    def _check_read(self):
        if self.unauthorized:
            raise ApiUnauthorizedError("Session expired, please sign in again", status_code=401)
        if self.fail_reads:
            raise ApiError("down", status_code=503, path="/api/attendance")

    def get_all(self) -> List[AttendanceRecord]:
        self.get_all_calls += 1
        self._check_read()
        return list(self._by_key.values())

    def get_by_date(self, work_date: date) -> List[AttendanceRecord]:
        rows = [r for r in self._by_key.values() if r.work_date == work_date]
        # Runs while this read is "in flight", before its rows are returned.
        if self.on_read:
            callback, self.on_read = self.on_read, None
            callback()
        self._check_read()
        return rows

    def get_range(self, start: date, end: date) -> List[AttendanceRecord]:
        self._check_read()
        return [r for r in self._by_key.values() if start <= r.work_date <= end]

    def mark(self, record: AttendanceRecord) -> AttendanceRecord:
        self.mark_calls.append(record)
        if self.on_mark:
            callback, self.on_mark = self.on_mark, None
            callback()
        if self.unauthorized:
            raise ApiUnauthorizedError("Session expired, please sign in again", status_code=401)
        if record.employee_id in self.fail_for:
            raise ApiError("boom", status_code=500, path="/api/attendance/mark")
        self._by_key[(record.employee_id, record.work_date)] = record
        return record

    def for_date(self, work_date: date) -> Dict[int, bool]:
        return {r.employee_id: r.present for r in self._by_key.values() if r.work_date == work_date}


class InMemoryExpenses:
    def __init__(self, expenses=()):
        self._by_id: Dict[str, Expense] = {e.expense_id: e for e in expenses}
        self._next_id = 100
        self.created: List[ExpenseDraft] = []
        self.fail_writes = False
        self.get_all_calls = 0

    def get_all(self) -> List[Expense]:
        self.get_all_calls += 1
        return list(self._by_id.values())

    def get_by_date(self, work_date: date) -> List[Expense]:
        return [e for e in self._by_id.values() if e.work_date == work_date]

    def get_range(self, start: date, end: date) -> List[Expense]:
        return [e for e in self._by_id.values() if start <= e.work_date <= end]

    def create(self, draft: ExpenseDraft) -> Expense:
        if self.fail_writes:
            raise ApiError("boom", status_code=500, path="/api/expenses")
        self.created.append(draft)
        self._next_id += 1
        e = Expense(
            expense_id=str(self._next_id),
            employee_id=draft.employee_id,
            work_date=draft.work_date,
            amount=draft.amount,
            category=draft.category,
            description=draft.description,
        )
        self._by_id[e.expense_id] = e
        return e

    def delete(self, expense_id: str) -> bool:
        if expense_id not in self._by_id:
            raise ApiError("not found", status_code=404, path=f"/api/expenses/{expense_id}")
        del self._by_id[expense_id]
        return True


class FakeAuth:
    def __init__(self, password: str = "secret"):
        self._password = password
        self.logged_out = False

    def login(self, password: str) -> AuthResult:
        if password != self._password:
            raise ApiError("bad credentials", status_code=401, path="/api/auth/login")
        return AuthResult(success=True, message="ok", token="tok-123", role="ADMIN")

    def verify(self, token: str) -> AuthResult:
        return AuthResult(success=token == "tok-123")

    def logout(self) -> AuthResult:
        self.logged_out = True
        return AuthResult(success=True)


@pytest.fixture
def fixed_now(monkeypatch):
    """Freeze the local clock used by every service and controller."""
    monkeypatch.setattr("staff_tracker.common.datekey.now_local", lambda: FIXED_NOW)
    return FIXED_NOW


@pytest.fixture
def employees_repo():
    return InMemoryEmployees(
        [
            Employee(1, "Alice", "Painter"),
            Employee(2, "Bob", "Carpenter"),
            Employee(3, "Carol", "Electrician"),
        ]
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def expenses_repo():
    return InMemoryExpenses()


@pytest.fixture
def auth_repo():
    return FakeAuth()


@pytest.fixture
def container(employees_repo, attendance_repo, expenses_repo, auth_repo):
    return assemble(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        expenses_repo=expenses_repo,
        auth_repo=auth_repo,
        lending_repo=StubLendingRepository(now_fn=lambda: FIXED_NOW),
    )


@pytest.fixture
def app(monkeypatch, container, fixed_now):
    from staff_tracker import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(settings_overrides={"TESTING": True}, container=container)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    with client.session_transaction() as s:
        s["auth_token"] = "tok-123"
    return client


@pytest.fixture
def attendance_factory():
    return InMemoryAttendance
