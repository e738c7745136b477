from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .activity.feed import ActivityFeed
from .activity.lending import LendingRepository, StubLendingRepository
from .attendance.board import BoardStore
from .attendance.http_attendance_repository import HttpAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.http_auth_repository import HttpAuthRepository
from .auth.repository import AuthRepository
from .auth.service import AuthService
from .common.web import session_token
from .dashboard.service import DashboardService
from .employees.http_employee_repository import HttpEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .expenses.http_expense_repository import HttpExpenseRepository
from .expenses.repository import ExpenseRepository
from .expenses.service import ExpenseService
from .gateway.connection import ApiConfig, ApiConnection
from .reports.service import ReportService


@dataclass(frozen=True)
class Container:
    conn: Optional[ApiConnection]

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    expenses_repo: ExpenseRepository
    lending_repo: LendingRepository
    auth_repo: AuthRepository

    employee_service: EmployeeService
    attendance_service: AttendanceService
    board_store: BoardStore
    expense_service: ExpenseService
    auth_service: AuthService
    activity_feed: ActivityFeed
    dashboard_service: DashboardService
    report_service: ReportService


def assemble(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    expenses_repo: ExpenseRepository,
    auth_repo: AuthRepository,
    lending_repo: Optional[LendingRepository] = None,
    conn: Optional[ApiConnection] = None,
) -> Container:
    """Wire services on top of any repository implementations (HTTP or in-memory)."""

    lending_repo = lending_repo or StubLendingRepository()

    employee_service = EmployeeService(employees_repo)
    attendance_service = AttendanceService(attendance_repo, employees_repo)
    expense_service = ExpenseService(expenses_repo)
    auth_service = AuthService(auth_repo)
    activity_feed = ActivityFeed(lending_repo)
    dashboard_service = DashboardService(employee_service, attendance_service, expense_service, activity_feed)
    report_service = ReportService(employee_service, attendance_service, expense_service, activity_feed)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        expenses_repo=expenses_repo,
        lending_repo=lending_repo,
        auth_repo=auth_repo,
        employee_service=employee_service,
        attendance_service=attendance_service,
        board_store=BoardStore(),
        expense_service=expense_service,
        auth_service=auth_service,
        activity_feed=activity_feed,
        dashboard_service=dashboard_service,
        report_service=report_service,
    )


def build_container(*, api_config: dict) -> Container:
    config = ApiConfig(
        base_url=str(api_config["base_url"]),
        timeout=float(api_config.get("timeout", 10.0)),
        retries=int(api_config.get("retries", 2)),
    )
    conn = ApiConnection.get_instance(config, token_provider=session_token)

    return assemble(
        employees_repo=HttpEmployeeRepository(conn),
        attendance_repo=HttpAttendanceRepository(conn),
        expenses_repo=HttpExpenseRepository(conn),
        auth_repo=HttpAuthRepository(conn),
        conn=conn,
    )
