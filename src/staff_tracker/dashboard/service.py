from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from ..activity.feed import ActivityFeed
from ..activity.model import ActivityEvent
from ..attendance.service import AttendanceService
from ..common.datekey import today_local
from ..core.constants import DASHBOARD_ACTIVITY_LIMIT
from ..employees.service import EmployeeService
from ..expenses.service import ExpenseService


@dataclass(frozen=True)
class DashboardSummary:
    today: date
    total_employees: int = 0
    present_today: int = 0
    absent_today: int = 0
    total_expenses_today: Decimal = Decimal("0")
    recent_activity: List[ActivityEvent] = field(default_factory=list)
    names: Dict[int, str] = field(default_factory=dict)


class DashboardService:
    """Use case: today's headline numbers plus the latest activity."""

    def __init__(
        self,
        employees: EmployeeService,
        attendance: AttendanceService,
        expenses: ExpenseService,
        feed: ActivityFeed,
    ):
        self._employees = employees
        self._attendance = attendance
        self._expenses = expenses
        self._feed = feed

    def summary(self, *, today: Optional[date] = None, activity_limit: int = DASHBOARD_ACTIVITY_LIMIT) -> DashboardSummary:
        """Raises FetchError when any source cannot be read."""

        today = today or today_local()
        employees = self._employees.list_all()
        attendance = list(self._attendance.list_all())
        expenses = list(self._expenses.list_all())
        today_records = [r for r in attendance if r.work_date == today]
        today_expenses = [e for e in expenses if e.work_date == today]

        present = sum(1 for r in today_records if r.present)
        recent = self._feed.recent(attendance, expenses, limit=activity_limit)

        return DashboardSummary(
            today=today,
            total_employees=len(employees),
            present_today=present,
            absent_today=len(today_records) - present,
            total_expenses_today=sum((e.amount for e in today_expenses), Decimal("0")),
            recent_activity=recent,
            names=self._employees.names_by_id(employees),
        )
