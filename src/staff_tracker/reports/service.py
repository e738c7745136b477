from __future__ import annotations

from typing import Dict, List, Optional

from ..activity.feed import ActivityFeed
from ..activity.model import ActivityEvent
from ..attendance.service import AttendanceService
from ..core.constants import DEFAULT_CURRENCY_SYMBOL, REPORT_ACTIVITY_LIMIT
from ..employees.model import Employee
from ..employees.service import EmployeeService
from ..expenses.service import ExpenseService
from .aggregator import ReportAggregator
from .export import attendance_rows, export_filename, expense_rows, rows_to_xlsx
from .filters import FilterSpec


class ReportService:
    """Use case: load every collection once and run the report pipeline over it."""

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

    def aggregator(self, spec: FilterSpec) -> ReportAggregator:
        """Raises FetchError when a collection cannot be read."""

        employees: List[Employee] = list(self._employees.list_all())
        names: Dict[int, str] = self._employees.names_by_id(employees)
        return ReportAggregator(self._attendance.list_all(), self._expenses.list_all(), names, spec)

    def recent_activity(self, agg: ReportAggregator, *, limit: int = REPORT_ACTIVITY_LIMIT) -> List[ActivityEvent]:
        """Latest events over the collections the aggregator already holds."""
        return self._feed.recent(agg.attendance, agg.expenses, limit=limit)

    def export_attendance(self, spec: FilterSpec):
        """(buffer, filename), or None when the filtered set is empty."""

        agg = self.aggregator(spec)
        rows = attendance_rows(agg.filtered_attendance(), agg.names)
        if rows is None:
            return None
        return rows_to_xlsx(rows), export_filename("attendance", spec.month)

    def export_expenses(self, spec: FilterSpec, *, currency: Optional[str] = None):
        agg = self.aggregator(spec)
        rows = expense_rows(agg.filtered_expenses(), agg.names, currency=currency or DEFAULT_CURRENCY_SYMBOL)
        if rows is None:
            return None
        return rows_to_xlsx(rows), export_filename("expense", spec.month)
