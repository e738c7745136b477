"""Filter, sort and group attendance/expense collections for the reports page.

Everything here is a pure function of (records, employee names, FilterSpec).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar

from ..common.datekey import to_key
from ..core.enums import SortBy, SortOrder
from ..attendance.model import AttendanceRecord
from ..expenses.model import Expense
from .filters import FilterSpec

T = TypeVar("T", AttendanceRecord, Expense)


@dataclass(frozen=True)
class AttendanceStats:
    total_records: int
    present_days: int
    absent_days: int
    attendance_rate: float

    def as_dict(self) -> dict:
        return {
            "total_records": self.total_records,
            "present_days": self.present_days,
            "absent_days": self.absent_days,
            "attendance_rate": round(self.attendance_rate, 2),
        }


@dataclass(frozen=True)
class ExpenseStats:
    total_amount: Decimal
    expense_count: int

    def as_dict(self) -> dict:
        return {"total_amount": f"{self.total_amount:.2f}", "expense_count": self.expense_count}


@dataclass(frozen=True)
class AttendanceGroup:
    work_date: date
    records: List[AttendanceRecord]

    @property
    def date_key(self) -> str:
        return to_key(self.work_date)


def _name_key(name: str):
    return (name.casefold(), name)


def _sort_by_name(records: Iterable[T], names: Mapping[int, str], *, desc: bool = False) -> List[T]:
    records = list(records)
    # Unresolved employees go last, in their original order, whatever the direction.
    known = [r for r in records if r.employee_id in names]
    unknown = [r for r in records if r.employee_id not in names]
    return sorted(known, key=lambda r: _name_key(names[r.employee_id]), reverse=desc) + unknown


def _filter(
    records: Iterable[T],
    spec: FilterSpec,
    names: Mapping[int, str],
    haystack: Callable[[T, str], Sequence[str]],
) -> List[T]:
    anchor = spec.month_anchor
    query = spec.search_query.lower()
    out: List[T] = []
    for r in records:
        d = r.work_date
        if anchor is not None and (d.year, d.month) != (anchor.year, anchor.month):
            continue
        # Month and range both apply when both are set.
        if spec.date_range.is_set and not spec.date_range.contains(d):
            continue
        if spec.employee_id is not None and r.employee_id != spec.employee_id:
            continue
        if query:
            name = names.get(r.employee_id)
            if name is None:
                continue
            if not any(query in text.lower() for text in haystack(r, name)):
                continue
        out.append(r)
    return out


def _sort(records: List[T], spec: FilterSpec, names: Mapping[int, str], *, by_status: bool) -> List[T]:
    desc = spec.sort_order == SortOrder.DESC
    if spec.sort_by == SortBy.DATE:
        return sorted(records, key=lambda r: r.work_date, reverse=desc)
    if spec.sort_by == SortBy.NAME:
        return _sort_by_name(records, names, desc=desc)
    if spec.sort_by == SortBy.STATUS and by_status:
        # Descending puts present before absent.
        return sorted(records, key=lambda r: bool(r.present), reverse=desc)
    return list(records)


def filter_attendance(
    records: Iterable[AttendanceRecord], spec: FilterSpec, names: Mapping[int, str]
) -> List[AttendanceRecord]:
    rows = _filter(records, spec, names, lambda r, name: (name,))
    return _sort(rows, spec, names, by_status=True)


def filter_expenses(records: Iterable[Expense], spec: FilterSpec, names: Mapping[int, str]) -> List[Expense]:
    rows = _filter(records, spec, names, lambda e, name: (name, e.description, e.category.value))
    # Expenses have no status; a status sort keeps the filtered order.
    return _sort(rows, spec, names, by_status=False)


def attendance_stats(records: Sequence[AttendanceRecord]) -> AttendanceStats:
    total = len(records)
    present = sum(1 for r in records if r.present)
    return AttendanceStats(
        total_records=total,
        present_days=present,
        absent_days=total - present,
        attendance_rate=(present / total * 100) if total else 0.0,
    )


def expense_stats(records: Sequence[Expense]) -> ExpenseStats:
    return ExpenseStats(total_amount=sum((e.amount for e in records), Decimal("0")), expense_count=len(records))


def group_attendance_by_date(
    records: Iterable[AttendanceRecord], spec: FilterSpec, names: Mapping[int, str]
) -> List[AttendanceGroup]:
    """Groups ordered by date in the requested order; rows inside a group by name ascending."""

    by_date: Dict[date, List[AttendanceRecord]] = {}
    for r in records:
        by_date.setdefault(r.work_date, []).append(r)

    groups = [
        AttendanceGroup(
            work_date=d,
            records=_sort_by_name(rows, names),
        )
        for d, rows in by_date.items()
    ]
    return sorted(groups, key=lambda g: g.work_date, reverse=spec.sort_order == SortOrder.DESC)


class ReportAggregator:
    """Bundles the collections of one reports request with its FilterSpec."""

    def __init__(
        self,
        attendance: Sequence[AttendanceRecord],
        expenses: Sequence[Expense],
        names: Mapping[int, str],
        spec: Optional[FilterSpec] = None,
    ):
        self._attendance = list(attendance)
        self._expenses = list(expenses)
        self._names = dict(names)
        self.spec = spec or FilterSpec.default()

    def filtered_attendance(self) -> List[AttendanceRecord]:
        return filter_attendance(self._attendance, self.spec, self._names)

    def filtered_expenses(self) -> List[Expense]:
        return filter_expenses(self._expenses, self.spec, self._names)

    def attendance_stats(self) -> AttendanceStats:
        return attendance_stats(self.filtered_attendance())

    def expense_stats(self) -> ExpenseStats:
        return expense_stats(self.filtered_expenses())

    def grouped_attendance(self) -> List[AttendanceGroup]:
        return group_attendance_by_date(self.filtered_attendance(), self.spec, self._names)

    @property
    def attendance(self) -> List[AttendanceRecord]:
        return list(self._attendance)

    @property
    def expenses(self) -> List[Expense]:
        return list(self._expenses)

    @property
    def names(self) -> Dict[int, str]:
        return dict(self._names)
