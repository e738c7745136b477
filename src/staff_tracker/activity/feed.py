"""Reverse-chronological activity timeline.

Attendance and expense events are stamped with local midnight of their
DateKey; lending events carry their own timestamp. Equal timestamps keep the
order attendance, expense, lending (then source order).
"""
from __future__ import annotations

from datetime import date, datetime, time
from typing import Iterable, List, Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import DEFAULT_CURRENCY_SYMBOL
from ..employees.model import resolve_name
from ..expenses.model import Expense
from .lending import LendingRepository
from .model import (
    ActivityEvent,
    AttendanceActivity,
    ExpenseActivity,
    LendingActivity,
    LendingRecord,
)


def day_timestamp(value: date) -> datetime:
    return datetime.combine(value, time.min)


def to_events(
    attendance: Iterable[AttendanceRecord],
    expenses: Iterable[Expense],
    lending: Iterable[LendingRecord],
) -> List[ActivityEvent]:
    events: List[ActivityEvent] = []
    for r in attendance:
        events.append(
            AttendanceActivity(
                employee_id=r.employee_id, work_date=r.work_date, present=r.present, timestamp=day_timestamp(r.work_date)
            )
        )
    for e in expenses:
        events.append(
            ExpenseActivity(
                employee_id=e.employee_id,
                work_date=e.work_date,
                amount=e.amount,
                category=e.category,
                timestamp=day_timestamp(e.work_date),
            )
        )
    for loan in lending:
        events.append(
            LendingActivity(
                employee_id=loan.employee_id,
                item=loan.item,
                work_date=loan.lent_on,
                return_date=loan.return_date,
                timestamp=loan.timestamp,
            )
        )
    return events


def merge(
    attendance: Iterable[AttendanceRecord],
    expenses: Iterable[Expense],
    lending: Iterable[LendingRecord],
    limit: Optional[int] = None,
) -> List[ActivityEvent]:
    """Newest first, truncated to ``limit`` (no truncation when None)."""

    # sorted() is stable, also with reverse=True.
    events = sorted(to_events(attendance, expenses, lending), key=lambda ev: ev.timestamp, reverse=True)
    if limit is not None:
        events = events[: max(int(limit), 0)]
    return events


def format_date(value: date) -> str:
    # e.g. "Mar 5, 2025"
    return f"{value:%b} {value.day}, {value.year}"


def format_activity_message(
    event: ActivityEvent, names: Mapping[int, str], *, currency: str = DEFAULT_CURRENCY_SYMBOL
) -> str:
    name = resolve_name(names, event.employee_id)
    if isinstance(event, AttendanceActivity):
        return f"{name} was marked {event.status} on {format_date(event.work_date)}"
    if isinstance(event, ExpenseActivity):
        return f"{name} submitted a {event.category.value} expense of {currency}{event.amount:.2f}"
    if isinstance(event, LendingActivity):
        return f"{name} borrowed {event.item} (due: {format_date(event.return_date)})"
    return ""


class ActivityFeed:
    """Merges the two persisted sources with whatever the lending source returns."""

    def __init__(self, lending: LendingRepository):
        self._lending = lending

    def recent(
        self,
        attendance: Sequence[AttendanceRecord],
        expenses: Sequence[Expense],
        *,
        limit: int,
    ) -> List[ActivityEvent]:
        return merge(attendance, expenses, self._lending.get_all(), limit)
