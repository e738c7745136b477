from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Union

from ..common.datekey import to_key
from ..core.enums import ActivityType, ExpenseCategory


@dataclass(frozen=True)
class LendingRecord:
    """An item lent to an employee. ``timestamp`` is when it was handed out."""

    employee_id: int
    item: str
    lent_on: date
    return_date: date
    timestamp: datetime


@dataclass(frozen=True)
class AttendanceActivity:
    employee_id: int
    work_date: date
    present: bool
    timestamp: datetime
    type: ActivityType = field(default=ActivityType.ATTENDANCE, init=False)

    @property
    def status(self) -> str:
        return "present" if self.present else "absent"


@dataclass(frozen=True)
class ExpenseActivity:
    employee_id: int
    work_date: date
    amount: Decimal
    category: ExpenseCategory
    timestamp: datetime
    type: ActivityType = field(default=ActivityType.EXPENSE, init=False)


@dataclass(frozen=True)
class LendingActivity:
    employee_id: int
    item: str
    work_date: date
    return_date: date
    timestamp: datetime
    type: ActivityType = field(default=ActivityType.LENDING, init=False)


ActivityEvent = Union[AttendanceActivity, ExpenseActivity, LendingActivity]


def event_to_dict(event: ActivityEvent) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "type": event.type.value,
        "employee_id": event.employee_id,
        "date": to_key(event.work_date),
        "timestamp": event.timestamp.isoformat(timespec="seconds"),
    }
    if isinstance(event, AttendanceActivity):
        data["status"] = event.status
    elif isinstance(event, ExpenseActivity):
        data["amount"] = f"{event.amount:.2f}"
        data["category"] = event.category.value
    else:
        data["item"] = event.item
        data["return_date"] = to_key(event.return_date)
    return data
