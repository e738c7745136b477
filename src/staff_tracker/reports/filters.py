"""Report filter input.

A FilterSpec is built from the query string of the reports page and handed
unchanged to the aggregator and to the export routes, so both always see the
same rows.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from ..common.datekey import parse_key, parse_month_key, shift_month, to_key, to_month_key, today_local
from ..common.validators import require_int
from ..core.constants import ALL, REPORT_MONTH_OPTIONS
from ..core.enums import SortBy, SortOrder
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class DateRange:
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_set(self) -> bool:
        # A half-filled range does not filter.
        return self.start is not None and self.end is not None

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


@dataclass(frozen=True)
class FilterSpec:
    month: str = ALL
    employee_id: Optional[int] = None
    date_range: DateRange = DateRange()
    search_query: str = ""
    sort_by: SortBy = SortBy.DATE
    sort_order: SortOrder = SortOrder.DESC

    @classmethod
    def default(cls, today: Optional[date] = None) -> "FilterSpec":
        """Current month, every employee, newest first, no search and no range."""
        return cls(month=to_month_key(today or today_local()))

    @property
    def month_anchor(self) -> Optional[date]:
        return None if self.month == ALL else parse_month_key(self.month)

    @classmethod
    def from_args(cls, args: Mapping[str, Any], *, today: Optional[date] = None) -> "FilterSpec":
        default = cls.default(today)
        if str(args.get("reset") or "").strip() in {"1", "true", "yes"}:
            return default

        month = str(args.get("month") or default.month).strip()
        if month != ALL:
            month = to_month_key(parse_month_key(month))

        employee = str(args.get("employee") or ALL).strip()
        employee_id = None if employee == ALL else require_int(employee, f"Invalid employee filter: {employee!r}")

        start_s = str(args.get("start") or "").strip()
        end_s = str(args.get("end") or "").strip()
        date_range = DateRange(
            start=parse_key(start_s) if start_s else None,
            end=parse_key(end_s) if end_s else None,
        )

        try:
            sort_by = SortBy(str(args.get("sort_by") or SortBy.DATE.value).strip().lower())
            sort_order = SortOrder(str(args.get("order") or SortOrder.DESC.value).strip().lower())
        except ValueError as e:
            raise ValidationError(f"Invalid sort option: {e}")

        return cls(
            month=month,
            employee_id=employee_id,
            date_range=date_range,
            search_query=str(args.get("q") or "").strip(),
            sort_by=sort_by,
            sort_order=sort_order,
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "employee": ALL if self.employee_id is None else self.employee_id,
            "start": to_key(self.date_range.start) if self.date_range.start else "",
            "end": to_key(self.date_range.end) if self.date_range.end else "",
            "q": self.search_query,
            "sort_by": self.sort_by.value,
            "order": self.sort_order.value,
        }


def month_label(month: str) -> str:
    if month == ALL:
        return "All Time"
    return parse_month_key(month).strftime("%B %Y")


def month_options(today: Optional[date] = None, count: int = REPORT_MONTH_OPTIONS) -> List[Dict[str, str]]:
    """``all`` followed by the current and previous months, newest first."""

    first = (today or today_local()).replace(day=1)
    options = [{"value": ALL, "label": month_label(ALL)}]
    for i in range(count):
        key = to_month_key(shift_month(first, -i))
        options.append({"value": key, "label": month_label(key)})
    return options
