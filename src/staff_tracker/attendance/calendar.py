from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import AbstractSet, Dict, List, Optional, Union

from ..common.datekey import shift_month, to_key, to_month_key, today_local
from ..core.constants import CALENDAR_CELLS

WEEKDAY_LABELS = ("Su", "Mo", "Tu", "We", "Th", "Fr", "Sa")


@dataclass(frozen=True)
class CalendarDay:
    day: date
    is_current_month: bool
    is_today: bool
    is_selected: bool
    has_recorded_attendance: bool

    @property
    def key(self) -> str:
        return to_key(self.day)

    def as_dict(self) -> Dict[str, object]:
        return {
            "date": self.key,
            "day": self.day.day,
            "is_current_month": self.is_current_month,
            "is_today": self.is_today,
            "is_selected": self.is_selected,
            "has_attendance": self.has_recorded_attendance,
        }


def grid_start(month_anchor: date) -> date:
    """Most recent Sunday on or before the 1st of the anchor's month."""
    first = month_anchor.replace(day=1)
    # date.weekday(): Monday=0 .. Sunday=6
    return first - timedelta(days=(first.weekday() + 1) % 7)


def build_calendar(
    month_anchor: date,
    known_dates: AbstractSet[str],
    selected: Optional[Union[date, str]] = None,
    *,
    today: Optional[date] = None,
) -> List[CalendarDay]:
    """Six Sunday-first weeks (always 42 cells) around the anchor's month."""

    today = today or today_local()
    selected_key = to_key(selected) if isinstance(selected, date) else selected
    start = grid_start(month_anchor)

    days: List[CalendarDay] = []
    for offset in range(CALENDAR_CELLS):
        d = start + timedelta(days=offset)
        key = to_key(d)
        days.append(
            CalendarDay(
                day=d,
                is_current_month=(d.year, d.month) == (month_anchor.year, month_anchor.month),
                is_today=d == today,
                is_selected=key == selected_key,
                has_recorded_attendance=key in known_dates,
            )
        )
    return days


def weeks(days: List[CalendarDay]) -> List[List[CalendarDay]]:
    return [days[i : i + 7] for i in range(0, len(days), 7)]


@dataclass(frozen=True)
class CalendarIndex:
    """Month cursor plus the set of DateKeys that already have attendance."""

    month_anchor: date
    known_dates: frozenset = field(default_factory=frozenset)

    @property
    def month_key(self) -> str:
        return to_month_key(self.month_anchor)

    @property
    def label(self) -> str:
        return self.month_anchor.strftime("%B %Y")

    def build(self, selected: Optional[Union[date, str]] = None, *, today: Optional[date] = None) -> List[CalendarDay]:
        return build_calendar(self.month_anchor, self.known_dates, selected, today=today)

    def prev_month(self) -> "CalendarIndex":
        return CalendarIndex(shift_month(self.month_anchor, -1), self.known_dates)

    def next_month(self) -> "CalendarIndex":
        return CalendarIndex(shift_month(self.month_anchor, 1), self.known_dates)

    def with_date(self, key: str) -> "CalendarIndex":
        return CalendarIndex(self.month_anchor, self.known_dates | {key})
