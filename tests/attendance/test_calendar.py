from __future__ import annotations

from datetime import date

import pytest

from staff_tracker.attendance.calendar import CalendarIndex, build_calendar, grid_start, weeks
from staff_tracker.core.constants import CALENDAR_CELLS


@pytest.mark.parametrize("year", [2015, 2024, 2025, 2026])
@pytest.mark.parametrize("month", range(1, 13))
def test_grid_always_has_42_days_starting_on_sunday(year, month):
    anchor = date(year, month, 1)
    days = build_calendar(anchor, frozenset(), today=date(2025, 3, 15))

    assert len(days) == CALENDAR_CELLS
    assert days[0].day.weekday() == 6
    assert days[0].day <= anchor
    assert (anchor - days[0].day).days < 7
    assert sum(1 for d in days if d.is_current_month) >= 28


def test_month_starting_on_sunday_has_no_leading_days():
    # 1 Feb 2015 is a Sunday and the month spans exactly four weeks.
    assert grid_start(date(2015, 2, 18)) == date(2015, 2, 1)
    days = build_calendar(date(2015, 2, 1), frozenset())
    assert days[0].day == date(2015, 2, 1)
    assert days[-1].day == date(2015, 3, 14)


def test_cells_are_annotated():
    index = CalendarIndex(date(2025, 3, 1), frozenset({"2025-03-10", "2025-02-28"}))

    days = {d.key: d for d in index.build("2025-03-12", today=date(2025, 3, 15))}

    assert days["2025-03-10"].has_recorded_attendance
    assert days["2025-02-28"].has_recorded_attendance
    assert not days["2025-02-28"].is_current_month
    assert days["2025-03-12"].is_selected
    assert days["2025-03-15"].is_today
    assert sum(1 for d in days.values() if d.is_selected) == 1
    assert sum(1 for d in days.values() if d.is_today) == 1


def test_is_today_checks_the_real_date_not_the_anchor():
    days = build_calendar(date(2025, 1, 1), frozenset(), today=date(2025, 3, 15))
    assert not any(d.is_today for d in days)


def test_navigation_moves_one_month_and_clamps():
    index = CalendarIndex(date(2025, 1, 31), frozenset({"2025-01-02"}))

    assert index.next_month().month_anchor == date(2025, 2, 28)
    assert index.prev_month().month_anchor == date(2024, 12, 31)
    assert index.next_month().known_dates == index.known_dates
    assert index.label == "January 2025"
    assert index.month_key == "2025-01"


def test_with_date_marks_a_saved_day():
    index = CalendarIndex(date(2025, 3, 1)).with_date("2025-03-14")
    days = {d.key: d for d in index.build()}
    assert days["2025-03-14"].has_recorded_attendance


def test_weeks_splits_into_rows_of_seven():
    rows = weeks(build_calendar(date(2025, 3, 1), frozenset()))
    assert len(rows) == 6
    assert all(len(r) == 7 for r in rows)
