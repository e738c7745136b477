"""Canonical ``YYYY-MM-DD`` date keys.

The key is the join key between attendance records, expenses and calendar
cells, so it is always built from local calendar fields (never a UTC shift).
"""
from __future__ import annotations

import calendar
import re
from datetime import date, datetime

from ..core.exceptions import ValidationError

_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def to_key(value: date) -> str:
    """Format a date (or the local date of a datetime) as zero-padded YYYY-MM-DD."""
    if isinstance(value, datetime):
        value = value.date()
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_key(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    value = (value or "").strip()
    if not _KEY_RE.match(value):
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def to_month_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def parse_month_key(value: str) -> date:
    """Parse YYYY-MM into the first day of that month."""
    value = (value or "").strip()
    if not _MONTH_RE.match(value):
        raise ValidationError(f"Invalid month: {value!r} (expected YYYY-MM)")
    year, month = int(value[:4]), int(value[5:])
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {value!r} (expected YYYY-MM)")
    return date(year, month, 1)


def shift_month(value: date, months: int) -> date:
    """Move by whole calendar months, clamping the day to the target month's length."""
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    _, last_day = calendar.monthrange(year, month)
    return date(year, month, min(value.day, last_day))


def today_local() -> date:
    return now_local().date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
