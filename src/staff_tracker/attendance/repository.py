from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_by_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_range(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def mark(self, record: AttendanceRecord) -> AttendanceRecord:
        """Idempotent upsert by (employee_id, work_date)."""

        raise NotImplementedError
