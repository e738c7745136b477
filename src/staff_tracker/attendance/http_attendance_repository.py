from __future__ import annotations

from datetime import date
from typing import Sequence

from ..common.datekey import to_key
from ..gateway.connection import ApiConnection
from ..gateway.http_base import api_call, as_list, as_object
from .model import AttendanceRecord
from .repository import AttendanceRepository


class HttpAttendanceRepository(AttendanceRepository):
    PATH = "/api/attendance"

    def __init__(self, connection: ApiConnection):
        self._connection = connection

    def _list(self, path: str, params=None) -> Sequence[AttendanceRecord]:
        rows = as_list(api_call(self._connection, "GET", path, params=params), path)
        return [AttendanceRecord.from_api(r) for r in rows]

    def get_all(self) -> Sequence[AttendanceRecord]:
        return self._list(self.PATH)

    def get_by_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        return self._list(f"{self.PATH}/date/{to_key(work_date)}")

    def get_range(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        return self._list(f"{self.PATH}/range", params={"startDate": to_key(start), "endDate": to_key(end)})

    def mark(self, record: AttendanceRecord) -> AttendanceRecord:
        path = f"{self.PATH}/mark"
        payload = api_call(self._connection, "POST", path, json=record.to_api())
        return AttendanceRecord.from_api(as_object(payload, path))
