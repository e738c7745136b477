from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Mapping, Optional

from ..common.datekey import parse_key, to_key
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceRecord:
    """Persisted answer for one employee on one day, keyed by (employee_id, work_date)."""

    employee_id: int
    work_date: date
    present: bool
    record_id: Optional[int] = None

    @property
    def date_key(self) -> str:
        return to_key(self.work_date)

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "AttendanceRecord":
        try:
            employee_id = int(payload["employeeId"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError(f"Attendance record without employeeId: {payload!r}")
        present = payload.get("present")
        if not isinstance(present, bool):
            raise ValidationError(f"Attendance record with invalid present flag: {payload!r}")
        record_id = payload.get("id")
        return cls(
            employee_id=employee_id,
            work_date=parse_key(str(payload.get("date") or "")),
            present=present,
            record_id=int(record_id) if record_id is not None else None,
        )

    def to_api(self) -> Dict[str, Any]:
        return {"employeeId": self.employee_id, "date": self.date_key, "present": self.present}
