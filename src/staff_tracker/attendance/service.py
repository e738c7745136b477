from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, List, Sequence, Set, Tuple

from ..common.datekey import to_key
from ..common.errors import translate_api_errors
from ..core.exceptions import (
    ApiError,
    ApiUnauthorizedError,
    FetchError,
    SaveError,
    SaveInProgressError,
    ValidationError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .board import AttendanceBoard
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveResult:
    work_date: date
    saved_ids: Tuple[int, ...]

    @property
    def wrote_anything(self) -> bool:
        return bool(self.saved_ids)

    @property
    def date_key(self) -> str:
        return to_key(self.work_date)


class AttendanceService:
    """Use case: mark daily attendance on a board and persist it.

    Note: one save per date at a time. A second save for a date whose save is
    still running is rejected instead of interleaving writes.
    """

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees
        self._lock = threading.Lock()
        self._in_flight: Set[date] = set()

    def list_employees(self) -> Sequence[Employee]:
        with translate_api_errors(FetchError, "Failed to load data. Please try again."):
            return list(self._employees.get_all())

    def records_for(self, work_date: date) -> Sequence[AttendanceRecord]:
        with translate_api_errors(FetchError, "Failed to load attendance data for selected date."):
            return list(self._attendance.get_by_date(work_date))

    def list_all(self) -> Sequence[AttendanceRecord]:
        with translate_api_errors(FetchError, "Failed to load data. Please try again."):
            return list(self._attendance.get_all())

    def known_dates(self) -> FrozenSet[str]:
        """DateKeys that already have at least one saved record."""
        return frozenset(r.date_key for r in self.list_all())

    def load_date(
        self,
        board: AttendanceBoard,
        new_date: date,
        *,
        employee_ids: Sequence[int],
        confirm_discard: bool = False,
    ) -> bool:
        """Switch the board to ``new_date`` and fill the draft from saved records.

        Raises UnsavedChangesError (board untouched) when the draft is dirty
        and the switch was not confirmed. On a fetch failure the board keeps
        the new date with every employee unset, so the rows stay markable,
        and FetchError is raised. Returns False when a newer load overtook
        this one while its records were being fetched.
        """

        ticket = board.begin_load(new_date, confirm_discard=confirm_discard)
        try:
            records = self.records_for(new_date)
        except FetchError:
            board.apply_load(ticket, (), employee_ids)
            raise
        applied = board.apply_load(ticket, records, employee_ids)
        if not applied:
            logger.info("Discarded stale attendance load for %s", to_key(new_date))
        return applied

    def _acquire(self, work_date: date) -> None:
        with self._lock:
            if work_date in self._in_flight:
                raise SaveInProgressError("Attendance for this date is already being saved")
            self._in_flight.add(work_date)

    def _release(self, work_date: date) -> None:
        with self._lock:
            self._in_flight.discard(work_date)

    def save(self, board: AttendanceBoard) -> SaveResult:
        """Upsert every marked entry of the draft, one request per employee.

        Unset entries are skipped and never delete an existing record. A draft
        with nothing marked writes nothing and returns an empty result.
        Succeeded upserts are kept when others fail; the board stays dirty
        so the user can retry.
        """

        snapshot = board.snapshot()
        work_date = snapshot.work_date
        if not snapshot.entries:
            board.mark_saved(snapshot)
            return SaveResult(work_date=work_date, saved_ids=())

        self._acquire(work_date)
        try:
            saved: List[int] = []
            failed: List[int] = []
            for employee_id, present in snapshot.entries:
                record = AttendanceRecord(employee_id=employee_id, work_date=work_date, present=present)
                try:
                    self._attendance.mark(record)
                except ApiUnauthorizedError:
                    raise
                except (ApiError, ValidationError) as e:
                    logger.warning("Attendance upsert failed employee=%s date=%s: %s", employee_id, to_key(work_date), e)
                    failed.append(employee_id)
                else:
                    saved.append(employee_id)
        finally:
            self._release(work_date)

        if failed:
            logger.warning(
                "Attendance save for %s incomplete: saved=%s failed=%s", to_key(work_date), saved, failed
            )
            raise SaveError(
                "Failed to save attendance. Please try again.",
                saved_ids=saved,
                failed_ids=failed,
            )

        board.mark_saved(snapshot)
        logger.info("Attendance saved for %s (%d entries)", to_key(work_date), len(saved))
        return SaveResult(work_date=work_date, saved_ids=tuple(saved))
