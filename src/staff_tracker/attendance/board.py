"""Per-day attendance draft.

The board owns the unsaved answers for exactly one selected date. Each
employee is in one of three states: present (True), absent (False) or unset
(None). The draft is rebuilt from persisted records whenever the date changes
and is only written back by an explicit save.

Boards live server-side in a BoardStore so that overlapping requests of one
user act on the same board. A date load is split into begin_load and
apply_load; a load whose ticket was overtaken by a newer one is dropped.
"""
from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..common.datekey import to_key
from ..core.exceptions import BoardChangedError, UnsavedChangesError, ValidationError
from .model import AttendanceRecord

UNSET = None


@dataclass(frozen=True)
class LoadTicket:
    """Identifies one date load; a ticket from an older load is stale."""

    generation: int
    work_date: date


@dataclass(frozen=True)
class SaveSnapshot:
    work_date: date
    revision: int
    entries: Tuple[Tuple[int, bool], ...]


@dataclass(frozen=True)
class AttendanceSummary:
    present_count: int
    absent_count: int
    unmarked_count: int
    total_count: int

    def as_dict(self) -> Dict[str, int]:
        return {
            "present": self.present_count,
            "absent": self.absent_count,
            "unmarked": self.unmarked_count,
            "total": self.total_count,
        }


class AttendanceBoard:
    def __init__(
        self,
        selected_date: date,
        draft: Optional[Mapping[int, Optional[bool]]] = None,
        *,
        dirty: bool = False,
    ):
        self._lock = threading.RLock()
        self._selected_date = selected_date
        self._draft: Dict[int, Optional[bool]] = dict(draft or {})
        self._dirty = bool(dirty)
        self._generation = 0
        # Bumped on every edit; a save only cleans the revision it wrote.
        self._revision = 0

    @property
    def selected_date(self) -> date:
        return self._selected_date

    @property
    def date_key(self) -> str:
        return to_key(self._selected_date)

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def draft(self) -> Dict[int, Optional[bool]]:
        with self._lock:
            return dict(self._draft)

    def status_of(self, employee_id: int) -> Optional[bool]:
        return self._draft.get(int(employee_id), UNSET)

    def expect_date(self, key: Optional[str]) -> None:
        """Reject an edit made from a page that still shows another date."""
        if key and key != self.date_key:
            raise BoardChangedError(
                f"The selected date changed to {self.date_key}. Please review the attendance before continuing."
            )

    # --- date changes -------------------------------------------------

    def begin_load(self, new_date: date, *, confirm_discard: bool = False) -> LoadTicket:
        """Start switching to ``new_date``.

        A dirty draft is only discarded when the caller confirmed it.
        """

        with self._lock:
            if self._dirty and not confirm_discard:
                raise UnsavedChangesError("You have unsaved changes. Do you want to continue without saving?")

            self._generation += 1
            self._revision += 1
            self._selected_date = new_date
            self._draft = {}
            self._dirty = False
            return LoadTicket(generation=self._generation, work_date=new_date)

    def apply_load(
        self,
        ticket: LoadTicket,
        records: Iterable[AttendanceRecord],
        employee_ids: Iterable[int],
    ) -> bool:
        """Rebuild the draft from persisted records. Returns False for a stale ticket.

        An empty ``records`` leaves every employee unset, which is also how a
        failed fetch keeps the rows markable.
        """

        with self._lock:
            if ticket.generation != self._generation or ticket.work_date != self._selected_date:
                return False

            persisted = {r.employee_id: r.present for r in records if r.work_date == ticket.work_date}
            self._draft = {int(eid): persisted.get(int(eid), UNSET) for eid in employee_ids}
            self._dirty = False
            return True

    def track(self, employee_ids: Iterable[int]) -> None:
        """Add employees that joined the roster after the load, as unset."""
        with self._lock:
            for eid in employee_ids:
                self._draft.setdefault(int(eid), UNSET)

    # --- edits --------------------------------------------------------

    def _require_known(self, employee_id: int) -> int:
        employee_id = int(employee_id)
        if employee_id not in self._draft:
            raise ValidationError("Unknown employee for this date")
        return employee_id

    def toggle(self, employee_id: int, value: bool) -> Optional[bool]:
        """Select ``value``; selecting the already active value clears it."""

        with self._lock:
            employee_id = self._require_known(employee_id)
            value = bool(value)
            current = self._draft[employee_id]
            self._draft[employee_id] = UNSET if current is value else value
            self._dirty = True
            self._revision += 1
            return self._draft[employee_id]

    def clear(self, employee_id: int) -> None:
        with self._lock:
            employee_id = self._require_known(employee_id)
            self._draft[employee_id] = UNSET
            self._dirty = True
            self._revision += 1

    # --- save support -------------------------------------------------

    def marked_entries(self) -> List[Tuple[int, bool]]:
        """Entries that a save writes. Unset entries are skipped, never deleted."""

        with self._lock:
            return [(eid, value) for eid, value in self._draft.items() if value is not UNSET]

    def snapshot(self) -> SaveSnapshot:
        with self._lock:
            return SaveSnapshot(
                work_date=self._selected_date,
                revision=self._revision,
                entries=tuple(self.marked_entries()),
            )

    def mark_saved(self, snapshot: Optional[SaveSnapshot] = None) -> bool:
        """Clear the dirty flag unless the draft changed after ``snapshot`` was taken."""

        with self._lock:
            if snapshot is not None and snapshot.revision != self._revision:
                return False
            self._dirty = False
            return True

    def summary(self, total_employees: Optional[int] = None) -> AttendanceSummary:
        values = list(self.draft.values())
        present = sum(1 for v in values if v is True)
        absent = sum(1 for v in values if v is False)
        total = len(values) if total_employees is None else int(total_employees)
        return AttendanceSummary(
            present_count=present,
            absent_count=absent,
            unmarked_count=total - present - absent,
            total_count=total,
        )


class BoardStore:
    """In-process boards keyed by an opaque id kept in the user's session.

    Note: boards are held in memory, so a deployment with several worker
    processes needs sticky sessions.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._boards: Dict[str, AttendanceBoard] = {}

    def get(self, board_id: Optional[str]) -> Optional[AttendanceBoard]:
        if not board_id:
            return None
        with self._lock:
            return self._boards.get(str(board_id))

    def create(self, selected_date: date) -> Tuple[str, AttendanceBoard]:
        board_id = uuid.uuid4().hex
        board = AttendanceBoard(selected_date)
        with self._lock:
            self._boards[board_id] = board
        return board_id, board

    def discard(self, board_id: Optional[str]) -> None:
        if not board_id:
            return
        with self._lock:
            self._boards.pop(str(board_id), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._boards)
