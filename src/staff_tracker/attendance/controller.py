from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, FrozenSet, List, Optional, Sequence

from flask import Flask, flash, request, session

from ..common.datekey import parse_key, parse_month_key, to_key, to_month_key, today_local
from ..common.validators import parse_bool, require_int
from ..common.web import view
from ..container import Container
from ..core.constants import SESSION_BOARD_KEY, SESSION_CALENDAR_MONTH_KEY
from ..core.exceptions import (
    BoardChangedError,
    FetchError,
    SaveError,
    SaveInProgressError,
    UnsavedChangesError,
    ValidationError,
)
from ..employees.model import Employee
from .board import AttendanceBoard
from .calendar import WEEKDAY_LABELS, CalendarIndex, weeks

logger = logging.getLogger(__name__)


def _status_label(value: Optional[bool]) -> Optional[str]:
    if value is None:
        return None
    return "present" if value else "absent"


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service
    store = container.board_store

    def _board() -> Optional[AttendanceBoard]:
        return store.get(session.get(SESSION_BOARD_KEY))

    def _new_board(selected: date) -> AttendanceBoard:
        board_id, board = store.create(selected)
        session[SESSION_BOARD_KEY] = board_id
        return board

    def _changed(board: AttendanceBoard, e: BoardChangedError):
        flash(str(e), "warning")
        return view({"date": board.date_key, "dirty": board.dirty}, 409)

    def _employees() -> List[Employee]:
        try:
            return list(service.list_employees())
        except FetchError as e:
            flash(str(e), "danger")
            return []

    def _known_dates() -> FrozenSet[str]:
        try:
            return service.known_dates()
        except FetchError as e:
            flash(str(e), "danger")
            return frozenset()

    def _calendar_month(board: AttendanceBoard) -> date:
        stored = session.get(SESSION_CALENDAR_MONTH_KEY)
        if stored:
            try:
                return parse_month_key(stored)
            except ValidationError:
                session.pop(SESSION_CALENDAR_MONTH_KEY, None)
        return board.selected_date.replace(day=1)

    def _calendar_view(index: CalendarIndex, selected: date) -> Dict[str, Any]:
        days = index.build(selected)
        return {
            "month": index.month_key,
            "label": index.label,
            "weekdays": list(WEEKDAY_LABELS),
            "weeks": [[d.as_dict() for d in week] for week in weeks(days)],
        }

    def _board_view(board: AttendanceBoard, employees: Sequence[Employee], index: CalendarIndex) -> Dict[str, Any]:
        rows = [
            {
                "employee_id": e.employee_id,
                "name": e.name,
                "position": e.position,
                "status": _status_label(board.status_of(e.employee_id)),
            }
            for e in employees
        ]
        total = len(employees) if employees else None
        return {
            "date": to_key(board.selected_date),
            "dirty": board.dirty,
            "rows": rows,
            "summary": board.summary(total).as_dict(),
            "calendar": _calendar_view(index, board.selected_date),
        }

    @app.route("/attendance", endpoint="attendance")
    def attendance():
        employees = _employees()
        employee_ids = [e.employee_id for e in employees]

        try:
            requested = parse_key(request.args["date"]) if request.args.get("date") else None
        except ValidationError as e:
            flash(str(e), "warning")
            requested = None
        confirm = parse_bool(request.args.get("confirm") or "0")

        board = _board()
        status = 200
        applied = True
        if board is None:
            board = _new_board(requested or today_local())
            requested = board.selected_date
            force = True
        else:
            force = requested is not None and requested != board.selected_date
            requested = requested or board.selected_date

        try:
            if force or not board.dirty:
                applied = service.load_date(board, requested, employee_ids=employee_ids, confirm_discard=confirm)
                session.pop(SESSION_CALENDAR_MONTH_KEY, None)
            else:
                board.track(employee_ids)
        except UnsavedChangesError as e:
            flash(str(e), "warning")
            status = 409
        except FetchError as e:
            flash(str(e), "danger")

        index = CalendarIndex(_calendar_month(board), _known_dates())
        payload = _board_view(board, employees, index)
        if status == 409:
            payload["pending_date"] = to_key(requested)
        if not applied:
            # A newer date load won; the payload shows the board as it is now.
            payload["superseded"] = to_key(requested)
        return view(payload, status)

    @app.route("/attendance/toggle", methods=["POST"], endpoint="attendance_toggle")
    def attendance_toggle():
        board = _board()
        if board is None:
            flash("Select a date first", "warning")
            return view({}, 400)
        try:
            board.expect_date(request.form.get("date"))
            employee_id = require_int(request.form.get("employee_id"), "Please select an employee")
            value = board.toggle(employee_id, parse_bool(request.form.get("present", "")))
        except BoardChangedError as e:
            return _changed(board, e)
        except ValidationError as e:
            flash(str(e), "warning")
            return view({"date": board.date_key, "dirty": board.dirty}, 400)

        return view(
            {
                "date": board.date_key,
                "employee_id": employee_id,
                "status": _status_label(value),
                "dirty": board.dirty,
                "summary": board.summary().as_dict(),
            }
        )

    @app.route("/attendance/clear", methods=["POST"], endpoint="attendance_clear")
    def attendance_clear():
        board = _board()
        if board is None:
            flash("Select a date first", "warning")
            return view({}, 400)
        try:
            board.expect_date(request.form.get("date"))
            employee_id = require_int(request.form.get("employee_id"), "Please select an employee")
            board.clear(employee_id)
        except BoardChangedError as e:
            return _changed(board, e)
        except ValidationError as e:
            flash(str(e), "warning")
            return view({"date": board.date_key, "dirty": board.dirty}, 400)

        return view(
            {
                "date": board.date_key,
                "employee_id": employee_id,
                "status": None,
                "dirty": board.dirty,
                "summary": board.summary().as_dict(),
            }
        )

    @app.route("/attendance/save", methods=["POST"], endpoint="attendance_save")
    def attendance_save():
        board = _board()
        if board is None:
            flash("Select a date first", "warning")
            return view({}, 400)

        try:
            board.expect_date(request.form.get("date"))
            result = service.save(board)
        except BoardChangedError as e:
            return _changed(board, e)
        except SaveInProgressError as e:
            flash(str(e), "warning")
            return view({"date": board.date_key, "dirty": board.dirty}, 409)
        except SaveError as e:
            flash(str(e), "danger")
            return view(
                {
                    "date": board.date_key,
                    "dirty": board.dirty,
                    "saved": e.saved_ids,
                    "failed": e.failed_ids,
                },
                502,
            )

        index = CalendarIndex(_calendar_month(board), _known_dates())
        if result.wrote_anything:
            day = result.work_date
            flash(f"Attendance saved successfully for {day:%A, %B} {day.day}, {day.year}", "success")
            index = index.with_date(result.date_key)
        else:
            flash("Mark at least one employee before saving", "info")

        return view(
            {
                "date": result.date_key,
                "dirty": board.dirty,
                "saved": list(result.saved_ids),
                "calendar": _calendar_view(index, result.work_date),
            }
        )

    @app.route("/attendance/calendar", endpoint="attendance_calendar")
    def attendance_calendar():
        board = _board() or AttendanceBoard(today_local())
        try:
            anchor = parse_month_key(request.args["month"]) if request.args.get("month") else _calendar_month(board)
        except ValidationError as e:
            flash(str(e), "warning")
            anchor = _calendar_month(board)

        index = CalendarIndex(anchor, _known_dates())
        direction = (request.args.get("direction") or "").strip().lower()
        if direction == "prev":
            index = index.prev_month()
        elif direction == "next":
            index = index.next_month()

        session[SESSION_CALENDAR_MONTH_KEY] = to_month_key(index.month_anchor)
        return view({"date": to_key(board.selected_date), "calendar": _calendar_view(index, board.selected_date)})
