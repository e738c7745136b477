from __future__ import annotations

import logging

from flask import Flask, current_app, flash

from ..activity.feed import format_activity_message
from ..activity.model import event_to_dict
from ..common.datekey import to_key, today_local
from ..common.web import view
from ..container import Container
from ..core.exceptions import FetchError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard", endpoint="dashboard")
    def dashboard():
        today = today_local()
        currency = current_app.config["CURRENCY_SYMBOL"]
        try:
            summary = container.dashboard_service.summary(
                today=today, activity_limit=current_app.config["DASHBOARD_ACTIVITY_LIMIT"]
            )
        except FetchError as e:
            flash(str(e), "danger")
            return view(
                {
                    "date": to_key(today),
                    "total_employees": 0,
                    "present_today": 0,
                    "absent_today": 0,
                    "total_expenses_today": "0.00",
                    "recent_activity": [],
                }
            )

        activity = []
        for event in summary.recent_activity:
            item = event_to_dict(event)
            item["message"] = format_activity_message(event, summary.names, currency=currency)
            activity.append(item)

        return view(
            {
                "date": to_key(summary.today),
                "total_employees": summary.total_employees,
                "present_today": summary.present_today,
                "absent_today": summary.absent_today,
                "total_expenses_today": f"{summary.total_expenses_today:.2f}",
                "recent_activity": activity,
            }
        )
