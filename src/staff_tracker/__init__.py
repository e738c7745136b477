"""Staff Tracker package.

Admin web app for daily attendance, expenses, the employee roster and
reports. Organized by feature modules (employees, attendance, expenses,
reports, activity, auth, dashboard) with a thin Flask controller layer over
service/repository layers that talk to the REST API.
"""
from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask, flash
from werkzeug.exceptions import HTTPException

from .config import get_settings_module
from .container import Container, build_container
from .core.constants import DEFAULT_CURRENCY_SYMBOL, DEFAULT_SESSION_DAYS
from .core.exceptions import ValidationError
from .core.logging import configure_logging

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .common.web import view
from .dashboard.controller import register as register_dashboard
from .employees.controller import register as register_employees
from .expenses.controller import register as register_expenses
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)


def create_app(
    settings_overrides: Optional[Mapping[str, Any]] = None,
    container: Optional[Container] = None,
) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config.from_object(settings)
    if settings_overrides:
        app.config.update(settings_overrides)

    app.secret_key = app.config["SECRET_KEY"]
    app.config.setdefault("CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL)
    app.config.setdefault("DASHBOARD_ACTIVITY_LIMIT", 5)
    app.config.setdefault("REPORT_ACTIVITY_LIMIT", 10)
    app.permanent_session_lifetime = timedelta(days=int(app.config.get("SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    api_config = app.config["API_CONFIG"]
    logger.info("settings=%s api=%s", settings_module, api_config.get("base_url"))

    container = container or build_container(api_config=api_config)

    @app.errorhandler(ValidationError)
    def validation_error(e):
        flash(str(e), "warning")
        return view({}, 400)

    @app.errorhandler(Exception)
    def unexpected_error(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error")
        flash("Something went wrong. Please try again.", "danger")
        return view({}, 500)

    register_auth(app, container)
    register_dashboard(app, container)
    register_attendance(app, container)
    register_expenses(app, container)
    register_employees(app, container)
    register_reports(app, container)

    return app
