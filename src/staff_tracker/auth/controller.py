from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, request, session, url_for

from ..common.web import session_token, view
from ..container import Container
from ..core.constants import PROTECTED_PREFIXES, SESSION_BOARD_KEY, SESSION_TOKEN_KEY
from ..core.exceptions import ApiUnauthorizedError, AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

MENU = [
    {"title": "Dashboard", "href": "/dashboard"},
    {"title": "Attendance", "href": "/attendance"},
    {"title": "Expenses", "href": "/expenses"},
    {"title": "Employees", "href": "/employees"},
    {"title": "Reports", "href": "/reports"},
]


def is_protected(path: str) -> bool:
    return any(path == p or path.startswith(f"{p}/") for p in PROTECTED_PREFIXES)


def register(app: Flask, container: Container) -> None:
    def _end_session() -> None:
        container.board_store.discard(session.get(SESSION_BOARD_KEY))
        session.clear()

    @app.before_request
    def session_gate():
        authenticated = bool(session.get(SESSION_TOKEN_KEY))
        path = request.path
        if is_protected(path) and not authenticated:
            return redirect(url_for("login"))
        if path in ("/", "/login") and authenticated:
            return redirect(url_for("dashboard"))
        return None

    @app.errorhandler(ApiUnauthorizedError)
    def api_unauthorized(e):
        # Token expired or revoked on the API side.
        _end_session()
        flash(str(e), "warning")
        return redirect(url_for("login"))

    @app.route("/", endpoint="index")
    def index():
        return redirect(url_for("login"))

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if request.method == "POST":
            password = request.form.get("password", "")
            try:
                token = container.auth_service.login(password)

                _end_session()
                session.permanent = True
                session[SESSION_TOKEN_KEY] = token

                flash("Login successful", "success")
                return redirect(url_for("dashboard"))
            except ValidationError as e:
                flash(str(e), "warning")
                return view({"authenticated": False}, 400)
            except AuthenticationError as e:
                flash(str(e), "danger")
                return view({"authenticated": False}, 401)
            except Exception:
                logger.exception("Login failed unexpectedly")
                flash("System error while signing in", "danger")
                return view({"authenticated": False}, 500)

        return view({"authenticated": False})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        container.auth_service.logout()
        _end_session()
        flash("You have been logged out", "info")
        return redirect(url_for("login"))

    @app.route("/auth/verify", endpoint="verify_token")
    def verify_token():
        return jsonify({"success": container.auth_service.verify_token(session_token() or "")})

    @app.route("/menu", endpoint="menu")
    def menu():
        return view({"items": MENU})
