"""Flask glue shared by every controller.

Views answer with JSON view-models; flashed messages ride along as
``notifications`` so the page can show them.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from flask import get_flashed_messages, has_request_context, jsonify, session

from ..core.constants import SESSION_TOKEN_KEY


def session_token() -> Optional[str]:
    """Bearer token of the signed-in browser session (None outside a request)."""
    if not has_request_context():
        return None
    return session.get(SESSION_TOKEN_KEY)


def notifications() -> List[Dict[str, str]]:
    return [{"category": c, "message": m} for c, m in get_flashed_messages(with_categories=True)]


def view(payload: Optional[Dict[str, Any]] = None, status: int = 200):
    body = dict(payload or {})
    body["notifications"] = notifications()
    return jsonify(body), status
