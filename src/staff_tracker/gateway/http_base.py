from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from ..core.exceptions import ApiError, ApiUnauthorizedError
from .connection import ApiConnection

logger = logging.getLogger(__name__)


def api_call(
    connection: ApiConnection,
    method: str,
    path: str,
    *,
    json: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, Any]] = None,
) -> Any:
    """Issue one request and return the decoded JSON body (None when empty)."""

    try:
        resp = connection.session.request(
            method,
            connection.url(path),
            json=json,
            params=params,
            headers=connection.headers(),
            timeout=connection.timeout,
        )
    except requests.RequestException as e:
        logger.warning("API %s %s unreachable: %s", method, path, e)
        raise ApiError(f"Could not reach the API ({method} {path})", path=path) from e

    if resp.status_code in (401, 403):
        logger.warning("API %s %s rejected credentials (%s)", method, path, resp.status_code)
        raise ApiUnauthorizedError("Session expired, please sign in again", status_code=resp.status_code, path=path)

    if not resp.ok:
        logger.warning("API %s %s failed with status %s", method, path, resp.status_code)
        raise ApiError(f"API error {resp.status_code} ({method} {path})", status_code=resp.status_code, path=path)

    if not resp.content:
        return None

    try:
        return resp.json()
    except ValueError as e:
        raise ApiError(f"API returned invalid JSON ({method} {path})", status_code=resp.status_code, path=path) from e


def as_list(payload: Any, path: str) -> List[Dict[str, Any]]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ApiError(f"Expected a list from {path}", path=path)
    return [row for row in payload if isinstance(row, dict)]


def as_object(payload: Any, path: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ApiError(f"Expected an object from {path}", path=path)
    return payload
