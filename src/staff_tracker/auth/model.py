from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class AuthResult:
    """Answer of the auth endpoints (login, verify, logout)."""

    success: bool
    message: str = ""
    token: Optional[str] = None
    role: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Optional[Mapping[str, Any]]) -> "AuthResult":
        payload = payload or {}
        token = payload.get("token")
        return cls(
            success=payload.get("success") is True,
            message=str(payload.get("message") or ""),
            token=str(token) if token else None,
            role=str(payload["role"]) if payload.get("role") else None,
        )
