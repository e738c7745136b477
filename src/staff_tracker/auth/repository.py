from __future__ import annotations

from typing import Protocol

from .model import AuthResult


class AuthRepository(Protocol):
    def login(self, password: str) -> AuthResult:
        raise NotImplementedError

    def verify(self, token: str) -> AuthResult:
        raise NotImplementedError

    def logout(self) -> AuthResult:
        raise NotImplementedError
