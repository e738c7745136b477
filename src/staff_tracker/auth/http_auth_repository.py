from __future__ import annotations

from ..gateway.connection import ApiConnection
from ..gateway.http_base import api_call
from .model import AuthResult
from .repository import AuthRepository


class HttpAuthRepository(AuthRepository):
    PATH = "/api/auth"

    def __init__(self, connection: ApiConnection):
        self._connection = connection

    def login(self, password: str) -> AuthResult:
        return AuthResult.from_api(api_call(self._connection, "POST", f"{self.PATH}/login", json={"password": password}))

    def verify(self, token: str) -> AuthResult:
        return AuthResult.from_api(api_call(self._connection, "POST", f"{self.PATH}/verify", json={"token": token}))

    def logout(self) -> AuthResult:
        return AuthResult.from_api(api_call(self._connection, "POST", f"{self.PATH}/logout"))
