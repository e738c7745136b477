from __future__ import annotations

import logging

from ..core.exceptions import ApiError, ApiUnauthorizedError, AuthenticationError, ValidationError
from .repository import AuthRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: shared-password admin login.

    The API issues a token on login; the web layer keeps it in the session and
    sends it with every later call.
    """

    def __init__(self, auth: AuthRepository):
        self._auth = auth

    def login(self, password: str) -> str:
        """Return the session token, or raise AuthenticationError."""

        if not password or not str(password).strip():
            raise ValidationError("Please enter the password")

        try:
            result = self._auth.login(str(password))
        except ApiUnauthorizedError:
            raise AuthenticationError("Invalid password")
        except ApiError as e:
            # The login endpoint answers 4xx for a wrong password.
            if e.status_code is not None and 400 <= e.status_code < 500:
                raise AuthenticationError("Invalid password")
            logger.warning("Login failed: %s", e)
            raise AuthenticationError("Login failed. Please try again.")

        if not result.success or not result.token:
            raise AuthenticationError(result.message or "Invalid password")

        logger.info("Admin signed in")
        return result.token

    def verify_token(self, token: str) -> bool:
        if not token:
            return False
        try:
            return self._auth.verify(token).success
        except ApiError as e:
            logger.info("Token verification failed: %s", e)
            return False

    def logout(self) -> None:
        # Tokens are stateless; a failed call must not keep the user signed in.
        try:
            self._auth.logout()
        except ApiError as e:
            logger.warning("Logout call failed: %s", e)
        logger.info("Admin signed out")
