from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the admin password is rejected."""


class NotFoundError(DomainError):
    """Raised when a referenced employee or expense does not exist."""


class ApiError(DomainError):
    """Raised by the gateway when a call to the REST API fails."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, path: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.path = path


class ApiUnauthorizedError(ApiError):
    """The API rejected our token (401/403)."""


class FetchError(DomainError):
    """A read from the API failed; the view falls back to an empty state."""


class SaveError(DomainError):
    """One or more attendance upserts failed. Succeeded upserts are kept."""

    def __init__(self, message: str, *, saved_ids: Sequence[int] = (), failed_ids: Sequence[int] = ()):
        super().__init__(message)
        self.saved_ids = list(saved_ids)
        self.failed_ids = list(failed_ids)


class UnsavedChangesError(DomainError):
    """Raised when switching dates would discard a dirty draft without confirmation."""


class SaveInProgressError(DomainError):
    """Raised when a save for the same date is already in flight."""


class BoardChangedError(DomainError):
    """Raised when an edit targets a date the board has already moved away from."""
