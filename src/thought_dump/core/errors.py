"""Domain errors surfaced to API clients as ``{message, code}`` bodies.

Services raise these; only the HTTP layer (see ``thought_dump.main``)
turns them into responses.
"""

from __future__ import annotations

from typing import Any

from fastapi import status


class AppError(Exception):
    """Base class for errors that map 1:1 onto an HTTP status and code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, *, code: str | None = None, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details

    def to_body(self, *, include_details: bool = False) -> dict[str, Any]:
        """Return the JSON body sent to clients."""
        body: dict[str, Any] = {"message": self.message, "code": self.code}
        if include_details and self.details is not None:
            body["details"] = self.details
        return body


class NotFoundError(AppError):
    """The addressed post, comment or topic does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class ValidationError(AppError):
    """Input failed validation; the caller must resubmit a valid value."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class ConflictError(AppError):
    """A record with the same unique value already exists."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class UnauthorizedError(AppError):
    """Missing or invalid admin credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"


class ConsistencyError(AppError):
    """Vote counters and the vote ledger disagree.

    Never corrected automatically: deciding which side is authoritative
    is an operator decision.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "CONSISTENCY_ERROR"
