"""Domain errors for the winner subsystem.

Each error maps to one HTTP status and carries a stable machine string
(`error`) that clients can match on. The API layer renders them as
``{"error": ..., "details": ...}`` (see app.main).
"""

from __future__ import annotations

from typing import Any

EXCHANGE_RATE_FAILURE_MESSAGE = "Failed to fetch exchange rate for token. Please try again."


class WinnerServiceError(Exception):
    """Base error for bounty/submission operations."""

    status_code: int = 500
    default_error: str = "Internal server error"

    def __init__(self, error: str | None = None, details: Any = None) -> None:
        self.error = error or self.default_error
        self.details = details
        super().__init__(self.error)


class UnauthenticatedError(WinnerServiceError):
    """No valid caller identity (or no relationship to the organization)."""

    status_code = 401
    default_error = "Unauthorized"


class ForbiddenError(WinnerServiceError):
    """Caller identified but lacks the required capability."""

    status_code = 403
    default_error = "Forbidden"


class NotFoundError(WinnerServiceError):
    """Target absent or not addressable in its current state."""

    status_code = 404
    default_error = "Not found"


class InvalidInputError(WinnerServiceError):
    """Request rejected by validation before any mutation."""

    status_code = 400
    default_error = "Invalid request data"


class ExchangeRateUnavailableError(WinnerServiceError):
    """Currency gateway unreachable, timed out, or returned an unusable rate."""

    status_code = 500
    default_error = EXCHANGE_RATE_FAILURE_MESSAGE
