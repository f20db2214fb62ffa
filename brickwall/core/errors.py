"""
Exception hierarchy for the Brickwall engine.

Rule: every error has a machine-readable `code` string so callers can
branch on it without parsing English messages. `http_status` is only a
hint for whatever transport layer sits on top of the engine.
"""
from __future__ import annotations

from datetime import date
from http import HTTPStatus
from typing import Any

from pydantic import ValidationError


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------

class BrickwallException(Exception):
    """Base class for all engine-level errors."""
    http_status: int = HTTPStatus.INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(BrickwallException):
    http_status = HTTPStatus.NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} {identifier} not found.",
            details={"resource": resource, "id": identifier},
        )


class ConflictError(BrickwallException):
    http_status = HTTPStatus.CONFLICT
    code = "CONFLICT"


class InvalidArgumentError(BrickwallException):
    http_status = HTTPStatus.UNPROCESSABLE_ENTITY
    code = "INVALID_ARGUMENT"


class InvalidStateError(BrickwallException):
    http_status = HTTPStatus.CONFLICT
    code = "INVALID_STATE"


# ---------------------------------------------------------------------------
# Specific errors
# ---------------------------------------------------------------------------

class DuplicateBrickError(ConflictError):
    code = "DUPLICATE_FOR_DATE"
    reason = "duplicate-for-date"

    def __init__(self, user_id: int, day: date):
        super().__init__(
            message=f"User {user_id} already has a brick for {day}.",
            details={"user_id": user_id, "day": str(day), "reason": self.reason},
        )


class SessionAlreadyCompletedError(ConflictError):
    code = "SESSION_ALREADY_COMPLETED"

    def __init__(self, session_id: int):
        super().__init__(
            message=f"Workout session {session_id} is already completed.",
            details={"session_id": session_id},
        )


class DuplicateWellnessLogError(ConflictError):
    code = "DUPLICATE_WELLNESS_LOG"

    def __init__(self, user_id: int, day: date):
        super().__init__(
            message=f"User {user_id} already checked in on {day}.",
            details={"user_id": user_id, "day": str(day)},
        )


class StateUpdateConflictError(ConflictError):
    code = "STATE_UPDATE_CONFLICT"

    def __init__(self, user_id: int, attempts: int):
        super().__init__(
            message=(
                f"Behavior state for user {user_id} kept changing underneath "
                f"the update; gave up after {attempts} attempts."
            ),
            details={"user_id": user_id, "attempts": attempts},
        )


class SessionNotCompletedError(InvalidStateError):
    code = "SESSION_NOT_COMPLETED"

    def __init__(self, session_id: int, status: str):
        super().__init__(
            message=f"Workout session {session_id} is {status}, not completed.",
            details={"session_id": session_id, "status": status},
        )


# ---------------------------------------------------------------------------
# Validation bridge
# ---------------------------------------------------------------------------

def invalid_argument_from(exc: ValidationError) -> InvalidArgumentError:
    """Turn a pydantic ValidationError into a structured InvalidArgumentError."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })
    return InvalidArgumentError(
        message="Input validation failed.",
        details={"errors": field_errors},
    )
