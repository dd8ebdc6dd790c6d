"""
Error taxonomy for TaskLedger.

Every error carries an HTTP status, a stable code and, where it applies, the
offending field and a reason the caller can act on. Errors are raised before
any state is mutated.
"""

from typing import Any


class TaskLedgerError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, field: str | None = None, reason: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.reason = reason or message

    def to_error_item(self) -> dict[str, Any]:
        """Render as a single entry of a response `errors` array."""
        return {"field": self.field, "reason": self.reason, "code": self.code}


class ValidationFailed(TaskLedgerError):
    """Malformed request input (400)."""

    status_code = 400
    code = "ValidationFailed"


class InvalidDateFormat(ValidationFailed):
    """A start/end date string could not be parsed."""

    code = "InvalidDateFormat"

    def __init__(self, field: str, value: str):
        super().__init__(
            f"Invalid date for '{field}': {value!r}",
            field=field,
            reason=f"'{value}' is not a valid ISO-8601 date or datetime",
        )
        self.value = value


class InvalidTimeLogAmount(ValidationFailed):
    """A time-log submission with zero total duration."""

    code = "InvalidTimeLogAmount"

    def __init__(self) -> None:
        super().__init__(
            "Please provide hours or minutes greater than 0",
            field="hours",
            reason="hours + minutes/60 must be greater than 0",
        )


class MinutesOutOfRange(ValidationFailed):
    """Minutes outside [0, 59]."""

    code = "MinutesOutOfRange"

    def __init__(self, minutes: Any):
        super().__init__(
            "Minutes must be between 0 and 59",
            field="minutes",
            reason=f"{minutes!r} is outside [0, 59]",
        )


class AuthenticationRequired(TaskLedgerError):
    """No valid credentials on the request (401)."""

    status_code = 401
    code = "AuthenticationRequired"


class AccessDenied(TaskLedgerError):
    """Caller lacks the role or relationship required (403)."""

    status_code = 403
    code = "AccessDenied"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class NotFound(TaskLedgerError):
    """Referenced record does not exist or is archived (404)."""

    status_code = 404
    code = "NotFound"

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found", field=f"{entity.lower()}_id", reason=f"no {entity.lower()} '{entity_id}'")
        self.entity = entity
        self.entity_id = entity_id


class ConfigError(TaskLedgerError):
    """Configuration file could not be loaded."""

    code = "ConfigError"
