"""
TaskLedger — Base Models

Identifiers, common enums and timestamp helpers shared by all models.
"""

import uuid
from datetime import UTC, datetime
from enum import StrEnum

# =============================================================================
# ID GENERATION
# =============================================================================


def generate_id(prefix: str = "") -> str:
    """Generate a unique ID with optional prefix."""
    uid = uuid.uuid4().hex[:16]
    if prefix:
        return f"{prefix}_{uid}"
    return uid


# =============================================================================
# COMMON ENUMS
# =============================================================================


class TaskStatus(StrEnum):
    """Task workflow status."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    TESTING = "testing"
    DONE = "done"


class TaskPriority(StrEnum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# =============================================================================
# DATETIME HELPERS
# =============================================================================


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(UTC)


def now_iso() -> str:
    """Get current UTC datetime as ISO string."""
    return format_timestamp(utc_now())


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; leave aware ones alone."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def format_timestamp(value: datetime) -> str:
    """Format an instant for storage: ISO-8601 in UTC, millisecond precision."""
    return ensure_aware(value).astimezone(UTC).isoformat(timespec="milliseconds")


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a stored ISO timestamp into an aware datetime."""
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    return ensure_aware(parsed)
