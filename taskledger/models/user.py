"""
TaskLedger — User and Project Models

Read-only directory records referenced by tasks and time logs.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .base import generate_id, now_iso


class Role(StrEnum):
    """Caller role. Admins see every report; standard users see their own work."""

    ADMIN = "admin"
    STANDARD = "standard"


@dataclass(frozen=True)
class UserRef:
    """Display fields of a user, as embedded in reports."""

    id: str
    name: str
    email: str | None = None
    avatar: str | None = None


@dataclass
class User:
    """User account."""

    name: str
    email: str
    role: Role = Role.STANDARD
    avatar: str | None = None
    id: str = field(default_factory=lambda: generate_id("usr"))
    created_at: str = field(default_factory=now_iso)

    def ref(self) -> UserRef:
        return UserRef(id=self.id, name=self.name, email=self.email, avatar=self.avatar)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "User":
        return cls(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            role=Role(row["role"]),
            avatar=row.get("avatar"),
            created_at=row["created_at"],
        )


@dataclass
class Project:
    """Project with its manager and team, used for access checks."""

    name: str
    manager_id: str | None = None
    description: str | None = None
    team: list[str] = field(default_factory=list)
    is_archived: bool = False
    id: str = field(default_factory=lambda: generate_id("prj"))
    created_at: str = field(default_factory=now_iso)

    def has_member(self, user_id: str) -> bool:
        return user_id in self.team


@dataclass(frozen=True)
class Caller:
    """Authenticated identity of the user making a request."""

    user_id: str
    name: str
    role: Role = Role.STANDARD
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
