"""Task models shared by the coordinator and both backends."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

OPTIONAL_TEXT_FIELDS = ("description", "assignee", "category", "notes")


class Priority(StrEnum):
    """Task priority levels, lowest first."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class TaskStatus(StrEnum):
    """Task progress states."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    OVERDUE = "OVERDUE"


def _blank_to_none(value: Any) -> Any:
    # Form inputs submit "" for untouched fields; the table stores NULL.
    if isinstance(value, str) and not value.strip():
        return None
    return value


class Task(BaseModel):
    """A task row as stored by either backend."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.NOT_STARTED
    assignee: str | None = None
    deadline: datetime | None = None
    category: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Remote primary keys may be integers or UUIDs
        return value if isinstance(value, str) else str(value)


class TaskKey(BaseModel):
    """Primary key of a deleted row, as delivered by Realtime."""

    model_config = ConfigDict(extra="ignore")

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return value if isinstance(value, str) else str(value)


class TaskDraft(BaseModel):
    """Insert payload: a task before the backend assigns id and timestamps."""

    model_config = ConfigDict(extra="forbid")

    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.NOT_STARTED
    assignee: str | None = None
    deadline: datetime | None = None
    category: str | None = None
    notes: str | None = None

    @field_validator(*OPTIONAL_TEXT_FIELDS, "deadline", mode="before")
    @classmethod
    def _normalize_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def to_row(self) -> dict[str, Any]:
        """Serialize for a database insert."""
        return self.model_dump(mode="json")


class TaskPatch(BaseModel):
    """Partial update payload. Only explicitly supplied fields are applied."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    priority: Priority | None = None
    status: TaskStatus | None = None
    assignee: str | None = None
    deadline: datetime | None = None
    category: str | None = None
    notes: str | None = None

    @field_validator(*OPTIONAL_TEXT_FIELDS, "deadline", mode="before")
    @classmethod
    def _normalize_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("title", "priority", "status", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        # Omit these to leave them unchanged; they cannot be cleared
        if value is None:
            raise ValueError("field cannot be cleared")
        return value

    def changes(self) -> dict[str, Any]:
        """Fields the caller actually supplied, as Python values."""
        return self.model_dump(exclude_unset=True)

    def to_row(self) -> dict[str, Any]:
        """Supplied fields serialized for a database update."""
        return self.model_dump(mode="json", exclude_unset=True)
