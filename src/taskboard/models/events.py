"""Change event models delivered on the event bus."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from taskboard.models.task import Task, TaskKey


class EventType(StrEnum):
    """Row-level change kinds."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ChangeEvent(BaseModel):
    """A task mutation notification.

    ``new`` is set for INSERT and UPDATE, ``old`` for DELETE. A DELETE coming
    from Realtime usually only carries the primary key, hence ``TaskKey``.
    """

    event_type: EventType
    new: Task | None = None
    old: Task | TaskKey | None = Field(default=None, union_mode="left_to_right")

    @classmethod
    def insert(cls, task: Task) -> ChangeEvent:
        return cls(event_type=EventType.INSERT, new=task)

    @classmethod
    def update(cls, task: Task) -> ChangeEvent:
        return cls(event_type=EventType.UPDATE, new=task)

    @classmethod
    def delete(cls, task: Task | TaskKey) -> ChangeEvent:
        return cls(event_type=EventType.DELETE, old=task)

    @classmethod
    def from_realtime_payload(cls, payload: dict[str, Any]) -> ChangeEvent | None:
        """Parse a postgres_changes payload.

        Accepts the flat ``{eventType, new, old}`` shape as well as supabase-py
        v2's ``{data: {type, record, old_record}}``. Returns None when the
        payload carries no usable change.
        """
        data = payload.get("data")
        if not isinstance(data, dict):
            data = {}

        raw_type = payload.get("eventType") or data.get("type") or data.get("eventType")
        try:
            event_type = EventType(str(raw_type).upper())
        except ValueError:
            return None

        new_row = payload.get("new") or data.get("record") or payload.get("record") or None
        old_row = payload.get("old") or data.get("old_record") or payload.get("old_record") or None

        try:
            new = Task.model_validate(new_row) if new_row else None
        except PydanticValidationError:
            return None

        old: Task | TaskKey | None = None
        if old_row:
            try:
                old = Task.model_validate(old_row)
            except PydanticValidationError:
                if "id" not in old_row:
                    return None
                old = TaskKey.model_validate(old_row)

        if event_type is EventType.DELETE and old is None:
            return None
        if event_type is not EventType.DELETE and new is None:
            return None
        return cls(event_type=event_type, new=new, old=old)

    @property
    def task_id(self) -> str | None:
        """Id of the affected row."""
        if self.new is not None:
            return self.new.id
        if self.old is not None:
            return self.old.id
        return None
