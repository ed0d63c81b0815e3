"""Taskboard data models."""

from taskboard.models.events import ChangeEvent, EventType
from taskboard.models.status import BackendMode, BackendStatus, Notice
from taskboard.models.task import Priority, Task, TaskDraft, TaskKey, TaskPatch, TaskStatus

__all__ = [
    "BackendMode",
    "BackendStatus",
    "ChangeEvent",
    "EventType",
    "Notice",
    "Priority",
    "Task",
    "TaskDraft",
    "TaskKey",
    "TaskPatch",
    "TaskStatus",
]
