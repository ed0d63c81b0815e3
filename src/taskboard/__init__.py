"""Dual-backend task synchronization for the taskboard dashboard."""

from taskboard.coordinator import SyncCoordinator
from taskboard.events import ChangeEventBus, Subscription
from taskboard.exceptions import (
    BackendError,
    ConnectivityError,
    NotFoundError,
    TaskboardError,
    ValidationError,
)
from taskboard.models import (
    BackendMode,
    BackendStatus,
    ChangeEvent,
    EventType,
    Notice,
    Priority,
    Task,
    TaskDraft,
    TaskPatch,
    TaskStatus,
)
from taskboard.query import TaskStats, compute_stats, filter_tasks

__all__ = [
    "BackendError",
    "BackendMode",
    "BackendStatus",
    "ChangeEvent",
    "ChangeEventBus",
    "ConnectivityError",
    "EventType",
    "NotFoundError",
    "Notice",
    "Priority",
    "Subscription",
    "SyncCoordinator",
    "Task",
    "TaskDraft",
    "TaskPatch",
    "TaskStats",
    "TaskStatus",
    "TaskboardError",
    "ValidationError",
    "compute_stats",
    "filter_tasks",
]
