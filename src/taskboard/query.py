"""Search, filters and counters over the coordinator's task list."""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel

from taskboard.models.task import Priority, Task, TaskStatus

ALL = "all"


class TaskStats(BaseModel):
    """Dashboard counters."""

    total: int = 0
    done: int = 0
    in_progress: int = 0
    not_started: int = 0
    overdue: int = 0


def matches_search(task: Task, term: str) -> bool:
    """Case-insensitive substring match on title, description and assignee."""
    needle = term.strip().lower()
    if not needle:
        return True
    haystacks = (task.title, task.description, task.assignee)
    return any(text and needle in text.lower() for text in haystacks)


def filter_tasks(
    tasks: Iterable[Task],
    search: str = "",
    status: TaskStatus | str | None = None,
    priority: Priority | str | None = None,
) -> list[Task]:
    """Apply the dashboard filters. ``None`` or ``"all"`` disables a filter.

    Raises ValueError for an unknown status or priority name.
    """
    wanted_status = None if status in (None, ALL) else TaskStatus(str(status).upper())
    wanted_priority = None if priority in (None, ALL) else Priority(str(priority).upper())

    return [
        task
        for task in tasks
        if matches_search(task, search)
        and (wanted_status is None or task.status is wanted_status)
        and (wanted_priority is None or task.priority is wanted_priority)
    ]


def compute_stats(tasks: Iterable[Task]) -> TaskStats:
    stats = TaskStats()
    for task in tasks:
        stats.total += 1
        if task.status is TaskStatus.DONE:
            stats.done += 1
        elif task.status is TaskStatus.IN_PROGRESS:
            stats.in_progress += 1
        elif task.status is TaskStatus.NOT_STARTED:
            stats.not_started += 1
        elif task.status is TaskStatus.OVERDUE:
            stats.overdue += 1
    return stats
