"""Dashboard commands exposed as MCP tools.

Each tool mirrors one control of the task dashboard (add dialog, status
checkbox and selector, delete button, search box and filters, counters) and
returns a JSON string. Domain errors come back as ``{"error": ...}`` so the
caller can show them as a notice.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Annotated, Any, Literal, Optional

from fastmcp import Context
from pydantic import Field

from taskboard.coordinator import SyncCoordinator
from taskboard.exceptions import TaskboardError
from taskboard.models.status import Notice
from taskboard.models.task import Task
from taskboard.query import compute_stats, filter_tasks

logger = logging.getLogger(__name__)

PriorityName = Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]
StatusName = Literal["NOT_STARTED", "IN_PROGRESS", "DONE", "OVERDUE"]

_coordinator: SyncCoordinator | None = None
_coordinator_lock = asyncio.Lock()

NOTICE_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _log_notice(notice: Notice) -> None:
    logger.log(NOTICE_LEVELS[notice.level], f"[Tools] {notice.title}: {notice.message}")


async def get_coordinator() -> SyncCoordinator:
    """Return the session coordinator, loading tasks on first use."""
    global _coordinator
    if _coordinator is None:
        async with _coordinator_lock:
            # Published only after the first load completes
            if _coordinator is None:
                coordinator = SyncCoordinator.from_settings(notify=_log_notice)
                await coordinator.fetch_all()
                _coordinator = coordinator
    return _coordinator


def _task_json(task: Task) -> dict[str, Any]:
    return task.model_dump(mode="json")


def _error(e: Exception) -> str:
    return json.dumps({"error": str(e), "kind": type(e).__name__})


async def add_task(
    title: Annotated[str, Field(description="Task title")],
    description: Annotated[Optional[str], Field(description="Longer description")] = None,
    priority: Annotated[PriorityName, Field(description="Task priority level")] = "MEDIUM",
    status: Annotated[StatusName, Field(description="Initial status")] = "NOT_STARTED",
    assignee: Annotated[Optional[str], Field(description="Person responsible")] = None,
    deadline: Annotated[Optional[str], Field(description="ISO 8601 deadline")] = None,
    category: Annotated[Optional[str], Field(description="Free-form category")] = None,
    notes: Annotated[Optional[str], Field(description="Notes shown in the table")] = None,
    ctx: Context | None = None,
) -> str:
    """Create a task on the active backend.

    Returns:
        JSON of the created task, or an error object
    """
    if ctx:
        await ctx.info(f"Creating {priority} task: {title}")

    coordinator = await get_coordinator()
    try:
        task = await coordinator.add(
            {
                "title": title,
                "description": description,
                "priority": priority,
                "status": status,
                "assignee": assignee,
                "deadline": deadline,
                "category": category,
                "notes": notes,
            }
        )
    except TaskboardError as e:
        logger.warning(f"[Tools] add_task rejected: {e}")
        return _error(e)

    return json.dumps({"task": _task_json(task), "backend": coordinator.status.mode})


async def list_tasks(
    search: Annotated[str, Field(description="Matches title, description or assignee")] = "",
    status: Annotated[str, Field(description="Status name or 'all'")] = "all",
    priority: Annotated[str, Field(description="Priority name or 'all'")] = "all",
) -> str:
    """List cached tasks after applying the dashboard filters."""
    coordinator = await get_coordinator()
    tasks = coordinator.tasks
    try:
        shown = filter_tasks(tasks, search=search, status=status, priority=priority)
    except ValueError as e:
        return _error(e)
    return json.dumps(
        {
            "tasks": [_task_json(task) for task in shown],
            "showing": len(shown),
            "total": len(tasks),
        }
    )


async def update_task(
    task_id: Annotated[str, Field(description="Task id")],
    title: Annotated[Optional[str], Field(description="New title")] = None,
    description: Annotated[Optional[str], Field(description="New description, empty to clear")] = None,
    priority: Annotated[Optional[PriorityName], Field(description="New priority")] = None,
    status: Annotated[Optional[StatusName], Field(description="New status")] = None,
    assignee: Annotated[Optional[str], Field(description="New assignee, empty to clear")] = None,
    deadline: Annotated[Optional[str], Field(description="New ISO 8601 deadline, empty to clear")] = None,
    category: Annotated[Optional[str], Field(description="New category, empty to clear")] = None,
    notes: Annotated[Optional[str], Field(description="New notes, empty to clear")] = None,
) -> str:
    """Change only the supplied fields of a task."""
    supplied = {
        "title": title,
        "description": description,
        "priority": priority,
        "status": status,
        "assignee": assignee,
        "deadline": deadline,
        "category": category,
        "notes": notes,
    }
    patch = {field: value for field, value in supplied.items() if value is not None}

    coordinator = await get_coordinator()
    try:
        task = await coordinator.update(task_id, patch)
    except TaskboardError as e:
        logger.warning(f"[Tools] update_task {task_id} failed: {e}")
        return _error(e)
    return json.dumps({"task": _task_json(task)})


async def toggle_task(
    task_id: Annotated[str, Field(description="Task id")],
    done: Annotated[bool, Field(description="Checked state of the done checkbox")],
) -> str:
    """Mark a task DONE, or back to NOT_STARTED when unchecked."""
    coordinator = await get_coordinator()
    try:
        task = await coordinator.set_done(task_id, done)
    except TaskboardError as e:
        return _error(e)
    return json.dumps({"task": _task_json(task)})


async def cycle_task_status(task_id: Annotated[str, Field(description="Task id")]) -> str:
    """Move a task to its next status."""
    coordinator = await get_coordinator()
    try:
        task = await coordinator.cycle_status(task_id)
    except TaskboardError as e:
        return _error(e)
    return json.dumps({"task": _task_json(task)})


async def delete_task(
    task_id: Annotated[str, Field(description="Task id")],
    ctx: Context | None = None,
) -> str:
    """Delete a task. Deleting an unknown id in demo mode is not an error."""
    if ctx:
        await ctx.info(f"Deleting task {task_id}")

    coordinator = await get_coordinator()
    try:
        await coordinator.delete(task_id)
    except TaskboardError as e:
        logger.warning(f"[Tools] delete_task {task_id} failed: {e}")
        return _error(e)
    return json.dumps({"task_id": task_id, "status": "deleted"})


async def task_stats() -> str:
    """Counters shown on the dashboard cards."""
    coordinator = await get_coordinator()
    return compute_stats(coordinator.tasks).model_dump_json()


async def backend_status() -> str:
    """Which backend is serving the dashboard."""
    coordinator = await get_coordinator()
    return coordinator.status.model_dump_json()


async def refresh_tasks() -> str:
    """Re-probe Supabase and reload every task."""
    coordinator = await get_coordinator()
    tasks = await coordinator.fetch_all()
    return json.dumps({"total": len(tasks), "backend": coordinator.status.mode})
