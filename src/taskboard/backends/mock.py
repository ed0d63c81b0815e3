"""In-memory task backend used when Supabase is unconfigured or unreachable.

Every committed mutation publishes exactly one change event on the bus it was
given, so the coordinator sees mock writes the same way it sees Realtime
pushes from Supabase.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from uuid import uuid4

from taskboard.events import ChangeEventBus
from taskboard.exceptions import NotFoundError
from taskboard.models.events import ChangeEvent
from taskboard.models.task import Task, TaskDraft, TaskPatch

logger = logging.getLogger(__name__)

# Simulated network latency in seconds, scaled by ``latency_scale``
FETCH_DELAY = 0.5
INSERT_DELAY = 0.3
UPDATE_DELAY = 0.2
DELETE_DELAY = 0.2


class MockStore:
    """Ephemeral task store with the same contract as the Supabase gateway."""

    name = "mock"

    def __init__(self, bus: ChangeEventBus, latency_scale: float = 1.0) -> None:
        self._bus = bus
        self._latency_scale = max(latency_scale, 0.0)
        self._tasks: list[Task] = []

    async def fetch_all(self) -> list[Task]:
        """Return every task, oldest first."""
        await self._delay(FETCH_DELAY)
        return sorted(self._tasks, key=lambda task: task.created_at)

    async def insert(self, draft: TaskDraft) -> Task:
        await self._delay(INSERT_DELAY)
        now = datetime.now(UTC)
        task = Task(
            id=str(uuid4()),
            created_at=now,
            updated_at=now,
            **draft.model_dump(),
        )
        self._tasks.append(task)
        logger.info(f"[Mock] Inserted task {task.id}")
        self._bus.emit(ChangeEvent.insert(task))
        return task

    async def update(self, task_id: str, patch: TaskPatch) -> Task:
        await self._delay(UPDATE_DELAY)
        index = self._index_of(task_id)
        if index is None:
            raise NotFoundError(task_id)

        current = self._tasks[index]
        # updated_at never moves backwards, even if the wall clock does
        updated_at = max(datetime.now(UTC), current.updated_at)
        updated = current.model_copy(update={**patch.changes(), "updated_at": updated_at})
        self._tasks[index] = updated
        logger.info(f"[Mock] Updated task {task_id}: {sorted(patch.changes())}")
        self._bus.emit(ChangeEvent.update(updated))
        return updated

    async def delete(self, task_id: str) -> None:
        """Remove a task. Deleting an unknown id is a no-op."""
        await self._delay(DELETE_DELAY)
        index = self._index_of(task_id)
        if index is None:
            logger.debug(f"[Mock] Delete of unknown task {task_id} ignored")
            return
        removed = self._tasks.pop(index)
        logger.info(f"[Mock] Deleted task {task_id}")
        self._bus.emit(ChangeEvent.delete(removed))

    def seed(self, tasks: list[Task]) -> None:
        """Replace the store's contents with ``tasks`` without emitting events.

        Rows left over from an earlier demo period are discarded; ``tasks``
        is the newest known state.
        """
        self._tasks = list(tasks)
        logger.info(f"[Mock] Seeded {len(self._tasks)} tasks from cache")

    def _index_of(self, task_id: str) -> int | None:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        return None

    async def _delay(self, seconds: float) -> None:
        if self._latency_scale:
            await asyncio.sleep(seconds * self._latency_scale)

    def __len__(self) -> int:
        return len(self._tasks)
