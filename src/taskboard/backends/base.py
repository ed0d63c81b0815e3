"""Backend interface shared by the Supabase gateway and the mock store."""

from __future__ import annotations

from typing import Protocol

from taskboard.events import ChangeHandler
from taskboard.models.task import Task, TaskDraft, TaskPatch


class TaskBackend(Protocol):
    """CRUD contract every task data source implements."""

    name: str

    async def fetch_all(self) -> list[Task]: ...

    async def insert(self, draft: TaskDraft) -> Task: ...

    async def update(self, task_id: str, patch: TaskPatch) -> Task: ...

    async def delete(self, task_id: str) -> None: ...


class ChangeStream(Protocol):
    """Live subscription to a backend's change feed."""

    async def unsubscribe(self) -> None: ...


class RemoteGateway(TaskBackend, Protocol):
    """A backend with a reachability check and a push-based change feed."""

    async def probe(self) -> None: ...

    async def subscribe_changes(self, handler: ChangeHandler) -> ChangeStream: ...
