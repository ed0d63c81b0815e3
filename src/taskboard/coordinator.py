"""Sync coordinator: owns the task cache and routes commands to a backend.

Every mutation is a two-stage attempt. Stage 1 goes to Supabase when the
remote backend is usable; a connectivity or backend error there disables the
remote for the rest of the session (until the next ``fetch_all`` probe) and
the command is replayed once against the mock store. The cache is never
patched by the commands themselves: it only changes in ``_apply_event``, fed
by Realtime when Supabase is active and by the mock store otherwise.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, TypeVar

from pydantic import ValidationError as PydanticValidationError

from taskboard.backends.base import ChangeStream, TaskBackend
from taskboard.backends.mock import MockStore
from taskboard.backends.supabase import SupabaseGateway
from taskboard.events import ChangeEventBus
from taskboard.exceptions import BackendError, ConnectivityError, NotFoundError, ValidationError
from taskboard.models.events import ChangeEvent, EventType
from taskboard.models.status import BackendStatus, Notice
from taskboard.models.task import Task, TaskDraft, TaskPatch, TaskStatus
from taskboard.selector import BackendSelector, has_valid_credentials
from taskboard.settings import Settings
from taskboard.settings import settings as default_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

NoticeHandler = Callable[[Notice], None]

# Status button cycle; OVERDUE work resumes as in progress
NEXT_STATUS = {
    TaskStatus.NOT_STARTED: TaskStatus.IN_PROGRESS,
    TaskStatus.IN_PROGRESS: TaskStatus.DONE,
    TaskStatus.DONE: TaskStatus.NOT_STARTED,
    TaskStatus.OVERDUE: TaskStatus.IN_PROGRESS,
}

REMOTE_FAILURES = (ConnectivityError, BackendError)


class SyncCoordinator:
    """Authoritative in-memory task list for one dashboard session."""

    def __init__(
        self,
        selector: BackendSelector,
        mock_store: MockStore,
        bus: ChangeEventBus,
        notify: NoticeHandler | None = None,
    ) -> None:
        self._selector = selector
        self._mock = mock_store
        self._bus = bus
        self._notify = notify
        self._tasks: list[Task] = []
        self._backend: TaskBackend = mock_store
        self._remote_stream: ChangeStream | None = None
        # Events seen while a fetch is in flight, replayed onto its snapshot
        self._pending: list[ChangeEvent] | None = None
        self._subscription = bus.subscribe(self._apply_event)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        notify: NoticeHandler | None = None,
    ) -> SyncCoordinator:
        """Build the selector, both backends and the bus from settings."""
        settings = settings or default_settings
        bus = ChangeEventBus()
        configured = has_valid_credentials(settings.supabase_url, settings.supabase_anon_key)
        gateway = (
            SupabaseGateway(
                settings.supabase_url,
                settings.supabase_anon_key,
                table=settings.tasks_table,
                timeout=settings.remote_timeout_seconds,
            )
            if configured
            else None
        )
        if not configured:
            logger.info("[Sync] Supabase not configured, running in demo mode")
        selector = BackendSelector(gateway, remote_configured=configured)
        mock_store = MockStore(bus, latency_scale=settings.mock_latency_scale)
        return cls(selector, mock_store, bus, notify=notify)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def tasks(self) -> list[Task]:
        """Copy of the cached tasks in display order."""
        return list(self._tasks)

    @property
    def status(self) -> BackendStatus:
        return self._selector.status

    @property
    def remote_active(self) -> bool:
        return self._backend is not self._mock

    def get(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def fetch_all(self) -> list[Task]:
        """Reload the whole cache. Never raises.

        Probes Supabase first; on any remote failure the mock store is read
        instead. If even that fails the cache is emptied and a demo-mode
        notice is sent.
        """
        self._pending = []
        try:
            tasks = await self._fetch_from_active_backend()
        except Exception as e:
            logger.error(f"[Sync] Error fetching tasks: {e}")
            self._pending = None
            self._tasks = []
            self._send_notice(
                "info",
                "Demo mode",
                "Running in demo mode. Data will not be saved.",
            )
            return []

        self._tasks = list(tasks)
        pending, self._pending = self._pending or [], None
        for event in pending:
            self._reconcile(event)
        logger.info(f"[Sync] Loaded {len(self._tasks)} tasks from {self._backend.name}")
        return list(self._tasks)

    async def add(self, draft: TaskDraft | dict[str, Any]) -> Task:
        """Create a task. Rejects a blank title before touching any backend."""
        draft = _coerce(TaskDraft, draft)
        if not draft.title.strip():
            raise ValidationError("Task title is required")
        return await self._dispatch("insert", lambda backend: backend.insert(draft))

    async def update(self, task_id: str, patch: TaskPatch | dict[str, Any]) -> Task:
        """Apply a partial update; ``updated_at`` is always refreshed."""
        patch = _coerce(TaskPatch, patch)
        changes = patch.changes()
        if "title" in changes and not (changes["title"] or "").strip():
            raise ValidationError("Task title cannot be empty")
        return await self._dispatch("update", lambda backend: backend.update(task_id, patch))

    async def delete(self, task_id: str) -> None:
        await self._dispatch("delete", lambda backend: backend.delete(task_id))

    async def set_done(self, task_id: str, done: bool) -> Task:
        """Checkbox toggle: DONE when checked, NOT_STARTED otherwise."""
        status = TaskStatus.DONE if done else TaskStatus.NOT_STARTED
        return await self.update(task_id, TaskPatch(status=status))

    async def cycle_status(self, task_id: str) -> Task:
        """Advance a cached task to its next status."""
        task = self.get(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return await self.update(task_id, TaskPatch(status=NEXT_STATUS[task.status]))

    async def close(self) -> None:
        """Stop listening for changes from either backend."""
        self._subscription.unsubscribe()
        await self._drop_remote_stream()

    # ------------------------------------------------------------------
    # Backend selection and fallback
    # ------------------------------------------------------------------

    async def _fetch_from_active_backend(self) -> list[Task]:
        gateway = self._selector.gateway
        if gateway is not None and await self._selector.probe():
            try:
                await self._ensure_remote_stream()
                tasks = await gateway.fetch_all()
            except REMOTE_FAILURES as e:
                logger.error(f"[Sync] Supabase fetch failed, using mock data: {e}")
                await self._fall_back(str(e))
            else:
                self._backend = gateway
                return tasks
        elif self.remote_active:
            await self._fall_back("connection test failed")
        else:
            if self._selector.remote_configured:
                self._send_notice(
                    "warning",
                    "Supabase unreachable",
                    "Supabase is configured but not reachable. Using demo mode.",
                )
            await self._use_mock()
        return await self._mock.fetch_all()

    async def _dispatch(self, action: str, op: Callable[[TaskBackend], Awaitable[T]]) -> T:
        if self.remote_active:
            try:
                return await op(self._backend)
            except REMOTE_FAILURES as e:
                logger.error(f"[Sync] Supabase {action} failed: {e}")
                await self._fall_back(str(e))
        return await op(self._mock)

    async def _fall_back(self, reason: str) -> None:
        self._selector.mark_unusable(reason)
        self._flush_pending()
        # Keep what the user already sees editable in demo mode
        self._mock.seed(self._tasks)
        await self._use_mock()
        self._send_notice(
            "warning",
            "Supabase unavailable",
            "Lost connection to Supabase. Switched to demo mode; changes will not be saved.",
        )

    async def _use_mock(self) -> None:
        self._backend = self._mock
        await self._drop_remote_stream()

    async def _ensure_remote_stream(self) -> None:
        gateway = self._selector.gateway
        if self._remote_stream is not None or gateway is None:
            return
        self._remote_stream = await gateway.subscribe_changes(self._bus.emit)

    async def _drop_remote_stream(self) -> None:
        if self._remote_stream is None:
            return
        stream, self._remote_stream = self._remote_stream, None
        try:
            await stream.unsubscribe()
        except Exception as e:
            logger.warning(f"[Sync] Failed to close Realtime channel: {e}")

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def _apply_event(self, event: ChangeEvent) -> None:
        """Bus handler: merge a change now, or hold it until the running fetch lands."""
        if self._pending is not None:
            self._pending.append(event)
            return
        self._reconcile(event)

    def _flush_pending(self) -> None:
        # Bring the cache up to date mid-fetch; later events keep buffering
        if self._pending:
            pending, self._pending = self._pending, []
            for event in pending:
                self._reconcile(event)

    def _reconcile(self, event: ChangeEvent) -> None:
        """Merge one change into the cache, whatever backend it came from."""
        if event.event_type is EventType.INSERT and event.new is not None:
            if self.get(event.new.id) is None:
                self._tasks.append(event.new)
            else:
                logger.debug(f"[Sync] Duplicate INSERT for {event.new.id} ignored")
        elif event.event_type is EventType.UPDATE and event.new is not None:
            for index, task in enumerate(self._tasks):
                if task.id == event.new.id:
                    self._tasks[index] = event.new
                    break
        elif event.event_type is EventType.DELETE and event.old is not None:
            self._tasks = [task for task in self._tasks if task.id != event.old.id]

    def _send_notice(self, level: str, title: str, message: str) -> None:
        if self._notify is not None:
            self._notify(Notice(level=level, title=title, message=message))


def _coerce(model: type[T], value: Any) -> T:
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)  # type: ignore[attr-defined]
    except PydanticValidationError as e:
        raise ValidationError(str(e)) from e
