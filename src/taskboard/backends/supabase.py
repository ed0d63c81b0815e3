"""Supabase-backed task gateway.

Wraps the async supabase-py client: PostgREST for CRUD and a Realtime channel
for the change feed. Every failure is translated into the taskboard error
taxonomy so the coordinator can decide whether to fall back.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any, Awaitable, Callable

import httpx
from postgrest import APIError
from pydantic import ValidationError as PydanticValidationError
from supabase._async.client import AsyncClient
from supabase._async.client import create_client as create_async_client

from taskboard.events import ChangeHandler
from taskboard.exceptions import BackendError, ConnectivityError, NotFoundError
from taskboard.models.events import ChangeEvent
from taskboard.models.task import Task, TaskDraft, TaskPatch

logger = logging.getLogger(__name__)

CHANNEL_NAME = "tasks-changes"

# PostgREST/Postgres codes meaning "this project is not usable with these
# credentials": bad JWT, RLS denial, missing table.
UNUSABLE_CODES = frozenset({"401", "403", "PGRST301", "PGRST302", "42501", "42P01"})


def _classify_api_error(action: str, error: APIError) -> Exception:
    code = str(error.code or "")
    message = error.message or str(error)
    if code in UNUSABLE_CODES or "jwt" in message.lower() or "api key" in message.lower():
        return ConnectivityError(f"Supabase {action} rejected ({code}): {message}")
    return BackendError(f"Supabase {action} failed ({code}): {message}")


def _parse_row(row: dict[str, Any]) -> Task:
    try:
        return Task.model_validate(row)
    except PydanticValidationError as e:
        raise BackendError(f"Malformed task row from Supabase: {e}") from e


class RealtimeSubscription:
    """Live Realtime channel feeding a change handler."""

    def __init__(self, channel: Any) -> None:
        self._channel = channel

    async def unsubscribe(self) -> None:
        if self._channel is None:
            return
        channel, self._channel = self._channel, None
        await channel.unsubscribe()


class SupabaseGateway:
    """Task CRUD and change feed on a Supabase ``tasks`` table."""

    name = "supabase"

    def __init__(
        self,
        url: str,
        key: str,
        table: str = "tasks",
        timeout: float = 10.0,
        client: AsyncClient | None = None,
    ) -> None:
        self.url = url
        self._key = key
        self.table = table
        self.timeout = timeout
        self._client = client

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    async def probe(self) -> None:
        """Row-count check with no body and no side effects."""
        await self._run(
            "probe",
            lambda client: client.table(self.table).select("id", count="exact", head=True).execute(),
        )

    async def fetch_all(self) -> list[Task]:
        """Return every task, oldest first."""
        response = await self._run(
            "fetch",
            lambda client: client.table(self.table).select("*").order("created_at", desc=False).execute(),
        )
        return [_parse_row(row) for row in response.data or []]

    async def insert(self, draft: TaskDraft) -> Task:
        row = draft.to_row()
        response = await self._run(
            "insert",
            lambda client: client.table(self.table).insert(row).execute(),
        )
        if not response.data:
            raise BackendError("Supabase insert returned no data")
        return _parse_row(response.data[0])

    async def update(self, task_id: str, patch: TaskPatch) -> Task:
        """Apply ``patch`` and stamp ``updated_at``.

        The stamp comes from this process's UTC clock, which is assumed to be
        in step with the database server. A table trigger that sets
        ``updated_at = now()`` on update overrides it.
        """
        row = {**patch.to_row(), "updated_at": datetime.now(UTC).isoformat()}
        response = await self._run(
            "update",
            lambda client: client.table(self.table).update(row).eq("id", task_id).execute(),
        )
        if not response.data:
            raise NotFoundError(task_id)
        return _parse_row(response.data[0])

    async def delete(self, task_id: str) -> None:
        """Delete by id. Supabase reports no error for an absent id."""
        await self._run(
            "delete",
            lambda client: client.table(self.table).delete().eq("id", task_id).execute(),
        )

    async def subscribe_changes(self, handler: ChangeHandler) -> RealtimeSubscription:
        """Forward every INSERT/UPDATE/DELETE on the table to ``handler``."""
        client = await self._connect()

        def on_change(payload: dict[str, Any]) -> None:
            event = ChangeEvent.from_realtime_payload(payload)
            if event is None:
                logger.warning(f"[Remote] Ignoring unusable Realtime payload. Keys: {list(payload.keys())}")
                return
            handler(event)

        channel = client.channel(CHANNEL_NAME)
        channel.on_postgres_changes(
            event="*",
            schema="public",
            table=self.table,
            callback=on_change,
        )
        try:
            await asyncio.wait_for(channel.subscribe(), timeout=self.timeout)
        except Exception as e:
            raise ConnectivityError(f"Realtime subscribe failed: {e}") from e
        logger.info(f"[Remote] Subscribed to Realtime channel: {CHANNEL_NAME}")
        return RealtimeSubscription(channel)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _connect(self) -> AsyncClient:
        if self._client is None:
            try:
                self._client = await create_async_client(self.url, self._key)
            except Exception as e:
                raise ConnectivityError(f"Could not create Supabase client: {e}") from e
        return self._client

    async def _run(self, action: str, build: Callable[[AsyncClient], Awaitable[Any]]) -> Any:
        client = await self._connect()
        try:
            return await asyncio.wait_for(build(client), timeout=self.timeout)
        except TimeoutError as e:
            raise ConnectivityError(f"Supabase {action} timed out after {self.timeout}s") from e
        except APIError as e:
            raise _classify_api_error(action, e) from e
        except (httpx.HTTPError, OSError) as e:
            raise ConnectivityError(f"Supabase {action} unreachable: {e}") from e
        except Exception as e:
            raise BackendError(f"Supabase {action} failed: {e}") from e
