"""Unit tests for the in-memory MockStore."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import pytest

from taskboard.backends.mock import FETCH_DELAY, INSERT_DELAY, MockStore
from taskboard.events import ChangeEventBus
from taskboard.exceptions import NotFoundError
from taskboard.models.events import ChangeEvent, EventType
from taskboard.models.task import Priority, TaskDraft, TaskPatch, TaskStatus

from .fakes import make_task


@pytest.mark.asyncio
async def test_insert_then_fetch_round_trip(mock_store: MockStore) -> None:
    """Test that a fetched task carries every draft field plus id and timestamps."""
    draft = TaskDraft(
        title="Prepare demo",
        description="Slides and script",
        priority=Priority.HIGH,
        status=TaskStatus.IN_PROGRESS,
        assignee="Minh",
        deadline=datetime(2024, 6, 1, 17, 0, tzinfo=UTC),
        category="Sales",
        notes="Ask for feedback",
    )

    created = await mock_store.insert(draft)
    fetched = await mock_store.fetch_all()

    assert fetched == [created]
    assert created.model_dump(exclude={"id", "created_at", "updated_at"}) == draft.model_dump()
    assert created.id
    assert created.created_at == created.updated_at


@pytest.mark.asyncio
async def test_fetch_returns_oldest_first(mock_store: MockStore) -> None:
    mock_store.seed([make_task("new", minutes=10), make_task("old", minutes=1), make_task("mid", minutes=5)])

    fetched = await mock_store.fetch_all()

    assert [t.id for t in fetched] == ["old", "mid", "new"]


@pytest.mark.asyncio
async def test_ids_are_unique_under_rapid_inserts(mock_store: MockStore) -> None:
    created = [await mock_store.insert(TaskDraft(title=f"Task {i}")) for i in range(50)]

    assert len({task.id for task in created}) == 50


@pytest.mark.asyncio
async def test_each_mutation_emits_exactly_one_event(mock_store: MockStore, emitted: list[ChangeEvent]) -> None:
    created = await mock_store.insert(TaskDraft(title="Evented"))
    updated = await mock_store.update(created.id, TaskPatch(status=TaskStatus.DONE))
    await mock_store.delete(created.id)

    assert [event.event_type for event in emitted] == [EventType.INSERT, EventType.UPDATE, EventType.DELETE]
    assert emitted[0].new == created
    assert emitted[1].new == updated
    assert emitted[2].old == updated


@pytest.mark.asyncio
async def test_update_of_unknown_id_raises(mock_store: MockStore, emitted: list[ChangeEvent]) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        await mock_store.update("nope", TaskPatch(title="x"))

    assert exc_info.value.task_id == "nope"
    assert emitted == []


@pytest.mark.asyncio
async def test_delete_of_unknown_id_is_silent(mock_store: MockStore, emitted: list[ChangeEvent]) -> None:
    await mock_store.delete("nope")

    assert emitted == []
    assert len(mock_store) == 0


@pytest.mark.asyncio
async def test_update_refreshes_updated_at_only(mock_store: MockStore) -> None:
    mock_store.seed([make_task("t1", "Old title", assignee="An")])

    updated = await mock_store.update("t1", TaskPatch(title="New title"))

    assert updated.title == "New title"
    assert updated.assignee == "An"
    assert updated.created_at == make_task("t1").created_at
    assert updated.updated_at > updated.created_at


@pytest.mark.asyncio
async def test_updated_at_never_moves_backwards(mock_store: MockStore) -> None:
    future = datetime(2999, 1, 1, tzinfo=UTC)
    task = make_task("t1").model_copy(update={"updated_at": future})
    mock_store.seed([task])

    updated = await mock_store.update("t1", TaskPatch(notes="clock skew"))

    assert updated.updated_at == future


@pytest.mark.asyncio
async def test_seed_replaces_contents_and_emits_nothing(mock_store: MockStore, emitted: list[ChangeEvent]) -> None:
    mock_store.seed([make_task("a", "Stale"), make_task("b")])
    mock_store.seed([make_task("a", "Fresh"), make_task("c", minutes=1)])

    tasks = await mock_store.fetch_all()

    assert [(t.id, t.title) for t in tasks] == [("a", "Fresh"), ("c", "Task")]
    assert emitted == []


@pytest.mark.asyncio
async def test_latency_is_simulated_with_asyncio_sleep(bus: ChangeEventBus) -> None:
    store = MockStore(bus, latency_scale=0.5)

    with patch("taskboard.backends.mock.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        await store.insert(TaskDraft(title="Slow"))
        await store.fetch_all()

    assert [call.args[0] for call in mock_sleep.await_args_list] == [INSERT_DELAY * 0.5, FETCH_DELAY * 0.5]


@pytest.mark.asyncio
async def test_zero_latency_scale_never_sleeps(mock_store: MockStore) -> None:
    with patch("taskboard.backends.mock.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        await mock_store.insert(TaskDraft(title="Fast"))

    mock_sleep.assert_not_awaited()
