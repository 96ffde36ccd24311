"""Contract tests run against both the in-memory and the SQLite stores.

Both adapters must answer the live queries identically and publish only
after a write has been applied.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest

from blokit.adapters.memory import InMemoryBlockRepository, InMemoryTodoRepository
from blokit.adapters.sqlite import (
    SqliteBlockRepository,
    SqliteTodoRepository,
    open_connection,
)
from blokit.exceptions import NotFoundError
from blokit.models import BlockCreate, TodoCreate
from blokit.repositories import LIVE_DAYS_KEPT, TodoQuery

_T0 = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture(params=["memory", "sqlite"])
def stores(request, tmp_path):
    if request.param == "memory":
        yield InMemoryTodoRepository(), InMemoryBlockRepository()
        return
    conn = open_connection(tmp_path / "contract.db")
    yield SqliteTodoRepository(conn), SqliteBlockRepository(conn)
    conn.close()


@pytest.fixture()
def todos(stores):
    return stores[0]


@pytest.fixture()
def blocks(stores):
    return stores[1]


async def _add(repo, content: str, offset: int = 0):
    return await repo.insert(
        TodoCreate(content=content, created_at=_T0 + timedelta(seconds=offset))
    )


# ---------------------------------------------------------------------------
# Todos
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_insert_assigns_id_and_defaults(todos):
    todo = await _add(todos, "buy milk")

    assert todo.id >= 1
    assert todo.content == "buy milk"
    assert todo.completed is False
    assert todo.marked is False
    assert todo.created_at == _T0
    assert await todos.get(todo.id) == todo


@pytest.mark.asyncio
async def test_update_roundtrips_all_fields(todos):
    todo = await _add(todos, "a")
    changed = todo.model_copy(
        update={
            "completed": True,
            "completed_at": _T0 + timedelta(minutes=1),
            "marked": True,
            "marked_at": _T0 + timedelta(minutes=2),
        }
    )

    await todos.update(changed)

    assert await todos.get(todo.id) == changed


@pytest.mark.asyncio
async def test_update_missing_raises_not_found(todos):
    todo = await _add(todos, "a")
    ghost = todo.model_copy(update={"id": todo.id + 100})

    with pytest.raises(NotFoundError):
        await todos.update(ghost)


@pytest.mark.asyncio
async def test_get_missing_raises_not_found(todos):
    with pytest.raises(NotFoundError):
        await todos.get(42)


@pytest.mark.asyncio
async def test_queries_filter_and_order(todos):
    a = await _add(todos, "a", 0)
    b = await _add(todos, "b", 1)
    c = await _add(todos, "c", 2)
    d = await _add(todos, "d", 3)

    await todos.update(
        b.model_copy(update={"marked": True, "marked_at": _T0 + timedelta(hours=1)})
    )
    await todos.update(
        c.model_copy(update={"marked": True, "marked_at": _T0 + timedelta(hours=2)})
    )
    await todos.update(
        d.model_copy(
            update={
                "marked": True,
                "marked_at": _T0 + timedelta(hours=3),
                "completed": True,
                "completed_at": _T0 + timedelta(hours=3),
            }
        )
    )
    await todos.update(
        a.model_copy(update={"completed": True, "completed_at": _T0 + timedelta(hours=4)})
    )

    incomplete = todos.subscribe(TodoQuery.INCOMPLETE).value
    marked = todos.subscribe(TodoQuery.MARKED).value
    everything = todos.subscribe(TodoQuery.ALL).value

    assert [t.content for t in incomplete] == ["b", "c"]
    assert [t.content for t in marked] == ["c", "b"]
    assert [t.content for t in everything] == ["a", "b", "c", "d"]


@pytest.mark.asyncio
async def test_subscribers_see_committed_state(todos):
    live = todos.subscribe(TodoQuery.INCOMPLETE)
    observed = []

    async def check_store(snapshot):
        # Each published snapshot must match what a fresh read returns.
        for todo in snapshot:
            assert await todos.get(todo.id) == todo

    live.subscribe(observed.append)
    todo = await _add(todos, "a")
    await todos.update(
        todo.model_copy(update={"completed": True, "completed_at": _T0})
    )

    assert [len(s) for s in observed] == [0, 1, 0]
    for snapshot in observed:
        await check_store(snapshot)


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_block_insert_and_list_between(blocks):
    first = await blocks.insert(
        BlockCreate(started_at=_T0, finished_at=_T0 + timedelta(minutes=25))
    )
    second = await blocks.insert(
        BlockCreate(
            started_at=_T0 + timedelta(hours=1),
            finished_at=_T0 + timedelta(hours=1, minutes=25),
        )
    )
    await blocks.insert(
        BlockCreate(
            started_at=_T0 + timedelta(days=2),
            finished_at=_T0 + timedelta(days=2, minutes=25),
        )
    )

    found = await blocks.list_between(_T0, _T0 + timedelta(days=1))

    assert found == [first, second]
    assert first.duration == timedelta(minutes=25)
    assert first.id != second.id


@pytest.mark.asyncio
async def test_block_day_view_is_live(blocks):
    day = _T0.astimezone().date()
    live = blocks.subscribe(day)
    assert live.value == []

    block = await blocks.insert(
        BlockCreate(started_at=_T0, finished_at=_T0 + timedelta(minutes=25))
    )

    assert live.value == [block]
    assert await blocks.list_for_day(day) == [block]
    assert await blocks.list_for_day(date(2000, 1, 1)) == []


@pytest.mark.asyncio
async def test_unwatched_day_views_are_dropped(blocks):
    today = _T0.astimezone().date()
    seen = []
    blocks.subscribe(today).subscribe(seen.append)

    for offset in range(1, 31):
        blocks.subscribe(today - timedelta(days=offset))

    assert len(blocks._live) == LIVE_DAYS_KEPT

    block = await blocks.insert(
        BlockCreate(started_at=_T0, finished_at=_T0 + timedelta(minutes=25))
    )
    assert seen[-1] == [block]
