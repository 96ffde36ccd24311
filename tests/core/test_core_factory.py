"""Tests for build_app and the storage strategies."""

from __future__ import annotations

from datetime import timedelta

import pytest

from blokit.capabilities import StaticCapabilityGate
from blokit.core.factory import build_app
from blokit.core.storage_strategy import MemoryStorageStrategy, SqliteStorageStrategy
from blokit.models import AppConfig, SessionStatus, TaskProgress, TaskState
from blokit.tasks import AsyncioTaskRunner


@pytest.fixture()
def config(tmp_path) -> AppConfig:
    return AppConfig(
        db_path=str(tmp_path / "blokit.db"),
        state_dir=str(tmp_path / "state"),
        block_minutes=30,
    )


@pytest.mark.asyncio
async def test_build_app_wires_services_to_one_store(config, clock, runner):
    app = await build_app(
        config, storage=MemoryStorageStrategy(), runner=runner, clock=clock
    )

    todo = await app.todos.create_todo("plan day")
    await app.sessions.start()
    await runner.finish("countdown")

    assert app.todos.list_incomplete().value == [todo]
    assert runner.scheduled == [("countdown", 30 * 60)]
    [block] = await app.sessions.todays_blocks()
    assert block.duration == timedelta(minutes=30)
    await app.close()


@pytest.mark.asyncio
async def test_build_app_defaults_to_sqlite_and_asyncio_runner(config):
    app = await build_app(config)
    try:
        assert isinstance(app.storage, SqliteStorageStrategy)
        assert app.storage.storage_type == "sqlite"
        assert isinstance(app.runner, AsyncioTaskRunner)
        assert app.sessions.tag == "countdown"
    finally:
        await app.close()
    assert app.storage.connection is None


@pytest.mark.asyncio
async def test_build_app_adopts_resumable_countdown(config, clock, runner):
    runner.resumable.append(
        TaskProgress(
            task_id="left-over",
            tag="countdown",
            duration_seconds=1500,
            remaining_seconds=600,
            state=TaskState.RUNNING,
        )
    )

    app = await build_app(
        config, storage=MemoryStorageStrategy(), runner=runner, clock=clock
    )

    session = app.sessions.state.value
    assert session.status == SessionStatus.RUNNING
    assert session.task_id == "left-over"
    assert session.remaining == timedelta(minutes=10)
    await app.close()


@pytest.mark.asyncio
async def test_build_app_without_resume_leaves_countdown_alone(config, clock, runner):
    runner.resumable.append(
        TaskProgress(
            task_id="left-over",
            tag="countdown",
            duration_seconds=1500,
            remaining_seconds=600,
            state=TaskState.RUNNING,
        )
    )

    app = await build_app(
        config,
        storage=MemoryStorageStrategy(),
        runner=runner,
        gate=StaticCapabilityGate(granted=True),
        clock=clock,
        resume=False,
    )

    assert app.sessions.state.value.status == SessionStatus.IDLE
    assert runner.resumable
    await app.close()


@pytest.mark.asyncio
async def test_sqlite_strategy_data_survives_reopen(config, clock):
    first = await build_app(config, storage=SqliteStorageStrategy(config.db_path), clock=clock)
    await first.todos.create_todo("persisted")
    await first.close()

    second = await build_app(config, clock=clock, resume=False)
    try:
        assert [t.content for t in second.todos.list_all().value] == ["persisted"]
    finally:
        await second.close()


def test_memory_strategy_type():
    assert MemoryStorageStrategy().storage_type == "memory"
