"""Shared test fixtures and fakes.

Provides a controllable clock, a fake durable task runner that delivers
synthetic progress reports, and service fixtures wired to in-memory stores.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest

from blokit.adapters.memory import InMemoryBlockRepository, InMemoryTodoRepository
from blokit.capabilities import StaticCapabilityGate
from blokit.models import TaskProgress, TaskState
from blokit.services.session_service import SessionService
from blokit.services.todo_service import TodoService
from blokit.tasks import DurableTaskRunner


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 6, 1, 10, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


# ---------------------------------------------------------------------------
# Durable task runner fake
# ---------------------------------------------------------------------------


class FakeTaskRunner(DurableTaskRunner):
    """Runner whose countdowns only move when the test calls ``tick``/``finish``.

    ``finish_silently`` lets a test finish a task without reporting it yet,
    to stage a cancel that arrives after completion.
    """

    def __init__(self, clock: FakeClock | None = None):
        super().__init__()
        self.clock = clock
        self.tasks: dict[str, TaskProgress] = {}
        self.scheduled: list[tuple[str, int]] = []
        self.cancel_calls: list[str] = []
        self.resumable: list[TaskProgress] = []
        self._counter = 0

    def current(self, tag: str) -> TaskProgress | None:
        progress = self.tasks.get(tag)
        if progress is None or progress.state.is_terminal:
            return None
        return progress

    def task_id_for(self, tag: str) -> str:
        return self.tasks[tag].task_id

    async def schedule(self, tag: str, duration_seconds: int) -> str:
        existing = self.current(tag)
        if existing is not None:
            await self._set(existing, TaskState.CANCELLED)
        self._counter += 1
        task_id = f"task-{self._counter}"
        self.scheduled.append((tag, duration_seconds))
        progress = TaskProgress(
            task_id=task_id,
            tag=tag,
            duration_seconds=duration_seconds,
            remaining_seconds=duration_seconds,
            state=TaskState.RUNNING,
        )
        self.tasks[tag] = progress
        return task_id

    async def cancel(self, task_id: str) -> None:
        self.cancel_calls.append(task_id)
        for progress in self.tasks.values():
            if progress.task_id == task_id and not progress.state.is_terminal:
                await self._set(progress, TaskState.CANCELLED)
                return

    async def resume(self, tag: str) -> list[TaskProgress]:
        resumed = [p for p in self.resumable if p.tag == tag]
        for progress in resumed:
            self.tasks[tag] = progress
        self.resumable = [p for p in self.resumable if p.tag != tag]
        return resumed

    async def tick(self, tag: str, count: int = 1) -> None:
        for _ in range(count):
            progress = self.tasks[tag]
            remaining = max(0, progress.remaining_seconds - 1)
            if self.clock is not None:
                self.clock.advance(1)
            await self._set(progress, TaskState.RUNNING, remaining)

    async def finish(self, tag: str) -> None:
        progress = self.tasks[tag]
        await self.tick(tag, progress.remaining_seconds)
        await self._set(self.tasks[tag], TaskState.FINISHED, 0)

    def finish_silently(self, tag: str) -> TaskProgress:
        progress = self.tasks[tag].model_copy(
            update={"state": TaskState.FINISHED, "remaining_seconds": 0}
        )
        self.tasks[tag] = progress
        return progress

    async def report(self, progress: TaskProgress) -> None:
        await self._emit(progress)

    async def _set(
        self, progress: TaskProgress, state: TaskState, remaining: int | None = None
    ) -> None:
        update = {"state": state}
        if remaining is not None:
            update["remaining_seconds"] = remaining
        updated = progress.model_copy(update=update)
        self.tasks[progress.tag] = updated
        await self._emit(updated)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def todo_repo():
    return InMemoryTodoRepository()


@pytest.fixture()
def block_repo():
    return InMemoryBlockRepository()


@pytest.fixture()
def todo_service(todo_repo, clock):
    return TodoService(todo_repo, clock=clock)


@pytest.fixture()
def runner(clock):
    return FakeTaskRunner(clock)


@pytest.fixture()
def gate():
    return StaticCapabilityGate(granted=True)


@pytest.fixture()
def session_service(runner, gate, block_repo, clock):
    return SessionService(
        runner,
        gate,
        block_repo,
        block_duration=timedelta(minutes=25),
        clock=clock,
    )


@pytest.fixture()
def isolated_config(tmp_path):
    """Point the cached config service at *tmp_path* and keep logs out of the home dir."""
    from blokit.services.config_service import ConfigService, get_config_service

    get_config_service.cache_clear()
    svc = ConfigService(config_dir=tmp_path / "config")
    svc.set("db_path", str(tmp_path / "blokit.db"))
    svc.set("state_dir", str(tmp_path / "state"))
    with patch("blokit.commands.decorators.get_config_service", return_value=svc), patch(
        "blokit.commands.block.get_config_service", return_value=svc
    ), patch("blokit.commands.config.get_config_service", return_value=svc), patch(
        "blokit.commands.decorators.configure_logging"
    ):
        yield svc
    get_config_service.cache_clear()
