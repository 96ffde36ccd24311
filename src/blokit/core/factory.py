"""Application assembly.

``build_app`` wires a storage strategy, a durable task runner and a
capability gate into the two services. Everything is passed in explicitly,
so tests can swap any collaborator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from blokit.capabilities import CapabilityGate, StaticCapabilityGate
from blokit.core.storage_strategy import StorageStrategy, SqliteStorageStrategy
from blokit.models import AppConfig, Block
from blokit.services.session_service import SessionService
from blokit.services.todo_service import TodoService
from blokit.tasks import AsyncioTaskRunner, DurableTaskRunner
from blokit.utils.dates import Clock, now_utc
from blokit.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class BlokitApp:
    """The assembled services plus the collaborators they share."""

    config: AppConfig
    storage: StorageStrategy
    runner: DurableTaskRunner
    todos: TodoService
    sessions: SessionService
    # Blocks for countdowns that ran out while no process was running
    recovered_blocks: list[Block] = field(default_factory=list)

    async def close(self) -> None:
        """Detach from the runner and close the store.

        A countdown still running is not cancelled: an ``AsyncioTaskRunner``
        is shut down so its state file remains for the next process.
        """
        self.sessions.close()
        if isinstance(self.runner, AsyncioTaskRunner):
            await self.runner.shutdown()
        self.storage.close()


async def build_app(
    config: AppConfig,
    *,
    gate: CapabilityGate | None = None,
    storage: StorageStrategy | None = None,
    runner: DurableTaskRunner | None = None,
    clock: Clock = now_utc,
    resume: bool = True,
) -> BlokitApp:
    """Build and attach the services described by ``config``.

    Args:
        config: Application configuration
        gate: Capability gate; defaults to one that always grants
        storage: Storage strategy; defaults to SQLite at ``config.db_path``
        runner: Countdown runner; defaults to an ``AsyncioTaskRunner``
            persisting to ``config.state_dir``
        clock: Source of "now" shared by both services
        resume: Whether to pick up a countdown left by an earlier process
    """
    storage = storage or SqliteStorageStrategy(config.db_path)
    runner = runner or AsyncioTaskRunner(
        Path(config.state_dir), tick_seconds=config.tick_seconds, clock=clock
    )
    gate = gate or StaticCapabilityGate(granted=True)

    todos = TodoService(storage.get_todo_repository(), clock=clock)
    sessions = SessionService(
        runner,
        gate,
        storage.get_block_repository(),
        block_duration=timedelta(minutes=config.block_minutes),
        tag=config.countdown_tag,
        clock=clock,
    )
    recovered: list[Block] = []
    if resume:
        recovered = await sessions.attach()

    logger.debug("built app with %s storage", storage.storage_type)
    return BlokitApp(
        config=config,
        storage=storage,
        runner=runner,
        todos=todos,
        sessions=sessions,
        recovered_blocks=recovered,
    )
