"""Countdown runner backed by asyncio tasks and on-disk state files."""

from __future__ import annotations

import asyncio
import contextlib
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from blokit.models import TaskProgress, TaskState
from blokit.tasks.runner import DurableTaskRunner
from blokit.tasks.state import CountdownRecord, CountdownStateStore
from blokit.utils.dates import Clock, now_utc
from blokit.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class _Countdown:
    record: CountdownRecord
    remaining: int
    state: TaskState = TaskState.PENDING
    finishing: bool = False
    finished_at: datetime | None = None
    task: asyncio.Task | None = field(default=None, repr=False)

    def progress(self) -> TaskProgress:
        return TaskProgress(
            task_id=self.record.task_id,
            tag=self.record.tag,
            duration_seconds=self.record.duration_seconds,
            remaining_seconds=self.remaining,
            state=self.state,
            finished_at=self.finished_at,
        )


class AsyncioTaskRunner(DurableTaskRunner):
    """Runs each countdown as an asyncio task ticking every ``tick_seconds``.

    Progress goes ``duration .. 1`` while running, then a single finished
    report with zero remaining. Every scheduled countdown is mirrored to a
    state file so ``resume`` can continue it in a later process.
    """

    def __init__(
        self,
        state_dir: Path,
        *,
        tick_seconds: float = 1.0,
        clock: Clock = now_utc,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        super().__init__()
        self._state = CountdownStateStore(state_dir)
        self.tick_seconds = tick_seconds
        self._clock = clock
        self._sleep = sleep
        self._countdowns: dict[str, _Countdown] = {}

    def _find(self, task_id: str) -> _Countdown | None:
        for countdown in self._countdowns.values():
            if countdown.record.task_id == task_id:
                return countdown
        return None

    def current(self, tag: str) -> TaskProgress | None:
        countdown = self._countdowns.get(tag)
        return countdown.progress() if countdown else None

    async def schedule(self, tag: str, duration_seconds: int) -> str:
        if duration_seconds <= 0:
            raise ValueError("duration_seconds must be positive")

        existing = self._countdowns.get(tag)
        if existing is not None:
            logger.info(
                "replacing countdown %s under tag %s", existing.record.task_id, tag
            )
            await self.cancel(existing.record.task_id)

        record = CountdownRecord.create(
            uuid.uuid4().hex, tag, duration_seconds, self._clock()
        )
        self._state.save(record)
        countdown = _Countdown(record=record, remaining=duration_seconds)
        self._countdowns[tag] = countdown
        await self._emit(countdown.progress())
        self._spawn(countdown)
        logger.info(
            "scheduled countdown %s (%ds) under tag %s",
            record.task_id,
            duration_seconds,
            tag,
        )
        return record.task_id

    async def cancel(self, task_id: str) -> None:
        countdown = self._find(task_id)
        if countdown is None:
            logger.debug("cancel ignored for %s: no such countdown", task_id)
            return
        if countdown.finishing:
            logger.debug("cancel ignored for %s: already finishing", task_id)
            return

        if countdown.task is not None:
            countdown.task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await countdown.task
        self._forget(countdown)
        countdown.state = TaskState.CANCELLED
        await self._emit(countdown.progress())
        logger.info("cancelled countdown %s", task_id)

    async def resume(self, tag: str) -> list[TaskProgress]:
        """Pick up the countdown a previous process left under ``tag``.

        A countdown whose deadline passed while nobody was watching is
        reported as finished, at its deadline, before this returns. Only
        countdowns that are still running are returned.
        """
        if tag in self._countdowns:
            return []
        record = self._state.load(tag)
        if record is None:
            return []

        remaining = record.remaining_at(self._clock())
        countdown = _Countdown(record=record, remaining=remaining)
        self._countdowns[tag] = countdown
        if remaining == 0:
            logger.info(
                "countdown %s under tag %s ran out while away", record.task_id, tag
            )
            await self._finish(countdown, record.deadline_datetime)
            return []

        countdown.state = TaskState.RUNNING
        self._spawn(countdown)
        logger.info(
            "resumed countdown %s under tag %s with %ds left",
            record.task_id,
            tag,
            remaining,
        )
        return [countdown.progress()]

    async def wait(self, task_id: str) -> None:
        """Block until the given countdown has finished or been cancelled."""
        countdown = self._find(task_id)
        if countdown is not None and countdown.task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await countdown.task

    async def shutdown(self) -> None:
        """Stop ticking without cancelling; state files stay for ``resume``."""
        for countdown in list(self._countdowns.values()):
            if countdown.task is not None and not countdown.task.done():
                countdown.task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await countdown.task
        self._countdowns.clear()

    def _spawn(self, countdown: _Countdown) -> None:
        countdown.task = asyncio.get_running_loop().create_task(
            self._run(countdown), name=f"countdown-{countdown.record.task_id}"
        )

    def _forget(self, countdown: _Countdown) -> None:
        tag = countdown.record.tag
        if self._countdowns.get(tag) is countdown:
            del self._countdowns[tag]
        self._state.delete(tag, countdown.record.task_id)

    async def _run(self, countdown: _Countdown) -> None:
        countdown.state = TaskState.RUNNING
        while countdown.remaining > 0:
            await self._emit(countdown.progress())
            await self._sleep(self.tick_seconds)
            countdown.remaining -= 1
        await self._finish(countdown, self._clock())

    async def _finish(self, countdown: _Countdown, finished_at: datetime) -> None:
        countdown.finishing = True
        countdown.state = TaskState.FINISHED
        countdown.remaining = 0
        countdown.finished_at = finished_at
        try:
            await self._emit(countdown.progress())
        except Exception:
            # Keep the state file so the finish is reported again on resume.
            logger.exception(
                "listener failed on finish of countdown %s", countdown.record.task_id
            )
            if self._countdowns.get(countdown.record.tag) is countdown:
                del self._countdowns[countdown.record.tag]
            return
        self._forget(countdown)
        logger.info("countdown %s finished", countdown.record.task_id)
