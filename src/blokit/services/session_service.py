"""Session service - the focus block timer.

Owns the lifecycle of the single countdown:

    idle -> awaiting_permission -> running -> completing -> idle
                     |                |
                  (denied)        (cancel)
                     v                v
                    idle          cancelled -> idle

The countdown itself runs inside a ``DurableTaskRunner``. This service
submits it, relays the runner's progress reports into ``state`` (it is the
only writer of that value), and records a Block when the runner reports
that a countdown it started has finished. A finish always wins over a
cancel that arrives too late.
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta

from blokit.capabilities import CapabilityGate
from blokit.models import (
    Block,
    BlockCreate,
    SessionStatus,
    StartOutcome,
    TaskProgress,
    TaskState,
    TimerSession,
)
from blokit.models.config_models import DEFAULT_BLOCK_MINUTES, DEFAULT_COUNTDOWN_TAG
from blokit.repositories import BlockRepository
from blokit.tasks import DurableTaskRunner
from blokit.utils.dates import Clock, now_utc
from blokit.utils.logger import get_logger
from blokit.utils.observable import LiveValue, Unsubscribe

logger = get_logger(__name__)


class SessionService:
    """Service for the focus block countdown."""

    def __init__(
        self,
        runner: DurableTaskRunner,
        gate: CapabilityGate,
        block_repository: BlockRepository,
        *,
        block_duration: timedelta = timedelta(minutes=DEFAULT_BLOCK_MINUTES),
        tag: str = DEFAULT_COUNTDOWN_TAG,
        clock: Clock = now_utc,
    ):
        """Initialize the session service.

        Args:
            runner: Executes the countdown and reports its progress
            gate: Asked once per start attempt before anything is scheduled
            block_repository: Where finished blocks are recorded
            block_duration: Countdown length used when ``start`` gets none
            tag: Identifies the countdown with the runner
            clock: Source of "now" for block timestamps
        """
        self.runner = runner
        self.gate = gate
        self.blocks = block_repository
        self.block_duration = block_duration
        self.tag = tag
        self._clock = clock

        self._state: LiveValue[TimerSession] = LiveValue(TimerSession.idle())
        self._active_task_id: str | None = None
        # Countdowns this service started (or adopted) that have not ended,
        # with the duration each was configured with.
        self._owned: dict[str, timedelta] = {}
        self._cancel_requested: set[str] = set()
        self._record_lock = asyncio.Lock()
        self._unsubscribe: Unsubscribe | None = None
        self._attaching = False
        self._recovered: list[Block] = []

    @property
    def state(self) -> LiveValue[TimerSession]:
        """Live snapshot of the timer."""
        return self._state

    @property
    def active_task_id(self) -> str | None:
        return self._active_task_id

    async def attach(self) -> list[Block]:
        """Start listening to the runner and adopt a countdown left running.

        Countdowns persisted by an earlier process are resumed and adopted,
        so their Block is still recorded when they finish. One that ran out
        while no process was watching is recorded during the call.

        Returns:
            Blocks recorded for countdowns that finished while away
        """
        self._listen()
        self._recovered = []
        self._attaching = True
        try:
            resumed = await self.runner.resume(self.tag)
        finally:
            self._attaching = False
        for progress in resumed:
            self._adopt(progress)
        if self._active_task_id is None:
            current = self.runner.current(self.tag)
            if current is not None and not current.state.is_terminal:
                self._adopt(current)
        return list(self._recovered)

    def close(self) -> None:
        """Stop listening to the runner. Running countdowns are left alone."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def start(self, duration: timedelta | None = None) -> StartOutcome:
        """Ask for the capability and, if granted, start a countdown.

        A countdown already running under the same tag is replaced; it
        produces no Block.

        Returns:
            StartOutcome.STARTED, or StartOutcome.CAPABILITY_DENIED when the
            gate said no (nothing is scheduled in that case)
        """
        total = duration if duration is not None else self.block_duration
        seconds = int(total.total_seconds())
        if seconds < 1:
            raise ValueError("countdown duration must be at least one second")

        self._listen()
        self._publish(
            self._state.value.model_copy(
                update={"status": SessionStatus.AWAITING_PERMISSION}
            )
        )

        if not await self.gate.request():
            logger.warning("capability denied, countdown not started")
            self._publish(self._settled())
            return StartOutcome.CAPABILITY_DENIED

        task_id = await self.runner.schedule(self.tag, seconds)
        self._owned[task_id] = timedelta(seconds=seconds)
        self._active_task_id = task_id
        self._publish(
            TimerSession(
                task_id=task_id,
                total_duration=timedelta(seconds=seconds),
                remaining=timedelta(seconds=seconds),
                status=SessionStatus.RUNNING,
            )
        )
        logger.info("started countdown %s for %ds", task_id, seconds)
        return StartOutcome.STARTED

    async def cancel(self) -> None:
        """Cancel the running countdown. A no-op when nothing is running."""
        task_id = self._active_task_id
        if task_id is None:
            logger.debug("cancel requested with no active countdown")
            return

        self._cancel_requested.add(task_id)
        self._publish(
            self._state.value.model_copy(update={"status": SessionStatus.CANCELLED})
        )
        await self.runner.cancel(task_id)

        # The runner may not report the cancellation (or may have finished
        # the task first); either way this countdown is no longer ours.
        if self._active_task_id == task_id:
            self._active_task_id = None
            self._publish(TimerSession.idle())
        logger.info("cancel requested for countdown %s", task_id)

    async def todays_blocks(self) -> list[Block]:
        """Blocks started today (local calendar day)."""
        return await self.blocks_for_day(self._today())

    async def blocks_for_day(self, day: date) -> list[Block]:
        return await self.blocks.list_for_day(day)

    def live_todays_blocks(self) -> LiveValue[list[Block]]:
        return self.blocks.subscribe(self._today())

    def _today(self) -> date:
        return self._clock().astimezone().date()

    def _listen(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.runner.subscribe_progress(
                self.tag, self._on_progress
            )

    def _adopt(self, progress: TaskProgress) -> None:
        total = timedelta(seconds=progress.duration_seconds)
        self._owned[progress.task_id] = total
        self._active_task_id = progress.task_id
        self._publish(
            TimerSession(
                task_id=progress.task_id,
                total_duration=total,
                remaining=timedelta(seconds=progress.remaining_seconds),
                status=SessionStatus.RUNNING,
            )
        )
        logger.info("adopted countdown %s", progress.task_id)

    def _publish(self, session: TimerSession) -> None:
        self._state.publish(session)

    def _settled(self) -> TimerSession:
        """Snapshot to fall back to after an aborted start."""
        current = self._state.value
        if self._active_task_id is not None and current.task_id == self._active_task_id:
            return current.model_copy(update={"status": SessionStatus.RUNNING})
        return TimerSession.idle()

    async def _on_progress(self, progress: TaskProgress) -> None:
        task_id = progress.task_id
        if task_id not in self._owned:
            if not (self._attaching and progress.state == TaskState.FINISHED):
                return
            # Finished while away; it was ours in the process that started it.
            self._owned[task_id] = timedelta(seconds=progress.duration_seconds)

        if progress.state == TaskState.FINISHED:
            block = await self._complete(task_id, progress.finished_at)
            if block is not None and self._attaching:
                self._recovered.append(block)
        elif progress.state == TaskState.CANCELLED:
            self._owned.pop(task_id, None)
            self._cancel_requested.discard(task_id)
            if task_id == self._active_task_id:
                self._active_task_id = None
                if self._state.value.status != SessionStatus.AWAITING_PERMISSION:
                    self._publish(TimerSession.idle())
        elif task_id == self._active_task_id:
            current = self._state.value
            if current.status in (
                SessionStatus.RUNNING,
                SessionStatus.AWAITING_PERMISSION,
            ):
                remaining = timedelta(seconds=progress.remaining_seconds)
                if current.task_id == task_id:
                    remaining = min(remaining, current.remaining)
                self._publish(current.model_copy(update={"remaining": remaining}))

    async def _complete(
        self, task_id: str, finished_at: datetime | None = None
    ) -> Block | None:
        async with self._record_lock:
            total = self._owned.get(task_id)
            if total is None:
                return None
            if task_id in self._cancel_requested:
                logger.debug(
                    "countdown %s finished before its cancel took effect", task_id
                )

            if (
                task_id == self._active_task_id
                and self._state.value.status != SessionStatus.AWAITING_PERMISSION
            ):
                self._publish(
                    self._state.value.model_copy(
                        update={
                            "status": SessionStatus.COMPLETING,
                            "remaining": timedelta(0),
                        }
                    )
                )

            if finished_at is None:
                finished_at = self._clock()
            block = await self.blocks.insert(
                BlockCreate(started_at=finished_at - total, finished_at=finished_at)
            )
            del self._owned[task_id]
            self._cancel_requested.discard(task_id)

            if task_id == self._active_task_id:
                self._active_task_id = None
                if self._state.value.status != SessionStatus.AWAITING_PERMISSION:
                    self._publish(TimerSession.idle())
            logger.info("recorded block %s for countdown %s", block.id, task_id)
            return block
