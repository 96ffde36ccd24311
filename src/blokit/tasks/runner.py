"""Durable task runner interface.

A durable task runner executes a countdown outside the caller's control
flow, reports progress once per tick, honours cancellation requests, and
keeps enough state to pick the countdown up again after a restart.

At most one countdown exists per tag: scheduling under a tag that already
has one replaces it.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Union

from blokit.models import TaskProgress
from blokit.utils.logger import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[TaskProgress], Union[Awaitable[None], None]]
Unsubscribe = Callable[[], None]


class DurableTaskRunner(ABC):
    """Abstract base class for countdown runners."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[ProgressCallback]] = {}

    @abstractmethod
    async def schedule(self, tag: str, duration_seconds: int) -> str:
        """Start a countdown under ``tag``, replacing any existing one.

        Returns:
            Identifier of the new task
        """
        raise NotImplementedError(
            "DurableTaskRunner.schedule() must be implemented by runner"
        )

    @abstractmethod
    async def cancel(self, task_id: str) -> None:
        """Request cancellation. A no-op for unknown or already finished tasks."""
        raise NotImplementedError(
            "DurableTaskRunner.cancel() must be implemented by runner"
        )

    @abstractmethod
    def current(self, tag: str) -> TaskProgress | None:
        """Latest progress of the active countdown under ``tag``, if any."""
        raise NotImplementedError(
            "DurableTaskRunner.current() must be implemented by runner"
        )

    async def resume(self, tag: str) -> list[TaskProgress]:
        """Restart countdowns persisted by an earlier process.

        Runners without persistence have nothing to resume.
        """
        return []

    def subscribe_progress(self, tag: str, callback: ProgressCallback) -> Unsubscribe:
        """Receive every progress report for ``tag``, in order.

        Coroutine callbacks are awaited before the countdown moves on, so a
        listener can finish persisting a result before the task is forgotten.
        """
        listeners = self._listeners.setdefault(tag, [])
        listeners.append(callback)

        def unsubscribe() -> None:
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    async def _emit(self, progress: TaskProgress) -> None:
        for callback in list(self._listeners.get(progress.tag, [])):
            result = callback(progress)
            if inspect.isawaitable(result):
                await result
