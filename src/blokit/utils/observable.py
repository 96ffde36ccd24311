"""Live values: publish on mutation, replay the latest value to new subscribers.

A ``LiveValue`` stands in for the reactive state streams a UI would bind to.
Stores publish fresh query results after a write has been committed, and the
session service publishes timer snapshots, so readers only ever see
consistent states.
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from collections.abc import AsyncIterator, Callable
from typing import Generic, TypeVar

from blokit.utils.logger import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

Unsubscribe = Callable[[], None]


class LiveValue(Generic[T]):
    """Single-writer, multi-reader holder of the latest value of a stream."""

    def __init__(self, initial: T, *, refresh: Callable[[], T] | None = None):
        self._value = initial
        self._refresh = refresh
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        """The most recently published value."""
        return self._value

    def publish(self, value: T) -> None:
        """Store a new value and deliver it to every subscriber in order."""
        self._value = value
        for callback in list(self._subscribers):
            try:
                callback(value)
            except Exception:
                # One broken subscriber must not starve the others.
                logger.exception("live value subscriber failed")

    def refresh(self) -> None:
        """Recompute the value from its source, if it has one, and publish it."""
        if self._refresh is not None:
            self.publish(self._refresh())

    def subscribe(self, callback: Callable[[T], None]) -> Unsubscribe:
        """Register a callback; it receives the current value immediately."""
        self._subscribers.append(callback)
        callback(self._value)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def stream(self) -> AsyncIterator[T]:
        """Iterate over values as they are published, starting with the latest."""
        queue: asyncio.Queue[T] = asyncio.Queue()
        unsubscribe = self.subscribe(queue.put_nowait)
        try:
            while True:
                yield await queue.get()
        finally:
            unsubscribe()


class LiveRegistry(Generic[T]):
    """Keeps the live query results of one store, keyed by query.

    ``get`` returns the same ``LiveValue`` for the same key, so every reader
    of a query shares one stream. ``notify`` re-runs every registered query
    after a committed write.

    With ``max_entries`` set, the least recently requested queries that
    nobody subscribes to are dropped once the registry grows past it.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        self._live: OrderedDict[object, LiveValue[T]] = OrderedDict()
        self.max_entries = max_entries

    def __len__(self) -> int:
        return len(self._live)

    def get(self, key: object, compute: Callable[[], T]) -> LiveValue[T]:
        live = self._live.get(key)
        if live is None:
            live = LiveValue(compute(), refresh=compute)
            self._live[key] = live
            self._evict()
        else:
            self._live.move_to_end(key)
        return live

    def notify(self) -> None:
        for live in list(self._live.values()):
            live.refresh()

    def _evict(self) -> None:
        if self.max_entries is None:
            return
        for key in list(self._live):
            if len(self._live) <= self.max_entries:
                return
            if self._live[key].subscriber_count == 0:
                del self._live[key]
