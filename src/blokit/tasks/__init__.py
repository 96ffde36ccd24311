"""Durable countdown execution."""

from .asyncio_runner import AsyncioTaskRunner
from .runner import DurableTaskRunner, ProgressCallback
from .state import CountdownRecord, CountdownStateStore

__all__ = [
    "DurableTaskRunner",
    "ProgressCallback",
    "AsyncioTaskRunner",
    "CountdownRecord",
    "CountdownStateStore",
]
