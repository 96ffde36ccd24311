"""Capability gates: the one-time permission check before a countdown starts."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

import typer


class CapabilityGate(ABC):
    """Asks whether the countdown may run (e.g. notifications allowed)."""

    @abstractmethod
    async def request(self) -> bool:
        """Return True if the capability is granted."""
        raise NotImplementedError("CapabilityGate.request() must be implemented")


class StaticCapabilityGate(CapabilityGate):
    """Always answers the same way. Counts how often it was asked."""

    def __init__(self, granted: bool = True):
        self.granted = granted
        self.requests = 0

    async def request(self) -> bool:
        self.requests += 1
        return self.granted


class ConsolePromptGate(CapabilityGate):
    """Asks on the terminal whether completion alerts may be shown."""

    def __init__(self, prompt: str = "Allow Blokit to alert you when the block ends?"):
        self.prompt = prompt

    async def request(self) -> bool:
        # typer.confirm blocks on stdin, keep it off the event loop
        return await asyncio.to_thread(typer.confirm, self.prompt, default=True)
