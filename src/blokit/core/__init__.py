"""Application wiring: storage strategies and the app factory."""

from .factory import BlokitApp, build_app
from .storage_strategy import (
    MemoryStorageStrategy,
    SqliteStorageStrategy,
    StorageStrategy,
)

__all__ = [
    "BlokitApp",
    "build_app",
    "StorageStrategy",
    "SqliteStorageStrategy",
    "MemoryStorageStrategy",
]
