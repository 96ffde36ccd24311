"""Configuration models.

Persisted as JSON by ``ConfigService``; every field has a default so a
missing or partial file still yields a usable configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import BaseModel, Field, field_validator

DEFAULT_BLOCK_MINUTES = 25
DEFAULT_COUNTDOWN_TAG = "countdown"


def _default_data_dir() -> Path:
    return Path(user_data_dir("blokit"))


class AppConfig(BaseModel):
    """Main Blokit configuration."""

    db_path: str = Field(
        default_factory=lambda: str(_default_data_dir() / "blokit.db"),
        description="SQLite database file",
    )
    state_dir: str = Field(
        default_factory=lambda: str(_default_data_dir() / "state"),
        description="Directory holding durable countdown state",
    )
    block_minutes: int = Field(
        default=DEFAULT_BLOCK_MINUTES,
        ge=1,
        le=240,
        description="Length of a focus block in minutes",
    )
    tick_seconds: float = Field(
        default=1.0, gt=0, description="Interval between countdown ticks"
    )
    countdown_tag: str = Field(
        default=DEFAULT_COUNTDOWN_TAG, description="Tag identifying the countdown task"
    )
    log_level: str = Field(default="INFO", description="Application log level")

    @field_validator("db_path", "state_dir", "countdown_tag")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("value cannot be empty")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v}")
        return level

    @property
    def block_seconds(self) -> int:
        return self.block_minutes * 60
