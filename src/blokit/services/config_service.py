"""Configuration service for Blokit.

Single source of truth for configuration: loads ``config.json`` from the
platform config directory (creating defaults on first run), validates
changes through the pydantic model, and saves with owner-only permissions.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir
from pydantic import ValidationError

from blokit.exceptions import ConfigError
from blokit.models.config_models import AppConfig
from blokit.utils.logger import get_logger

logger = get_logger(__name__)


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self, config_dir: Path | None = None):
        """Initialize the config service.

        Args:
            config_dir: Directory holding config.json; defaults to the
                platform user config directory
        """
        self.config_dir = Path(config_dir or user_config_dir("blokit"))
        self.config_path = self.config_dir / "config.json"
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from disk, creating defaults on first run."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # Expected on first run
            logger.info("no config at %s, writing defaults", self.config_path)
            self._config = AppConfig()
            self.save_config()
        except (OSError, ValidationError) as e:
            raise ConfigError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to disk."""
        if self._config is None:
            raise ConfigError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except OSError as e:
            raise ConfigError(f"Failed to save config: {e}") from e

    def get(self, key: str) -> Any:
        """Get a single configuration value."""
        if key not in AppConfig.model_fields:
            raise ConfigError(f"Unknown configuration key '{key}'")
        return getattr(self.config, key)

    def set(self, key: str, value: Any) -> AppConfig:
        """Set a single configuration value, validating the whole config."""
        if key not in AppConfig.model_fields:
            raise ConfigError(f"Unknown configuration key '{key}'")

        data = self.config.model_dump()
        data[key] = value
        try:
            updated = AppConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid value for '{key}': {e.errors()[0]['msg']}") from e

        self._config = updated
        self.save_config()
        logger.info("config %s set to %r", key, getattr(updated, key))
        return updated

    def reset_config(self) -> AppConfig:
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()
        return self._config


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
