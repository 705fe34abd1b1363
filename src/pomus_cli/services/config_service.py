"""Configuration service for managing Pomus CLI configuration.

This module provides the ConfigService class, the single source of truth for
configuration and for where Pomus keeps its files:

- Loading and saving config.json (user config dir)
- Dot-separated get/set with pydantic validation
- Locations of the recovery snapshot, the shared published state, the
  statistics database and the task list (user data dir)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ValidationError

from pomus_cli.models.config_models import AppConfig, TimerSettings

_APP_NAME = "pomus_cli"


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir(_APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir(_APP_NAME))

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def timer_settings(self) -> TimerSettings:
        return self.config.timer

    @property
    def state_dir(self) -> Path:
        """Directory of the durable recovery snapshot."""
        return self.data_dir / "state"

    @property
    def shared_dir(self) -> Path:
        """Directory read by presentation surfaces."""
        return self.data_dir / "shared"

    @property
    def history_db_path(self) -> Path:
        return self.data_dir / "focus_history.db"

    @property
    def tasks_path(self) -> Path:
        return self.data_dir / "tasks.json"

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config  # Return cached config if already loaded

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))

            self.config_path.chmod(0o600)
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self, key: str | None = None) -> None:
        """Reset the whole configuration, or a single key, to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return
        default_value = _lookup(AppConfig(), key)
        if default_value is None:
            raise KeyError(key)
        if isinstance(default_value, BaseModel):
            default_value = default_value.model_dump()
        self.set(key, default_value)

    def restore_default_timer_settings(self) -> TimerSettings:
        """Reset durations, cycle length and continuous mode to defaults."""
        self.config.timer = TimerSettings()
        self.save_config()
        return self.config.timer

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key (``timer.focus_minutes``)."""
        return _lookup(self.config, key)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        Raises:
            KeyError: If the key does not exist
            ValueError: If the value fails validation
        """
        if _lookup(self.config, key) is None:
            raise KeyError(key)

        keys = key.split(".")
        config_dict = self.config.model_dump()
        current = config_dict
        for k in keys[:-1]:
            current = current[k]
        current[keys[-1]] = value

        try:
            self._config = AppConfig.model_validate(config_dict)
        except ValidationError as e:
            raise ValueError(f"Invalid value for '{key}': {value}") from e
        self.save_config()


def _lookup(config: BaseModel, key: str) -> Any:
    value: Any = config
    for k in key.split("."):
        if not isinstance(value, BaseModel) or k not in type(value).model_fields:
            return None
        value = getattr(value, k)
    return value


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
