"""Configuration service for managing Task Cluster configuration.

This module provides the ConfigService class, the single source of truth for
configuration. It handles:

- Loading and saving config.json
- Context management (list, switch)
- Building the storage strategy for the active context
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

from taskcluster.models import InvalidArgumentError
from taskcluster.models.config_models import AppConfig, Context
from taskcluster.models.storage_strategy import (
    StorageStrategyContext,
    strategy_for_context,
)

APP_NAME = "taskcluster"
CONTEXT_ENV_VAR = "TASKCLUSTER_CONTEXT"


class ConfigService:
    """Service for managing application configuration.

    Loads the configuration file (creating it with defaults on first run),
    exposes the active storage context and builds the storage strategy the
    rest of the application is wired with.
    """

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir(APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir(APP_NAME))

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None
        self._storage_strategy_context: StorageStrategyContext | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def storage_strategy_context(self) -> StorageStrategyContext:
        """Get the StorageStrategyContext for the active context, building it once."""
        if self._storage_strategy_context is None:
            strategy = strategy_for_context(self.get_current_context())
            self._storage_strategy_context = StorageStrategyContext(strategy)
        return self._storage_strategy_context

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # Expected on first run
            self._config = self.create_default_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def create_default_config(self) -> AppConfig:
        """Create a default configuration with a durable local context."""
        local_context = Context(
            name="local",
            type="sqlite",
            source=str(self.data_dir / "tasks.db"),
            description="Local SQLite versioned store",
        )
        memory_context = Context(
            name="memory",
            type="memory",
            description="Process-local in-memory store",
        )

        self._config = AppConfig(
            current_context_name=local_context.name,
            contexts=[local_context, memory_context],
        )
        self.save_config()
        return self._config

    def list_contexts(self) -> list[Context]:
        """List all available contexts."""
        return self.config.contexts

    def get_current_context(self) -> Context:
        """Get the active context.

        The TASKCLUSTER_CONTEXT environment variable, when set, overrides the
        context stored in the configuration file.

        Raises:
            InvalidArgumentError: If the selected context does not exist
        """
        override = os.environ.get(CONTEXT_ENV_VAR)
        try:
            if override:
                return self.config.get_context(override)
            return self.config.get_current_context()
        except ValueError as e:
            source = f"{CONTEXT_ENV_VAR}={override}" if override else str(self.config_path)
            raise InvalidArgumentError(f"{e} (selected by {source})") from e

    def use_context(self, name: str) -> Context:
        """Set the current context by name."""
        context = self.config.get_context(name)
        self.config.current_context_name = context.name
        self._storage_strategy_context = None
        self.save_config()
        return context


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service


def get_storage_strategy_context() -> StorageStrategyContext:
    """Get a StorageStrategyContext based on the current configuration."""
    return get_config_service().storage_strategy_context
