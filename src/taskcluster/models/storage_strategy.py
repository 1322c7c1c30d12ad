"""
Strategy Pattern: Storage Strategy Container

This module implements the Strategy Pattern for repository selection.
Instead of branching on the backend at every call site, the StorageStrategyContext
holds the strategy chosen at startup and injects it into services.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from taskcluster.repositories import TaskRepository


class StorageStrategy(ABC):
    """
    Abstract base class for storage strategies.

    A strategy encapsulates the repository implementation for a given
    storage backend. Services never know which strategy they're using.
    """

    @abstractmethod
    def get_task_repository(self) -> TaskRepository:
        """Get task repository implementation for this strategy."""

    @property
    @abstractmethod
    def storage_type(self) -> str:
        """Get storage type identifier (for logging/debugging)."""


class MemoryStorageStrategy(StorageStrategy):
    """
    Process-local storage strategy.

    Tasks live only as long as the process. No version tokens; writes are
    serialized by the repository's lock.
    """

    def __init__(self):
        from taskcluster.adapters.memory import InMemoryTaskRepository

        self._task_repo = InMemoryTaskRepository()

    def get_task_repository(self) -> TaskRepository:
        return self._task_repo

    @property
    def storage_type(self) -> str:
        return "memory"


class VersionedMemoryStorageStrategy(StorageStrategy):
    """
    Versioned repository over a volatile composite-key table.

    Same optimistic-concurrency protocol as the SQLite strategy, without
    durability.
    """

    def __init__(self):
        from taskcluster.adapters.versioned import (
            InMemoryCompositeKeyTable,
            VersionedTaskRepository,
        )

        self._task_repo = VersionedTaskRepository(InMemoryCompositeKeyTable())

    def get_task_repository(self) -> TaskRepository:
        return self._task_repo

    @property
    def storage_type(self) -> str:
        return "versioned-memory"


class SqliteStorageStrategy(StorageStrategy):
    """
    Durable versioned storage strategy.

    The versioned repository writes to a SQLite composite-key table.
    """

    def __init__(self, db_path: str):
        """
        Initialize SQLite strategy.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

        # Import here to avoid circular dependencies
        from taskcluster.adapters.sqlite import SqliteCompositeKeyTable
        from taskcluster.adapters.versioned import VersionedTaskRepository

        self._task_repo = VersionedTaskRepository(SqliteCompositeKeyTable(db_path))

    def get_task_repository(self) -> TaskRepository:
        return self._task_repo

    @property
    def storage_type(self) -> str:
        return "sqlite"


def strategy_for_context(context) -> StorageStrategy:
    """Build the storage strategy described by a configuration Context."""
    if context.type == "memory":
        return MemoryStorageStrategy()
    if context.type == "versioned-memory":
        return VersionedMemoryStorageStrategy()
    return SqliteStorageStrategy(db_path=context.source)


class StorageStrategyContext:
    """
    Strategy context that provides access to the task repository.

    This is the single source of truth for repository access throughout
    the application. It's created once at startup and injected into services.

    Usage:
        # At startup
        strategy = SqliteStorageStrategy(db_path="/path/to/db")
        context = StorageStrategyContext(strategy)

        # In services
        task_repo = context.task_repository
        await task_repo.create(task)  # Works regardless of strategy
    """

    def __init__(self, strategy: StorageStrategy):
        self._strategy = strategy

    @property
    def task_repository(self) -> TaskRepository:
        """Get task repository from current strategy."""
        return self._strategy.get_task_repository()

    @property
    def storage_type(self) -> str:
        """Get storage type (for logging/debugging only)."""
        return self._strategy.storage_type

    @property
    def strategy(self) -> StorageStrategy:
        """Get underlying strategy (for advanced use cases)."""
        return self._strategy
