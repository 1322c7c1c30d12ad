"""Repository abstraction layer for Task Cluster.

This module defines the abstract base class (interface) for task storage,
following the hexagonal architecture (Ports & Adapters) pattern.

The task service depends only on this contract, so any backend (in-process
map, versioned key-value table) can be injected without touching business
logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from taskcluster.models import Task


class TaskRepository(ABC):
    """Abstract base class for task persistence operations.

    Implementations are the only components that mutate stored state. Every
    task they return is a copy: mutating it never changes what is stored.
    """

    @abstractmethod
    async def create(self, task: Task) -> Task:
        """Insert a new task keyed by its task_id.

        Args:
            task: Fully populated Task to store

        Returns:
            The persisted Task

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            AlreadyExistsError: If a task with the same task_id is stored
            StorageUnavailableError: If the backend cannot be reached
        """
        raise NotImplementedError(
            "TaskRepository.create() must be implemented by adapter"
        )

    @abstractmethod
    async def get(self, task_id: UUID) -> Task | None:
        """Get a specific task by ID.

        Args:
            task_id: Unique identifier for the task

        Returns:
            Task object, or None if no task is stored under task_id

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            StorageUnavailableError: If the backend cannot be reached
        """
        raise NotImplementedError("TaskRepository.get() must be implemented by adapter")

    @abstractmethod
    async def update(self, task: Task) -> Task:
        """Replace the stored record for task.task_id.

        Args:
            task: Task carrying the new field values

        Returns:
            The persisted Task

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            NotFoundError: If no task is stored under task.task_id
            ConflictRetryError: If a concurrent writer changed the record
                between read and write (versioned backends only)
            StorageUnavailableError: If the backend cannot be reached
        """
        raise NotImplementedError(
            "TaskRepository.update() must be implemented by adapter"
        )
