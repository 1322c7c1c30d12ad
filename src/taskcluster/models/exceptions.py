"""Error taxonomy for task operations.

Every error carries the HTTP status a transport layer should answer with, so a
collaborator can map failures without knowing which component raised them.
"""

from __future__ import annotations

from uuid import UUID


class TaskClusterError(Exception):
    """Base exception for all task errors."""

    status_code: int = 500


class InvalidArgumentError(TaskClusterError):
    """Raised when a command carries an invalid value (e.g. priority out of range)."""

    status_code = 400


class NotFoundError(TaskClusterError):
    """Raised when no task exists for the requested identifier."""

    status_code = 404

    def __init__(self, task_id: UUID | str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class AlreadyExistsError(TaskClusterError):
    """Raised when creating a task whose identifier is already stored."""

    status_code = 409

    def __init__(self, task_id: UUID | str):
        super().__init__(f"Task already exists: {task_id}")
        self.task_id = task_id


class InvalidTransitionError(TaskClusterError):
    """Raised when a lifecycle transition is not allowed from the current status."""

    status_code = 409

    def __init__(self, current, target):
        super().__init__(
            f"Cannot move task from '{current.value}' to '{target.value}'"
        )
        self.current = current
        self.target = target


class ConflictRetryError(TaskClusterError):
    """Raised when a conditional write lost a race with a concurrent writer.

    The stored record changed between read and write. Callers should reload the
    task and retry the whole operation.
    """

    status_code = 409

    def __init__(self, task_id: UUID | str):
        super().__init__(f"Task {task_id} was modified concurrently; reload and retry")
        self.task_id = task_id


class StorageUnavailableError(TaskClusterError):
    """Raised when the storage backend cannot be reached or fails."""

    status_code = 503
