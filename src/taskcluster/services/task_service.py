"""Task service - Business logic for task operations.

This service layer sits between commands and repositories. It validates
commands, applies the lifecycle state machine and delegates every read and
write to the injected TaskRepository. It keeps no state between calls.

Validation errors (InvalidArgumentError, InvalidTransitionError) are raised
before storage is touched. Storage errors (NotFoundError, AlreadyExistsError,
ConflictRetryError, StorageUnavailableError) propagate unchanged; retrying a
conflict is the caller's decision.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from uuid import UUID, uuid4

from taskcluster.models import (
    MAX_PRIORITY,
    MIN_PRIORITY,
    InvalidArgumentError,
    NotFoundError,
    Task,
    TaskStatus,
    is_valid_priority,
)
from taskcluster.repositories import TaskRepository
from taskcluster.services.lifecycle import ensure_transition

logger = logging.getLogger(__name__)


def _validate_priority(priority: int) -> None:
    if not is_valid_priority(priority):
        raise InvalidArgumentError(
            f"Priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}, got {priority}"
        )


def _now() -> datetime:
    return datetime.now(UTC)


class TaskService:
    """Service for task business logic.

    This service encapsulates business rules and orchestrates task operations
    using the task repository.
    """

    def __init__(self, task_repository: TaskRepository):
        """Initialize the task service.

        Args:
            task_repository: TaskRepository implementation for data access
        """
        self.repository = task_repository

    async def create_task(
        self,
        title: str,
        *,
        priority: int,
        description: str | None = None,
        due_by: datetime | str | None = None,
    ) -> Task:
        """Create a new task in the pending status.

        Args:
            title: Task title (required, non-blank)
            priority: Priority level (1-10)
            description: Optional free text
            due_by: Optional deadline (ISO format or datetime); naive values
                are taken as UTC

        Returns:
            Created Task object

        Raises:
            InvalidArgumentError: If priority is out of range or title is blank
            AlreadyExistsError: If the generated task_id is already stored
        """
        _validate_priority(priority)
        if not title or not title.strip():
            raise InvalidArgumentError("Title must not be empty")

        parsed_due_by = None
        if due_by:
            if isinstance(due_by, str):
                try:
                    parsed_due_by = datetime.fromisoformat(due_by)
                except ValueError as e:
                    raise InvalidArgumentError(f"Invalid due date: {due_by}") from e
            else:
                parsed_due_by = due_by
            if parsed_due_by.tzinfo is None:
                parsed_due_by = parsed_due_by.replace(tzinfo=UTC)

        now = _now()
        task = Task(
            task_id=uuid4(),
            title=title,
            description=description,
            priority=priority,
            due_by=parsed_due_by,
            status=TaskStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        created = await self.repository.create(task)
        logger.debug("created task %s (priority %d)", created.task_id, priority)
        return created

    async def get_task(self, task_id: UUID) -> Task:
        """Get a specific task by ID.

        Raises:
            NotFoundError: If no task exists for task_id
        """
        task = await self.repository.get(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    async def change_priority(self, task_id: UUID, priority: int) -> Task:
        """Change the priority of a task, whatever its status.

        The whole task read here is written back. The repository checks the
        version only from its own read inside update(), so a write that lands
        between the two reads (a cancel, say) is overwritten without a
        ConflictRetryError.

        Args:
            task_id: Task ID to update
            priority: New priority level (1-10)

        Returns:
            Updated Task object

        Raises:
            InvalidArgumentError: If priority is out of range
            NotFoundError: If no task exists for task_id
            ConflictRetryError: If a concurrent writer won the race
        """
        _validate_priority(priority)
        task = await self.get_task(task_id)

        task.priority = priority
        self._touch(task)
        return await self.repository.update(task)

    async def cancel_task(self, task_id: UUID) -> Task:
        """Cancel a pending or running task.

        Raises:
            NotFoundError: If no task exists for task_id
            InvalidTransitionError: If the task is completed, failed or cancelled
            ConflictRetryError: If a concurrent writer won the race
        """
        return await self._transition(task_id, TaskStatus.CANCELLED)

    async def _transition(self, task_id: UUID, target: TaskStatus) -> Task:
        task = await self.get_task(task_id)
        ensure_transition(task.status, target)

        logger.debug("task %s: %s -> %s", task_id, task.status.value, target.value)
        task.status = target
        self._touch(task)
        return await self.repository.update(task)

    @staticmethod
    def _touch(task: Task) -> None:
        # updated_at never precedes created_at, even with clock skew
        task.updated_at = max(_now(), task.created_at)
