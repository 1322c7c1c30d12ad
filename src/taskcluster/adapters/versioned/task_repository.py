"""Versioned-store implementation of TaskRepository.

Tasks are stored one item per task in a composite-key table: partition key
``TASK`` and sort key ``TASK#<task_id>``. Updates follow an optimistic
concurrency protocol: read the current item and its version, then write the
next revision conditionally on that version. A lost race surfaces as
ConflictRetryError; this repository never retries on its own.
"""

from __future__ import annotations

import logging
from uuid import UUID

from taskcluster.adapters.versioned.table import (
    CompositeKeyTable,
    CompositePrimaryKey,
    ConditionalCheckFailedError,
    DatabaseItem,
    ItemAlreadyExistsError,
    TableUnavailableError,
)
from taskcluster.models import (
    AlreadyExistsError,
    ConflictRetryError,
    NotFoundError,
    StorageUnavailableError,
    Task,
)
from taskcluster.repositories import TaskRepository

logger = logging.getLogger(__name__)

TASK_PARTITION_KEY = "TASK"
TASK_ROW_TYPE = "Task"


def task_key(task_id: UUID) -> CompositePrimaryKey:
    """Composite key under which the task with *task_id* is stored."""
    return CompositePrimaryKey(
        partition_key=TASK_PARTITION_KEY,
        sort_key=f"{TASK_PARTITION_KEY}#{task_id}",
    )


class VersionedTaskRepository(TaskRepository):
    """Task repository backed by a CompositeKeyTable with version tokens."""

    def __init__(self, table: CompositeKeyTable):
        """Initialize versioned task repository.

        Args:
            table: Composite-key table providing conditional writes
        """
        self.table = table

    async def create(self, task: Task) -> Task:
        item = DatabaseItem.new_item(
            task_key(task.task_id), TASK_ROW_TYPE, task.model_dump(mode="json")
        )
        try:
            await self.table.insert_item(item)
        except ItemAlreadyExistsError as e:
            raise AlreadyExistsError(task.task_id) from e
        except TableUnavailableError as e:
            raise StorageUnavailableError(str(e)) from e
        return Task.model_validate(item.payload)

    async def get(self, task_id: UUID) -> Task | None:
        item = await self._get_item(task_id)
        if item is None:
            return None
        return Task.model_validate(item.payload)

    async def update(self, task: Task) -> Task:
        existing = await self._get_item(task.task_id)
        if existing is None:
            raise NotFoundError(task.task_id)

        updated = existing.create_updated_item(task.model_dump(mode="json"))
        try:
            await self.table.update_item(updated, existing)
        except ConditionalCheckFailedError as e:
            logger.warning(
                "conditional write rejected for task %s at version %d",
                task.task_id,
                existing.version,
            )
            raise ConflictRetryError(task.task_id) from e
        except TableUnavailableError as e:
            raise StorageUnavailableError(str(e)) from e
        return Task.model_validate(updated.payload)

    async def _get_item(self, task_id: UUID) -> DatabaseItem | None:
        try:
            return await self.table.get_item(task_key(task_id))
        except TableUnavailableError as e:
            raise StorageUnavailableError(str(e)) from e
