"""In-memory implementation of TaskRepository."""

from __future__ import annotations

import asyncio
from uuid import UUID

from taskcluster.models import AlreadyExistsError, NotFoundError, Task
from taskcluster.repositories import TaskRepository


class InMemoryTaskRepository(TaskRepository):
    """Process-local task repository.

    A single map owned by the repository. Writes are serialized by a lock;
    reads never observe a half-applied write because no write suspends between
    its existence check and its assignment. Tasks go in and out as copies so no
    caller ever holds a reference into the map.
    """

    def __init__(self):
        self._storage: dict[UUID, Task] = {}
        self._write_lock = asyncio.Lock()

    async def create(self, task: Task) -> Task:
        async with self._write_lock:
            if task.task_id in self._storage:
                raise AlreadyExistsError(task.task_id)
            self._storage[task.task_id] = task.model_copy(deep=True)
        return task.model_copy(deep=True)

    async def get(self, task_id: UUID) -> Task | None:
        stored = self._storage.get(task_id)
        return stored.model_copy(deep=True) if stored is not None else None

    async def update(self, task: Task) -> Task:
        async with self._write_lock:
            if task.task_id not in self._storage:
                raise NotFoundError(task.task_id)
            self._storage[task.task_id] = task.model_copy(deep=True)
        return task.model_copy(deep=True)
