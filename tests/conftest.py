"""Shared test fixtures and configuration.

Provides task factories, one fixture per storage backend, and isolation of
config/log files from the real user directories.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from unittest.mock import patch
from uuid import uuid4

import pytest

from taskcluster.adapters.memory import InMemoryTaskRepository
from taskcluster.adapters.sqlite import SqliteCompositeKeyTable
from taskcluster.adapters.versioned import (
    CompositeKeyTable,
    InMemoryCompositeKeyTable,
    VersionedTaskRepository,
)
from taskcluster.models import Task, TaskStatus

FIXED_DATE = datetime(2024, 6, 1, 10, 0, 0, tzinfo=UTC)


def make_task(
    *,
    title: str = "Test task",
    description: str | None = "A test task",
    priority: int = 1,
    due_by: datetime | None = None,
    status: TaskStatus = TaskStatus.PENDING,
    **overrides,
) -> Task:
    """Build a Task with stable timestamps."""
    fields = dict(
        task_id=uuid4(),
        title=title,
        description=description,
        priority=priority,
        due_by=due_by,
        status=status,
        created_at=FIXED_DATE,
        updated_at=FIXED_DATE,
    )
    fields.update(overrides)
    return Task(**fields)


class GatedTable(CompositeKeyTable):
    """Table wrapper that can hold readers until a number of them have read.

    ``arm(n)`` makes the next *n* get_item calls wait for each other after
    reading, so they all observe the same version before anyone writes. The
    gate then disarms itself.
    """

    def __init__(self, inner: CompositeKeyTable):
        self.inner = inner
        self._barrier: asyncio.Barrier | None = None
        self._remaining = 0
        self.update_calls = 0

    def arm(self, parties: int = 2) -> None:
        self._barrier = asyncio.Barrier(parties)
        self._remaining = parties

    async def insert_item(self, item):
        await self.inner.insert_item(item)

    async def get_item(self, key):
        item = await self.inner.get_item(key)
        barrier = self._barrier
        if barrier is not None:
            self._remaining -= 1
            if self._remaining == 0:
                self._barrier = None
            await barrier.wait()
        return item

    async def update_item(self, new_item, existing_item):
        self.update_calls += 1
        await self.inner.update_item(new_item, existing_item)


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_repo() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def sqlite_table(tmp_path):
    table = SqliteCompositeKeyTable(tmp_path / "tasks.db")
    yield table
    table.close()


@pytest.fixture(params=["memory", "versioned-memory", "sqlite"])
def repository(request, tmp_path):
    """Every TaskRepository implementation, for contract tests."""
    if request.param == "memory":
        yield InMemoryTaskRepository()
    elif request.param == "versioned-memory":
        yield VersionedTaskRepository(InMemoryCompositeKeyTable())
    else:
        table = SqliteCompositeKeyTable(tmp_path / "contract.db")
        yield VersionedTaskRepository(table)
        table.close()


@pytest.fixture(params=["memory-table", "sqlite-table"])
def gated_table(request, tmp_path):
    """A GatedTable over each CompositeKeyTable implementation."""
    if request.param == "memory-table":
        yield GatedTable(InMemoryCompositeKeyTable())
    else:
        inner = SqliteCompositeKeyTable(tmp_path / "gated.db")
        yield GatedTable(inner)
        inner.close()


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolate_logs(tmp_path):
    """Keep the application log file inside tmp_path."""
    import taskcluster.utils.logger as logger_mod

    app_logger = logging.getLogger("taskcluster")
    original = logger_mod._logger
    logger_mod._logger = None
    with patch("taskcluster.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield
    for handler in list(app_logger.handlers):
        handler.close()
        app_logger.removeHandler(handler)
    logger_mod._logger = original


@pytest.fixture()
def tmp_config(tmp_path, monkeypatch):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from taskcluster.services.config_service import CONTEXT_ENV_VAR, get_config_service

    monkeypatch.delenv(CONTEXT_ENV_VAR, raising=False)
    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("taskcluster.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("taskcluster.services.config_service.user_data_dir", return_value=tmpdir):
            from taskcluster.services.config_service import ConfigService

            svc = ConfigService()
            yield svc
    get_config_service.cache_clear()


@pytest.fixture
def task_factory():
    """Factory fixture building Tasks with stable timestamps."""
    return make_task
