"""Unit tests for TaskService."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from taskcluster.adapters.memory import InMemoryTaskRepository
from taskcluster.adapters.versioned import (
    InMemoryCompositeKeyTable,
    VersionedTaskRepository,
)
from taskcluster.models import (
    ConflictRetryError,
    InvalidArgumentError,
    InvalidTransitionError,
    NotFoundError,
    StorageUnavailableError,
    TaskStatus,
)
from taskcluster.services.task_service import TaskService
from taskcluster.utils.retry import retry_on_conflict


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda task: task)
    repo.get = AsyncMock(return_value=None)
    repo.update = AsyncMock(side_effect=lambda task: task)
    return repo


@pytest.fixture()
def mock_service(mock_repo):
    return TaskService(mock_repo)


@pytest.fixture()
def service(repository):
    """TaskService wired to each real backend."""
    return TaskService(repository)


# ---------------------------------------------------------------------------
# create_task
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_task_defaults(service):
    before = datetime.now(UTC)

    task = await service.create_task("Deploy", priority=5)

    assert task.status == TaskStatus.PENDING
    assert task.priority == 5
    assert task.title == "Deploy"
    assert task.description is None
    assert task.due_by is None
    assert task.created_at >= before
    assert task.updated_at == task.created_at
    assert await service.get_task(task.task_id) == task


@pytest.mark.asyncio
async def test_create_task_generates_unique_ids(service):
    a = await service.create_task("a", priority=1)
    b = await service.create_task("b", priority=1)

    assert a.task_id != b.task_id


@pytest.mark.asyncio
@pytest.mark.parametrize("priority", [0, 11, -3, 100])
async def test_create_task_rejects_out_of_range_priority(mock_service, mock_repo, priority):
    with pytest.raises(InvalidArgumentError):
        await mock_service.create_task("Deploy", priority=priority)

    mock_repo.create.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("priority", range(1, 11))
async def test_every_valid_priority_is_stored(service, priority):
    task = await service.create_task("Deploy", priority=priority)

    stored = await service.get_task(task.task_id)
    assert stored.priority == priority
    assert stored.status == TaskStatus.PENDING


@pytest.mark.asyncio
@pytest.mark.parametrize("title", ["", "   "])
async def test_create_task_rejects_blank_title(mock_service, mock_repo, title):
    with pytest.raises(InvalidArgumentError):
        await mock_service.create_task(title, priority=3)

    mock_repo.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_task_parses_string_due_by(mock_service):
    task = await mock_service.create_task(
        "Deploy", priority=3, due_by="2030-01-02T03:04:05+00:00"
    )

    assert task.due_by == datetime(2030, 1, 2, 3, 4, 5, tzinfo=UTC)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "due_by", ["2030-01-02", "2030-01-02T00:00:00", datetime(2030, 1, 2)]
)
async def test_create_task_takes_naive_due_by_as_utc(mock_service, due_by):
    task = await mock_service.create_task("Deploy", priority=3, due_by=due_by)

    assert task.due_by == datetime(2030, 1, 2, tzinfo=UTC)
    assert task.due_by.utcoffset() is not None


@pytest.mark.asyncio
async def test_create_task_accepts_datetime_due_by(mock_service):
    due = datetime(2030, 1, 2, tzinfo=UTC)

    task = await mock_service.create_task("Deploy", priority=3, due_by=due)

    assert task.due_by == due


@pytest.mark.asyncio
async def test_create_task_rejects_malformed_due_by(mock_service, mock_repo):
    with pytest.raises(InvalidArgumentError):
        await mock_service.create_task("Deploy", priority=3, due_by="next tuesday")

    mock_repo.create.assert_not_awaited()


# ---------------------------------------------------------------------------
# get_task
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_unknown_task_raises_not_found(service):
    task_id = uuid4()

    with pytest.raises(NotFoundError) as exc_info:
        await service.get_task(task_id)

    assert exc_info.value.task_id == task_id
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_storage_errors_propagate_unchanged(mock_service, mock_repo):
    mock_repo.get.side_effect = StorageUnavailableError("down")

    with pytest.raises(StorageUnavailableError):
        await mock_service.get_task(uuid4())


# ---------------------------------------------------------------------------
# change_priority
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_change_priority_persists(service):
    task = await service.create_task("Deploy", priority=5)

    updated = await service.change_priority(task.task_id, 8)

    assert updated.priority == 8
    assert updated.updated_at >= task.created_at
    assert (await service.get_task(task.task_id)).priority == 8


@pytest.mark.asyncio
@pytest.mark.parametrize("priority", [0, 11])
async def test_change_priority_validates_before_reading(
    mock_service, mock_repo, priority
):
    with pytest.raises(InvalidArgumentError):
        await mock_service.change_priority(uuid4(), priority)

    mock_repo.get.assert_not_awaited()
    mock_repo.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_change_priority_of_unknown_task(service):
    with pytest.raises(NotFoundError):
        await service.change_priority(uuid4(), 4)


@pytest.mark.asyncio
@pytest.mark.parametrize("status", list(TaskStatus))
async def test_change_priority_allowed_in_every_status(
    mock_service, mock_repo, task_factory, status
):
    task = task_factory(status=status, priority=2)
    mock_repo.get.return_value = task

    updated = await mock_service.change_priority(task.task_id, 9)

    assert updated.priority == 9
    assert updated.status == status


@pytest.mark.asyncio
async def test_updated_at_never_precedes_created_at(mock_service, mock_repo, task_factory):
    future = datetime(2999, 1, 1, tzinfo=UTC)
    task = task_factory(created_at=future, updated_at=future)
    mock_repo.get.return_value = task

    updated = await mock_service.change_priority(task.task_id, 3)

    assert updated.updated_at >= updated.created_at


# ---------------------------------------------------------------------------
# cancel_task
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [TaskStatus.PENDING, TaskStatus.RUNNING])
async def test_cancel_active_task(mock_service, mock_repo, task_factory, status):
    task = task_factory(status=status)
    mock_repo.get.return_value = task

    cancelled = await mock_service.cancel_task(task.task_id)

    assert cancelled.status == TaskStatus.CANCELLED
    mock_repo.update.assert_awaited_once()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status", [TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.CANCELLED]
)
async def test_cancel_terminal_task_rejected(mock_service, mock_repo, task_factory, status):
    task = task_factory(status=status)
    mock_repo.get.return_value = task

    with pytest.raises(InvalidTransitionError):
        await mock_service.cancel_task(task.task_id)

    mock_repo.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_cancel_twice_rejected(service):
    task = await service.create_task("Deploy", priority=5)
    await service.cancel_task(task.task_id)

    with pytest.raises(InvalidTransitionError):
        await service.cancel_task(task.task_id)

    assert (await service.get_task(task.task_id)).status == TaskStatus.CANCELLED


@pytest.mark.asyncio
async def test_cancel_unknown_task(service):
    with pytest.raises(NotFoundError):
        await service.cancel_task(uuid4())


# ---------------------------------------------------------------------------
# End to end
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_full_lifecycle_scenario(service):
    task = await service.create_task("Deploy", priority=5)
    await service.change_priority(task.task_id, 8)
    cancelled = await service.cancel_task(task.task_id)

    assert cancelled.status == TaskStatus.CANCELLED
    assert cancelled.priority == 8

    with pytest.raises(InvalidTransitionError) as exc_info:
        await service.cancel_task(task.task_id)
    assert exc_info.value.status_code == 409

    with pytest.raises(NotFoundError) as exc_info:
        await service.get_task(uuid4())
    assert exc_info.value.status_code == 404

    with pytest.raises(InvalidArgumentError) as exc_info:
        await service.create_task("Bad", priority=11)
    assert exc_info.value.status_code == 400

    # Priority still changes after cancellation
    reprioritized = await service.change_priority(task.task_id, 2)
    assert reprioritized.status == TaskStatus.CANCELLED
    assert reprioritized.priority == 2


@pytest.mark.asyncio
async def test_works_with_memory_backend_without_versions():
    service = TaskService(InMemoryTaskRepository())

    task = await service.create_task("Deploy", priority=5)

    assert (await service.cancel_task(task.task_id)).status == TaskStatus.CANCELLED


# ---------------------------------------------------------------------------
# Conflicts
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_conflict_propagates_without_retry(mock_service, mock_repo, task_factory):
    task = task_factory()
    mock_repo.get.return_value = task
    mock_repo.update.side_effect = ConflictRetryError(task.task_id)

    with pytest.raises(ConflictRetryError):
        await mock_service.cancel_task(task.task_id)

    mock_repo.update.assert_awaited_once()


@pytest.mark.asyncio
async def test_retry_reloads_task_on_every_attempt(mock_service, mock_repo, task_factory):
    task = task_factory(priority=5)
    mock_repo.get.side_effect = lambda task_id: task.model_copy()
    mock_repo.update.side_effect = [ConflictRetryError(task.task_id), task]

    result = await retry_on_conflict(
        lambda: mock_service.change_priority(task.task_id, 9), backoff=0
    )

    assert result is task
    assert mock_repo.get.await_count == 2
    assert mock_repo.update.await_count == 2


@pytest.mark.asyncio
async def test_concurrent_repository_updates_through_service(gated_table):
    """Two writers that read the same revision cannot both be stored."""
    repo = VersionedTaskRepository(gated_table)
    service = TaskService(repo)
    task = await service.create_task("Deploy", priority=5)
    snapshot = await service.get_task(task.task_id)

    gated_table.arm(2)
    results = await asyncio.gather(
        repo.update(snapshot.model_copy(update={"priority": 9})),
        repo.update(snapshot.model_copy(update={"status": TaskStatus.CANCELLED})),
        return_exceptions=True,
    )

    assert sum(isinstance(r, ConflictRetryError) for r in results) == 1
    stored = await service.get_task(task.task_id)
    assert stored in [r for r in results if not isinstance(r, Exception)]


@pytest.mark.asyncio
async def test_priority_change_from_stale_read_undoes_concurrent_cancel():
    """The version check covers only the repository's own read.

    A priority change that read the task before a cancel landed writes its
    pending copy back without a ConflictRetryError.
    """
    repo = VersionedTaskRepository(InMemoryCompositeKeyTable())
    service = TaskService(repo)
    task = await service.create_task("Deploy", priority=5)

    read_done = asyncio.Event()
    cancel_done = asyncio.Event()
    real_get = repo.get

    async def read_then_wait(task_id):
        result = await real_get(task_id)
        read_done.set()
        await cancel_done.wait()
        return result

    with patch.object(repo, "get", side_effect=read_then_wait):
        reprioritize = asyncio.create_task(service.change_priority(task.task_id, 9))
        await read_done.wait()

    cancelled = await service.cancel_task(task.task_id)
    cancel_done.set()
    updated = await reprioritize

    assert cancelled.status == TaskStatus.CANCELLED
    assert updated.priority == 9
    stored = await service.get_task(task.task_id)
    assert stored.status == TaskStatus.PENDING
    assert stored.priority == 9
