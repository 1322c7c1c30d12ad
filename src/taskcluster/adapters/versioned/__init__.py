"""Versioned-store adapter - optimistic concurrency over a composite-key table."""

from taskcluster.adapters.versioned.memory_table import InMemoryCompositeKeyTable
from taskcluster.adapters.versioned.table import (
    CompositeKeyTable,
    CompositePrimaryKey,
    ConditionalCheckFailedError,
    DatabaseItem,
    ItemAlreadyExistsError,
    TableError,
    TableUnavailableError,
)
from taskcluster.adapters.versioned.task_repository import (
    TASK_PARTITION_KEY,
    VersionedTaskRepository,
    task_key,
)

__all__ = [
    "CompositeKeyTable",
    "CompositePrimaryKey",
    "DatabaseItem",
    "TableError",
    "ItemAlreadyExistsError",
    "ConditionalCheckFailedError",
    "TableUnavailableError",
    "InMemoryCompositeKeyTable",
    "VersionedTaskRepository",
    "TASK_PARTITION_KEY",
    "task_key",
]
