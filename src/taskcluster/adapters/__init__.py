"""Adapters module - Repository implementations for different storage backends.

This package contains concrete implementations (adapters) for the repository interface:
- memory: Process-local map, serialized writes
- versioned: Optimistic concurrency over a composite-key table
- sqlite: Durable composite-key table for the versioned adapter
"""

from .memory import InMemoryTaskRepository
from .sqlite import SqliteCompositeKeyTable
from .versioned import InMemoryCompositeKeyTable, VersionedTaskRepository

__all__ = [
    "InMemoryTaskRepository",
    "VersionedTaskRepository",
    "InMemoryCompositeKeyTable",
    "SqliteCompositeKeyTable",
]
