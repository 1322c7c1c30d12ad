"""Repository interfaces for Task Cluster.

This package contains the abstract base class that defines the contract for
task persistence. This is the "Port" in the Hexagonal Architecture.

Implementations (Adapters) are in:
- taskcluster.adapters.memory (process-local map)
- taskcluster.adapters.versioned (optimistic concurrency over a composite-key table)
"""

from .repository import TaskRepository

__all__ = ["TaskRepository"]
