"""Task Cluster domain models.

This package contains Pydantic models that represent the core domain entities
of the application, plus the error taxonomy shared by services and adapters.
"""

from .config_models import AppConfig, Context, OutputConfig, RetryConfig
from .exceptions import (
    AlreadyExistsError,
    ConflictRetryError,
    InvalidArgumentError,
    InvalidTransitionError,
    NotFoundError,
    StorageUnavailableError,
    TaskClusterError,
)
from .task import MAX_PRIORITY, MIN_PRIORITY, Task, TaskStatus, is_valid_priority

__all__ = [
    # Task models
    "Task",
    "TaskStatus",
    "MIN_PRIORITY",
    "MAX_PRIORITY",
    "is_valid_priority",
    # Errors
    "TaskClusterError",
    "InvalidArgumentError",
    "NotFoundError",
    "AlreadyExistsError",
    "InvalidTransitionError",
    "ConflictRetryError",
    "StorageUnavailableError",
    # Config models
    "AppConfig",
    "Context",
    "OutputConfig",
    "RetryConfig",
]
