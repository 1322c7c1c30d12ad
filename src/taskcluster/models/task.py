"""Task data models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MIN_PRIORITY = 1
MAX_PRIORITY = 10


def is_valid_priority(priority: int) -> bool:
    """Return True if *priority* lies in the accepted 1-10 range."""
    if isinstance(priority, bool) or not isinstance(priority, int):
        return False
    return MIN_PRIORITY <= priority <= MAX_PRIORITY


class TaskStatus(str, Enum):
    """Lifecycle status of a task."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class Task(BaseModel):
    """Task model representing a complete task entity.

    The model carries no range checks of its own; the task service validates
    priority and title before anything is written.

    Attributes:
        task_id: Unique identifier, assigned at creation and never changed
        title: Display title
        description: Optional free text
        priority: Priority level (1=lowest, 10=highest)
        due_by: Optional deadline
        status: Current lifecycle status
        created_at: Creation timestamp
        updated_at: Timestamp of the last successful write
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    task_id: UUID = Field(default_factory=uuid4)
    title: str
    description: str | None = None
    priority: int
    due_by: datetime | None = None
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime
    updated_at: datetime

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, a string UUID and ISO-8601 timestamps."""
        return self.model_dump(mode="json", by_alias=True)
