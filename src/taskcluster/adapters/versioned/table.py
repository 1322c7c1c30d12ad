"""Composite-key table port used by the versioned task repository.

A table stores items addressed by a (partition key, sort key) pair. Every item
carries an integer version that the table manages; writes are conditional on
that version so concurrent writers cannot silently overwrite each other.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TableError(Exception):
    """Base exception for composite-key table failures."""


class ItemAlreadyExistsError(TableError):
    """Raised when inserting an item whose key is already present."""


class ConditionalCheckFailedError(TableError):
    """Raised when a conditional update finds a different version (or no item)."""


class TableUnavailableError(TableError):
    """Raised when the underlying store cannot be read or written."""


class CompositePrimaryKey(BaseModel):
    """Partition key plus sort key addressing one item."""

    model_config = ConfigDict(frozen=True)

    partition_key: str
    sort_key: str


class DatabaseItem(BaseModel):
    """A stored row: key, store-managed version metadata and a JSON payload.

    Attributes:
        key: Composite primary key of the item
        row_type: Identifier of the entity class stored in payload
        version: Revision counter; starts at 1 and increases by one per update
        created_at: When the item was first inserted
        last_updated_at: When the item was last written
        payload: Entity serialized in JSON mode
    """

    key: CompositePrimaryKey
    row_type: str
    version: int = Field(default=1, ge=1)
    created_at: datetime
    last_updated_at: datetime
    payload: dict[str, Any]

    @classmethod
    def new_item(
        cls, key: CompositePrimaryKey, row_type: str, payload: dict[str, Any]
    ) -> DatabaseItem:
        """Build the first revision of an item."""
        now = datetime.now(UTC)
        return cls(
            key=key,
            row_type=row_type,
            version=1,
            created_at=now,
            last_updated_at=now,
            payload=payload,
        )

    def create_updated_item(self, payload: dict[str, Any]) -> DatabaseItem:
        """Build the next revision of this item carrying *payload*."""
        return self.model_copy(
            update={
                "version": self.version + 1,
                "last_updated_at": datetime.now(UTC),
                "payload": payload,
            },
            deep=True,
        )


class CompositeKeyTable(ABC):
    """Abstract composite-key table with conditional writes.

    Each operation is atomic: the condition is checked and the write applied
    together, or nothing is written.
    """

    @abstractmethod
    async def insert_item(self, item: DatabaseItem) -> None:
        """Insert *item* if no item with the same key exists.

        Raises:
            ItemAlreadyExistsError: If the key is already present
            TableUnavailableError: If the store fails
        """

    @abstractmethod
    async def get_item(self, key: CompositePrimaryKey) -> DatabaseItem | None:
        """Return the item stored under *key*, or None.

        Raises:
            TableUnavailableError: If the store fails
        """

    @abstractmethod
    async def update_item(
        self, new_item: DatabaseItem, existing_item: DatabaseItem
    ) -> None:
        """Replace *existing_item* with *new_item*.

        The write succeeds only if the stored version still equals
        existing_item.version.

        Raises:
            ConditionalCheckFailedError: If the stored version differs or the
                item no longer exists
            TableUnavailableError: If the store fails
        """
