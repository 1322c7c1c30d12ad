"""In-memory composite-key table."""

from __future__ import annotations

import asyncio

from taskcluster.adapters.versioned.table import (
    CompositeKeyTable,
    CompositePrimaryKey,
    ConditionalCheckFailedError,
    DatabaseItem,
    ItemAlreadyExistsError,
)


class InMemoryCompositeKeyTable(CompositeKeyTable):
    """Volatile table with the same conditional-write semantics as a durable one."""

    def __init__(self):
        self._items: dict[CompositePrimaryKey, DatabaseItem] = {}
        self._lock = asyncio.Lock()

    async def insert_item(self, item: DatabaseItem) -> None:
        async with self._lock:
            if item.key in self._items:
                raise ItemAlreadyExistsError(
                    f"Item already exists: {item.key.partition_key}/{item.key.sort_key}"
                )
            self._items[item.key] = item.model_copy(deep=True)

    async def get_item(self, key: CompositePrimaryKey) -> DatabaseItem | None:
        item = self._items.get(key)
        return item.model_copy(deep=True) if item is not None else None

    async def update_item(
        self, new_item: DatabaseItem, existing_item: DatabaseItem
    ) -> None:
        async with self._lock:
            stored = self._items.get(existing_item.key)
            if stored is None or stored.version != existing_item.version:
                raise ConditionalCheckFailedError(
                    f"Version mismatch for {existing_item.key.sort_key}: "
                    f"expected {existing_item.version}, "
                    f"found {stored.version if stored else 'no item'}"
                )
            self._items[new_item.key] = new_item.model_copy(deep=True)
