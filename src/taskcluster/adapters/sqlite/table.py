"""SQLite implementation of CompositeKeyTable."""

from __future__ import annotations

import asyncio
import json
import sqlite3
import threading
from pathlib import Path

from taskcluster.adapters.sqlite.connection import open_connection
from taskcluster.adapters.versioned.table import (
    CompositeKeyTable,
    CompositePrimaryKey,
    ConditionalCheckFailedError,
    DatabaseItem,
    ItemAlreadyExistsError,
    TableUnavailableError,
)


def _item_from_row(row: sqlite3.Row) -> DatabaseItem:
    # Timestamps are stored as ISO-8601 text and parsed back by the model
    return DatabaseItem(
        key=CompositePrimaryKey(
            partition_key=row["partition_key"], sort_key=row["sort_key"]
        ),
        row_type=row["row_type"],
        version=row["version"],
        created_at=row["created_at"],
        last_updated_at=row["last_updated_at"],
        payload=json.loads(row["payload"]),
    )


class SqliteCompositeKeyTable(CompositeKeyTable):
    """Durable composite-key table stored in a SQLite database.

    Insert relies on the (partition_key, sort_key) primary key to reject
    duplicates. Update is a single ``UPDATE ... WHERE version = ?`` so the
    version check and the write are one atomic statement; several processes
    sharing the same database file get the same guarantee.

    Blocking calls run in worker threads. The connection lock is held only for
    one statement and its commit, never across awaits.
    """

    def __init__(self, db_path: str | Path):
        """Initialize SQLite table.

        Args:
            db_path: Database file path, or ":memory:" for a private database
        """
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = open_connection(self.db_path)
        return self._connection

    async def insert_item(self, item: DatabaseItem) -> None:
        await asyncio.to_thread(self._insert_item, item)

    async def get_item(self, key: CompositePrimaryKey) -> DatabaseItem | None:
        return await asyncio.to_thread(self._get_item, key)

    async def update_item(
        self, new_item: DatabaseItem, existing_item: DatabaseItem
    ) -> None:
        await asyncio.to_thread(self._update_item, new_item, existing_item)

    def close(self) -> None:
        """Close the underlying connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    def _insert_item(self, item: DatabaseItem) -> None:
        with self._lock:
            try:
                self.connection.execute(
                    """INSERT INTO items (
                        partition_key, sort_key, row_type, version,
                        created_at, last_updated_at, payload
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)""",
                    (
                        item.key.partition_key,
                        item.key.sort_key,
                        item.row_type,
                        item.version,
                        item.created_at.isoformat(),
                        item.last_updated_at.isoformat(),
                        json.dumps(item.payload),
                    ),
                )
                self.connection.commit()
            except sqlite3.IntegrityError as e:
                self.connection.rollback()
                raise ItemAlreadyExistsError(
                    f"Item already exists: {item.key.partition_key}/{item.key.sort_key}"
                ) from e
            except sqlite3.DatabaseError as e:
                self._rollback_quietly()
                raise TableUnavailableError(f"Insert failed: {e}") from e

    def _get_item(self, key: CompositePrimaryKey) -> DatabaseItem | None:
        with self._lock:
            try:
                row = self.connection.execute(
                    "SELECT * FROM items WHERE partition_key = ? AND sort_key = ?",
                    (key.partition_key, key.sort_key),
                ).fetchone()
            except sqlite3.DatabaseError as e:
                raise TableUnavailableError(f"Read failed: {e}") from e

        return _item_from_row(row) if row is not None else None

    def _update_item(self, new_item: DatabaseItem, existing_item: DatabaseItem) -> None:
        with self._lock:
            try:
                cursor = self.connection.execute(
                    """UPDATE items
                       SET row_type = ?, version = ?, last_updated_at = ?, payload = ?
                       WHERE partition_key = ? AND sort_key = ? AND version = ?""",
                    (
                        new_item.row_type,
                        new_item.version,
                        new_item.last_updated_at.isoformat(),
                        json.dumps(new_item.payload),
                        existing_item.key.partition_key,
                        existing_item.key.sort_key,
                        existing_item.version,
                    ),
                )
                self.connection.commit()
            except sqlite3.DatabaseError as e:
                self._rollback_quietly()
                raise TableUnavailableError(f"Update failed: {e}") from e

        if cursor.rowcount == 0:
            raise ConditionalCheckFailedError(
                f"Version mismatch for {existing_item.key.sort_key}: "
                f"expected {existing_item.version}"
            )

    def _rollback_quietly(self) -> None:
        # The connection itself may be what failed
        try:
            if self._connection is not None:
                self._connection.rollback()
        except sqlite3.Error:
            pass
