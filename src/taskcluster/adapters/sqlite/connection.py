"""Database connection setup for the SQLite item store.

Connections are configured for concurrent use: WAL journaling, a busy timeout
for competing writers, and access from worker threads.
"""

from __future__ import annotations

import os
import sqlite3
from pathlib import Path

from taskcluster.adapters.sqlite.migrations import MigrationRunner
from taskcluster.adapters.sqlite.migrations.m001_initial_schema import ALL_MIGRATIONS

MEMORY_DATABASE = ":memory:"


def open_connection(db_path: str | Path) -> sqlite3.Connection:
    """Open a connection to *db_path* and bring its schema up to date.

    Args:
        db_path: Path to database file, or ":memory:" for a private database

    Returns:
        sqlite3.Connection with rows accessible by column name
    """
    is_memory = str(db_path) == MEMORY_DATABASE
    is_new_database = False
    if not is_memory:
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not db_path.exists()

    connection = sqlite3.connect(
        str(db_path),
        check_same_thread=False,  # Used from asyncio.to_thread workers
        timeout=30.0,  # Wait up to 30s for locks held by other processes
    )
    connection.row_factory = sqlite3.Row
    if not is_memory:
        connection.execute("PRAGMA journal_mode = WAL")

    # Owner read/write only
    if is_new_database:
        os.chmod(db_path, 0o600)

    MigrationRunner(connection).run_migrations(ALL_MIGRATIONS)
    return connection
