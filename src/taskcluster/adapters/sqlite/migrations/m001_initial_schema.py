"""Initial database schema migration: the composite-key items table."""

import sqlite3

from taskcluster.adapters.sqlite import schema
from .runner import Migration


class InitialSchemaMigration(Migration):
    """Migration 001: Create the items table and its indexes."""

    @property
    def version(self) -> int:
        return 1

    @property
    def description(self) -> str:
        return "Initial composite-key items table"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute(schema.CREATE_ITEMS_TABLE)
        for index_sql in schema.ALL_INDEXES:
            connection.execute(index_sql)


initial_migration = InitialSchemaMigration()

ALL_MIGRATIONS = [
    initial_migration,
]
