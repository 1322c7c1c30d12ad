"""SQLite adapter module - durable composite-key table."""

from taskcluster.adapters.sqlite.connection import open_connection
from taskcluster.adapters.sqlite.table import SqliteCompositeKeyTable

__all__ = [
    "SqliteCompositeKeyTable",
    "open_connection",
]
