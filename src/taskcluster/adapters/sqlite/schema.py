"""Database schema definitions for the SQLite composite-key table.

One generic ``items`` table holds every entity class. Rows are addressed by
(partition_key, sort_key); ``version`` is the optimistic-concurrency token.
"""

from __future__ import annotations

CREATE_ITEMS_TABLE = """
CREATE TABLE IF NOT EXISTS items (
    partition_key TEXT NOT NULL,
    sort_key TEXT NOT NULL,
    row_type TEXT NOT NULL,
    version INTEGER NOT NULL DEFAULT 1,
    created_at DATETIME NOT NULL,
    last_updated_at DATETIME NOT NULL,
    payload TEXT NOT NULL,
    PRIMARY KEY (partition_key, sort_key)
)
"""

CREATE_ITEMS_ROW_TYPE_INDEX = """
CREATE INDEX IF NOT EXISTS idx_items_row_type ON items(partition_key, row_type)
"""

ALL_INDEXES = [
    CREATE_ITEMS_ROW_TYPE_INDEX,
]
