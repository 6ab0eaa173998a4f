"""Database schema DDL definitions and initialization utilities.

Tables:
  - local_storage: flat string keys, each holding a JSON-serialized array or
    scalar (one key per itinerary, an index key, per-entity collection keys)
  - metadata: key/value store for schema bookkeeping
"""

from __future__ import annotations
import sqlite3
from typing import Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

LOCAL_STORAGE_DDL = f"""
CREATE TABLE IF NOT EXISTS local_storage (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL, -- JSON document
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

METADATA_DDL = f"""
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

DDL_ORDER: Sequence[str] = (
    LOCAL_STORAGE_DDL,
    METADATA_DDL,
)


def init_db(path: Path) -> None:
    """Create all tables idempotently.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        conn.commit()
    finally:
        conn.close()
