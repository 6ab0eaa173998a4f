"""Database migration utilities.

Handles schema evolution by applying idempotent migrations keyed by an integer
`schema_version` stored in the metadata table.
"""

from __future__ import annotations
from pathlib import Path
import sqlite3
from typing import Optional

from . import schema as schema_def
from .schema import init_db

CURRENT_SCHEMA_VERSION = 2
SCHEMA_VERSION_KEY = "schema_version"

# Keys written by early builds before the collection names settled.
LEGACY_KEY_RENAMES = {
    "itineraryAceCustomCurrencies": "itineraryAce_customCurrencies",
    "itineraryAceQuotationRequests": "itineraryAce_agentQuotationRequests",
}


def _get_schema_version(conn: sqlite3.Connection) -> Optional[int]:
    try:
        cur = conn.cursor()
        cur.execute("SELECT value FROM metadata WHERE key=?", (SCHEMA_VERSION_KEY,))
        row = cur.fetchone()
        if row:
            return int(row[0])
    except sqlite3.OperationalError:
        # metadata table may not exist yet (first run before init_db)
        return None
    return None


def apply_migrations(db_path: Path) -> int:
    """Apply required migrations and return resulting schema version."""
    init_db(db_path)
    conn = sqlite3.connect(db_path)
    try:
        version = _get_schema_version(conn) or 1
        if version < 2:
            _migrate_to_v2(conn)
            version = 2
        _set_schema_version(conn, version)
        conn.commit()
        return version
    finally:
        conn.close()


def _set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    cur = conn.cursor()
    cur.execute(
        "INSERT INTO metadata (key, value) VALUES (?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
        f"updated_at=({schema_def.BASIC_UTC_NOW})",
        (SCHEMA_VERSION_KEY, str(version)),
    )


def _migrate_to_v2(conn: sqlite3.Connection) -> None:
    """Move values stored under legacy collection keys to their current names.

    An existing value under the new key wins; the legacy key is dropped either way.
    """
    cur = conn.cursor()
    try:
        for old_key, new_key in LEGACY_KEY_RENAMES.items():
            cur.execute(
                """
                INSERT OR IGNORE INTO local_storage (key, value, updated_at)
                SELECT ?, value, updated_at FROM local_storage WHERE key = ?
                """,
                (new_key, old_key),
            )
            cur.execute("DELETE FROM local_storage WHERE key = ?", (old_key,))
        conn.commit()
    except Exception:
        conn.rollback()
        raise
