"""Repository for namespaced key/value records."""

import sqlite3


def get_value(conn: sqlite3.Connection, key: str) -> str | None:
    """Get the stored document for a key, or None when absent."""
    row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
    if row is None:
        return None
    return row[0]


def set_value(conn: sqlite3.Connection, key: str, value: str) -> None:
    """Overwrite the document stored under a key."""
    conn.execute(
        "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
        (key, value),
    )
    conn.commit()
