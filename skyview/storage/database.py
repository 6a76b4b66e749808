"""SQLite file holding the favorites document, plus its schema migrations."""

import importlib
import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_PACKAGE = "skyview.storage.migrations"
MEMORY_DB = ":memory:"


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open the favorites database in WAL mode.

    ``:memory:`` gives a throwaway database; for a file path the parent
    directories are created first.
    """
    if str(db_path) != MEMORY_DB:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply pending ``v###_*`` migrations. Returns the names applied now."""
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_versions ("
        "  version TEXT PRIMARY KEY,"
        "  applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP"
        ")"
    )
    conn.commit()
    applied = {r[0] for r in conn.execute("SELECT version FROM schema_versions")}

    pending = [name for name in _discover_migrations() if name not in applied]
    for name in pending:
        importlib.import_module(f"{MIGRATIONS_PACKAGE}.{name}").up(conn)
        conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
        conn.commit()
        logger.info("Applied migration %s", name)
    return pending


def _discover_migrations() -> list[str]:
    migrations_dir = Path(__file__).parent / "migrations"
    return sorted(p.stem for p in migrations_dir.glob("v[0-9]*_*.py"))
