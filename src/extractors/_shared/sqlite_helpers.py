"""
Safe SQLite helpers for browser extractors.

Extractors copy evidence databases into their temp directory first (see
BaseExtractor._copy_to_temp); these helpers then open the copy read-only
and translate sqlite errors into SQLiteReadError.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Tuple, Union


class SQLiteReadError(Exception):
    """Raised when SQLite database cannot be read."""
    pass


@contextmanager
def safe_sqlite_connect(
    db_path: Union[str, Path],
    timeout: float = 5.0,
) -> Iterator[sqlite3.Connection]:
    """
    Connect to SQLite database in read-only mode.

    Raises:
        SQLiteReadError: If database cannot be opened
        FileNotFoundError: If database file doesn't exist

    Example:
        with safe_sqlite_connect("/path/to/History") as conn:
            for row in safe_execute(conn, "SELECT url FROM urls"):
                print(row["url"])
    """
    db_path = Path(db_path)
    if not db_path.exists():
        raise FileNotFoundError(f"Database not found: {db_path}")

    try:
        conn = sqlite3.connect(f"file:{db_path}?mode=ro", uri=True, timeout=timeout)
    except sqlite3.Error as e:
        raise SQLiteReadError(f"Failed to open database {db_path}: {e}") from e

    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def safe_execute(
    conn: sqlite3.Connection,
    query: str,
    params: Tuple[Any, ...] = (),
) -> List[sqlite3.Row]:
    """
    Execute a query and fetch all rows.

    Raises:
        SQLiteReadError: If query execution fails (corrupt or non-SQLite file)
    """
    try:
        return conn.execute(query, params).fetchall()
    except sqlite3.Error as e:
        raise SQLiteReadError(f"Query execution failed: {e}") from e


def table_exists(conn: sqlite3.Connection, table_name: str) -> bool:
    """Check if a table exists in the database."""
    rows = safe_execute(
        conn,
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
        (table_name,),
    )
    return len(rows) > 0
