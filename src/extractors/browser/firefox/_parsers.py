"""
Firefox SQLite database parsers.

Parses Firefox databases:
- places.sqlite: History (moz_historyvisits + moz_places)
- places.sqlite: Bookmarks (moz_bookmarks + moz_places)
- cookies.sqlite: Cookies (moz_cookies)

Firefox uses PRTime timestamps (microseconds since 1970-01-01); cookie
expiry is plain Unix seconds. All parsers yield dataclasses with times
already converted to epoch seconds.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Iterator, Optional, Set

from ..._shared.sqlite_helpers import safe_execute, table_exists
from ..._shared.timestamps import prtime_to_epoch, unix_to_epoch


@dataclass
class FirefoxVisit:
    """A single history visit."""
    url: str
    title: Optional[str]
    visit_date: Optional[int]


@dataclass
class FirefoxBookmark:
    """A URL bookmark."""
    url: str
    title: Optional[str]
    date_added: Optional[int]


@dataclass
class FirefoxCookie:
    """A single cookie record."""
    host: str
    name: str
    value: str
    path: str
    last_accessed: Optional[int]
    expiry: Optional[int]


def parse_history_visits(conn: sqlite3.Connection) -> Iterator[FirefoxVisit]:
    """
    Yield per-visit records, newest first.

    Joins moz_historyvisits with moz_places so every visit is kept, not
    just the per-URL aggregate.
    """
    if not (table_exists(conn, "moz_places") and table_exists(conn, "moz_historyvisits")):
        return

    rows = safe_execute(conn, """
        SELECT p.url, p.title, v.visit_date
        FROM moz_historyvisits v
        JOIN moz_places p ON v.place_id = p.id
        WHERE v.visit_date IS NOT NULL
        ORDER BY v.visit_date DESC
    """)
    for row in rows:
        yield FirefoxVisit(
            url=row["url"],
            title=row["title"],
            visit_date=prtime_to_epoch(row["visit_date"]),
        )


def parse_bookmarks(conn: sqlite3.Connection) -> Iterator[FirefoxBookmark]:
    """Yield URL bookmarks (type 1) joined with their moz_places row."""
    if not (table_exists(conn, "moz_bookmarks") and table_exists(conn, "moz_places")):
        return

    # moz_bookmarks.title wins; older profiles only title the place
    rows = safe_execute(conn, """
        SELECT p.url, COALESCE(b.title, p.title) AS title, b.dateAdded
        FROM moz_bookmarks b
        JOIN moz_places p ON b.fk = p.id
        WHERE b.type = 1
        ORDER BY b.dateAdded
    """)
    for row in rows:
        yield FirefoxBookmark(
            url=row["url"],
            title=row["title"],
            date_added=prtime_to_epoch(row["dateAdded"]),
        )


def parse_cookies(conn: sqlite3.Connection) -> Iterator[FirefoxCookie]:
    """
    Yield cookie records.

    Handles both moz_cookies (modern) and cookies (older) table names, and
    tolerates missing optional columns.
    """
    if table_exists(conn, "moz_cookies"):
        table_name = "moz_cookies"
    elif table_exists(conn, "cookies"):
        table_name = "cookies"
    else:
        return

    columns = _table_columns(conn, table_name)
    select = ["host", "name", "value"]
    for col in ("path", "lastAccessed", "expiry"):
        select.append(col if col in columns else f"NULL AS {col}")

    rows = safe_execute(conn, f"SELECT {', '.join(select)} FROM {table_name}")
    for row in rows:
        yield FirefoxCookie(
            host=row["host"] or "",
            name=row["name"] or "",
            value=row["value"] or "",
            path=row["path"] or "/",
            last_accessed=prtime_to_epoch(row["lastAccessed"]),
            expiry=unix_to_epoch(row["expiry"]),
        )


def _table_columns(conn: sqlite3.Connection, table_name: str) -> Set[str]:
    return {row[1] for row in safe_execute(conn, f"PRAGMA table_info({table_name})")}
