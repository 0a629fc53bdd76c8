"""
Chrome database and JSON parsers.

Pure parsing: every function takes an open SQLite connection (or the
decoded Bookmarks JSON) and yields small records with timestamps already
converted to Unix epoch seconds. Missing tables yield nothing; query
failures propagate as SQLiteReadError so the extractor can record them.

Chrome stores times in WebKit format (microseconds since 1601-01-01).

Usage:
    with safe_sqlite_connect(history_copy) as conn:
        for visit in parse_history_visits(conn):
            print(visit.url, visit.visit_time)
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from ..._shared.sqlite_helpers import safe_execute, table_exists
from ..._shared.timestamps import webkit_to_epoch


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class HistoryVisit:
    """A single browser history visit record."""
    url: str
    title: Optional[str]
    visit_time: Optional[int]


@dataclass
class Download:
    """A single download record from the History database."""
    target_path: Optional[str]
    url: Optional[str]
    start_time: Optional[int]


@dataclass
class Bookmark:
    """A URL bookmark (folders are walked, not yielded)."""
    name: str
    url: str
    date_added: Optional[int]
    folder_path: str


@dataclass
class Cookie:
    """A single cookie record."""
    host_key: str
    name: str
    value: str
    path: str
    last_access: Optional[int]


# =============================================================================
# History
# =============================================================================

def parse_history_visits(conn: sqlite3.Connection) -> Iterator[HistoryVisit]:
    """
    Yield per-visit records (visits joined with urls), newest first.

    Per-visit rather than per-URL so the timeline keeps every access.
    """
    if not table_exists(conn, "visits") or not table_exists(conn, "urls"):
        return

    query = """
        SELECT u.url, u.title, v.visit_time
        FROM visits v
        JOIN urls u ON v.url = u.id
        WHERE v.visit_time > 0
        ORDER BY v.visit_time DESC
    """
    for row in safe_execute(conn, query):
        yield HistoryVisit(
            url=row["url"],
            title=row["title"],
            visit_time=webkit_to_epoch(row["visit_time"]),
        )


def parse_downloads(conn: sqlite3.Connection) -> Iterator[Download]:
    """
    Yield download records.

    Modern History databases keep the source URL in downloads_url_chains
    (chain_index 0 is the original request); very old ones have url and
    full_path directly on the downloads table.
    """
    if not table_exists(conn, "downloads"):
        return

    if table_exists(conn, "downloads_url_chains"):
        query = """
            SELECT d.target_path AS target_path, d.start_time AS start_time, c.url AS url
            FROM downloads d
            LEFT JOIN downloads_url_chains c ON c.id = d.id AND c.chain_index = 0
            ORDER BY d.start_time DESC
        """
        rows = safe_execute(conn, query)
        for row in rows:
            yield Download(
                target_path=row["target_path"],
                url=row["url"],
                start_time=webkit_to_epoch(row["start_time"]),
            )
        return

    rows = safe_execute(conn, "SELECT full_path, url, start_time FROM downloads ORDER BY start_time DESC")
    for row in rows:
        # Pre-v30 schema stored start_time as Unix seconds
        start = row["start_time"]
        yield Download(
            target_path=row["full_path"],
            url=row["url"],
            start_time=int(start) if start and start > 0 else None,
        )


# =============================================================================
# Cookies
# =============================================================================

def parse_cookies(conn: sqlite3.Connection) -> Iterator[Cookie]:
    """Yield cookie records from the Cookies database."""
    if not table_exists(conn, "cookies"):
        return

    query = """
        SELECT host_key, name, value, path, last_access_utc
        FROM cookies
        ORDER BY last_access_utc DESC
    """
    for row in safe_execute(conn, query):
        yield Cookie(
            host_key=row["host_key"] or "",
            name=row["name"] or "",
            value=row["value"] or "",
            path=row["path"] or "/",
            last_access=webkit_to_epoch(row["last_access_utc"]),
        )


def cookie_url(host_key: str, path: str) -> str:
    """Rebuild a URL for a cookie from its host_key and path."""
    host = host_key.lstrip(".")
    return f"http://{host}{path or '/'}"


# =============================================================================
# Bookmarks (JSON)
# =============================================================================

# Root folder keys and their display names
ROOT_FOLDERS = {
    "bookmark_bar": "Bookmarks Bar",
    "other": "Other Bookmarks",
    "synced": "Mobile Bookmarks",
}


def parse_bookmarks_json(data: Dict[str, Any]) -> Iterator[Bookmark]:
    """
    Yield URL bookmarks from the decoded Bookmarks JSON file.

    Chromium stores bookmarks as a nested folder tree under ``roots``;
    date_added is a WebKit timestamp encoded as a string.
    """
    roots = data.get("roots") or {}
    if not isinstance(roots, dict):
        return
    for root_key, display_name in ROOT_FOLDERS.items():
        root_node = roots.get(root_key)
        if isinstance(root_node, dict):
            yield from _walk_bookmark_node(root_node, display_name)


def _walk_bookmark_node(node: Dict[str, Any], folder_path: str) -> Iterator[Bookmark]:
    node_type = node.get("type", "")
    if node_type == "url" and node.get("url"):
        yield Bookmark(
            name=node.get("name", ""),
            url=node["url"],
            date_added=webkit_to_epoch(_parse_int(node.get("date_added"))),
            folder_path=folder_path,
        )
        return

    for child in node.get("children") or []:
        if not isinstance(child, dict):
            continue
        child_path = folder_path
        if child.get("type") == "folder":
            child_path = f"{folder_path}/{child.get('name', '')}"
        yield from _walk_bookmark_node(child, child_path)


def _parse_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
