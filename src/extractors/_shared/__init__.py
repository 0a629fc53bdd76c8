"""
Shared utilities for extractors.

- timestamps: Timestamp conversions to epoch seconds (WebKit, PRTime, FILETIME, Unix)
- sqlite_helpers: Read-only SQLite access
- url_utils: URL/domain helpers
- attributes: Attribute list building
"""

from .timestamps import (
    webkit_to_epoch,
    prtime_to_epoch,
    unix_to_epoch,
    filetime_to_epoch,
    filetime_from_dwords,
    datetime_to_epoch,
    WEBKIT_EPOCH_DIFF,
)

from .sqlite_helpers import (
    safe_sqlite_connect,
    safe_execute,
    SQLiteReadError,
    table_exists,
)

from .url_utils import extract_domain

from .attributes import collect_attributes

__all__ = [
    "webkit_to_epoch",
    "prtime_to_epoch",
    "unix_to_epoch",
    "filetime_to_epoch",
    "filetime_from_dwords",
    "datetime_to_epoch",
    "WEBKIT_EPOCH_DIFF",
    "safe_sqlite_connect",
    "safe_execute",
    "SQLiteReadError",
    "table_exists",
    "extract_domain",
    "collect_attributes",
]
