"""
Timestamp conversion utilities for extractors.

These are PURE FUNCTIONS with no side effects. Attributes store time as
integer seconds since the Unix epoch (UTC), so every converter here lands
on that representation and returns None for zero/invalid/out-of-range input.

Formats supported:
- WebKit: Microseconds since 1601-01-01 (Chromium browsers)
- PRTime: Microseconds since 1970-01-01 (Firefox)
- FILETIME: 100-nanosecond intervals since 1601-01-01 (Windows, IE cookies, registry)
- Unix: Seconds since 1970-01-01
"""

from __future__ import annotations

import struct
from datetime import datetime, timezone
from typing import Optional, Union

# Seconds between 1601-01-01 and 1970-01-01
WEBKIT_EPOCH_DIFF = 11644473600
# Same difference expressed in 100-nanosecond FILETIME ticks
EPOCH_AS_FILETIME = 116444736000000000
HUNDREDS_OF_NS = 10_000_000
# Anything past year 3000 is garbage, not a timestamp
MAX_UNIX_SECONDS = 32503680000


def _valid_seconds(seconds: float) -> Optional[int]:
    if seconds <= 0 or seconds > MAX_UNIX_SECONDS:
        return None
    return int(seconds)


def webkit_to_epoch(microseconds: Optional[int]) -> Optional[int]:
    """
    Convert WebKit timestamp to Unix epoch seconds.

    Example:
        >>> webkit_to_epoch(13350000000000000)
        1705526400
    """
    if not microseconds or microseconds <= 0:
        return None
    return _valid_seconds(microseconds / 1_000_000 - WEBKIT_EPOCH_DIFF)


def prtime_to_epoch(microseconds: Optional[int]) -> Optional[int]:
    """Convert PRTime (Firefox) timestamp to Unix epoch seconds."""
    if not microseconds or microseconds <= 0:
        return None
    return _valid_seconds(microseconds / 1_000_000)


def unix_to_epoch(timestamp: Optional[Union[int, float]]) -> Optional[int]:
    """Validate a Unix timestamp and truncate it to whole seconds."""
    if not timestamp:
        return None
    return _valid_seconds(timestamp)


def filetime_to_epoch(filetime: Optional[Union[int, bytes]]) -> Optional[int]:
    """
    Convert Windows FILETIME to Unix epoch seconds.

    Args:
        filetime: Either an integer FILETIME value or 8 bytes (little-endian)
    """
    if filetime is None:
        return None
    if isinstance(filetime, bytes):
        if len(filetime) != 8:
            return None
        filetime = struct.unpack("<Q", filetime)[0]
    if filetime <= EPOCH_AS_FILETIME:
        return None
    return _valid_seconds((filetime - EPOCH_AS_FILETIME) / HUNDREDS_OF_NS)


def filetime_from_dwords(low: int, high: int) -> int:
    """Combine the low/high 32-bit halves of a FILETIME."""
    return (high << 32) | (low & 0xFFFFFFFF)


def datetime_to_epoch(value: Optional[datetime]) -> Optional[int]:
    """Convert a datetime to Unix epoch seconds, treating naive values as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    try:
        return _valid_seconds(value.timestamp())
    except (OverflowError, OSError, ValueError):
        return None
