"""
Windows shortcut (.lnk) parsing via LnkParse3.

LnkParse3 returns the parsed link as a dictionary from get_json():
``header`` holds the FILETIME-derived datetimes, ``link_info`` the
``local_base_path`` of the target, and ``data`` the optional string data
such as ``relative_path``.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

import LnkParse3

from ..._shared.timestamps import datetime_to_epoch
from ...exceptions import LnkParseError


@dataclass
class ShortcutInfo:
    """What the Recent Documents unit keeps from a shortcut."""
    target_path: Optional[str]
    accessed_time: Optional[int]
    modified_time: Optional[int]
    creation_time: Optional[int]


def parse_lnk_bytes(data: bytes, path: str = "") -> ShortcutInfo:
    """
    Parse raw .lnk bytes.

    Raises:
        LnkParseError: If LnkParse3 cannot decode the data
    """
    if len(data) < 0x4C:
        raise LnkParseError(path, "shorter than a shell link header")
    try:
        with io.BytesIO(data) as f:
            parsed = LnkParse3.lnk_file(f).get_json()
    # LnkParse3 surfaces malformed input as arbitrary exception types
    except Exception as exc:
        raise LnkParseError(path, str(exc)) from exc

    header = parsed.get("header") or {}
    return ShortcutInfo(
        target_path=target_path_from_json(parsed),
        accessed_time=_header_time(header.get("accessed_time")),
        modified_time=_header_time(header.get("modified_time")),
        creation_time=_header_time(header.get("creation_time")),
    )


def target_path_from_json(parsed: Dict[str, Any]) -> Optional[str]:
    """Target path from link_info.local_base_path, else data.relative_path."""
    link_info = parsed.get("link_info") or {}
    target = link_info.get("local_base_path")
    if target:
        return str(target)
    relative = (parsed.get("data") or {}).get("relative_path")
    if relative:
        return str(relative)
    return None


def _header_time(value: Any) -> Optional[int]:
    if isinstance(value, datetime):
        return datetime_to_epoch(value)
    return None
