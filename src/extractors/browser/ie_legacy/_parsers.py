"""
Internet Explorer favorites and text cookie parsers.

Favorites are INI-style .url shortcut files:

    [InternetShortcut]
    URL=http://example.com

Legacy cookie files hold one or more 9-line records, each terminated by a
line containing only ``*``:

    1 name
    2 value
    3 host/path
    4 flags
    5 expiry FILETIME low dword
    6 expiry FILETIME high dword
    7 creation FILETIME low dword
    8 creation FILETIME high dword
    9 *
"""

from __future__ import annotations

import configparser
from dataclasses import dataclass
from typing import Iterator, List, Optional

import chardet

from ..._shared.timestamps import filetime_from_dwords, filetime_to_epoch

COOKIE_RECORD_LINES = 9


@dataclass
class IECookie:
    """A single text cookie record."""
    name: str
    value: str
    domain: str
    path: str
    flags: int
    expires: Optional[int]
    created: Optional[int]

    @property
    def url(self) -> str:
        return f"http://{self.domain}{self.path}"


def decode_text(raw: bytes) -> str:
    """
    Decode a small Windows text file.

    UTF-16 with BOM and UTF-8 are tried first; anything else goes through
    chardet, with cp1252 when detection gives up.
    """
    if raw.startswith((b"\xff\xfe", b"\xfe\xff")):
        return raw.decode("utf-16", errors="replace")
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass
    encoding = chardet.detect(raw)["encoding"] or "cp1252"
    try:
        return raw.decode(encoding, errors="replace")
    except LookupError:
        return raw.decode("cp1252", errors="replace")


def parse_url_file(content: str) -> Optional[str]:
    """
    Return the URL of a .url shortcut, or None if there is none.

    Falls back to a line scan when the file is not valid INI.
    """
    config = configparser.ConfigParser(interpolation=None, strict=False)
    try:
        config.read_string(content)
    except configparser.Error:
        for line in content.splitlines():
            if line.strip().lower().startswith("url="):
                return line.strip()[4:].strip() or None
        return None

    if config.has_section("InternetShortcut"):
        url = config.get("InternetShortcut", "URL", fallback=None)
        return url.strip() if url and url.strip() else None
    return None


def parse_cookie_text(content: str) -> Iterator[IECookie]:
    """Yield cookie records; incomplete or malformed records are skipped."""
    record: List[str] = []
    for line in content.splitlines():
        line = line.strip()
        if line != "*":
            record.append(line)
            continue
        if len(record) == COOKIE_RECORD_LINES - 1:
            cookie = _parse_cookie_record(record)
            if cookie is not None:
                yield cookie
        record = []


def _parse_cookie_record(lines: List[str]) -> Optional[IECookie]:
    name, value, host_path = lines[0], lines[1], lines[2]
    try:
        flags = int(lines[3])
        expiry_low, expiry_high, created_low, created_high = (int(x) for x in lines[4:8])
    except ValueError:
        return None

    if "/" in host_path:
        domain, path = host_path.split("/", 1)
        path = "/" + path
    else:
        domain, path = host_path, "/"
    if not domain:
        return None

    return IECookie(
        name=name,
        value=value,
        domain=domain,
        path=path,
        flags=flags,
        expires=filetime_to_epoch(filetime_from_dwords(expiry_low, expiry_high)),
        created=filetime_to_epoch(filetime_from_dwords(created_low, created_high)),
    )
