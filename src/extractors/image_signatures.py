"""
Image format detection by content signature (magic bytes).

File extensions on evidence are not trusted: a renamed JPEG is still a JPEG,
and a .jpg that starts with anything else is not parsed.
"""

from __future__ import annotations

from core.evidence_fs import EvidenceFile
from core.logging import get_logger

LOGGER = get_logger("extractors.image_signatures")

# Header bytes read per file (SOI, APPn marker and its identifier)
HEADER_SIZE = 12

# SOI + any marker (JFIF, EXIF, ICC, Adobe, raw)
JPEG_SIGNATURE = b"\xff\xd8\xff"


def is_jpeg_header(data: bytes) -> bool:
    """True if the bytes start with a JPEG SOI marker followed by a marker prefix."""
    return data[:len(JPEG_SIGNATURE)] == JPEG_SIGNATURE


def is_jpeg_file_header(file: EvidenceFile) -> bool:
    """
    Check whether an evidence file is a JPEG by reading its first bytes.

    Unreadable or empty files are reported as not JPEG.
    """
    try:
        header = file.read_header(HEADER_SIZE)
    except OSError as exc:
        LOGGER.debug("Could not read header of %s: %s", file.path, exc)
        return False
    return is_jpeg_header(header)
