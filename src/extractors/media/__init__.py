"""
Media extractors - file-scoped image metadata analysis.

This module provides extractors for media artifacts:
- EXIF Parser: JPEG camera metadata (capture time, GPS, make/model)

Usage:
    from extractors.media import ExifParserFileExtractor
"""

from __future__ import annotations

from .exif import ExifParserFileExtractor

__all__ = [
    "ExifParserFileExtractor",
]
