"""
Modular extractor system for the Recent Activity pipeline.

Each extractor is a self-contained unit with:
- Metadata (name, display name, data-presence flag)
- init / process / complete / stop lifecycle
- Its own list of recoverable errors

Folder Structure:
- browser/         Browser family extractors (chromium/, firefox/, ie_legacy/)
- system/          Windows system artifacts (recent_documents, registry)
- analysis/        Units that read findings produced by earlier units
- media/           File-scoped extractors (exif)
- _shared/         Shared utilities (timestamps, sqlite_helpers, url_utils)

Concrete extractors are imported lazily by extractor_registry so that
importing this package stays cheap.
"""

from .base import BaseExtractor, ExtractorMetadata, FileExtractor
from .callbacks import ExtractorCallbacks
from .extractor_registry import (
    ExtractorRegistry,
    build_file_registry,
    build_recent_activity_registry,
)
from .exceptions import (
    ConfigurationError,
    ExifParseError,
    ExtractionFailedError,
    ExtractorError,
    LnkParseError,
)

__all__ = [
    'BaseExtractor',
    'ExtractorMetadata',
    'FileExtractor',
    'ExtractorCallbacks',
    'ExtractorRegistry',
    'build_file_registry',
    'build_recent_activity_registry',
    'ExtractorError',
    'ExtractionFailedError',
    'ConfigurationError',
    'ExifParseError',
    'LnkParseError',
]
