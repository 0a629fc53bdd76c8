"""
EXIF Parser extractor.

Features:
- JPEG detection by content signature
- Capture time, GPS position and camera make/model via Pillow
- Batched ModuleDataEvent notification
"""

from .extractor import ExifParserFileExtractor

__all__ = ["ExifParserFileExtractor"]
