"""
Chrome browser extractor.

Covers the Chrome artifacts the Recent Activity pipeline reports:
- History visits and downloads (History SQLite)
- Bookmarks (Bookmarks JSON)
- Cookies (Cookies / Network/Cookies SQLite)

Usage:
    from extractors.browser.chromium import ChromeExtractor
"""

from .extractor import ChromeExtractor

__all__ = ["ChromeExtractor"]
