"""
Firefox browser extractor.

Covers:
- History visits and bookmarks (places.sqlite)
- Cookies (cookies.sqlite)

Usage:
    from extractors.browser.firefox import FirefoxExtractor
"""

from .extractor import FirefoxExtractor

__all__ = ["FirefoxExtractor"]
