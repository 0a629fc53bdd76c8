"""
Internet Explorer extractor.

Covers the pre-WebCache artifacts:
- Favorites (.url shortcut files)
- Legacy text cookies (Cookies/*.txt)

Usage:
    from extractors.browser.ie_legacy import InternetExplorerExtractor
"""

from .extractor import InternetExplorerExtractor

__all__ = ["InternetExplorerExtractor"]
