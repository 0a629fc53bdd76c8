"""
Browser extractors organized by browser family.

Structure:
    browser/
    ├── chromium/    # Google Chrome (History, Bookmarks, Cookies)
    ├── firefox/     # Mozilla Firefox (places.sqlite, cookies.sqlite)
    └── ie_legacy/   # Internet Explorer (Favorites, text cookies)

Each family copies its evidence files to the unit temp dir before parsing.

Usage:
    from extractors.browser.chromium import ChromeExtractor
    from extractors.browser.ie_legacy import InternetExplorerExtractor
"""

from .chromium import ChromeExtractor
from .firefox import FirefoxExtractor
from .ie_legacy import InternetExplorerExtractor

__all__ = ['ChromeExtractor', 'FirefoxExtractor', 'InternetExplorerExtractor']
