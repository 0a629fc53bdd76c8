"""Recent Documents extractor (Recent/*.lnk shortcuts)."""

from .extractor import RecentDocumentsExtractor

__all__ = ["RecentDocumentsExtractor"]
