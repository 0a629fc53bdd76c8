"""
System extractors - Windows system artifact analysis.

This module provides extractors for Windows system artifacts:
- Recent Documents: Recent/*.lnk shortcut targets
- Registry: Offline SOFTWARE/SYSTEM hive parsing

Usage:
    from extractors.system.recent_documents import RecentDocumentsExtractor
    from extractors.system.registry import RegistryExtractor
"""

from __future__ import annotations

from .recent_documents import RecentDocumentsExtractor
from .registry import RegistryExtractor

__all__ = [
    "RecentDocumentsExtractor",
    "RegistryExtractor",
]
