"""
Analysis extractors - units that derive findings from earlier findings.

Usage:
    from extractors.analysis import SearchEngineQueryAnalyzer
"""

from __future__ import annotations

from .search_queries import SearchEngineQueryAnalyzer

__all__ = ["SearchEngineQueryAnalyzer"]
