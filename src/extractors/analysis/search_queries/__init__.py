"""
Search Engine Query Analyzer.

Features:
- Default engine list (Google, Bing, Yahoo, DuckDuckGo, Baidu, Yandex, Ask)
- YAML override via ingest.search_engines_file
- Works on artifacts already in the findings store
"""

from .extractor import SearchEngineQueryAnalyzer

__all__ = ["SearchEngineQueryAnalyzer"]
