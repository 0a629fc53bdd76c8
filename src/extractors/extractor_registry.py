"""
Extractor registry: the ordered list of extractors for one run.

The list is built explicitly, not discovered: its order is the execution
contract. Extractors that consume artifacts must come after the extractors
that produce them (search query analysis after the browsers), and the
slowest extractor (registry hives) goes last.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from core.config import IngestConfig
from core.logging import get_logger

from .base import BaseExtractor

LOGGER = get_logger("extractors.extractor_registry")


class ExtractorRegistry:
    """
    Immutable, ordered collection of extractor instances.

    Usage:
        registry = build_recent_activity_registry()

        for extractor in registry:          # execution order
            ...

        registry.data_presence_units        # browser "data found" subset
        registry.get("chrome")
    """

    def __init__(
        self,
        extractors: Sequence[BaseExtractor],
        data_presence: Optional[Sequence[BaseExtractor]] = None,
    ) -> None:
        names = [extractor.name for extractor in extractors]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate extractor names in registry: {', '.join(duplicates)}")

        self._extractors: Tuple[BaseExtractor, ...] = tuple(extractors)
        self._by_name: Dict[str, BaseExtractor] = {e.name: e for e in self._extractors}

        if data_presence is None:
            presence = [e for e in self._extractors if e.metadata.reports_data_presence]
        else:
            members = {id(e) for e in self._extractors}
            for extractor in data_presence:
                if id(extractor) not in members:
                    raise ValueError(f"Data-presence extractor {extractor.name} is not in the registry")
            wanted = {id(e) for e in data_presence}
            # Keep registry order regardless of the order given
            presence = [e for e in self._extractors if id(e) in wanted]
        self._data_presence: Tuple[BaseExtractor, ...] = tuple(presence)

    def __iter__(self) -> Iterator[BaseExtractor]:
        return iter(self._extractors)

    def __len__(self) -> int:
        return len(self._extractors)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Optional[BaseExtractor]:
        return self._by_name.get(name)

    @property
    def names(self) -> List[str]:
        return [e.name for e in self._extractors]

    @property
    def data_presence_units(self) -> Tuple[BaseExtractor, ...]:
        return self._data_presence

    def without(self, names: Iterable[str]) -> ExtractorRegistry:
        """Return a new registry with the named extractors removed (order kept)."""
        excluded = set(names)
        unknown = excluded - set(self._by_name)
        if unknown:
            LOGGER.warning("Ignoring unknown disabled extractors: %s", ", ".join(sorted(unknown)))
        kept = [e for e in self._extractors if e.name not in excluded]
        presence = [e for e in self._data_presence if e.name not in excluded]
        return ExtractorRegistry(kept, presence)


def build_recent_activity_registry(config: Optional[IngestConfig] = None) -> ExtractorRegistry:
    """Build a fresh recent-activity registry (browsers, shortcuts, queries, registry)."""
    from .browser.chromium import ChromeExtractor
    from .browser.firefox import FirefoxExtractor
    from .browser.ie_legacy import InternetExplorerExtractor
    from .analysis.search_queries import SearchEngineQueryAnalyzer
    from .system.recent_documents import RecentDocumentsExtractor
    from .system.registry import RegistryExtractor

    chrome = ChromeExtractor()
    firefox = FirefoxExtractor()
    iexplore = InternetExplorerExtractor()

    registry = ExtractorRegistry(
        [
            chrome,
            firefox,
            iexplore,
            RecentDocumentsExtractor(),
            SearchEngineQueryAnalyzer(),  # needs the browser artifacts above
            RegistryExtractor(),          # slowest, runs last
        ],
        data_presence=[chrome, firefox, iexplore],
    )
    if config and config.disabled_extractors:
        registry = registry.without(config.disabled_extractors)
    return registry


def build_file_registry(config: Optional[IngestConfig] = None) -> ExtractorRegistry:
    """Build a fresh registry of file-scoped extractors (EXIF metadata)."""
    from .media.exif import ExifParserFileExtractor

    registry = ExtractorRegistry([ExifParserFileExtractor()], data_presence=[])
    if config and config.disabled_extractors:
        registry = registry.without(config.disabled_extractors)
    return registry
