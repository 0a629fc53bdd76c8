"""
Search Engine Query Analyzer.

Derived-data unit: it produces nothing from the evidence directly. It
reads the WEB_HISTORY and WEB_BOOKMARK artifacts already posted by the
browser units, recognizes search engine result URLs and posts one
WEB_SEARCH_QUERY per match. It must run after the browser units.
"""

from __future__ import annotations

from typing import List

from core.case import IngestJobContext
from core.enums import ArtifactType, AttributeType
from core.evidence_fs import EvidenceFS
from core.logging import get_logger

from ..._shared.attributes import collect_attributes
from ...base import BaseExtractor, ExtractorMetadata
from ...callbacks import ExtractorCallbacks
from ._engines import SearchEngine, extract_search_query, load_engines

LOGGER = get_logger("extractors.analysis.search_queries")

SOURCE_TYPES = (ArtifactType.WEB_HISTORY, ArtifactType.WEB_BOOKMARK)


class SearchEngineQueryAnalyzer(BaseExtractor):
    """Search terms recovered from browser history and bookmark URLs."""

    def __init__(self) -> None:
        super().__init__()
        self.engines: List[SearchEngine] = []

    @property
    def metadata(self) -> ExtractorMetadata:
        return ExtractorMetadata(
            name="search_engine_queries",
            display_name="Search Engine Query Analyzer",
            description="Search terms from search engine URLs in browser artifacts",
            category="analysis",
        )

    def init(self, context: IngestJobContext) -> None:
        super().init(context)
        # A bad engines file fails init; the controller excludes this unit
        self.engines = load_engines(context.config.search_engines_file)

    def process(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        store = self.context.services.findings
        count = 0
        for artifact_type in SOURCE_TYPES:
            for artifact in store.get_artifacts(artifact_type):
                if callbacks.is_cancelled():
                    LOGGER.info("Search query analysis cancelled")
                    return
                url = artifact.get(AttributeType.URL)
                if not isinstance(url, str):
                    continue
                match = extract_search_query(url, self.engines)
                if match is None:
                    continue
                engine, host, text = match
                when = artifact.get(AttributeType.DATETIME_ACCESSED)
                if when is None:
                    when = artifact.get(AttributeType.DATETIME_CREATED)
                attributes = collect_attributes(self.display_name, [
                    (AttributeType.TEXT, text),
                    (AttributeType.DOMAIN, host),
                    (AttributeType.PROG_NAME, engine.name),
                    (AttributeType.DATETIME_ACCESSED, when),
                ])
                if self._post_artifact(artifact.content_ref, ArtifactType.WEB_SEARCH_QUERY, attributes):
                    count += 1
        LOGGER.info("Search query analysis: %d quer(ies) found", count)
