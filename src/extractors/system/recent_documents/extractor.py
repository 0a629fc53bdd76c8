"""
Recent Documents extractor.

Walks the per-user Recent folders, parses every shortcut with LnkParse3
and posts one RECENT_OBJECT (PATH, DATETIME) per link target.
"""

from __future__ import annotations

from typing import Optional

from core.enums import ArtifactType, AttributeType
from core.evidence_fs import EvidenceFS
from core.logging import get_logger

from ..._shared.attributes import collect_attributes
from ..._shared.timestamps import unix_to_epoch
from ...base import BaseExtractor, ExtractorMetadata
from ...callbacks import ExtractorCallbacks
from ...exceptions import LnkParseError
from ._parser import parse_lnk_bytes

LOGGER = get_logger("extractors.system.recent_documents")

RECENT_PATTERNS = [
    "Users/*/AppData/Roaming/Microsoft/Windows/Recent/*.lnk",
    "Documents and Settings/*/Recent/*.lnk",
]


class RecentDocumentsExtractor(BaseExtractor):
    """Recently opened documents from Windows shortcut files."""

    @property
    def metadata(self) -> ExtractorMetadata:
        return ExtractorMetadata(
            name="recent_documents",
            display_name="Recent Documents",
            description="Recently opened documents from Recent/*.lnk shortcuts",
            category="system",
        )

    def process(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        count = 0
        for path in evidence_fs.iter_paths_any(RECENT_PATTERNS):
            if callbacks.is_cancelled():
                LOGGER.info("Recent documents cancelled before %s", path)
                break
            try:
                info = parse_lnk_bytes(evidence_fs.read_file(path), path)
            except (OSError, LnkParseError) as exc:
                LOGGER.warning("Error while trying to read recent document %s: %s", path, exc)
                self._add_error(f"{self.display_name}: Error while trying to read {path}")
                continue

            if not info.target_path:
                LOGGER.debug("Shortcut %s has no target path", path)
                continue

            when = info.accessed_time or info.modified_time or self._link_mtime(evidence_fs, path)
            attributes = collect_attributes(self.display_name, [
                (AttributeType.PATH, info.target_path),
                (AttributeType.DATETIME, when),
            ])
            if self._post_artifact(path, ArtifactType.RECENT_OBJECT, attributes):
                count += 1

        LOGGER.info("Recent documents: %d shortcut(s) recorded", count)

    def _link_mtime(self, evidence_fs: EvidenceFS, path: str) -> Optional[int]:
        try:
            return unix_to_epoch(evidence_fs.stat(path).mtime_epoch)
        except OSError:
            return None
