"""
Internet Explorer extractor - favorites and legacy text cookies.

- Favorites/*.url -> WEB_BOOKMARK (URL, TITLE from the file name,
  DATETIME_CREATED from the evidence file times)
- Cookies/*.txt   -> WEB_COOKIE per record
"""

from __future__ import annotations

from typing import Optional

from core.enums import ArtifactType, AttributeType
from core.evidence_fs import EvidenceFS
from core.logging import get_logger

from ..._shared.attributes import collect_attributes
from ..._shared.timestamps import unix_to_epoch
from ..._shared.url_utils import extract_domain
from ...base import ExtractorMetadata
from ...callbacks import ExtractorCallbacks
from .._common import BrowserExtractor
from ._parsers import decode_text, parse_cookie_text, parse_url_file
from ._patterns import get_patterns

LOGGER = get_logger("extractors.browser.ie_legacy")

PROG_NAME = "Internet Explorer"


class InternetExplorerExtractor(BrowserExtractor):
    """Internet Explorer favorites and cookies."""

    @property
    def metadata(self) -> ExtractorMetadata:
        return ExtractorMetadata(
            name="internet_explorer",
            display_name="Internet Explorer",
            description="Internet Explorer favorites and cookies",
            category="browser",
            reports_data_presence=True,
        )

    def process(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        LOGGER.info("Starting Internet Explorer extraction on %s", evidence_fs.name)
        self._process_favorites(evidence_fs, callbacks)
        self._process_cookies(evidence_fs, callbacks)

    def _process_favorites(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        count = 0
        for path, local in self._iter_local_copies(evidence_fs, get_patterns("favorites"), callbacks, "favorites"):
            try:
                url = parse_url_file(decode_text(local.read_bytes()))
            except OSError as exc:
                self._record_read_error("favorites", path, exc)
                continue
            if not url:
                LOGGER.debug("No URL in favorite %s", path)
                continue

            title = path.rsplit("/", 1)[-1]
            if title.lower().endswith(".url"):
                title = title[:-4]
            attributes = collect_attributes(self.display_name, [
                (AttributeType.URL, url),
                (AttributeType.TITLE, title),
                (AttributeType.DATETIME_CREATED, self._file_created(evidence_fs, path)),
                (AttributeType.DOMAIN, extract_domain(url)),
                (AttributeType.PROG_NAME, PROG_NAME),
            ])
            if self._post_artifact(path, ArtifactType.WEB_BOOKMARK, attributes):
                count += 1
        LOGGER.info("Internet Explorer: %d favorites", count)

    def _process_cookies(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        count = 0
        for path, local in self._iter_local_copies(evidence_fs, get_patterns("cookies"), callbacks, "cookies"):
            try:
                content = decode_text(local.read_bytes())
            except OSError as exc:
                self._record_read_error("cookies", path, exc)
                continue

            for cookie in parse_cookie_text(content):
                attributes = collect_attributes(self.display_name, [
                    (AttributeType.URL, cookie.url),
                    (AttributeType.DATETIME, cookie.created if cookie.created is not None else cookie.expires),
                    (AttributeType.NAME, cookie.name),
                    (AttributeType.VALUE, cookie.value),
                    (AttributeType.DOMAIN, cookie.domain.lstrip(".")),
                    (AttributeType.PROG_NAME, PROG_NAME),
                ])
                if self._post_artifact(path, ArtifactType.WEB_COOKIE, attributes):
                    count += 1
        LOGGER.info("Internet Explorer: %d cookies", count)

    def _file_created(self, evidence_fs: EvidenceFS, path: str) -> Optional[int]:
        """Creation time of a favorite (crtime preferred, then mtime)."""
        try:
            st = evidence_fs.stat(path)
        except OSError:
            return None
        if st.crtime_epoch:
            return unix_to_epoch(st.crtime_epoch)
        return unix_to_epoch(st.mtime_epoch)
