"""
Firefox extractor - history, bookmarks and cookies.

- places.sqlite  -> WEB_HISTORY per visit, WEB_BOOKMARK per URL bookmark
- cookies.sqlite -> WEB_COOKIE per cookie
"""

from __future__ import annotations

from core.enums import ArtifactType, AttributeType
from core.evidence_fs import EvidenceFS
from core.logging import get_logger

from ..._shared.attributes import collect_attributes
from ..._shared.sqlite_helpers import SQLiteReadError, safe_sqlite_connect
from ..._shared.url_utils import extract_domain
from ...base import ExtractorMetadata
from ...callbacks import ExtractorCallbacks
from .._common import BrowserExtractor
from ._parsers import parse_bookmarks, parse_cookies, parse_history_visits
from ._patterns import get_patterns

LOGGER = get_logger("extractors.browser.firefox")

PROG_NAME = "Mozilla Firefox"


class FirefoxExtractor(BrowserExtractor):
    """Mozilla Firefox activity from all user profiles."""

    @property
    def metadata(self) -> ExtractorMetadata:
        return ExtractorMetadata(
            name="firefox",
            display_name="Firefox",
            description="Firefox history, bookmarks and cookies",
            category="browser",
            reports_data_presence=True,
        )

    def process(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        LOGGER.info("Starting Firefox extraction on %s", evidence_fs.name)
        self._process_places(evidence_fs, callbacks)
        self._process_cookies(evidence_fs, callbacks)

    def _process_places(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        for path, local in self._iter_local_copies(evidence_fs, get_patterns("places"), callbacks, "places"):
            visits = bookmarks = 0
            try:
                with safe_sqlite_connect(local) as conn:
                    for visit in parse_history_visits(conn):
                        attributes = collect_attributes(self.display_name, [
                            (AttributeType.URL, visit.url),
                            (AttributeType.TITLE, visit.title),
                            (AttributeType.DATETIME_ACCESSED, visit.visit_date),
                            (AttributeType.DOMAIN, extract_domain(visit.url)),
                            (AttributeType.PROG_NAME, PROG_NAME),
                        ])
                        if self._post_artifact(path, ArtifactType.WEB_HISTORY, attributes):
                            visits += 1

                    for bookmark in parse_bookmarks(conn):
                        attributes = collect_attributes(self.display_name, [
                            (AttributeType.URL, bookmark.url),
                            (AttributeType.TITLE, bookmark.title),
                            (AttributeType.DATETIME_CREATED, bookmark.date_added),
                            (AttributeType.DOMAIN, extract_domain(bookmark.url)),
                            (AttributeType.PROG_NAME, PROG_NAME),
                        ])
                        if self._post_artifact(path, ArtifactType.WEB_BOOKMARK, attributes):
                            bookmarks += 1
            except SQLiteReadError as exc:
                self._record_read_error("places", path, exc)
                continue
            LOGGER.info("Firefox places %s: %d visits, %d bookmarks", path, visits, bookmarks)

    def _process_cookies(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        for path, local in self._iter_local_copies(evidence_fs, get_patterns("cookies"), callbacks, "cookies"):
            count = 0
            try:
                with safe_sqlite_connect(local) as conn:
                    for cookie in parse_cookies(conn):
                        host = cookie.host.lstrip(".")
                        when = cookie.last_accessed if cookie.last_accessed is not None else cookie.expiry
                        attributes = collect_attributes(self.display_name, [
                            (AttributeType.URL, f"http://{host}{cookie.path}" if host else None),
                            (AttributeType.DATETIME, when),
                            (AttributeType.NAME, cookie.name),
                            (AttributeType.VALUE, cookie.value),
                            (AttributeType.DOMAIN, host),
                            (AttributeType.PROG_NAME, PROG_NAME),
                        ])
                        if self._post_artifact(path, ArtifactType.WEB_COOKIE, attributes):
                            count += 1
            except SQLiteReadError as exc:
                self._record_read_error("cookies", path, exc)
                continue
            LOGGER.info("Firefox cookies %s: %d cookies", path, count)
