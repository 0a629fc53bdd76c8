"""
Chrome extractor - history, downloads, bookmarks and cookies.

Reads every Chrome profile found on the data source:
- History (SQLite)  -> WEB_HISTORY per visit, WEB_DOWNLOAD per download
- Bookmarks (JSON)  -> WEB_BOOKMARK per URL bookmark
- Cookies (SQLite)  -> WEB_COOKIE per cookie
"""

from __future__ import annotations

import json

from core.enums import ArtifactType, AttributeType
from core.evidence_fs import EvidenceFS
from core.logging import get_logger

from ..._shared.attributes import collect_attributes
from ..._shared.sqlite_helpers import SQLiteReadError, safe_sqlite_connect
from ..._shared.url_utils import extract_domain
from ...base import ExtractorMetadata
from ...callbacks import ExtractorCallbacks
from .._common import BrowserExtractor
from ._parsers import (
    cookie_url,
    parse_bookmarks_json,
    parse_cookies,
    parse_downloads,
    parse_history_visits,
)
from ._patterns import get_patterns

LOGGER = get_logger("extractors.browser.chromium")

PROG_NAME = "Chrome"


class ChromeExtractor(BrowserExtractor):
    """Google Chrome activity from all user profiles."""

    @property
    def metadata(self) -> ExtractorMetadata:
        return ExtractorMetadata(
            name="chrome",
            display_name="Chrome",
            description="Chrome history, downloads, bookmarks and cookies",
            category="browser",
            reports_data_presence=True,
        )

    def process(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        LOGGER.info("Starting Chrome extraction on %s", evidence_fs.name)
        self._process_history(evidence_fs, callbacks)
        self._process_bookmarks(evidence_fs, callbacks)
        self._process_cookies(evidence_fs, callbacks)

    def _process_history(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        for path, local in self._iter_local_copies(evidence_fs, get_patterns("history"), callbacks, "history"):
            visits = downloads = 0
            try:
                with safe_sqlite_connect(local) as conn:
                    for visit in parse_history_visits(conn):
                        attributes = collect_attributes(self.display_name, [
                            (AttributeType.URL, visit.url),
                            (AttributeType.TITLE, visit.title),
                            (AttributeType.DATETIME_ACCESSED, visit.visit_time),
                            (AttributeType.DOMAIN, extract_domain(visit.url)),
                            (AttributeType.PROG_NAME, PROG_NAME),
                        ])
                        if self._post_artifact(path, ArtifactType.WEB_HISTORY, attributes):
                            visits += 1

                    for download in parse_downloads(conn):
                        attributes = collect_attributes(self.display_name, [
                            (AttributeType.PATH, download.target_path),
                            (AttributeType.URL, download.url),
                            (AttributeType.DATETIME_ACCESSED, download.start_time),
                            (AttributeType.DOMAIN, extract_domain(download.url)),
                            (AttributeType.PROG_NAME, PROG_NAME),
                        ])
                        if self._post_artifact(path, ArtifactType.WEB_DOWNLOAD, attributes):
                            downloads += 1
            except SQLiteReadError as exc:
                self._record_read_error("history", path, exc)
                continue
            LOGGER.info("Chrome history %s: %d visits, %d downloads", path, visits, downloads)

    def _process_bookmarks(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        for path, local in self._iter_local_copies(evidence_fs, get_patterns("bookmarks"), callbacks, "bookmarks"):
            try:
                with local.open("r", encoding="utf-8") as handle:
                    data = json.load(handle)
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
                self._record_read_error("bookmarks", path, exc)
                continue
            if not isinstance(data, dict):
                self._record_read_error("bookmarks", path, ValueError("top level is not an object"))
                continue

            count = 0
            for bookmark in parse_bookmarks_json(data):
                attributes = collect_attributes(self.display_name, [
                    (AttributeType.URL, bookmark.url),
                    (AttributeType.TITLE, bookmark.name),
                    (AttributeType.DATETIME_CREATED, bookmark.date_added),
                    (AttributeType.DOMAIN, extract_domain(bookmark.url)),
                    (AttributeType.PROG_NAME, PROG_NAME),
                ])
                if self._post_artifact(path, ArtifactType.WEB_BOOKMARK, attributes):
                    count += 1
            LOGGER.info("Chrome bookmarks %s: %d bookmarks", path, count)

    def _process_cookies(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        for path, local in self._iter_local_copies(evidence_fs, get_patterns("cookies"), callbacks, "cookies"):
            count = 0
            try:
                with safe_sqlite_connect(local) as conn:
                    for cookie in parse_cookies(conn):
                        attributes = collect_attributes(self.display_name, [
                            (AttributeType.URL, cookie_url(cookie.host_key, cookie.path)),
                            (AttributeType.DATETIME, cookie.last_access),
                            (AttributeType.NAME, cookie.name),
                            (AttributeType.VALUE, cookie.value),
                            (AttributeType.DOMAIN, cookie.host_key.lstrip(".")),
                            (AttributeType.PROG_NAME, PROG_NAME),
                        ])
                        if self._post_artifact(path, ArtifactType.WEB_COOKIE, attributes):
                            count += 1
            except SQLiteReadError as exc:
                self._record_read_error("cookies", path, exc)
                continue
            LOGGER.info("Chrome cookies %s: %d cookies", path, count)
