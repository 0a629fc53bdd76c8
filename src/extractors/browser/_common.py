"""
Shared plumbing for the browser extractors.

Every browser unit follows the same shape: find artifact files by glob,
copy each one out of the evidence into the unit's temp dir, parse the copy
and post artifacts. BrowserExtractor holds the copy/error bookkeeping so
the per-browser classes only describe what to parse.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Tuple

from core.evidence_fs import EvidenceFS
from core.logging import get_logger

from ..base import BaseExtractor
from ..callbacks import ExtractorCallbacks

LOGGER = get_logger("extractors.browser")


class BrowserExtractor(BaseExtractor):
    """Base class for browser units; adds evidence-copy iteration."""

    def _iter_local_copies(
        self,
        evidence_fs: EvidenceFS,
        patterns: Iterable[str],
        callbacks: ExtractorCallbacks,
        label: str,
    ) -> Iterator[Tuple[str, Path]]:
        """
        Yield (evidence path, local copy) for each file matching the patterns.

        Files that cannot be copied are logged, recorded as recoverable
        errors and skipped. Stops early when the run is cancelled.
        """
        for path in evidence_fs.iter_paths_any(patterns):
            if callbacks.is_cancelled():
                LOGGER.info("%s: cancelled while reading %s files", self.name, label)
                return
            try:
                local = self._copy_to_temp(evidence_fs, path)
            except OSError as exc:
                LOGGER.warning("%s: could not copy %s: %s", self.name, path, exc)
                self._add_error(f"{self.display_name}: Error reading {label} file {path}")
                continue
            callbacks.on_log(f"Found {self.display_name} {label}: {path}", "info")
            yield path, local

    def _record_read_error(self, label: str, path: str, exc: Exception) -> None:
        LOGGER.warning("%s: failed to parse %s %s: %s", self.name, label, path, exc, exc_info=True)
        self._add_error(f"{self.display_name}: Error while trying to read {label} file {path}")
