"""
Base extractor interface for the extraction pipeline.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from core.app_version import get_app_version
from core.case import IngestJobContext
from core.enums import ArtifactType
from core.evidence_fs import EvidenceFile, EvidenceFS, make_evidence_file
from core.findings import Artifact, Attribute, FindingsStoreError
from core.logging import get_logger
from core.results import UnitResult

from .callbacks import ExtractorCallbacks
from .exceptions import ConfigurationError

LOGGER = get_logger("extractors.base")

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass
class ExtractorMetadata:
    """
    Metadata about an extractor module.

    Attributes:
        name: Stable identifier (e.g., "chrome"), also the temp/output sub folder
        display_name: Name used in user-facing messages (e.g., "Chrome")
        description: Short description
        category: Category for grouping ("browser" | "system" | "media" | "analysis")
        reports_data_presence: Whether the unit appears in the "data found" digest
        version: Module version string
    """
    name: str
    display_name: str
    description: str
    category: str
    reports_data_presence: bool = False
    version: str = field(default_factory=get_app_version)


class BaseExtractor(ABC):
    """
    Base class for all extractor modules.

    Lifecycle (driven by core.lifecycle.LifecycleController):
        1. Constructed when the registry is built
        2. init(context) once, before any process() in the run
        3. process(evidence_fs, callbacks) once
        4. exactly one of complete() (normal end) or stop() (cancelled)

    Recoverable problems (one bad file, one corrupt database) are recorded
    with _add_error() and surface in the end-of-run digest. Anything a
    subclass raises out of process() is treated as unit-fatal by the
    orchestrator; the run still continues with the next extractor.

    Example:
        class MyExtractor(BaseExtractor):
            @property
            def metadata(self):
                return ExtractorMetadata(
                    name="my_extractor",
                    display_name="My Extractor",
                    description="Does something useful",
                    category="system",
                )

            def process(self, evidence_fs, callbacks):
                for path in evidence_fs.iter_paths("Users/*/thing.db"):
                    attributes = [...]
                    self._post_artifact(path, ArtifactType.OS_INFO, attributes)
    """

    def __init__(self) -> None:
        self._errors: List[str] = []
        self._found_data = False
        self._context: Optional[IngestJobContext] = None

    @property
    @abstractmethod
    def metadata(self) -> ExtractorMetadata:
        """Return module metadata."""
        pass

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def display_name(self) -> str:
        return self.metadata.display_name

    @property
    def context(self) -> IngestJobContext:
        if self._context is None:
            raise ConfigurationError(f"{self.name} used before init()")
        return self._context

    def init(self, context: IngestJobContext) -> None:
        """One-time setup before the run. Subclasses extending this must call super()."""
        self._context = context
        self._errors = []
        self._found_data = False

    @abstractmethod
    def process(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        """
        Do the extractor's work against the data source.

        Args:
            evidence_fs: Data source to analyze
            callbacks: Progress/log/cancellation sink
        """
        pass

    def get_error_messages(self) -> List[str]:
        """Return recoverable errors recorded so far (a copy)."""
        return list(self._errors)

    def found_data(self) -> bool:
        """True once at least one artifact has been posted."""
        return self._found_data

    def complete(self) -> None:
        """Teardown after a normal end of run."""
        LOGGER.debug("%s complete", self.name)

    def stop(self) -> None:
        """Teardown after a cancelled run."""
        LOGGER.debug("%s stopped", self.name)

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def _add_error(self, message: str) -> None:
        self._errors.append(message)

    def _post_artifact(
        self,
        content_ref: str,
        artifact_type: ArtifactType,
        attributes: Sequence[Attribute],
    ) -> Optional[Artifact]:
        """
        Create one artifact carrying all attributes, in one batch.

        Returns None (and creates nothing) when attributes is empty. Store
        failures are logged and recorded as recoverable errors.
        """
        if not attributes:
            return None
        store = self.context.services.findings
        try:
            artifact = store.create_artifact(content_ref, artifact_type)
            store.add_attributes(artifact, attributes)
        except FindingsStoreError as exc:
            LOGGER.warning("%s: failed to create %s artifact for %s: %s",
                           self.name, artifact_type, content_ref, exc, exc_info=True)
            self._add_error(f"{self.display_name}: Failed to save {artifact_type} artifact for {content_ref}")
            return None
        self._found_data = True
        return artifact

    def _temp_dir(self) -> Path:
        return self.context.temp_dir_for(self.name)

    def _copy_to_temp(self, evidence_fs: EvidenceFS, path: str) -> Path:
        """
        Copy an evidence file into this extractor's temp dir.

        SQLite and regipy need a real local file; evidence is never opened in place.
        """
        dest = self._temp_dir() / _UNSAFE_NAME_CHARS.sub("_", path.strip("/"))
        with dest.open("wb") as out:
            for chunk in evidence_fs.open_for_stream(path):
                out.write(chunk)
        return dest


class FileExtractor(BaseExtractor):
    """
    Base class for extractors invoked once per file rather than once per run.

    process() walks every file of the data source and hands each one to
    process_file(), polling cancellation between files. Per-file failures
    are counted and reported as one summary error at the end of the walk.
    """

    def __init__(self) -> None:
        super().__init__()
        self.failures: Counter = Counter()

    def init(self, context: IngestJobContext) -> None:
        super().init(context)
        self.failures = Counter()
        self.start_up(context)

    def start_up(self, context: IngestJobContext) -> None:
        """Per-run state reset hook."""

    @abstractmethod
    def process_file(self, file: EvidenceFile) -> UnitResult:
        """Analyze one file. Must not raise for malformed input."""
        pass

    def shut_down(self, cancelled: bool) -> None:
        """Final flush, called from complete()/stop()."""

    def process(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        known_hashes = self.context.config.known_hashes
        for path in evidence_fs.iter_all_files():
            if callbacks.is_cancelled():
                LOGGER.info("%s cancelled before %s", self.name, path)
                break
            result = self.process_file(make_evidence_file(evidence_fs, path, known_hashes))
            if not result.ok:
                self.failures[result.error_kind] += 1

        failed = sum(self.failures.values())
        if failed:
            kinds = ", ".join(f"{kind}: {count}" for kind, count in sorted(self.failures.items()))
            self._add_error(f"{self.display_name}: failed to process {failed} file(s) ({kinds}) -- see log")

    def complete(self) -> None:
        self.shut_down(cancelled=False)

    def stop(self) -> None:
        self.shut_down(cancelled=True)
