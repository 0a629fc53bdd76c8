"""
EXIF Parser - file-scoped extractor for JPEG camera metadata.

Invoked once per file of the data source. Every JPEG (by content signature,
not extension) is run through Pillow; capture time, GPS position and camera
make/model become one METADATA_EXIF artifact per file.

Listeners are told about new artifacts in batches: one ModuleDataEvent per
``notify_batch_size`` processed files while anything is pending, plus a
final one at shutdown.
"""

from __future__ import annotations

from typing import BinaryIO

from core.case import IngestJobContext
from core.enums import ArtifactType, ErrorKind, FileKnown, FileType
from core.evidence_fs import EvidenceFile
from core.findings import FindingsStoreError
from core.logging import get_logger
from core.results import UnitResult
from core.services import ModuleDataEvent

from ...base import ExtractorMetadata, FileExtractor
from ...exceptions import ExifParseError
from ...image_signatures import is_jpeg_file_header
from ._parser import build_exif_attributes, read_exif_metadata

LOGGER = get_logger("extractors.media.exif")

MODULE_NAME = "Exif Parser"


class ExifParserFileExtractor(FileExtractor):
    """Extract EXIF metadata from JPEG files into METADATA_EXIF artifacts."""

    def __init__(self) -> None:
        super().__init__()
        self.files_processed = 0
        self.files_to_fire = False
        self._batch_size = 1000

    @property
    def metadata(self) -> ExtractorMetadata:
        return ExtractorMetadata(
            name="exif_parser",
            display_name=MODULE_NAME,
            description="Ingests JPEG files and retrieves their EXIF metadata",
            category="media",
        )

    def start_up(self, context: IngestJobContext) -> None:
        self.files_processed = 0
        self.files_to_fire = False
        self._batch_size = context.config.notify_batch_size

    def process_file(self, file: EvidenceFile) -> UnitResult:
        if file.file_type == FileType.UNALLOC_BLOCKS:
            return UnitResult.success("unallocated")
        if file.known == FileKnown.KNOWN:
            return UnitResult.success("known")

        self.files_processed += 1
        if self.files_to_fire and self.files_processed % self._batch_size == 0:
            self._fire_event()

        if not is_jpeg_file_header(file):
            return UnitResult.success("not jpeg")

        try:
            stream = file.open()
        except OSError as exc:
            LOGGER.warning("Failed to open %s: %s", file.path, exc)
            return UnitResult.failure(ErrorKind.IO, f"open failed: {file.path}")

        result = self._extract(file, stream)
        if not self._close_stream(file, stream) and result.ok:
            result = UnitResult.failure(ErrorKind.IO, f"close failed: {file.path}")
        return result

    def shut_down(self, cancelled: bool) -> None:
        if self.files_to_fire:
            self._fire_event()
        LOGGER.info(
            "%s finished (%s files examined%s)",
            self.name, self.files_processed, ", cancelled" if cancelled else "",
        )

    def _extract(self, file: EvidenceFile, stream: BinaryIO) -> UnitResult:
        try:
            metadata = read_exif_metadata(stream, file.path)
        except ExifParseError as exc:
            LOGGER.warning("Failed to extract EXIF metadata from JPEG file %s: %s", file.path, exc.reason)
            return UnitResult.failure(ErrorKind.PARSE, str(exc))
        except OSError as exc:
            LOGGER.warning("Failed to read %s: %s", file.path, exc)
            return UnitResult.failure(ErrorKind.IO, f"read failed: {file.path}")

        attributes = build_exif_attributes(metadata, MODULE_NAME)
        if not attributes:
            return UnitResult.success()

        store = self.context.services.findings
        try:
            artifact = store.create_artifact(file.path, ArtifactType.METADATA_EXIF)
            store.add_attributes(artifact, attributes)
        except FindingsStoreError as exc:
            LOGGER.warning("Failed to store EXIF artifact for %s: %s", file.path, exc, exc_info=True)
            return UnitResult.failure(ErrorKind.STORE, f"store failed: {file.path}")

        self._found_data = True
        self.files_to_fire = True
        return UnitResult.success()

    def _close_stream(self, file: EvidenceFile, stream: BinaryIO) -> bool:
        try:
            stream.close()
        except OSError as exc:
            LOGGER.warning("Failed to close %s: %s", file.path, exc)
            return False
        return True

    def _fire_event(self) -> None:
        self.context.services.fire_module_data_event(
            ModuleDataEvent(MODULE_NAME, ArtifactType.METADATA_EXIF)
        )
        self.files_to_fire = False
