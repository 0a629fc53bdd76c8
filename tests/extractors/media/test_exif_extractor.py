"""
Tests for ExifParserFileExtractor.

The EXIF reader is patched out for skips, stream handling, store writes
and the batched data events. The last tests walk real files on disk.
"""

import io
from unittest.mock import MagicMock

import pytest
from PIL import ExifTags, Image

from core.enums import ArtifactType, AttributeType, ErrorKind, FileKnown, FileType
from core.evidence_fs import EvidenceFile, make_evidence_file
from core.findings import FindingsStoreError
from extractors.exceptions import ExifParseError
from extractors.media.exif import ExifParserFileExtractor
from extractors.media.exif import extractor as exif_module
from extractors.media.exif._parser import ExifMetadata

JPEG_HEADER = b"\xff\xd8\xff\xe1\x00\x10Exif\x00\x00"
FULL_METADATA = ExifMetadata(latitude=52.5, longitude=13.4, make="Canon")


@pytest.fixture()
def extractor(ingest_context):
    unit = ExifParserFileExtractor()
    unit.init(ingest_context)
    return unit


@pytest.fixture()
def parsed(monkeypatch):
    """Patch the EXIF reader; set .result or .error on the returned holder."""
    holder = MagicMock()
    holder.result = FULL_METADATA
    holder.error = None

    def _read(stream, path=""):
        holder(path)
        if holder.error is not None:
            raise holder.error
        return holder.result

    monkeypatch.setattr(exif_module, "read_exif_metadata", _read)
    return holder


def _mock_file(path="DCIM/img.jpg", header=JPEG_HEADER, **kwargs):
    fs = MagicMock()
    fs.read_header.return_value = header
    stream = MagicMock()
    fs.open_for_read.return_value = stream
    return EvidenceFile(fs=fs, path=path, **kwargs), stream


# =============================================================================
# Artifacts
# =============================================================================

class TestArtifacts:
    def test_one_artifact_per_file(self, extractor, parsed, findings_store):
        file, _ = _mock_file()

        result = extractor.process_file(file)

        assert result.ok
        artifacts = findings_store.get_artifacts(ArtifactType.METADATA_EXIF)
        assert len(artifacts) == 1
        artifact = artifacts[0]
        assert artifact.content_ref == "DCIM/img.jpg"
        assert [a.attribute_type for a in artifact.attributes] == [
            AttributeType.GEO_LATITUDE,
            AttributeType.GEO_LONGITUDE,
            AttributeType.DEVICE_MAKE,
        ]
        assert {a.source for a in artifact.attributes} == {"Exif Parser"}
        assert extractor.found_data()

    def test_no_fields_no_artifact(self, extractor, parsed, findings_store):
        parsed.result = ExifMetadata()
        file, _ = _mock_file()

        assert extractor.process_file(file).ok
        assert findings_store.get_artifacts(ArtifactType.METADATA_EXIF) == []
        assert not extractor.files_to_fire

    def test_store_failure(self, extractor, parsed, findings_store, monkeypatch):
        monkeypatch.setattr(
            findings_store, "create_artifact", MagicMock(side_effect=FindingsStoreError("disk full"))
        )
        file, stream = _mock_file()

        result = extractor.process_file(file)

        assert result.error_kind == ErrorKind.STORE
        stream.close.assert_called_once()


# =============================================================================
# Skips
# =============================================================================

class TestSkips:
    @pytest.mark.parametrize("kwargs", [
        {"file_type": FileType.UNALLOC_BLOCKS},
        {"known": FileKnown.KNOWN},
    ])
    def test_not_counted(self, extractor, parsed, kwargs):
        file, _ = _mock_file(**kwargs)

        assert extractor.process_file(file).ok
        assert extractor.files_processed == 0
        file.fs.read_header.assert_not_called()

    def test_signature_mismatch(self, extractor, parsed):
        file, _ = _mock_file(path="renamed.jpg", header=b"\x89PNG\r\n\x1a\n")

        assert extractor.process_file(file).ok
        assert extractor.files_processed == 1
        file.fs.open_for_read.assert_not_called()
        parsed.assert_not_called()

    def test_renamed_jpeg_still_parsed(self, extractor, parsed, findings_store):
        file, _ = _mock_file(path="notes.txt")

        extractor.process_file(file)

        assert len(findings_store.get_artifacts(ArtifactType.METADATA_EXIF)) == 1


# =============================================================================
# Stream handling
# =============================================================================

class TestStreams:
    def test_parse_error_closes_once(self, extractor, parsed):
        parsed.error = ExifParseError("DCIM/img.jpg", "bad marker")
        file, stream = _mock_file()

        result = extractor.process_file(file)

        assert result.error_kind == ErrorKind.PARSE
        stream.close.assert_called_once()

    def test_read_error_closes_once(self, extractor, parsed):
        parsed.error = OSError("short read")
        file, stream = _mock_file()

        assert extractor.process_file(file).error_kind == ErrorKind.IO
        stream.close.assert_called_once()

    def test_open_failure(self, extractor, parsed):
        file, _ = _mock_file()
        file.fs.open_for_read.side_effect = OSError("gone")

        assert extractor.process_file(file).error_kind == ErrorKind.IO
        parsed.assert_not_called()

    def test_close_failure_after_success(self, extractor, parsed, findings_store):
        file, stream = _mock_file()
        stream.close.side_effect = OSError("close failed")

        result = extractor.process_file(file)

        assert result.error_kind == ErrorKind.IO
        # The artifact was already written
        assert len(findings_store.get_artifacts(ArtifactType.METADATA_EXIF)) == 1


# =============================================================================
# Data events
# =============================================================================

class TestDataEvents:
    def test_batched_events(self, extractor, parsed, services):
        counts = {}
        for index in range(1, 2501):
            file, _ = _mock_file(path=f"DCIM/{index}.jpg")
            extractor.process_file(file)
            counts[index] = len(services.events)
        extractor.complete()

        # A pending batch fires when the 1000th, 2000th, ... file comes in
        assert [counts[n] for n in (999, 1000, 1999, 2000, 2500)] == [0, 1, 1, 2, 2]
        assert len(services.events) == 3
        assert {(e.module_name, e.artifact_type) for e in services.events} == {
            ("Exif Parser", ArtifactType.METADATA_EXIF)
        }

    def test_no_event_without_data(self, extractor, parsed, services):
        parsed.result = ExifMetadata()
        for index in range(1500):
            file, _ = _mock_file(path=f"DCIM/{index}.jpg")
            extractor.process_file(file)
        extractor.stop()

        assert services.events == []

    def test_batch_size_from_config(self, ingest_context, parsed, services):
        ingest_context.config.notify_batch_size = 2
        unit = ExifParserFileExtractor()
        unit.init(ingest_context)

        for index in range(5):
            file, _ = _mock_file(path=f"{index}.jpg")
            unit.process_file(file)
        unit.complete()

        # Fired at files 2 and 4, then once more at shutdown
        assert len(services.events) == 3


# =============================================================================
# Full walk over a data source
# =============================================================================

def test_walk_reports_failures(ingest_context, monkeypatch, write_evidence, evidence_fs, callbacks, findings_store):
    write_evidence("DCIM/good.jpg", JPEG_HEADER + b"\x00" * 20)
    write_evidence("DCIM/bad.jpg", JPEG_HEADER + b"\x01" * 20)
    write_evidence("readme.txt", b"hello")

    def _read(stream, path=""):
        if path.endswith("bad.jpg"):
            raise ExifParseError(path, "truncated")
        return FULL_METADATA

    unit = ExifParserFileExtractor()
    unit.init(ingest_context)
    monkeypatch.setattr(exif_module, "read_exif_metadata", _read)
    unit.process(evidence_fs, callbacks)
    unit.complete()

    artifacts = findings_store.get_artifacts(ArtifactType.METADATA_EXIF)
    assert [a.content_ref for a in artifacts] == ["DCIM/good.jpg"]
    assert unit.files_processed == 3
    assert unit.get_error_messages() == [
        "Exif Parser: failed to process 1 file(s) (parse: 1) -- see log"
    ]


def test_real_jpeg_capture_time_and_position(ingest_context, write_evidence, evidence_fs, findings_store):
    exif = Image.Exif()
    exif[ExifTags.IFD.Exif] = {ExifTags.Base.DateTimeOriginal: "2020:01:02 03:04:05"}
    exif[ExifTags.IFD.GPSInfo] = {
        ExifTags.GPS.GPSLatitudeRef: "S",
        ExifTags.GPS.GPSLatitude: (52.0, 30.0, 0.0),
        ExifTags.GPS.GPSLongitudeRef: "E",
        ExifTags.GPS.GPSLongitude: (13.0, 24.0, 0.0),
    }
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(10, 120, 10)).save(buffer, format="JPEG", exif=exif)
    write_evidence("DCIM/berlin.jpg", buffer.getvalue())

    unit = ExifParserFileExtractor()
    unit.init(ingest_context)
    result = unit.process_file(make_evidence_file(evidence_fs, "DCIM/berlin.jpg"))

    assert result.ok
    [artifact] = findings_store.get_artifacts(ArtifactType.METADATA_EXIF)
    assert [a.attribute_type for a in artifact.attributes] == [
        AttributeType.DATETIME_CREATED,
        AttributeType.GEO_LATITUDE,
        AttributeType.GEO_LONGITUDE,
    ]
    created, latitude, longitude = (a.value for a in artifact.attributes)
    assert created == 1577934245
    assert latitude == pytest.approx(-52.5)
    assert longitude == pytest.approx(13.4)
