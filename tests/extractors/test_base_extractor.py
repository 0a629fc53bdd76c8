"""
Tests for BaseExtractor helpers and the FileExtractor walk.
"""

from collections import Counter
from unittest.mock import MagicMock

import pytest

from core.enums import ArtifactType, AttributeType, ErrorKind, FileKnown
from core.findings import Attribute, FindingsStoreError
from core.results import UnitResult
from extractors.base import BaseExtractor, ExtractorMetadata, FileExtractor
from extractors.exceptions import ConfigurationError
from tests.fixtures.units import RecordingCallbacks


class _Unit(BaseExtractor):
    @property
    def metadata(self):
        return ExtractorMetadata(name="unit", display_name="Unit", description="", category="test")

    def process(self, evidence_fs, callbacks):
        pass


class _Files(FileExtractor):
    """File extractor scripted by file name."""

    def __init__(self, results=None):
        super().__init__()
        self.results = results or {}
        self.seen = []
        self.started = 0
        self.shutdowns = []

    @property
    def metadata(self):
        return ExtractorMetadata(name="files", display_name="Files", description="", category="test")

    def start_up(self, context):
        self.started += 1

    def process_file(self, file):
        self.seen.append((file.path, file.known))
        return self.results.get(file.name, UnitResult.success())

    def shut_down(self, cancelled):
        self.shutdowns.append(cancelled)


class TestBaseExtractor:
    """Context, artifact posting and temp copies."""

    def test_context_before_init(self):
        with pytest.raises(ConfigurationError):
            _Unit().context

    def test_version_defaults_to_app_version(self):
        assert _Unit().metadata.version

    def test_post_artifact_skips_empty(self, ingest_context, findings_store):
        unit = _Unit()
        unit.init(ingest_context)

        assert unit._post_artifact("x", ArtifactType.WEB_HISTORY, []) is None
        assert len(findings_store) == 0
        assert unit.found_data() is False

    def test_post_artifact_creates_one_artifact(self, ingest_context, findings_store):
        unit = _Unit()
        unit.init(ingest_context)
        attrs = [Attribute(AttributeType.URL, "Unit", "http://a/"), Attribute(AttributeType.TITLE, "Unit", "A")]

        artifact = unit._post_artifact("Users/x/History", ArtifactType.WEB_HISTORY, attrs)

        assert artifact.attributes == attrs
        assert len(findings_store) == 1
        assert unit.found_data() is True

    def test_store_failure_is_recoverable(self, ingest_context):
        store = MagicMock()
        store.create_artifact.side_effect = FindingsStoreError("disk full")
        ingest_context.services.findings = store
        unit = _Unit()
        unit.init(ingest_context)

        result = unit._post_artifact("ref", ArtifactType.WEB_COOKIE, [Attribute(AttributeType.NAME, "Unit", "sid")])

        assert result is None
        assert unit.get_error_messages() == [f"Unit: Failed to save {ArtifactType.WEB_COOKIE} artifact for ref"]
        assert unit.found_data() is False

    def test_init_resets_state(self, ingest_context):
        unit = _Unit()
        unit.init(ingest_context)
        unit._add_error("old")
        unit._found_data = True

        unit.init(ingest_context)

        assert unit.get_error_messages() == []
        assert unit.found_data() is False

    def test_copy_to_temp(self, ingest_context, evidence_fs, write_evidence):
        write_evidence("Users/bob/AppData/History", b"SQLite format 3\x00")
        unit = _Unit()
        unit.init(ingest_context)

        local = unit._copy_to_temp(evidence_fs, "Users/bob/AppData/History")

        assert local.parent == ingest_context.temp_dir_for("unit")
        assert local.name == "Users_bob_AppData_History"
        assert local.read_bytes() == b"SQLite format 3\x00"


class TestFileExtractor:
    """Per-file walk, failure counting and teardown."""

    def test_walks_every_file(self, ingest_context, evidence_fs, write_evidence, callbacks):
        write_evidence("a.jpg", b"1")
        write_evidence("dir/b.jpg", b"2")
        unit = _Files()
        unit.init(ingest_context)

        unit.process(evidence_fs, callbacks)

        assert [path for path, _ in unit.seen] == ["a.jpg", "dir/b.jpg"]
        assert unit.started == 1
        assert unit.get_error_messages() == []

    def test_failures_summarised(self, ingest_context, evidence_fs, write_evidence, callbacks):
        for name in ("a.jpg", "b.jpg", "c.jpg", "d.jpg"):
            write_evidence(name, b"x")
        unit = _Files({
            "a.jpg": UnitResult.failure(ErrorKind.PARSE, "bad"),
            "b.jpg": UnitResult.failure(ErrorKind.PARSE, "bad"),
            "c.jpg": UnitResult.failure(ErrorKind.IO, "gone"),
        })
        unit.init(ingest_context)

        unit.process(evidence_fs, callbacks)

        assert unit.failures == Counter({ErrorKind.PARSE: 2, ErrorKind.IO: 1})
        [message] = unit.get_error_messages()
        assert message.startswith("Files: failed to process 3 file(s)")
        assert message.endswith("-- see log")

    def test_cancellation_polled_per_file(self, ingest_context, evidence_fs, write_evidence):
        write_evidence("a.jpg", b"1")
        write_evidence("b.jpg", b"2")
        callbacks = RecordingCallbacks()
        unit = _Files()
        unit.init(ingest_context)
        original = unit.process_file

        def process_then_cancel(file):
            callbacks.cancelled = True
            return original(file)

        unit.process_file = process_then_cancel
        unit.process(evidence_fs, callbacks)

        assert [path for path, _ in unit.seen] == ["a.jpg"]

    def test_known_hashes_mark_files(self, ingest_context, evidence_fs, write_evidence, callbacks):
        write_evidence("empty.jpg", b"")
        ingest_context.config.known_hashes = {"d41d8cd98f00b204e9800998ecf8427e"}
        unit = _Files()
        unit.init(ingest_context)

        unit.process(evidence_fs, callbacks)

        assert unit.seen == [("empty.jpg", FileKnown.KNOWN)]

    def test_complete_and_stop_call_shut_down(self, ingest_context):
        unit = _Files()
        unit.init(ingest_context)
        unit.complete()
        unit.stop()
        assert unit.shutdowns == [False, True]
