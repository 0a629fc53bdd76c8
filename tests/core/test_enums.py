"""Tests for src/core/enums.py - Core enumerations."""

from core.enums import ArtifactType, AttributeType, ErrorKind, FileKnown, FileType, LifecycleState, MessageType
from core.results import UnitResult

import pytest


def test_enums_are_strings():
    assert MessageType.ERROR == "error"
    assert f"{ArtifactType.METADATA_EXIF}" == ArtifactType.METADATA_EXIF.value
    assert AttributeType("url") is AttributeType.URL


def test_lifecycle_states():
    assert [s.name for s in LifecycleState] == ["CREATED", "INITIALIZED", "RUNNING", "COMPLETED", "STOPPED"]


def test_file_enums_defaults_exist():
    assert FileType.UNALLOC_BLOCKS != FileType.FS
    assert FileKnown.KNOWN != FileKnown.UNKNOWN


class TestUnitResult:
    """UnitResult constructors."""

    def test_success(self):
        result = UnitResult.success("skipped")
        assert result.ok is True
        assert result.error_kind == ErrorKind.NONE
        assert result.message == "skipped"

    def test_failure(self):
        result = UnitResult.failure(ErrorKind.PARSE, "bad jpeg")
        assert result.ok is False
        assert result.error_kind == ErrorKind.PARSE

    def test_failure_needs_kind(self):
        with pytest.raises(ValueError):
            UnitResult.failure(ErrorKind.NONE, "??")
