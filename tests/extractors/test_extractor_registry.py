"""Tests for the explicit extractor registries."""

import pytest

from core.config import IngestConfig
from extractors.extractor_registry import (
    ExtractorRegistry,
    build_file_registry,
    build_recent_activity_registry,
)
from tests.fixtures.units import RecordingExtractor


def test_recent_activity_order():
    registry = build_recent_activity_registry()

    assert registry.names == [
        "chrome",
        "firefox",
        "internet_explorer",
        "recent_documents",
        "search_engine_queries",
        "registry",
    ]
    assert [e.display_name for e in registry.data_presence_units] == [
        "Chrome",
        "Firefox",
        "Internet Explorer",
    ]


def test_each_build_returns_fresh_instances():
    first = build_recent_activity_registry()
    second = build_recent_activity_registry()
    assert first.get("chrome") is not second.get("chrome")


def test_disabled_extractors_removed():
    registry = build_recent_activity_registry(IngestConfig(disabled_extractors=["firefox", "registry", "nope"]))

    assert registry.names == ["chrome", "internet_explorer", "recent_documents", "search_engine_queries"]
    assert [e.name for e in registry.data_presence_units] == ["chrome", "internet_explorer"]


def test_file_registry():
    registry = build_file_registry()

    assert registry.names == ["exif_parser"]
    assert registry.get("exif_parser").display_name == "Exif Parser"
    assert registry.data_presence_units == ()


def test_duplicate_names_rejected():
    with pytest.raises(ValueError, match="Duplicate"):
        ExtractorRegistry([RecordingExtractor("a"), RecordingExtractor("a")])


def test_presence_must_be_members():
    with pytest.raises(ValueError):
        ExtractorRegistry([RecordingExtractor("a")], data_presence=[RecordingExtractor("b")])


def test_presence_keeps_registry_order():
    a, b, c = RecordingExtractor("a"), RecordingExtractor("b"), RecordingExtractor("c")
    registry = ExtractorRegistry([a, b, c], data_presence=[c, a])

    assert registry.data_presence_units == (a, c)
    assert "b" in registry
    assert len(registry) == 3
    assert registry.get("zzz") is None
