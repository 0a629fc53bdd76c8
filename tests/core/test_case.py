"""Tests for the case layout and per-extractor directories."""

from core.case import CaseLayout, IngestJobContext, get_module_output_path, get_module_temp_path
from core.config import IngestConfig


def test_module_paths_are_created(tmp_path):
    case = CaseLayout(tmp_path)

    temp = get_module_temp_path(case, "RecentActivity", "chrome")
    output = get_module_output_path(case, "RecentActivity", "chrome")

    assert temp == tmp_path / "Temp" / "RecentActivity" / "chrome"
    assert output == tmp_path / "ModuleOutput" / "RecentActivity" / "chrome"
    assert temp.is_dir() and output.is_dir()


def test_module_paths_are_idempotent(tmp_path):
    case = CaseLayout(tmp_path)
    first = get_module_temp_path(case, "RecentActivity", "registry")
    (first / "SYSTEM").write_bytes(b"regf")

    assert get_module_temp_path(case, "RecentActivity", "registry") == first
    assert (first / "SYSTEM").exists()


def test_context_uses_configured_pipeline(tmp_path, services):
    context = IngestJobContext(
        case=CaseLayout(tmp_path),
        services=services,
        config=IngestConfig(pipeline_name="ExifParser"),
    )

    assert context.pipeline_name == "ExifParser"
    assert context.temp_dir_for("exif_parser") == tmp_path / "Temp" / "ExifParser" / "exif_parser"
    assert context.output_dir_for("exif_parser").is_dir()
