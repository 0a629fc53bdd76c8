"""
Case workspace layout and the per-job context handed to extractors.

Directory convention:
    {case_root}/Temp/{pipeline}/{extractor}/          scratch copies (hives, SQLite)
    {case_root}/ModuleOutput/{pipeline}/{extractor}/  reports and exports
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .config import IngestConfig
from .services import IngestServices

TEMP_DIR_NAME = "Temp"
MODULE_OUTPUT_DIR_NAME = "ModuleOutput"


@dataclass(frozen=True, slots=True)
class CaseLayout:
    """Directory layout of one case workspace."""

    case_root: Path

    @property
    def temp_dir(self) -> Path:
        return self.case_root / TEMP_DIR_NAME

    @property
    def module_output_dir(self) -> Path:
        return self.case_root / MODULE_OUTPUT_DIR_NAME


def get_module_temp_path(case: CaseLayout, pipeline_name: str, module_name: str) -> Path:
    """
    Return the temp directory for one extractor, creating it if missing.

    Args:
        case: Case layout the directory belongs to
        pipeline_name: Pipeline folder (e.g. "RecentActivity")
        module_name: Extractor name, used as a sub folder to prevent collisions

    Returns:
        Path to the (existing) directory
    """
    path = case.temp_dir / pipeline_name / module_name
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_module_output_path(case: CaseLayout, pipeline_name: str, module_name: str) -> Path:
    """Return the output directory for one extractor, creating it if missing."""
    path = case.module_output_dir / pipeline_name / module_name
    path.mkdir(parents=True, exist_ok=True)
    return path


@dataclass(slots=True)
class IngestJobContext:
    """Everything an extractor may reach for during one run."""

    case: CaseLayout
    services: IngestServices
    config: IngestConfig = field(default_factory=IngestConfig)
    data_source_name: str = ""

    @property
    def pipeline_name(self) -> str:
        return self.config.pipeline_name

    def temp_dir_for(self, module_name: str) -> Path:
        return get_module_temp_path(self.case, self.pipeline_name, module_name)

    def output_dir_for(self, module_name: str) -> Path:
        return get_module_output_path(self.case, self.pipeline_name, module_name)
