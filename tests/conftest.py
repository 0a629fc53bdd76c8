"""Global pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from core.case import CaseLayout, IngestJobContext
from core.config import IngestConfig
from core.evidence_fs import MountedFS
from core.findings import InMemoryFindingsStore
from core.services import IngestServices
from tests.fixtures.units import RecordingCallbacks


@pytest.fixture()
def findings_store() -> InMemoryFindingsStore:
    return InMemoryFindingsStore()


@pytest.fixture()
def services(findings_store) -> IngestServices:
    return IngestServices(findings_store)


@pytest.fixture()
def case_layout(tmp_path: Path) -> CaseLayout:
    case_root = tmp_path / "case"
    case_root.mkdir()
    return CaseLayout(case_root)


@pytest.fixture()
def ingest_config() -> IngestConfig:
    return IngestConfig()


@pytest.fixture()
def ingest_context(case_layout, services, ingest_config) -> IngestJobContext:
    """Context wired to an in-memory findings store under a temp case folder."""
    return IngestJobContext(case=case_layout, services=services, config=ingest_config)


@pytest.fixture()
def evidence_root(tmp_path: Path) -> Path:
    root = tmp_path / "evidence"
    root.mkdir()
    return root


@pytest.fixture()
def write_evidence(evidence_root):
    """Write a file under the evidence root: write_evidence("Users/a/x.txt", b"...")."""

    def _write(rel_path: str, content: bytes = b"") -> Path:
        path = evidence_root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    return _write


@pytest.fixture()
def evidence_fs(evidence_root) -> MountedFS:
    return MountedFS(evidence_root, name="image1")


@pytest.fixture()
def callbacks() -> RecordingCallbacks:
    return RecordingCallbacks()
