"""Core orchestration layer for the Recent Activity pipeline."""

from .config import AppConfig, IngestConfig, load_app_config  # noqa: F401
from .findings import (  # noqa: F401
    Artifact,
    Attribute,
    FindingsStore,
    FindingsStoreError,
    InMemoryFindingsStore,
    SQLiteFindingsStore,
)
from .services import IngestMessage, IngestServices, MessageIdCounter, ModuleDataEvent  # noqa: F401
# NOTE: extraction_orchestrator and lifecycle are not exported from the package
# because they import extractors, which imports core.
# Import directly: from core.extraction_orchestrator import run_extraction_pipeline
