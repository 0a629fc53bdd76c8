from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import yaml

from .logging import LOG_FILE_NAME

DEFAULT_PIPELINE_NAME = "RecentActivity"
DEFAULT_NOTIFY_BATCH_SIZE = 1000


@dataclass(slots=True)
class LoggingConfig:
    """Logging configuration from config.yml."""

    level: str = "INFO"
    file_name: str = LOG_FILE_NAME
    max_mb: int = 50
    backup_count: int = 10
    console: bool = True


@dataclass(slots=True)
class IngestConfig:
    """Ingest pipeline configuration from config.yml."""

    pipeline_name: str = DEFAULT_PIPELINE_NAME
    notify_batch_size: int = DEFAULT_NOTIFY_BATCH_SIZE  # Files between EXIF data events
    disabled_extractors: List[str] = field(default_factory=list)
    known_hashes: Set[str] = field(default_factory=set)  # Lowercase MD5 hex digests
    search_engines_file: Optional[Path] = None


@dataclass(slots=True)
class AppConfig:
    """Top-level configuration resolved from disk."""

    base_dir: Path
    logs_dir: Path
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    ingest: IngestConfig = field(default_factory=IngestConfig)

    def to_json(self) -> str:
        """Serialize the configuration into a JSON string for run manifests."""
        data = {
            "logs_dir": str(self.logs_dir),
            "logging": {"level": self.logging.level, "file_name": self.logging.file_name},
            "ingest": {
                "pipeline_name": self.ingest.pipeline_name,
                "notify_batch_size": self.ingest.notify_batch_size,
                "disabled_extractors": list(self.ingest.disabled_extractors),
                "known_hashes": len(self.ingest.known_hashes),
                "search_engines_file": (
                    str(self.ingest.search_engines_file) if self.ingest.search_engines_file else None
                ),
            },
        }
        return json.dumps(data, indent=2, sort_keys=True)


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        content = yaml.safe_load(handle) or {}
        if not isinstance(content, dict):
            raise ValueError(f"Config file {path} must contain a mapping at the top level.")
        return content


def _load_known_hashes(base_dir: Path, ingest_cfg: Dict[str, Any]) -> Set[str]:
    hashes = {str(h).strip().lower() for h in ingest_cfg.get("known_hashes", []) if h}
    hash_file = ingest_cfg.get("known_hashes_file")
    if hash_file:
        path = Path(hash_file)
        if not path.is_absolute():
            path = base_dir / path
        with path.open("r", encoding="utf-8") as handle:
            for line in handle:
                line = line.strip()
                if line and not line.startswith("#"):
                    hashes.add(line.split()[0].lower())
    return hashes


def load_app_config(base_dir: Path) -> AppConfig:
    """Load application configuration from disk, providing sensible defaults."""

    config_dir = base_dir / "config"
    config_overrides = _load_yaml(config_dir / "config.yml")

    logs_dir = Path(config_overrides.get("logs_dir", base_dir / "logs"))
    if not logs_dir.is_absolute():
        logs_dir = base_dir / logs_dir

    logging_cfg = config_overrides.get("logging", {}) or {}
    logging_config = LoggingConfig(
        level=str(logging_cfg.get("level", "INFO")).upper(),
        file_name=str(logging_cfg.get("file_name") or LOG_FILE_NAME),
        max_mb=int(logging_cfg.get("max_mb", 50)),
        backup_count=int(logging_cfg.get("backup_count", 10)),
        console=bool(logging_cfg.get("console", True)),
    )

    ingest_cfg = config_overrides.get("ingest", {}) or {}
    batch_size = int(ingest_cfg.get("notify_batch_size", DEFAULT_NOTIFY_BATCH_SIZE))
    if batch_size < 1:
        raise ValueError(f"ingest.notify_batch_size must be positive, got {batch_size}")

    engines_file = ingest_cfg.get("search_engines_file")
    engines_path: Optional[Path] = None
    if engines_file:
        engines_path = Path(engines_file)
        if not engines_path.is_absolute():
            engines_path = base_dir / engines_path

    ingest_config = IngestConfig(
        pipeline_name=str(ingest_cfg.get("pipeline_name", DEFAULT_PIPELINE_NAME)),
        notify_batch_size=batch_size,
        disabled_extractors=[str(name) for name in ingest_cfg.get("disabled_extractors", [])],
        known_hashes=_load_known_hashes(base_dir, ingest_cfg),
        search_engines_file=engines_path,
    )

    return AppConfig(
        base_dir=base_dir,
        logs_dir=logs_dir,
        logging=logging_config,
        ingest=ingest_config,
    )
