"""
Command-line entry point: run the Recent Activity pipelines over a mounted
evidence directory and print the posted messages.

    python src/run.py /mnt/evidence --case ./case01 --pipeline all
"""

import argparse
import sys
from pathlib import Path

# Handle --version early, before heavy imports.
if "--version" in sys.argv or "-V" in sys.argv:
    src_dir = Path(__file__).resolve().parent
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))
    from core.app_version import get_app_version
    print(f"recent-activity {get_app_version()}")
    sys.exit(0)

# Add the src directory to sys.path so the script runs from a checkout
src_dir = Path(__file__).resolve().parent
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from core.case import CaseLayout, IngestJobContext
from core.config import load_app_config
from core.evidence_fs import MountedFS
from core.extraction_orchestrator import BridgeCallbacks, run_extraction_pipeline
from core.findings import SQLiteFindingsStore
from core.logging import configure_logging, get_logger, set_log_data_source
from core.services import IngestMessage, IngestServices, MessageIdCounter
from extractors.extractor_registry import build_file_registry, build_recent_activity_registry

LOGGER = get_logger("run")

PIPELINES = ("recent_activity", "exif", "all")
EXIF_MODULE_NAME = "Exif Parser"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract recent user activity and EXIF metadata from a mounted evidence directory.",
    )
    parser.add_argument("evidence", type=Path, help="Mounted evidence root (read-only)")
    parser.add_argument("--case", type=Path, required=True, help="Case folder for findings, temp and logs")
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Base directory holding config/config.yml (default: current directory)",
    )
    parser.add_argument("--name", default=None, help="Data source name (default: evidence folder name)")
    parser.add_argument("--pipeline", choices=PIPELINES, default="all", help="Which pipeline(s) to run")
    parser.add_argument("-V", "--version", action="store_true", help="Print version and exit")
    return parser


def _print_message(message: IngestMessage) -> None:
    print(f"[{message.message_id}] {message.message_type.upper()} {message.module_name}: {message.subject}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = load_app_config((args.config_dir or Path.cwd()).resolve())
    case_root = args.case.resolve()
    configure_logging(
        case_root / "logs",
        level=config.logging.level,
        file_name=config.logging.file_name,
        max_mb=config.logging.max_mb,
        backup_count=config.logging.backup_count,
        console=config.logging.console,
    )
    LOGGER.info("Configuration: %s", config.to_json())

    try:
        evidence_fs = MountedFS(args.evidence, name=args.name)
    except FileNotFoundError as exc:
        LOGGER.error("%s", exc)
        return 2
    set_log_data_source(evidence_fs.name)

    store = SQLiteFindingsStore(case_root / "findings.sqlite")
    services = IngestServices(store)
    services.add_message_listener(_print_message)
    context = IngestJobContext(case=CaseLayout(case_root), services=services, config=config.ingest)
    callbacks = BridgeCallbacks(log_cb=LOGGER.info)
    message_ids = MessageIdCounter()

    had_errors = False
    try:
        if args.pipeline in ("recent_activity", "all"):
            outcome = run_extraction_pipeline(
                evidence_fs,
                build_recent_activity_registry(config.ingest),
                context,
                callbacks,
                message_ids=message_ids,
            )
            had_errors = had_errors or bool(outcome.errors)
        if args.pipeline in ("exif", "all") and not callbacks.is_cancelled():
            outcome = run_extraction_pipeline(
                evidence_fs,
                build_file_registry(config.ingest),
                context,
                callbacks,
                module_name=EXIF_MODULE_NAME,
                message_ids=message_ids,
            )
            had_errors = had_errors or bool(outcome.errors)
    except KeyboardInterrupt:
        LOGGER.warning("Interrupted")
        return 130
    finally:
        store.close()

    return 1 if had_errors else 0


if __name__ == "__main__":
    sys.exit(main())
