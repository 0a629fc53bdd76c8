from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from .case import IngestJobContext
from .enums import MessageType
from .evidence_fs import EvidenceFS
from .lifecycle import ErrorEntry, LifecycleController
from .logging import get_logger
from .run_report import RunReporter
from .services import IngestMessage, IngestServices, MessageIdCounter

from extractors.base import BaseExtractor
from extractors.callbacks import ExtractorCallbacks
from extractors.extractor_registry import ExtractorRegistry

LOGGER = get_logger("core.extraction_orchestrator")

__all__ = [
    "BridgeCallbacks",
    "ErrorEntry",
    "ExtractionOrchestrator",
    "RunOutcome",
    "run_extraction_pipeline",
]


class BridgeCallbacks(ExtractorCallbacks):
    """Adapts plain callables (UI, CLI) to the ExtractorCallbacks protocol."""

    def __init__(
        self,
        log_cb: Optional[Callable[[str], None]] = None,
        progress_cb: Optional[Callable[[int, int], None]] = None,
        cancellation_check: Optional[Callable[[], bool]] = None,
    ):
        self.log_cb = log_cb
        self.progress_cb = progress_cb
        self.cancellation_check = cancellation_check
        self._cancelled = False
        self.total = 0
        self.completed = 0

    def switch_to_determinate(self, total: int) -> None:
        self.total = total
        self.completed = 0

    def progress(self, completed: int) -> None:
        self.completed = completed
        if self.progress_cb:
            self.progress_cb(completed, self.total)

    def on_log(self, message: str, level: str = "info") -> None:
        if self.log_cb:
            self.log_cb(message if level == "info" else f"{level.upper()}: {message}")

    def is_cancelled(self) -> bool:
        if self._cancelled:
            return True
        if self.cancellation_check:
            return self.cancellation_check()
        return False

    def cancel(self) -> None:
        self._cancelled = True


@dataclass
class RunOutcome:
    """Aggregated result of one pipeline execution."""

    data_source_name: str
    total_units: int
    units_attempted: List[str] = field(default_factory=list)
    errors: List[ErrorEntry] = field(default_factory=list)
    data_presence: List[Tuple[str, bool]] = field(default_factory=list)
    cancelled: bool = False
    teardown_errors: List[ErrorEntry] = field(default_factory=list)

    @property
    def error_messages(self) -> List[str]:
        return [entry.message for entry in self.errors]


class ExtractionOrchestrator:
    """
    Runs extractors one at a time, in registry order.

    Order is a correctness contract: later extractors read artifacts created
    by earlier ones. Cancellation is polled only between extractors, so a
    running extractor is never interrupted mid-process.
    """

    def __init__(
        self,
        registry: ExtractorRegistry,
        services: IngestServices,
        *,
        module_name: str,
        message_ids: Optional[MessageIdCounter] = None,
        reporter: Optional[RunReporter] = None,
    ) -> None:
        self.registry = registry
        self.services = services
        self.module_name = module_name
        self.message_ids = message_ids or MessageIdCounter()
        self.reporter = reporter or RunReporter()

    def run(
        self,
        evidence_fs: EvidenceFS,
        callbacks: ExtractorCallbacks,
        *,
        units: Optional[Sequence[BaseExtractor]] = None,
        initial_errors: Sequence[ErrorEntry] = (),
    ) -> RunOutcome:
        """
        Execute the extractors against one data source.

        Args:
            evidence_fs: Data source under analysis
            callbacks: Progress/cancellation sink
            units: Extractors to run (default: the whole registry). The
                lifecycle controller passes only initialised units here.
            initial_errors: Entries recorded before the loop (init failures)

        Returns:
            RunOutcome; no extractor exception escapes this method
        """
        units = list(self.registry) if units is None else list(units)
        data_source_name = evidence_fs.name
        self._post(MessageType.INFO, f"Started {data_source_name}")

        outcome = RunOutcome(
            data_source_name=data_source_name,
            total_units=len(units),
            errors=list(initial_errors),
        )

        callbacks.switch_to_determinate(len(units))
        callbacks.progress(0)

        for i, extractor in enumerate(units):
            if callbacks.is_cancelled():
                LOGGER.info("Extraction has been cancelled, quitting before %s", extractor.name)
                outcome.cancelled = True
                break

            outcome.units_attempted.append(extractor.name)
            LOGGER.info("Running extractor: %s", extractor.name)
            try:
                extractor.process(evidence_fs, callbacks)
            except Exception:
                LOGGER.exception("Exception occurred in %s", extractor.name)
                outcome.errors.append(
                    ErrorEntry(extractor.name, f"{extractor.display_name} had errors -- see log")
                )
            callbacks.progress(i + 1)
            for message in extractor.get_error_messages():
                outcome.errors.append(ErrorEntry(extractor.name, message))

        # A cancel raised while the last unit (or a file walk) was running
        # is only seen here; teardown must still take the stop() path.
        if not outcome.cancelled and callbacks.is_cancelled():
            LOGGER.info("Extraction was cancelled while extractors were running")
            outcome.cancelled = True

        outcome.data_presence = [
            (extractor.display_name, _safe_found_data(extractor))
            for extractor in self.registry.data_presence_units
        ]
        if outcome.errors:
            LOGGER.warning("Extraction on %s finished with %d error(s)", data_source_name, len(outcome.errors))
        return outcome

    def post_summary(self, outcome: RunOutcome) -> None:
        """Post the error digest and the browser-data digest."""
        subject, body = self.reporter.render_summary(outcome)
        level = MessageType.ERROR if outcome.errors else MessageType.INFO
        self._post(level, f"Finished {outcome.data_source_name} - {subject}", body)

        presence_body = self.reporter.render_data_presence(outcome)
        self._post(MessageType.INFO, f"{outcome.data_source_name} - Browser Results", presence_body)

    def _post(self, message_type: MessageType, subject: str, body: str = "") -> None:
        self.services.post_message(
            IngestMessage(
                message_id=self.message_ids.next_id(),
                message_type=message_type,
                module_name=self.module_name,
                subject=subject,
                body=body,
            )
        )


def _safe_found_data(extractor: BaseExtractor) -> bool:
    try:
        return bool(extractor.found_data())
    except Exception:
        LOGGER.exception("found_data() failed for %s", extractor.name)
        return False


def run_extraction_pipeline(
    evidence_fs: EvidenceFS,
    registry: ExtractorRegistry,
    context: IngestJobContext,
    callbacks: Optional[ExtractorCallbacks] = None,
    *,
    module_name: Optional[str] = None,
    message_ids: Optional[MessageIdCounter] = None,
) -> RunOutcome:
    """
    Run one complete ingest job: init, process loop, digests, teardown.

    complete() is called on every extractor after a normal run; stop() is
    called instead when the loop was cut short by cancellation.
    """
    callbacks = callbacks or BridgeCallbacks(log_cb=LOGGER.info)
    context.data_source_name = evidence_fs.name
    orchestrator = ExtractionOrchestrator(
        registry,
        context.services,
        module_name=module_name or context.pipeline_name,
        message_ids=message_ids,
    )

    lifecycle = LifecycleController(registry)
    init_errors = lifecycle.init_all(context)
    lifecycle.begin_run()

    outcome = orchestrator.run(
        evidence_fs,
        callbacks,
        units=lifecycle.active_units,
        initial_errors=init_errors,
    )
    orchestrator.post_summary(outcome)
    outcome.teardown_errors = lifecycle.finish(cancelled=outcome.cancelled)
    return outcome
