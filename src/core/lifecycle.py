"""
Lifecycle controller for one extraction run.

State machine:

    CREATED --init_all()--> INITIALIZED --begin_run()--> RUNNING
    RUNNING --finish(cancelled=False)--> COMPLETED   (complete() on every unit)
    RUNNING --finish(cancelled=True)-->  STOPPED     (stop() on every unit)

Every unit call is isolated: an exception from one unit's init/complete/stop
is logged and recorded, and the controller moves on to the next unit. A unit
whose init() failed is excluded from the rest of the run (no process, no
complete/stop).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List

from .case import IngestJobContext
from .enums import ErrorKind, LifecycleState
from .logging import get_logger
from .results import UnitResult

if TYPE_CHECKING:
    from extractors.base import BaseExtractor
    from extractors.extractor_registry import ExtractorRegistry

LOGGER = get_logger("core.lifecycle")


class LifecycleError(RuntimeError):
    """Raised on an illegal lifecycle transition (programming error)."""
    pass


@dataclass(frozen=True, slots=True)
class ErrorEntry:
    """One line of the run's error log."""

    unit: str
    message: str


class LifecycleController:
    """Drives init/complete/stop over a registry, isolating each call."""

    def __init__(self, registry: ExtractorRegistry) -> None:
        self._registry = registry
        self._state = LifecycleState.CREATED
        self._active: List[BaseExtractor] = []
        self.init_results: Dict[str, UnitResult] = {}
        self.init_errors: List[ErrorEntry] = []
        self.teardown_errors: List[ErrorEntry] = []

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def active_units(self) -> List[BaseExtractor]:
        """Units that initialised successfully, in registry order."""
        return list(self._active)

    def init_all(self, context: IngestJobContext) -> List[ErrorEntry]:
        """Call init() on every unit once; failed units are excluded from the run."""
        self._require(LifecycleState.CREATED, "init_all")
        for unit in self._registry:
            result = self._call(unit, "initialize", lambda u=unit: u.init(context))
            self.init_results[unit.name] = result
            if result.ok:
                self._active.append(unit)
            else:
                self.init_errors.append(
                    ErrorEntry(unit.name, f"{unit.display_name} failed to initialize -- see log")
                )
        self._state = LifecycleState.INITIALIZED
        LOGGER.info("Initialized %d of %d extractors", len(self._active), len(self._registry))
        return list(self.init_errors)

    def begin_run(self) -> None:
        self._require(LifecycleState.INITIALIZED, "begin_run")
        self._state = LifecycleState.RUNNING

    def finish(self, cancelled: bool) -> List[ErrorEntry]:
        """
        Tear down every active unit: stop() when cancelled, else complete().

        Returns:
            Error entries for units whose teardown raised
        """
        self._require(LifecycleState.RUNNING, "finish")
        action = "stop" if cancelled else "complete"
        for unit in self._active:
            teardown = unit.stop if cancelled else unit.complete
            result = self._call(unit, action, teardown)
            if not result.ok:
                self.teardown_errors.append(
                    ErrorEntry(unit.name, f"{unit.display_name} failed to {action} -- see log")
                )
        self._state = LifecycleState.STOPPED if cancelled else LifecycleState.COMPLETED
        if cancelled:
            LOGGER.info("Extraction run has been shut down after cancellation")
        return list(self.teardown_errors)

    def _require(self, expected: LifecycleState, operation: str) -> None:
        if self._state is not expected:
            raise LifecycleError(
                f"Cannot {operation} in state {self._state} (expected {expected})"
            )

    @staticmethod
    def _call(unit: BaseExtractor, action: str, fn: Callable[[], None]) -> UnitResult:
        try:
            fn()
        except Exception as exc:
            LOGGER.exception("Exception occurred when trying to %s %s", action, unit.name)
            return UnitResult.failure(ErrorKind.UNIT_FATAL, f"{unit.name} {action}: {exc}")
        return UnitResult.success()
