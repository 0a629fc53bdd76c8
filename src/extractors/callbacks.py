"""
Callback interface for extractor progress reporting and cancellation.
"""

from typing import Protocol


class ExtractorCallbacks(Protocol):
    """
    Progress/cancellation sink shared by the orchestrator and extractors.

    The orchestrator drives the determinate progress bar (one step per
    extractor); extractors may log through it and must poll is_cancelled()
    in long loops.
    """

    def switch_to_determinate(self, total: int) -> None:
        """
        Switch progress to a known number of steps.

        Args:
            total: Total number of steps (extractors in the run)
        """
        ...

    def progress(self, completed: int) -> None:
        """
        Report completed step count.

        Args:
            completed: Steps done so far (monotonically increasing)

        Example:
            callbacks.progress(3)
        """
        ...

    def on_log(self, message: str, level: str = "info") -> None:
        """
        Log a message for the user-facing run log.

        Args:
            message: Log message
            level: "debug" | "info" | "warning" | "error"
        """
        ...

    def is_cancelled(self) -> bool:
        """
        Check if user cancelled the operation.

        Example:
            if callbacks.is_cancelled():
                return
        """
        ...
