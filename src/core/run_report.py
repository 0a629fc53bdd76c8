"""
End-of-run digests posted to the ingest inbox.

Both renders are pure functions of a RunOutcome: templates are held in
memory, nothing is read from or written to disk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

from jinja2 import DictLoader, Environment

if TYPE_CHECKING:
    from .extraction_orchestrator import RunOutcome

NO_ERRORS_SUBJECT = "No errors reported"

_TEMPLATES = {
    "errors.html": (
        "{% if messages %}"
        "<p>Errors encountered during analysis: <ul>\n"
        "{% for message in messages %}<li>{{ message }}</li>\n{% endfor %}"
        "</ul>\n"
        "{% else %}"
        "<p>No errors encountered.</p>"
        "{% endif %}"
    ),
    "data_presence.html": (
        "<p>Browser Data on {{ data_source_name }}:<ul>\n"
        "{% for name, found in units %}"
        "<li>{{ name }}: {{ 'Found.' if found else 'Not Found.' }}</li>\n"
        "{% endfor %}"
        "</ul>"
    ),
}


def error_subject(count: int) -> str:
    """Count-based subject line for the error digest."""
    if count == 0:
        return NO_ERRORS_SUBJECT
    if count == 1:
        return "1 error found"
    return f"{count} errors found"


class RunReporter:
    """Renders the error/status digest and the browser-data digest."""

    def __init__(self) -> None:
        self._env = Environment(loader=DictLoader(_TEMPLATES), autoescape=True)

    def render_summary(self, outcome: RunOutcome) -> Tuple[str, str]:
        """
        Render the error digest.

        Returns:
            (subject, body) where body lists every error in insertion order
        """
        messages = [entry.message for entry in (outcome.errors or [])]
        body = self._env.get_template("errors.html").render(messages=messages)
        return error_subject(len(messages)), body

    def render_data_presence(self, outcome: RunOutcome) -> str:
        """Render found/not-found per data-presence extractor, in registry order."""
        return self._env.get_template("data_presence.html").render(
            data_source_name=outcome.data_source_name,
            units=list(outcome.data_presence or []),
        )
