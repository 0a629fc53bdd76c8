"""Uniform result type returned by unit lifecycle calls and per-file steps."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import ErrorKind


@dataclass(frozen=True, slots=True)
class UnitResult:
    """
    Outcome of one unit call.

    Attributes:
        ok: True when the call succeeded (including skip/no-op)
        error_kind: Failure classification, ErrorKind.NONE on success
        message: Human-readable detail, empty when nothing to say
    """

    ok: bool
    error_kind: ErrorKind = ErrorKind.NONE
    message: str = ""

    @classmethod
    def success(cls, message: str = "") -> UnitResult:
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, error_kind: ErrorKind, message: str) -> UnitResult:
        if error_kind is ErrorKind.NONE:
            raise ValueError("A failed UnitResult needs an error kind")
        return cls(ok=False, error_kind=error_kind, message=message)
