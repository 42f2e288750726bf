"""Failure taxonomy and typed outcomes for the orchestration layer.

WHY: The engines can fail for different reasons: a missing interpreter,
a bad input file, or a crash inside the engine. Each needs its own hint
for the user. A small closed set of reasons keeps that mapping
explicit instead of parsing exception messages.

HOW: StitchError carries a FailureReason. Pipeline functions catch it and
return an Outcome holding either a value or the error, so callers branch
on ``outcome.ok`` rather than wrapping every call in try/except.

RULES:
- The pure core (assembler, aligner, formatters) never raises StitchError
- Engine adapters raise StitchError; pipeline functions return Outcome
- help_text() is keyed by reason, never by message content
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class FailureReason(str, enum.Enum):
    """Why an orchestration step failed."""

    SETUP = "setup"
    INPUT = "input"
    PROCESSING = "processing"


_HELP_TEXT = {
    FailureReason.SETUP: (
        "Setup help: install Python 3 with torch, torchaudio and pyannote.audio, "
        "set PYTHON_EXECUTABLE if it is not on PATH, and set HF_TOKEN for "
        "pyannote model access."
    ),
    FailureReason.INPUT: "Check that the input files exist and contain engine JSON output.",
    FailureReason.PROCESSING: (
        "The engine failed while processing. Try a different audio file or "
        "check the engine's Python environment."
    ),
}


class StitchError(Exception):
    """Raised when an orchestration step cannot produce a result.

    RULES:
    - reason is always one of FailureReason
    - details holds optional structured context (exit codes, paths)
    """

    def __init__(self, reason: FailureReason, message: str, details: Optional[dict] = None) -> None:
        self.reason = reason
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def help_text(self) -> str:
        return _HELP_TEXT[self.reason]


@dataclass
class Outcome(Generic[T]):
    """Either a value or a StitchError, never both."""

    value: Optional[T] = None
    error: Optional[StitchError] = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: StitchError) -> "Outcome[Any]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def reason(self) -> Optional[FailureReason]:
        return self.error.reason if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value, re-raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
