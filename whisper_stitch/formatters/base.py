"""Abstract base formatter and output container.

WHY: Every output format renders the same two shapes: a unified
transcript and a list of speaker segments. This base class enforces a
consistent interface so the CLI and the pipeline can work with any
formatter generically.

HOW: BaseFormatter is an ABC with a ``name`` property and two render
methods. ``extension`` names the file type it produces.
FormatterOutput bundles a file suffix with its content.

RULES:
- Subclasses MUST implement ``name``, ``format_transcript()`` and
  ``format_speaker_segments()``
- Render methods return strings and never touch the filesystem
- ``suffix`` starts with a hyphen, e.g. ``"-transcript.srt"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from whisper_stitch.core.ir import SpeakerSegment, TranscriptionResult


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-speakers.vtt"`` → ``"interview-speakers.vtt"``.
        content: The file content.
    """

    suffix: str
    content: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement name and both render methods
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    extension = "txt"

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'WebVTT'."""

    @abstractmethod
    def format_transcript(self, transcript: TranscriptionResult) -> str:
        """Render a unified transcript."""

    @abstractmethod
    def format_speaker_segments(self, segments: Sequence[SpeakerSegment]) -> str:
        """Render speaker-attributed segments."""

    def output(self, content: str, kind: str) -> FormatterOutput:
        """Wrap rendered content for saving, e.g. kind="speakers" → "-speakers.vtt"."""
        return FormatterOutput(
            suffix="-{}.{}".format(kind, self.extension),
            content=content,
        )
