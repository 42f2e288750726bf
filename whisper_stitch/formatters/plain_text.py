"""Plain text formatter.

WHY: The simplest output: the transcript text as-is, or one
"[speaker]: text" line per speaker turn for review and archival.

RULES:
- Transcript: the text verbatim, no timestamps
- Speakers: "[label]: text" per segment, joined with "\\n", no trailing newline
"""

from __future__ import annotations

from typing import Sequence

from whisper_stitch.core.ir import SpeakerSegment, TranscriptionResult
from whisper_stitch.formatters.base import BaseFormatter


def speaker_prefix(segment: SpeakerSegment) -> str:
    """Return "[label]: text" for a speaker segment."""
    return "[{}]: {}".format(segment.speaker, segment.text)


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces plain text."""

    extension = "txt"

    @property
    def name(self) -> str:
        return "Plain Text"

    def format_transcript(self, transcript: TranscriptionResult) -> str:
        return transcript.text

    def format_speaker_segments(self, segments: Sequence[SpeakerSegment]) -> str:
        return "\n".join(speaker_prefix(segment) for segment in segments)
