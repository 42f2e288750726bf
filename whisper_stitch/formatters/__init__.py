"""Output formatter registry — txt, vtt, srt and json for both components.

WHY: The CLI and the pipeline need a single lookup to find the right
formatter by name. A central dict makes it trivial to add new formats:
create the formatter class, import it here, add one line.

HOW: FORMATTERS maps format keys to formatter *classes* (not instances).
format_output() and format_speaker_segments() are the two entry points
most callers need.

RULES:
- Keys are the output format names accepted on the command line
- Unknown format names fall back to plain text
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Sequence, Type

from whisper_stitch.core.ir import SpeakerSegment, TranscriptionResult
from whisper_stitch.formatters.json_output import JSONFormatter
from whisper_stitch.formatters.plain_text import PlainTextFormatter
from whisper_stitch.formatters.srt import SRTFormatter
from whisper_stitch.formatters.webvtt import WebVTTFormatter

if TYPE_CHECKING:
    from whisper_stitch.formatters.base import BaseFormatter

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    "txt": PlainTextFormatter,
    "vtt": WebVTTFormatter,
    "srt": SRTFormatter,
    "json": JSONFormatter,
}

FALLBACK_FORMAT = "txt"


def get_formatter(fmt: str) -> BaseFormatter:
    """Instantiate the formatter registered under fmt, or plain text."""
    return FORMATTERS.get(fmt, FORMATTERS[FALLBACK_FORMAT])()


def format_output(transcript: TranscriptionResult, fmt: str) -> str:
    """Render a unified transcript as txt, vtt, srt or json."""
    return get_formatter(fmt).format_transcript(transcript)


def format_speaker_segments(segments: Sequence[SpeakerSegment], fmt: str) -> str:
    """Render speaker segments as txt, vtt, srt or json."""
    return get_formatter(fmt).format_speaker_segments(segments)
