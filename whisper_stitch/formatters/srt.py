"""SubRip (SRT) caption formatter.

WHY: SRT is the lowest common denominator for subtitle import in editing
tools and players.

HOW: One block per segment: 1-based cue number, a
"HH:MM:SS,mmm --> HH:MM:SS,mmm" line (comma before milliseconds), the
body, and a blank line.

RULES:
- Transcript without segments degrades to the bare text, no numbering
- Speaker cue bodies are prefixed "[label]: "
"""

from __future__ import annotations

from typing import Sequence

from whisper_stitch.core.ir import SpeakerSegment, TranscriptionResult
from whisper_stitch.core.timestamps import srt_timestamp
from whisper_stitch.formatters.base import BaseFormatter
from whisper_stitch.formatters.plain_text import speaker_prefix


def _block(index: int, start: float, end: float, body: str) -> str:
    return "{}\n{} --> {}\n{}\n\n".format(index, srt_timestamp(start), srt_timestamp(end), body)


class SRTFormatter(BaseFormatter):
    """Formatter that produces SubRip captions."""

    extension = "srt"

    @property
    def name(self) -> str:
        return "SubRip"

    def format_transcript(self, transcript: TranscriptionResult) -> str:
        if not transcript.segments:
            return transcript.text

        return "".join(
            _block(index, segment.start, segment.end, segment.text)
            for index, segment in enumerate(transcript.segments, start=1)
        )

    def format_speaker_segments(self, segments: Sequence[SpeakerSegment]) -> str:
        return "".join(
            _block(index, segment.start, segment.end, speaker_prefix(segment))
            for index, segment in enumerate(segments, start=1)
        )
