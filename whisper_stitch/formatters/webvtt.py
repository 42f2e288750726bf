"""WebVTT caption formatter.

WHY: Browsers and most video players load WebVTT natively, and its voice
tag (``<v label>``) carries speaker attribution without polluting the
caption text.

HOW: A literal "WEBVTT" header and a blank line, then one cue per segment:
1-based cue number, "HH:MM:SS.mmm --> HH:MM:SS.mmm", body, blank line.

RULES:
- Transcript without segments degrades to "WEBVTT\\n\\n" + full text
- Speaker cues wrap the body as "<v label>text</v>"
"""

from __future__ import annotations

from typing import List, Sequence

from whisper_stitch.core.ir import SpeakerSegment, TranscriptionResult
from whisper_stitch.core.timestamps import vtt_timestamp
from whisper_stitch.formatters.base import BaseFormatter

_HEADER = "WEBVTT\n\n"


def _cue(index: int, start: float, end: float, body: str) -> str:
    return "{}\n{} --> {}\n{}\n\n".format(index, vtt_timestamp(start), vtt_timestamp(end), body)


class WebVTTFormatter(BaseFormatter):
    """Formatter that produces WebVTT captions."""

    extension = "vtt"

    @property
    def name(self) -> str:
        return "WebVTT"

    def format_transcript(self, transcript: TranscriptionResult) -> str:
        if not transcript.segments:
            return _HEADER + transcript.text

        cues: List[str] = [
            _cue(index, segment.start, segment.end, segment.text)
            for index, segment in enumerate(transcript.segments, start=1)
        ]
        return _HEADER + "".join(cues)

    def format_speaker_segments(self, segments: Sequence[SpeakerSegment]) -> str:
        cues = [
            _cue(
                index,
                segment.start,
                segment.end,
                "<v {}>{}</v>".format(segment.speaker, segment.text),
            )
            for index, segment in enumerate(segments, start=1)
        ]
        return _HEADER + "".join(cues)
