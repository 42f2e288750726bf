"""JSON formatter.

WHY: Downstream tools (and our own ``speakers`` command) need the full
structure back, not a rendering of it.

HOW: Serializes the dataclasses' to_dict() output with a 2-space indent.
Schemas describing both documents ship next to this module and are used
by the test suite.

RULES:
- Transcript JSON: text, segments (when present), language (when
  present), model_used, processing_time
- Speaker JSON: the segment array verbatim
- Non-ASCII text is written as-is (UTF-8), not escaped
"""

from __future__ import annotations

import json
from typing import Any, Sequence

from whisper_stitch.core.ir import DiarizationResult, SpeakerSegment, TranscriptionResult
from whisper_stitch.formatters.base import BaseFormatter


def dump_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


class JSONFormatter(BaseFormatter):
    """Formatter that produces JSON documents."""

    extension = "json"

    @property
    def name(self) -> str:
        return "JSON"

    def format_transcript(self, transcript: TranscriptionResult) -> str:
        return dump_json(transcript.to_dict())

    def format_speaker_segments(self, segments: Sequence[SpeakerSegment]) -> str:
        return dump_json([segment.to_dict() for segment in segments])

    def format_diarization_result(self, result: DiarizationResult) -> str:
        """Render segments together with the speaker list and run metadata."""
        return dump_json(result.to_dict())
