"""Adapters for the external recognition and diarization engines.

WHY: whisper.cpp and the pyannote diarization script each emit their own
JSON shapes, and both run as separate processes. This package is the only
place that knows those shapes and talks to processes, so the core stays
pure and testable without spawning anything.

HOW: whisper_output.py and diarization_output.py parse engine JSON into
core.ir dataclasses. process.py runs a command with a hard timeout and
discovers a working interpreter from an ordered candidate list.

RULES:
- Adapters raise StitchError with a FailureReason; they never return None
- Every process call is bounded by a timeout
"""

from whisper_stitch.engines.diarization_output import load_diarization, parse_diarization_output
from whisper_stitch.engines.process import find_executable, run_engine
from whisper_stitch.engines.whisper_output import (
    load_transcription,
    parse_whisper_json,
    segments_from_milliseconds,
)

__all__ = [
    "find_executable",
    "load_diarization",
    "load_transcription",
    "parse_diarization_output",
    "parse_whisper_json",
    "run_engine",
    "segments_from_milliseconds",
]
