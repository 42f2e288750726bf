"""Intermediate representation dataclasses for transcripts and speaker segments.

WHY: The recognition engine, the diarization engine, the assembler, the
aligner, and every formatter exchange the same handful of shapes. A
single, well-typed set of dataclasses keeps those hand-offs explicit and
gives the JSON output one place that defines its field names.

HOW: Plain dataclasses, each with to_dict()/from_dict() that mirror the
JSON output exactly:
  Segment             — one timestamped span of recognized text
  TranscriptionResult — a whole transcript (one chunk or a unified file)
  ChunkTranscription  — a chunk's result plus its global start offset
  DiarizationSpan     — one speaker turn from the diarization engine
  SpeakerSegment      — a transcript span attributed to a speaker
  DiarizationResult   — speaker segments plus speaker list and metadata
  AssemblyOptions / AlignmentOptions — the knobs of the two algorithms

RULES:
- All times are float seconds
- processing_time is integer milliseconds
- Optional transcript fields (segments, language) are omitted from JSON
  when None, so the JSON round trip is exact
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

UNKNOWN_SPEAKER = "unknown speaker"
"""Label assigned to segments that no diarization span covers well enough."""


@dataclass
class Segment:
    """A timestamped span of recognized text."""

    start: float
    end: float
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start, "end": self.end, "text": self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Segment:
        return cls(start=float(data["start"]), end=float(data["end"]), text=data["text"])


@dataclass
class TranscriptionResult:
    """A transcript produced by the engine for one chunk, or assembled for a file.

    RULES:
    - segments is None when the engine produced no timing information
    - language is None when it was not detected
    - model_used is the engine's model identifier
    - processing_time is in milliseconds
    """

    text: str
    model_used: str
    processing_time: int = 0
    segments: Optional[List[Segment]] = None
    language: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"text": self.text}
        if self.segments is not None:
            payload["segments"] = [segment.to_dict() for segment in self.segments]
        if self.language is not None:
            payload["language"] = self.language
        payload["model_used"] = self.model_used
        payload["processing_time"] = self.processing_time
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TranscriptionResult:
        raw_segments = data.get("segments")
        return cls(
            text=data["text"],
            model_used=data["model_used"],
            processing_time=data.get("processing_time", 0),
            segments=(
                [Segment.from_dict(item) for item in raw_segments]
                if raw_segments is not None
                else None
            ),
            language=data.get("language"),
        )


@dataclass
class ChunkTranscription:
    """One chunk's transcription and where the chunk starts in the source audio.

    RULES:
    - chunk_index is assigned by the caller, contiguous from 0
    - start_offset is computed by the caller, in seconds
    """

    chunk_index: int
    start_offset: float
    result: TranscriptionResult


@dataclass
class AssemblyOptions:
    """Knobs for merging chunk transcriptions."""

    overlap_seconds: float = 30.0
    remove_overlap_duplicates: bool = True
    preserve_timestamps: bool = True


@dataclass
class DiarizationSpan:
    """A time span attributed to one speaker by the diarization engine.

    The speaker id is opaque engine output, e.g. "SPEAKER_07".
    """

    start: float
    end: float
    speaker: str

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start, "end": self.end, "speaker": self.speaker}


@dataclass
class SpeakerSegment:
    """A transcript span attributed to a normalized speaker label.

    RULES:
    - speaker is a normalized label ("speaker07") or UNKNOWN_SPEAKER
    - confidence is the fraction of the span covered by its best
      diarization match, in [0, 1]; always 0 for UNKNOWN_SPEAKER
    """

    text: str
    speaker: str
    start: float
    end: float
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "speaker": self.speaker,
            "start": self.start,
            "end": self.end,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SpeakerSegment:
        return cls(
            text=data["text"],
            speaker=data["speaker"],
            start=float(data["start"]),
            end=float(data["end"]),
            confidence=float(data["confidence"]),
        )


@dataclass
class AlignmentOptions:
    """Knobs for attributing transcript spans to speakers.

    RULES:
    - overlap_threshold: minimum intersection in seconds
    - merge_threshold: maximum gap in seconds between merged spans
    - confidence_threshold: minimum covered fraction, in [0, 1]
    """

    overlap_threshold: float = 0.1
    merge_threshold: float = 1.0
    confidence_threshold: float = 0.1


@dataclass
class DiarizationMetadata:
    """Provenance of a diarized transcript."""

    whisper_model: str
    diarization_model: str
    processing_time: int
    num_speakers: int
    device_used: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "whisper_model": self.whisper_model,
            "diarization_model": self.diarization_model,
            "processing_time": self.processing_time,
            "num_speakers": self.num_speakers,
            "device_used": self.device_used,
        }


@dataclass
class DiarizationResult:
    """Speaker segments for a whole file, with the speakers that occur in them."""

    segments: List[SpeakerSegment]
    speakers: List[str]
    metadata: DiarizationMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            "segments": [segment.to_dict() for segment in self.segments],
            "speakers": list(self.speakers),
            "metadata": self.metadata.to_dict(),
        }
