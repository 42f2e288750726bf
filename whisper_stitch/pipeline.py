"""Orchestration over resolved engine output: offsets, validation, typed outcomes.

WHY: The core functions are pure and never fail, but the steps around
them can: chunking parameters can be out of range and engine output can
be unusable. Callers (the CLI today) need one place that computes chunk
offsets the same way the audio splitter cut the chunks, runs the core,
and reports failures with a reason instead of a stack trace.

HOW: chunk_start_offset() mirrors the splitter's layout. stitch_chunks()
and attribute_speakers() validate, run the core, log, and return an
Outcome that holds either the value or a StitchError.

RULES:
- Chunk i starts at i * chunk_duration - overlap (chunk 0 at 0)
- Chunk duration 1–30 minutes, overlap 0–120 seconds, else INPUT failure
- Speakers are listed in order of first appearance
- Nothing here spawns processes or touches files
"""

from __future__ import annotations

import logging
import time
from typing import List, Optional, Sequence

from whisper_stitch.config import (
    DEFAULT_CHUNK_DURATION_MINUTES,
    DEFAULT_DIARIZATION_MODEL,
    DEFAULT_OVERLAP_SECONDS,
    MAX_CHUNK_DURATION_MINUTES,
    MAX_OVERLAP_SECONDS,
    MIN_CHUNK_DURATION_MINUTES,
    MIN_OVERLAP_SECONDS,
)
from whisper_stitch.core.alignment import align_transcription_with_speakers
from whisper_stitch.core.assembler import assemble_transcriptions
from whisper_stitch.core.ir import (
    AlignmentOptions,
    AssemblyOptions,
    ChunkTranscription,
    DiarizationMetadata,
    DiarizationResult,
    DiarizationSpan,
    TranscriptionResult,
)
from whisper_stitch.errors import FailureReason, Outcome, StitchError

logger = logging.getLogger(__name__)


def chunk_start_offset(index: int, chunk_duration_s: float, overlap_s: float) -> float:
    """Global start time, in seconds, of chunk ``index``."""
    return index * chunk_duration_s - (overlap_s if index > 0 else 0.0)


def validate_chunking(chunk_duration_minutes: float, overlap_seconds: float) -> None:
    if not MIN_CHUNK_DURATION_MINUTES <= chunk_duration_minutes <= MAX_CHUNK_DURATION_MINUTES:
        raise StitchError(
            FailureReason.INPUT,
            "Chunk duration must be between {} and {} minutes, got {}".format(
                MIN_CHUNK_DURATION_MINUTES, MAX_CHUNK_DURATION_MINUTES, chunk_duration_minutes,
            ),
        )
    if not MIN_OVERLAP_SECONDS <= overlap_seconds <= MAX_OVERLAP_SECONDS:
        raise StitchError(
            FailureReason.INPUT,
            "Overlap must be between {} and {} seconds, got {}".format(
                MIN_OVERLAP_SECONDS, MAX_OVERLAP_SECONDS, overlap_seconds,
            ),
        )


def build_chunk_transcriptions(
    results: Sequence[TranscriptionResult],
    chunk_duration_minutes: float = DEFAULT_CHUNK_DURATION_MINUTES,
    overlap_seconds: float = DEFAULT_OVERLAP_SECONDS,
) -> List[ChunkTranscription]:
    """Pair per-chunk results (in chunk order) with their global offsets."""
    chunk_duration_s = chunk_duration_minutes * 60
    return [
        ChunkTranscription(
            chunk_index=index,
            start_offset=chunk_start_offset(index, chunk_duration_s, overlap_seconds),
            result=result,
        )
        for index, result in enumerate(results)
    ]


def stitch_chunks(
    results: Sequence[TranscriptionResult],
    chunk_duration_minutes: float = DEFAULT_CHUNK_DURATION_MINUTES,
    overlap_seconds: float = DEFAULT_OVERLAP_SECONDS,
    preserve_timestamps: bool = True,
) -> Outcome[TranscriptionResult]:
    """Assemble chunk results produced by splitting one audio file.

    Args:
        results: One TranscriptionResult per chunk, in chunk order.
        chunk_duration_minutes: Length the splitter used for each chunk.
        overlap_seconds: Overlap the splitter added between chunks.
        preserve_timestamps: Keep and shift segment timing.

    Returns:
        Outcome holding the unified transcript, or an INPUT failure.
    """
    try:
        validate_chunking(chunk_duration_minutes, overlap_seconds)
    except StitchError as exc:
        return Outcome.failure(exc)

    chunks = build_chunk_transcriptions(results, chunk_duration_minutes, overlap_seconds)
    logger.info(
        "Assembling %d chunks (%.0f min, %.0fs overlap)",
        len(chunks), chunk_duration_minutes, overlap_seconds,
    )

    transcript = assemble_transcriptions(chunks, AssemblyOptions(
        overlap_seconds=overlap_seconds,
        remove_overlap_duplicates=True,
        preserve_timestamps=preserve_timestamps,
    ))

    logger.info(
        "Assembled transcript: %d segments, %d ms engine time",
        len(transcript.segments or []), transcript.processing_time,
    )
    return Outcome.success(transcript)


def unique_speakers(labels: Sequence[str]) -> List[str]:
    seen: List[str] = []
    for label in labels:
        if label not in seen:
            seen.append(label)
    return seen


def attribute_speakers(
    transcription: TranscriptionResult,
    spans: Sequence[DiarizationSpan],
    options: Optional[AlignmentOptions] = None,
    diarization_model: str = DEFAULT_DIARIZATION_MODEL,
    device_used: str = "cpu",
    started_at: Optional[float] = None,
) -> Outcome[DiarizationResult]:
    """Align a transcription with diarization spans and describe the run.

    Args:
        transcription: Single-pass or assembled transcript.
        spans: Diarization spans in a stable order.
        options: Alignment thresholds (defaults if None).
        diarization_model: Recorded in the result metadata.
        device_used: Recorded in the result metadata.
        started_at: time.monotonic() when the run began; now if None.

    Returns:
        Outcome holding the DiarizationResult, or an INPUT failure for
        thresholds outside their valid range.
    """
    if started_at is None:
        started_at = time.monotonic()
    if options is None:
        options = AlignmentOptions()

    if not 0.0 <= options.confidence_threshold <= 1.0:
        return Outcome.failure(StitchError(
            FailureReason.INPUT,
            "Confidence threshold must be between 0 and 1, got {}".format(
                options.confidence_threshold,
            ),
        ))

    if not spans:
        logger.warning("No diarization spans; every segment will be an unknown speaker")

    segments = align_transcription_with_speakers(transcription, spans, options)
    speakers = unique_speakers([segment.speaker for segment in segments])
    elapsed_ms = int((time.monotonic() - started_at) * 1000)

    logger.info("Attributed %d segments to %d speakers", len(segments), len(speakers))

    return Outcome.success(DiarizationResult(
        segments=segments,
        speakers=speakers,
        metadata=DiarizationMetadata(
            whisper_model=transcription.model_used,
            diarization_model=diarization_model,
            processing_time=elapsed_ms,
            num_speakers=len(speakers),
            device_used=device_used,
        ),
    ))
