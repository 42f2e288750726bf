"""Chunk transcription assembly: global timestamps and overlap de-duplication.

WHY: Long audio is split into fixed-length chunks that overlap by a few
seconds so no word is cut in half at a boundary. whisper.cpp transcribes
every chunk on its own, so each chunk's timestamps start at zero and the
overlap window is transcribed twice. This module is the bridge between
the per-chunk results and one transcript for the whole file.

HOW: Chunks are sorted by index. Every chunk's segments are shifted by
the chunk's start offset. For every chunk after the first, segments that
start before a cutoff (end of the last assembled segment minus the
overlap) are dropped. The plain text track has no timing, so it uses a
line-count heuristic instead. Texts are joined with a single space.

RULES:
- Empty input → empty transcript, never an error
- Single chunk → that chunk's result, returned as-is
- A segment starting exactly at the cutoff is KEPT; text duplicated at the
  exact boundary can survive (known approximation)
- The text heuristic drops min(2, floor(0.1 * lines)) leading lines and
  ignores timing entirely
- processing_time is summed; language and model come from the first chunk
- Pure: no I/O, input chunks and results are never mutated
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import List, Optional, Sequence

from whisper_stitch.core.ir import (
    AssemblyOptions,
    ChunkTranscription,
    Segment,
    TranscriptionResult,
)

EMPTY_TRANSCRIPT_MODEL = "base.en"
"""Model reported by the empty transcript (nothing was transcribed)."""

# Share of leading lines the text heuristic treats as overlap, and its cap.
_TEXT_OVERLAP_RATIO = 0.1
_TEXT_OVERLAP_MAX_LINES = 2


def assemble_transcriptions(
    chunks: Sequence[ChunkTranscription],
    options: Optional[AssemblyOptions] = None,
) -> TranscriptionResult:
    """Assemble per-chunk transcriptions into a single transcript.

    WHY: Callers transcribe chunks independently (possibly in parallel)
    and need one transcript with file-global timestamps and without the
    text repeated in every overlap window.

    HOW: See the module docstring. All chunks are required up front: the
    cutoff for each chunk depends on the last segment assembled so far.

    Args:
        chunks: Per-chunk results, in any order; chunk_index decides order.
        options: Overlap duration and feature switches (defaults if None).

    Returns:
        A new TranscriptionResult, or the single chunk's own result.
    """
    if options is None:
        options = AssemblyOptions()

    if not chunks:
        return TranscriptionResult(text="", model_used=EMPTY_TRANSCRIPT_MODEL, processing_time=0)

    if len(chunks) == 1:
        return chunks[0].result

    ordered = sorted(chunks, key=lambda chunk: chunk.chunk_index)

    assembled_text = ""
    assembled_segments: List[Segment] = []
    total_processing_time = 0

    for position, chunk in enumerate(ordered):
        is_first = position == 0
        result = chunk.result

        total_processing_time += result.processing_time

        if options.preserve_timestamps and result.segments:
            shifted = shift_segments(result.segments, chunk.start_offset)
            if options.remove_overlap_duplicates and not is_first:
                shifted = remove_overlap_segments(
                    shifted, assembled_segments, options.overlap_seconds,
                )
            assembled_segments.extend(shifted)

        chunk_text = result.text
        if options.remove_overlap_duplicates and not is_first:
            chunk_text = remove_overlap_text(chunk_text)

        assembled_text = _join_text(assembled_text, chunk_text)

    first = ordered[0].result
    return TranscriptionResult(
        text=assembled_text.strip(),
        model_used=first.model_used,
        processing_time=total_processing_time,
        segments=(
            assembled_segments
            if options.preserve_timestamps and assembled_segments
            else None
        ),
        language=first.language,
    )


def shift_segments(segments: Sequence[Segment], offset: float) -> List[Segment]:
    """Return copies of segments translated by offset seconds."""
    return [
        replace(segment, start=segment.start + offset, end=segment.end + offset)
        for segment in segments
    ]


def remove_overlap_segments(
    new_segments: Sequence[Segment],
    assembled: Sequence[Segment],
    overlap_seconds: float,
) -> List[Segment]:
    """Drop segments that start inside the overlap window of the previous chunk.

    RULES:
    - cutoff = end of the last assembled segment - overlap_seconds
    - start < cutoff → dropped; start >= cutoff → kept
    - Nothing assembled yet → everything kept
    """
    if not assembled:
        return list(new_segments)

    cutoff = assembled[-1].end - overlap_seconds
    return [segment for segment in new_segments if segment.start >= cutoff]


def remove_overlap_text(text: str) -> str:
    """Heuristically strip the overlap from the start of an untimed chunk text.

    WHY: The text track has no timestamps to compare against, so exact
    de-duplication is impossible. Dropping a small share of the leading
    lines removes the most obvious repeats.

    HOW: Split into non-blank lines, drop the first
    min(2, floor(0.1 * line_count)) of them, and rejoin with newlines.

    RULES:
    - Texts with at most one non-blank line are returned untouched
    - Blank lines are discarded when the text is rejoined
    """
    lines = [line for line in text.split("\n") if line.strip()]
    if len(lines) <= 1:
        return text

    lines_to_remove = min(_TEXT_OVERLAP_MAX_LINES, math.floor(len(lines) * _TEXT_OVERLAP_RATIO))
    return "\n".join(lines[lines_to_remove:])


def _join_text(left: str, right: str) -> str:
    """Concatenate, inserting one space when neither side has whitespace at the seam."""
    if left and right and not left[-1].isspace() and not right[0].isspace():
        return left + " " + right
    return left + right
