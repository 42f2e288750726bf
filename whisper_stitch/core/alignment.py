"""Attribute transcription segments to diarization speakers.

WHY: whisper.cpp knows what was said and when, the diarization engine
knows who spoke when, and neither knows the other. This module matches
the two timelines so every transcript span carries a speaker label and a
confidence, then merges consecutive spans by the same speaker into
readable turns.

HOW: For each transcription segment, every diarization span is scored by
its intersection with the segment; the longest intersection wins. The
winning span's raw speaker id is normalized to "speakerNN". A final
left-to-right pass merges same-speaker neighbours separated by less than
the merge threshold.

RULES:
- Ties on intersection length go to the span seen first (order-dependent)
- confidence = intersection / segment duration, in [0, 1]
- A match needs intersection > overlap_threshold AND
  confidence >= confidence_threshold; otherwise the segment is kept as
  UNKNOWN_SPEAKER with confidence 0
- No transcription segments → one pseudo-segment over
  [0, max(20, last span end)] carrying the full text
- Non-numeric speaker ids hash into 10 buckets; distinct ids can collide
- Pure: no I/O, inputs are never mutated
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import List, Optional, Sequence

from whisper_stitch.core.ir import (
    UNKNOWN_SPEAKER,
    AlignmentOptions,
    DiarizationSpan,
    Segment,
    SpeakerSegment,
    TranscriptionResult,
)

# Minimum length of the pseudo-segment used when the transcript has no timing.
_PSEUDO_SEGMENT_MIN_END_S = 20.0

_DIGITS_RE = re.compile(r"\d+")

_HASH_BUCKETS = 10


def align_transcription_with_speakers(
    transcription: TranscriptionResult,
    diarization: Sequence[DiarizationSpan],
    options: Optional[AlignmentOptions] = None,
) -> List[SpeakerSegment]:
    """Align transcription segments with speaker diarization spans.

    Args:
        transcription: A single-pass or assembled transcript.
        diarization: Spans from the diarization engine, in a stable order.
        options: Thresholds (defaults if None).

    Returns:
        Time-ordered speaker segments after the merge pass.
    """
    if options is None:
        options = AlignmentOptions()

    aligned: List[SpeakerSegment] = []
    for segment in _source_segments(transcription, diarization):
        aligned.append(_attribute_segment(segment, diarization, options))

    return merge_adjacent_segments(aligned, options.merge_threshold)


def _source_segments(
    transcription: TranscriptionResult,
    diarization: Sequence[DiarizationSpan],
) -> List[Segment]:
    if transcription.segments:
        return list(transcription.segments)

    end = max([_PSEUDO_SEGMENT_MIN_END_S] + [span.end for span in diarization])
    return [Segment(start=0.0, end=end, text=transcription.text)]


def _attribute_segment(
    segment: Segment,
    diarization: Sequence[DiarizationSpan],
    options: AlignmentOptions,
) -> SpeakerSegment:
    best_match: Optional[DiarizationSpan] = None
    max_overlap = 0.0

    for span in diarization:
        overlap = calculate_overlap(segment.start, segment.end, span.start, span.end)
        if overlap > max_overlap:
            max_overlap = overlap
            best_match = span

    duration = segment.end - segment.start
    confidence = min(1.0, max_overlap / duration) if duration > 0 else 0.0

    if (
        best_match is not None
        and max_overlap > options.overlap_threshold
        and confidence >= options.confidence_threshold
    ):
        return SpeakerSegment(
            text=segment.text,
            speaker=normalize_speaker_label(best_match.speaker),
            start=segment.start,
            end=segment.end,
            confidence=confidence,
        )

    return SpeakerSegment(
        text=segment.text,
        speaker=UNKNOWN_SPEAKER,
        start=segment.start,
        end=segment.end,
        confidence=0.0,
    )


def calculate_overlap(start_a: float, end_a: float, start_b: float, end_b: float) -> float:
    """Length of the intersection of two intervals, 0 when they are disjoint."""
    return max(0.0, min(end_a, end_b) - max(start_a, start_b))


def normalize_speaker_label(label: str) -> str:
    """Convert a raw diarization speaker id to "speakerNN".

    WHY: Engines name speakers "SPEAKER_07", "spk3", or arbitrary strings.
    Output formats need one consistent label scheme.

    HOW: The first run of digits becomes the number. Ids without digits
    get a deterministic number from a string hash, in 1–10.

    RULES:
    - "SPEAKER_07" → "speaker07", "spk3" → "speaker03"
    - Numbers are zero-padded to at least two digits
    - Same input → same label, always
    - Two different non-numeric ids may map to the same label
    """
    match = _DIGITS_RE.search(label)
    if match:
        number = int(match.group(0))
    else:
        number = _hash_label(label) % _HASH_BUCKETS + 1
    return "speaker{:02d}".format(number)


def _hash_label(label: str) -> int:
    """32-bit rolling hash (h * 31 + code unit), absolute value."""
    value = 0
    for char in label:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value)


def merge_adjacent_segments(
    segments: Sequence[SpeakerSegment],
    merge_threshold: float,
) -> List[SpeakerSegment]:
    """Merge consecutive same-speaker segments separated by a small gap.

    RULES:
    - Merge when labels match and next.start - current.end < merge_threshold
    - Merged text is space-joined; end is the later end; confidence is the
      minimum of the two
    - Never increases the segment count; input segments are not modified
    """
    merged: List[SpeakerSegment] = []
    current: Optional[SpeakerSegment] = None

    for segment in segments:
        if (
            current is not None
            and current.speaker == segment.speaker
            and segment.start - current.end < merge_threshold
        ):
            current = replace(
                current,
                text=current.text + " " + segment.text,
                end=max(current.end, segment.end),
                confidence=min(current.confidence, segment.confidence),
            )
        else:
            if current is not None:
                merged.append(current)
            current = replace(segment)

    if current is not None:
        merged.append(current)

    return merged
