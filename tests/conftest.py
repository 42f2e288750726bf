"""Shared test fixtures for the whisper_stitch test suite.

WHY: Assembler, aligner, formatter, engine and CLI tests all need the same
small set of engine outputs. Centralizing them keeps every module testing
against identical data.

HOW: Module-level constants hold raw engine JSON (whisper.cpp and the
diarization script); fixtures return fresh copies or dataclasses built
from them.

RULES:
- The two-chunk fixture is the overlap example: chunk 1 starts at 8s with
  a 2s overlap, so its first segment sits exactly on the cutoff
- Raw engine dicts are deep-copied per test so tests may mutate them
"""

import copy
from typing import Any, Dict

import pytest

from whisper_stitch.core.ir import (
    ChunkTranscription,
    DiarizationSpan,
    Segment,
    SpeakerSegment,
    TranscriptionResult,
)


# ---------------------------------------------------------------------------
# Raw engine output
# ---------------------------------------------------------------------------

WHISPER_CPP_OUTPUT: Dict[str, Any] = {
    "systeminfo": "AVX = 1 | NEON = 0 | METAL = 0",
    "model": {"type": "base", "multilingual": False},
    "params": {"model": "base.en", "language": "en", "translate": False},
    "result": {"language": "en"},
    "transcription": [
        {
            "timestamps": {"from": "00:00:00,000", "to": "00:00:04,000"},
            "offsets": {"from": 0, "to": 4000},
            "text": " Good morning everyone.",
        },
        {
            "timestamps": {"from": "00:00:04,000", "to": "00:00:10,000"},
            "offsets": {"from": 4000, "to": 10000},
            "text": " Let's get started.",
        },
    ],
}

DIARIZATION_OUTPUT: Dict[str, Any] = {
    "segments": [
        {"start": 4.2, "end": 10.0, "speaker": "SPEAKER_01"},
        {"start": 0.0, "end": 4.2, "speaker": "SPEAKER_00"},
    ],
    "num_speakers": 2,
    "model": "pyannote-3.1",
    "device": "cpu",
}


@pytest.fixture
def whisper_cpp_output():
    return copy.deepcopy(WHISPER_CPP_OUTPUT)


@pytest.fixture
def diarization_output():
    return copy.deepcopy(DIARIZATION_OUTPUT)


# ---------------------------------------------------------------------------
# Data model fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def first_chunk_result():
    return TranscriptionResult(
        text="hello world",
        model_used="base.en",
        processing_time=100,
        segments=[Segment(0.0, 5.0, "hello"), Segment(5.0, 10.0, "world")],
        language="en",
    )


@pytest.fixture
def second_chunk_result():
    return TranscriptionResult(
        text="world2 foo",
        model_used="base.en",
        processing_time=150,
        segments=[Segment(0.0, 3.0, "world2"), Segment(3.0, 6.0, "foo")],
        language="en",
    )


@pytest.fixture
def overlapping_chunks(first_chunk_result, second_chunk_result):
    """Two chunks, the second starting at 8s inside a 2s overlap window."""
    return [
        ChunkTranscription(chunk_index=0, start_offset=0.0, result=first_chunk_result),
        ChunkTranscription(chunk_index=1, start_offset=8.0, result=second_chunk_result),
    ]


@pytest.fixture
def two_speaker_spans():
    return [
        DiarizationSpan(0.0, 4.0, "SPEAKER_00"),
        DiarizationSpan(4.0, 10.0, "SPEAKER_01"),
    ]


@pytest.fixture
def speaker_segments():
    return [
        SpeakerSegment(text="Good morning.", speaker="speaker00", start=0.0, end=4.0, confidence=1.0),
        SpeakerSegment(text="Let's begin.", speaker="speaker01", start=4.5, end=10.25, confidence=0.8),
    ]
