"""Parse whisper.cpp JSON output into a TranscriptionResult.

WHY: whisper.cpp's ``--output-json`` mode reports segment offsets in
milliseconds under ``transcription[].offsets`` and the detected language
under ``result.language``. The core works in float seconds on
TranscriptionResult, so this module converts between the two.

HOW: Each transcription entry with both offsets and text becomes a
Segment (ms / 1000). The full text is the concatenated entry text with
any inline ``[HH:MM:SS.mmm --> HH:MM:SS.mmm]`` markers removed.

RULES:
- Entries without offsets or text are skipped
- Segment text is stripped of surrounding whitespace
- Language defaults to "en", model to params.model or "unknown"
- load_transcription() also accepts our own transcript JSON, so an
  assembled transcript can be fed back into speaker attribution; its
  segments may be in seconds or as {start_ms, end_ms, text} records
- Malformed entries are an INPUT failure, never a KeyError
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from whisper_stitch.core.ir import Segment, TranscriptionResult
from whisper_stitch.errors import FailureReason, StitchError

logger = logging.getLogger(__name__)

_INLINE_TIMESTAMP_RE = re.compile(
    r"\[\d{2}:\d{2}:\d{2}\.\d{3} --> \d{2}:\d{2}:\d{2}\.\d{3}\]\s*"
)

DEFAULT_LANGUAGE = "en"
UNKNOWN_MODEL = "unknown"


def segments_from_milliseconds(items: Iterable[Dict[str, Any]]) -> List[Segment]:
    """Convert ``{start_ms, end_ms, text}`` records into Segments in seconds."""
    return [
        Segment(
            start=item["start_ms"] / 1000.0,
            end=item["end_ms"] / 1000.0,
            text=item["text"].strip(),
        )
        for item in items
    ]


def parse_whisper_json(
    payload: Dict[str, Any],
    model_used: Optional[str] = None,
    processing_time: int = 0,
) -> TranscriptionResult:
    """Build a TranscriptionResult from a whisper.cpp JSON document.

    Args:
        payload: The decoded whisper.cpp JSON output.
        model_used: Model identifier; overrides params.model when given.
        processing_time: Engine wall time in milliseconds.

    Returns:
        A TranscriptionResult with segments in seconds.
    """
    entries = payload.get("transcription") or []
    if not isinstance(entries, list):
        raise StitchError(
            FailureReason.INPUT,
            "whisper.cpp output has a non-list 'transcription' field",
        )

    segments: List[Segment] = []
    for index, entry in enumerate(entries):
        try:
            offsets = entry.get("offsets")
            text = entry.get("text")
            if not offsets or not text:
                continue
            segments.append(Segment(
                start=offsets["from"] / 1000.0,
                end=offsets["to"] / 1000.0,
                text=text.strip(),
            ))
        except (KeyError, TypeError, AttributeError) as exc:
            raise StitchError(
                FailureReason.INPUT,
                "Malformed whisper.cpp entry #{}: {!r}".format(index, exc),
            )

    full_text = "".join(entry.get("text") or "" for entry in entries)
    full_text = _INLINE_TIMESTAMP_RE.sub("", full_text).strip()

    language = (payload.get("result") or {}).get("language") or DEFAULT_LANGUAGE
    if model_used is None:
        model_used = (payload.get("params") or {}).get("model") or UNKNOWN_MODEL

    logger.debug("Parsed whisper.cpp output: %d segments, language=%s", len(segments), language)

    return TranscriptionResult(
        text=full_text,
        model_used=model_used,
        processing_time=processing_time,
        segments=segments,
        language=language,
    )


def read_json(path: Path) -> Any:
    """Read a JSON file, mapping missing files and bad JSON to INPUT errors."""
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        raise StitchError(FailureReason.INPUT, "File not found: {}".format(path))
    except (OSError, ValueError) as exc:
        raise StitchError(
            FailureReason.INPUT,
            "Could not read JSON from {}: {}".format(path, exc),
            {"path": str(path)},
        )


def load_transcription(path: Path, model_used: Optional[str] = None) -> TranscriptionResult:
    """Load a transcription from a whisper.cpp JSON file or a transcript JSON file."""
    payload = read_json(Path(path))
    if not isinstance(payload, dict):
        raise StitchError(FailureReason.INPUT, "Expected a JSON object in {}".format(path))

    if "transcription" in payload:
        return parse_whisper_json(payload, model_used=model_used)

    raw_segments = payload.get("segments")
    try:
        if _has_millisecond_segments(raw_segments):
            transcript = TranscriptionResult.from_dict(dict(payload, segments=None))
            transcript.segments = segments_from_milliseconds(raw_segments)
            return transcript
        return TranscriptionResult.from_dict(payload)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise StitchError(
            FailureReason.INPUT,
            "{} is neither whisper.cpp output nor a transcript: {!r}".format(path, exc),
        )


def _has_millisecond_segments(raw_segments: Any) -> bool:
    return (
        isinstance(raw_segments, list)
        and bool(raw_segments)
        and isinstance(raw_segments[0], dict)
        and "start_ms" in raw_segments[0]
    )
