"""Parse diarization engine output into DiarizationSpans.

WHY: The diarization script prints one JSON document: either
``{"segments": [{start, end, speaker}], "num_speakers", "model", "device"}``
or ``{"error": ..., "traceback": ...}``. The aligner needs plain spans and
a stable order, because its tie-break is order-dependent.

RULES:
- An "error" key → PROCESSING failure carrying the engine's message
- A bare list of spans is accepted as well as the wrapped document
- Spans are sorted by (start, end); the sort is stable
- Spans missing start/end/speaker → INPUT failure
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List

from whisper_stitch.core.ir import DiarizationSpan
from whisper_stitch.engines.whisper_output import read_json
from whisper_stitch.errors import FailureReason, StitchError

logger = logging.getLogger(__name__)


def parse_diarization_output(payload: Any) -> List[DiarizationSpan]:
    if isinstance(payload, dict):
        if payload.get("error"):
            raise StitchError(
                FailureReason.PROCESSING,
                "Diarization engine reported an error: {}".format(payload["error"]),
                {"traceback": payload.get("traceback")},
            )
        raw_spans = payload.get("segments") or []
    else:
        raw_spans = payload

    if not isinstance(raw_spans, list):
        raise StitchError(FailureReason.INPUT, "Diarization segments must be a list")

    spans: List[DiarizationSpan] = []
    for index, item in enumerate(raw_spans):
        try:
            spans.append(DiarizationSpan(
                start=float(item["start"]),
                end=float(item["end"]),
                speaker=str(item["speaker"]),
            ))
        except (KeyError, TypeError, ValueError) as exc:
            raise StitchError(
                FailureReason.INPUT,
                "Malformed diarization span #{}: {!r}".format(index, exc),
            )

    spans.sort(key=lambda span: (span.start, span.end))
    logger.debug(
        "Parsed %d diarization spans, %d distinct speakers",
        len(spans), len({span.speaker for span in spans}),
    )
    return spans


def load_diarization(path: Path) -> List[DiarizationSpan]:
    return parse_diarization_output(read_json(Path(path)))
