"""Configuration constants, engine discovery candidates, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Chunking limits, alignment thresholds, and the
interpreter discovery order are plain data rather than logic, so
the CLI, the pipeline, and tests all read the same defaults.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values read from the environment with literal fallbacks.
python_candidates() turns the discovery settings into an ordered list.

RULES:
- No hardcoded absolute interpreter paths; discovery order is configuration
- PYTHON_EXECUTABLE, when set, is always tried first
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os
from typing import List, Mapping, Optional

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Output formats
# ---------------------------------------------------------------------------

SUPPORTED_OUTPUT_FORMATS = ("txt", "vtt", "srt", "json")
"""Output encodings shared by transcripts and speaker segments."""

DEFAULT_OUTPUT_FORMAT = os.getenv("DEFAULT_OUTPUT_FORMAT", "txt")

# ---------------------------------------------------------------------------
# Chunked transcription
# ---------------------------------------------------------------------------

DEFAULT_CHUNK_DURATION_MINUTES = float(os.getenv("DEFAULT_CHUNK_DURATION_MINUTES", "10"))
DEFAULT_OVERLAP_SECONDS = float(os.getenv("DEFAULT_OVERLAP_SECONDS", "30"))

MIN_CHUNK_DURATION_MINUTES = 1
MAX_CHUNK_DURATION_MINUTES = 30
MIN_OVERLAP_SECONDS = 0
MAX_OVERLAP_SECONDS = 120

# ---------------------------------------------------------------------------
# Diarization alignment
# ---------------------------------------------------------------------------

DEFAULT_OVERLAP_THRESHOLD = float(os.getenv("DEFAULT_OVERLAP_THRESHOLD", "0.1"))
DEFAULT_MERGE_THRESHOLD = float(os.getenv("DEFAULT_MERGE_THRESHOLD", "1.0"))
DEFAULT_CONFIDENCE_THRESHOLD = float(os.getenv("DEFAULT_CONFIDENCE_THRESHOLD", "0.1"))
DEFAULT_DIARIZATION_MODEL = os.getenv("DEFAULT_DIARIZATION_MODEL", "pyannote")

# ---------------------------------------------------------------------------
# External engines
# ---------------------------------------------------------------------------

ENGINE_PROBE_TIMEOUT_S = float(os.getenv("ENGINE_PROBE_TIMEOUT_S", "5"))

_DEFAULT_PYTHON_CANDIDATES = "python3,python"


def python_candidates(env: Optional[Mapping[str, str]] = None) -> List[str]:
    """Return the ordered list of interpreters to probe for the diarization engine.

    WHY: The diarization engine runs under a separate Python interpreter
    with PyTorch and pyannote installed. Where that interpreter lives
    differs per machine, so the search order must be configuration.

    HOW: PYTHON_EXECUTABLE first (when set), then the comma-separated
    DIARIZATION_PYTHON_CANDIDATES list (default "python3,python").

    RULES:
    - Blank entries are ignored
    - Duplicates are removed, first occurrence wins
    - env=None reads os.environ
    """
    source = os.environ if env is None else env
    ordered: List[str] = []

    explicit = source.get("PYTHON_EXECUTABLE", "").strip()
    if explicit:
        ordered.append(explicit)

    configured = source.get("DIARIZATION_PYTHON_CANDIDATES", _DEFAULT_PYTHON_CANDIDATES)
    for candidate in configured.split(","):
        candidate = candidate.strip()
        if candidate and candidate not in ordered:
            ordered.append(candidate)

    return ordered
