"""Bounded external-process calls and interpreter discovery.

WHY: The engines run as separate processes that can hang on a bad file or
a missing model. Every call must have a deadline, and the interpreter for
the diarization engine differs per machine, so it is discovered from a
caller-supplied candidate list rather than hardcoded paths.

HOW: run_engine() wraps subprocess.run with a timeout; on expiry the child
is killed and a PROCESSING failure is raised. find_executable() probes
each candidate with ``--version`` and returns the first that exits 0.

RULES:
- Timeouts are mandatory; subprocess kills the child on expiry
- A missing binary is a SETUP failure, a timeout a PROCESSING failure
- Candidates are tried strictly in the given order
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import List, Mapping, Optional, Sequence

from whisper_stitch.errors import FailureReason, StitchError

logger = logging.getLogger(__name__)

# Variables that keep the engine's output unbuffered and UTF-8 clean.
ENGINE_ENVIRONMENT = {
    "PYTHONUNBUFFERED": "1",
    "PYTHONIOENCODING": "utf-8",
    "PYTHONDONTWRITEBYTECODE": "1",
    "PYTHONWARNINGS": "ignore",
}


def engine_environment(base: Optional[Mapping[str, str]] = None) -> dict:
    """Return base (default os.environ) overlaid with ENGINE_ENVIRONMENT."""
    env = dict(os.environ if base is None else base)
    env.update(ENGINE_ENVIRONMENT)
    return env


def run_engine(
    argv: Sequence[str],
    timeout_s: float,
    env: Optional[Mapping[str, str]] = None,
) -> "subprocess.CompletedProcess[str]":
    """Run an external engine command and return its completed process.

    A non-zero exit status is returned, not raised; the caller decides
    what it means for that engine.
    """
    logger.debug("Running %s (timeout %.0fs)", " ".join(argv), timeout_s)
    try:
        return subprocess.run(
            list(argv),
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=timeout_s,
            env=engine_environment(env),
            check=False,
        )
    except FileNotFoundError:
        raise StitchError(
            FailureReason.SETUP,
            "Executable not found: {}".format(argv[0]),
            {"argv": list(argv)},
        )
    except subprocess.TimeoutExpired:
        raise StitchError(
            FailureReason.PROCESSING,
            "{} did not finish within {:.0f}s".format(argv[0], timeout_s),
            {"argv": list(argv), "timeout_s": timeout_s},
        )


def find_executable(candidates: Sequence[str], timeout_s: float) -> str:
    """Return the first candidate whose ``--version`` probe succeeds."""
    failures: List[str] = []
    for candidate in candidates:
        try:
            result = run_engine([candidate, "--version"], timeout_s)
        except StitchError as exc:
            logger.info("Interpreter candidate %s unusable: %s", candidate, exc.message)
            failures.append(candidate)
            continue

        if result.returncode == 0:
            version = (result.stdout or result.stderr).strip()
            logger.info("Using interpreter %s (%s)", candidate, version)
            return candidate

        logger.info("Interpreter candidate %s exited with %d", candidate, result.returncode)
        failures.append(candidate)

    raise StitchError(
        FailureReason.SETUP,
        "No working interpreter found. Tried: {}. Set PYTHON_EXECUTABLE.".format(
            ", ".join(failures) or "(no candidates)"
        ),
        {"candidates": list(candidates)},
    )
