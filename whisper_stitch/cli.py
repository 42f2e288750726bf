"""Command-line interface for whisper_stitch.

WHY: Users need a simple way to turn saved engine output into finished
transcripts from the terminal. The CLI wires together the engine output
adapters, the pipeline, and the formatters behind three commands.

HOW: argparse with three subcommands:
  assemble  CHUNK.json...                — stitch whisper.cpp chunk output
  speakers  TRANSCRIPTION.json DIAR.json — attribute speakers
  check                                  — find the diarization interpreter
Status messages go to stderr; output files are saved next to the first
input (or to --output-dir), or printed with --stdout.

RULES:
- Chunk files are given in chunk order; offsets are computed from
  --chunk-duration-minutes and --overlap-seconds
- Timestamps default to on for vtt/srt, off for txt/json (assemble)
- speakers --format json writes segments, speakers and metadata
- Output naming: {stem}-transcript.{ext} / {stem}-speakers.{ext}, numeric
  suffix on conflict (-transcript-2.srt)
- Failures print "Error: ..." plus a per-reason hint and exit with 1
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from whisper_stitch import __version__
from whisper_stitch.config import (
    DEFAULT_CHUNK_DURATION_MINUTES,
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_DIARIZATION_MODEL,
    DEFAULT_MERGE_THRESHOLD,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_OVERLAP_SECONDS,
    DEFAULT_OVERLAP_THRESHOLD,
    ENGINE_PROBE_TIMEOUT_S,
    SUPPORTED_OUTPUT_FORMATS,
    python_candidates,
)
from whisper_stitch.core.ir import AlignmentOptions
from whisper_stitch.engines import find_executable, load_diarization, load_transcription
from whisper_stitch.errors import StitchError
from whisper_stitch.formatters import get_formatter
from whisper_stitch.formatters.base import FormatterOutput
from whisper_stitch.formatters.json_output import JSONFormatter
from whisper_stitch.pipeline import attribute_speakers, stitch_chunks

logger = logging.getLogger(__name__)

_TIMED_FORMATS = frozenset({"vtt", "srt"})


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    RULES:
    - First attempt: {stem}{suffix} (e.g. interview-transcript.srt)
    - Conflict: insert a counter before the extension
      (e.g. interview-transcript-2.srt), starting at 2
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _emit(output: FormatterOutput, source: Path, args: argparse.Namespace) -> None:
    """Print the output or save it next to the source file."""
    if args.stdout:
        sys.stdout.write(output.content)
        if not output.content.endswith("\n"):
            sys.stdout.write("\n")
        return

    output_dir = Path(args.output_dir) if args.output_dir else source.parent
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = source.stem
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    _status("Saved: {}".format(path))


def _run_assemble(args: argparse.Namespace) -> None:
    paths = [Path(p) for p in args.chunks]
    results = [load_transcription(path) for path in paths]
    _status("Loaded {} chunk transcription(s)".format(len(results)))

    preserve = args.timestamps
    if preserve is None:
        preserve = args.format in _TIMED_FORMATS

    transcript = stitch_chunks(
        results,
        chunk_duration_minutes=args.chunk_duration_minutes,
        overlap_seconds=args.overlap_seconds,
        preserve_timestamps=preserve,
    ).unwrap()

    formatter = get_formatter(args.format)
    _emit(formatter.output(formatter.format_transcript(transcript), "transcript"), paths[0], args)


def _run_speakers(args: argparse.Namespace) -> None:
    started_at = time.monotonic()
    transcription_path = Path(args.transcription)
    transcription = load_transcription(transcription_path)
    spans = load_diarization(Path(args.diarization))
    _status("Loaded {} transcript segment(s) and {} diarization span(s)".format(
        len(transcription.segments or []), len(spans),
    ))

    options = AlignmentOptions(
        overlap_threshold=args.overlap_threshold,
        merge_threshold=args.merge_threshold,
        confidence_threshold=args.confidence_threshold,
    )
    result = attribute_speakers(
        transcription,
        spans,
        options,
        diarization_model=args.diarization_model,
        device_used=args.device,
        started_at=started_at,
    ).unwrap()

    formatter = get_formatter(args.format)
    if isinstance(formatter, JSONFormatter):
        content = formatter.format_diarization_result(result)
    else:
        content = formatter.format_speaker_segments(result.segments)

    _status("Found {} speaker(s)".format(result.metadata.num_speakers))
    _emit(formatter.output(content, "speakers"), transcription_path, args)


def _run_check(args: argparse.Namespace) -> None:
    candidates = python_candidates()
    _status("Probing: {}".format(", ".join(candidates)))
    interpreter = find_executable(candidates, ENGINE_PROBE_TIMEOUT_S)
    print("Diarization interpreter: {}".format(interpreter))


def _add_output_arguments(parser: argparse.ArgumentParser, default_format: str) -> None:
    parser.add_argument(
        "--format",
        choices=SUPPORTED_OUTPUT_FORMATS,
        default=default_format,
        help="Output format (default: %(default)s).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as the first input).",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the output instead of saving it.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separate from main() so tests can inspect the parser without running
    a command.
    """
    parser = argparse.ArgumentParser(
        prog="whisper_stitch",
        description="Stitch whisper.cpp chunk transcriptions and attribute "
                    "speakers from diarization output.",
    )
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    subparsers = parser.add_subparsers(dest="command", required=True)

    assemble = subparsers.add_parser(
        "assemble",
        help="Merge per-chunk whisper.cpp JSON output into one transcript.",
    )
    assemble.add_argument(
        "chunks",
        nargs="+",
        help="whisper.cpp JSON files, one per chunk, in chunk order.",
    )
    assemble.add_argument(
        "--chunk-duration-minutes",
        type=float,
        default=DEFAULT_CHUNK_DURATION_MINUTES,
        help="Chunk length used when splitting the audio (default: %(default)s).",
    )
    assemble.add_argument(
        "--overlap-seconds",
        type=float,
        default=DEFAULT_OVERLAP_SECONDS,
        help="Overlap between consecutive chunks (default: %(default)s).",
    )
    assemble.add_argument(
        "--timestamps",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Keep segment timing (default: on for vtt/srt, off otherwise).",
    )
    _add_output_arguments(assemble, DEFAULT_OUTPUT_FORMAT)
    assemble.set_defaults(handler=_run_assemble)

    speakers = subparsers.add_parser(
        "speakers",
        help="Attribute transcript segments to diarization speakers.",
    )
    speakers.add_argument(
        "transcription",
        help="whisper.cpp JSON output or an assembled transcript JSON.",
    )
    speakers.add_argument(
        "diarization",
        help="Diarization engine JSON output.",
    )
    speakers.add_argument(
        "--overlap-threshold",
        type=float,
        default=DEFAULT_OVERLAP_THRESHOLD,
        help="Minimum overlap in seconds to accept a speaker (default: %(default)s).",
    )
    speakers.add_argument(
        "--merge-threshold",
        type=float,
        default=DEFAULT_MERGE_THRESHOLD,
        help="Maximum gap in seconds to merge same-speaker segments (default: %(default)s).",
    )
    speakers.add_argument(
        "--confidence-threshold",
        type=float,
        default=DEFAULT_CONFIDENCE_THRESHOLD,
        help="Minimum covered fraction to accept a speaker (default: %(default)s).",
    )
    speakers.add_argument(
        "--diarization-model",
        default=DEFAULT_DIARIZATION_MODEL,
        help="Diarization model recorded in JSON metadata (default: %(default)s).",
    )
    speakers.add_argument(
        "--device",
        default="cpu",
        help="Device the diarization ran on, recorded in JSON metadata (default: %(default)s).",
    )
    _add_output_arguments(speakers, "json")
    speakers.set_defaults(handler=_run_speakers)

    check = subparsers.add_parser(
        "check",
        help="Find the Python interpreter that runs the diarization engine.",
    )
    check.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    check.set_defaults(handler=_run_check)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m whisper_stitch`` and the console script.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        args.handler(args)
    except StitchError as exc:
        logger.debug("Command failed", exc_info=True)
        print("Error: {}".format(exc.message), file=sys.stderr)
        print(exc.help_text(), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
