"""whisper_stitch — stitch speech-recognition and diarization output into one transcript.

WHY: whisper.cpp transcribes long audio one chunk at a time, and the
diarization engine labels speakers independently of the transcription.
Neither output is usable on its own: chunk timestamps are local, overlap
windows repeat text, and diarization spans carry no words. This package
turns those raw engine outputs into a single speaker-attributed transcript.

HOW: Three-stage pipeline — ingest (engine output adapters), stitch (core
assembler and aligner), render (pluggable formatters). Each stage is
independently testable; the core stage is pure.

RULES:
- The core never spawns processes, reads files, or logs
- All formatters consume the same data model from core.ir
- Orchestration failures are typed (setup / input / processing)
"""

__version__ = "1.0.3"
