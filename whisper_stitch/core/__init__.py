"""Core data model, assembly and alignment modules.

WHY: The core package contains the only real design decisions of the
project: how chunk transcripts are merged and how transcript spans are
attributed to speakers. Everything else feeds it or renders its output.

HOW: ir.py defines the data structures, assembler.py merges chunk
transcriptions, alignment.py attributes segments to speakers, and
timestamps.py formats cue clock strings.

RULES:
- Every function here is pure: no I/O, no logging, no process calls
- Documented edge cases degrade to fallback values instead of raising
"""
