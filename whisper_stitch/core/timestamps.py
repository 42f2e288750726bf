"""Clock-string helpers for WebVTT and SubRip cues.

RULES:
- Hours, minutes, seconds are zero-padded to 2 digits, milliseconds to 3
- Values are truncated to whole milliseconds, never rounded up
- WebVTT separates milliseconds with ".", SubRip with ","
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal


def _total_milliseconds(seconds: float) -> int:
    # repr() is the shortest decimal that round-trips, so 1.001 floors to
    # 1001 ms instead of the 1000.999... that binary multiplication gives.
    scaled = Decimal(repr(float(seconds))) * 1000
    return max(0, int(scaled.to_integral_value(rounding=ROUND_FLOOR)))


def format_timestamp(seconds: float, srt: bool = False) -> str:
    """Format float seconds as ``HH:MM:SS.mmm`` (or ``HH:MM:SS,mmm`` for SRT)."""
    total_ms = _total_milliseconds(seconds)

    hours, remainder = divmod(total_ms, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    secs, millis = divmod(remainder, 1000)

    separator = "," if srt else "."
    return "{:02d}:{:02d}:{:02d}{}{:03d}".format(hours, minutes, secs, separator, millis)


def vtt_timestamp(seconds: float) -> str:
    return format_timestamp(seconds)


def srt_timestamp(seconds: float) -> str:
    return format_timestamp(seconds, srt=True)
