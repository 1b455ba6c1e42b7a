"""SRT timestamp and frame conversions.

WHY: Every caption time crosses three representations: float seconds
(the IR), "HH:MM:SS,mmm" strings (SRT files and the editor fields), and
host frames (what the timeline actually stores). Keeping all conversions
in one module makes the round-trip contract testable in one place.

HOW: format_timecode() rounds to the nearest millisecond before splitting
into fields, so sub-millisecond noise never produces "1000" milliseconds.
parse_timecode() reads fields leniently: any unparseable field counts as
zero, and fewer than three fields yields 0.0.

RULES:
- Negative seconds are clamped to 0 before formatting
- Hours are not wrapped at 24
- parse_timecode(format_timecode(x)) is within 1 ms of x for x >= 0
- "," is the millisecond separator; allow_dot=True also accepts "."
- quantize_to_frame() rounds to the nearest frame boundary; a half frame
  rounds up, never to the even neighbour
"""

from __future__ import annotations

import math
import re

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def format_timecode(seconds: float) -> str:
    """Format seconds as an SRT timestamp ``HH:MM:SS,mmm``."""
    if seconds < 0:
        seconds = 0.0
    total_ms = int(round(seconds * 1000))
    total_s, ms = divmod(total_ms, 1000)
    h, rem = divmod(total_s, 3600)
    m, s = divmod(rem, 60)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(h, m, s, ms)


def format_clock(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS`` (truncated), used for list display."""
    if seconds < 0:
        seconds = 0.0
    total_s = int(seconds)
    h, rem = divmod(total_s, 3600)
    m, s = divmod(rem, 60)
    return "{:02d}:{:02d}:{:02d}".format(h, m, s)


def _leading_int(text: str) -> int:
    match = _LEADING_INT_RE.match(text)
    return int(match.group(1)) if match else 0


def parse_timecode(text: str, allow_dot: bool = False) -> float:
    """Parse an SRT timestamp into seconds.

    WHY: Timestamps come from transcription output and from hand-edited
    fields, neither of which is guaranteed clean. A bad timestamp should
    degrade to 0 rather than abort a whole import.

    HOW: Split on ":"; the third field is split on "," (and on "." when
    allow_dot is set) into seconds and milliseconds. The millisecond
    field is read as a decimal fraction so "5" means 500 ms, as in
    "00:00:01,5".

    Args:
        text: Timestamp such as ``"00:01:02,345"``.
        allow_dot: Also accept ``"."`` as the millisecond separator.

    Returns:
        Seconds as a float; 0.0 when fewer than three fields are present.
    """
    parts = (text or "").strip().split(":")
    if len(parts) < 3:
        return 0.0

    sec_field = parts[2]
    if allow_dot:
        sec_field = sec_field.replace(".", ",")
    sec_parts = sec_field.split(",", 1)

    h = _leading_int(parts[0])
    m = _leading_int(parts[1])
    s = _leading_int(sec_parts[0])
    frac = 0.0
    if len(sec_parts) > 1:
        digits = re.match(r"\d*", sec_parts[1].strip()).group(0)
        if digits:
            frac = int(digits) / (10 ** len(digits))

    return h * 3600 + m * 60 + s + frac


def to_frames(seconds: float, frame_duration: float) -> float:
    """Convert seconds to a (fractional) frame count."""
    return seconds * (1.0 / frame_duration)


def to_seconds(frames: float, frame_duration: float) -> float:
    """Convert a frame count back to seconds."""
    return frames * frame_duration


def quantize_to_frame(seconds: float, frame_duration: float) -> float:
    """Round seconds to the nearest frame boundary of the host timeline.

    Half frames round up: 112.5 frames becomes 113.
    """
    return to_seconds(math.floor(to_frames(seconds, frame_duration) + 0.5), frame_duration)
