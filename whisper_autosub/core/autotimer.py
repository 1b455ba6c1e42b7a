"""Evenly distribute caption lines across a duration.

WHY: Fallback transcripts carry no timing. Spreading the lines evenly
over the media's duration gives a usable first pass that the editor can
then nudge caption by caption.

HOW: Every line gets the same slot length: total duration divided by the
line count, or a fixed fallback when the duration is unknown, floored at
a minimum readable duration. Slots are laid back-to-back from zero.

RULES:
- Unknown duration (None, 0, negative) → FALLBACK_LINE_DURATION_S per line
- Per-line duration is never below MIN_LINE_DURATION_S, even if the
  track then runs past the total duration
- No gaps: caption i starts where caption i-1 ends; the first starts at 0
- Empty input → empty track
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from whisper_autosub.config import FALLBACK_LINE_DURATION_S, MIN_LINE_DURATION_S
from whisper_autosub.core.ir import Caption


def line_duration(line_count: int, total_duration_s: Optional[float]) -> float:
    """Return the slot length each of ``line_count`` lines receives."""
    if total_duration_s and total_duration_s > 0:
        per_line = total_duration_s / line_count
    else:
        per_line = FALLBACK_LINE_DURATION_S
    return max(per_line, MIN_LINE_DURATION_S)


def auto_time(lines: Sequence[str], total_duration_s: Optional[float] = None) -> List[Caption]:
    """Lay caption lines out back-to-back across ``total_duration_s``.

    Args:
        lines: Caption texts in display order.
        total_duration_s: Target duration in seconds, or None when unknown.

    Returns:
        Captions indexed 1..n, each holding one line of text.
    """
    if not lines:
        return []

    per_line = line_duration(len(lines), total_duration_s)
    return [
        Caption(
            index=i + 1,
            start_s=i * per_line,
            end_s=(i + 1) * per_line,
            lines=line.split("\n"),
        )
        for i, line in enumerate(lines)
    ]
