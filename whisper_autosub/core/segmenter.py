"""Split a raw transcript into caption-sized lines.

WHY: When the transcription tool leaves only a .txt transcript (or just
console output), there are no caption boundaries at all. This module
produces a deterministic, bounded-length line list that the auto-timer
can spread across the media duration.

HOW: Normalize line endings, split into paragraph blocks on blank lines,
sentence-split blocks that are too long, then greedily word-wrap any
line that is still too long.

RULES:
- Blocks over MAX_BLOCK_CHARS (140) are split after . ! ? + whitespace
- Lines over MAX_LINE_CHARS (90) are wrapped at whitespace only
- A single word longer than the limit stays intact on its own line
- Output never contains empty strings
- Idempotent: re-segmenting "\\n\\n".join(output) returns output
"""

from __future__ import annotations

import re
from typing import List

from whisper_autosub.config import MAX_BLOCK_CHARS, MAX_LINE_CHARS

_PARAGRAPH_RE = re.compile(r"\n{2,}")
_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")


def normalize_newlines(text: str) -> str:
    """Convert ``\\r\\n`` and lone ``\\r`` line endings to ``\\n``."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def wrap_line(line: str, width: int = MAX_LINE_CHARS) -> List[str]:
    """Greedily wrap a line into sub-lines of at most ``width`` characters.

    Lines already within the width are returned unchanged (internal
    whitespace included). Longer lines are rebuilt from their words joined
    by single spaces.
    """
    if len(line) <= width:
        return [line]

    wrapped: List[str] = []
    current = ""
    for word in line.split():
        candidate = "{} {}".format(current, word) if current else word
        if len(candidate) > width and current:
            wrapped.append(current)
            current = word
        else:
            current = candidate
    if current:
        wrapped.append(current)
    return wrapped


def split_transcript(text: str | None) -> List[str]:
    """Turn raw transcript text into an ordered list of caption lines.

    Args:
        text: Raw transcript; may be None, empty, or use any line endings.

    Returns:
        Non-empty caption line strings in transcript order. Empty when the
        transcript holds no visible text.
    """
    text = normalize_newlines(text or "").strip()
    if not text:
        return []

    lines: List[str] = []
    for block in _PARAGRAPH_RE.split(text):
        block = block.strip()
        if not block:
            continue
        if len(block) > MAX_BLOCK_CHARS:
            for sentence in _SENTENCE_END_RE.split(block):
                sentence = sentence.strip()
                if sentence:
                    lines.append(sentence)
        else:
            lines.append(block)

    wrapped: List[str] = []
    for line in lines:
        wrapped.extend(wrap_line(line))
    return wrapped
