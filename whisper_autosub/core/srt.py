"""SRT caption file reader and writer.

WHY: SRT is the contract with the transcription tool and with every other
caption tool an editor might use. Output from speech-to-text is not
guaranteed to be well-formed, so the reader has to keep going past bad
blocks instead of failing the whole import.

HOW: render_srt() emits index, "start --> end", text lines, blank line
for each caption. parse_srt() walks the text line by line: skip blanks,
read an index line, read a timing line, collect text until the next
blank line. Any block whose timing line lacks "-->" is skipped up to
its terminating blank line.

RULES:
- Output is UTF-8 with "\\n" line endings and a blank line after every block
- Blank caption lines are not written, since a blank line ends a block
- Parsed captions are renumbered 1..n in file order
- Styling tags (<i>, <font ...>) are stripped from parsed text
- A block that starts directly with its timing line (missing index) is kept
- Timing halves accept "," or "." as the millisecond separator
- parse_srt() never raises on malformed content
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List

from whisper_autosub.core.ir import Caption
from whisper_autosub.core.timecode import format_timecode, parse_timecode

logger = logging.getLogger(__name__)

TIMING_SEPARATOR = "-->"
TAG_RE = re.compile(r"<[^>]*>")


def strip_tags(line: str) -> str:
    """Remove angle-bracket styling tags from a caption line."""
    return TAG_RE.sub("", line)


def render_srt(captions: Iterable[Caption]) -> str:
    """Serialize captions to SRT text.

    Args:
        captions: Captions in output order; each caption's own index is
                  written as its sequence number.

    Returns:
        The SRT document. Empty string when there are no captions.
    """
    blocks: List[str] = []
    for caption in captions:
        block = [
            str(caption.index),
            "{} {} {}".format(
                format_timecode(caption.start_s),
                TIMING_SEPARATOR,
                format_timecode(caption.end_s),
            ),
        ]
        block.extend(line for line in caption.lines if line.strip())
        blocks.append("\n".join(block) + "\n\n")
    return "".join(blocks)


def parse_srt(content: str) -> List[Caption]:
    """Parse SRT text into captions, skipping malformed blocks.

    Args:
        content: Raw SRT text; a leading BOM and any line endings are accepted.

    Returns:
        Well-formed captions in file order, renumbered from 1.
    """
    lines = content.lstrip("\ufeff").splitlines()
    n = len(lines)
    captions: List[Caption] = []
    i = 0

    while i < n:
        # Skip blank lines before the next block's index
        while i < n and not lines[i].strip():
            i += 1
        if i >= n:
            break

        header = lines[i]
        i += 1
        if TIMING_SEPARATOR in header:
            timing = header
        else:
            if i >= n or TIMING_SEPARATOR not in lines[i]:
                logger.debug("Skipping malformed SRT block at line %d: %r", i, header)
                while i < n and lines[i].strip():
                    i += 1
                continue
            timing = lines[i]
            i += 1

        start_text, end_text = timing.split(TIMING_SEPARATOR, 1)
        start_s = parse_timecode(start_text, allow_dot=True)
        end_s = parse_timecode(end_text, allow_dot=True)

        text_lines: List[str] = []
        while i < n and lines[i].strip():
            text_lines.append(strip_tags(lines[i]))
            i += 1

        captions.append(Caption(
            index=len(captions) + 1,
            start_s=start_s,
            end_s=end_s,
            lines=text_lines,
        ))

    return captions


def read_srt_file(path: str | Path) -> List[Caption]:
    """Read and parse an SRT file (UTF-8, BOM tolerated)."""
    content = Path(path).read_text(encoding="utf-8-sig", errors="replace")
    return parse_srt(content)


def write_srt_file(captions: Iterable[Caption], path: str | Path) -> Path:
    """Write captions to ``path`` as UTF-8 SRT and return the path."""
    path = Path(path)
    path.write_text(render_srt(captions), encoding="utf-8")
    return path
