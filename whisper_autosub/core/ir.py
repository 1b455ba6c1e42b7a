"""Intermediate representation for caption tracks.

WHY: SRT files, auto-timed transcripts, and timeline enumerations all
describe the same thing: ordered, timed blocks of text. A single
dataclass lets every stage (parse, time, import, export) agree on it.

HOW: Caption holds a 1-based index, start/end in float seconds, and the
text as a list of lines. A caption track is simply a list[Caption].

RULES:
- index is positive and sequential within a track produced here
- start_s <= end_s for a well-formed caption
- lines preserves the caption's line breaks; it may be empty
- Tracks are ordered by ascending index
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Caption:
    """One timed caption block.

    Attributes:
        index: 1-based sequence number within its track.
        start_s: Start time in seconds.
        end_s: End time in seconds.
        lines: Caption text, one entry per displayed line.
    """

    index: int
    start_s: float
    end_s: float
    lines: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        """The caption text with line breaks joined by ``\\n``."""
        return "\n".join(self.lines)

    @property
    def duration_s(self) -> float:
        return self.end_s - self.start_s


def renumber(captions: list[Caption]) -> list[Caption]:
    """Return the captions reindexed 1..n in their current order."""
    return [
        Caption(index=i, start_s=c.start_s, end_s=c.end_s, lines=list(c.lines))
        for i, c in enumerate(captions, start=1)
    ]
