"""SRT exporter for caption tracks read back from the timeline.

WHY: After editing captions on the timeline, users want the result as an
SRT file again, for delivery, or to re-import elsewhere.

HOW: Delegates to core.srt.render_srt(), renumbering first so the file
always counts 1..n regardless of how the track was assembled.

RULES:
- Media type: "application/x-subrip"
- An empty track produces an empty file
"""

from typing import List

from whisper_autosub.core.ir import Caption, renumber
from whisper_autosub.core.srt import render_srt
from whisper_autosub.formatters.base import BaseFormatter, FormatterOutput


class SRTFormatter(BaseFormatter):
    """Formatter that produces one SRT file."""

    @property
    def name(self) -> str:
        return "SRT Subtitles"

    def format(self, captions: List[Caption]) -> List[FormatterOutput]:
        return [
            FormatterOutput(
                suffix=".srt",
                content=render_srt(renumber(captions)),
                media_type="application/x-subrip",
            )
        ]
