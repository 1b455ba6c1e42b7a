"""Plain text exporter: caption texts as paragraphs.

WHY: Editors often want the words without the timing: for a script,
for review, or to hand-correct and feed back through the segmenter.

HOW: Each caption's text becomes one paragraph; paragraphs are separated
by a blank line. Because the segmenter splits on blank lines, running
this output back through split_transcript() yields the same caption
lines (for lines within the segmenter's limits).

RULES:
- Captions with no text are skipped
- Output ends with a single trailing newline (empty track → "")
- Media type: "text/plain"
"""

from typing import List

from whisper_autosub.core.ir import Caption
from whisper_autosub.formatters.base import BaseFormatter, FormatterOutput


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces a paragraph-per-caption text file."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, captions: List[Caption]) -> List[FormatterOutput]:
        paragraphs = [c.text.strip() for c in captions if c.text.strip()]
        content = "\n\n".join(paragraphs) + "\n" if paragraphs else ""
        return [
            FormatterOutput(
                suffix=".txt",
                content=content,
                media_type="text/plain",
            )
        ]
