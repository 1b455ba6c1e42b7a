"""Abstract base formatter and output container.

WHY: Every export format consumes the same caption track but produces
different file content. This base class gives the CLI one interface for
all of them.

HOW: BaseFormatter is an ABC with a ``name`` property and a ``format()``
method. FormatterOutput bundles a file suffix with its content and MIME
type.

RULES:
- ``format()`` returns a list; single-file formatters return one item
- ``suffix`` includes the extension, e.g. ``".srt"``
- The caller is responsible for prepending the output filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from whisper_autosub.core.ir import Caption


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the stem, e.g. ``".srt"``.
        content: The file content.
        media_type: MIME type for the content.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all caption track exporters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'SRT Subtitles'."""

    @abstractmethod
    def format(self, captions: List[Caption]) -> List[FormatterOutput]:
        """Convert a caption track into one or more output files."""
