"""Caption track exporter registry: pluggable format hub.

WHY: The CLI needs a single lookup to find the right exporter by name.
A central dict makes it trivial to add new formats: create the formatter
class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["srt"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from whisper_autosub.formatters.plain_text import PlainTextFormatter
from whisper_autosub.formatters.srt_captions import SRTFormatter

if TYPE_CHECKING:
    from whisper_autosub.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "srt": SRTFormatter,
    "plain_text": PlainTextFormatter,
}
