"""Timeline synchronizer: captions in, editable caption list out.

WHY: This is the only module that touches the host timeline. Import turns
a caption track into positioned text entities. Enumerate turns the text
entities back into an ordered, editable list. Write-back applies one
edit to exactly the entity it came from.

HOW: import_captions() opens one undo group and creates a text entity
per caption with frame-quantized in/out points, centred near the bottom
of the frame. enumerate_captions() re-reads the container every call and
returns text entities bottom-to-top, each tagged with its stable handle.
write_back() resolves the handle again and mutates the entity in its own
undo group.

RULES:
- The editable list is ordered bottom-to-top (oldest caption first);
  new captions land on top, so they appear at the end of the list
- The list is never cached; every enumerate re-derives it from the host
- write_back() takes a handle, never a list position
- Stored timings always land on a frame boundary
- Stored caption text has "\\n" line breaks and no blank lines
- Import is not transactional: an interrupted import keeps what it made
- No active container → UsageError; stale handle → EntityVanishedError
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from whisper_autosub.config import (
    CAPTION_BOTTOM_MARGIN_PX,
    IMPORT_UNDO_LABEL,
    UPDATE_UNDO_LABEL,
)
from whisper_autosub.core.ir import Caption
from whisper_autosub.core.segmenter import normalize_newlines
from whisper_autosub.core.timecode import format_clock, quantize_to_frame
from whisper_autosub.errors import EntityVanishedError, UsageError
from whisper_autosub.host.base import HostDocument, TimedEntity, TimelineContainer

logger = logging.getLogger(__name__)


@dataclass
class CaptionEntry:
    """One row of the editable caption list.

    Attributes:
        handle: Stable id of the originating text entity.
        start_s: Entity in point, seconds.
        end_s: Entity out point, seconds.
        first_line: First line of the caption text, for list display.
        text: Full caption text.
    """

    handle: str
    start_s: float
    end_s: float
    first_line: str
    text: str

    def display(self) -> str:
        return "{} > {} | {}".format(
            format_clock(self.start_s), format_clock(self.end_s), self.first_line
        )


def require_container(document: HostDocument) -> TimelineContainer:
    """Return the document's active container or raise UsageError."""
    container = document.active_container()
    if container is None:
        raise UsageError("Please select a composition first.")
    return container


def quantized_span(
    container: TimelineContainer, start_s: float, end_s: float
) -> Tuple[float, float]:
    """Snap a caption span to the container's frame grid.

    The end is clamped so it never precedes the start.
    """
    start = quantize_to_frame(max(start_s, 0.0), container.frame_duration)
    end = quantize_to_frame(max(end_s, 0.0), container.frame_duration)
    return start, max(start, end)


def caption_position(container: TimelineContainer) -> Tuple[float, float]:
    """Default on-screen anchor: horizontally centred, near the bottom."""
    return container.width / 2, container.height - CAPTION_BOTTOM_MARGIN_PX


def caption_text(text: str) -> str:
    """Normalize line endings and drop blank lines from caption text.

    A blank line ends an SRT block, so stored caption text never holds one.
    """
    lines = normalize_newlines(text or "").split("\n")
    return "\n".join(line for line in lines if line.strip())


def import_captions(captions: Iterable[Caption], document: HostDocument) -> List[TimedEntity]:
    """Create one text entity per caption in the active container.

    Args:
        captions: The caption track; entities are created in index order.
        document: Host document whose active container receives the entities.

    Returns:
        The created entities in creation order.

    Raises:
        UsageError: If the document has no active container.
    """
    container = require_container(document)
    x, y = caption_position(container)
    created: List[TimedEntity] = []

    with container.undo_group(IMPORT_UNDO_LABEL):
        for caption in sorted(captions, key=lambda c: c.index):
            entity = container.add_text_entity(caption_text(caption.text))
            start, end = quantized_span(container, caption.start_s, caption.end_s)
            container.set_entity_timing(entity, start, end)
            container.set_entity_position(entity, x, y)
            created.append(entity)

    logger.info("Imported %d captions into '%s'", len(created), container.name)
    return created


def _entry_for(entity: TimedEntity) -> CaptionEntry:
    text = entity.text or ""
    lines = normalize_newlines(text).split("\n")
    return CaptionEntry(
        handle=entity.id,
        start_s=entity.start_s,
        end_s=entity.end_s,
        first_line=lines[0],
        text=text,
    )


def enumerate_captions(document: HostDocument) -> List[CaptionEntry]:
    """List the container's text entities bottom-to-top.

    Raises:
        UsageError: If the document has no active container.
    """
    container = require_container(document)
    text_entities = [e for e in container.entities_top_to_bottom() if e.is_text]
    return [_entry_for(e) for e in reversed(text_entities)]


def write_back(
    document: HostDocument,
    handle: str,
    text: str,
    start_s: float,
    end_s: float,
) -> CaptionEntry:
    """Apply an edit to the caption entity identified by ``handle``.

    The caller re-runs enumerate_captions() to refresh any display.

    Returns:
        The updated entry for the entity.

    Raises:
        UsageError: If the document has no active container.
        EntityVanishedError: If the handle no longer resolves to a text entity.
    """
    container = require_container(document)
    entity = container.get_entity(handle)
    if entity is None or not entity.is_text:
        raise EntityVanishedError(handle)

    start, end = quantized_span(container, start_s, end_s)
    with container.undo_group(UPDATE_UNDO_LABEL):
        container.set_entity_text(entity, caption_text(text))
        container.set_entity_timing(entity, start, end)

    logger.info("Updated caption %s (%.3f-%.3f)", handle, start, end)
    return _entry_for(entity)


def entries_to_captions(entries: Iterable[CaptionEntry]) -> List[Caption]:
    """Turn an enumerated list back into a sequential caption track."""
    return [
        Caption(
            index=i,
            start_s=entry.start_s,
            end_s=entry.end_s,
            lines=normalize_newlines(entry.text).split("\n") if entry.text else [],
        )
        for i, entry in enumerate(entries, start=1)
    ]
