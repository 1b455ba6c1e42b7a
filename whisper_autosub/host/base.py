"""Abstract host document interface.

WHY: The synchronizer must create, enumerate, and mutate timed entities
without knowing whether the host is a live application or a JSON file.
This base module enforces a consistent interface for both.

HOW: TimedEntity is a plain dataclass describing one layer-like object.
TimelineContainer is an ABC for the active composition: its timing
properties, entity stacking, mutation methods, and undo grouping.
HostDocument is an ABC exposing the active container.

RULES:
- TimelineContainer subclasses MUST implement every abstract member
- All mutations go through the container so hosts can record undo steps
- entities_top_to_bottom() returns a fresh list; callers may not mutate it
- add_text_entity() places the new entity on top of the stack
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import List, Optional, Tuple

TEXT_KIND = "text"
FOOTAGE_KIND = "footage"


@dataclass
class TimedEntity:
    """One positioned, time-bounded object in a host timeline.

    Attributes:
        id: Stable opaque handle assigned by the host.
        kind: ``"text"`` for caption entities, ``"footage"`` for media.
        start_s: In point in seconds.
        end_s: Out point in seconds.
        text: Text payload (text entities only), lines joined by ``\\n``.
        position: (x, y) anchor in container pixels, or None for default.
        source_path: Media file backing a footage entity.
        selected: Whether the entity is part of the current selection.
    """

    id: str
    kind: str
    start_s: float
    end_s: float
    text: str = ""
    position: Optional[Tuple[float, float]] = None
    source_path: Optional[str] = None
    selected: bool = False

    @property
    def is_text(self) -> bool:
        return self.kind == TEXT_KIND


class TimelineContainer(ABC):
    """The active composition of a host document."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name of the container."""

    @property
    @abstractmethod
    def duration_s(self) -> float:
        """Total container duration in seconds."""

    @property
    @abstractmethod
    def frame_duration(self) -> float:
        """Seconds per frame; all committed timings snap to this grid."""

    @property
    @abstractmethod
    def width(self) -> int:
        """Frame width in pixels."""

    @property
    @abstractmethod
    def height(self) -> int:
        """Frame height in pixels."""

    @abstractmethod
    def entities_top_to_bottom(self) -> List[TimedEntity]:
        """All entities in stacking order, topmost first."""

    @abstractmethod
    def get_entity(self, handle: str) -> Optional[TimedEntity]:
        """Look up an entity by handle; None when it no longer exists."""

    @abstractmethod
    def add_text_entity(self, text: str) -> TimedEntity:
        """Create a text entity on top of the stack spanning the container."""

    @abstractmethod
    def set_entity_timing(self, entity: TimedEntity, start_s: float, end_s: float) -> None:
        """Set an entity's in and out points."""

    @abstractmethod
    def set_entity_text(self, entity: TimedEntity, text: str) -> None:
        """Replace an entity's text payload."""

    @abstractmethod
    def set_entity_position(self, entity: TimedEntity, x: float, y: float) -> None:
        """Move an entity's anchor point."""

    @abstractmethod
    def undo_group(self, label: str) -> AbstractContextManager:
        """Context manager grouping all mutations inside it into one undo step."""

    def selected_entities(self) -> List[TimedEntity]:
        """Selected entities in stacking order, topmost first."""
        return [e for e in self.entities_top_to_bottom() if e.selected]


class HostDocument(ABC):
    """A host document that may have an active timeline container."""

    @abstractmethod
    def active_container(self) -> Optional[TimelineContainer]:
        """The container currently active for editing, or None."""
