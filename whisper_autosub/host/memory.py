"""In-memory host timeline with grouped undo.

WHY: The synchronizer needs a real host to run against outside of a
compositing application, for the CLI (via project files) and for tests.
This host behaves like a composition: new layers land on top, and every
batch of edits can be undone as one step.

HOW: Composition keeps a plain list of TimedEntity objects, index 0 on
top. Each mutation pushes an inverse callable onto the open undo group;
undo_group() opens a group (nesting joins the outer one) and closes it
on exit, whether or not the body raised. undo() replays the inverses of
the most recent group in reverse order.

RULES:
- Entity ids are UUID4 hex strings, unique per composition
- Mutations outside an undo group form a single-action undo step
- An exception inside undo_group() does NOT roll back finished mutations
- MemoryDocument.active_container() returns None when nothing is active
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

from whisper_autosub.host.base import (
    FOOTAGE_KIND,
    TEXT_KIND,
    HostDocument,
    TimedEntity,
    TimelineContainer,
)

logger = logging.getLogger(__name__)


@dataclass
class UndoStep:
    """A labelled batch of inverse actions."""

    label: str
    inverses: List[Callable[[], None]] = field(default_factory=list)


class Composition(TimelineContainer):
    """A composition holding timed entities in stacking order."""

    def __init__(
        self,
        name: str = "Comp 1",
        duration_s: float = 60.0,
        frame_duration: float = 1.0 / 25,
        width: int = 1920,
        height: int = 1080,
        entities: Optional[List[TimedEntity]] = None,
        id: Optional[str] = None,
    ) -> None:
        if frame_duration <= 0:
            raise ValueError("frame_duration must be positive, got {}".format(frame_duration))
        self.id = id or uuid.uuid4().hex
        self._name = name
        self._duration_s = duration_s
        self._frame_duration = frame_duration
        self._width = width
        self._height = height
        self._entities: List[TimedEntity] = list(entities or [])
        self._undo_stack: List[UndoStep] = []
        self._open_step: Optional[UndoStep] = None
        self._group_depth = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def duration_s(self) -> float:
        return self._duration_s

    @property
    def frame_duration(self) -> float:
        return self._frame_duration

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    # ------------------------------------------------------------------
    # Stacking
    # ------------------------------------------------------------------

    def entities_top_to_bottom(self) -> List[TimedEntity]:
        return list(self._entities)

    def get_entity(self, handle: str) -> Optional[TimedEntity]:
        for entity in self._entities:
            if entity.id == handle:
                return entity
        return None

    def add_footage_entity(
        self,
        source_path: str,
        start_s: float = 0.0,
        end_s: Optional[float] = None,
        selected: bool = False,
    ) -> TimedEntity:
        """Place a media file on top of the stack (not recorded for undo)."""
        entity = TimedEntity(
            id=uuid.uuid4().hex,
            kind=FOOTAGE_KIND,
            start_s=start_s,
            end_s=self._duration_s if end_s is None else end_s,
            source_path=str(source_path),
            selected=selected,
        )
        self._entities.insert(0, entity)
        return entity

    def add_text_entity(self, text: str) -> TimedEntity:
        entity = TimedEntity(
            id=uuid.uuid4().hex,
            kind=TEXT_KIND,
            start_s=0.0,
            end_s=self._duration_s,
            text=text,
        )
        self._entities.insert(0, entity)
        self._record("Add Text", lambda: self._entities.remove(entity))
        return entity

    def remove_entity(self, handle: str) -> Optional[TimedEntity]:
        """Delete an entity, as a user would in the host; returns it or None."""
        entity = self.get_entity(handle)
        if entity is None:
            return None
        position = self._entities.index(entity)
        self._entities.remove(entity)
        self._record("Delete", lambda: self._entities.insert(position, entity))
        return entity

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_entity_timing(self, entity: TimedEntity, start_s: float, end_s: float) -> None:
        old = (entity.start_s, entity.end_s)
        entity.start_s, entity.end_s = start_s, end_s

        def _restore() -> None:
            entity.start_s, entity.end_s = old

        self._record("Timing", _restore)

    def set_entity_text(self, entity: TimedEntity, text: str) -> None:
        old = entity.text
        entity.text = text
        self._record("Text", lambda: setattr(entity, "text", old))

    def set_entity_position(self, entity: TimedEntity, x: float, y: float) -> None:
        old = entity.position
        entity.position = (x, y)
        self._record("Position", lambda: setattr(entity, "position", old))

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------

    @contextmanager
    def undo_group(self, label: str) -> Iterator[None]:
        if self._group_depth == 0:
            self._open_step = UndoStep(label=label)
        self._group_depth += 1
        try:
            yield
        finally:
            self._group_depth -= 1
            if self._group_depth == 0:
                step, self._open_step = self._open_step, None
                if step is not None and step.inverses:
                    self._undo_stack.append(step)

    def _record(self, label: str, inverse: Callable[[], None]) -> None:
        if self._open_step is not None:
            self._open_step.inverses.append(inverse)
        else:
            self._undo_stack.append(UndoStep(label=label, inverses=[inverse]))

    @property
    def undo_labels(self) -> List[str]:
        """Labels of the recorded undo steps, oldest first."""
        return [step.label for step in self._undo_stack]

    def undo(self) -> Optional[str]:
        """Revert the most recent undo step; returns its label or None."""
        if not self._undo_stack:
            return None
        step = self._undo_stack.pop()
        for inverse in reversed(step.inverses):
            inverse()
        logger.info("Undid '%s' (%d actions)", step.label, len(step.inverses))
        return step.label


class MemoryDocument(HostDocument):
    """A document holding compositions, one of which may be active."""

    def __init__(
        self,
        compositions: Optional[List[Composition]] = None,
        active_id: Optional[str] = None,
    ) -> None:
        self.compositions: Dict[str, Composition] = {}
        for comp in compositions or []:
            self.compositions[comp.id] = comp
        self.active_id = active_id

    def add_composition(self, comp: Composition, activate: bool = True) -> Composition:
        self.compositions[comp.id] = comp
        if activate:
            self.active_id = comp.id
        return comp

    def active_container(self) -> Optional[Composition]:
        if self.active_id is None:
            return None
        return self.compositions.get(self.active_id)
