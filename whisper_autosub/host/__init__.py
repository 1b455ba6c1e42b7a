"""Host timeline collaborators.

WHY: Captions end up as text entities in a host document (a composition
in a compositing app, or a project file on disk). The synchronizer talks
to the host only through the small interface in base.py, so any host
can be plugged in.

HOW: base.py defines the TimedEntity dataclass and the HostDocument /
TimelineContainer ABCs. memory.py is an in-memory host with undo groups.
project_file.py loads and saves that in-memory host as JSON.

RULES:
- Entities are owned by the host; callers only hold their id handles
- Stacking order is top-to-bottom: index 0 is the topmost entity
"""

from whisper_autosub.host.base import HostDocument, TimedEntity, TimelineContainer
from whisper_autosub.host.memory import Composition, MemoryDocument

__all__ = [
    "Composition",
    "HostDocument",
    "MemoryDocument",
    "TimedEntity",
    "TimelineContainer",
]
