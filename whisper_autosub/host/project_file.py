"""JSON project files as a host document.

WHY: The CLI needs a host that survives between invocations: transcribe
in one command, list and edit captions in the next. A small JSON project
file holding compositions and their layers is enough, and validating it
against a schema up front turns a hand-edited typo into a clear error
instead of a crash halfway through an import.

HOW: load_project() reads the file, validates it with jsonschema, and
builds a MemoryDocument. save_project() serializes the document back.
new_project() creates a document with one composition and a selected
footage layer for a media file.

RULES:
- Files are UTF-8 JSON, written with 2-space indentation
- "layers" are stored top-to-bottom, matching Composition stacking
- frame_duration must be > 0; times must be >= 0
- Composition ids and layer ids are unique across the file
- Undo history is not persisted
- Any read/parse/validation failure raises ProjectFileError
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

from whisper_autosub.errors import ProjectFileError
from whisper_autosub.host.base import FOOTAGE_KIND, TEXT_KIND, TimedEntity
from whisper_autosub.host.memory import Composition, MemoryDocument

PROJECT_FORMAT_VERSION = 1

_LAYER_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["id", "kind", "in_point", "out_point"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "kind": {"enum": [TEXT_KIND, FOOTAGE_KIND]},
        "in_point": {"type": "number", "minimum": 0},
        "out_point": {"type": "number", "minimum": 0},
        "text": {"type": "string"},
        "position": {
            "type": ["array", "null"],
            "items": {"type": "number"},
            "minItems": 2,
            "maxItems": 2,
        },
        "source": {"type": ["string", "null"]},
        "selected": {"type": "boolean"},
    },
}

PROJECT_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["version", "compositions"],
    "properties": {
        "version": {"const": PROJECT_FORMAT_VERSION},
        "active_composition": {"type": ["string", "null"]},
        "compositions": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "name", "duration", "frame_duration", "width", "height", "layers"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "name": {"type": "string"},
                    "duration": {"type": "number", "minimum": 0},
                    "frame_duration": {"type": "number", "exclusiveMinimum": 0},
                    "width": {"type": "integer", "minimum": 1},
                    "height": {"type": "integer", "minimum": 1},
                    "layers": {"type": "array", "items": _LAYER_SCHEMA},
                },
            },
        },
    },
}


def _entity_from_json(data: Dict[str, Any]) -> TimedEntity:
    position = data.get("position")
    return TimedEntity(
        id=data["id"],
        kind=data["kind"],
        start_s=float(data["in_point"]),
        end_s=float(data["out_point"]),
        text=data.get("text", ""),
        position=tuple(position) if position else None,
        source_path=data.get("source"),
        selected=data.get("selected", False),
    )


def _entity_to_json(entity: TimedEntity) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": entity.id,
        "kind": entity.kind,
        "in_point": entity.start_s,
        "out_point": entity.end_s,
        "selected": entity.selected,
    }
    if entity.is_text:
        data["text"] = entity.text
    if entity.position is not None:
        data["position"] = list(entity.position)
    if entity.source_path is not None:
        data["source"] = entity.source_path
    return data


def _check_unique_ids(data: Dict[str, Any]) -> None:
    """Reject repeated composition ids and repeated layer ids."""
    comp_ids = set()
    layer_ids = set()
    for comp_data in data["compositions"]:
        if comp_data["id"] in comp_ids:
            raise ProjectFileError(
                "Invalid project file: duplicate composition id '{}'".format(comp_data["id"])
            )
        comp_ids.add(comp_data["id"])
        for layer in comp_data["layers"]:
            if layer["id"] in layer_ids:
                raise ProjectFileError(
                    "Invalid project file: duplicate layer id '{}'".format(layer["id"])
                )
            layer_ids.add(layer["id"])


def document_from_json(data: Dict[str, Any]) -> MemoryDocument:
    """Validate a parsed project dict and build a MemoryDocument from it."""
    try:
        jsonschema.validate(instance=data, schema=PROJECT_SCHEMA)
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "(root)"
        raise ProjectFileError(
            "Invalid project file at {}: {}".format(location, e.message)
        ) from e

    _check_unique_ids(data)

    document = MemoryDocument()
    for comp_data in data["compositions"]:
        comp = Composition(
            id=comp_data["id"],
            name=comp_data["name"],
            duration_s=float(comp_data["duration"]),
            frame_duration=float(comp_data["frame_duration"]),
            width=comp_data["width"],
            height=comp_data["height"],
            entities=[_entity_from_json(layer) for layer in comp_data["layers"]],
        )
        document.add_composition(comp, activate=False)

    active = data.get("active_composition")
    if active is not None and active not in document.compositions:
        raise ProjectFileError(
            "Invalid project file: active composition '{}' does not exist".format(active)
        )
    document.active_id = active
    return document


def document_to_json(document: MemoryDocument) -> Dict[str, Any]:
    """Serialize a MemoryDocument into a project dict."""
    return {
        "version": PROJECT_FORMAT_VERSION,
        "active_composition": document.active_id,
        "compositions": [
            {
                "id": comp.id,
                "name": comp.name,
                "duration": comp.duration_s,
                "frame_duration": comp.frame_duration,
                "width": comp.width,
                "height": comp.height,
                "layers": [_entity_to_json(e) for e in comp.entities_top_to_bottom()],
            }
            for comp in document.compositions.values()
        ],
    }


def load_project(path: str | Path) -> MemoryDocument:
    """Read a project file from disk.

    Raises:
        ProjectFileError: If the file is missing, is not JSON, or does not
                          match PROJECT_SCHEMA.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ProjectFileError("Cannot read project file {}: {}".format(path, e)) from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ProjectFileError("Project file {} is not valid JSON: {}".format(path, e)) from e
    return document_from_json(data)


def save_project(document: MemoryDocument, path: str | Path) -> Path:
    """Write a project file to disk and return its path.

    Raises:
        ProjectFileError: If the file cannot be written.
    """
    path = Path(path)
    content = json.dumps(document_to_json(document), indent=2, ensure_ascii=False) + "\n"
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ProjectFileError("Cannot write project file {}: {}".format(path, e)) from e
    return path


def new_project(
    media_path: str | Path,
    duration_s: float,
    fps: float = 25.0,
    width: int = 1920,
    height: int = 1080,
    name: Optional[str] = None,
) -> MemoryDocument:
    """Create a document with one active composition holding the media, selected."""
    if fps <= 0:
        raise ProjectFileError("fps must be positive, got {}".format(fps))
    media_path = Path(media_path)
    comp = Composition(
        name=name or media_path.stem,
        duration_s=duration_s,
        frame_duration=1.0 / fps,
        width=width,
        height=height,
    )
    comp.add_footage_entity(str(media_path), 0.0, duration_s, selected=True)
    document = MemoryDocument()
    document.add_composition(comp)
    return document
