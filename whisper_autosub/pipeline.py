"""Orchestrator: media file in, caption entities out.

WHY: The transcription tool may leave an SRT, only a .txt transcript,
or nothing but console output. Editors want one action that copes with
all three and ends with captions on the timeline, or a clear reason why
not.

HOW: transcribe_and_import() checks the request (active composition,
selected footage, model name), runs the transcription command through an
injectable runner, then looks for <stem>.srt, <stem>.txt, and finally
the captured stdout. Text fallbacks are segmented and auto-timed against
the footage/composition duration and written out as <stem>.srt before
importing, so the user always ends up with an editable file.
import_srt_file() is the manual path: an existing SRT straight into the
timeline.

RULES:
- Usage problems are raised before anything runs
- Channel order: SRT file, then TXT file, then stdout
- Fallback duration = max(footage span, composition duration)
- Console timestamp prefixes "[00:00.000 --> 00:02.000]" are stripped
  from stdout; everything else is kept as-is (lossy best-effort)
- No usable channel → MissingOutputError, no entities created
- on_status (optional) receives short progress strings
- File read/write failures surface as UsageError naming the path
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from whisper_autosub.config import (
    DEFAULT_LANGUAGE,
    DEFAULT_MODEL,
    DEFAULT_OUTPUT_FORMAT,
    validate_model,
)
from whisper_autosub.core.autotimer import auto_time
from whisper_autosub.core.ir import Caption
from whisper_autosub.core.segmenter import normalize_newlines, split_transcript
from whisper_autosub.core.srt import read_srt_file, write_srt_file
from whisper_autosub.errors import MissingOutputError, UsageError
from whisper_autosub.host.base import HostDocument, TimedEntity, TimelineContainer
from whisper_autosub.sync import import_captions, require_container
from whisper_autosub.transcriber import (
    CommandRunner,
    build_whisper_command,
    render_command,
    run_whisper_command,
)

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]

SOURCE_SRT = "srt"
SOURCE_TXT = "txt"
SOURCE_STDOUT = "stdout"

_CONSOLE_TIMESTAMP_RE = re.compile(r"^\s*\[[\d:.,]+\s*-->\s*[\d:.,]+\]\s*")


@dataclass
class PipelineResult:
    """What one transcribe-and-import run produced.

    Attributes:
        srt_path: The SRT file that was imported (found or generated).
        source: Which channel the captions came from: "srt", "txt", "stdout".
        captions: The imported caption track.
        entities: Text entities created in the timeline.
    """

    srt_path: Path
    source: str
    captions: List[Caption] = field(default_factory=list)
    entities: List[TimedEntity] = field(default_factory=list)


def _notify(on_status: Optional[StatusCallback], msg: str) -> None:
    if on_status:
        on_status(msg)


def has_visible_text(text: Optional[str]) -> bool:
    """True when ``text`` holds anything besides whitespace."""
    return bool(text and text.strip())


def _read_captions(srt_path: Path) -> List[Caption]:
    try:
        return read_srt_file(srt_path)
    except OSError as e:
        raise UsageError("Cannot read SRT file {}: {}".format(srt_path, e)) from e


def _write_captions(captions: List[Caption], srt_path: Path) -> None:
    try:
        write_srt_file(captions, srt_path)
    except OSError as e:
        raise UsageError("Cannot write SRT file {}: {}".format(srt_path, e)) from e


def clean_console_transcript(stdout: str) -> str:
    """Strip whisper's per-segment timestamp prefixes from console output."""
    lines = normalize_newlines(stdout).split("\n")
    return "\n".join(_CONSOLE_TIMESTAMP_RE.sub("", line) for line in lines)


def build_captions_from_text(text: str, total_duration_s: Optional[float]) -> List[Caption]:
    """Segment raw transcript text and auto-time it across the duration."""
    return auto_time(split_transcript(text), total_duration_s)


def find_source_footage(container: TimelineContainer) -> TimedEntity:
    """Return the first selected entity backed by a media file.

    Raises:
        UsageError: If no selected entity has a source file.
    """
    for entity in container.selected_entities():
        if entity.source_path:
            return entity
    raise UsageError("Select a footage layer (video/audio) in the active comp.")


def transcribe_and_import(
    document: HostDocument,
    output_dir: str | Path | None = None,
    model: str = DEFAULT_MODEL,
    language: str = DEFAULT_LANGUAGE,
    runner: Optional[CommandRunner] = None,
    on_status: Optional[StatusCallback] = None,
) -> PipelineResult:
    """Transcribe the selected footage and import the captions.

    Args:
        document: Host document with an active composition and a selected
                  footage entity.
        output_dir: Where the tool writes transcripts; defaults to the
                    media file's folder.
        model: Whisper model size.
        language: Spoken language name.
        runner: Executes the command; defaults to run_whisper_command.
        on_status: Optional progress callback.

    Returns:
        PipelineResult describing the imported track.

    Raises:
        UsageError: No active composition, no selected footage, bad model,
                    or an SRT file that cannot be read or written.
        ExternalToolError: The tool failed to start or exited non-zero.
        MissingOutputError: No SRT and no transcript text on any channel.
    """
    container = require_container(document)
    footage = find_source_footage(container)
    validate_model(model)

    media_path = Path(footage.source_path)
    out_dir = Path(output_dir) if output_dir else media_path.parent
    language = language or DEFAULT_LANGUAGE

    command = build_whisper_command(media_path, out_dir, model, language, DEFAULT_OUTPUT_FORMAT)
    _notify(on_status, "Running Whisper... this blocks until it finishes.")
    run = (runner or run_whisper_command)(command)

    stem = media_path.stem
    srt_path = out_dir / "{}.srt".format(stem)
    txt_path = out_dir / "{}.txt".format(stem)

    if srt_path.is_file():
        _notify(on_status, "Found SRT: {}".format(srt_path))
        captions = _read_captions(srt_path)
        source = SOURCE_SRT
    else:
        total_duration = max(footage.end_s - footage.start_s, container.duration_s)
        txt_content = txt_path.read_text(encoding="utf-8", errors="replace") if txt_path.is_file() else ""

        if has_visible_text(txt_content):
            captions = build_captions_from_text(txt_content, total_duration)
            source = SOURCE_TXT
        else:
            logger.warning("No %s or %s; falling back to tool output", srt_path.name, txt_path.name)
            captions = build_captions_from_text(clean_console_transcript(run.stdout), total_duration)
            source = SOURCE_STDOUT

        if not captions:
            raise MissingOutputError([srt_path, txt_path], command=render_command(command))

        _write_captions(captions, srt_path)
        label = "TXT" if source == SOURCE_TXT else "Whisper output"
        _notify(on_status, "Built SRT from {} (auto-timed).".format(label))

    entities = import_captions(captions, document)
    _notify(on_status, "Imported {} subtitles from {}".format(len(entities), srt_path.name))
    return PipelineResult(srt_path=srt_path, source=source, captions=captions, entities=entities)


def import_srt_file(
    srt_path: str | Path | None,
    document: HostDocument,
    on_status: Optional[StatusCallback] = None,
) -> List[TimedEntity]:
    """Import an existing SRT file into the active composition.

    Raises:
        UsageError: No file chosen, file missing, or no active composition.
    """
    if not srt_path:
        raise UsageError("No SRT file chosen.")
    srt_path = Path(srt_path)
    if not srt_path.is_file():
        raise UsageError("SRT file not found: {}".format(srt_path))
    require_container(document)

    captions = _read_captions(srt_path)
    entities = import_captions(captions, document)
    _notify(on_status, "Imported {} subtitles from {}".format(len(entities), srt_path.name))
    return entities
