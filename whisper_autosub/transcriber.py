"""Adapter for the external whisper command-line tool.

WHY: Transcription itself is somebody else's program. The pipeline only
needs to build the right command line, run it to completion, and get
back whatever it printed, with a typed error carrying the command when
it fails, so users can paste it into a terminal and see for themselves.

HOW: build_whisper_command() returns an argument list (no shell, so
paths with spaces and quotes need no escaping). run_whisper_command()
runs it with subprocess.run, capturing stdout/stderr as text, and
returns a WhisperRun.

RULES:
- Blocking call with no timeout and no cancellation
- OSError on launch → ExternalToolError with returncode None
- Non-zero exit → ExternalToolError with the tail of stderr
- stdout is returned untouched; it may include the tool's own log lines
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List

from whisper_autosub.config import DEFAULT_OUTPUT_FORMAT, WHISPER_BINARY
from whisper_autosub.errors import ExternalToolError

logger = logging.getLogger(__name__)

_STDERR_TAIL_LINES = 20


@dataclass
class WhisperRun:
    """Outcome of one transcription tool invocation."""

    command: List[str]
    returncode: int
    stdout: str
    stderr: str = ""

    @property
    def command_line(self) -> str:
        return render_command(self.command)


CommandRunner = Callable[[List[str]], WhisperRun]
"""Signature of the function that executes a transcription command."""


def render_command(command: List[str]) -> str:
    """Render an argument list as a copy-pasteable shell command line."""
    return shlex.join(command)


def build_whisper_command(
    media_path: str | Path,
    output_dir: str | Path | None,
    model: str,
    language: str,
    output_format: str = DEFAULT_OUTPUT_FORMAT,
    binary: str = WHISPER_BINARY,
) -> List[str]:
    """Build the whisper CLI argument list.

    Args:
        media_path: Audio/video file to transcribe.
        output_dir: Where whisper writes ``<stem>.<format>``; omitted when None.
        model: Whisper model size (tiny, base, small, medium, large).
        language: Spoken language name, e.g. ``"English"``.
        output_format: Whisper output format, ``"srt"`` by default.
        binary: Executable name or path.

    Returns:
        The command as a list of arguments.
    """
    command = [
        binary,
        str(media_path),
        "--model", model,
        "--language", language,
        "--output_format", output_format,
    ]
    if output_dir:
        command.extend(["--output_dir", str(output_dir)])
    return command


def run_whisper_command(command: List[str]) -> WhisperRun:
    """Run a transcription command to completion.

    Raises:
        ExternalToolError: If the process cannot start or exits non-zero.
    """
    command_line = render_command(command)
    logger.info("Running: %s", command_line)
    try:
        proc = subprocess.run(
            command,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as e:
        raise ExternalToolError(command_line, None, str(e)) from e

    if proc.returncode != 0:
        tail = "\n".join((proc.stderr or "").strip().splitlines()[-_STDERR_TAIL_LINES:])
        raise ExternalToolError(command_line, proc.returncode, tail or "(no error output)")

    return WhisperRun(
        command=list(command),
        returncode=proc.returncode,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )
