"""Exception taxonomy for the caption pipeline.

WHY: Callers (CLI, tests, embedding hosts) need typed exceptions to tell
a user mistake from a broken transcription tool or a stale editor
handle, and to report each one with enough context to self-correct.

HOW: One base class, AutosubError, with a subclass per failure family.
Malformed SRT blocks have no exception here: the parser recovers from
them locally and never raises.

RULES:
- UsageError: nothing was attempted, the caller must fix its input
- ExternalToolError: always carries the rendered command line
- MissingOutputError: always carries the paths that were searched
- EntityVanishedError: always carries the stale handle
"""

from __future__ import annotations

from typing import Sequence


class AutosubError(Exception):
    """Base class for every error raised by whisper_autosub."""


class UsageError(AutosubError):
    """Raised when the caller's request cannot be acted on.

    WHY: No active composition, no selected footage, no SRT chosen:
    these are surfaced immediately with no partial work performed.
    """


class ProjectFileError(UsageError):
    """Raised when a project file is missing, unreadable, or fails schema validation."""


class ExternalToolError(AutosubError):
    """Raised when the transcription tool fails to launch or exits non-zero.

    RULES:
    - command is the shell-quoted command line, for diagnosis
    - returncode is None when the process never started
    - detail is the OS error or the tail of the tool's stderr
    """

    def __init__(self, command: str, returncode: int | None, detail: str) -> None:
        self.command = command
        self.returncode = returncode
        self.detail = detail
        if returncode is None:
            summary = "Failed to run transcription tool"
        else:
            summary = "Transcription tool exited with status {}".format(returncode)
        message = "{}: {}\n\nCommand:\n{}".format(summary, detail, command)
        super().__init__(message)


class MissingOutputError(AutosubError):
    """Raised when transcription finished but produced no usable captions.

    RULES:
    - searched lists every file path that was checked
    - No entities are created when this is raised
    """

    def __init__(self, searched: Sequence[object], command: str | None = None) -> None:
        self.searched = [str(p) for p in searched]
        self.command = command
        message = "No .srt or transcript text found. Looked for: {}".format(
            ", ".join(self.searched) or "(nothing)"
        )
        if command:
            message += "\n\nCommand:\n{}".format(command)
        super().__init__(message)


class EntityVanishedError(AutosubError):
    """Raised when a caption handle no longer resolves to a timeline entity."""

    def __init__(self, handle: str) -> None:
        self.handle = handle
        super().__init__(
            "Caption {} no longer exists in the timeline. Refresh the list.".format(handle)
        )
