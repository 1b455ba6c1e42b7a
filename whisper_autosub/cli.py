"""Command-line interface for Whisper Auto Subtitles.

WHY: Users need to go from a media file to editable captions from the
terminal, and to keep editing those captions afterwards. The CLI wires
the project file host, the transcription pipeline, the synchronizer,
and the exporters behind one command with subcommands.

HOW: argparse subcommands operate on a JSON project file:
  init        create a project with one composition and the media selected
  transcribe  run whisper on the selected footage and import the captions
  import      import an existing SRT file
  list        print the caption list (bottom-to-top) with handles
  edit        change one caption's text and/or timing by handle
  export      write the caption list as SRT or plain text
The project file is saved after every command that changes it. Status
messages go to stderr; listings go to stdout.

RULES:
- AutosubError → "Error: ..." on stderr, exit status 1
- Ctrl-C → exit status 130
- Time arguments accept "HH:MM:SS,mmm", "HH:MM:SS.mmm", or plain seconds
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-2, -3, ...)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from whisper_autosub.config import (
    DEFAULT_LANGUAGE,
    DEFAULT_MODEL,
    LOG_LEVEL,
    SUPPORTED_MEDIA_FORMATS,
    WHISPER_MODELS,
)
from whisper_autosub.core.timecode import format_timecode, parse_timecode
from whisper_autosub.errors import AutosubError, UsageError
from whisper_autosub.formatters import FORMATTERS
from whisper_autosub.formatters.base import FormatterOutput
from whisper_autosub.host.project_file import load_project, new_project, save_project
from whisper_autosub.pipeline import import_srt_file, transcribe_and_import
from whisper_autosub.sync import (
    enumerate_captions,
    entries_to_captions,
    require_container,
    write_back,
)


def _status(msg: str) -> None:
    """Print a status message to stderr, so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def parse_time_arg(value: str) -> float:
    """argparse type for caption times: timestamps or plain seconds."""
    if ":" in value:
        return parse_timecode(value, allow_dot=True)
    try:
        return float(value)
    except ValueError:
        raise argparse.ArgumentTypeError("invalid time: {!r}".format(value))


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Return {stem}{suffix} in output_dir, adding -2, -3, ... on conflict."""
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx >= 0:
        suffix_name, suffix_ext = suffix[:dot_idx], suffix[dot_idx:]
    else:
        suffix_name, suffix_ext = suffix, ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    try:
        path.write_text(output.content, encoding="utf-8")
    except OSError as e:
        raise UsageError("Cannot write {}: {}".format(path, e)) from e
    return path


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_init(args: argparse.Namespace) -> None:
    project = Path(args.project)
    media = Path(args.media).resolve()
    if project.exists() and not args.force:
        raise UsageError("Project file already exists: {} (use --force)".format(project))
    if media.suffix.lower() not in SUPPORTED_MEDIA_FORMATS:
        raise UsageError(
            "Unsupported media type '{}'. Supported formats: {}".format(
                media.suffix, ", ".join(sorted(SUPPORTED_MEDIA_FORMATS))
            )
        )
    if args.duration <= 0:
        raise UsageError("--duration must be positive")

    document = new_project(media, args.duration, args.fps, args.width, args.height)
    save_project(document, project)
    _status("Created {} with {} selected".format(project, media.name))


def _cmd_transcribe(args: argparse.Namespace) -> None:
    document = load_project(args.project)
    result = transcribe_and_import(
        document,
        output_dir=args.output_dir,
        model=args.model,
        language=args.language,
        on_status=_status,
    )
    save_project(document, args.project)
    _status("Saved {} ({} captions from {})".format(
        args.project, len(result.entities), result.source
    ))


def _cmd_import(args: argparse.Namespace) -> None:
    document = load_project(args.project)
    import_srt_file(args.srt, document, on_status=_status)
    save_project(document, args.project)


def _cmd_list(args: argparse.Namespace) -> None:
    document = load_project(args.project)
    entries = enumerate_captions(document)
    if not entries:
        _status("No captions in {}".format(require_container(document).name))
        return
    for position, entry in enumerate(entries, start=1):
        print("{:>3}. {}  {}".format(position, entry.handle, entry.display()))


def _cmd_edit(args: argparse.Namespace) -> None:
    document = load_project(args.project)
    container = require_container(document)
    current = next((e for e in enumerate_captions(document) if e.handle == args.handle), None)

    # Unknown handles fall through to write_back, which reports them
    text = args.text if args.text is not None else (current.text if current else "")
    start = args.start if args.start is not None else (current.start_s if current else 0.0)
    end = args.end if args.end is not None else (current.end_s if current else 0.0)

    entry = write_back(document, args.handle, text, start, end)
    save_project(document, args.project)
    _status("Updated {} in {}: {} --> {}".format(
        entry.handle, container.name, format_timecode(entry.start_s), format_timecode(entry.end_s)
    ))


def _cmd_export(args: argparse.Namespace) -> None:
    project = Path(args.project)
    document = load_project(project)
    captions = entries_to_captions(enumerate_captions(document))

    output_dir = Path(args.output_dir) if args.output_dir else project.parent
    if not output_dir.is_dir():
        raise UsageError("Output directory does not exist: {}".format(output_dir))

    formatter = FORMATTERS[args.format]()
    for output in formatter.format(captions):
        path = _save_output(output, project.stem, output_dir)
        _status("Saved {} ({} captions, {})".format(path, len(captions), formatter.name))


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separate from main() so tests can inspect the parser without
    running any command.
    """
    parser = argparse.ArgumentParser(
        prog="whisper_autosub",
        description="Transcribe media with Whisper and manage the resulting "
                    "captions as text layers in a timeline project.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init", help="Create a project for a media file.")
    p.add_argument("project", help="Project file to create (.json).")
    p.add_argument("--media", required=True, help="Audio or video file to caption.")
    p.add_argument("--duration", type=float, required=True, help="Composition duration in seconds.")
    p.add_argument("--fps", type=float, default=25.0, help="Frame rate (default: %(default)s).")
    p.add_argument("--width", type=int, default=1920, help="Frame width (default: %(default)s).")
    p.add_argument("--height", type=int, default=1080, help="Frame height (default: %(default)s).")
    p.add_argument("--force", action="store_true", help="Overwrite an existing project file.")
    p.set_defaults(func=_cmd_init)

    p = sub.add_parser("transcribe", help="Transcribe the selected footage and import captions.")
    p.add_argument("project", help="Project file.")
    p.add_argument("--model", default=DEFAULT_MODEL, choices=WHISPER_MODELS,
                   help="Whisper model (default: %(default)s).")
    p.add_argument("--language", default=DEFAULT_LANGUAGE,
                   help="Spoken language (default: %(default)s).")
    p.add_argument("--output-dir", default=None,
                   help="Folder for transcripts (default: next to the media file).")
    p.set_defaults(func=_cmd_transcribe)

    p = sub.add_parser("import", help="Import an SRT file as caption layers.")
    p.add_argument("project", help="Project file.")
    p.add_argument("srt", help="SRT file to import.")
    p.set_defaults(func=_cmd_import)

    p = sub.add_parser("list", help="List captions bottom-to-top with their handles.")
    p.add_argument("project", help="Project file.")
    p.set_defaults(func=_cmd_list)

    p = sub.add_parser("edit", help="Update one caption by handle.")
    p.add_argument("project", help="Project file.")
    p.add_argument("handle", help="Caption handle, as printed by 'list'.")
    p.add_argument("--text", default=None, help="New caption text (use \\n for line breaks).")
    p.add_argument("--start", type=parse_time_arg, default=None, help="New in point.")
    p.add_argument("--end", type=parse_time_arg, default=None, help="New out point.")
    p.set_defaults(func=_cmd_edit)

    p = sub.add_parser("export", help="Write the caption list to a file.")
    p.add_argument("project", help="Project file.")
    p.add_argument("--format", default="srt", choices=sorted(FORMATTERS.keys()),
                   help="Output format (default: %(default)s).")
    p.add_argument("--output-dir", default=None,
                   help="Directory for the output file (default: next to the project).")
    p.set_defaults(func=_cmd_export)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    argv=None means use sys.argv (normal CLI invocation); an explicit
    list is for testing.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if getattr(args, "text", None) is not None:
        args.text = args.text.replace("\\n", "\n")

    try:
        args.func(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except AutosubError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
