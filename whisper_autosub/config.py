"""Configuration constants, whisper defaults, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Model names, segmentation limits, and timing
fallbacks are plain data, not buried in logic, so they can be tuned
without touching the pipeline.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level tuples, sets, and numbers. validate_model() gives a
clear error for unknown whisper model names.

RULES:
- WHISPER_MODELS lists the model sizes the whisper CLI accepts
- Segmentation limits: 140 chars per paragraph block before sentence
  splitting, 90 chars per caption line before word wrapping
- Auto-timing: 3.0 s per line when duration is unknown, never below 1.5 s
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from whisper_autosub.errors import UsageError

# Load .env from the project root (where the tool is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Transcription tool
# ---------------------------------------------------------------------------

WHISPER_MODELS: tuple[str, ...] = ("tiny", "base", "small", "medium", "large")

WHISPER_BINARY = os.getenv("WHISPER_BINARY", "whisper")
DEFAULT_MODEL = os.getenv("WHISPER_DEFAULT_MODEL", "medium")
DEFAULT_LANGUAGE = os.getenv("WHISPER_DEFAULT_LANGUAGE", "English")
DEFAULT_OUTPUT_FORMAT = "srt"

LOG_LEVEL = os.getenv("AUTOSUB_LOG_LEVEL", "WARNING").upper()

SUPPORTED_MEDIA_FORMATS: set[str] = {
    ".aac", ".aiff", ".flac", ".m4a", ".mkv", ".mov",
    ".mp3", ".mp4", ".ogg", ".wav", ".webm",
}
"""Audio/video file extensions accepted by the CLI (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# Segmentation and auto-timing
# ---------------------------------------------------------------------------

MAX_BLOCK_CHARS = 140
MAX_LINE_CHARS = 90
FALLBACK_LINE_DURATION_S = 3.0
MIN_LINE_DURATION_S = 1.5

# ---------------------------------------------------------------------------
# Caption placement
# ---------------------------------------------------------------------------

CAPTION_BOTTOM_MARGIN_PX = 100
IMPORT_UNDO_LABEL = "Import SRT Subtitles"
UPDATE_UNDO_LABEL = "Update Subtitle"


def validate_model(name: str) -> str:
    """Check that a whisper model name is one the CLI accepts.

    RULES:
    - Raises UsageError listing the valid names when the model is unknown
    - Returns the name unchanged on success
    """
    if name not in WHISPER_MODELS:
        raise UsageError(
            "Unknown whisper model '{}'. Available: {}".format(
                name, ", ".join(WHISPER_MODELS)
            )
        )
    return name
