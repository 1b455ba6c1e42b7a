"""Whisper Auto Subtitles: transcript to timeline caption track.

WHY: Speech-to-text tools hand back either a finished SRT file, a bare
.txt transcript, or just console output. Editors need all three turned
into correctly timed caption entities on a timeline, and need to edit
those captions afterwards without losing track of which entity is which.

HOW: Four-stage pipeline: transcribe (external whisper CLI), recover
a caption track (SRT parse, or segment + auto-time raw text), import
into the host timeline, then enumerate/write back for editing. Each
stage is independently testable.

RULES:
- All captions pass through the same Caption IR
- Only sync.py mutates the host timeline
- Parsing tolerates malformed input; process/I/O failures surface at the top
"""

__version__ = "0.1.0"
