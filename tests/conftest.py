"""Shared test fixtures for the whisper_autosub test suite.

WHY: Several test modules need the same small caption track, the same
composition, and a document with selected footage. Centralizing them
here keeps the expected timings in one place.

HOW: Pytest fixtures build fresh objects per test, so mutations made by
the synchronizer never leak between tests.

RULES:
- The composition runs at 10 fps so caption times in tenths land exactly
  on frame boundaries
- Media files are created under tmp_path; no real transcription runs
"""

from typing import List

import pytest

from whisper_autosub.core.ir import Caption
from whisper_autosub.host.memory import Composition, MemoryDocument

SAMPLE_SRT = (
    "1\n"
    "00:00:00,000 --> 00:00:02,500\n"
    "Hello there.\n"
    "\n"
    "2\n"
    "00:00:02,500 --> 00:00:05,000\n"
    "General Kenobi!\n"
    "You are a bold one.\n"
    "\n"
    "3\n"
    "00:00:05,000 --> 00:00:07,200\n"
    "Kill him.\n"
    "\n"
)


@pytest.fixture
def sample_captions() -> List[Caption]:
    """The caption track that SAMPLE_SRT encodes."""
    return [
        Caption(index=1, start_s=0.0, end_s=2.5, lines=["Hello there."]),
        Caption(index=2, start_s=2.5, end_s=5.0, lines=["General Kenobi!", "You are a bold one."]),
        Caption(index=3, start_s=5.0, end_s=7.2, lines=["Kill him."]),
    ]


@pytest.fixture
def composition() -> Composition:
    return Composition(name="Main", duration_s=9.0, frame_duration=0.1, width=1920, height=1080)


@pytest.fixture
def document(composition) -> MemoryDocument:
    doc = MemoryDocument()
    doc.add_composition(composition)
    return doc


@pytest.fixture
def media_file(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"")
    return path


@pytest.fixture
def footage_document(document, composition, media_file) -> MemoryDocument:
    """Document whose active composition holds the selected media file."""
    composition.add_footage_entity(str(media_file), 0.0, 9.0, selected=True)
    return document


@pytest.fixture
def sample_srt() -> str:
    """SRT text for the sample_captions track."""
    return SAMPLE_SRT
