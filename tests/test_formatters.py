"""Tests for the caption track exporters.

WHY: Exported files are what leaves the tool. An SRT with gaps in its
numbering or a text export that loses paragraph breaks is a broken
deliverable.
"""

from whisper_autosub.core.ir import Caption
from whisper_autosub.core.segmenter import split_transcript
from whisper_autosub.core.srt import parse_srt
from whisper_autosub.formatters import FORMATTERS
from whisper_autosub.formatters.base import BaseFormatter
from whisper_autosub.formatters.plain_text import PlainTextFormatter
from whisper_autosub.formatters.srt_captions import SRTFormatter


class TestRegistry:
    def test_keys(self):
        assert set(FORMATTERS) == {"srt", "plain_text"}

    def test_values_are_formatter_classes(self):
        for cls in FORMATTERS.values():
            assert issubclass(cls, BaseFormatter)
            assert cls().name


class TestSRTFormatter:
    def test_matches_sample(self, sample_captions, sample_srt):
        (output,) = SRTFormatter().format(sample_captions)
        assert output.suffix == ".srt"
        assert output.media_type == "application/x-subrip"
        assert output.content == sample_srt

    def test_renumbers(self):
        captions = [
            Caption(index=7, start_s=0.0, end_s=1.0, lines=["a"]),
            Caption(index=9, start_s=1.0, end_s=2.0, lines=["b"]),
        ]
        (output,) = SRTFormatter().format(captions)
        assert [c.index for c in parse_srt(output.content)] == [1, 2]
        assert output.content.startswith("1\n")

    def test_empty_track(self):
        (output,) = SRTFormatter().format([])
        assert output.content == ""


class TestPlainTextFormatter:
    def test_paragraphs(self, sample_captions):
        (output,) = PlainTextFormatter().format(sample_captions)
        assert output.suffix == ".txt"
        assert output.media_type == "text/plain"
        assert output.content == (
            "Hello there.\n\nGeneral Kenobi!\nYou are a bold one.\n\nKill him.\n"
        )

    def test_skips_blank_captions(self):
        captions = [
            Caption(index=1, start_s=0.0, end_s=1.0, lines=["  "]),
            Caption(index=2, start_s=1.0, end_s=2.0, lines=["kept"]),
        ]
        (output,) = PlainTextFormatter().format(captions)
        assert output.content == "kept\n"

    def test_empty_track(self):
        (output,) = PlainTextFormatter().format([])
        assert output.content == ""

    def test_resegments_to_same_lines(self):
        captions = [
            Caption(index=1, start_s=0.0, end_s=1.0, lines=["First caption."]),
            Caption(index=2, start_s=1.0, end_s=2.0, lines=["Second caption."]),
        ]
        (output,) = PlainTextFormatter().format(captions)
        assert split_transcript(output.content) == ["First caption.", "Second caption."]
