"""Unit tests for the timecode module.

WHY: Every caption time passes through these conversions. An off-by-one
millisecond or a "1000" millisecond field corrupts SRT files silently.

HOW: Tests cover formatting (padding, clamping, rounding, long hours),
lenient parsing, the format/parse round trip, and frame conversions.
"""

import pytest

from whisper_autosub.core.timecode import (
    format_clock,
    format_timecode,
    parse_timecode,
    quantize_to_frame,
    to_frames,
    to_seconds,
)


class TestFormatTimecode:
    """format_timecode produces zero-padded HH:MM:SS,mmm."""

    def test_zero(self):
        assert format_timecode(0) == "00:00:00,000"

    def test_all_fields(self):
        assert format_timecode(3661.5) == "01:01:01,500"

    def test_negative_is_clamped(self):
        assert format_timecode(-4.2) == "00:00:00,000"

    def test_hours_not_wrapped(self):
        assert format_timecode(100 * 3600 + 1.25) == "100:00:01,250"

    def test_rounds_instead_of_truncating(self):
        assert format_timecode(0.0016) == "00:00:00,002"
        assert format_timecode(0.0014) == "00:00:00,001"

    def test_rounding_carries_into_seconds(self):
        """1.9996s must become 2.000, never '01,1000'."""
        assert format_timecode(1.9996) == "00:00:02,000"
        assert format_timecode(59.9999) == "00:01:00,000"


class TestParseTimecode:
    """parse_timecode reads SRT timestamps leniently."""

    def test_basic(self):
        assert parse_timecode("01:01:01,500") == pytest.approx(3661.5)

    def test_surrounding_whitespace(self):
        assert parse_timecode("  00:00:02,250 ") == pytest.approx(2.25)

    def test_too_few_fields_returns_zero(self):
        assert parse_timecode("12:34") == 0.0
        assert parse_timecode("garbage") == 0.0
        assert parse_timecode("") == 0.0

    def test_unparseable_fields_count_as_zero(self):
        assert parse_timecode("xx:01:05,000") == pytest.approx(65.0)

    def test_missing_milliseconds(self):
        assert parse_timecode("00:00:07") == pytest.approx(7.0)

    def test_dot_separator_needs_allow_dot(self):
        assert parse_timecode("00:00:01.250", allow_dot=True) == pytest.approx(1.25)
        assert parse_timecode("00:00:01.250") == pytest.approx(1.0)

    def test_short_fraction_is_decimal(self):
        assert parse_timecode("00:00:01,5") == pytest.approx(1.5)


class TestRoundTrip:
    """parse(format(x)) recovers x within one millisecond."""

    @pytest.mark.parametrize("seconds", [
        0.0, 0.001, 0.0005, 0.5, 1.9996, 59.999, 61.25,
        3599.9995, 12345.678, 35999.999,
    ])
    def test_within_one_millisecond(self, seconds):
        assert parse_timecode(format_timecode(seconds)) == pytest.approx(seconds, abs=0.001)


class TestFrames:
    """Frame conversions against a host frame duration."""

    def test_to_frames(self):
        assert to_frames(1.0, 0.04) == pytest.approx(25.0)

    def test_to_seconds(self):
        assert to_seconds(25, 0.04) == pytest.approx(1.0)

    def test_quantize_rounds_to_nearest_frame(self):
        assert quantize_to_frame(1.01, 0.04) == pytest.approx(1.0)
        assert quantize_to_frame(1.03, 0.04) == pytest.approx(1.04)

    def test_half_frame_rounds_up(self):
        # 4.5 s is frame 112.5 at 25 fps; 0.1 s is frame 2.5
        assert quantize_to_frame(4.5, 1.0 / 25) == pytest.approx(4.52)
        assert quantize_to_frame(0.1, 1.0 / 25) == pytest.approx(0.12)

    def test_quantized_value_is_on_grid(self):
        value = quantize_to_frame(3.3333, 1.0 / 30)
        frames = to_frames(value, 1.0 / 30)
        assert frames == pytest.approx(round(frames))


class TestFormatClock:
    def test_truncates_to_seconds(self):
        assert format_clock(3723.9) == "01:02:03"

    def test_negative_clamped(self):
        assert format_clock(-1) == "00:00:00"
