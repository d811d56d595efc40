import pytest

from yt2md.errors import MalformedSegmentError
from yt2md.models import CaptionSegment
from yt2md.normalizer import build_document, format_timestamp, normalize_segments


def raw(*items):
    return [CaptionSegment.from_raw(item) for item in items]


class TestFormatTimestamp:
    @pytest.mark.parametrize("seconds,expected", [
        (0, "0:00"),
        (1, "0:01"),
        (45, "0:45"),
        (125, "2:05"),
        (599.9, "9:59"),
        (3599, "59:59"),
        (3600, "1:00:00"),
        (3725, "1:02:05"),
        (36125, "10:02:05"),
    ])
    def test_clock_format(self, seconds, expected):
        assert format_timestamp(seconds) == expected


class TestNormalizeSegments:
    def test_milliseconds_to_seconds(self):
        segments = normalize_segments(raw(
            {"text": "a", "offset": 0, "duration": 1000},
            {"text": "b", "offset": 1500, "duration": 250},
        ))
        assert [(s.timestamp, s.duration) for s in segments] == [(0.0, 1.0), (1.5, 0.25)]

    def test_missing_timing_names_index(self):
        with pytest.raises(MalformedSegmentError) as exc_info:
            normalize_segments(raw(
                {"text": "a", "offset": 0, "duration": 1000},
                {"text": "b", "offset": 1000},
            ))
        assert exc_info.value.index == 1
        assert "index 1" in str(exc_info.value)

    def test_none_segment_rejected(self):
        with pytest.raises(MalformedSegmentError):
            normalize_segments([None])

    def test_missing_text_becomes_empty(self):
        segments = normalize_segments(raw({"offset": 0, "duration": 10}))
        assert segments[0].text == ""


class TestBuildDocument:
    SEGMENTS = [
        {"text": "a", "offset": 0, "duration": 1000},
        {"text": "b", "offset": 1000, "duration": 1000},
    ]

    def test_timestamped_lines(self):
        document = build_document("abc", "https://youtu.be/abc", raw(*self.SEGMENTS))

        assert document.total_duration == 2.0
        assert document.segment_count == 2
        assert document.text == "[0:00] a\n[0:01] b"
        assert document.timestamped

    def test_plain_text(self):
        document = build_document("abc", "https://youtu.be/abc", raw(*self.SEGMENTS), timestamped=False)
        assert document.text == "a b"

    def test_duration_uses_last_segment(self):
        document = build_document("abc", "u", raw(
            {"text": "long", "offset": 0, "duration": 90000},
            {"text": "short", "offset": 5000, "duration": 1000},
        ))
        assert document.total_duration == 6.0

    def test_empty_input(self):
        document = build_document("abc", "u", [])
        assert document.total_duration == 0.0
        assert document.text == ""
