"""Tests for Range header parsing and content types."""

import pytest

from mediagallery.exceptions import RangeNotSatisfiableError
from mediagallery.services.streaming import content_type_for, parse_range_header


class TestParseRangeHeader:
    """Single-range parsing against a known file size."""

    def test_closed_range(self) -> None:
        """bytes=0-49 of 200 bytes is 50 bytes."""
        byte_range = parse_range_header("bytes=0-49", 200)
        assert (byte_range.start, byte_range.end, byte_range.length) == (0, 49, 50)
        assert byte_range.content_range == "bytes 0-49/200"

    def test_open_ended_range(self) -> None:
        """A missing end runs to the last byte."""
        byte_range = parse_range_header("bytes=150-", 200)
        assert (byte_range.start, byte_range.end) == (150, 199)
        assert byte_range.length == 50

    def test_end_is_clamped(self) -> None:
        """An end past the file is clamped to the last byte."""
        byte_range = parse_range_header("bytes=100-5000", 200)
        assert byte_range.end == 199
        assert byte_range.content_range == "bytes 100-199/200"

    def test_last_byte(self) -> None:
        """The final byte alone is a valid range."""
        assert parse_range_header("bytes=199-199", 200).length == 1

    def test_whitespace_and_case(self) -> None:
        """Spacing and unit case are tolerated."""
        assert parse_range_header(" Bytes = 10 - 19 ", 200).length == 10

    @pytest.mark.parametrize(
        "header",
        [
            "bytes=200-",  # start at size
            "bytes=500-600",  # start past end
            "bytes=50-10",  # start after end
            "bytes=-50",  # suffix ranges need a start
            "bytes=0-10,20-30",  # multiple ranges
            "items=0-10",  # wrong unit
            "bytes=abc-",  # garbage
            "",
        ],
    )
    def test_unsatisfiable(self, header: str) -> None:
        """Malformed or out-of-file ranges raise with the file size attached."""
        with pytest.raises(RangeNotSatisfiableError) as exc_info:
            parse_range_header(header, 200)
        assert exc_info.value.total == 200

    def test_empty_file(self) -> None:
        """No range of an empty file is satisfiable."""
        with pytest.raises(RangeNotSatisfiableError):
            parse_range_header("bytes=0-", 0)


class TestContentType:
    """Extension to content type mapping."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("a.jpg", "image/jpeg"),
            ("a.JPEG", "image/jpeg"),
            ("a.png", "image/png"),
            ("a.webp", "image/webp"),
            ("a.gif", "image/gif"),
            ("a.mp4", "video/mp4"),
            ("a.webm", "video/webm"),
            ("a.mov", "video/quicktime"),
            ("a.txt", "application/octet-stream"),
            ("noext", "application/octet-stream"),
        ],
    )
    def test_mapping(self, name: str, expected: str) -> None:
        assert content_type_for(name) == expected
