"""Tests for hookd.api.ranges - Range header parsing and Content-Range formatting."""

import pytest

from hookd.api.ranges import content_range_header, parse_range_header
from hookd.core.errors import InvalidRangeError
from hookd.execution.logs import ByteRange, LogSlice


class TestParseRangeHeader:
    @pytest.mark.parametrize(
        "header, expected",
        [
            ("bytes=0-99", ByteRange.span(0, 100)),
            ("bytes=100-", ByteRange.from_start(100)),
            ("bytes=-500", ByteRange.suffix(500)),
            ("BYTES = 5 - 9", ByteRange.span(5, 10)),
            ("bytes=0-0", ByteRange.span(0, 1)),
        ],
    )
    def test_single_range(self, header, expected):
        assert parse_range_header(header) == expected

    @pytest.mark.parametrize("header", [None, "", "   ", "items=0-5", "bytes=0-5,10-20", "garbage"])
    def test_ignored(self, header):
        assert parse_range_header(header) is None

    @pytest.mark.parametrize("header", ["bytes=-", "bytes=a-b", "bytes=1-2-3", "bytes=--5"])
    def test_malformed(self, header):
        with pytest.raises(InvalidRangeError):
            parse_range_header(header)

    def test_inverted_range_is_parsed_then_rejected(self):
        byte_range = parse_range_header("bytes=5-2")
        assert byte_range == ByteRange.span(5, 3)
        with pytest.raises(InvalidRangeError):
            byte_range.validate()


class TestContentRangeHeader:
    def test_partial(self):
        assert content_range_header(LogSlice("hello\n", range=(0, 6), size=12)) == "bytes 0-5/12"

    def test_unknown_size(self):
        assert content_range_header(LogSlice("a\n", range=(4, 6))) == "bytes 4-5/*"

    def test_empty_slice(self):
        assert content_range_header(LogSlice("", range=(3, 3), size=3)) is None

    def test_whole_read(self):
        assert content_range_header(LogSlice("hello\n", size=6)) is None
