"""
``Range`` header parsing for log endpoints.

Only the ``bytes`` unit with a single range is honoured.  Anything the
log reader can't serve as one range (several ranges, another unit) is
collapsed to "no range", which per RFC 9110 means the full representation
is returned.  A syntactically broken ``bytes`` range is rejected.

    bytes=0-99     → ByteRange.span(0, 100)      (HTTP end is inclusive)
    bytes=100-     → ByteRange.from_start(100)
    bytes=-500     → ByteRange.suffix(500)
"""

from __future__ import annotations

import re

from hookd.core.errors import InvalidRangeError
from hookd.execution.logs import ByteRange, LogSlice

_RANGE_SPEC_RE = re.compile(r"^\s*(?P<start>\d*)\s*-\s*(?P<end>\d*)\s*$")


def parse_range_header(value: str | None) -> ByteRange | None:
    """Parse a ``Range`` header value into a :class:`ByteRange`.

    Returns ``None`` for a missing header, a non-``bytes`` unit, or a
    multi-range request.

    Raises:
        InvalidRangeError: Malformed single ``bytes`` range.
    """
    if value is None or not value.strip():
        return None
    unit, sep, ranges = value.strip().partition("=")
    if not sep or unit.strip().lower() != "bytes":
        return None
    specs = [spec for spec in ranges.split(",") if spec.strip()]
    if len(specs) != 1:
        return None

    match = _RANGE_SPEC_RE.match(specs[0])
    if match is None:
        raise InvalidRangeError("Malformed Range header").with_context(range=value)
    start, end = match.group("start"), match.group("end")

    if not start and not end:
        raise InvalidRangeError("Malformed Range header").with_context(range=value)
    if not start:
        return ByteRange.suffix(int(end))
    if not end:
        return ByteRange.from_start(int(start))
    return ByteRange.span(int(start), int(end) + 1)


def content_range_header(log_slice: LogSlice) -> str | None:
    """Format ``Content-Range`` for a partial read.

    Returns ``None`` when nothing was delivered (an empty span has no
    valid ``first-last`` form).
    """
    if log_slice.range is None:
        return None
    start, end = log_slice.range
    if end <= start:
        return None
    complete = "*" if log_slice.size is None else str(log_slice.size)
    return f"bytes {start}-{end - 1}/{complete}"


__all__ = ["content_range_header", "parse_range_header"]
