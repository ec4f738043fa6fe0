"""
Log range reader - whole or partial reads of an instance's stdout/stderr.

Logs are append-only files that may still be growing while they are
read.  Every read is a snapshot of the file as it stands; bytes written
afterwards aren't included and there is no live tail.

Range forms (all byte offsets, ``end`` exclusive)::

    ByteRange.span(start, end)    [start, end)        start >= end → InvalidRange
    ByteRange.from_start(start)   [start, EOF)
    ByteRange.suffix(n)           last n bytes         clamps to the whole file

An explicit ``start`` past the current end of file is
``RangeNotSatisfiable``; a suffix never is.

UTF-8 safety:
    A partial read is cut back to just after the last ``\\n`` it contains.
    Continuation bytes of a multi-byte UTF-8 sequence are never ``0x0A``,
    so whatever the writer was in the middle of, the returned text ends
    on a character boundary.  A span without any newline yields empty
    content.  The effective range reports what was actually delivered.

Tags:
    hookd, logs, http-range, utf-8, aiofiles

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import aiofiles
import aiofiles.os

from hookd.core.errors import (
    InternalError,
    InvalidRangeError,
    NotFoundError,
    RangeNotSatisfiableError,
)
from hookd.execution.sharding import STREAMS, shard_path

NEWLINE = b"\n"


@dataclass(frozen=True)
class ByteRange:
    """A single requested byte range.

    Exactly one of the shapes is populated:

    - ``start`` and ``end``: explicit span
    - ``start`` only: open-ended
    - ``suffix_length`` only: last N bytes
    """

    start: int | None = None
    end: int | None = None
    suffix_length: int | None = None

    @classmethod
    def span(cls, start: int, end: int) -> ByteRange:
        return cls(start=start, end=end)

    @classmethod
    def from_start(cls, start: int) -> ByteRange:
        return cls(start=start)

    @classmethod
    def suffix(cls, length: int) -> ByteRange:
        return cls(suffix_length=length)

    def validate(self) -> None:
        """Reject ranges that are malformed regardless of file size."""
        if self.suffix_length is not None:
            if self.start is not None or self.end is not None:
                raise InvalidRangeError("Suffix range can't have an explicit start or end")
            if self.suffix_length < 0:
                raise InvalidRangeError("Suffix length must not be negative")
            return
        if self.start is None:
            raise InvalidRangeError("Range needs a start or a suffix length")
        if self.start < 0:
            raise InvalidRangeError("Range start must not be negative")
        if self.end is not None and self.start >= self.end:
            raise InvalidRangeError("Range start must be before its end").with_context(
                start=self.start, end=self.end
            )

    def resolve(self, size: int) -> tuple[int, int]:
        """Resolve against a file of ``size`` bytes to ``(start, end)``.

        Raises:
            RangeNotSatisfiableError: If an explicit start lies beyond EOF.
        """
        self.validate()
        if self.suffix_length is not None:
            return max(size - self.suffix_length, 0), size
        assert self.start is not None
        if self.start > size:
            raise RangeNotSatisfiableError("Range start is beyond the end of the log").with_context(
                start=self.start, size=size
            )
        end = size if self.end is None else min(self.end, size)
        return self.start, end


@dataclass(frozen=True)
class LogSlice:
    """Result of a log read.

    ``range`` is ``None`` for whole-file reads, otherwise the effective
    ``(start, end)`` byte span (end exclusive) of ``content``.
    """

    content: str
    range: tuple[int, int] | None = None
    size: int | None = None

    @property
    def partial(self) -> bool:
        return self.range is not None


def trim_to_last_newline(data: bytes) -> bytes:
    """Cut ``data`` right after its last newline; empty if it has none."""
    index = data.rfind(NEWLINE)
    if index == -1:
        return b""
    return data[: index + 1]


class LogReader:
    """Serves full or byte-range reads of instance logs."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    async def read(
        self,
        stream: str,
        instance_id: str,
        byte_range: ByteRange | None = None,
    ) -> LogSlice:
        """Read the ``stdout`` or ``stderr`` log of an instance.

        Raises:
            NotFoundError: Unknown instance, unknown stream, or the log
                file hasn't been created yet.
            InvalidRangeError: Malformed range (e.g. start >= end).
            RangeNotSatisfiableError: Explicit start beyond current EOF.
            InternalError: The file exists but can't be read.
        """
        if stream not in STREAMS:
            raise NotFoundError(f"No log stream named {stream!r}").with_context(stream=stream)
        paths = shard_path(self.data_dir, instance_id)
        if not await aiofiles.os.path.isdir(paths.root):
            raise NotFoundError("No hook instance with this ID was found").with_context(
                instance_id=str(instance_id)
            )
        log_path = paths.log(stream)
        if not await aiofiles.os.path.isfile(log_path):
            raise NotFoundError(
                "Hook instance with this ID exists, but its log doesn't exist"
            ).with_context(instance_id=str(instance_id), stream=stream)

        if byte_range is not None:
            # reject malformed ranges before touching the file
            byte_range.validate()

        try:
            if byte_range is None:
                return await self._read_whole(log_path)
            return await self._read_range(log_path, byte_range)
        except OSError as e:
            raise InternalError(f"Couldn't read {stream}", cause=e).with_context(
                instance_id=str(instance_id), stream=stream
            ) from e

    async def _read_whole(self, path: Path) -> LogSlice:
        async with aiofiles.open(path, "rb") as f:
            data = await f.read()
        return LogSlice(content=data.decode("utf-8", errors="replace"), size=len(data))

    async def _read_range(self, path: Path, byte_range: ByteRange) -> LogSlice:
        async with aiofiles.open(path, "rb") as f:
            size = (await aiofiles.os.stat(path)).st_size
            start, end = byte_range.resolve(size)
            await f.seek(start)
            data = await f.read(end - start) if end > start else b""
        trimmed = trim_to_last_newline(data)
        return LogSlice(
            content=trimmed.decode("utf-8", errors="replace"),
            range=(start, start + len(trimmed)),
            size=size,
        )


__all__ = ["ByteRange", "LogReader", "LogSlice", "trim_to_last_newline"]
