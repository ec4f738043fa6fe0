"""
Status record persistence (``info.json``).

One writer per record: the launcher writes the initial record before the
process is spawned, and the supervisor replaces it exactly once at
finalization.  Readers take no lock.

The final update goes through :func:`replace_info`, which writes a
sibling temp file and renames it over the original.  A reader therefore
sees either the complete running record or the complete finished one,
never a half-written file.

Tags:
    hookd, storage, status-record, aiofiles, atomic-write

Doc-Types:
    api-reference
"""

from __future__ import annotations

import contextlib
import uuid
from pathlib import Path

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from hookd.core.errors import InternalError, NotFoundError
from hookd.core.models import Info


async def write_initial_info(path: Path, info: Info) -> None:
    """Write the first version of a status record.

    Raises:
        InternalError: If the file can't be written.
    """
    try:
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(info.to_json())
    except OSError as e:
        raise InternalError("Couldn't write hook info file", cause=e).with_context(
            path=str(path)
        ) from e


async def read_info(path: Path) -> Info:
    """Read and parse a status record.

    Raises:
        NotFoundError: If the record doesn't exist.
        InternalError: If it can't be read or parsed.
    """
    if not await aiofiles.os.path.isfile(path):
        raise NotFoundError("No hook instance with this ID was found").with_context(
            path=str(path)
        )
    try:
        async with aiofiles.open(path, "rb") as f:
            content = await f.read()
    except OSError as e:
        raise InternalError("Couldn't read hook info", cause=e).with_context(
            path=str(path)
        ) from e
    try:
        return Info.from_json(content)
    except ValidationError as e:
        raise InternalError("Couldn't parse hook info", cause=e).with_context(
            path=str(path)
        ) from e


async def replace_info(path: Path, info: Info) -> None:
    """Atomically replace a status record.

    Raises:
        InternalError: If the temp file can't be written or renamed.  The
            original record is left untouched in that case.
    """
    tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
    try:
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(info.to_json())
            await f.flush()
        await aiofiles.os.replace(tmp_path, path)
    except OSError as e:
        with contextlib.suppress(OSError):
            await aiofiles.os.remove(tmp_path)
        raise InternalError("Couldn't write hook info file", cause=e).with_context(
            path=str(path)
        ) from e


__all__ = ["read_info", "replace_info", "write_initial_info"]
