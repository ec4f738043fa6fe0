"""Status accessor - reads the persisted status record of an instance."""

from __future__ import annotations

from pathlib import Path

import aiofiles.os

from hookd.core.errors import NotFoundError
from hookd.core.models import Info
from hookd.execution.sharding import shard_path
from hookd.execution.storage import read_info


class StatusReader:
    """Pure reads of ``info.json``; no side effects."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    async def read(self, instance_id: str) -> Info:
        """Return the current status record.

        A reader racing the supervisor's final update sees either the
        running record or the finished one.

        Raises:
            NotFoundError: Unknown (or unparsable) instance id.
            InternalError: The record exists but can't be read or parsed.
        """
        paths = shard_path(self.data_dir, instance_id)
        if not await aiofiles.os.path.isdir(paths.root):
            raise NotFoundError("No hook instance with this ID was found").with_context(
                instance_id=str(instance_id)
            )
        return await read_info(paths.info)


__all__ = ["StatusReader"]
