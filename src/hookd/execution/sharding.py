"""
Path sharding - deterministic storage address for an instance id.

An instance id (v4 UUID) maps to a nested directory under the data dir so
no single directory accumulates one entry per instance::

    6f1c2a9e-3b4d-4c5e-9f00-112233445566
    └─► {data_dir}/6f/1c/2a/9e/3b4d-4c5e-9f00-112233445566/
            ├── info.json
            ├── log/
            │   ├── stdout.txt
            │   └── stderr.txt
            └── aux/

The first eight hex digits form four two-character levels; the rest of
the hyphenated id (after the first hyphen) is the leaf directory.  The
mapping is injective because the hyphenated form of a UUID is.  No
collision detection is performed.

Tags:
    hookd, storage, sharding, filesystem

Doc-Types:
    api-reference
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path

from hookd.core.errors import NotFoundError

STREAMS: tuple[str, ...] = ("stdout", "stderr")

INFO_FILE = "info.json"
LOG_DIR = "log"
AUX_DIR = "aux"

_SHARD_LEVELS = 4
_SHARD_WIDTH = 2


@dataclass(frozen=True)
class InstancePaths:
    """Filesystem locations belonging to one instance."""

    root: Path

    @property
    def info(self) -> Path:
        return self.root / INFO_FILE

    @property
    def log_dir(self) -> Path:
        return self.root / LOG_DIR

    @property
    def aux_dir(self) -> Path:
        return self.root / AUX_DIR

    def log(self, stream: str) -> Path:
        """Path of the ``stdout``/``stderr`` log file.

        Raises:
            NotFoundError: For any other stream name.
        """
        if stream not in STREAMS:
            raise NotFoundError(f"No log stream named {stream!r}").with_context(stream=stream)
        return self.log_dir / f"{stream}.txt"


def parse_instance_id(value: uuid.UUID | str) -> uuid.UUID:
    """Parse an instance id, treating anything unparsable as unknown."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError) as e:
        raise NotFoundError("No hook instance with this ID was found", cause=e).with_context(
            instance_id=str(value)
        ) from e


def shard_path(data_dir: Path, instance_id: uuid.UUID | str) -> InstancePaths:
    """Return the storage subtree for ``instance_id`` under ``data_dir``."""
    hyphenated = str(parse_instance_id(instance_id))
    root = Path(data_dir)
    for level in range(_SHARD_LEVELS):
        start = level * _SHARD_WIDTH
        root = root / hyphenated[start:start + _SHARD_WIDTH]
    # skip the hyphen that follows the first eight digits
    root = root / hyphenated[_SHARD_LEVELS * _SHARD_WIDTH + 1:]
    return InstancePaths(root=root)


__all__ = [
    "AUX_DIR",
    "INFO_FILE",
    "LOG_DIR",
    "STREAMS",
    "InstancePaths",
    "parse_instance_id",
    "shard_path",
]
