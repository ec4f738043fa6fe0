"""
Hook execution and log streaming engine.

Components, leaves first:

- :mod:`~hookd.execution.sharding` - instance id → storage subtree
- :mod:`~hookd.execution.storage` - status record persistence
- :mod:`~hookd.execution.supervisor` - drains output, enforces timeout, finalizes
- :mod:`~hookd.execution.launcher` - validates, persists, spawns
- :mod:`~hookd.execution.logs` - whole and byte-range log reads
- :mod:`~hookd.execution.status` - status record reads

Control flow::

    HookLauncher.start() ──► id (returns immediately)
          │
          └──► InstanceSupervisor (background task) ──► info.json, log/*.txt
                                                              ▲
    StatusReader.read() / LogReader.read() ───────────────────┘
"""

from hookd.execution.launcher import AUX_DIR_ENV, HookLauncher
from hookd.execution.logs import ByteRange, LogReader, LogSlice
from hookd.execution.sharding import STREAMS, InstancePaths, shard_path
from hookd.execution.status import StatusReader
from hookd.execution.supervisor import InstanceSupervisor

__all__ = [
    "AUX_DIR_ENV",
    "ByteRange",
    "HookLauncher",
    "InstancePaths",
    "InstanceSupervisor",
    "LogReader",
    "LogSlice",
    "STREAMS",
    "StatusReader",
    "shard_path",
]
