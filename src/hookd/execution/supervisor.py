"""
Instance supervisor - owns one spawned hook process until it exits.

Architecture:

    .. code-block:: text

        InstanceSupervisor.run()
        ┌────────────────────────────────────────────────────────────┐
        │  task: drain stdout ──► log/stdout.txt  (chunked copy)     │
        │  task: drain stderr ──► log/stderr.txt  (chunked copy)     │
        │  await wait_for(process.wait(), hook.timeout)              │
        │        └── timeout: kill() then wait() to reap             │
        │  await both drains (they end when the pipes close)         │
        │  finalize: running=False, success, finished ──► info.json  │
        └────────────────────────────────────────────────────────────┘

The launch request returned long before any of this completes, so there
is no caller to report a failure to.  Drain and finalize errors are
logged with their cause and never retried.  A stream whose log file
can't be written is still read to EOF and its output dropped.  A failed
finalize leaves the record at ``running=true``; no terminal state is
made up.

A timeout is recorded exactly like a non-zero exit (``success=false``).
Only the directly spawned process is killed; its own children are not
tracked.

Tags:
    hookd, execution, subprocess, asyncio, timeout, supervisor

Doc-Types:
    api-reference
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import aiofiles

from hookd.core.config import HookDefinition
from hookd.core.errors import HookdError
from hookd.core.logging import get_logger
from hookd.core.models import utcnow
from hookd.execution.sharding import STREAMS, InstancePaths
from hookd.execution.storage import read_info, replace_info

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


async def write_stream_to_file(stream: asyncio.StreamReader, path: Path) -> int:
    """Copy ``stream`` into ``path`` until EOF, returning the byte count.

    Each chunk is flushed so concurrent readers see output as it arrives.
    The whole stream is never held in memory.
    """
    copied = 0
    async with aiofiles.open(path, "wb") as f:
        while chunk := await stream.read(CHUNK_SIZE):
            await f.write(chunk)
            await f.flush()
            copied += len(chunk)
    return copied


async def discard_stream(stream: asyncio.StreamReader) -> int:
    """Read ``stream`` to EOF and drop the data, returning the byte count."""
    dropped = 0
    while chunk := await stream.read(CHUNK_SIZE):
        dropped += len(chunk)
    return dropped


class InstanceSupervisor:
    """Drains, times out and finalizes a single hook process."""

    def __init__(
        self,
        instance_id: str,
        process: asyncio.subprocess.Process,
        paths: InstancePaths,
        hook: HookDefinition,
    ) -> None:
        self.instance_id = instance_id
        self.process = process
        self.paths = paths
        self.hook = hook
        self.timed_out = False
        self._log = logger.bind(instance_id=instance_id, hook=hook.name)

    def start(self) -> asyncio.Task[None]:
        """Schedule :meth:`run` as a background task and return it."""
        return asyncio.create_task(self.run(), name=f"hookd-instance-{self.instance_id}")

    async def run(self) -> None:
        pipes = {"stdout": self.process.stdout, "stderr": self.process.stderr}
        drains = [asyncio.create_task(self._drain(name, pipes[name])) for name in STREAMS]
        returncode = await self._wait_with_timeout()
        for stream_name, result in zip(STREAMS, await asyncio.gather(*drains, return_exceptions=True)):
            if isinstance(result, Exception):
                self._log.error("instance_drain_failed", stream=stream_name, exc_info=result)
        await self._finalize(returncode)

    async def _drain(self, stream_name: str, stream: asyncio.StreamReader | None) -> None:
        if stream is None:
            self._log.error("instance_stream_missing", stream=stream_name)
            return
        path = self.paths.log(stream_name)
        try:
            copied = await write_stream_to_file(stream, path)
        except OSError:
            self._log.exception("instance_log_write_failed", stream=stream_name, path=str(path))
            # a full pipe would block the child
            dropped = await discard_stream(stream)
            self._log.warning("instance_stream_discarded", stream=stream_name, bytes=dropped)
            return
        self._log.debug("instance_stream_closed", stream=stream_name, bytes=copied)

    async def _wait_with_timeout(self) -> int:
        timeout = self.hook.timeout.total_seconds()
        try:
            return await asyncio.wait_for(self.process.wait(), timeout=timeout)
        except TimeoutError:
            self.timed_out = True
            self._log.warning("instance_timed_out", timeout_s=timeout, pid=self.process.pid)
            try:
                self.process.kill()
            except ProcessLookupError:
                pass  # exited between the timeout and the kill
            return await self.process.wait()

    async def _finalize(self, returncode: int) -> None:
        success = returncode == 0
        try:
            info = await read_info(self.paths.info)
            info.mark_finished(success=success, finished=utcnow())
            await replace_info(self.paths.info, info)
        except HookdError as e:
            self._log.error(
                "instance_finalize_failed",
                returncode=returncode,
                exc_info=True,
                **e.to_dict(),
            )
            return
        except ValueError:
            self._log.exception("instance_finalize_failed", returncode=returncode)
            return
        self._log.info(
            "instance_finished",
            returncode=returncode,
            success=success,
            timed_out=self.timed_out,
        )


__all__ = ["CHUNK_SIZE", "InstanceSupervisor", "discard_stream", "write_stream_to_file"]
