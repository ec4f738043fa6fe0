"""
Hook launcher - validates a launch request, persists state, spawns.

``start()`` performs only bounded local work (mkdir, one file write, one
spawn) and returns the new instance id without waiting for the process.
The process is handed to an :class:`InstanceSupervisor` running as a
background task whose lifetime is independent of the request.

Order of operations (the initial record must exist before the spawn so a
status read right after ``start()`` returns never sees "not found")::

    1. new uuid4 → create {shard}/log and {shard}/aux   (InternalError)
    2. resolve hook definition                          (NotFoundError)
    3. filter launch vars to allowed_keys, in place
    4. write info.json with running=true
    5. build command: cwd, env = os.environ + vars + HOOK_AUX_DIR, piped stdout/stderr
    6. spawn, hand off to supervisor, return id

Manifesto:
    Fire and forget.  No admission control is applied here; put limits
    upstream if the deployment needs them.

Tags:
    hookd, execution, launcher, subprocess, asyncio

Doc-Types:
    api-reference
"""

from __future__ import annotations

import asyncio
import os
import uuid
from pathlib import Path

import aiofiles.os

from hookd.core.config import HookdConfig
from hookd.core.errors import InternalError, NotFoundError
from hookd.core.logging import get_logger
from hookd.core.models import Info, LaunchRequest, RequestSnapshot, utcnow
from hookd.execution.sharding import InstancePaths, shard_path
from hookd.execution.storage import write_initial_info
from hookd.execution.supervisor import InstanceSupervisor

logger = get_logger(__name__)

AUX_DIR_ENV = "HOOK_AUX_DIR"


class HookLauncher:
    """Starts hook instances and keeps their supervisor tasks alive.

    Args:
        config: Loaded daemon configuration (hook definitions).
        data_dir: Root of the sharded instance storage.
    """

    def __init__(self, config: HookdConfig, data_dir: Path) -> None:
        self.config = config
        self.data_dir = Path(data_dir)
        # strong refs; the event loop only keeps weak ones to tasks
        self._tasks: dict[str, asyncio.Task[None]] = {}

    @property
    def running(self) -> list[str]:
        """Ids of instances whose supervisor hasn't finished yet."""
        return [instance_id for instance_id, task in self._tasks.items() if not task.done()]

    async def start(
        self,
        hook_name: str,
        launch_request: LaunchRequest,
        request_snapshot: RequestSnapshot,
    ) -> str:
        """Start an instance of ``hook_name`` and return its id.

        Raises:
            NotFoundError: If no hook with this name is configured.
            InternalError: If directories, the initial record or the
                process can't be created.
        """
        instance_id = str(uuid.uuid4())
        paths = shard_path(self.data_dir, instance_id)
        await self._create_dirs(paths)

        hook = self.config.get_hook(hook_name)
        if hook is None:
            raise NotFoundError("No hook with this name configured").with_context(hook=hook_name)

        launch_request.filter(hook.allowed_keys)

        info = Info(
            request=request_snapshot,
            config=hook,
            vars=dict(launch_request.vars),
            running=True,
            started=utcnow(),
        )
        await write_initial_info(paths.info, info)

        env = dict(os.environ)
        env.update(launch_request.vars)
        env[AUX_DIR_ENV] = str(paths.aux_dir.resolve())

        try:
            process = await asyncio.create_subprocess_exec(
                hook.command,
                *hook.args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=hook.work_dir,
                env=env,
            )
        except (OSError, ValueError) as e:
            # ValueError: NUL bytes in args, env or cwd
            raise InternalError("Couldn't spawn hook command", cause=e).with_context(
                hook=hook.name, instance_id=instance_id, command=hook.command
            ) from e

        supervisor = InstanceSupervisor(instance_id, process, paths, hook)
        self._track(instance_id, supervisor.start())

        logger.info(
            "hook_started",
            hook=hook.name,
            instance_id=instance_id,
            pid=process.pid,
            vars=sorted(launch_request.vars),
        )
        return instance_id

    async def wait(self, instance_id: str) -> None:
        """Wait until the supervisor of ``instance_id`` has finalized.

        Returns immediately for ids that aren't being supervised (already
        finished, or never launched by this launcher).
        """
        task = self._tasks.get(instance_id)
        if task is not None:
            await asyncio.shield(task)

    async def wait_all(self) -> None:
        """Wait for every supervised instance to finalize."""
        tasks = list(self._tasks.values())
        if tasks:
            await asyncio.gather(*(asyncio.shield(t) for t in tasks), return_exceptions=True)

    def _track(self, instance_id: str, task: asyncio.Task[None]) -> None:
        self._tasks[instance_id] = task
        task.add_done_callback(lambda t, key=instance_id: self._on_task_done(key, t))

    def _on_task_done(self, instance_id: str, task: asyncio.Task[None]) -> None:
        self._tasks.pop(instance_id, None)
        if task.cancelled():
            logger.warning("instance_supervisor_cancelled", instance_id=instance_id)
            return
        exc = task.exception()
        if exc is not None:
            logger.error("instance_supervisor_crashed", instance_id=instance_id, exc_info=exc)

    async def _create_dirs(self, paths: InstancePaths) -> None:
        try:
            await aiofiles.os.makedirs(paths.log_dir, exist_ok=True)
            await aiofiles.os.makedirs(paths.aux_dir, exist_ok=True)
        except OSError as e:
            raise InternalError("Couldn't create hook directory", cause=e).with_context(
                path=str(paths.root)
            ) from e


__all__ = ["AUX_DIR_ENV", "HookLauncher"]
