"""Tests for hookd.execution.launcher - spawning and supervising real processes.

Hooks run ``sys.executable -c <script>`` (see conftest), so every test
here starts an actual child process.
"""

import asyncio
import json
from datetime import timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from hookd.core.errors import InternalError, NotFoundError
from hookd.core.models import LaunchRequest
from hookd.execution import launcher as launcher_module
from hookd.execution.launcher import AUX_DIR_ENV, HookLauncher
from hookd.execution.logs import LogReader
from hookd.execution.sharding import shard_path
from hookd.execution.status import StatusReader

pytestmark = pytest.mark.integration


@pytest.fixture
def launcher(hook_config, data_dir) -> HookLauncher:
    return HookLauncher(hook_config, data_dir)


@pytest.fixture
def statuses(data_dir) -> StatusReader:
    return StatusReader(data_dir)


@pytest.fixture
def logs(data_dir) -> LogReader:
    return LogReader(data_dir)


class TestStart:
    @pytest.mark.asyncio
    async def test_status_running_right_after_start(self, launcher, statuses, snapshot):
        instance_id = await launcher.start("sleep", LaunchRequest(), snapshot)
        try:
            info = await statuses.read(instance_id)
            assert info.running is True
            assert info.finished is None
            assert info.success is None
            assert info.config.name == "sleep"
            assert info.request == snapshot
            assert instance_id in launcher.running
        finally:
            await launcher.wait(instance_id)

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, launcher, snapshot):
        ids = [await launcher.start("echo", LaunchRequest(), snapshot) for _ in range(5)]
        await launcher.wait_all()
        assert len(set(ids)) == 5

    @pytest.mark.asyncio
    async def test_creates_storage_subtree(self, launcher, data_dir, snapshot):
        instance_id = await launcher.start("echo", LaunchRequest(), snapshot)
        await launcher.wait(instance_id)
        paths = shard_path(data_dir, instance_id)
        assert paths.info.is_file()
        assert paths.aux_dir.is_dir()
        assert paths.log("stdout").is_file()
        assert paths.log("stderr").is_file()

    @pytest.mark.asyncio
    async def test_unknown_hook(self, launcher, snapshot):
        with pytest.raises(NotFoundError):
            await launcher.start("nope", LaunchRequest(), snapshot)
        assert launcher.running == []

    @pytest.mark.asyncio
    async def test_spawn_failure(self, launcher, snapshot):
        with pytest.raises(InternalError, match="spawn"):
            await launcher.start("missing", LaunchRequest(), snapshot)
        assert launcher.running == []

    @pytest.mark.asyncio
    async def test_missing_work_dir(self, hook_config, data_dir, tmp_path: Path, snapshot):
        hook = hook_config.hooks["echo"].model_copy(update={"work_dir": str(tmp_path / "gone")})
        config = hook_config.model_copy(update={"hooks": {"echo": hook}})
        with pytest.raises(InternalError):
            await HookLauncher(config, data_dir).start("echo", LaunchRequest(), snapshot)

    @pytest.mark.asyncio
    async def test_nul_byte_in_var_is_internal_error(self, launcher, snapshot):
        request = LaunchRequest(vars={"HOOKD_TEST_A": "a\x00b"})
        with pytest.raises(InternalError, match="spawn") as exc_info:
            await launcher.start("env", request, snapshot)
        assert isinstance(exc_info.value.cause, ValueError)
        assert launcher.running == []


class TestSupervisorTasks:
    @pytest.mark.asyncio
    async def test_crashed_supervisor_is_logged(self, launcher, monkeypatch):
        mock_logger = MagicMock()
        monkeypatch.setattr(launcher_module, "logger", mock_logger)

        async def crash() -> None:
            raise RuntimeError("wait failed")

        task = asyncio.create_task(crash())
        launcher._track("crashed-id", task)
        await asyncio.wait([task])
        await asyncio.sleep(0)

        assert "crashed-id" not in launcher.running
        mock_logger.error.assert_called_once()
        args, kwargs = mock_logger.error.call_args
        assert args == ("instance_supervisor_crashed",)
        assert kwargs["instance_id"] == "crashed-id"
        assert isinstance(kwargs["exc_info"], RuntimeError)

    @pytest.mark.asyncio
    async def test_clean_exit_logs_nothing(self, launcher, monkeypatch):
        mock_logger = MagicMock()
        monkeypatch.setattr(launcher_module, "logger", mock_logger)

        async def finish() -> None:
            return None

        task = asyncio.create_task(finish())
        launcher._track("ok-id", task)
        await asyncio.wait([task])
        await asyncio.sleep(0)

        assert launcher._tasks == {}
        mock_logger.error.assert_not_called()


class TestEnvironment:
    @pytest.mark.asyncio
    async def test_vars_filtered_to_allowed_keys(self, launcher, statuses, logs, snapshot):
        request = LaunchRequest(vars={"HOOKD_TEST_A": "1", "HOOKD_TEST_C": "3"})
        instance_id = await launcher.start("env", request, snapshot)
        await launcher.wait(instance_id)

        info = await statuses.read(instance_id)
        assert info.vars == {"HOOKD_TEST_A": "1"}
        assert request.vars == {"HOOKD_TEST_A": "1"}

        seen = json.loads((await logs.read("stdout", instance_id)).content)
        assert seen["HOOKD_TEST_A"] == "1"
        assert seen["HOOKD_TEST_B"] is None
        assert seen["HOOKD_TEST_C"] is None

    @pytest.mark.asyncio
    async def test_aux_dir_exported(self, launcher, logs, data_dir, snapshot):
        instance_id = await launcher.start("env", LaunchRequest(), snapshot)
        await launcher.wait(instance_id)

        seen = json.loads((await logs.read("stdout", instance_id)).content)
        aux = Path(seen[AUX_DIR_ENV])
        assert aux.is_absolute()
        assert aux == shard_path(data_dir, instance_id).aux_dir.resolve()

    @pytest.mark.asyncio
    async def test_runs_in_work_dir(self, launcher, logs, work_dir, snapshot):
        instance_id = await launcher.start("cwd", LaunchRequest(), snapshot)
        await launcher.wait(instance_id)
        cwd = (await logs.read("stdout", instance_id)).content.strip()
        assert Path(cwd).resolve() == work_dir.resolve()


class TestCompletion:
    @pytest.mark.asyncio
    async def test_exit_zero_is_success(self, launcher, statuses, logs, snapshot):
        instance_id = await launcher.start("echo", LaunchRequest(), snapshot)
        await launcher.wait(instance_id)

        info = await statuses.read(instance_id)
        assert info.running is False
        assert info.success is True
        assert info.finished >= info.started
        assert (await logs.read("stdout", instance_id)).content == "hello\nworld\n"

    @pytest.mark.asyncio
    async def test_non_zero_exit_is_failure(self, launcher, statuses, logs, snapshot):
        instance_id = await launcher.start("fail", LaunchRequest(), snapshot)
        await launcher.wait(instance_id)

        info = await statuses.read(instance_id)
        assert info.running is False
        assert info.success is False
        assert (await logs.read("stderr", instance_id)).content == "boom\n"

    @pytest.mark.asyncio
    @pytest.mark.slow
    async def test_timeout_reaches_terminal_state(self, launcher, statuses, snapshot):
        instance_id = await launcher.start("sleep", LaunchRequest(), snapshot)
        await launcher.wait(instance_id)

        info = await statuses.read(instance_id)
        assert info.running is False
        assert info.success is False
        assert info.finished - info.started < timedelta(seconds=20)
        assert launcher.running == []
