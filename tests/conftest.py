"""
Shared pytest fixtures and configuration for hookd tests.

This module provides:
- Temporary data / work directories
- Hook definitions that run the current interpreter (``sys.executable -c``)
  so tests spawn real processes without depending on shell tools
- A config file on disk for CLI tests
- Settings cache cleanup for test isolation

Usage:
    def test_something(hook_config, data_dir):
        launcher = HookLauncher(hook_config, data_dir)
"""

import sys
import uuid
from datetime import timedelta
from pathlib import Path

import pytest
import yaml

# Ensure hookd package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hookd.core.config import HookdConfig, HookdSettings, HookDefinition, get_settings
from hookd.core.models import RequestSnapshot
from hookd.execution.sharding import InstancePaths, shard_path


# =============================================================================
# Hook scripts
# =============================================================================

ECHO_SCRIPT = "print('hello'); print('world')"
FAIL_SCRIPT = "import sys; sys.stderr.write('boom\\n'); sys.exit(3)"
ENV_SCRIPT = (
    "import json, os; "
    "print(json.dumps({k: os.environ.get(k) for k in "
    "('HOOKD_TEST_A', 'HOOKD_TEST_B', 'HOOKD_TEST_C', 'HOOK_AUX_DIR')}))"
)
CWD_SCRIPT = "import os; print(os.getcwd())"
SLEEP_SCRIPT = "import time; time.sleep(30)"


def make_hook(
    script: str,
    work_dir: Path,
    *,
    allowed_keys: tuple[str, ...] = (),
    timeout: timedelta = timedelta(seconds=30),
) -> HookDefinition:
    return HookDefinition(
        command=sys.executable,
        args=("-c", script),
        work_dir=str(work_dir),
        allowed_keys=frozenset(allowed_keys),
        timeout=timeout,
    )


# =============================================================================
# Directories
# =============================================================================


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


# =============================================================================
# Config / settings
# =============================================================================


@pytest.fixture
def hook_config(work_dir: Path) -> HookdConfig:
    """Config with one hook per behaviour the tests need."""
    return HookdConfig(
        hooks={
            "echo": make_hook(ECHO_SCRIPT, work_dir),
            "fail": make_hook(FAIL_SCRIPT, work_dir),
            "env": make_hook(ENV_SCRIPT, work_dir, allowed_keys=("HOOKD_TEST_A", "HOOKD_TEST_B")),
            "cwd": make_hook(CWD_SCRIPT, work_dir),
            "sleep": make_hook(SLEEP_SCRIPT, work_dir, timeout=timedelta(seconds=1)),
            "missing": HookDefinition(
                command=str(work_dir / "no-such-binary"),
                work_dir=str(work_dir),
            ),
        }
    )


@pytest.fixture
def config_file(tmp_path: Path, hook_config: HookdConfig) -> Path:
    """The hook config written out as YAML."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(hook_config.model_dump(mode="json")), encoding="utf-8")
    return path


@pytest.fixture
def settings(config_file: Path, data_dir: Path) -> HookdSettings:
    return HookdSettings(config_path=config_file, data_dir=data_dir)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Reset cached settings around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Records
# =============================================================================


@pytest.fixture
def snapshot() -> RequestSnapshot:
    return RequestSnapshot.from_parts(
        uri="http://localhost:8080/hook/echo",
        method="post",
        http_version="HTTP/1.1",
        headers={"User-Agent": "pytest", "Content-Type": "application/json"},
        peer_address="127.0.0.1:50000",
    )


@pytest.fixture
def instance_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def instance_paths(data_dir: Path, instance_id: str) -> InstancePaths:
    """Storage subtree of ``instance_id``, with its log and aux dirs created."""
    paths = shard_path(data_dir, instance_id)
    paths.log_dir.mkdir(parents=True)
    paths.aux_dir.mkdir()
    return paths
