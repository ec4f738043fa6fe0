"""Tests for hookd.api.app - application factory and middleware wiring."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from hookd import __version__
from hookd.api.app import create_app
from hookd.api.middleware.errors import status_for_category
from hookd.core.errors import ConfigError, ErrorCategory
from hookd.core.config import HookdSettings
from hookd.execution.launcher import HookLauncher
from hookd.execution.logs import LogReader
from hookd.execution.status import StatusReader


class TestCreateApp:
    def test_state_is_wired(self, settings, hook_config):
        app = create_app(settings=settings, config=hook_config)
        assert app.state.config is hook_config
        assert app.state.settings is settings
        assert isinstance(app.state.launcher, HookLauncher)
        assert isinstance(app.state.log_reader, LogReader)
        assert isinstance(app.state.status_reader, StatusReader)
        assert app.state.launcher.data_dir == settings.data_dir

    def test_loads_config_from_settings(self, settings):
        app = create_app(settings=settings)
        assert "echo" in app.state.config.hooks

    def test_missing_config_file(self, tmp_path, data_dir):
        settings = HookdSettings(config_path=tmp_path / "absent.yaml", data_dir=data_dir)
        with pytest.raises(ConfigError):
            create_app(settings=settings)

    def test_routes_registered(self, settings, hook_config):
        app = create_app(settings=settings, config=hook_config)
        paths = set(app.openapi()["paths"])
        assert {
            "/health",
            "/hook/{name}",
            "/status/{instance_id}",
            "/status/{instance_id}/stdout",
            "/status/{instance_id}/stderr",
        } <= paths


class TestHealth:
    def test_health(self, settings, hook_config):
        with TestClient(create_app(settings=settings, config=hook_config)) as client:
            resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["version"] == __version__
        assert body["hooks"] == len(hook_config.hooks)
        assert body["running"] == 0


class TestRequestId:
    def test_generated(self, settings, hook_config):
        with TestClient(create_app(settings=settings, config=hook_config)) as client:
            resp = client.get("/health")
        assert len(resp.headers["X-Request-ID"]) == 36

    def test_echoed(self, settings, hook_config):
        with TestClient(create_app(settings=settings, config=hook_config)) as client:
            resp = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert resp.headers["X-Request-ID"] == "req-123"


class TestErrorMapping:
    @pytest.mark.parametrize(
        "category, status",
        [
            (ErrorCategory.NOT_FOUND, 404),
            (ErrorCategory.INVALID_RANGE, 400),
            (ErrorCategory.RANGE_NOT_SATISFIABLE, 416),
            (ErrorCategory.INTERNAL, 500),
            (ErrorCategory.CONFIG, 500),
        ],
    )
    def test_status_for_category(self, category, status):
        assert status_for_category(category) == status
