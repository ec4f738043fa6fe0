"""
FastAPI dependency injection - engine components and request snapshots.

Usage in routers::

    from hookd.api.deps import Launcher, Snapshot

    @router.post("/hook/{name}")
    async def start_hook(name: str, launcher: Launcher, snapshot: Snapshot):
        ...

Manifesto:
    The engine components are built once per application by
    :func:`~hookd.api.app.create_app` and stashed on ``app.state``;
    dependencies only hand them out.  Nothing here reads global state,
    so tests can run several apps side by side.

Tags:
    hookd, api, dependency-injection

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from hookd.core.config import HookdConfig
from hookd.core.models import RequestSnapshot
from hookd.execution.launcher import HookLauncher
from hookd.execution.logs import LogReader
from hookd.execution.status import StatusReader


def get_config(request: Request) -> HookdConfig:
    return request.app.state.config


def get_launcher(request: Request) -> HookLauncher:
    return request.app.state.launcher


def get_log_reader(request: Request) -> LogReader:
    return request.app.state.log_reader


def get_status_reader(request: Request) -> StatusReader:
    return request.app.state.status_reader


def get_request_snapshot(request: Request) -> RequestSnapshot:
    """Capture the launching request for the audit trail."""
    peer = f"{request.client.host}:{request.client.port}" if request.client else None
    return RequestSnapshot.from_parts(
        uri=str(request.url),
        method=request.method,
        http_version=f"HTTP/{request.scope.get('http_version', '1.1')}",
        headers=request.headers.items(),
        peer_address=peer,
    )


Config = Annotated[HookdConfig, Depends(get_config)]
Launcher = Annotated[HookLauncher, Depends(get_launcher)]
Logs = Annotated[LogReader, Depends(get_log_reader)]
Statuses = Annotated[StatusReader, Depends(get_status_reader)]
Snapshot = Annotated[RequestSnapshot, Depends(get_request_snapshot)]
