"""
FastAPI application factory.

``create_app()`` loads configuration, builds the engine components once,
and wires middleware, routers, error handlers and lifespan events into a
single ``FastAPI`` instance.

Manifesto:
    The app factory is the single composition root.  Configuration and
    the data directory are threaded into each component here; nothing
    downstream reads settings on its own.

Tags:
    hookd, api, app-factory, composition-root, FastAPI

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from hookd import __version__
from hookd.api.middleware.errors import hookd_error_handler, unhandled_exception_handler
from hookd.api.middleware.request_id import RequestIDMiddleware
from hookd.core.config import HookdConfig, HookdSettings, get_settings, load_config
from hookd.core.errors import HookdError
from hookd.core.logging import get_logger
from hookd.execution.launcher import HookLauncher
from hookd.execution.logs import LogReader
from hookd.execution.status import StatusReader

log = get_logger("hookd.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup / shutdown hooks."""
    settings: HookdSettings = app.state.settings
    config: HookdConfig = app.state.config
    log.info(
        "hookd starting",
        version=app.version,
        hooks=sorted(config.hooks),
        data_dir=str(settings.data_dir),
    )
    yield
    # instances keep running as orphans of the event loop; their records
    # stay at running=true
    running = app.state.launcher.running
    if running:
        log.warning("hookd shutting down with running instances", count=len(running), ids=running)
    else:
        log.info("hookd shutting down")


def create_app(
    *,
    settings: HookdSettings | None = None,
    config: HookdConfig | None = None,
) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : HookdSettings | None
        Override settings (useful for testing).  When ``None`` the cached
        singleton from :func:`get_settings` is used.
    config : HookdConfig | None
        Override the hook configuration.  When ``None`` it is loaded from
        ``settings.config_path``.
    """

    settings = settings or get_settings()
    config = config or load_config(settings.config_path)
    data_dir = settings.data_dir

    app = FastAPI(
        title="hookd",
        version=__version__,
        lifespan=lifespan,
    )

    # Stash settings and components on app state for dependencies
    app.state.settings = settings
    app.state.config = config
    app.state.launcher = HookLauncher(config, data_dir)
    app.state.log_reader = LogReader(data_dir)
    app.state.status_reader = StatusReader(data_dir)

    # ── Middleware ───────────────────────────────────────────────────
    app.add_middleware(RequestIDMiddleware)

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(HookdError, hookd_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    from hookd.api.routers import health, hooks, instances

    app.include_router(health.router)
    app.include_router(hooks.router, tags=["hooks"])
    app.include_router(instances.router, tags=["instances"])

    return app
