"""
CLI: ``hookd serve`` - start the HTTP daemon.
"""

from __future__ import annotations

from pathlib import Path

import typer

from hookd.cli.utils import console, load_cli_config, resolve_settings
from hookd.core.logging import configure_logging


def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address (default: from config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default: from config)"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="YAML config file"),
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Instance data directory"),
    log_level: str | None = typer.Option(None, "--log-level", help="Override the config log level"),
) -> None:
    """Start the hookd REST API server."""
    import uvicorn

    from hookd.api.app import create_app

    settings = resolve_settings(config_path, data_dir)
    config = load_cli_config(settings)
    level = (log_level or config.log_level).upper()
    configure_logging(level=level, json_format=settings.json_logs)

    bind_host = host or config.host
    bind_port = port if port is not None else config.port
    console.print(f"[bold green]Starting hookd[/bold green] on {bind_host}:{bind_port}")
    uvicorn.run(
        create_app(settings=settings, config=config),
        host=bind_host,
        port=bind_port,
        log_level=level.lower(),
        log_config=None,
    )
