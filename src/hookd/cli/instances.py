"""
CLI: ``hookd status`` / ``hookd logs`` / ``hookd run`` - instances from the shell.

These commands work directly on the data directory, without a running
daemon.  ``run`` launches a hook in the foreground and exits with the
hook's success.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from hookd.api.ranges import parse_range_header
from hookd.cli.utils import (
    console,
    err_console,
    fail,
    load_cli_config,
    print_dict,
    print_json,
    resolve_settings,
)
from hookd.core.errors import HookdError, InvalidRangeError
from hookd.core.models import LaunchRequest, RequestSnapshot
from hookd.execution.launcher import HookLauncher
from hookd.execution.logs import LogReader
from hookd.execution.sharding import STREAMS
from hookd.execution.status import StatusReader


def show_status(
    instance_id: str = typer.Argument(..., help="Instance ID"),
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Instance data directory"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show the status record of an instance."""
    settings = resolve_settings(data_dir=data_dir)
    try:
        info = asyncio.run(StatusReader(settings.data_dir).read(instance_id))
    except HookdError as e:
        fail(e)
    record = info.model_dump(mode="json", exclude_none=True)
    if json_out:
        print_json(record)
        return
    summary = {
        "hook": info.config.name,
        "running": info.running,
        "started": record["started"],
        "finished": record.get("finished", "-"),
        "success": record.get("success", "-"),
        "vars": ", ".join(f"{k}={v}" for k, v in sorted((info.vars or {}).items())) or "-",
    }
    print_dict(summary, title=f"Instance: {instance_id}")


def show_logs(
    instance_id: str = typer.Argument(..., help="Instance ID"),
    stream: str = typer.Option("stdout", "--stream", "-s", help="stdout or stderr"),
    byte_range: str | None = typer.Option(
        None, "--range", "-r", help="Byte range, e.g. 'bytes=0-1023' or 'bytes=-500'"
    ),
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Instance data directory"),
) -> None:
    """Print the stdout or stderr log of an instance."""
    if stream not in STREAMS:
        err_console.print(f"[bold red]Error[/bold red]: stream must be one of {', '.join(STREAMS)}")
        raise typer.Exit(code=2)
    settings = resolve_settings(data_dir=data_dir)
    try:
        parsed = parse_range_header(byte_range)
        if byte_range and parsed is None:
            raise InvalidRangeError("Only a single 'bytes=' range is supported")
        log_slice = asyncio.run(LogReader(settings.data_dir).read(stream, instance_id, parsed))
    except HookdError as e:
        fail(e)
    typer.echo(log_slice.content, nl=False)
    if log_slice.range is not None:
        start, end = log_slice.range
        err_console.print(f"[dim]bytes {start}-{end} of {log_slice.size}[/dim]")


def run_hook(
    name: str = typer.Argument(..., help="Hook name"),
    var: list[str] = typer.Option([], "--var", "-v", help="KEY=VALUE passed to the hook"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="YAML config file"),
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Instance data directory"),
) -> None:
    """Run a hook in the foreground and wait for it to finish."""
    variables: dict[str, str] = {}
    for item in var:
        key, sep, value = item.partition("=")
        if not sep or not key:
            err_console.print(f"[bold red]Error[/bold red]: expected KEY=VALUE, got {item!r}")
            raise typer.Exit(code=2)
        variables[key] = value

    settings = resolve_settings(config_path, data_dir)
    config = load_cli_config(settings)
    snapshot = RequestSnapshot.from_parts(
        uri=f"hookd://cli/run/{name}",
        method="RUN",
        http_version="cli",
        headers={"user-agent": "hookd-cli"},
    )

    async def _run() -> tuple[str, bool | None]:
        launcher = HookLauncher(config, settings.data_dir)
        instance_id = await launcher.start(name, LaunchRequest(vars=variables), snapshot)
        console.print(f"[bold]Started[/bold] {name} as {instance_id}")
        await launcher.wait(instance_id)
        info = await StatusReader(settings.data_dir).read(instance_id)
        return instance_id, info.success

    try:
        instance_id, success = asyncio.run(_run())
    except HookdError as e:
        fail(e)

    if success:
        console.print(f"[bold green]Succeeded[/bold green] {instance_id}")
        return
    err_console.print(f"[bold red]Failed[/bold red] {instance_id}")
    raise typer.Exit(code=1)
