"""
Root Typer application for the hookd CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from hookd import __version__

app = Typer(
    name="hookd",
    help="hookd - run preconfigured hooks and serve their status and logs.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hookd {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """hookd CLI - serve the daemon, inspect hooks and instances."""


# ── Command registration ─────────────────────────────────────────────────

from hookd.cli.hooks import list_hooks  # noqa: E402
from hookd.cli.instances import run_hook, show_logs, show_status  # noqa: E402
from hookd.cli.serve import serve  # noqa: E402

app.command("serve", help="Start the HTTP daemon.")(serve)
app.command("hooks", help="List configured hooks.")(list_hooks)
app.command("status", help="Show an instance's status record.")(show_status)
app.command("logs", help="Print an instance's stdout or stderr.")(show_logs)
app.command("run", help="Run a hook in the foreground.")(run_hook)
