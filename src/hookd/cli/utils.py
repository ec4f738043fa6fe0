"""
CLI utility helpers - output formatting and config loading.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hookd.core.config import HookdConfig, HookdSettings, get_settings, load_config
from hookd.core.errors import HookdError

console = Console()
err_console = Console(stderr=True)


# ── Settings / config helpers ────────────────────────────────────────────


def resolve_settings(
    config_path: Path | None = None,
    data_dir: Path | None = None,
) -> HookdSettings:
    """Cached settings with CLI overrides applied."""
    settings = get_settings()
    overrides: dict[str, Any] = {}
    if config_path is not None:
        overrides["config_path"] = config_path.expanduser()
    if data_dir is not None:
        overrides["data_dir"] = data_dir.expanduser()
    return settings.model_copy(update=overrides) if overrides else settings


def load_cli_config(settings: HookdSettings) -> HookdConfig:
    """Load the YAML config, exiting with an error message on failure."""
    try:
        return load_config(settings.config_path)
    except HookdError as e:
        fail(e)


def fail(error: HookdError) -> NoReturn:
    """Print a HookdError and exit with status 1."""
    err_console.print(f"[bold red]Error[/bold red] ({error.category.value}): {escape(error.message)}")
    raise typer.Exit(code=1)


# ── Output helpers ───────────────────────────────────────────────────────


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(v) for v in row.values()))
    console.print(table)


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {v}")
