"""
CLI: ``hookd hooks`` - list configured hooks.
"""

from __future__ import annotations

from pathlib import Path

import typer

from hookd.cli.utils import load_cli_config, print_json, print_table, resolve_settings


def list_hooks(
    config_path: Path | None = typer.Option(None, "--config", "-c", help="YAML config file"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List the hooks defined in the config file."""
    config = load_cli_config(resolve_settings(config_path=config_path))
    hooks = [hook.model_dump(mode="json") for hook in config.hooks.values()]
    if json_out:
        print_json(hooks)
        return
    rows = [
        {
            "name": h["name"],
            "command": " ".join([h["command"], *h["args"]]),
            "work_dir": h["work_dir"],
            "allowed_keys": ", ".join(h["allowed_keys"]) or "-",
            "timeout": h["timeout"],
        }
        for h in hooks
    ]
    print_table(rows, title="Hooks")
