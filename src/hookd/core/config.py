"""
Daemon configuration - hook definitions, bind address, and paths.

Two layers, resolved once at startup and then treated as immutable values
that are passed explicitly into each component:

``HookdSettings``
    Process-level knobs read from ``HOOKD_*`` environment variables or a
    ``.env`` file: where the YAML config lives and where instance data is
    stored.

``HookdConfig``
    The YAML document itself: a mapping of hook name to
    :class:`HookDefinition`, plus bind address and log level.

Example config::

    host: 0.0.0.0
    port: 8080
    log_level: INFO
    hooks:
      deploy:
        command: /usr/local/bin/deploy.sh
        work_dir: /srv/app
        allowed_keys: [BRANCH, COMMIT]
        timeout: 600          # seconds, or an ISO-8601 duration like PT10M

Manifesto:
    Configuration is a value, not ambient global state.  Components take
    the config and data directory as constructor arguments so each one can
    be tested in isolation with a throwaway config.

Tags:
    hookd, configuration, settings, pydantic, yaml

Doc-Types:
    api-reference
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from hookd.core.errors import ConfigError

DEFAULT_TIMEOUT = timedelta(hours=1)


class HookDefinition(BaseModel):
    """Configuration for a specific hook.

    Immutable after load; a copy of it is embedded in every status record
    so that later config edits don't rewrite history.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(default="", description="Hook name (key in the hooks mapping)")
    command: str = Field(description="Program to execute")
    args: tuple[str, ...] = Field(default=(), description="Arguments passed to the program")
    work_dir: str = Field(description="Working directory for the command")
    allowed_keys: frozenset[str] = Field(
        default=frozenset(),
        description="Env var keys a launch request may pass through",
    )
    timeout: timedelta = Field(
        default=DEFAULT_TIMEOUT,
        description="Maximum run time before the process is killed",
    )

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, v: timedelta) -> timedelta:
        if v <= timedelta(0):
            raise ValueError("timeout must be positive")
        return v

    @field_serializer("allowed_keys")
    def _sorted_keys(self, keys: frozenset[str]) -> list[str]:
        return sorted(keys)

    @field_serializer("args")
    def _args_list(self, args: tuple[str, ...]) -> list[str]:
        return list(args)


class HookdConfig(BaseModel):
    """Service configuration loaded from YAML."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    hooks: dict[str, HookDefinition] = Field(default_factory=dict)
    host: str = Field(default="127.0.0.1", description="Address to bind to")
    port: int = Field(default=8080, ge=0, le=65535, description="Port to bind to")
    log_level: str = Field(default="INFO", description="Log level for the daemon")

    @field_validator("hooks", mode="before")
    @classmethod
    def _inject_names(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        named: dict[str, Any] = {}
        for name, definition in v.items():
            if isinstance(definition, dict):
                definition = {**definition, "name": name}
            elif isinstance(definition, HookDefinition):
                definition = definition.model_copy(update={"name": name})
            named[name] = definition
        return named

    def get_hook(self, name: str) -> HookDefinition | None:
        return self.hooks.get(name)

    @classmethod
    def from_yaml(cls, yaml_content: str) -> HookdConfig:
        """Parse and validate a YAML document.

        Raises:
            ConfigError: If the YAML is malformed or fails validation.
        """
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}", cause=e) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid config: {e}", cause=e) from e


def load_config(path: str | Path) -> HookdConfig:
    """Load the service config from a YAML file.

    Raises:
        ConfigError: If the file can't be read or its content is invalid.
    """
    config_path = Path(path).expanduser()
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            f"Couldn't read config file {config_path}", cause=e
        ).with_context(path=str(config_path)) from e
    return HookdConfig.from_yaml(content)


class HookdSettings(BaseSettings):
    """Process-level settings.

    Order of precedence (highest → lowest):
        1. Environment variables (``HOOKD_DATA_DIR``, etc.)
        2. ``.env`` file
        3. Defaults below
    """

    model_config = SettingsConfigDict(
        env_prefix="HOOKD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    config_path: Path = Field(
        default=Path("~/.config/hookd/config.yaml"),
        validate_default=True,
        description="YAML file with hook definitions",
    )
    data_dir: Path = Field(
        default=Path("~/.local/share/hookd"),
        validate_default=True,
        description="Root of the sharded instance storage",
    )
    json_logs: bool | None = Field(
        default=None,
        description="Force JSON (True) or console (False) logs; auto-detect when unset",
    )

    @field_validator("config_path", "data_dir")
    @classmethod
    def _expand_user(cls, v: Path) -> Path:
        return v.expanduser()


@lru_cache(maxsize=1)
def get_settings() -> HookdSettings:
    """Cached settings - loaded once per process."""
    return HookdSettings()


__all__ = [
    "DEFAULT_TIMEOUT",
    "HookDefinition",
    "HookdConfig",
    "HookdSettings",
    "get_settings",
    "load_config",
]
