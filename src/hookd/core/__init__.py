"""
Core primitives for hookd: errors, logging, configuration and models.

Nothing in this package touches processes or HTTP; it is imported by both
the execution engine and the transport layer.
"""

from hookd.core.config import (
    HookDefinition,
    HookdConfig,
    HookdSettings,
    get_settings,
    load_config,
)
from hookd.core.errors import (
    ConfigError,
    ErrorCategory,
    HookdError,
    InternalError,
    InvalidRangeError,
    NotFoundError,
    RangeNotSatisfiableError,
)
from hookd.core.logging import configure_logging, get_logger
from hookd.core.models import Info, LaunchRequest, RequestSnapshot

__all__ = [
    # config
    "HookDefinition",
    "HookdConfig",
    "HookdSettings",
    "get_settings",
    "load_config",
    # errors
    "ConfigError",
    "ErrorCategory",
    "HookdError",
    "InternalError",
    "InvalidRangeError",
    "NotFoundError",
    "RangeNotSatisfiableError",
    # logging
    "configure_logging",
    "get_logger",
    # models
    "Info",
    "LaunchRequest",
    "RequestSnapshot",
]
