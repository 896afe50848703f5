"""Public package surface for the layered configuration registry.

``Registry`` resolves keys across overrides, environment variables, a parsed
configuration file and defaults. The error hierarchy and the logging helpers
are re-exported so applications can import everything from the top level.
"""

from __future__ import annotations

from .core import (
    AliasError,
    CircularAliasError,
    ConfigError,
    ConfigFileExistsError,
    ConfigFileNotFoundError,
    InvalidFormat,
    NoConfigDestinationError,
    NotFound,
    Registry,
    SelfAliasError,
    ValidationError,
    create_registry,
    default_env_prefix,
)
from .domain.paths import MISSING
from .observability import bind_trace_id, get_logger

__all__ = [
    "Registry",
    "create_registry",
    "default_env_prefix",
    "MISSING",
    "ConfigError",
    "InvalidFormat",
    "ValidationError",
    "NotFound",
    "ConfigFileNotFoundError",
    "ConfigFileExistsError",
    "NoConfigDestinationError",
    "AliasError",
    "SelfAliasError",
    "CircularAliasError",
    "bind_trace_id",
    "get_logger",
]
