"""Domain-level exception hierarchy.

Purpose
-------
Expose the error taxonomy shared by adapters, the registry, and consuming
applications. The hierarchy lives in the domain layer so outer layers depend on
it and never the other way around.

Contents
--------
* :class:`ConfigError` – umbrella base class for all registry failures.
* :class:`InvalidFormat` – text could not be parsed into (or produced from) a
  key/value tree.
* :class:`ValidationError` – raised by the shipped pydantic validator adapter.
* :class:`NotFound` / :class:`ConfigFileNotFoundError` – discovery failures.
* :class:`ConfigFileExistsError` – safe writes refusing to clobber a file.
* :class:`NoConfigDestinationError` – writes without a known path.
* :class:`AliasError` / :class:`SelfAliasError` / :class:`CircularAliasError` –
  alias misconfiguration.

System Role
-----------
Callers catch :class:`ConfigError` to handle every library failure uniformly.
Errors raised by user supplied validators are deliberately *not* part of this
hierarchy; they propagate unchanged.
"""

from __future__ import annotations

from typing import Sequence


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_layered_registry``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class InvalidFormat(ConfigError):
    """Raised when a configuration artifact cannot be parsed or serialised.

    Typical Sources
    ---------------
    Structured codecs (:mod:`json`, :mod:`tomllib`, :mod:`yaml`), a document
    whose root is not a mapping, or an unknown config type.
    """


class ValidationError(ConfigError):
    """Signifies that a syntactically valid tree failed semantic checks.

    Raised by :func:`lib_layered_registry.adapters.validators.models.pydantic_validator`;
    ``errors`` keeps the structured detail reported by the model.
    """

    def __init__(self, message: str, errors: Sequence[object] = ()) -> None:
        super().__init__(message)
        self.errors = list(errors)


class NotFound(ConfigError):
    """Represents a missing resource (files, directories, etc.)."""


class ConfigFileNotFoundError(NotFound):
    """No configuration file matched the configured name, type and search paths.

    Examples
    --------
    >>> str(ConfigFileNotFoundError("config", "json", ["/etc/demo", "."]))
    'config file not found: searched for "config.json" in [/etc/demo, .]'
    """

    def __init__(self, name: str, config_type: str, search_paths: Sequence[str]) -> None:
        self.name = name
        self.config_type = config_type
        self.search_paths = list(search_paths)
        joined = ", ".join(self.search_paths)
        super().__init__(f'config file not found: searched for "{name}.{config_type}" in [{joined}]')


class ConfigFileExistsError(ConfigError):
    """A safe write found an existing file at the destination."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"config file already exists: {path}")


class NoConfigDestinationError(ConfigError):
    """A write was requested but no config path was ever set or discovered."""

    def __init__(self) -> None:
        super().__init__("no config file set or discovered; call read_in_config() or set_config_file() first")


class AliasError(ConfigError):
    """Base type for alias misconfiguration."""


class SelfAliasError(AliasError):
    """An alias was registered pointing at itself."""

    def __init__(self, alias: str, key: str) -> None:
        self.alias = alias
        self.key = key
        super().__init__(f'alias "{alias}" and key "{key}" are the same')


class CircularAliasError(AliasError):
    """Alias resolution revisited a key."""

    def __init__(self, key: str, chain: Sequence[str] = ()) -> None:
        self.key = key
        self.chain = list(chain)
        super().__init__(f"circular alias detected: {key}")
