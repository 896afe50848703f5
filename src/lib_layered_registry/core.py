"""Composition root for ``lib_layered_registry``.

Purpose
-------
Provide :class:`Registry`, the single object that owns the configuration layers
and answers lookups with a fixed precedence:

``overrides > environment > config file > defaults``

Contents
--------
* :class:`Registry` – layered key/value store with typed accessors, config file
  I/O, environment bindings, aliases and sub-tree extraction.
* :func:`create_registry` – keyword factory mirroring the constructor.

System Role
-----------
This module wires the domain helpers (:mod:`.domain.paths`,
:mod:`.domain.coercion`), the merge policy, the alias table and the adapters
(codecs, file finder, atomic writer, environment resolver) together. It is the
canonical place to adjust precedence rules.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from .adapters.env.default import EnvResolver, default_env_prefix, derive_env_name
from .adapters.file_loaders.structured import BaseCodec, SUPPORTED_TYPES, codec_for
from .adapters.path_resolvers.default import find_config_file
from .adapters.writers.atomic import atomic_write_text
from .application.aliases import AliasTable
from .application.merge import deep_merge, merge_layers
from .domain import coercion
from .domain.errors import (
    AliasError,
    CircularAliasError,
    ConfigError,
    ConfigFileExistsError,
    ConfigFileNotFoundError,
    InvalidFormat,
    NoConfigDestinationError,
    NotFound,
    SelfAliasError,
    ValidationError,
)
from .domain.paths import (
    DEFAULT_DELIMITER,
    MISSING,
    Path as KeyPath,
    copy_value,
    deep_delete,
    deep_get,
    deep_set,
    flatten_keys,
    is_mapping,
    iter_leaf_paths,
    lowercase_keys,
    split_key,
)
from .observability import log_debug, log_info, make_event

DEFAULT_CONFIG_NAME = "config"
DEFAULT_CONFIG_TYPE = "json5"

ValidatorFn = Callable[[Mapping[str, Any]], Any]


class Registry:
    """Layered configuration registry with dot-notation, case-insensitive keys.

    Why
    ----
    Applications combine hard-coded defaults, a configuration file, environment
    variables and runtime overrides; callers should ask for a key once and get
    the winning value.

    What
    ----
    Owns three trees (defaults, config file, overrides), an env binding table
    and an alias table. The environment layer is derived on every lookup from
    the injected ``environ`` mapping, so it is always live.

    Parameters
    ----------
    key_delimiter:
        Separator used to split keys into path segments (default ``"."``).
    validator:
        Optional callable receiving a tree and raising when it is invalid.
        Errors propagate to the caller unchanged.
    environ:
        Mapping consulted for environment values; ``os.environ`` when omitted.
    file_finder / writer:
        Replaceable file discovery and atomic write collaborators.

    Examples
    --------
    >>> registry = Registry(environ={"APP_PORT": "9090"})
    >>> registry.set_default("port", 3000)
    >>> registry.merge_config_map({"Port": 8080})
    >>> registry.get("port")
    8080
    >>> registry.set_env_prefix("app")
    >>> registry.automatic_env()
    >>> registry.get("PORT")
    '9090'
    >>> registry.set("port", 4000)
    >>> registry.get_number("port")
    4000
    """

    def __init__(
        self,
        *,
        key_delimiter: str = DEFAULT_DELIMITER,
        validator: ValidatorFn | None = None,
        environ: Mapping[str, str] | None = None,
        file_finder: Callable[[str, str, Iterable[str]], str | None] = find_config_file,
        writer: Callable[[str, str], None] = atomic_write_text,
    ) -> None:
        if not key_delimiter:
            raise ValueError("key_delimiter must be a non-empty string")
        self._delimiter = key_delimiter
        self._validator = validator
        self._env = EnvResolver(environ=environ)
        self._find_file = file_finder
        self._write_file = writer

        self._defaults: dict[str, Any] = {}
        self._config: dict[str, Any] = {}
        self._overrides: dict[str, Any] = {}
        self._env_bindings: dict[KeyPath, list[str]] = {}
        self._aliases = AliasTable()

        self._env_prefix = ""
        self._automatic_env = False

        self._config_file: str | None = None
        self._config_name = DEFAULT_CONFIG_NAME
        self._config_type = DEFAULT_CONFIG_TYPE
        self._config_paths: list[str] = []

    @property
    def key_delimiter(self) -> str:
        return self._delimiter

    # --- defaults -----------------------------------------------------------

    def set_default(self, key: str, value: Any) -> None:
        """Store a copy of *value* as the lowest-precedence value for *key*."""

        deep_set(self._defaults, self._path(key), copy_value(value))

    def set_defaults(self, defaults: Mapping[str, Any]) -> None:
        """Merge *defaults* (keys lowercased) into the defaults layer.

        ``None`` values delete existing defaults.
        """

        self._defaults = deep_merge(self._defaults, lowercase_keys(defaults))
        log_debug("config_layer_merged", **make_event("defaults", None, {"keys": len(defaults)}))

    # --- config file settings -----------------------------------------------

    def set_config_file(self, path: str | Path) -> None:
        """Use *path* directly instead of searching the config paths."""

        self._config_file = str(path)

    def set_config_name(self, name: str) -> None:
        """Set the base file name searched for (default ``config``)."""

        self._config_name = name

    def set_config_type(self, config_type: str) -> None:
        """Set the extension searched for and the fallback codec (default ``json5``)."""

        self._config_type = config_type.lower().lstrip(".")

    def add_config_path(self, path: str | Path) -> None:
        """Append *path* to the ordered list of directories searched."""

        self._config_paths.append(str(path))

    def config_file_used(self) -> str | None:
        """Return the explicitly set or last discovered config file path."""

        return self._config_file

    # --- config file reading ------------------------------------------------

    def read_in_config(self) -> None:
        """Discover, parse and validate the config file, replacing the config layer.

        Raises
        ------
        ConfigFileNotFoundError
            When no file matches ``{name}.{type}`` in the search paths.
        InvalidFormat
            When the file cannot be parsed or its root is not a mapping.
        """

        path, tree = self._load_config_file()
        self._validate(tree)
        self._config = tree
        self._config_file = path
        log_info("config_layer_replaced", **make_event("config", path, {"keys": len(tree)}))

    def merge_in_config(self) -> None:
        """Like :meth:`read_in_config` but merges the file over the current config layer.

        The validator sees the merged tree, not the file alone.
        """

        path, tree = self._load_config_file()
        merged = deep_merge(self._config, tree)
        self._validate(merged)
        self._config = merged
        self._config_file = path
        log_info("config_layer_merged", **make_event("config", path, {"keys": len(tree)}))

    def merge_config_map(self, mapping: Mapping[str, Any]) -> None:
        """Merge *mapping* (keys lowercased) into the config layer without validation."""

        self._config = deep_merge(self._config, lowercase_keys(mapping))
        log_debug("config_layer_merged", **make_event("config", None, {"keys": len(mapping)}))

    # --- config file writing ------------------------------------------------

    async def write_config(self) -> None:
        """Write :meth:`all_settings` to the known config file path."""

        await self._write_to(self._require_destination(), safe=False)

    async def write_config_as(self, path: str | Path) -> None:
        """Write :meth:`all_settings` to *path*, replacing any existing file."""

        await self._write_to(str(path), safe=False)

    async def safe_write_config(self) -> None:
        """Write to the known config file path unless a file already exists there."""

        await self._write_to(self._require_destination(), safe=True)

    async def safe_write_config_as(self, path: str | Path) -> None:
        """Write to *path* unless a file already exists there.

        The existence check runs immediately before the write; another process
        creating the file in between is not detected.
        """

        await self._write_to(str(path), safe=True)

    # --- overrides ----------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        """Override *key* with a copy of *value*; overrides beat every other layer."""

        deep_set(self._overrides, self._path(key), copy_value(value))

    def unset(self, key: str) -> None:
        """Remove the override for *key* so lower layers apply again."""

        deep_delete(self._overrides, self._path(self._aliases.resolve(self._normalize(key))))

    # --- lookups ------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Return the winning value for *key* or *default* when no layer has it.

        Dicts and lists are returned as copies; mutating them leaves the
        registry unchanged.

        Raises
        ------
        CircularAliasError
            When *key* resolves through an alias cycle.
        """

        value = self._resolve(key)
        return default if value is MISSING else copy_value(value)

    def get_string(self, key: str) -> str:
        return coercion.to_string(self._resolve(key))

    def get_number(self, key: str) -> int | float:
        return coercion.to_number(self._resolve(key))

    def get_boolean(self, key: str) -> bool:
        return coercion.to_boolean(self._resolve(key))

    def get_list(self, key: str) -> list[Any]:
        return coercion.to_list(copy_value(self._resolve(key)))

    def get_dict(self, key: str) -> dict[str, Any]:
        return coercion.to_dict(copy_value(self._resolve(key)))

    def is_set(self, key: str) -> bool:
        """Return ``True`` when any layer (including the environment) provides *key*."""

        return self._resolve(key) is not MISSING

    # --- environment --------------------------------------------------------

    def set_env_prefix(self, prefix: str) -> None:
        """Set the prefix used for derived variable names (stored upper-case)."""

        self._env_prefix = prefix.upper()

    def bind_env(self, key: str, *env_names: str) -> None:
        """Bind *key* to one or more variable names, checked in order.

        Without names the automatic name (``PREFIX_KEY``) for the current prefix
        is bound. Repeated calls append candidates.
        """

        path = self._path(key)
        names = list(env_names) or [derive_env_name(path, self._env_prefix)]
        self._env_bindings.setdefault(path, []).extend(names)
        log_debug("env_bound", **make_event("env", None, {"key": self._delimiter.join(path), "names": names}))

    def automatic_env(self) -> None:
        """Consult ``PREFIX_KEY`` variables for every lookup."""

        self._automatic_env = True

    # --- introspection ------------------------------------------------------

    def all_keys(self) -> list[str]:
        """Return the sorted keys known to defaults, config file and overrides.

        Keys that exist only as environment variables are not listed.
        """

        keys: set[str] = set()
        for layer in (self._defaults, self._config, self._overrides):
            keys.update(flatten_keys(layer, delimiter=self._delimiter))
        return sorted(keys)

    def all_settings(self) -> dict[str, Any]:
        """Return a fresh, fully resolved tree of every known key.

        Defaults, config file and overrides are merged in that order, then each
        leaf with a live environment value is replaced by that string.
        """

        merged = merge_layers(self._defaults, self._config, self._overrides)
        for path in list(iter_leaf_paths(merged)):
            value = self._env_value(path)
            if value is not MISSING:
                deep_set(merged, path, value)
        return merged

    # --- aliases ------------------------------------------------------------

    def register_alias(self, alias: str, key: str) -> None:
        """Make *alias* resolve to *key* on every lookup.

        Raises
        ------
        SelfAliasError
            When *alias* and *key* name the same key.
        """

        self._aliases.register(self._normalize(alias), self._normalize(key))

    # --- sub-trees ----------------------------------------------------------

    def sub(self, key: str) -> Registry | None:
        """Return an independent registry built from the mapping at *key*.

        Returns ``None`` when the value is missing or not a mapping. The child
        shares the delimiter and environment provider, nothing else.

        Examples
        --------
        >>> parent = Registry()
        >>> parent.merge_config_map({"database": {"Host": "db", "port": 5432}})
        >>> child = parent.sub("database")
        >>> child.get("host"), child.get("port")
        ('db', 5432)
        >>> parent.sub("database.host") is None
        True
        """

        value = self._resolve(key)
        if not is_mapping(value):
            return None
        child = Registry(
            key_delimiter=self._delimiter,
            environ=self._env.environ,
            file_finder=self._find_file,
            writer=self._write_file,
        )
        child._config = lowercase_keys(value)
        return child

    # --- internals ----------------------------------------------------------

    def _path(self, key: str) -> KeyPath:
        return split_key(key, self._delimiter)

    def _normalize(self, key: str) -> str:
        return self._delimiter.join(self._path(key))

    def _resolve(self, key: str) -> Any:
        path = self._path(self._aliases.resolve(self._normalize(key)))
        value = deep_get(self._overrides, path)
        if value is not MISSING:
            return value
        value = self._env_value(path)
        if value is not MISSING:
            return value
        value = deep_get(self._config, path)
        if value is not MISSING:
            return value
        return deep_get(self._defaults, path)

    def _env_value(self, path: KeyPath) -> Any:
        return self._env.resolve(path, self._env_prefix, self._env_bindings, self._automatic_env)

    def _resolve_config_file(self) -> str:
        if self._config_file:
            return self._config_file
        found = self._find_file(self._config_name, self._config_type, self._config_paths)
        if found is None:
            log_debug(
                "config_file_not_found",
                **make_event("config", None, {"name": self._config_name, "type": self._config_type}),
            )
            raise ConfigFileNotFoundError(self._config_name, self._config_type, self._config_paths)
        return found

    def _codec(self, path: str) -> BaseCodec:
        suffix = Path(path).suffix.lower().lstrip(".")
        return codec_for(suffix if suffix in SUPPORTED_TYPES else self._config_type)

    def _load_config_file(self) -> tuple[str, dict[str, Any]]:
        path = self._resolve_config_file()
        return path, lowercase_keys(self._codec(path).load(path))

    def _validate(self, tree: Mapping[str, Any]) -> None:
        if self._validator is not None:
            self._validator(tree)

    def _require_destination(self) -> str:
        if not self._config_file:
            raise NoConfigDestinationError()
        return self._config_file

    async def _write_to(self, path: str, *, safe: bool) -> None:
        settings = self.all_settings()
        self._validate(settings)
        text = self._codec(path).dumps(settings)
        if safe and Path(path).exists():
            raise ConfigFileExistsError(path)
        await asyncio.to_thread(self._write_file, path, text)
        log_info("config_file_written", **make_event("config", path, {"keys": len(settings), "safe": safe}))


def create_registry(
    *,
    key_delimiter: str = DEFAULT_DELIMITER,
    validator: ValidatorFn | None = None,
    environ: Mapping[str, str] | None = None,
) -> Registry:
    """Return a new :class:`Registry`; keyword arguments mirror the constructor.

    Examples
    --------
    >>> create_registry(key_delimiter="::").key_delimiter
    '::'
    """

    return Registry(key_delimiter=key_delimiter, validator=validator, environ=environ)


__all__ = [
    "Registry",
    "create_registry",
    "default_env_prefix",
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
]
