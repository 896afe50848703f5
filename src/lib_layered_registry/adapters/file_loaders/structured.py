"""Structured configuration codecs.

Purpose
-------
Convert configuration text into key/value trees and back. Codecs are thin
wrappers around ``json``, ``json5``, ``tomllib``/``tomli_w`` and ``yaml`` so error handling,
observability and the "root must be a mapping" rule live in one place.

Contents
--------
* :class:`BaseCodec` – shared helpers for reading files and validating roots.
* :class:`JSONCodec` – JSON documents.
* :class:`JSON5Codec` – JSON5 documents (comments, trailing commas, unquoted keys).
* :class:`TOMLCodec` – TOML documents (``tomllib`` to read, ``tomli_w`` to write).
* :class:`YAMLCodec` – YAML documents via PyYAML's safe loader/dumper.
* :func:`codec_for` – look up a codec by config type or file suffix.

System Role
-----------
:class:`lib_layered_registry.core.Registry` picks a codec from the suffix of the
resolved file (falling back to its configured type) whenever it reads or
writes a configuration file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

import json5
import tomli_w
import yaml

from ...domain.errors import InvalidFormat, NotFound
from ...observability import log_debug, log_error


class BaseCodec:
    """Common utilities shared by the structured codecs."""

    format_name = "text"

    def load(self, path: str) -> dict[str, Any]:
        """Read and parse the file at *path*.

        Raises
        ------
        NotFound
            When *path* is not a file.
        InvalidFormat
            When the content cannot be decoded or its root is not a mapping.
        """

        return self.loads(self._read(path), path=path)

    def loads(self, text: str, *, path: str = "<string>") -> dict[str, Any]:
        raise NotImplementedError

    def dumps(self, tree: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def _read(self, path: str) -> str:
        """Read *path* as UTF-8 text, raising :class:`NotFound` when missing.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', delete=False, encoding='utf-8')
        >>> _ = tmp.write('{"key": 1}')
        >>> tmp.close()
        >>> BaseCodec()._read(tmp.name)
        '{"key": 1}'
        >>> Path(tmp.name).unlink()
        """

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"Configuration file not found: {path}")
        payload = file_path.read_bytes()
        log_debug("config_file_read", layer="file", path=path, size=len(payload))
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            return self._invalid(path, exc)

    def _invalid(self, path: str, exc: Exception) -> Any:
        log_error("config_file_invalid", layer="file", path=path, format=self.format_name, error=str(exc))
        raise InvalidFormat(f"Invalid {self.format_name.upper()} in {path}: {exc}") from exc

    def _ensure_mapping(self, data: object, *, path: str) -> dict[str, Any]:
        """Reject top-level arrays, scalars and null.

        Examples
        --------
        >>> JSONCodec()._ensure_mapping({"key": 1}, path="demo")
        {'key': 1}
        >>> JSONCodec()._ensure_mapping([1], path="demo")
        Traceback (most recent call last):
        ...
        lib_layered_registry.domain.errors.InvalidFormat: Config file must contain a mapping at its root: demo
        """

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"Config file must contain a mapping at its root: {path}")
        log_debug("config_file_loaded", layer="file", path=path, format=self.format_name)
        return dict(data)


class JSONCodec(BaseCodec):
    """JSON documents, written with two-space indentation and a trailing newline.

    Examples
    --------
    >>> codec = JSONCodec()
    >>> codec.loads(codec.dumps({"a": 1, "b": {"c": [True, None]}}))
    {'a': 1, 'b': {'c': [True, None]}}
    """

    format_name = "json"

    def loads(self, text: str, *, path: str = "<string>") -> dict[str, Any]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            return self._invalid(path, exc)
        return self._ensure_mapping(data, path=path)

    def dumps(self, tree: Mapping[str, Any]) -> str:
        try:
            return json.dumps(tree, indent=2, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as exc:
            raise InvalidFormat(f"Cannot serialise configuration as JSON: {exc}") from exc


class JSON5Codec(BaseCodec):
    """JSON5 documents; plain JSON is valid JSON5, so both parse here.

    Examples
    --------
    >>> JSON5Codec().loads("{port: 8080, hosts: ['a',],}")
    {'port': 8080, 'hosts': ['a']}
    """

    format_name = "json5"

    def loads(self, text: str, *, path: str = "<string>") -> dict[str, Any]:
        try:
            data = json5.loads(text)
        except ValueError as exc:
            return self._invalid(path, exc)
        return self._ensure_mapping(data, path=path)

    def dumps(self, tree: Mapping[str, Any]) -> str:
        try:
            return json5.dumps(dict(tree), indent=2, ensure_ascii=False).rstrip() + "\n"
        except (TypeError, ValueError) as exc:
            raise InvalidFormat(f"Cannot serialise configuration as JSON5: {exc}") from exc


class TOMLCodec(BaseCodec):
    """TOML documents. TOML has no null, so trees holding ``None`` cannot be written."""

    format_name = "toml"

    def loads(self, text: str, *, path: str = "<string>") -> dict[str, Any]:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            return self._invalid(path, exc)
        return self._ensure_mapping(data, path=path)

    def dumps(self, tree: Mapping[str, Any]) -> str:
        try:
            return tomli_w.dumps(dict(tree))
        except (TypeError, ValueError) as exc:
            raise InvalidFormat(f"Cannot serialise configuration as TOML: {exc}") from exc


class YAMLCodec(BaseCodec):
    """YAML documents. An empty document parses to an empty tree."""

    format_name = "yaml"

    def loads(self, text: str, *, path: str = "<string>") -> dict[str, Any]:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            return self._invalid(path, exc)
        if data is None:
            data = {}
        return self._ensure_mapping(data, path=path)

    def dumps(self, tree: Mapping[str, Any]) -> str:
        try:
            return yaml.safe_dump(dict(tree), sort_keys=False, allow_unicode=True, default_flow_style=False)
        except yaml.YAMLError as exc:
            raise InvalidFormat(f"Cannot serialise configuration as YAML: {exc}") from exc


_CODECS: dict[str, BaseCodec] = {
    "json": JSONCodec(),
    "json5": JSON5Codec(),
    "toml": TOMLCodec(),
    "yaml": YAMLCodec(),
    "yml": YAMLCodec(),
}

SUPPORTED_TYPES: tuple[str, ...] = tuple(_CODECS)


def codec_for(config_type: str) -> BaseCodec:
    """Return the codec registered for *config_type* (``"json"`` or ``".json"``).

    Examples
    --------
    >>> codec_for(".YML").format_name
    'yaml'
    >>> codec_for("ini")
    Traceback (most recent call last):
    ...
    lib_layered_registry.domain.errors.InvalidFormat: Unsupported config type 'ini'; expected one of: json, json5, toml, yaml, yml
    """

    normalized = config_type.lower().lstrip(".")
    try:
        return _CODECS[normalized]
    except KeyError as exc:
        raise InvalidFormat(
            f"Unsupported config type {normalized!r}; expected one of: {', '.join(SUPPORTED_TYPES)}"
        ) from exc
