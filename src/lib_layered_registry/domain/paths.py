"""Path addressing over nested key/value trees.

Purpose
-------
Turn raw key strings into lowercase path tuples and provide get/set/delete and
enumeration helpers over arbitrarily nested ``dict`` trees. The module belongs
to the domain layer and performs no I/O.

Contents
--------
* :data:`MISSING` – marker for "no value", distinct from ``None``.
* :func:`is_mapping` – the single "is this a mergeable object" predicate.
* :func:`split_key` – raw key to path tuple.
* :func:`deep_get` / :func:`deep_set` / :func:`deep_delete` – tree access.
* :func:`iter_leaf_paths` / :func:`flatten_keys` – leaf enumeration.
* :func:`lowercase_keys` / :func:`copy_tree` – structural copies.

System Role
-----------
Every layer of :class:`lib_layered_registry.core.Registry` is addressed through
these helpers so that case-insensitivity and the object-vs-array-vs-null rules
are applied identically everywhere.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final, Iterator

Path = tuple[str, ...]
"""Lowercase key segments produced by :func:`split_key`."""

DEFAULT_DELIMITER: Final[str] = "."


class _Missing:
    """Type of :data:`MISSING`; a falsy singleton with a readable repr."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()
"""Returned by lookups when no value is present. ``None`` is a present value."""


def is_mapping(value: object) -> bool:
    """Return ``True`` when *value* is a nested object (not a list, not ``None``).

    Examples
    --------
    >>> is_mapping({}), is_mapping([]), is_mapping(None), is_mapping("x")
    (True, False, False, False)
    """

    return isinstance(value, Mapping)


def split_key(raw_key: str, delimiter: str = DEFAULT_DELIMITER) -> Path:
    """Lowercase *raw_key*, split it on *delimiter* and drop empty segments.

    Examples
    --------
    >>> split_key("Database.Host")
    ('database', 'host')
    >>> split_key("..a..b.")
    ('a', 'b')
    >>> split_key("...")
    ()
    >>> split_key("Server::Port", "::")
    ('server', 'port')
    """

    return tuple(segment for segment in raw_key.lower().split(delimiter) if segment)


def deep_get(tree: Mapping[str, Any], path: Path) -> Any:
    """Return the value addressed by *path* or :data:`MISSING`.

    Examples
    --------
    >>> deep_get({"a": {"b": 0}}, ("a", "b"))
    0
    >>> deep_get({"a": [1, 2]}, ("a", "b"))
    MISSING
    >>> deep_get({"a": None}, ("a",)) is None
    True
    """

    current: Any = tree
    for segment in path:
        if not is_mapping(current) or segment not in current:
            return MISSING
        current = current[segment]
    return current


def deep_set(tree: dict[str, Any], path: Path, value: Any) -> None:
    """Assign *value* at *path*, replacing non-mapping intermediates with ``{}``.

    Examples
    --------
    >>> data = {"a": "scalar"}
    >>> deep_set(data, ("a", "b"), [1])
    >>> data
    {'a': {'b': [1]}}
    """

    if not path:
        return
    cursor = tree
    for segment in path[:-1]:
        child = cursor.get(segment)
        if not is_mapping(child):
            child = {}
            cursor[segment] = child
        cursor = child
    cursor[path[-1]] = value


def deep_delete(tree: dict[str, Any], path: Path) -> None:
    """Remove the key at *path*; missing or non-mapping intermediates are ignored.

    Examples
    --------
    >>> data = {"a": {"b": 1, "c": 2}}
    >>> deep_delete(data, ("a", "b"))
    >>> data
    {'a': {'c': 2}}
    >>> deep_delete(data, ("a", "c", "d"))
    >>> data
    {'a': {'c': 2}}
    """

    if not path:
        return
    cursor: Any = tree
    for segment in path[:-1]:
        if not is_mapping(cursor):
            return
        cursor = cursor.get(segment)
    if is_mapping(cursor):
        cursor.pop(path[-1], None)


def iter_leaf_paths(tree: Mapping[str, Any], prefix: Path = ()) -> Iterator[Path]:
    """Yield the path of every leaf (lists and ``None`` are leaves).

    Empty nested mappings contain no leaves and therefore yield nothing.
    """

    for key, value in tree.items():
        path = (*prefix, key)
        if is_mapping(value):
            yield from iter_leaf_paths(value, path)
        else:
            yield path


def flatten_keys(tree: Mapping[str, Any], prefix: str | None = None, delimiter: str = DEFAULT_DELIMITER) -> list[str]:
    """Return the delimited path of every leaf in *tree*, optionally prefixed.

    Examples
    --------
    >>> sorted(flatten_keys({"a": 1, "b": {"c": [1], "d": None}}))
    ['a', 'b.c', 'b.d']
    >>> flatten_keys({"x": 1}, prefix="root")
    ['root.x']
    """

    keys = [delimiter.join(path) for path in iter_leaf_paths(tree)]
    if prefix:
        return [f"{prefix}{delimiter}{key}" for key in keys]
    return keys


def lowercase_keys(tree: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of *tree* with every mapping key lowercased recursively.

    Examples
    --------
    >>> lowercase_keys({"Server": {"Port": 80}, "Tags": ["A"]})
    {'server': {'port': 80}, 'tags': ['A']}
    """

    result: dict[str, Any] = {}
    for key, value in tree.items():
        if is_mapping(value):
            result[str(key).lower()] = lowercase_keys(value)
        else:
            result[str(key).lower()] = copy_value(value)
    return result


def copy_tree(tree: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively clone *tree* so the result shares no mutable structure.

    Examples
    --------
    >>> source = {"a": {"b": [1]}}
    >>> clone = copy_tree(source)
    >>> clone["a"]["b"].append(2)
    >>> source
    {'a': {'b': [1]}}
    """

    return {key: copy_value(value) for key, value in tree.items()}


def copy_value(value: Any) -> Any:
    """Clone dicts and lists; scalars are immutable and returned unchanged."""

    if is_mapping(value):
        return copy_tree(value)
    if isinstance(value, list):
        return [copy_value(item) for item in value]
    return value
