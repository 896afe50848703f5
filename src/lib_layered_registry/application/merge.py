"""Application-layer merge policy.

Purpose
-------
Combine two key/value trees into a new one following RFC 7386 style semantics:
nested mappings merge recursively, everything else is replaced wholesale, and
``None`` in the incoming tree deletes the key. The module is free of I/O so the
registry can re-merge its layers as often as it needs.

Contents
    - ``deep_merge``: public entry point for two trees.
    - ``merge_layers``: left-to-right fold over any number of trees.
    - ``_merge_mapping`` / ``_merge_key``: recursive stanzas.

System Role
-----------
Used by :class:`lib_layered_registry.core.Registry` for ``set_defaults``,
``merge_config_map``, ``merge_in_config`` and ``all_settings``. Results never
share dicts or lists with the inputs, so a later ``set`` on a stored layer
cannot leak into a snapshot returned earlier.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..domain.paths import copy_tree, copy_value, is_mapping

DELETE = None
"""Delete-sentinel: a key mapped to this value in the incoming tree is removed."""


def deep_merge(target: Mapping[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new tree with *source* merged on top of *target*.

    Why
    ----
    Layers are owned values; merging must never mutate or alias them.

    What
    ----
    Copies *target*, then walks *source* key by key: ``None`` deletes, two
    mappings merge recursively, anything else replaces (lists are never
    concatenated).

    Examples
    --------
    >>> deep_merge({"a": 1, "b": 2}, {"a": None})
    {'b': 2}
    >>> deep_merge({"db": {"host": "x", "port": 1}}, {"db": {"port": 2}})
    {'db': {'host': 'x', 'port': 2}}
    >>> deep_merge({"tags": [1, 2]}, {"tags": [3]})
    {'tags': [3]}
    >>> deep_merge({"db": {"host": "x"}}, {"db": {"host": None}})
    {'db': {}}
    """

    result = copy_tree(target)
    _merge_mapping(result, source)
    return result


def merge_layers(*trees: Mapping[str, Any]) -> dict[str, Any]:
    """Fold :func:`deep_merge` over *trees* ordered from lowest to highest precedence.

    Examples
    --------
    >>> merge_layers({"port": 1}, {"port": 2}, {"host": "h"})
    {'port': 2, 'host': 'h'}
    """

    merged: dict[str, Any] = {}
    for tree in trees:
        merged = deep_merge(merged, tree)
    return merged


def _merge_mapping(result: dict[str, Any], incoming: Mapping[str, Any]) -> None:
    """Merge *incoming* into *result*, which is already a private copy."""

    for key, value in incoming.items():
        _merge_key(result, key, value)


def _merge_key(result: dict[str, Any], key: str, value: Any) -> None:
    if value is DELETE:
        result.pop(key, None)
        return
    existing = result.get(key)
    if is_mapping(value) and is_mapping(existing):
        _merge_mapping(existing, value)
        return
    result[key] = copy_value(value)
