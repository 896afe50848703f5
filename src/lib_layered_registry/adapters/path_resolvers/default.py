"""Filesystem discovery of configuration files.

Purpose
-------
Implement the :class:`lib_layered_registry.application.ports.FileFinder` port:
given a base name, an extension and an ordered list of directories, return the
first existing ``{name}.{extension}``.

Contents
--------
* :func:`find_config_file` – first match across the search directories.
* :func:`_candidates` – yields the candidate paths in search order.

System Role
-----------
Called by :class:`lib_layered_registry.core.Registry` when no explicit config
file is set. Directories that do not exist are skipped silently.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from ...observability import log_debug


def find_config_file(name: str, extension: str, directories: Iterable[str]) -> str | None:
    """Return the first ``{name}.{extension}`` found in *directories*, in order.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> _ = (Path(tmp.name) / "app.json").write_text("{}", encoding="utf-8")
    >>> find_config_file("app", "json", ["/nonexistent", tmp.name]) == str(Path(tmp.name) / "app.json")
    True
    >>> find_config_file("app", "toml", [tmp.name]) is None
    True
    >>> tmp.cleanup()
    """

    for candidate in _candidates(name, extension, directories):
        if candidate.is_file():
            log_debug("config_file_discovered", layer="config", path=str(candidate))
            return str(candidate)
    return None


def _candidates(name: str, extension: str, directories: Iterable[str]) -> Iterator[Path]:
    filename = f"{name}.{extension.lstrip('.')}"
    for directory in directories:
        yield Path(directory) / filename
