"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts the registry relies on so adapters can be
swapped (for tests or alternative formats) without touching the resolution
engine.

Contents
--------
* :class:`ConfigCodec` – text to tree and tree to text.
* :class:`FileFinder` – first matching file across search directories.
* :class:`AtomicWriter` – crash-safe persistence of text.
* :class:`Validator` – opaque tree validation.
* :data:`EnvironmentProvider` – read-only view of the process environment.

System Role
-----------
:class:`lib_layered_registry.core.Registry` accepts any object satisfying these
protocols; the default adapters live under :mod:`lib_layered_registry.adapters`.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol, runtime_checkable

EnvironmentProvider = Mapping[str, str]
"""Any mapping of variable names to values; ``os.environ`` in production."""


@runtime_checkable
class ConfigCodec(Protocol):
    """Parse and serialise one structured format.

    Why
    ----
    Keep format concerns (JSON, TOML, YAML) out of the registry.
    """

    def loads(self, text: str, *, path: str = "<string>") -> Mapping[str, Any]:
        """Parse *text*; raise ``InvalidFormat`` for malformed input or a non-mapping root."""

    def dumps(self, tree: Mapping[str, Any]) -> str:
        """Serialise *tree* so that :meth:`loads` reproduces it."""


@runtime_checkable
class FileFinder(Protocol):
    """Locate ``{name}.{extension}`` across ordered directories."""

    def __call__(self, name: str, extension: str, directories: Iterable[str]) -> str | None:
        """Return the first existing match or ``None``."""


@runtime_checkable
class AtomicWriter(Protocol):
    """Persist text at a path with replace-and-backup semantics."""

    def __call__(self, path: str, text: str) -> None:
        """Write *text* to *path* or raise ``OSError``."""


@runtime_checkable
class Validator(Protocol):
    """Validate a tree and return the (possibly normalised) tree.

    Errors raised by implementations reach the registry's caller unchanged.
    """

    def __call__(self, tree: Mapping[str, Any]) -> Any:
        """Return the validated tree or raise."""
