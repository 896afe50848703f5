"""Structured logging helpers shared by the registry and its adapters.

Purpose
    Keep every diagnostic emitted while reading, merging and writing
    configuration predictable and contextual, without forcing applications to
    adopt a specific logging backend.

Contents
    - ``TRACE_ID``: context variable storing the active trace identifier.
    - ``get_logger``: returns the package logger (silent by default).
    - ``bind_trace_id``: binds or clears the active trace identifier.
    - ``log_debug`` / ``log_info`` / ``log_warning`` / ``log_error``: emit
      structured entries through a single private emitter.
    - ``make_event``: builds the ``layer``/``path`` payload used by file events.

System Integration
    Records carry their structured fields in ``record.context`` so handlers
    configured by the host application can render or ship them as they see fit.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_layered_registry_trace_id", default=None)
"""Trace identifier attached to every structured record while bound."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_layered_registry")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers."""

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind *trace_id* for subsequent records; ``None`` clears the binding.

    Examples
    --------
    >>> bind_trace_id('req-7')
    >>> TRACE_ID.get()
    'req-7'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug entry."""

    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    """Emit a structured info entry."""

    _emit(logging.INFO, message, fields)


def log_warning(message: str, **fields: Any) -> None:
    """Emit a structured warning entry, used for best-effort steps that failed."""

    _emit(logging.WARNING, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Emit a structured error entry."""

    _emit(logging.ERROR, message, fields)


def make_event(layer: str, path: str | None, payload: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Build the payload for a layer lifecycle event.

    Inputs
        layer: Registry layer being observed (``"defaults"``, ``"config"``,
            ``"overrides"``, ``"env"``) or ``"file"`` for raw I/O.
        path: Filesystem path involved, if any.
        payload: Optional extra diagnostic fields.

    Examples
    --------
    >>> make_event('config', '/etc/demo/config.json', {'keys': 3})
    {'layer': 'config', 'path': '/etc/demo/config.json', 'keys': 3}
    """

    event: dict[str, Any] = {"layer": layer, "path": path}
    if payload:
        event |= dict(payload)
    return event


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    if not _LOGGER.isEnabledFor(level):
        return
    context = {"trace_id": TRACE_ID.get()}
    context.update(fields)
    _LOGGER.log(level, message, extra={"context": context})
