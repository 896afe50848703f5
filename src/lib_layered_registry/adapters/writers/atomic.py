"""Crash-safe file writes.

Purpose
    Persist serialised configuration without ever leaving the destination empty
    or half written.

Contents
    - ``atomic_write_text``: temp file, optional backup, atomic replace.
    - ``_backup`` / ``_replace`` / ``_discard``: the individual steps.

System Integration
    Implements the :class:`lib_layered_registry.application.ports.AtomicWriter`
    port used by the registry's ``write_config`` family.
"""

from __future__ import annotations

import os
import shutil
import uuid
from pathlib import Path

from ...observability import log_debug, log_warning

TEMP_FILE_MODE = 0o600
BACKUP_SUFFIX = ".bak"


def atomic_write_text(path: str | Path, text: str, *, backup: bool = True) -> None:
    """Write *text* to *path* via a temporary file and an atomic replace.

    Steps
        1. Write the payload to ``<name>.<pid>.<uuid>.tmp`` beside *path*.
        2. When *path* exists and *backup* is set, copy it to ``<path>.bak``
           (best effort).
        3. ``os.replace`` the temporary file onto *path*; when the platform
           refuses to replace an existing file, copy the bytes over and drop
           the temporary file instead.

    Any failure before step 3 completes leaves the previous file untouched.
    Temporary file cleanup is best effort and never masks the original error.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> target = Path(tmp.name) / "out.json"
    >>> atomic_write_text(target, '{"a": 1}\\n')
    >>> target.read_text(encoding="utf-8")
    '{"a": 1}\\n'
    >>> atomic_write_text(target, '{"a": 2}\\n')
    >>> (Path(tmp.name) / "out.json.bak").read_text(encoding="utf-8")
    '{"a": 1}\\n'
    >>> tmp.cleanup()
    """

    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    temporary = destination.with_name(f"{destination.name}.{os.getpid()}.{uuid.uuid4().hex}.tmp")

    fd = os.open(temporary, os.O_WRONLY | os.O_CREAT | os.O_EXCL, TEMP_FILE_MODE)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        if backup and destination.exists():
            _backup(destination)
        _replace(temporary, destination)
    except BaseException:
        _discard(temporary)
        raise
    log_debug("config_file_written", layer="file", path=str(destination), size=len(text))


def _backup(destination: Path) -> None:
    backup_path = destination.with_name(destination.name + BACKUP_SUFFIX)
    try:
        shutil.copy2(destination, backup_path)
    except OSError as exc:
        log_warning("atomic_write_backup_failed", layer="file", path=str(destination), error=str(exc))


def _replace(temporary: Path, destination: Path) -> None:
    try:
        os.replace(temporary, destination)
    except (PermissionError, FileExistsError) as exc:
        log_debug("atomic_write_fallback", layer="file", path=str(destination), error=str(exc))
        shutil.copyfile(temporary, destination)
        _discard(temporary)


def _discard(temporary: Path) -> None:
    try:
        temporary.unlink(missing_ok=True)
    except OSError as exc:
        log_warning("atomic_write_cleanup_failed", layer="file", path=str(temporary), error=str(exc))
