"""Environment variable adapter.

Purpose
-------
Produce the live environment value for a configuration path. The registry asks
this adapter on every lookup, so external changes to the environment become
visible on the next ``get`` without any reload step.

Key behaviours
--------------
* Explicit bindings (``bind_env``) are checked first, in registration order;
  the first defined variable wins, an empty string counts as defined.
* With automatic lookup enabled, a name is derived as ``PREFIX_SEG1_SEG2``
  (upper-cased) when no bound variable is defined.
* The environment is an injected mapping (``os.environ`` by default) and is
  never cached.
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Sequence

from ...domain.paths import MISSING, Path


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('billing-service')
    'BILLING_SERVICE'
    """

    return slug.replace("-", "_").upper()


def derive_env_name(path: Path, prefix: str = "") -> str:
    """Return the automatic variable name for *path* under *prefix*.

    Examples
    --------
    >>> derive_env_name(("database", "host"), "app")
    'APP_DATABASE_HOST'
    >>> derive_env_name(("port",))
    'PORT'
    """

    name = "_".join(path)
    if prefix:
        name = f"{prefix}_{name}"
    return name.upper()


class EnvResolver:
    """Resolve configuration paths against an environment mapping."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Use *environ* as the provider; ``os.environ`` when omitted.

        The mapping is held by reference, so a live mapping stays live.
        """

        self._environ: Mapping[str, str] = os.environ if environ is None else environ

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ

    def resolve(
        self,
        path: Path,
        prefix: str,
        bindings: Mapping[Path, Sequence[str]],
        automatic: bool,
    ) -> Any:
        """Return the environment string for *path* or :data:`MISSING`.

        Examples
        --------
        >>> resolver = EnvResolver(environ={"SECOND": "found", "APP_PORT": "81"})
        >>> resolver.resolve(("key",), "", {("key",): ["FIRST", "SECOND"]}, False)
        'found'
        >>> resolver.resolve(("port",), "APP", {}, True)
        '81'
        >>> resolver.resolve(("port",), "APP", {}, False)
        MISSING
        """

        for name in bindings.get(path, ()):
            value = self._environ.get(name)
            if value is not None:
                return value
        if automatic:
            value = self._environ.get(derive_env_name(path, prefix))
            if value is not None:
                return value
        return MISSING
