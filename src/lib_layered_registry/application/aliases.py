"""Alias table resolving alternate key names to canonical keys.

Purpose
-------
Let callers register shorthand or legacy key names that transparently resolve
to a canonical key at lookup time. Chains (``a -> b -> c``) are followed
transitively; cycles are reported when a lookup walks into one.

Contents
    - ``AliasTable``: registration and resolution.

System Role
-----------
Owned by :class:`lib_layered_registry.core.Registry`; ``Registry.get`` resolves
every requested key through the table before splitting it into a path.
Cycles are only detectable at resolution time because each half of a cycle
may be registered independently.
"""

from __future__ import annotations

from typing import Iterator

from ..domain.errors import CircularAliasError, SelfAliasError
from ..observability import log_debug


class AliasTable:
    """Mapping of lowercase alias keys to lowercase target keys.

    Examples
    --------
    >>> table = AliasTable()
    >>> table.register("DB.Host", "database.host")
    >>> table.resolve("db.host")
    'database.host'
    >>> table.resolve("other")
    'other'
    """

    def __init__(self) -> None:
        self._aliases: dict[str, str] = {}

    def register(self, alias: str, target: str) -> None:
        """Store ``alias -> target``, replacing any earlier mapping for *alias*.

        Raises
        ------
        SelfAliasError
            When both names normalise to the same key; nothing is stored.
        """

        lowered_alias = alias.lower()
        lowered_target = target.lower()
        if lowered_alias == lowered_target:
            raise SelfAliasError(alias, target)
        self._aliases[lowered_alias] = lowered_target
        log_debug("alias_registered", alias=lowered_alias, target=lowered_target)

    def resolve(self, key: str) -> str:
        """Follow alias entries from *key* until reaching a key with no entry.

        Raises
        ------
        CircularAliasError
            When the walk revisits a key.

        Examples
        --------
        >>> table = AliasTable()
        >>> table.register("a", "b")
        >>> table.register("b", "a")
        >>> table.resolve("a")
        Traceback (most recent call last):
        ...
        lib_layered_registry.domain.errors.CircularAliasError: circular alias detected: a
        """

        current = key.lower()
        seen: list[str] = []
        while current in self._aliases:
            if current in seen:
                raise CircularAliasError(current, seen)
            seen.append(current)
            current = self._aliases[current]
        return current

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and alias.lower() in self._aliases

    def __iter__(self) -> Iterator[str]:
        return iter(self._aliases)

    def __len__(self) -> int:
        return len(self._aliases)
