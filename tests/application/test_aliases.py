from __future__ import annotations

import pytest

from lib_layered_registry.application.aliases import AliasTable
from lib_layered_registry.domain.errors import CircularAliasError, SelfAliasError


def test_unaliased_key_resolves_to_itself() -> None:
    assert AliasTable().resolve("Database.Host") == "database.host"


def test_alias_is_case_insensitive() -> None:
    table = AliasTable()
    table.register("DB.Host", "Database.HOST")
    assert table.resolve("db.HOST") == "database.host"
    assert "DB.HOST" in table


def test_chain_resolves_through_every_hop() -> None:
    table = AliasTable()
    table.register("a", "b")
    table.register("b", "c")
    assert table.resolve("a") == "c"
    assert table.resolve("b") == "c"


def test_re_registration_overwrites() -> None:
    table = AliasTable()
    table.register("a", "b")
    table.register("a", "c")
    assert table.resolve("a") == "c"
    assert len(table) == 1


def test_self_alias_is_rejected_and_not_stored() -> None:
    table = AliasTable()
    with pytest.raises(SelfAliasError, match="same"):
        table.register("Key", "key")
    assert len(table) == 0


def test_cycle_is_detected_at_resolution_time() -> None:
    table = AliasTable()
    table.register("a", "b")
    table.register("b", "a")
    with pytest.raises(CircularAliasError) as excinfo:
        table.resolve("a")
    assert excinfo.value.key == "a"
    assert excinfo.value.chain == ["a", "b"]


def test_longer_cycle_detected_from_outside_entry() -> None:
    table = AliasTable()
    table.register("entry", "x")
    table.register("x", "y")
    table.register("y", "z")
    table.register("z", "x")
    with pytest.raises(CircularAliasError):
        table.resolve("entry")
