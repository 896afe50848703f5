"""Environment resolver tests covering bindings, automatic lookup and live reads.

The resolver receives plain dicts so each scenario controls exactly which
variables exist; one test uses ``monkeypatch`` to prove ``os.environ`` is read
live when no mapping is injected.
"""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from lib_layered_registry.adapters.env.default import EnvResolver, default_env_prefix, derive_env_name
from lib_layered_registry.domain.paths import MISSING


def test_default_env_prefix() -> None:
    assert default_env_prefix("billing-service") == "BILLING_SERVICE"


def test_derive_env_name_with_and_without_prefix() -> None:
    assert derive_env_name(("database", "host"), "APP") == "APP_DATABASE_HOST"
    assert derive_env_name(("database", "host"), "") == "DATABASE_HOST"
    assert derive_env_name(("port",), "app") == "APP_PORT"


def test_explicit_binding_resolves_without_automatic_lookup() -> None:
    resolver = EnvResolver(environ={"MY_VAR": "hello"})
    assert resolver.resolve(("database", "host"), "", {("database", "host"): ["MY_VAR"]}, False) == "hello"


def test_first_defined_binding_wins_and_empty_counts_as_defined() -> None:
    resolver = EnvResolver(environ={"SECOND": "", "THIRD": "later"})
    bindings = {("key",): ["FIRST", "SECOND", "THIRD"]}
    assert resolver.resolve(("key",), "", bindings, False) == ""


def test_bindings_take_precedence_over_automatic_lookup() -> None:
    resolver = EnvResolver(environ={"CUSTOM": "custom", "APP_DB_HOST": "auto"})
    assert resolver.resolve(("db", "host"), "APP", {("db", "host"): ["CUSTOM"]}, True) == "custom"


def test_undefined_bindings_fall_through_to_automatic_lookup() -> None:
    resolver = EnvResolver(environ={"APP_DB_HOST": "auto"})
    assert resolver.resolve(("db", "host"), "APP", {("db", "host"): ["UNSET"]}, True) == "auto"


def test_automatic_lookup_disabled_returns_missing() -> None:
    resolver = EnvResolver(environ={"APP_PORT": "1"})
    assert resolver.resolve(("port",), "APP", {}, False) is MISSING
    assert resolver.resolve(("other",), "APP", {}, True) is MISSING


def test_reads_are_live(monkeypatch) -> None:
    monkeypatch.delenv("LIB_LAYERED_REGISTRY_LIVE", raising=False)
    resolver = EnvResolver()
    bindings = {("key",): ["LIB_LAYERED_REGISTRY_LIVE"]}
    assert resolver.resolve(("key",), "", bindings, False) is MISSING
    monkeypatch.setenv("LIB_LAYERED_REGISTRY_LIVE", "now-set")
    assert resolver.resolve(("key",), "", bindings, False) == "now-set"


def test_injected_mapping_is_not_copied() -> None:
    environ: dict[str, str] = {}
    resolver = EnvResolver(environ=environ)
    assert resolver.resolve(("port",), "", {}, True) is MISSING
    environ["PORT"] = "81"
    assert resolver.resolve(("port",), "", {}, True) == "81"


SEGMENTS = st.lists(st.sampled_from(["service", "timeout", "db", "host"]), min_size=1, max_size=3)


@given(SEGMENTS, st.sampled_from(["", "APP", "DEMO"]), st.text(min_size=0, max_size=5))
def test_automatic_lookup_matches_derived_name(path, prefix, value) -> None:
    path_tuple = tuple(path)
    resolver = EnvResolver(environ={derive_env_name(path_tuple, prefix): value, "IGNORED": "1"})
    assert resolver.resolve(path_tuple, prefix, {}, True) == value
