from __future__ import annotations

import copy

from hypothesis import given
from hypothesis import strategies as st

from lib_layered_registry.application.merge import deep_merge, merge_layers


SCALAR = st.one_of(st.booleans(), st.integers(), st.text(min_size=1, max_size=5))
VALUE = st.recursive(
    st.one_of(SCALAR, st.lists(SCALAR, max_size=3)),
    lambda children: st.dictionaries(st.text(min_size=1, max_size=5), children, max_size=3),
    max_leaves=10,
)
MAPPING = st.dictionaries(st.text(min_size=1, max_size=5), VALUE, max_size=4)


def test_nested_merge_retains_previous_keys() -> None:
    merged = deep_merge({"db": {"host": "localhost", "port": 5432}}, {"db": {"password": "secret"}})
    assert merged == {"db": {"host": "localhost", "port": 5432, "password": "secret"}}


def test_null_deletes_keys() -> None:
    assert deep_merge({"a": 1, "b": 2}, {"a": None}) == {"b": 2}
    assert deep_merge({"a": 1}, {"missing": None}) == {"a": 1}


def test_null_delete_of_only_nested_key_keeps_parent() -> None:
    assert deep_merge({"db": {"host": "x"}}, {"db": {"host": None}}) == {"db": {}}


def test_non_mapping_values_replace_wholesale() -> None:
    assert deep_merge({"tags": [1, 2]}, {"tags": [3]}) == {"tags": [3]}
    assert deep_merge({"x": {"a": 1}}, {"x": [1]}) == {"x": [1]}
    assert deep_merge({"x": [1]}, {"x": {"a": 1}}) == {"x": {"a": 1}}
    assert deep_merge({"x": "scalar"}, {"x": {"a": 1}}) == {"x": {"a": 1}}
    assert deep_merge({"x": {"a": 1}}, {"x": 5}) == {"x": 5}


def test_result_shares_no_structure_with_inputs() -> None:
    target = {"keep": {"nested": [1]}, "both": {"a": 1}}
    source = {"both": {"b": {"deep": [2]}}, "new": {"list": [3]}}
    merged = deep_merge(target, source)

    merged["keep"]["nested"].append(99)
    merged["both"]["b"]["deep"].append(99)
    merged["new"]["list"].append(99)

    assert target == {"keep": {"nested": [1]}, "both": {"a": 1}}
    assert source == {"both": {"b": {"deep": [2]}}, "new": {"list": [3]}}


def test_merge_layers_applies_left_to_right() -> None:
    merged = merge_layers({"port": 1, "host": "a"}, {"port": 2}, {"host": None})
    assert merged == {"port": 2}


@given(MAPPING)
def test_empty_mapping_is_identity(tree) -> None:
    snapshot = copy.deepcopy(tree)
    assert deep_merge(tree, {}) == tree
    assert deep_merge({}, tree) == tree
    assert tree == snapshot


@given(MAPPING, MAPPING)
def test_merge_does_not_mutate_inputs(lhs, rhs) -> None:
    lhs_snapshot = copy.deepcopy(lhs)
    rhs_snapshot = copy.deepcopy(rhs)
    deep_merge(lhs, rhs)
    assert lhs == lhs_snapshot
    assert rhs == rhs_snapshot


@given(MAPPING, MAPPING, MAPPING)
def test_disjoint_merges_are_associative_and_commutative(a, b, c) -> None:
    b = {f"b-{key}": value for key, value in b.items()}
    c = {f"c-{key}": value for key, value in c.items()}
    a = {f"a-{key}": value for key, value in a.items()}
    left = deep_merge(deep_merge(a, b), c)
    right = deep_merge(a, deep_merge(b, c))
    swapped = deep_merge(deep_merge(c, a), b)
    assert left == right == swapped


@given(MAPPING, MAPPING)
def test_last_layer_wins(lhs, rhs) -> None:
    merged = deep_merge(lhs, rhs)

    def _assert_contains(actual, expected):
        if isinstance(expected, dict):
            assert isinstance(actual, dict)
            for sub_key, sub_val in expected.items():
                assert sub_key in actual
                _assert_contains(actual[sub_key], sub_val)
        else:
            assert actual == expected

    for key, value in rhs.items():
        _assert_contains(merged[key], value)
