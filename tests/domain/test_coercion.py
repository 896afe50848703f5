from __future__ import annotations

import pytest

from lib_layered_registry.domain.coercion import to_boolean, to_dict, to_list, to_number, to_string
from lib_layered_registry.domain.paths import MISSING


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (MISSING, ""),
        ("text", "text"),
        (True, "true"),
        (False, "false"),
        (None, "null"),
        (42, "42"),
        (2.5, "2.5"),
        (2.0, "2"),
        (-0.0, "0"),
        (float("inf"), "Infinity"),
        (float("-inf"), "-Infinity"),
        (float("nan"), "NaN"),
        ([1, "a"], '[1, "a"]'),
        ({"a": 1}, '{"a": 1}'),
    ],
)
def test_to_string(value, expected) -> None:
    assert to_string(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (MISSING, 0),
        (None, 0),
        (7, 7),
        (2.5, 2.5),
        ("8080", 8080),
        (" -3 ", -3),
        ("1e3", 1000.0),
        ("+4", 4),
        (".5", 0.5),
        ("5.", 5.0),
        ("inf", 0),
        ("Infinity", 0),
        ("1_000", 0),
        ("0x10", 0),
        ("\u0661", 0),
        ("1e", 0),
        ("", 0),
        ("abc", 0),
        ("nan", 0),
        (True, 1),
        (False, 0),
        ([1], 0),
        ({"a": 1}, 0),
    ],
)
def test_to_number(value, expected) -> None:
    assert to_number(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (MISSING, False),
        (True, True),
        (False, False),
        ("true", True),
        ("TRUE", True),
        ("1", True),
        ("false", False),
        ("0", False),
        ("yes", False),
        (1, True),
        (0, False),
        ([], False),
        ({"a": 1}, True),
        (None, False),
    ],
)
def test_to_boolean(value, expected) -> None:
    assert to_boolean(value) is expected


def test_to_list_and_to_dict_fall_back_to_empty() -> None:
    items = [1, 2]
    mapping = {"a": 1}
    assert to_list(items) is items
    assert to_list("x") == []
    assert to_list(MISSING) == []
    assert to_dict(mapping) is mapping
    assert to_dict([1]) == {}
    assert to_dict(None) == {}
    assert to_dict(MISSING) == {}
