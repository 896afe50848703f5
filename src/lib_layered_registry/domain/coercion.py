"""Conversions behind the registry's typed accessors.

Every function accepts a resolved value, or :data:`~lib_layered_registry.domain.paths.MISSING`
when no layer produced one, and never raises: unconvertible input falls back
to the type's zero value.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any

from .paths import MISSING, is_mapping


def to_string(value: Any) -> str:
    """Render *value* as text using JSON spellings for literals.

    Whole floats drop their fractional part and non-finite floats use the
    ``Infinity`` / ``NaN`` spellings.

    Examples
    --------
    >>> to_string(MISSING), to_string(True), to_string(None), to_string(8080)
    ('', 'true', 'null', '8080')
    >>> to_string(2.0), to_string(2.5), to_string(float("-inf"))
    ('2', '2.5', '-Infinity')
    >>> to_string(["a", 1])
    '["a", 1]'
    """

    if value is MISSING:
        return ""
    if isinstance(value, bool) or value is None:
        return json.dumps(value)
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, (list, dict)) or is_mapping(value):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def to_number(value: Any) -> int | float:
    """Convert *value* to ``int`` or ``float``; failures become ``0``.

    Strings must be plain decimal literals (optional sign, fraction and
    exponent). Spellings such as ``"inf"``, ``"1_000"`` or ``"0x10"`` are
    rejected.

    Examples
    --------
    >>> to_number("8080"), to_number(" 2.5 "), to_number("abc"), to_number(MISSING)
    (8080, 2.5, 0, 0)
    >>> to_number(True), to_number(""), to_number(float("nan"))
    (1, 0, 0)
    >>> to_number("inf"), to_number("1_000"), to_number("1e3")
    (0, 0, 1000.0)
    """

    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return 0 if isinstance(value, float) and math.isnan(value) else value
    if isinstance(value, str):
        return _parse_number(value.strip())
    return 0


_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_INTEGER = re.compile(r"[+-]?\d+", re.ASCII)


def _parse_number(text: str) -> int | float:
    if not text or not _DECIMAL.fullmatch(text):
        return 0
    if _INTEGER.fullmatch(text):
        return int(text)
    return float(text)


def to_boolean(value: Any) -> bool:
    """Interpret *value* as a flag.

    Strings are true only for ``"true"`` (any case) and ``"1"``; other types use
    their truthiness.

    Examples
    --------
    >>> [to_boolean(v) for v in (True, "TRUE", "1", "false", "0", "yes", 1, 0, MISSING)]
    [True, True, True, False, False, False, True, False, False]
    """

    if value is MISSING:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() == "true" or value == "1"
    return bool(value)


def to_list(value: Any) -> list[Any]:
    """Return *value* when it is a list, otherwise an empty list."""

    return value if isinstance(value, list) else []


def to_dict(value: Any) -> dict[str, Any]:
    """Return *value* when it is a mapping, otherwise an empty dict."""

    return value if is_mapping(value) else {}
