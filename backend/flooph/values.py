"""
Value model.

Values are plain Python objects: ``bool``, ``int``/``float``, ``str`` and
``None`` for a variable that is not set (absent). Every operation here is
total: incompatible operands give ``False`` or ``None`` instead of raising.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Dict, Union

Number = Union[int, float]

# Operator spellings accepted by the grammar, mapped to their canonical form.
COMPARISON_ALIASES: Dict[str, str] = {
    "<": "<",
    ">": ">",
    "=": "==",
    "==": "==",
    "≤": "<=",
    "<=": "<=",
    "≥": ">=",
    ">=": ">=",
    "≠": "!=",
    "!=": "!=",
}

_COMPARATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "<": lambda a, b: a < b,
    ">": lambda a, b: a > b,
    "==": lambda a, b: a == b,
    "<=": lambda a, b: a <= b,
    ">=": lambda a, b: a >= b,
    "!=": lambda a, b: a != b,
}

_EQUALITY_OPS = ("==", "!=")


def is_number(value: Any) -> bool:
    """True for ints and floats, but not booleans."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_number(value: Number) -> Number:
    """Collapse integral floats to ints so 17.0 behaves and prints as 17."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return value


def parse_number(token: str) -> Number:
    """Convert a numeric literal such as ``-3`` or ``3.1415``."""
    if "." in token:
        return normalize_number(float(token))
    return int(token)


def is_truthy(value: Any) -> bool:
    """A value is truthy when it is set and is not ``False``."""
    return value is not None and value is not False


def format_value(value: Any) -> str:
    """Display string used by substitutions."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        value = normalize_number(value)
        if isinstance(value, float):
            return repr(value)
        return str(value)
    return str(value)


def compare(left: Any, op: str, right: Any) -> bool:
    """
    Compare two resolved operands.

    Numbers compare numerically and strings lexically. Two booleans support
    only equality and inequality. Any other pairing, or an absent operand,
    is simply false.
    """
    canonical = COMPARISON_ALIASES.get(op)
    if canonical is None:
        raise ValueError(f"Unknown comparison operator: {op}")

    if left is None or right is None:
        return False

    if is_number(left) and is_number(right):
        pass
    elif isinstance(left, str) and isinstance(right, str):
        pass
    elif isinstance(left, bool) and isinstance(right, bool):
        if canonical not in _EQUALITY_OPS:
            return False
    else:
        return False

    return _COMPARATORS[canonical](left, right)


def add_or_subtract(left: Any, op: str, right: Any) -> Any:
    """
    Apply ``+`` or ``-``.

    Numbers add and subtract; two strings joined by ``+`` concatenate. Any
    other pairing, including an absent operand, gives ``None``.
    """
    if op == "+" and isinstance(left, str) and isinstance(right, str):
        return left + right
    if not (is_number(left) and is_number(right)):
        return None
    if op == "+":
        return normalize_number(left + right)
    if op == "-":
        return normalize_number(left - right)
    raise ValueError(f"Unknown arithmetic operator: {op}")
