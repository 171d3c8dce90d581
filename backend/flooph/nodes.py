"""
Parse tree nodes.

Trees are built fresh for every call and never mutated; the evaluator
dispatches on the node class.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .values import Number


# Operands and values

@dataclass(frozen=True)
class Lookup:
    name: str


@dataclass(frozen=True)
class NumberLit:
    value: Number


@dataclass(frozen=True)
class StringLit:
    value: str


@dataclass(frozen=True)
class BoolLit:
    value: bool


Operand = Union[Lookup, NumberLit, StringLit]


@dataclass(frozen=True)
class Arithmetic:
    a: Union[Lookup, NumberLit]
    op: str  # + or -
    b: Union[Lookup, NumberLit]


ValueExpr = Union[BoolLit, Arithmetic, NumberLit, StringLit, Lookup]


# Boolean expressions

@dataclass(frozen=True)
class Comparison:
    a: Operand
    op: str
    b: Operand


@dataclass(frozen=True)
class Negatable:
    """Truthiness test of a single variable, optionally inverted."""

    invert: bool
    lookup: Lookup


@dataclass(frozen=True)
class Group:
    """Parenthesized sub-expression, optionally inverted."""

    invert: bool
    inner: "Or"


Atom = Union[Comparison, Negatable, Group]


@dataclass(frozen=True)
class And:
    terms: Tuple[Atom, ...]


@dataclass(frozen=True)
class Or:
    terms: Tuple[And, ...]


BooleanExpr = Or


# Templates

@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Substitution:
    expr: ValueExpr


@dataclass(frozen=True)
class Branch:
    test: Or
    body: "Template"


@dataclass(frozen=True)
class Conditional:
    """
    A ``{?test}...{|test}...{|}...{.}`` chain.

    At most one branch contributes output: the first whose test is true,
    otherwise the else body if there is one.
    """

    tests: Tuple[Branch, ...]
    else_body: Optional["Template"] = None


@dataclass(frozen=True)
class Template:
    parts: Tuple[Union[Literal, Substitution, Conditional], ...] = ()


# Assignments

@dataclass(frozen=True)
class Assignment:
    name: str
    value: ValueExpr


@dataclass(frozen=True)
class AssignmentList:
    assignments: Tuple[Assignment, ...] = ()
