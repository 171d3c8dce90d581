"""
Grammar for templates, conditions, values and assignments.

The grammar is a PEG: alternatives are tried in the order written and the
parser backtracks until one matches completely. Rules are plain functions
in the arpeggio style; ``Grammar`` builds one parser per root rule and
converts arpeggio parse trees into the immutable nodes from ``nodes``.

Template syntax::

    Hello, {=name}!
    {?cats>1}I have {=cats} cats.{|cats=1}One cat.{|}No cats.{.}
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List

from arpeggio import (
    EOF,
    NoMatch,
    Optional,
    ParserPython,
    PTNodeVisitor,
    StrMatch,
    Terminal,
    ZeroOrMore,
    visit_parse_tree,
)
from arpeggio import RegExMatch as _

from . import nodes
from .errors import ParseError, ParseFailureCause
from .values import parse_number

logger = logging.getLogger(__name__)

_LINE_EDGES = re.compile(r"^[ \t]+|[ \t]+$", re.MULTILINE)


def normalize_input(text: str) -> str:
    """Strip the text, then strip spaces and tabs from both ends of every line."""
    text = text.replace("\r\n", "\n").strip()
    return _LINE_EDGES.sub("", text)


# ==========================================
# Shared tokens
# ==========================================

def ws():
    # Horizontal whitespace only; newlines are significant.
    return _(r"[ \t]*")


def identifier():
    return _(r"[A-Za-z][A-Za-z0-9_]*")


def number():
    return _(r"-?[0-9]+(\.[0-9]+)?")


def string():
    return _(r'"[^"\n]*"')


def boolean():
    # Not followed by an identifier character, so `yesterday` stays a lookup.
    return _(r"(true|false|yes|no)(?![A-Za-z0-9_])")


def bang():
    return "!"


# ==========================================
# Boolean expressions
# ==========================================

def comparison_op():
    return _(r"[<>=]=?|[≤≥≠]|!=")


def operand():
    return [identifier, number, string]


def comparison():
    return operand, ws, comparison_op, ws, operand


def negation():
    # The trailing `?` reads nicely ("isDead?") but means nothing.
    return Optional(bang), identifier, Optional("?")


def group():
    return Optional(bang), "(", ws, or_expression, ws, ")"


def atom():
    return [comparison, negation, group]


def and_op():
    return _(r"&&?")


def and_expression():
    return atom, ZeroOrMore(ws, and_op, ws, atom)


def or_op():
    return _(r"\|\|?")


def or_expression():
    return and_expression, ZeroOrMore(ws, or_op, ws, and_expression)


# ==========================================
# Values
# ==========================================

def additive_op():
    return _(r"[+\-]")


def arithmetic_operand():
    return [identifier, number]


def arithmetic():
    return arithmetic_operand, ws, additive_op, ws, arithmetic_operand


def value_expression():
    return [boolean, arithmetic, number, string, identifier]


# ==========================================
# Templates
# ==========================================

def literal():
    # Any run of text that does not open a directive.
    return _(r"(?:(?!\{=|\{\?|\{\||\{\.\})[\s\S])+")


def substitution():
    return "{=", ws, value_expression, ws, "}"


def if_test():
    return "{?", ws, or_expression, ws, "}"


def elif_test():
    return "{|", ws, or_expression, ws, "}"


def else_marker():
    return "{|}"


def terminator():
    return "{.}"


def conditional():
    return (
        if_test, template,
        ZeroOrMore(elif_test, template),
        Optional(else_marker, template),
        terminator,
    )


def template():
    return ZeroOrMore([literal, substitution, conditional])


# ==========================================
# Assignments
# ==========================================

def assignment():
    return identifier, ws, ":", ws, value_expression, ws


def assignments():
    return assignment, ZeroOrMore("\n", Optional(assignment))


# ==========================================
# Root rules
# ==========================================

def template_document():
    return template, EOF


def conditional_document():
    return or_expression, EOF


def value_document():
    return value_expression, EOF


def assignments_document():
    return assignments, EOF


ROOT_RULES = {
    "template": template_document,
    "conditional": conditional_document,
    "value": value_document,
    "assignments": assignments_document,
}


_BANG = object()
_ELSE = object()


@dataclass(frozen=True)
class _Operator:
    symbol: str


@dataclass(frozen=True)
class _Test:
    expr: nodes.Or


def _flatten(children: Any) -> List[Any]:
    """Flatten the nested lists that unnamed choices and repetitions produce."""
    flat: List[Any] = []
    for child in children:
        if isinstance(child, list):
            flat.extend(_flatten(child))
        else:
            flat.append(child)
    return flat


def _describe_rule(rule: Any) -> str:
    if getattr(rule, "rule_name", "") == "EOF":
        return "end of input"
    if isinstance(rule, StrMatch):
        return repr(rule.to_match)
    name = getattr(rule, "rule_name", "")
    if name:
        return name.replace("_", " ")
    return str(rule)


def _expected(error: NoMatch) -> List[str]:
    labels: List[str] = []
    for rule in getattr(error, "rules", None) or []:
        label = _describe_rule(rule)
        if label not in labels:
            labels.append(label)
    return labels


class _TreeBuilder(PTNodeVisitor):
    """
    Converts an arpeggio parse tree into ``nodes`` objects.

    Every rule that matters has a ``visit_`` method returning a node or a
    private marker; punctuation and whitespace terminals become ``None`` and
    are dropped by arpeggio.
    """

    def visit__default__(self, node, children):
        if isinstance(node, Terminal):
            return None
        return list(children)

    # Tokens

    def visit_identifier(self, node, children):
        return nodes.Lookup(node.value)

    def visit_number(self, node, children):
        return nodes.NumberLit(parse_number(node.value))

    def visit_string(self, node, children):
        return nodes.StringLit(node.value[1:-1])

    def visit_boolean(self, node, children):
        return nodes.BoolLit(node.value in ("true", "yes"))

    def visit_bang(self, node, children):
        return _BANG

    def visit_comparison_op(self, node, children):
        return _Operator(node.value)

    def visit_additive_op(self, node, children):
        return _Operator(node.value)

    # Boolean expressions

    def visit_comparison(self, node, children):
        a, op, b = _flatten(children)
        return nodes.Comparison(a, op.symbol, b)

    def visit_negation(self, node, children):
        flat = _flatten(children)
        return nodes.Negatable(flat[0] is _BANG, flat[-1])

    def visit_group(self, node, children):
        flat = _flatten(children)
        return nodes.Group(flat[0] is _BANG, flat[-1])

    def visit_and_expression(self, node, children):
        return nodes.And(tuple(_flatten(children)))

    def visit_or_expression(self, node, children):
        return nodes.Or(tuple(_flatten(children)))

    # Values

    def visit_arithmetic(self, node, children):
        a, op, b = _flatten(children)
        return nodes.Arithmetic(a, op.symbol, b)

    # Templates

    def visit_literal(self, node, children):
        return nodes.Literal(node.value)

    def visit_substitution(self, node, children):
        (expr,) = _flatten(children)
        return nodes.Substitution(expr)

    def visit_if_test(self, node, children):
        (expr,) = _flatten(children)
        return _Test(expr)

    def visit_elif_test(self, node, children):
        (expr,) = _flatten(children)
        return _Test(expr)

    def visit_else_marker(self, node, children):
        return _ELSE

    def visit_conditional(self, node, children):
        # A body that matched nothing has no node, so every test opens a
        # branch with an empty body that a following template replaces.
        branches: List[List[Any]] = []
        else_body = None
        for item in _flatten(children):
            if isinstance(item, _Test):
                branches.append([item.expr, nodes.Template()])
            elif item is _ELSE:
                else_body = nodes.Template()
            elif else_body is not None:
                else_body = item
            else:
                branches[-1][1] = item
        return nodes.Conditional(
            tuple(nodes.Branch(test, body) for test, body in branches),
            else_body,
        )

    def visit_template(self, node, children):
        return nodes.Template(tuple(_flatten(children)))

    # Assignments

    def visit_assignment(self, node, children):
        name, value = _flatten(children)
        return nodes.Assignment(name.name, value)

    def visit_assignments(self, node, children):
        return nodes.AssignmentList(tuple(_flatten(children)))

    # Root rules

    def visit_template_document(self, node, children):
        flat = _flatten(children)
        return flat[0] if flat else nodes.Template()

    def visit_conditional_document(self, node, children):
        return _flatten(children)[0]

    def visit_value_document(self, node, children):
        return _flatten(children)[0]

    def visit_assignments_document(self, node, children):
        return _flatten(children)[0]


class Grammar:
    """
    Parser for the four root rules.

    Arpeggio parsers keep per-parse state, so a Grammar must not be shared
    between threads; each engine owns its own.
    """

    def __init__(self, memoization: bool = True):
        self.memoization = memoization
        self._parsers: Dict[str, ParserPython] = {}

    def _parser(self, rule: str) -> ParserPython:
        if rule not in ROOT_RULES:
            raise ValueError(
                f"Unknown root rule: {rule} (expected one of {', '.join(ROOT_RULES)})"
            )
        parser = self._parsers.get(rule)
        if parser is None:
            logger.debug("Building parser for %s (memoization=%s)", rule, self.memoization)
            parser = ParserPython(
                ROOT_RULES[rule],
                skipws=False,
                memoization=self.memoization,
            )
            self._parsers[rule] = parser
        return parser

    def parse(self, text: str, rule: str) -> Any:
        """
        Parse text that has already been normalized.

        Args:
            text: Input text.
            rule: One of ``template``, ``conditional``, ``value``, ``assignments``.

        Returns:
            The parse tree: Template, Or, a value node, or AssignmentList.

        Raises:
            ParseError: If the whole text does not match the rule.
        """
        parser = self._parser(rule)
        try:
            tree = parser.parse(text)
            return visit_parse_tree(tree, _TreeBuilder())
        except NoMatch as e:
            position = getattr(e, "position", 0)
            cause = ParseFailureCause.at(text, position, _expected(e))
            raise ParseError(text, rule, cause) from e
        except RecursionError as e:
            cause = ParseFailureCause.at(text, 0, [], "Input is nested too deeply")
            raise ParseError(text, rule, cause) from e
