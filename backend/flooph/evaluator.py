"""
Evaluator for Flooph parse trees.

Walks a tree produced by ``Grammar`` against a variable store. Evaluation
never fails on data: missing variables render as blanks, comparisons of
incompatible values are false and arithmetic on them is absent.
"""

from __future__ import annotations

from typing import Any

from . import nodes
from .store import VariableStore
from .values import add_or_subtract, compare, format_value, is_truthy


class Evaluator:
    """
    Tree-walking evaluator.

    The store is passed in explicitly so one evaluator can serve any store;
    only assignment lists mutate it.
    """

    def evaluate(self, tree: Any, store: VariableStore) -> Any:
        """
        Evaluate any root tree.

        Args:
            tree: Template, Or, a value node, or AssignmentList.
            store: Variables to read (and, for assignments, update).

        Returns:
            Rendered text, a boolean, a value, or the updated store.
        """
        if isinstance(tree, nodes.Template):
            return self.render(tree, store)
        if isinstance(tree, nodes.Or):
            return self.test(tree, store)
        if isinstance(tree, nodes.AssignmentList):
            return self.assign(tree, store)
        return self.value(tree, store)

    # Templates

    def render(self, template: nodes.Template, store: VariableStore) -> str:
        """Concatenate the output of every part in order."""
        return "".join(self._render_part(part, store) for part in template.parts)

    def _render_part(self, part: Any, store: VariableStore) -> str:
        if isinstance(part, nodes.Literal):
            return part.text
        if isinstance(part, nodes.Substitution):
            return format_value(self.value(part.expr, store))
        if isinstance(part, nodes.Conditional):
            return self._render_conditional(part, store)
        raise TypeError(f"Unknown template part: {type(part).__name__}")

    def _render_conditional(self, conditional: nodes.Conditional, store: VariableStore) -> str:
        # First true test wins; later tests are never evaluated.
        for branch in conditional.tests:
            if self.test(branch.test, store):
                return self.render(branch.body, store)
        if conditional.else_body is not None:
            return self.render(conditional.else_body, store)
        return ""

    # Boolean expressions

    def test(self, expr: nodes.Or, store: VariableStore) -> bool:
        """Evaluate an or-expression to a boolean."""
        results = [self._and(term, store) for term in expr.terms]
        return any(results)

    def _and(self, expr: nodes.And, store: VariableStore) -> bool:
        results = [self._atom(term, store) for term in expr.terms]
        return all(results)

    def _atom(self, atom: Any, store: VariableStore) -> bool:
        if isinstance(atom, nodes.Comparison):
            left = self.value(atom.a, store)
            right = self.value(atom.b, store)
            return compare(left, atom.op, right)
        if isinstance(atom, nodes.Negatable):
            result = is_truthy(store.lookup(atom.lookup.name))
            return not result if atom.invert else result
        if isinstance(atom, nodes.Group):
            result = self.test(atom.inner, store)
            return not result if atom.invert else result
        raise TypeError(f"Unknown boolean term: {type(atom).__name__}")

    # Values

    def value(self, expr: Any, store: VariableStore) -> Any:
        """Evaluate a value expression or operand."""
        if isinstance(expr, nodes.Lookup):
            return store.lookup(expr.name)
        if isinstance(expr, (nodes.NumberLit, nodes.StringLit, nodes.BoolLit)):
            return expr.value
        if isinstance(expr, nodes.Arithmetic):
            return add_or_subtract(self.value(expr.a, store), expr.op, self.value(expr.b, store))
        raise TypeError(f"Unknown value expression: {type(expr).__name__}")

    # Assignments

    def assign(self, assignments: nodes.AssignmentList, store: VariableStore) -> VariableStore:
        """Bind each name in order; later lines see earlier assignments."""
        for assignment in assignments.assignments:
            store[assignment.name] = self.value(assignment.value, store)
        return store
