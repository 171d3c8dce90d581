"""
Flooph engine.

Ties the grammar and evaluator to a persistent variable store. Example::

    f = Flooph()
    f.update_variables('''
        debug: false
        cats: 17
        trollLocation: "cave"
    ''')
    f.conditional("cats > 3")           # True
    f.update_variables("cats: cats + 1")
    f.calculate("cats")                 # 18
    f.transform("I have {=cats} cats.")  # "I have 18 cats."
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional, Tuple

from .config import EngineConfig
from .errors import ParseError, ParseFailureCause
from .evaluator import Evaluator
from .grammar import Grammar, normalize_input
from .store import VariableStore

_BLANK_LINES = re.compile(r"\n{3,}")


class Flooph:
    """
    Reusable template and expression engine.

    Each operation accepts an optional ``variables`` mapping that replaces
    the current store before evaluating; without it the existing store is
    used. Only one operation may run against an instance at a time.
    """

    def __init__(
        self,
        variables: Optional[Mapping[str, Any]] = None,
        config: Optional[EngineConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Create an engine.

        Args:
            variables: Initial variable values.
            config: Engine configuration; defaults apply when omitted.
            logger: Logger to use instead of the module logger.
        """
        self.config = config or EngineConfig()
        self._log = logger or logging.getLogger(__name__)
        self._grammar = Grammar(memoization=self.config.memoization)
        self._evaluator = Evaluator()
        self._variables = VariableStore()
        if variables is not None:
            self.variables = variables

    @property
    def variables(self) -> VariableStore:
        """The current variable store."""
        return self._variables

    @variables.setter
    def variables(self, values: Mapping[str, Any]) -> None:
        if isinstance(values, VariableStore):
            self._variables = values
        else:
            self._variables = VariableStore(values)
        self._log.debug("Replaced variables (%d names)", len(self._variables))

    def transform(self, text: str, variables: Optional[Mapping[str, Any]] = None) -> str:
        """
        Render a template, substituting values and choosing conditional branches.

        Example::

            Hello, {=name}!
            {? cats=42 }Exactly 42 cats!
            {| cats>1 }I have {=cats} cats; soon {=cats+1}.
            {|}I don't have any cats.
            {.}

        Returns:
            The rendered text, with runs of 3+ newlines collapsed to 2.

        Raises:
            ParseError: If the template is malformed.
        """
        result = self._run("template", text, variables)
        if self.config.collapse_blank_lines:
            result = _BLANK_LINES.sub("\n\n", result)
        return result

    def conditional(self, text: str, variables: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Evaluate a boolean expression such as ``cats>0 & !(dogs>0 | debug?)``.

        Comparisons use ``< > = == ≤ <= ≥ >= ≠ !=``; ``&`` binds tighter
        than ``|``. Missing variables and mismatched types compare false.

        Raises:
            ParseError: If the expression is malformed.
        """
        return self._run("conditional", text, variables)

    def update_variables(
        self, text: str, variables: Optional[Mapping[str, Any]] = None
    ) -> VariableStore:
        """
        Apply ``name: value`` lines to the store, in order.

        Values may be booleans (true/false/yes/no), numbers, double-quoted
        strings, variable names, or a single addition/subtraction.

        Returns:
            The updated store.

        Raises:
            ParseError: If any line is malformed; the store is left untouched.
        """
        return self._run("assignments", text, variables)

    def calculate(self, text: str, variables: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Evaluate a value expression such as ``cats + dogs``.

        Returns:
            The value, or None when it refers to an unset variable.

        Raises:
            ParseError: If the expression is malformed.
        """
        return self._run("value", text, variables)

    def parse(self, text: str, rule: str = "template") -> Any:
        """Return the parse tree for text without evaluating it."""
        return self._parse(rule, normalize_input(text))

    def validate(self, text: str, rule: str = "template") -> Tuple[bool, Optional[str]]:
        """
        Check whether text parses, without evaluating it.

        Returns:
            Tuple of (is_valid, error_message).
        """
        try:
            self.parse(text, rule)
            return True, None
        except ParseError as e:
            return False, str(e)

    def _run(self, rule: str, text: str, variables: Optional[Mapping[str, Any]]) -> Any:
        if variables is not None:
            self.variables = variables
        source = normalize_input(text)
        self._log.debug("Evaluating %s (%d chars)", rule, len(source))
        tree = self._parse(rule, source)
        return self._evaluator.evaluate(tree, self._variables)

    def _parse(self, rule: str, source: str) -> Any:
        try:
            if len(source) > self.config.max_input_length:
                cause = ParseFailureCause.at(
                    source,
                    self.config.max_input_length,
                    [],
                    f"Input longer than {self.config.max_input_length} characters",
                )
                raise ParseError(source, rule, cause)
            return self._grammar.parse(source, rule)
        except ParseError as e:
            if self.config.log_parse_failures:
                self._log.warning("%s\n%s", e, e.describe())
            raise
