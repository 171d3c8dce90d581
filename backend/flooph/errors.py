"""
Errors raised by the Flooph engine.

Parsing is the only stage that fails loudly; evaluation recovers locally
(missing variables render blank, bad comparisons are false).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


class FloophError(Exception):
    """Base class for all Flooph errors."""


@dataclass
class ParseFailureCause:
    """Structured description of where and why parsing stopped."""

    position: int
    line: int
    column: int
    expected: List[str] = field(default_factory=list)
    message: str = ""

    @classmethod
    def at(cls, text: str, position: int, expected: List[str], message: str = "") -> "ParseFailureCause":
        """Build a cause for an offset into text, computing line and column."""
        position = max(0, min(position, len(text)))
        line = text.count("\n", 0, position) + 1
        column = position - (text.rfind("\n", 0, position) + 1) + 1
        if not message:
            if expected:
                message = "Expected " + " or ".join(expected)
            else:
                message = "Unexpected input"
        return cls(
            position=position,
            line=line,
            column=column,
            expected=list(expected),
            message=message,
        )

    def describe(self, text: str) -> str:
        """
        Render a multi-line diagnostic for the failing line.

        Args:
            text: The text that was parsed.

        Returns:
            The message, the offending line and a caret under the column.
        """
        lines = text.split("\n")
        source_line = lines[self.line - 1] if 0 < self.line <= len(lines) else ""
        return "\n".join([
            f"{self.message} at line {self.line}, column {self.column}",
            f"  {source_line}",
            "  " + " " * (self.column - 1) + "^",
        ])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "position": self.position,
            "line": self.line,
            "column": self.column,
            "expected": self.expected,
            "message": self.message,
        }


class ParseError(FloophError):
    """Input text does not match the grammar of the requested root rule."""

    def __init__(self, text: str, rule: str, cause: ParseFailureCause):
        self.text = text
        self.rule = rule
        self.cause = cause
        super().__init__(
            f"Failed to parse {rule} {_excerpt(text)}: {cause.message} "
            f"at line {cause.line}, column {cause.column}"
        )

    def describe(self) -> str:
        """Full diagnostic including the failing line."""
        return self.cause.describe(self.text)


def _excerpt(text: str, limit: int = 40) -> str:
    if len(text) > limit:
        text = text[:limit] + "..."
    return repr(text)
