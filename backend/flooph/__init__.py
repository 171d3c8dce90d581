"""
Flooph: a small template and expression language.

This package provides text templating with substitutions and conditional
branches, boolean expression evaluation, simple add/subtract arithmetic,
and a line-oriented variable assignment syntax.
"""

from .config import EngineConfig
from .engine import Flooph
from .errors import FloophError, ParseError, ParseFailureCause
from .evaluator import Evaluator
from .grammar import Grammar
from .store import VariableStore

__version__ = "1.0.0"
__all__ = [
    "Flooph",
    "EngineConfig",
    "VariableStore",
    "Grammar",
    "Evaluator",
    "FloophError",
    "ParseError",
    "ParseFailureCause",
]
