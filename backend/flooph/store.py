"""
Variable store.

A mutable name-to-value mapping owned by a single engine. Lookups of unset
names return ``None`` (absent) rather than raising.
"""

from __future__ import annotations

import re
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Union

import yaml

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_]*\Z")


def is_identifier(name: Any) -> bool:
    """Check that name is a letter followed by letters, digits or underscores."""
    return isinstance(name, str) and IDENTIFIER_PATTERN.match(name) is not None


class VariableStore(MutableMapping):
    """
    Case-sensitive mapping of identifiers to values.

    Assignments mutate the store in place, so a store persists across engine
    calls until it is replaced.
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = {}
        if values:
            self.update(values)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __setitem__(self, name: str, value: Any) -> None:
        if not is_identifier(name):
            raise ValueError(f"Invalid variable name: {name!r}")
        self._values[name] = value

    def __delitem__(self, name: str) -> None:
        del self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"VariableStore({self._values!r})"

    def lookup(self, name: str) -> Any:
        """Return the bound value, or ``None`` when the name is unset."""
        return self._values.get(name)

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary copy."""
        return dict(self._values)

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "VariableStore":
        """Load initial values from a YAML mapping."""
        data = yaml.safe_load(yaml_content)
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(
                f"Variables document must be a mapping, got {type(data).__name__}"
            )
        return cls(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "VariableStore":
        """Load initial values from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_yaml(f.read())
