"""
Engine configuration.

Settings can be passed directly or loaded from YAML, either as the whole
document or under a top-level ``flooph:`` key::

    flooph:
      max_input_length: 20000
      collapse_blank_lines: true
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, ConfigDict, Field


class EngineConfig(BaseModel):
    """Limits and behaviour switches for a Flooph engine."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_input_length: int = Field(
        default=100_000,
        gt=0,
        description="Longest input accepted, in characters after normalization",
    )
    memoization: bool = Field(
        default=True,
        description="Memoize rule results so backtracking stays linear",
    )
    collapse_blank_lines: bool = Field(
        default=True,
        description="Collapse runs of 3+ newlines in rendered templates to 2",
    )
    log_parse_failures: bool = Field(
        default=True,
        description="Log a warning with diagnostics when parsing fails",
    )

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "EngineConfig":
        """Load configuration from YAML content."""
        data = yaml.safe_load(yaml_content) or {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )
        if "flooph" in data:
            data = data["flooph"] or {}
        return cls.model_validate(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "EngineConfig":
        """Load configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_yaml(f.read())
