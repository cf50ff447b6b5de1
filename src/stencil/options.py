"""Compilation options for stencil.

Options select how includes are resolved and how strictly unresolved
includes and unset variables are treated:
- include_method: cwd | template | path
- include_path: base directory for the `path` method
- unknown_include: error | warning | no_error
- unset_variable: error | warning | no_error

They can be built in code or loaded from a YAML file:

    include_method: path
    include_path: ./partials
    unset_variable: warning
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class IncludeMethod(str, Enum):
    """Root from which relative include paths are resolved."""

    CURRENT_DIRECTORY = "cwd"
    TEMPLATE = "template"
    PATH = "path"


class ErrorLevel(str, Enum):
    """How a recoverable problem is reported."""

    ERROR = "error"
    WARNING = "warning"
    NO_ERROR = "no_error"


class Options(BaseModel):
    """Options shared by every file reached from one top-level compilation."""

    model_config = {"frozen": True}

    include_method: IncludeMethod = Field(
        default=IncludeMethod.TEMPLATE,
        description="Where relative include paths are resolved from",
    )
    include_path: Path | None = Field(
        default=None, description="Base path used by the 'path' include method"
    )
    unknown_include: ErrorLevel = Field(
        default=ErrorLevel.ERROR,
        description="What to do with an include that cannot be resolved",
    )
    unset_variable: ErrorLevel = Field(
        default=ErrorLevel.NO_ERROR,
        description="What to do with a variable that has no value at render time",
    )

    @field_validator("unknown_include", "unset_variable", mode="before")
    @classmethod
    def coerce_bool_level(cls, value: Any) -> Any:
        """Accept booleans: True means error, False means no error."""
        if isinstance(value, bool):
            return ErrorLevel.ERROR if value else ErrorLevel.NO_ERROR
        return value

    @model_validator(mode="after")
    def require_include_path(self) -> "Options":
        if self.include_method is IncludeMethod.PATH and self.include_path is None:
            raise ValueError("include_path is required when include_method is 'path'")
        return self


def load_options(path: Path) -> Options:
    """Load Options from a YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Options file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return Options.model_validate(data)
