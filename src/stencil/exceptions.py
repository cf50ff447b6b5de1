"""Stencil Exceptions

Custom exceptions raised while parsing, structuring and rendering templates.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class StencilError(Exception):
    """Base exception for all stencil errors."""

    pass


# =============================================================================
# Include resolution
# =============================================================================


class ReadError(StencilError):
    """Raised when a template file cannot be read."""

    message_format = "There was a problem reading '{path}': {cause}"

    def __init__(self, path: Path | str, cause: Exception):
        self.path = Path(path)
        self.cause = cause
        super().__init__(self.message_format.format(path=self.path, cause=cause))


class CanonicalizationError(ReadError):
    """Raised when an include path cannot be canonicalized."""

    message_format = "Could not canonicalize the path '{path}': {cause}"


class UnresolvableIncludeError(StencilError):
    """Raised when the include policy has no base to resolve a reference from."""

    def __init__(self, reference: str, base: Path | None = None):
        self.reference = reference
        self.base = base
        if base is None:
            message = (
                f"Could not find the included template '{reference}' because "
                "includes are resolved relative to the template and a buffer was parsed"
            )
        else:
            message = (
                f"Could not find the included template '{reference}' "
                f"while looking in '{base}'"
            )
        super().__init__(message)


class IncludeCycleError(StencilError):
    """Raised when a file (directly or indirectly) includes itself."""

    def __init__(self, chain: Sequence[Path]):
        self.chain = list(chain)
        trail = " -> ".join(str(p) for p in self.chain)
        super().__init__(f"Include cycle detected: {trail}")


# =============================================================================
# Commands
# =============================================================================


class UnknownCommandError(StencilError):
    """Raised for a command name the lexer does not recognize."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"'{command}' is not a valid command")


class CommandArgumentError(StencilError):
    """Raised when a command is given a missing or unexpected argument."""

    def __init__(self, command: str, argument: str):
        self.command = command
        self.argument = argument
        super().__init__(
            f"'{argument}' is not a valid argument for the command {command}"
        )


class MisplacedCommandError(StencilError):
    """Raised when a command appears somewhere it is not allowed."""

    def __init__(self, command: str, reason: str = ""):
        self.command = command
        message = f"'{command}' is not allowed here"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnexpectedCommandError(StencilError):
    """Raised for an `else` that does not divide an open `if-set`."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"'{command}' does not divide any open if-set")


class UnclosedCommandError(StencilError):
    """Raised when input ends while a command is still open."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Unclosed command '{command}': missing {{%end}}")


class WrapIncludeError(StencilError):
    """Raised when a wrap-included file has no single splice point."""

    def __init__(self, source: str, count: int):
        self.source = source
        self.count = count
        super().__init__(
            f"'{source}' must contain exactly one {{%wrapped-content}} "
            f"at its top level, found {count}"
        )


# =============================================================================
# Rendering
# =============================================================================


class UnsetVariableError(StencilError):
    """Raised when strict rendering meets a variable with no value."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Variable is not set: {name}")


class MalformedTreeError(StencilError):
    """Raised when a structuring marker reaches the renderer."""

    def __init__(self, node: object):
        self.node = node
        super().__init__(f"Marker node reached the renderer: {node!r}")


class DocumentConsumedError(StencilError):
    """Raised when using a document that has already been rendered."""

    def __init__(self) -> None:
        super().__init__("Document has already been rendered; parse it again")
