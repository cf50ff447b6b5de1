"""Stencil - a small text-template compiler.

Templates mix literal text with `{variable}` placeholders and `{%command}`
blocks (if-set/else, pattern, include, wrap-include). A template is parsed
into a Document, bound with variables and pattern instances, then rendered
once into a string.

Usage:
    >>> from stencil import Document
    >>> doc = Document.from_string("Dear {name},{%if-set vip} welcome back!{%end}")
    >>> doc.set("name", "Ferris")
    >>> doc.render()
    'Dear Ferris,'
"""

from stencil._version import __version__
from stencil.document import Document, ExtractedPattern
from stencil.exceptions import (
    CanonicalizationError,
    CommandArgumentError,
    DocumentConsumedError,
    IncludeCycleError,
    MalformedTreeError,
    MisplacedCommandError,
    ReadError,
    StencilError,
    UnclosedCommandError,
    UnexpectedCommandError,
    UnknownCommandError,
    UnresolvableIncludeError,
    UnsetVariableError,
    WrapIncludeError,
)
from stencil.options import ErrorLevel, IncludeMethod, Options, load_options

__all__ = [
    "__version__",
    "Document",
    "ExtractedPattern",
    "Options",
    "IncludeMethod",
    "ErrorLevel",
    "load_options",
    # Exceptions
    "StencilError",
    "ReadError",
    "CanonicalizationError",
    "UnresolvableIncludeError",
    "IncludeCycleError",
    "UnknownCommandError",
    "CommandArgumentError",
    "MisplacedCommandError",
    "UnexpectedCommandError",
    "UnclosedCommandError",
    "WrapIncludeError",
    "UnsetVariableError",
    "MalformedTreeError",
    "DocumentConsumedError",
]
