"""Resolver - maps include references to canonical paths and loads their text.

Three resolution methods are supported, chosen once per compilation:
- cwd: relative to the process working directory
- template: relative to the directory of the file currently being lexed
- path: relative to a configured base directory
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from stencil.exceptions import (
    CanonicalizationError,
    ReadError,
    UnresolvableIncludeError,
)
from stencil.options import IncludeMethod, Options

log = logging.getLogger(__name__)

FileLoader = Callable[[Path], str]


def read_file(path: Path) -> str:
    """Read a whole template file as UTF-8 text."""
    try:
        with open(path, "r", encoding="utf-8") as file:
            return file.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadError(path, exc) from exc


def _base_directory(path: Path) -> Path:
    """A file stands for the directory that contains it."""
    if path.is_file():
        return path.parent
    return path


class Resolver:
    """Resolves include references according to the configured Options."""

    def __init__(self, options: Options, file_loader: Optional[FileLoader] = None):
        """Initialize resolver.

        Args:
            options: Compilation options selecting the include method.
            file_loader: Callable returning the text of a path. Defaults to
                reading the file from disk.
        """
        self.options = options
        self._file_loader = file_loader or read_file

    def resolve(self, reference: str, template_path: Optional[Path] = None) -> Path:
        """Resolve an include reference to a canonical path.

        Args:
            reference: The path as written in the include command.
            template_path: Path of the file currently being lexed, or None for
                an in-memory buffer.

        Returns:
            Canonical absolute path of the included file.

        Raises:
            UnresolvableIncludeError: The method has no base to resolve from.
            CanonicalizationError: The candidate path does not exist or cannot
                be accessed.
        """
        method = self.options.include_method

        if method is IncludeMethod.CURRENT_DIRECTORY:
            candidate = Path(reference)
        elif method is IncludeMethod.TEMPLATE:
            if template_path is None:
                raise UnresolvableIncludeError(reference)
            candidate = template_path.parent / reference
        else:
            candidate = _base_directory(self.options.include_path) / reference

        try:
            resolved = candidate.resolve(strict=True)
        except (OSError, RuntimeError) as exc:
            raise CanonicalizationError(candidate, exc) from exc

        log.debug("Resolved include %r to %s", reference, resolved)
        return resolved

    def load(self, path: Path) -> str:
        """Load the full text of a resolved path."""
        try:
            return self._file_loader(path)
        except ReadError:
            raise
        except OSError as exc:
            raise ReadError(path, exc) from exc
