"""Compiler - runs the lexer and structurer over a template source."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from stencil.ast.nodes import Node
from stencil.compiler.lexer import Lexer
from stencil.compiler.resolver import FileLoader, Resolver
from stencil.compiler.structurer import Structurer
from stencil.options import Options

log = logging.getLogger(__name__)


class Compiler:
    """Compiles template text into a structured tree."""

    def __init__(
        self,
        options: Optional[Options] = None,
        file_loader: Optional[FileLoader] = None,
    ):
        self.options = options or Options()
        self.resolver = Resolver(self.options, file_loader)

    def parse(
        self,
        source: str,
        variables: Dict[str, str],
        path: Optional[Path] = None,
    ) -> List[Node]:
        """Lex and structure `source`.

        Args:
            source: Template text.
            variables: Table that `{%set}` commands write into.
            path: File the text was read from, None for a buffer.

        Returns:
            Structured top-level nodes.
        """
        chain = () if path is None else (path.resolve(),)

        lexer = Lexer(self.resolver, variables, path=path, include_chain=chain)
        flat = lexer.lex(source)
        return Structurer().structure(flat)

    def parse_file(self, path: Path, variables: Dict[str, str]) -> List[Node]:
        """Read and compile a template file."""
        log.debug("Compiling %s", path)
        return self.parse(self.resolver.load(path), variables, path=path)
