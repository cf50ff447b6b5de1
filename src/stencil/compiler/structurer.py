"""Structurer - nests the flat lexer output into a tree.

The lexer emits composites with empty bodies as opening markers. This pass
walks the sequence once with an explicit cursor, recursing on every opener so
that each `{%end}` closes whichever composite is innermost.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple

from stencil.ast.nodes import (
    Conditional,
    Else,
    End,
    Node,
    Pattern,
    WrapInclude,
    WrappedContent,
)
from stencil.exceptions import (
    MisplacedCommandError,
    UnclosedCommandError,
    UnexpectedCommandError,
)

log = logging.getLogger(__name__)


def describe(node: Node) -> str:
    """Render an opening marker the way it was written."""
    if isinstance(node, Conditional):
        return f"if-set {node.condition_name}"
    if isinstance(node, Pattern):
        return f"pattern {node.name}"
    if isinstance(node, WrapInclude):
        return f"wrap-include {node.source}"
    return type(node).__name__


def splice(wrapped_document: List[Node], splice_body: List[Node]) -> List[Node]:
    """Replace the top-level WrappedContent marker with `splice_body`."""
    merged: List[Node] = []
    for node in wrapped_document:
        if isinstance(node, WrappedContent):
            merged.extend(splice_body)
        else:
            merged.append(node)
    return merged


class Structurer:
    """Turns a flat node sequence into a nested tree."""

    def __init__(self, allow_wrapped_content: bool = False):
        """Initialize structurer.

        Args:
            allow_wrapped_content: Keep top-level WrappedContent markers. Only
                set when structuring a document reached through wrap-include.
        """
        self.allow_wrapped_content = allow_wrapped_content

    def structure(self, nodes: List[Node]) -> List[Node]:
        cursor = iter(nodes)
        body, _ = self._collect(cursor, owner=None, depth=0)
        return body

    def _collect(
        self, cursor: Iterator[Node], owner: Optional[Node], depth: int
    ) -> Tuple[List[Node], Optional[List[Node]]]:
        """Accumulate nodes until the `end` that closes `owner`.

        Returns:
            The primary body and, for a conditional that saw `else`, the
            else body.
        """
        body: List[Node] = []
        else_body: Optional[List[Node]] = None
        target = body

        for node in cursor:
            if isinstance(node, End):
                if owner is None:
                    log.warning("Ignoring {%end} with no open command")
                    continue
                return body, else_body

            if isinstance(node, Else):
                if owner is None:
                    log.warning("Ignoring {%else} with no open command")
                    continue
                if not isinstance(owner, Conditional) or else_body is not None:
                    raise UnexpectedCommandError("else")
                else_body = []
                target = else_body
                continue

            if isinstance(node, WrappedContent):
                if not self.allow_wrapped_content:
                    raise MisplacedCommandError(
                        "wrapped-content", "only a wrap-included file may use it"
                    )
                if depth > 0:
                    raise MisplacedCommandError(
                        "wrapped-content", "it cannot be nested inside another command"
                    )
                target.append(node)
                continue

            if isinstance(node, Conditional):
                inner, inner_else = self._collect(cursor, node, depth + 1)
                target.append(Conditional(node.condition_name, inner, inner_else))
            elif isinstance(node, Pattern):
                inner, _ = self._collect(cursor, node, depth + 1)
                target.append(Pattern(node.name, inner))
            elif isinstance(node, WrapInclude):
                # spliced inline, so the body stays at the current depth
                inner, _ = self._collect(cursor, node, depth)
                target.extend(splice(node.wrapped_document, inner))
            else:
                target.append(node)

        if owner is not None:
            raise UnclosedCommandError(describe(owner))
        return body, else_body
