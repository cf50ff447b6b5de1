"""Renderer - converts a structured tree to the final text."""

from __future__ import annotations

import logging
from typing import List, Mapping, Sequence

from stencil.ast.nodes import MARKERS, Conditional, Node, Pattern, Text, Variable
from stencil.exceptions import MalformedTreeError, UnsetVariableError
from stencil.options import ErrorLevel

log = logging.getLogger(__name__)


def is_set(variables: Mapping[str, str], name: str) -> bool:
    """A variable counts as set only when bound to a non-empty string."""
    return bool(variables.get(name))


class Renderer:
    """Renders a structured tree with a variable table and pattern instances."""

    def __init__(self, unset_variable: ErrorLevel = ErrorLevel.NO_ERROR):
        """Initialize renderer.

        Args:
            unset_variable: What to do with a variable that has no value.
                `no_error` and `warning` pass the placeholder through as
                `{name}`, `error` raises UnsetVariableError.
        """
        self.unset_variable = unset_variable

    def render(
        self,
        nodes: Sequence[Node],
        variables: Mapping[str, str],
        patterns: Mapping[str, Sequence[str]],
    ) -> str:
        """Render a tree to text.

        Args:
            nodes: Structured top-level nodes.
            variables: Variable name -> value.
            patterns: Pattern name -> rendered instances in registration order.

        Returns:
            The rendered text.
        """
        parts: List[str] = []
        self._render_into(parts, nodes, variables, patterns)
        return "".join(parts)

    def _render_into(
        self,
        parts: List[str],
        nodes: Sequence[Node],
        variables: Mapping[str, str],
        patterns: Mapping[str, Sequence[str]],
    ) -> None:
        for node in nodes:
            if isinstance(node, Text):
                parts.append(node.value)
            elif isinstance(node, Variable):
                parts.append(self._variable(node, variables))
            elif isinstance(node, Conditional):
                if is_set(variables, node.condition_name):
                    self._render_into(parts, node.body, variables, patterns)
                elif node.else_body is not None:
                    self._render_into(parts, node.else_body, variables, patterns)
            elif isinstance(node, Pattern):
                parts.extend(patterns.get(node.name, ()))
            elif isinstance(node, MARKERS):
                raise MalformedTreeError(node)
            else:
                raise TypeError(f"Cannot render node: {node!r}")

    def _variable(self, node: Variable, variables: Mapping[str, str]) -> str:
        if node.name in variables:
            return variables[node.name]

        if self.unset_variable is ErrorLevel.ERROR:
            raise UnsetVariableError(node.name)
        if self.unset_variable is ErrorLevel.WARNING:
            log.warning("Variable is not set: %s", node.name)
        return node.placeholder
