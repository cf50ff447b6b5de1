"""Template tree nodes.

Every stage of the pipeline speaks in terms of these nodes. The lexer emits
primitive nodes plus "open" composites (a Conditional, Pattern or WrapInclude
with empty bodies); the structurer fills the bodies in and drops the Else,
End and WrappedContent markers.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

import msgspec


class Node(msgspec.Struct, tag_field="kind", tag=True):
    pass


class Text(Node):
    """Literal output."""

    value: str


class Variable(Node):
    """A placeholder resolved at render time."""

    name: str

    @property
    def placeholder(self) -> str:
        return "{" + self.name + "}"


class Conditional(Node):
    """Renders `body` when `condition_name` is set and non-empty."""

    condition_name: str
    body: List[Node] = msgspec.field(default_factory=list)
    else_body: Optional[List[Node]] = None


class Pattern(Node):
    """A named, extractable sub-tree replaced by its rendered instances."""

    name: str
    body: List[Node] = msgspec.field(default_factory=list)


class WrapInclude(Node):
    """An included document with a splice point for the enclosed content."""

    source: str
    wrapped_document: List[Node] = msgspec.field(default_factory=list)
    splice_body: List[Node] = msgspec.field(default_factory=list)


class WrappedContent(Node):
    pass


class Else(Node):
    pass


class End(Node):
    pass


MARKERS = (WrappedContent, Else, End)


def clone_nodes(nodes: List[Node]) -> List[Node]:
    """Deep copy a node sequence."""
    cloned: List[Node] = []
    for node in nodes:
        if isinstance(node, Conditional):
            cloned.append(
                Conditional(
                    node.condition_name,
                    clone_nodes(node.body),
                    None if node.else_body is None else clone_nodes(node.else_body),
                )
            )
        elif isinstance(node, Pattern):
            cloned.append(Pattern(node.name, clone_nodes(node.body)))
        elif isinstance(node, WrapInclude):
            cloned.append(
                WrapInclude(
                    node.source,
                    clone_nodes(node.wrapped_document),
                    clone_nodes(node.splice_body),
                )
            )
        elif isinstance(node, Text):
            cloned.append(Text(node.value))
        elif isinstance(node, Variable):
            cloned.append(Variable(node.name))
        else:
            cloned.append(type(node)())
    return cloned


def walk(nodes: List[Node]) -> Iterator[Node]:
    """Iterate over a tree in pre-order."""
    for node in nodes:
        yield node
        if isinstance(node, Conditional):
            yield from walk(node.body)
            if node.else_body is not None:
                yield from walk(node.else_body)
        elif isinstance(node, Pattern):
            yield from walk(node.body)
        elif isinstance(node, WrapInclude):
            yield from walk(node.wrapped_document)
            yield from walk(node.splice_body)


def find_pattern(nodes: List[Node], name: str) -> Optional[Pattern]:
    """Return the first pattern named `name`, searching depth first."""
    for node in walk(nodes):
        if isinstance(node, Pattern) and node.name == name:
            return node
    return None


def dump_tree(nodes: List[Node]) -> bytes:
    """Encode a tree as JSON, each node tagged with its `kind`."""
    return msgspec.json.encode(nodes)
