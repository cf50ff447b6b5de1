"""Document - a parsed template together with its bindings.

A Document owns its tree, its variable table and its pattern-instance table.
Rendering consumes it: the tree is handed to the renderer and dropped, so a
rendered Document has to be parsed again to be rendered again.

Example:
    >>> doc = Document.from_string("<ul>{%pattern item}<li>{text}</li>{%end}</ul>")
    >>> item = doc.get_pattern("item")
    >>> for text in ("one", "two"):
    ...     instance = item.copy()
    ...     instance.set("text", text)
    ...     doc.add_pattern(instance)
    >>> doc.render()
    '<ul><li>one</li><li>two</li></ul>'
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from stencil.ast.nodes import Node, Pattern, clone_nodes, find_pattern, walk
from stencil.compiler.compiler import Compiler
from stencil.compiler.renderer import Renderer
from stencil.compiler.resolver import FileLoader
from stencil.exceptions import DocumentConsumedError
from stencil.options import Options

log = logging.getLogger(__name__)


class Document:
    """A parsed template ready to be bound and rendered."""

    def __init__(
        self,
        nodes: List[Node],
        path: Optional[Path] = None,
        options: Optional[Options] = None,
        variables: Optional[Dict[str, str]] = None,
        patterns: Optional[Dict[str, List[str]]] = None,
    ):
        self._nodes: Optional[List[Node]] = nodes
        self._path = path
        self.options = options or Options()
        self._variables: Dict[str, str] = dict(variables or {})
        self._patterns: Dict[str, List[str]] = {
            name: list(instances) for name, instances in (patterns or {}).items()
        }

    @classmethod
    def from_file(
        cls,
        path: Path | str,
        options: Optional[Options] = None,
        file_loader: Optional[FileLoader] = None,
    ) -> "Document":
        """Read and parse a template file."""
        path = Path(path)
        options = options or Options()
        variables: Dict[str, str] = {}
        nodes = Compiler(options, file_loader).parse_file(path, variables)
        return cls(nodes, path=path, options=options, variables=variables)

    @classmethod
    def from_string(
        cls,
        source: str,
        options: Optional[Options] = None,
        file_loader: Optional[FileLoader] = None,
    ) -> "Document":
        """Parse a template held in memory."""
        options = options or Options()
        variables: Dict[str, str] = {}
        nodes = Compiler(options, file_loader).parse(source, variables)
        return cls(nodes, options=options, variables=variables)

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def nodes(self) -> List[Node]:
        return self._tree()

    @property
    def variables(self) -> Dict[str, str]:
        return dict(self._variables)

    @property
    def patterns(self) -> Dict[str, List[str]]:
        """Registered pattern instances, by pattern name."""
        return {name: list(instances) for name, instances in self._patterns.items()}

    @property
    def consumed(self) -> bool:
        return self._nodes is None

    def _tree(self) -> List[Node]:
        if self._nodes is None:
            raise DocumentConsumedError()
        return self._nodes

    # -------------------------------------------------------------------------
    # Variables
    # -------------------------------------------------------------------------

    def set(self, name: str, value: str) -> None:
        """Bind `name` to `value`."""
        self._tree()
        self._variables[name] = value

    def unset(self, name: str) -> None:
        self._tree()
        self._variables.pop(name, None)

    def clear_variables(self) -> None:
        """Clear all variables, including those bound by `{%set}`."""
        self._tree()
        self._variables.clear()

    # -------------------------------------------------------------------------
    # Patterns
    # -------------------------------------------------------------------------

    def pattern_names(self) -> List[str]:
        """Names of the patterns in the tree, in document order."""
        names: List[str] = []
        for node in walk(self._tree()):
            if isinstance(node, Pattern) and node.name not in names:
                names.append(node.name)
        return names

    def get_pattern(self, name: str) -> Optional["ExtractedPattern"]:
        """Extract a pattern as an independent document.

        The pattern body is deep copied along with the current variables, so
        the extracted document can be bound and rendered without touching
        this one.

        Returns:
            The extracted pattern, or None if no pattern has that name.
        """
        pattern = find_pattern(self._tree(), name)
        if pattern is None:
            return None
        document = Document(
            clone_nodes(pattern.body),
            path=self._path,
            options=self.options,
            variables=self._variables,
        )
        return ExtractedPattern(name, document)

    def register_pattern_instance(self, name: str, text: str) -> None:
        """Append an already rendered instance of pattern `name`."""
        self._tree()
        self._patterns.setdefault(name, []).append(text)
        log.debug("Registered instance %d of pattern %s", len(self._patterns[name]), name)

    def add_pattern(self, pattern: "ExtractedPattern") -> None:
        """Render an extracted pattern and register it under its original name."""
        self.register_pattern_instance(pattern.name, pattern.render())

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def copy(self) -> "Document":
        """Return an independent clone of this document."""
        return Document(
            clone_nodes(self._tree()),
            path=self._path,
            options=self.options,
            variables=self._variables,
            patterns=self._patterns,
        )

    def render(self) -> str:
        """Render the document to text. The document cannot be used afterwards.

        Set variables are substituted; unset ones are passed through as
        `{name}` unless Options.unset_variable says otherwise.
        """
        nodes = self._tree()
        self._nodes = None
        renderer = Renderer(self.options.unset_variable)
        return renderer.render(nodes, self._variables, self._patterns)


class ExtractedPattern:
    """A pattern pulled out of a Document for independent binding.

    `name` is the slot in the parent's pattern-instance table that this
    pattern is registered into; `label` may be changed freely.
    """

    def __init__(self, name: str, document: Document):
        self._name = name
        self.label = name
        self.document = document

    @property
    def name(self) -> str:
        return self._name

    def set(self, name: str, value: str) -> None:
        self.document.set(name, value)

    def copy(self) -> "ExtractedPattern":
        extracted = ExtractedPattern(self._name, self.document.copy())
        extracted.label = self.label
        return extracted

    def render(self) -> str:
        return self.document.render()

    def __repr__(self) -> str:
        return f"ExtractedPattern(name={self._name!r}, label={self.label!r})"
