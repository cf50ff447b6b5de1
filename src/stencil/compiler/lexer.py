"""Lexer - scans template text into a flat sequence of nodes.

Syntax:
    {name}              variable
    {%command arg}      command (`{%end%}` is accepted for argument-less commands)
    \\{                  literal `{`

Includes are resolved while lexing: `include` splices the included file's
nodes in place, `wrap-include` lexes and structures the file up front and
hands the result to the structurer inside a WrapInclude marker.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from stencil.ast.nodes import (
    Conditional,
    Else,
    End,
    Node,
    Pattern,
    Text,
    Variable,
    WrapInclude,
    WrappedContent,
)
from stencil.compiler.resolver import Resolver
from stencil.compiler.structurer import Structurer, describe
from stencil.exceptions import (
    CanonicalizationError,
    CommandArgumentError,
    IncludeCycleError,
    MisplacedCommandError,
    UnclosedCommandError,
    UnknownCommandError,
    UnresolvableIncludeError,
    WrapIncludeError,
)
from stencil.options import ErrorLevel

log = logging.getLogger(__name__)


def _is_command_char(ch: str) -> bool:
    return ch != "}"


def _is_variable_char(ch: str) -> bool:
    return ch != "}" and not ch.isspace()


def _scan(source: str, start: int, predicate: Callable[[str], bool]) -> int:
    """Return the index of the first character at or after `start` failing `predicate`."""
    end = start
    while end < len(source) and predicate(source[end]):
        end += 1
    return end


def split_command(content: str) -> Tuple[str, str]:
    """Split the text after `%` into command name and argument."""
    command, _, argument = content.strip().partition(" ")
    argument = argument.strip()
    # a closing `%` belongs to the command only when there is no argument
    if argument == "%":
        argument = ""
    if not argument and command.endswith("%"):
        command = command[:-1]
    return command, argument


def check_self_contained(reference: str, nodes: List[Node]) -> None:
    """Reject an included sequence whose commands reach outside of it.

    Raises:
        MisplacedCommandError: An `else` or `end` belongs to a command
            opened before the include.
        UnclosedCommandError: A command opened in the included file is not
            closed there.
    """
    open_commands: List[Node] = []
    for node in nodes:
        if isinstance(node, (Conditional, Pattern, WrapInclude)):
            open_commands.append(node)
        elif isinstance(node, End):
            if not open_commands:
                raise MisplacedCommandError(
                    "end", f"it would close a command opened outside '{reference}'"
                )
            open_commands.pop()
        elif isinstance(node, Else) and not open_commands:
            raise MisplacedCommandError(
                "else", f"it would divide a command opened outside '{reference}'"
            )
    if open_commands:
        raise UnclosedCommandError(describe(open_commands[0]))


class Lexer:

    """Lexes one template source.

    A Lexer is bound to the file it reads (None for a buffer) so that
    template-relative includes resolve from the right directory. Nested
    includes get their own Lexer sharing the same resolver and variables.
    """

    def __init__(
        self,
        resolver: Resolver,
        variables: Dict[str, str],
        path: Optional[Path] = None,
        in_wrap_include: bool = False,
        include_chain: Tuple[Path, ...] = (),
    ):
        """Initialize lexer.

        Args:
            resolver: Resolver used for include and wrap-include.
            variables: Table that `{%set}` writes into.
            path: The file being lexed, or None for an in-memory buffer.
            in_wrap_include: Whether `{%wrapped-content}` is allowed.
            include_chain: Canonical paths of the files currently being lexed,
                outermost first.
        """
        self.resolver = resolver
        self.variables = variables
        self.path = path
        self.in_wrap_include = in_wrap_include
        self.include_chain = include_chain

    def lex(self, source: str) -> List[Node]:
        nodes: List[Node] = []
        current: List[str] = []
        i = 0
        length = len(source)

        def flush() -> None:
            if current:
                nodes.append(Text("".join(current)))
                current.clear()

        while i < length:
            ch = source[i]

            if ch == "\\":
                if i + 1 < length:
                    nxt = source[i + 1]
                    if nxt == "{":
                        current.append("{")
                    else:
                        current.append("\\")
                        current.append(nxt)
                    i += 2
                else:
                    current.append("\\")
                    i += 1
                continue

            if ch == "{":
                if i + 1 >= length:
                    current.append("{")
                    i += 1
                    continue

                if source[i + 1] == "%":
                    end = _scan(source, i + 1, _is_command_char)
                else:
                    end = _scan(source, i + 1, _is_variable_char)
                inside = source[i + 1 : end]

                if end < length and source[end] == "}":
                    if not inside:
                        current.append("{}")
                    elif inside.startswith("%"):
                        flush()
                        self._command(inside[1:], nodes)
                    else:
                        flush()
                        nodes.append(Variable(inside))
                    i = end + 1
                else:
                    # not a placeholder, recover it as text
                    current.append("{")
                    current.append(inside)
                    i = end
                continue

            current.append(ch)
            i += 1

        flush()
        return nodes

    def _command(self, content: str, nodes: List[Node]) -> None:
        command, argument = split_command(content)

        if command in ("set", "if-set", "pattern", "include", "wrap-include"):
            if not argument:
                raise CommandArgumentError(command, argument)
        elif command in ("else", "end", "wrapped-content"):
            if argument:
                raise CommandArgumentError(command, argument)
        else:
            raise UnknownCommandError(command)

        if command == "set":
            name, _, value = argument.partition(" ")
            self.variables[name] = value
        elif command == "if-set":
            nodes.append(Conditional(argument))
        elif command == "else":
            nodes.append(Else())
        elif command == "pattern":
            nodes.append(Pattern(argument))
        elif command == "include":
            nodes.extend(self._include(argument))
        elif command == "wrap-include":
            nodes.append(self._wrap_include(argument))
        elif command == "wrapped-content":
            if not self.in_wrap_include:
                raise MisplacedCommandError(
                    command, "only a wrap-included file may use it"
                )
            nodes.append(WrappedContent())
        else:
            nodes.append(End())

    def _resolve(self, reference: str) -> Optional[Path]:
        """Resolve a reference, honouring the unknown-include error level."""
        try:
            return self.resolver.resolve(reference, self.path)
        except (UnresolvableIncludeError, CanonicalizationError) as exc:
            level = self.resolver.options.unknown_include
            if level is ErrorLevel.ERROR:
                raise
            if level is ErrorLevel.WARNING:
                log.warning("Skipping include '%s': %s", reference, exc)
            else:
                log.debug("Skipping include '%s': %s", reference, exc)
            return None

    def _sub_lexer(self, path: Path, in_wrap_include: bool) -> "Lexer":
        if path in self.include_chain:
            raise IncludeCycleError(self.include_chain + (path,))
        return Lexer(
            self.resolver,
            self.variables,
            path=path,
            in_wrap_include=in_wrap_include,
            include_chain=self.include_chain + (path,),
        )

    def _include(self, reference: str) -> List[Node]:
        path = self._resolve(reference)
        if path is None:
            return []
        lexer = self._sub_lexer(path, self.in_wrap_include)
        nodes = lexer.lex(self.resolver.load(path))
        check_self_contained(reference, nodes)
        return nodes

    def _wrap_include(self, reference: str) -> WrapInclude:
        path = self._resolve(reference)
        if path is None:
            # an empty wrapper with a single splice point keeps the body
            return WrapInclude(reference, [WrappedContent()])
        lexer = self._sub_lexer(path, in_wrap_include=True)
        flat = lexer.lex(self.resolver.load(path))
        document = Structurer(allow_wrapped_content=True).structure(flat)

        count = sum(isinstance(node, WrappedContent) for node in document)
        if count != 1:
            raise WrapIncludeError(reference, count)
        return WrapInclude(reference, document)
