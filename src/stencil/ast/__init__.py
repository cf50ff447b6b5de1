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
    clone_nodes,
    dump_tree,
    find_pattern,
    walk,
)

__all__ = [
    "Node",
    "Text",
    "Variable",
    "Conditional",
    "Pattern",
    "WrapInclude",
    "WrappedContent",
    "Else",
    "End",
    "clone_nodes",
    "dump_tree",
    "find_pattern",
    "walk",
]
