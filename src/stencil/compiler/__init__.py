"""Stencil compiler - lexes, structures and renders templates."""

from stencil.compiler.compiler import Compiler
from stencil.compiler.lexer import Lexer
from stencil.compiler.renderer import Renderer
from stencil.compiler.resolver import Resolver, read_file
from stencil.compiler.structurer import Structurer

__all__ = ["Compiler", "Lexer", "Renderer", "Resolver", "Structurer", "read_file"]
