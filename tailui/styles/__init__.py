"""Style compilation: class tokens, residual declarations and content templates."""

from .compiler import CompiledStyle, StyleCompiler
from .templates import render_content

__all__ = [
    "CompiledStyle",
    "StyleCompiler",
    "render_content",
]
