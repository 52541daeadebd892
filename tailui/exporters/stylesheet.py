"""Declaration-sheet exporter.

Emits one rule block per element, named ``.element-{type}-{n}`` with a
1-based position. Every block carries the element's full style attribute set
and does not depend on which attributes the class tokens already cover.
"""

from collections.abc import Iterable

from ..builder_logging import LogCategory, get_category_logger
from ..core.elements import Element
from ..styles.compiler import StyleCompiler

logger = get_category_logger(LogCategory.COMPILER)

HEADER = "/* Generated Tailwind CSS Classes */\n\n"


def rule_name(element: Element, position: int) -> str:
    """Selector for the element at 1-based ``position``."""
    return f".element-{element.type}-{position}"


class StylesheetExporter:
    """Generates a CSS declaration sheet from a list of elements."""

    def __init__(self, compiler: StyleCompiler | None = None, indent: str = "    "):
        self.compiler = compiler or StyleCompiler()
        self.indent = indent

    def render_rule(self, element: Element, position: int) -> str:
        declarations = {"position": element.position}
        declarations.update(self.compiler.residual_style(element))
        body = "".join(
            f"{self.indent}{prop}: {value};\n" for prop, value in declarations.items()
        )
        return f"{rule_name(element, position)} {{\n{body}}}\n"

    def render(self, elements: Iterable[Element]) -> str:
        """Render the declaration sheet.

        Args:
            elements: Elements in paint order.

        Returns:
            CSS text with one rule block per element.
        """
        rules = [
            self.render_rule(element, position)
            for position, element in enumerate(elements, start=1)
        ]
        logger.debug(f"Rendered stylesheet with {len(rules)} rules")
        return HEADER + "\n".join(rules)
