"""Markup exporter.

Renders a standalone HTML page: the utility-class stylesheet loaded from the
Tailwind CDN, a column grid backdrop, and one absolutely positioned wrapper
per element carrying its compiled classes and residual style.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from ..builder_logging import LogCategory, get_category_logger
from ..core.elements import Element
from ..styles.compiler import StyleCompiler, format_number
from ..styles.templates import escape_html

logger = get_category_logger(LogCategory.COMPILER)

TAILWIND_CDN_URL = "https://cdn.tailwindcss.com"


@dataclass
class MarkupExportConfig:
    """Configuration for markup export."""

    title: str = "Generated TailwindCSS Layout"
    cdn_url: str = TAILWIND_CDN_URL
    grid_line_color: str = "#e5e7eb"
    show_grid: bool = True


class MarkupExporter:
    """Generates an HTML document from a list of elements."""

    def __init__(
        self,
        compiler: StyleCompiler | None = None,
        config: MarkupExportConfig | None = None,
    ):
        """Initialize the markup exporter.

        Args:
            compiler: Style compiler used for every element.
            config: Optional export configuration.
        """
        self.compiler = compiler or StyleCompiler()
        self.config = config or MarkupExportConfig()

    def _render_grid_css(self, columns: int) -> str:
        """Render the column backdrop rule."""
        step = format_number(round(100 / columns, 4))
        color = self.config.grid_line_color
        return (
            "        .custom-grid { background-image: repeating-linear-gradient(90deg, "
            f"transparent, transparent calc({step}% - 1px), "
            f"{color} calc({step}% - 1px), {color} {step}%); }}\n"
        )

    def render_element(self, element: Element) -> str:
        """Render one element wrapper with its inner content."""
        compiled = self.compiler.compile(element)
        element_id = escape_html(f"element-{element.id}")
        classes = escape_html(compiled.class_attr())
        style = escape_html(compiled.style_attr())
        content = self.compiler.content(element)
        return (
            f'        <div id="{element_id}" class="{classes}" style="{style}">\n'
            f"            {content}\n"
            "        </div>\n"
        )

    def render(self, elements: Iterable[Element], columns: int) -> str:
        """Render a full HTML document.

        Args:
            elements: Elements in paint order.
            columns: Number of grid columns for the backdrop (1-12).

        Returns:
            The HTML document as a string.
        """
        elements = list(elements)
        container_class = "relative min-h-screen"
        if self.config.show_grid:
            container_class += " custom-grid"

        parts = [
            "<!DOCTYPE html>\n",
            '<html lang="en">\n',
            "<head>\n",
            '    <meta charset="UTF-8">\n',
            '    <meta name="viewport" content="width=device-width, initial-scale=1.0">\n',
            f"    <title>{escape_html(self.config.title)}</title>\n",
            f'    <script src="{escape_html(self.config.cdn_url)}"></script>\n',
            "    <style>\n",
            self._render_grid_css(columns),
            "    </style>\n",
            "</head>\n",
            '<body class="bg-gray-100">\n',
            f'    <div class="{container_class}">\n',
        ]
        parts.extend(self.render_element(element) for element in elements)
        parts.append("    </div>\n</body>\n</html>\n")

        logger.debug(f"Rendered markup for {len(elements)} elements")
        return "".join(parts)
