"""Style compiler: element attributes to utility class tokens and residual CSS.

Each element compiles to:

- an ordered tuple of utility class tokens (Tailwind class names), and
- residual style declarations for everything the token vocabulary does not
  cover exactly.

Tokens are advisory; residual declarations are authoritative for rendering,
so e.g. border width is always written as a declaration even when a token
was also chosen. Token order is fixed (display, position, shadow, border
style, flex, font weight, border radius, border width, animation) so that
re-compiling identical input always yields identical output.
"""

from dataclasses import dataclass, field
from typing import Any

from ..core.elements import Element
from .templates import render_content

DISPLAY_TOKENS = {
    "block": "block",
    "flex": "flex",
    "grid": "grid",
    "inline": "inline",
    "inline-block": "inline-block",
    "hidden": "hidden",
}
DEFAULT_DISPLAY_TOKEN = "block"

POSITION_TOKENS = frozenset(["absolute", "relative", "fixed", "sticky"])

BORDER_STYLE_TOKENS = {
    "dashed": "border-dashed",
    "dotted": "border-dotted",
    "double": "border-double",
}
SOLID_BORDER_TOKEN = "border-solid"

# Weight 400 and anything not listed intentionally produce nothing at all
FONT_WEIGHT_TOKENS = {
    100: "font-thin",
    200: "font-extralight",
    300: "font-light",
    500: "font-medium",
    600: "font-semibold",
    700: "font-bold",
    800: "font-extrabold",
    900: "font-black",
}

# (inclusive upper bound, token); larger radii fall through to the last token
BORDER_RADIUS_BUCKETS = (
    (2, "rounded-sm"),
    (4, "rounded"),
    (6, "rounded-md"),
    (8, "rounded-lg"),
    (12, "rounded-xl"),
)
LARGEST_RADIUS_TOKEN = "rounded-2xl"
CIRCLE_RADIUS_TOKEN = "rounded-full"

BORDER_WIDTH_TOKENS = {
    1: "border",
    2: "border-2",
    4: "border-4",
    8: "border-8",
}

ANIMATION_TOKENS = {
    "bounce": "animate-bounce",
    "pulse": "animate-pulse",
    "spin": "animate-spin",
}

# CSS keyword -> Tailwind suffix
JUSTIFY_SUFFIXES = {
    "flex-start": "start",
    "flex-end": "end",
    "space-between": "between",
    "space-around": "around",
    "space-evenly": "evenly",
}
ALIGN_SUFFIXES = {
    "flex-start": "start",
    "flex-end": "end",
}
FLEX_DIRECTION_TOKENS = {
    "column": "flex-col",
    "row-reverse": "flex-row-reverse",
    "column-reverse": "flex-col-reverse",
}
FLEX_WRAP_TOKENS = {
    "wrap": "flex-wrap",
    "wrap-reverse": "flex-wrap-reverse",
}

# Flex values that match the browser defaults produce no token
DEFAULT_JUSTIFY = "start"
DEFAULT_ALIGN = "stretch"


def format_number(value: Any) -> str:
    """Format a number without a trailing ``.0`` (``40.0`` -> ``40``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def px(value: Any) -> str:
    return f"{format_number(value)}px"


@dataclass(frozen=True)
class CompiledStyle:
    """Compiled form of one element.

    Attributes:
        class_tokens: Ordered utility class tokens.
        residual_style: Ordered CSS declarations (property -> value).
    """

    class_tokens: tuple[str, ...]
    residual_style: dict[str, str] = field(default_factory=dict, hash=False)

    def class_attr(self) -> str:
        """Render the tokens as a ``class`` attribute value."""
        return " ".join(self.class_tokens)

    def style_attr(self) -> str:
        """Render the residual declarations as a ``style`` attribute value."""
        return "; ".join(
            f"{prop}: {value}" for prop, value in self.residual_style.items()
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "class_tokens": list(self.class_tokens),
            "residual_style": dict(self.residual_style),
        }


class StyleCompiler:
    """Pure mapping from an element's attributes to tokens and residual CSS.

    The compiler keeps no state between calls; compiling the same element
    twice always returns equal results.
    """

    def compile(self, element: Element) -> CompiledStyle:
        """Compile one element.

        Args:
            element: The element to compile.

        Returns:
            CompiledStyle with ordered tokens and residual declarations.
        """
        return CompiledStyle(
            class_tokens=tuple(self.class_tokens(element)),
            residual_style=self.residual_style(element),
        )

    def content(self, element: Element) -> str:
        """Inner content fragment for the element's kind."""
        return render_content(element)

    # ------------------------------------------------------------------
    # Class tokens
    # ------------------------------------------------------------------

    def class_tokens(self, element: Element) -> list[str]:
        tokens = [DISPLAY_TOKENS.get(element.display, DEFAULT_DISPLAY_TOKEN)]

        if element.position in POSITION_TOKENS:
            tokens.append(element.position)

        if element.shadow and element.shadow != "none":
            tokens.append(f"shadow-{element.shadow}")

        border_style = self._border_style_token(element.border_style)
        if border_style:
            tokens.append(border_style)

        if element.is_flex:
            tokens.extend(self._flex_tokens(element))

        weight = FONT_WEIGHT_TOKENS.get(element.font_weight)
        if weight:
            tokens.append(weight)

        radius = self._border_radius_token(element)
        if radius:
            tokens.append(radius)

        width = BORDER_WIDTH_TOKENS.get(element.border_width)
        if width:
            tokens.append(width)

        animation = ANIMATION_TOKENS.get(element.animation.type)
        if animation:
            tokens.append(animation)

        return tokens

    def _border_style_token(self, border_style: str) -> str | None:
        if border_style == "none":
            return None
        return BORDER_STYLE_TOKENS.get(border_style, SOLID_BORDER_TOKEN)

    def _flex_tokens(self, element: Element) -> list[str]:
        tokens = []

        justify = JUSTIFY_SUFFIXES.get(element.justify_content, element.justify_content)
        if justify and justify != DEFAULT_JUSTIFY:
            tokens.append(f"justify-{justify}")

        align = ALIGN_SUFFIXES.get(element.align_items, element.align_items)
        if align and align != DEFAULT_ALIGN:
            tokens.append(f"items-{align}")

        direction = FLEX_DIRECTION_TOKENS.get(element.flex_direction)
        if direction:
            tokens.append(direction)

        wrap = FLEX_WRAP_TOKENS.get(element.flex_wrap)
        if wrap:
            tokens.append(wrap)

        return tokens

    def _border_radius_token(self, element: Element) -> str | None:
        if element.is_circle:
            return CIRCLE_RADIUS_TOKEN
        radius = element.border_radius
        if not radius:
            return None
        for upper_bound, token in BORDER_RADIUS_BUCKETS:
            if radius <= upper_bound:
                return token
        return LARGEST_RADIUS_TOKEN

    # ------------------------------------------------------------------
    # Residual declarations
    # ------------------------------------------------------------------

    def residual_style(self, element: Element) -> dict[str, str]:
        styles: dict[str, str] = {
            "width": px(element.width),
            "height": px(element.height),
            "left": px(element.x),
            "top": px(element.y),
        }

        sides = ("top", "right", "bottom", "left")
        for side, value in zip(sides, element.resolved_padding(), strict=True):
            styles[f"padding-{side}"] = px(value)
        for side, value in zip(sides, element.resolved_margin(), strict=True):
            styles[f"margin-{side}"] = px(value)

        styles["background-color"] = element.background_color
        styles["color"] = element.text_color
        styles["border-color"] = element.border_color
        styles["border-width"] = px(element.border_width)
        styles["border-radius"] = (
            "50%" if element.is_circle else px(element.border_radius)
        )

        styles["font-family"] = element.font_family
        styles["font-size"] = px(element.font_size)
        styles["line-height"] = format_number(element.line_height)
        styles["text-align"] = element.text_align
        styles["text-transform"] = element.text_transform

        if element.overflow and element.overflow != "visible":
            styles["overflow"] = element.overflow
        if element.css_float and element.css_float != "none":
            styles["float"] = element.css_float
        if element.is_flex:
            styles["gap"] = px(element.gap)

        styles["transform"] = f"rotate({format_number(element.angle)}deg)"
        styles["z-index"] = str(element.z_index)
        styles["opacity"] = format_number(normalize_opacity(element.opacity))

        if element.animation.type in ANIMATION_TOKENS:
            styles["animation-duration"] = f"{element.animation.duration}ms"
            styles["animation-delay"] = f"{element.animation.delay}ms"
            styles["animation-iteration-count"] = (
                "infinite" if element.animation.loop else "1"
            )

        return styles


def normalize_opacity(opacity: int | None) -> float:
    """Convert an integer percent (absent means 100) to a 0.0-1.0 fraction."""
    if opacity is None:
        opacity = 100
    return opacity / 100
