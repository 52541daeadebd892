"""Per-kind inner content templates.

The wrapper carrying compiled classes and residual style is produced by the
exporters; these templates render what goes inside it. All user text is
HTML-escaped.
"""

import html
from collections.abc import Callable

from ..core.elements import Element

FALLBACK_TEMPLATE = '<div class="w-full h-full"></div>'

IMAGE_PLACEHOLDER = (
    '<div class="w-full h-full bg-gray-200 border-2 border-dashed border-gray-400 '
    'flex items-center justify-center text-gray-500">'
    '<svg width="24" height="24" fill="currentColor" viewBox="0 0 24 24">'
    '<rect x="3" y="3" width="18" height="18" rx="2" ry="2"/>'
    '<circle cx="8.5" cy="8.5" r="1.5"/>'
    '<path d="m21 15-3.086-3.086a2 2 0 0 0-2.828 0L6 21"/>'
    "</svg>"
    '<span class="ml-2 text-xs">Image Placeholder</span>'
    "</div>"
)


def escape_html(text: str) -> str:
    """HTML escape text."""
    return html.escape(str(text))


def text_styles(element: Element) -> str:
    """Inline typography declarations for text inside the element.

    Font weight is carried only by the wrapper's class token, never inline.
    """
    return (
        f"font-size: {element.font_size}px; "
        f"text-align: {element.text_align}; "
        f"line-height: {element.line_height};"
    )


def _text(element: Element, fallback: str) -> str:
    return escape_html(element.text_content or fallback)


def _render_text(element: Element) -> str:
    return (
        f'<div class="w-full h-full flex items-center justify-center" '
        f'style="{text_styles(element)}">{_text(element, "Sample Text")}</div>'
    )


def _render_block(fallback: str) -> Callable[[Element], str]:
    def render(element: Element) -> str:
        return (
            f'<div class="w-full h-full flex items-center justify-center" '
            f'style="{text_styles(element)}">{_text(element, fallback)}</div>'
        )

    return render


def _render_button(element: Element) -> str:
    return (
        f'<button class="w-full h-full rounded border-0" '
        f'style="{text_styles(element)}">{_text(element, "Button")}</button>'
    )


def _render_image(element: Element) -> str:
    if not element.image_url:
        return IMAGE_PLACEHOLDER
    src = escape_html(element.image_url)
    return f'<img src="{src}" class="w-full h-full object-cover rounded" alt="Image">'


def _render_card(element: Element) -> str:
    return (
        '<div class="w-full h-full p-4">'
        f'<div style="{text_styles(element)}">{_text(element, "Card Content")}</div>'
        "</div>"
    )


def _render_navbar(element: Element) -> str:
    links = "".join(
        f'<a href="#" class="text-sm hover:text-gray-300">{label}</a>'
        for label in ("Home", "About", "Contact")
    )
    return (
        '<nav class="w-full h-full flex items-center justify-between px-4">'
        f'<div style="{text_styles(element)}">{_text(element, "Brand")}</div>'
        f'<div class="flex space-x-4">{links}</div>'
        "</nav>"
    )


def _render_tabs(element: Element) -> str:
    labels = (element.text_content or "Tab 1|Tab 2|Tab 3").split("|")
    buttons = []
    for index, label in enumerate(labels):
        if index == 0:
            state = "border-b-2 border-blue-500 text-blue-600"
        else:
            state = "text-gray-600 hover:text-gray-800"
        buttons.append(
            f'<button class="px-4 py-2 text-sm {state}">{escape_html(label.strip())}</button>'
        )
    return (
        '<div class="w-full h-full">'
        f'<div class="flex border-b border-gray-200">{"".join(buttons)}</div>'
        "</div>"
    )


def _render_modal(element: Element) -> str:
    styles = text_styles(element)
    return (
        '<div class="w-full h-full relative">'
        '<div class="flex items-center justify-between p-4 border-b">'
        f'<h3 style="{styles}">Modal Title</h3>'
        '<button class="text-gray-400 hover:text-gray-600">&times;</button>'
        "</div>"
        f'<div class="p-4"><p style="{styles}">'
        f'{_text(element, "Modal content goes here...")}</p></div>'
        "</div>"
    )


def _render_form(element: Element) -> str:
    fields = "".join(
        "<div>"
        f'<label class="block text-sm font-medium text-gray-700">{label}</label>'
        f'<input type="{input_type}" class="mt-1 block w-full px-3 py-2 '
        'border border-gray-300 rounded-md">'
        "</div>"
        for label, input_type in (("Name", "text"), ("Email", "email"))
    )
    return (
        '<form class="w-full h-full p-4 space-y-4">'
        f'<p style="{text_styles(element)}">{_text(element, "Contact Form")}</p>'
        f"{fields}"
        '<button type="submit" class="bg-blue-500 text-white px-4 py-2 rounded">'
        "Submit</button>"
        "</form>"
    )


def _render_hero(element: Element) -> str:
    return (
        '<div class="w-full h-full flex items-center justify-center text-center">'
        "<div>"
        f'<h1 style="{text_styles(element)}">{_text(element, "Hero Title")}</h1>'
        '<p class="mt-2 text-lg opacity-90">Subtitle or description</p>'
        '<button class="mt-4 bg-blue-500 text-white px-6 py-2 rounded">'
        "Get Started</button>"
        "</div>"
        "</div>"
    )


def _render_circle(element: Element) -> str:
    return '<div class="w-full h-full rounded-full"></div>'


TEMPLATES: dict[str, Callable[[Element], str]] = {
    "text": _render_text,
    "button": _render_button,
    "image": _render_image,
    "card": _render_card,
    "container": _render_block("Main Container"),
    "div": _render_block("Division"),
    "navbar": _render_navbar,
    "tabs": _render_tabs,
    "modal": _render_modal,
    "form": _render_form,
    "hero": _render_hero,
    "circle": _render_circle,
}


def render_content(element: Element) -> str:
    """Render the inner content fragment for ``element``'s kind.

    Kinds without a template (e.g. ``rectangle``) get an empty full-size box.
    """
    template = TEMPLATES.get(element.type)
    if template is None:
        return FALLBACK_TEMPLATE
    return template(element)
