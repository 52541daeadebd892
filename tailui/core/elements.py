"""Element model and the canonical element store.

An element is one positioned, styled node of the composed layout. Elements
are frozen dataclasses: every change produces a new value, so a tuple of
elements (a ``Snapshot``) is an independent immutable copy of the layout at
one point in time.

Python attributes use snake_case; the project wire format uses the camelCase
names produced by ``Element.to_dict``.
"""

from __future__ import annotations

import copy
import dataclasses
import math
import secrets
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..builder_logging import LogCategory, get_category_logger

logger = get_category_logger(LogCategory.STORE)

ANIMATION_TYPES = ("none", "bounce", "pulse", "spin")

# Kind catalog. Unknown kinds are still accepted and get the global defaults.
KIND_DEFAULTS: dict[str, dict[str, Any]] = {
    "rectangle": {
        "width": 120,
        "height": 80,
        "background_color": "#3b82f6",
        "text_content": "",
        "border_radius": 4,
    },
    "circle": {
        "width": 80,
        "height": 80,
        "background_color": "#10b981",
        "text_content": "",
        "border_radius": 40,
    },
    "text": {
        "width": 150,
        "height": 40,
        "background_color": "transparent",
        "text_content": "Sample Text",
        "font_size": 16,
        "border_radius": 0,
        "font_weight": 400,
        "text_align": "center",
        "line_height": 1.5,
        "tag": "p",
    },
    "button": {
        "width": 120,
        "height": 40,
        "background_color": "#6366f1",
        "text_content": "Button",
        "font_size": 14,
        "border_radius": 6,
        "font_weight": 500,
        "text_align": "center",
        "line_height": 1.5,
        "tag": "button",
    },
    "image": {
        "width": 120,
        "height": 120,
        "background_color": "#f3f4f6",
        "text_content": "",
        "border_radius": 8,
        "image_url": "",
    },
    "card": {
        "width": 200,
        "height": 150,
        "background_color": "#ffffff",
        "text_content": "Card Content",
        "border_radius": 12,
        "font_size": 14,
        "font_weight": 400,
        "text_align": "left",
        "line_height": 1.5,
    },
    "navbar": {
        "width": 300,
        "height": 60,
        "background_color": "#1f2937",
        "text_content": "Navigation",
        "border_radius": 0,
        "font_size": 16,
        "font_weight": 500,
        "text_align": "left",
        "line_height": 1.5,
    },
    "tabs": {
        "width": 300,
        "height": 50,
        "background_color": "#f9fafb",
        "text_content": "Tab 1|Tab 2|Tab 3",
        "border_radius": 8,
        "font_size": 14,
        "font_weight": 500,
        "text_align": "left",
        "line_height": 1.5,
    },
    "modal": {
        "width": 400,
        "height": 200,
        "background_color": "#ffffff",
        "text_content": "Modal Content",
        "border_radius": 12,
        "font_size": 14,
        "font_weight": 400,
        "text_align": "center",
        "line_height": 1.5,
        "shadow": "lg",
    },
    "form": {
        "width": 300,
        "height": 200,
        "background_color": "#ffffff",
        "text_content": "Contact Form",
        "border_radius": 8,
        "font_size": 14,
        "font_weight": 400,
        "text_align": "left",
        "line_height": 1.5,
    },
    "hero": {
        "width": 400,
        "height": 200,
        "background_color": "#1f2937",
        "text_content": "Hero Section",
        "border_radius": 0,
        "font_size": 24,
        "font_weight": 700,
        "text_align": "center",
        "line_height": 1.2,
    },
    "container": {
        "width": 400,
        "height": 300,
        "background_color": "#f9fafb",
        "text_content": "Main Container",
        "border_radius": 8,
        "font_size": 16,
        "font_weight": 400,
        "text_align": "center",
        "line_height": 1.5,
        "tag": "main",
    },
    "div": {
        "width": 200,
        "height": 150,
        "background_color": "#ffffff",
        "text_content": "Division",
        "border_radius": 4,
        "font_size": 14,
        "font_weight": 400,
        "text_align": "center",
        "line_height": 1.5,
        "tag": "div",
    },
}

ELEMENT_KINDS = frozenset(KIND_DEFAULTS)

# Kinds drawn on a dark background default to white text
LIGHT_TEXT_KINDS = frozenset({"navbar", "hero"})

# Wire names that are not the plain camelCase form of the attribute
_WIRE_NAME_OVERRIDES = {"css_float": "float"}

# Attributes that are identity and never change after creation
IDENTITY_FIELDS = frozenset({"id", "type"})


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def snap_to_grid(value: float, grid_size: int = 20) -> int:
    """Snap a coordinate to the nearest multiple of ``grid_size``.

    Halves round up toward positive infinity.
    """
    return math.floor(value / grid_size + 0.5) * grid_size


def generate_id() -> str:
    """Generate a short random base-36 element id."""
    alphabet = "0123456789abcdefghijklmnopqrstuvwxyz"
    return "".join(secrets.choice(alphabet) for _ in range(9))


@dataclass(frozen=True)
class Animation:
    """Animation settings of an element."""

    type: str = "none"
    duration: int = 1000  # ms
    delay: int = 0  # ms
    loop: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.type,
            "duration": self.duration,
            "delay": self.delay,
            "loop": self.loop,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Animation:
        """Create from dictionary, defaulting missing keys."""
        if not isinstance(data, Mapping):
            raise ValueError("animation must be an object")
        if not isinstance(data.get("type", "none"), str):
            raise ValueError("animation type must be a string")
        for key in ("duration", "delay"):
            value = data.get(key, 0)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"animation {key} must be a number")
        if not isinstance(data.get("loop", False), bool):
            raise ValueError("animation loop must be a boolean")
        return cls(
            type=data.get("type", "none"),
            duration=data.get("duration", 1000),
            delay=data.get("delay", 0),
            loop=data.get("loop", False),
        )


@dataclass(frozen=True)
class Element:
    """One positioned, styled visual node.

    Every attribute is always populated. The per-side spacing attributes use
    ``None`` as the explicit "unset" value, in which case the uniform
    ``padding``/``margin`` applies. ``image_url`` is only meaningful for the
    ``image`` kind and is ``None`` elsewhere.
    """

    id: str
    type: str

    # Geometry
    x: float = 0
    y: float = 0
    width: float = 200
    height: float = 150
    angle: float = 0

    # Spacing
    padding: float = 8
    margin: float = 4
    padding_top: float | None = None
    padding_right: float | None = None
    padding_bottom: float | None = None
    padding_left: float | None = None
    margin_top: float | None = None
    margin_right: float | None = None
    margin_bottom: float | None = None
    margin_left: float | None = None

    # Borders
    border_width: float = 1
    border_color: str = "#e5e7eb"
    border_radius: float = 0
    border_style: str = "solid"

    # Color and typography
    background_color: str = "#ffffff"
    text_color: str = "#1f2937"
    font_family: str = "system-ui"
    font_size: float = 14
    font_weight: int = 400
    text_align: str = "left"
    line_height: float = 1.5
    text_transform: str = "none"

    # Layout
    display: str = "block"
    position: str = "absolute"
    css_float: str = "none"
    overflow: str = "visible"
    justify_content: str = "center"
    align_items: str = "center"
    flex_direction: str = "row"
    flex_wrap: str = "nowrap"
    gap: float = 0

    # Effects
    shadow: str = "none"
    opacity: int | None = 100  # percent; None reads as fully opaque
    z_index: int = 1

    # Content
    text_content: str = ""
    tag: str = "div"
    image_url: str | None = None
    col_span: int = 2

    animation: Animation = field(default_factory=Animation)

    # Unknown wire keys, kept so imported projects round-trip unchanged
    extra: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )

    @property
    def is_flex(self) -> bool:
        return self.display == "flex"

    @property
    def is_circle(self) -> bool:
        return self.type == "circle"

    def resolved_padding(self) -> tuple[float, float, float, float]:
        """Return (top, right, bottom, left) padding with uniform fallback."""
        return tuple(
            self.padding if side is None else side
            for side in (
                self.padding_top,
                self.padding_right,
                self.padding_bottom,
                self.padding_left,
            )
        )

    def resolved_margin(self) -> tuple[float, float, float, float]:
        """Return (top, right, bottom, left) margin with uniform fallback."""
        return tuple(
            self.margin if side is None else side
            for side in (
                self.margin_top,
                self.margin_right,
                self.margin_bottom,
                self.margin_left,
            )
        )

    def with_changes(self, patch: Mapping[str, Any]) -> Element:
        """Return a copy with ``patch`` shallow-merged in.

        Keys may be attribute names or wire names. Raises ``ValueError`` for
        unknown keys and for attempts to change ``id`` or ``type``.
        """
        return dataclasses.replace(self, **resolve_patch(patch))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase wire representation.

        Unset per-side spacing and an absent ``image_url`` are omitted.
        """
        data: dict[str, Any] = {}
        for name in ELEMENT_FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            if name == "animation":
                value = value.to_dict()
            data[FIELD_TO_WIRE[name]] = value
        for key, value in self.extra.items():
            data[key] = copy.deepcopy(value)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Element:
        """Create from the wire representation.

        Missing attributes are filled from the kind defaults merged over the
        global defaults. Unknown keys are preserved in ``extra``.
        """
        if not isinstance(data, Mapping):
            raise ValueError("element must be an object")
        if "id" not in data or "type" not in data:
            raise ValueError("element requires 'id' and 'type'")

        kind = data["type"]
        values = kind_defaults(kind)
        extra: dict[str, Any] = {}
        for key, value in data.items():
            name = WIRE_TO_FIELD.get(key)
            if name is None:
                extra[key] = copy.deepcopy(value)
            elif name == "animation":
                values[name] = Animation.from_dict(value)
            else:
                if name not in IDENTITY_FIELDS:
                    check_value(name, value)
                values[name] = value
        values["extra"] = MappingProxyType(extra)
        return cls(**values)


ELEMENT_FIELDS: tuple[str, ...] = tuple(
    f.name for f in dataclasses.fields(Element) if f.name != "extra"
)
FIELD_TO_WIRE: dict[str, str] = {
    name: _WIRE_NAME_OVERRIDES.get(name, _camel(name)) for name in ELEMENT_FIELDS
}
WIRE_TO_FIELD: dict[str, str] = {wire: name for name, wire in FIELD_TO_WIRE.items()}


def _accepted_types(annotation: str) -> tuple[tuple[type, ...], bool]:
    types: tuple[type, ...] = (
        (int, float) if "float" in annotation or "int" in annotation else (str,)
    )
    return types, "None" in annotation


# Attribute -> (accepted value types, whether None is accepted)
FIELD_TYPES: dict[str, tuple[tuple[type, ...], bool]] = {
    f.name: _accepted_types(f.type)
    for f in dataclasses.fields(Element)
    if f.name in ELEMENT_FIELDS
    and f.name not in IDENTITY_FIELDS
    and f.name != "animation"
}


def check_value(name: str, value: Any) -> None:
    """Raise ``ValueError`` unless ``value`` suits attribute ``name``.

    Numeric attributes take int or float (never bool), the rest take str.
    """
    types, nullable = FIELD_TYPES[name]
    if value is None:
        if nullable:
            return
    elif isinstance(value, types) and not isinstance(value, bool):
        return
    raise ValueError(
        f"Element field {FIELD_TO_WIRE[name]!r} has invalid value {value!r}"
    )

Snapshot = tuple[Element, ...]


def kind_defaults(kind: str) -> dict[str, Any]:
    """Return the attribute overrides for ``kind`` (including ``type``)."""
    values: dict[str, Any] = {"type": kind}
    if kind in LIGHT_TEXT_KINDS:
        values["text_color"] = "#ffffff"
    values.update(KIND_DEFAULTS.get(kind, {}))
    return values


def resolve_patch(patch: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize a patch to attribute names, validating every key first."""
    resolved: dict[str, Any] = {}
    for key, value in patch.items():
        name = key if key in FIELD_TO_WIRE else WIRE_TO_FIELD.get(key)
        if name is None:
            raise ValueError(f"Unknown element field: {key!r}")
        if name in IDENTITY_FIELDS:
            raise ValueError(f"Element field {key!r} cannot be changed")
        if name == "animation":
            if isinstance(value, Mapping):
                value = Animation.from_dict(value)
            elif not isinstance(value, Animation):
                raise ValueError(f"Element field {key!r} must be an object")
        else:
            check_value(name, value)
        resolved[name] = value
    return resolved


class ElementStore:
    """Owns the canonical element list and the current selection.

    Every operation is synchronous and never raises for unknown ids; mutating
    operations return the resulting snapshot so it can be handed straight to
    ``HistoryEngine.commit``.
    """

    def __init__(
        self,
        grid_size: int = 20,
        id_factory: Callable[[], str] | None = None,
    ):
        """Initialize an empty store.

        Args:
            grid_size: Snap quantum used by ``create``.
            id_factory: Optional id generator (defaults to random base-36).
        """
        self.grid_size = grid_size
        self._id_factory = id_factory or generate_id
        self._elements: list[Element] = []
        self._selected_id: str | None = None

    def __len__(self) -> int:
        return len(self._elements)

    def __contains__(self, element_id: object) -> bool:
        return self._index_of(element_id) is not None

    def _index_of(self, element_id: object) -> int | None:
        for index, element in enumerate(self._elements):
            if element.id == element_id:
                return index
        return None

    def _fresh_id(self) -> str:
        element_id = self._id_factory()
        while element_id in self:
            element_id = self._id_factory()
        return element_id

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    def create(self, kind: str, x: float, y: float) -> Element:
        """Build a fully populated element at a grid-snapped position.

        The element is not inserted; pass it to ``add``.
        """
        values = kind_defaults(kind)
        values["id"] = self._fresh_id()
        values["x"] = snap_to_grid(x, self.grid_size)
        values["y"] = snap_to_grid(y, self.grid_size)
        return Element(**values)

    def add(self, element: Element) -> Snapshot:
        """Append ``element`` and return the new snapshot."""
        if element.id in self:
            raise ValueError(f"Duplicate element id: {element.id!r}")
        self._elements.append(element)
        logger.debug(f"Added {element.type} element {element.id}")
        return self.get_all()

    def update(self, element_id: str, patch: Mapping[str, Any]) -> Snapshot:
        """Shallow-merge ``patch`` into the element with ``element_id``.

        Unknown ids leave the list unchanged.
        """
        changes = resolve_patch(patch)
        index = self._index_of(element_id)
        if index is None:
            logger.debug(f"Ignoring update for unknown element {element_id}")
            return self.get_all()
        self._elements[index] = dataclasses.replace(self._elements[index], **changes)
        return self.get_all()

    def delete(self, element_id: str) -> Snapshot:
        """Remove the element with ``element_id``, clearing its selection."""
        index = self._index_of(element_id)
        if index is not None:
            del self._elements[index]
            logger.debug(f"Deleted element {element_id}")
        if self._selected_id == element_id:
            self._selected_id = None
        return self.get_all()

    def select(self, element_id: str) -> None:
        """Select an existing element; unknown ids are ignored."""
        if element_id in self:
            self._selected_id = element_id
        else:
            logger.debug(f"Ignoring selection of unknown element {element_id}")

    def clear_selection(self) -> None:
        self._selected_id = None

    def set_all(self, elements: Iterable[Element]) -> Snapshot:
        """Replace the whole list.

        The selection is cleared when its element is not in the new list.
        """
        new_elements = list(elements)
        seen: set[Any] = set()
        for element in new_elements:
            if element.id in seen:
                raise ValueError(f"Duplicate element id: {element.id!r}")
            seen.add(element.id)

        self._elements = new_elements
        if self._selected_id is not None and self._selected_id not in seen:
            self._selected_id = None
        return self.get_all()

    def get_all(self) -> Snapshot:
        return tuple(self._elements)

    def get_by_id(self, element_id: str) -> Element | None:
        index = self._index_of(element_id)
        return None if index is None else self._elements[index]

    def get_selected(self) -> Element | None:
        if self._selected_id is None:
            return None
        return self.get_by_id(self._selected_id)
