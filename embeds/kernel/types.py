"""
Embeds Kernel — Shared Types

Data classes used across schema, codec, renderer, and the authoring node model.
These are the contracts that bind the kernel together.

Two component kinds can live inside a stored rich-text document:
- Button — an inline, atomic, styleable call-to-action
- Image  — a block image with width / aspect-ratio / alignment controls

A component travels in three shapes:
- attributes  — typed, normalized dataclasses (ButtonAttributes, ImageAttributes)
- marker      — the serialized inline HTML fragment stored in the document
- node        — the live, mutable authoring instance (ComponentNode)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ComponentKind(StrEnum):
    BUTTON = "button"
    IMAGE = "image"


class ButtonType(StrEnum):
    FILLED = "filled"
    OUTLINE = "outline"


class Alignment(StrEnum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class SlotRole(StrEnum):
    BACKGROUND = "background"
    TEXT = "text"
    BORDER = "border"


class NodeStatus(StrEnum):
    INSERTED = "inserted"
    SELECTED = "selected"
    UPDATED = "updated"
    REMOVED = "removed"


# Sentinel for "author never picked a color"
DEFAULT_COLOR = "default"

# Fixed palette used by color resolution
BRAND_BLUE = "#3b82f6"
BLACK = "#000000"
WHITE = "#ffffff"
TRANSPARENT = "transparent"

# Aspect-ratio presets offered by the image toolbar: (name, value, label)
ASPECT_RATIO_PRESETS: list[tuple[str, float, str]] = [
    ("Square", 1.0, "1:1"),
    ("Landscape", 1.33, "4:3"),
    ("Wide", 1.78, "16:9"),
    ("Portrait", 0.75, "3:4"),
    ("Tall", 0.56, "9:16"),
]

# Width presets: "default" means natural sizing, numbers are percentages
WIDTH_PRESETS: list[str | int] = ["default", 25, 50, 75, 100]

# Aspect ratio seeded when an image first leaves natural sizing
DEFAULT_ASPECT_RATIO = 1.33


# ---------------------------------------------------------------------------
# Attribute schemas
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ButtonAttributes:
    text: str = ""
    icon: str | None = None
    icon_color: str | None = None
    button_type: ButtonType = ButtonType.FILLED
    background_color: str = DEFAULT_COLOR
    text_color: str = DEFAULT_COLOR
    border_color: str = DEFAULT_COLOR
    has_border: bool = True
    width: int = 120
    height: int = 40
    has_shadow: bool = True

    @property
    def all_colors_default(self) -> bool:
        """True when background, text and border were never customized."""
        return (
            self.background_color == DEFAULT_COLOR
            and self.text_color == DEFAULT_COLOR
            and self.border_color == DEFAULT_COLOR
        )

    @property
    def is_outline(self) -> bool:
        return self.button_type == ButtonType.OUTLINE

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "icon": self.icon,
            "icon_color": self.icon_color,
            "button_type": str(self.button_type),
            "background_color": self.background_color,
            "text_color": self.text_color,
            "border_color": self.border_color,
            "has_border": self.has_border,
            "width": self.width,
            "height": self.height,
            "has_shadow": self.has_shadow,
        }


@dataclass(frozen=True)
class ImageAttributes:
    src: str
    alt: str = "Image"
    width: int | None = None  # percentage of the content column
    aspect_ratio: float | None = None
    alignment: Alignment = Alignment.CENTER
    use_default_size: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "src": self.src,
            "alt": self.alt,
            "width": self.width,
            "aspect_ratio": self.aspect_ratio,
            "alignment": str(self.alignment),
            "use_default_size": self.use_default_size,
        }


# ---------------------------------------------------------------------------
# Tagged component variant
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ButtonComponent:
    attrs: ButtonAttributes

    @property
    def kind(self) -> ComponentKind:
        return ComponentKind.BUTTON


@dataclass(frozen=True)
class ImageComponent:
    attrs: ImageAttributes

    @property
    def kind(self) -> ComponentKind:
        return ComponentKind.IMAGE


Component = ButtonComponent | ImageComponent


# ---------------------------------------------------------------------------
# Derived presentation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DerivedSizes:
    font_size: float
    icon_size: float


@dataclass(frozen=True)
class ResolvedColors:
    """Concrete colors for one button after theme/default resolution."""

    background: str
    text: str
    border: str
    icon: str


@dataclass(frozen=True)
class ButtonPresentation:
    """Everything needed to draw a button without re-running resolution."""

    background: str  # "transparent" for outline buttons
    color: str
    border: str  # "2px solid #xxxxxx" or "none"
    shadow: str
    icon_color: str
    width: int
    height: int
    font_size: float
    icon_size: float


@dataclass(frozen=True)
class ImagePresentation:
    style: str
    css_class: str
    data_attrs: dict[str, str]


@dataclass(frozen=True)
class StylePatch:
    """
    Minimal set of DOM changes between two image presentations.
    Values of None in data_attrs mean "remove the attribute".
    """

    style: str | None = None
    css_class: str | None = None
    data_attrs: dict[str, str | None] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.style is None and self.css_class is None and not self.data_attrs


# ---------------------------------------------------------------------------
# Markup scanning
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MarkerMatch:
    """One component marker found in a stored document (character offsets)."""

    kind: ComponentKind
    raw: str
    start: int
    end: int


@dataclass
class RenderOptions:
    """Options controlling the read-only render transform."""

    is_dark_theme: bool | None = None  # None → settings.DEFAULT_THEME


# ---------------------------------------------------------------------------
# Authoring node model
# ---------------------------------------------------------------------------


@dataclass
class ComponentNode:
    """A live component instance inside the authoring document."""

    id: str
    component: Component
    marker: str
    status: NodeStatus = NodeStatus.INSERTED

    @property
    def kind(self) -> ComponentKind:
        return self.component.kind


@dataclass
class DocumentState:
    """
    The authoring document: prose runs interleaved with component nodes.

    Positions follow the editor convention: every prose character occupies
    one position and every component node (an atom) occupies exactly one.
    """

    segments: list[str | ComponentNode] = field(default_factory=list)
    selection: tuple[int, int] = (0, 0)
    selected: str | None = None
    removed: list[str] = field(default_factory=list)
    next_id: int = 1


@dataclass
class Command:
    """A discrete author action. The node model reads only `type` and `payload`."""

    type: str
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass
class Warning:
    """A non-fatal issue encountered while applying a command."""

    code: str
    message: str
    details: dict[str, Any] | None = None


@dataclass
class CommandResult:
    """
    Result of applying one command to a document.
    The node model never throws; it always returns one of these.
    """

    state: DocumentState
    applied: bool
    node_id: str | None = None
    patch: StylePatch | None = None
    warnings: list[Warning] = field(default_factory=list)
    error: str | None = None


# ---------------------------------------------------------------------------
# Command registry
# ---------------------------------------------------------------------------

COMMAND_TYPES: set[str] = {
    # Generic
    "component.insert",
    "component.update",
    "component.select",
    "component.deselect",
    "component.remove",
    "selection.set",
    # Button
    "button.set_text",
    "button.set_icon",
    "button.set_icon_color",
    "button.set_type",
    "button.set_background_color",
    "button.set_text_color",
    "button.set_border_color",
    "button.toggle_border",
    "button.toggle_shadow",
    "button.set_size",
    # Image
    "image.set_alignment",
    "image.set_width",
    "image.set_aspect_ratio",
    "image.set_width_preset",
    "image.use_default_size",
    "image.apply_changes",
}
