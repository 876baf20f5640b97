"""
Embeds Kernel — Presentation

Inline-style computation shared by the codec (authoring markers) and the
renderer (read-only fragments), plus the image style patch used by hosts
to update an image node in place.

Pure functions. No IO. Deterministic.
"""

from __future__ import annotations

from typing import Any, Callable

from embeds.kernel.colors import resolve_button_colors
from embeds.kernel.sizing import px
from embeds.kernel.types import (
    ASPECT_RATIO_PRESETS,
    DEFAULT_ASPECT_RATIO,
    TRANSPARENT,
    Alignment,
    ButtonAttributes,
    ButtonPresentation,
    DerivedSizes,
    ImageAttributes,
    ImagePresentation,
    StylePatch,
)

# ---------------------------------------------------------------------------
# Button
# ---------------------------------------------------------------------------


def button_presentation(
    attrs: ButtonAttributes,
    is_dark: bool,
    sizes: Callable[[int], DerivedSizes],
) -> ButtonPresentation:
    """Resolve colors and sizes for one button under the given theme."""
    colors = resolve_button_colors(attrs, is_dark)
    derived = sizes(attrs.height)

    if attrs.is_outline:
        background = TRANSPARENT
        color = colors.border
    else:
        background = colors.background
        color = colors.text

    border = f"2px solid {colors.border}" if attrs.has_border else "none"
    shadow = (
        f"0 4px 6px -1px {colors.border}40, 0 2px 4px -1px {colors.border}20"
        if attrs.has_shadow
        else "none"
    )

    return ButtonPresentation(
        background=background,
        color=color,
        border=border,
        shadow=shadow,
        icon_color=colors.icon,
        width=attrs.width,
        height=attrs.height,
        font_size=derived.font_size,
        icon_size=derived.icon_size,
    )


def button_style(p: ButtonPresentation, *, interactive: bool) -> str:
    """Inline CSS for the outer button span."""
    rules = [
        "display: inline-flex",
        "align-items: center",
        "justify-content: center",
        "gap: 0",
        "padding: 0.25rem 0.5rem",
        "border-radius: 0.375rem",
        "font-weight: 500",
    ]
    if interactive:
        rules += ["cursor: pointer", "transition: all 0.2s"]
    rules += [
        f"background-color: {p.background}",
        f"color: {p.color}",
        f"border: {p.border}",
        f"box-shadow: {p.shadow}",
        f"width: {p.width}px",
        f"height: {p.height}px",
        "margin: 0.25rem 0",
        "white-space: nowrap",
        "text-overflow: ellipsis",
        "overflow: hidden",
        f"font-size: {px(p.font_size)}",
    ]
    return "; ".join(rules) + ";"


def display_label(attrs: ButtonAttributes) -> str:
    """Visible content of an authoring marker: "[Icon] text", or "Button"."""
    parts = []
    if attrs.icon:
        parts.append(f"[{attrs.icon}]")
    if attrs.text.strip():
        parts.append(attrs.text)
    return " ".join(parts) or "Button"


# ---------------------------------------------------------------------------
# Image
# ---------------------------------------------------------------------------

_BASE_IMAGE_STYLE = "max-width: 100%; height: auto; border-radius: 0.5rem; display: block;"

# alignment → (natural-size margin rule, explicit-size float rule)
_ALIGNMENT_RULES: dict[Alignment, tuple[str, str]] = {
    Alignment.LEFT: (
        "margin: 1rem 0;",
        "float: left; margin: 0.5rem 1rem 0.5rem 0; clear: left;",
    ),
    Alignment.RIGHT: (
        "margin: 1rem 0 1rem auto;",
        "float: right; margin: 0.5rem 0 0.5rem 1rem; clear: right;",
    ),
    Alignment.CENTER: (
        "margin: 1rem auto; clear: both;",
        "margin: 1rem auto; clear: both;",
    ),
}


def format_ratio(ratio: float) -> str:
    """Shortest exact string for a ratio: 1.0 → "1", 1.33 → "1.33"."""
    if ratio.is_integer():
        return str(int(ratio))
    return repr(ratio)


def image_presentation(attrs: ImageAttributes) -> ImagePresentation:
    rules = [_BASE_IMAGE_STYLE]
    sized = not attrs.use_default_size

    if sized and attrs.width is not None:
        rules.append(f"width: {attrs.width}%;")
    if sized and attrs.aspect_ratio is not None:
        rules.append(f"aspect-ratio: {format_ratio(attrs.aspect_ratio)}; object-fit: cover;")

    natural_rule, sized_rule = _ALIGNMENT_RULES[attrs.alignment]
    rules.append(natural_rule if attrs.use_default_size else sized_rule)

    data_attrs = {
        "data-alignment": str(attrs.alignment),
        "data-use-default-size": "true" if attrs.use_default_size else "false",
    }
    if sized and attrs.aspect_ratio is not None:
        data_attrs["data-aspect-ratio"] = format_ratio(attrs.aspect_ratio)

    return ImagePresentation(
        style=" ".join(rules),
        css_class=f"editor-image image-align-{attrs.alignment}",
        data_attrs=data_attrs,
    )


def style_patch(previous: ImageAttributes | None, current: ImageAttributes) -> StylePatch:
    """
    Compute the DOM changes that turn the previous image presentation into
    the current one. With no previous attributes everything is emitted.
    """
    after = image_presentation(current)
    if previous is None:
        return StylePatch(style=after.style, css_class=after.css_class, data_attrs=dict(after.data_attrs))

    before = image_presentation(previous)
    data_changes: dict[str, str | None] = {}
    for name in sorted(set(before.data_attrs) | set(after.data_attrs)):
        old, new = before.data_attrs.get(name), after.data_attrs.get(name)
        if old != new:
            data_changes[name] = new

    return StylePatch(
        style=after.style if after.style != before.style else None,
        css_class=after.css_class if after.css_class != before.css_class else None,
        data_attrs=data_changes,
    )


def image_settings(attrs: ImageAttributes) -> dict[str, Any]:
    """
    Toolbar state for an existing image: which width and ratio presets are
    active, the slider values, and the alignment.
    """
    if attrs.use_default_size or attrs.width is None:
        width_type: str | int = "default"
        width_percent = 75
    else:
        width_type = attrs.width
        width_percent = attrs.width

    aspect_ratio = attrs.aspect_ratio if attrs.aspect_ratio is not None else DEFAULT_ASPECT_RATIO
    return {
        "width_type": width_type,
        "width_percent": width_percent,
        "aspect_ratio": aspect_ratio,
        "aspect_ratio_preset": aspect_ratio_preset(aspect_ratio),
        "alignment": str(attrs.alignment),
    }


def aspect_ratio_preset(ratio: float) -> str | None:
    """Label of the preset matching a ratio ("16:9"), or None for a custom ratio."""
    for _, value, label in ASPECT_RATIO_PRESETS:
        if abs(value - ratio) < 0.005:
            return label
    return None
