"""
Embeds Kernel — Color Resolution Policy

Pure functions. Maps a requested color slot + theme + "all defaults" flag to a
concrete color value.

Authors who never touch colors get a two-tone "ghost" button that contrasts
with the active theme. Authors who customize one slot get per-role defaults
(brand blue background/border, theme-contrasting text) for the others.
"""

from __future__ import annotations

from embeds.kernel.types import (
    BLACK,
    BRAND_BLUE,
    DEFAULT_COLOR,
    WHITE,
    ButtonAttributes,
    ResolvedColors,
    SlotRole,
)

# (is_dark, role) → color used when every slot is defaulted
_ALL_DEFAULT_PALETTE: dict[tuple[bool, SlotRole], str] = {
    (True, SlotRole.BACKGROUND): BLACK,
    (True, SlotRole.TEXT): WHITE,
    (True, SlotRole.BORDER): WHITE,
    (False, SlotRole.BACKGROUND): WHITE,
    (False, SlotRole.TEXT): BLACK,
    (False, SlotRole.BORDER): BLACK,
}


def resolve(slot_value: str, role: SlotRole | str, is_dark: bool, all_default: bool) -> str:
    """
    Resolve one color slot.

    An explicit author choice (anything but the "default" sentinel) is returned
    unchanged and unvalidated.
    """
    if slot_value != DEFAULT_COLOR:
        return slot_value

    role = SlotRole(role)
    if all_default:
        return _ALL_DEFAULT_PALETTE[(is_dark, role)]

    if role == SlotRole.TEXT:
        return WHITE if is_dark else BLACK
    return BRAND_BLUE


def icon_color_source(attrs: ButtonAttributes) -> str:
    """The unresolved value the icon color falls back to."""
    if attrs.icon_color:
        return attrs.icon_color
    return attrs.border_color if attrs.is_outline else attrs.text_color


def resolve_icon_color(attrs: ButtonAttributes, is_dark: bool) -> str:
    # Icons always resolve in the text role, whatever slot they fell back to
    return resolve(icon_color_source(attrs), SlotRole.TEXT, is_dark, attrs.all_colors_default)


def resolve_button_colors(attrs: ButtonAttributes, is_dark: bool) -> ResolvedColors:
    all_default = attrs.all_colors_default
    return ResolvedColors(
        background=resolve(attrs.background_color, SlotRole.BACKGROUND, is_dark, all_default),
        text=resolve(attrs.text_color, SlotRole.TEXT, is_dark, all_default),
        border=resolve(attrs.border_color, SlotRole.BORDER, is_dark, all_default),
        icon=resolve_icon_color(attrs, is_dark),
    )
