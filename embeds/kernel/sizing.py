"""
Embeds Kernel — Size Derivation

Button font and icon sizes scale with the button height, clamped to a range.

Two variants exist and are kept deliberately separate:
- preview  — used by the authoring surface when serializing a marker
- render   — used by the read-only render transform

Font sizing is identical. Icon sizing differs: the read-only page draws icons
larger (0.55×h in [16, 28]) than the authoring preview (0.40×h in [12, 24]).
"""

from __future__ import annotations

from embeds.kernel.types import DerivedSizes

FONT_SCALE = 0.35
FONT_MIN, FONT_MAX = 10, 18

PREVIEW_ICON_SCALE = 0.40
PREVIEW_ICON_MIN, PREVIEW_ICON_MAX = 12, 24

# TODO: confirm with product whether the preview should also use 0.55 / [16, 28]
RENDER_ICON_SCALE = 0.55
RENDER_ICON_MIN, RENDER_ICON_MAX = 16, 28


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _scaled(height: int, scale: float, low: float, high: float) -> float:
    # Round away float noise (40 × 0.55 = 22.000000000000004)
    return round(clamp(height * scale, low, high), 2)


def preview_sizes(height: int) -> DerivedSizes:
    return DerivedSizes(
        font_size=_scaled(height, FONT_SCALE, FONT_MIN, FONT_MAX),
        icon_size=_scaled(height, PREVIEW_ICON_SCALE, PREVIEW_ICON_MIN, PREVIEW_ICON_MAX),
    )


def render_sizes(height: int) -> DerivedSizes:
    return DerivedSizes(
        font_size=_scaled(height, FONT_SCALE, FONT_MIN, FONT_MAX),
        icon_size=_scaled(height, RENDER_ICON_SCALE, RENDER_ICON_MIN, RENDER_ICON_MAX),
    )


def px(value: float) -> str:
    """Format a size as CSS pixels without a trailing ".0"."""
    return f"{value:g}px"
