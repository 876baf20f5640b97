"""
Embeds Kernel — Renderer

Pure function: (stored markup, theme) → presentation markup
No IO. No editor. Deterministic: same input → same output, always.

Finds every component marker in the stored document, decodes its fields,
resolves colors for the active theme, derives read-only sizes, and swaps in
a fully-styled, non-interactive fragment. Everything that is not a marker
is copied through untouched.
"""

from __future__ import annotations

import logging

import chevron

from embeds.kernel.codec import image_fields, split
from embeds.kernel.config import settings
from embeds.kernel.glyphs import glyph_path
from embeds.kernel.presentation import button_presentation, button_style
from embeds.kernel.sizing import render_sizes
from embeds.kernel.types import (
    ButtonAttributes,
    ButtonComponent,
    Component,
    ImageAttributes,
    RenderOptions,
)

logger = logging.getLogger(__name__)

BUTTON_TEMPLATE = (
    '<span class="custom-button" style="{{style}}">'
    '<span style="display: flex; align-items: center; justify-content: center; width: 100%;">'
    "{{#has_icon}}"
    '<svg width="{{icon_size}}" height="{{icon_size}}" viewBox="0 0 24 24" fill="none"'
    ' stroke="{{icon_color}}" stroke-width="3" stroke-linecap="round" stroke-linejoin="round"'
    ' style="margin-right: {{icon_gap}}; flex-shrink: 0;">{{{glyph}}}</svg>'
    "{{/has_icon}}"
    "{{label}}"
    "</span></span>"
)

IMAGE_TEMPLATE = '<img{{#fields}} {{name}}="{{value}}"{{/fields}} loading="lazy">'


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render(markup: str, options: RenderOptions | None = None) -> str:
    """
    Render a stored document for read-only display.
    Returns the markup with every component marker replaced.
    Pure function. No side effects. No IO.
    """
    opts = options or RenderOptions()
    is_dark = settings.default_is_dark if opts.is_dark_theme is None else opts.is_dark_theme

    parts: list[str] = []
    count = 0
    for piece in split(markup):
        if isinstance(piece, str):
            parts.append(piece)
            continue
        _, component = piece
        parts.append(render_component(component, is_dark))
        count += 1

    logger.debug("renderer: substituted %d component marker(s)", count)
    return "".join(parts)


def render_component(component: Component, is_dark: bool) -> str:
    """Render a single component as a read-only HTML fragment."""
    if isinstance(component, ButtonComponent):
        return _render_button(component.attrs, is_dark)
    return _render_image(component.attrs)


# ---------------------------------------------------------------------------
# Component fragments
# ---------------------------------------------------------------------------


def _render_button(attrs: ButtonAttributes, is_dark: bool) -> str:
    p = button_presentation(attrs, is_dark, render_sizes)
    has_text = bool(attrs.text.strip())

    if has_text:
        label = attrs.text
    elif attrs.icon:
        label = ""
    else:
        label = "Button"

    return chevron.render(BUTTON_TEMPLATE, {
        "style": button_style(p, interactive=False),
        "has_icon": attrs.icon is not None,
        "icon_size": f"{p.icon_size:g}",
        "icon_color": p.icon_color,
        "icon_gap": "0.5rem" if has_text else "0",
        "glyph": glyph_path(attrs.icon),
        "label": label,
    })


def _render_image(attrs: ImageAttributes) -> str:
    return chevron.render(IMAGE_TEMPLATE, {"fields": image_fields(attrs)})
