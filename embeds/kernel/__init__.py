"""
Embeds Kernel — typed components inside rich text.

Components:
  schema     — defaults + normalization for Button and Image attributes
  colors     — theme-aware default color resolution
  sizing     — font/icon sizes derived from button height (preview + render)
  codec      — attributes ⇄ inline marker, plus the document marker scanner
  renderer   — (stored markup, theme) → read-only presentation markup
  nodes      — authoring node model: (document, command) → CommandResult
"""

from embeds.kernel.codec import parse, scan_markers, serialize
from embeds.kernel.colors import resolve
from embeds.kernel.glyphs import glyph_path
from embeds.kernel.nodes import empty_document, load, reduce, to_markup
from embeds.kernel.renderer import render
from embeds.kernel.schema import normalize
from embeds.kernel.sizing import preview_sizes, render_sizes

__all__ = [
    "normalize",
    "resolve",
    "preview_sizes",
    "render_sizes",
    "glyph_path",
    "serialize",
    "parse",
    "scan_markers",
    "render",
    "empty_document",
    "load",
    "reduce",
    "to_markup",
]
