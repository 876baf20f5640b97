"""
Embeds Kernel — Codec

Bidirectional mapping between component attributes and inline markers.

    serialize(component) → marker      (authoring form, self-describing)
    parse(marker)        → component   (or None when it is not a component)

A marker carries every attribute as a named string field plus a fully
pre-computed inline presentation (resolved colors, border, shadow, sizes,
visible label), so it diffs readably and renders without this package.
Parsing only reads the named fields; presentation is recomputed on demand.

Marker shapes:
  Button — <span data-button="true" data-text="…" … style="…">[Icon] text</span>
  Image  — <img src="…" alt="…" width="75%" data-alignment="…" … style="…">

Parsing never raises. Missing fields resolve to schema defaults, values that
do not parse fall back to defaults, unknown fields are ignored.

scan_markers() is the single-pass scanner over a whole stored document.
Uses regex on the markup — no HTML parser, all other content is opaque.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from html import unescape
from typing import Any

import chevron

from embeds.kernel.config import settings
from embeds.kernel.presentation import (
    button_presentation,
    button_style,
    display_label,
    format_ratio,
    image_presentation,
)
from embeds.kernel.schema import normalize, normalize_button, normalize_image
from embeds.kernel.sizing import preview_sizes
from embeds.kernel.types import (
    ButtonAttributes,
    ButtonComponent,
    Component,
    ComponentKind,
    ImageAttributes,
    ImageComponent,
    MarkerMatch,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Marker field names
# ---------------------------------------------------------------------------

# attribute field → marker attribute
BUTTON_FIELDS: dict[str, str] = {
    "text": "data-text",
    "icon": "data-icon",
    "icon_color": "data-icon-color",
    "button_type": "data-button-type",
    "background_color": "data-bg-color",
    "text_color": "data-text-color",
    "border_color": "data-border-color",
    "has_border": "data-has-border",
    "width": "data-width",
    "height": "data-height",
    "has_shadow": "data-has-shadow",
}

IMAGE_FIELDS: dict[str, str] = {
    "src": "src",
    "alt": "alt",
    "width": "width",
    "aspect_ratio": "data-aspect-ratio",
    "alignment": "data-alignment",
    "use_default_size": "data-use-default-size",
}

# Fields whose raw value is coerced; a mismatch after re-serialization
# means the stored value was unusable and a default was substituted.
_COERCED_BUTTON_FIELDS = ("button_type", "has_border", "width", "height", "has_shadow")
_COERCED_IMAGE_FIELDS = ("width", "aspect_ratio", "alignment", "use_default_size")

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_MARKER_RE = re.compile(
    r"(?P<button><span\b[^>]*\bdata-button\s*=\s*[\"']true[\"'][^>]*>.*?</span\s*>)"
    r"|(?P<image><img\b[^>]*>)",
    re.DOTALL | re.IGNORECASE,
)
_OPEN_TAG_RE = re.compile(r"\s*<(?P<tag>[a-zA-Z][a-zA-Z0-9]*)\b(?P<attrs>[^>]*)>?", re.DOTALL)
_ATTR_RE = re.compile(
    r"(?P<name>[a-zA-Z_:][-a-zA-Z0-9_:.]*)\s*=\s*(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)')",
    re.DOTALL,
)
_STYLE_WIDTH_RE = re.compile(r"(?:^|;)\s*width\s*:\s*([\d.]+%)", re.IGNORECASE)
_STYLE_RATIO_RE = re.compile(r"(?:^|;)\s*aspect-ratio\s*:\s*([^;]+)", re.IGNORECASE)

# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

BUTTON_MARKER_TEMPLATE = (
    "<span{{#fields}} {{name}}=\"{{value}}\"{{/fields}}"
    " class=\"custom-button\" style=\"{{style}}\">{{label}}</span>"
)

IMAGE_MARKER_TEMPLATE = "<img{{#fields}} {{name}}=\"{{value}}\"{{/fields}}>"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def serialize(component: Component, *, is_dark: bool | None = None) -> str:
    """
    Serialize a component into its authoring marker.
    is_dark selects the theme baked into the inline preview (default: settings).
    """
    if is_dark is None:
        is_dark = settings.default_is_dark

    if isinstance(component, ButtonComponent):
        return _serialize_button(component.attrs, is_dark)
    return _serialize_image(component.attrs)


def encode(kind: ComponentKind, partial: dict[str, Any] | None = None, *, is_dark: bool | None = None) -> str:
    """normalize() then serialize() in one step."""
    return serialize(normalize(kind, partial), is_dark=is_dark)


def parse(fragment: str) -> Component | None:
    """
    Parse one marker fragment. Returns None when the fragment is not a
    component marker (ordinary prose, or an image without a source).
    """
    m = _OPEN_TAG_RE.match(fragment)
    if m is None:
        return None

    tag = m.group("tag").lower()
    raw = parse_attributes(m.group("attrs"))

    if tag == "span" and raw.get("data-button", "").lower() == "true":
        return ButtonComponent(_parse_button(raw))

    if tag == "img":
        if not raw.get("src", "").strip():
            logger.debug("codec: <img> without src left as prose")
            return None
        return ImageComponent(_parse_image(raw))

    return None


def parse_attributes(attr_text: str) -> dict[str, str]:
    """Extract name="value" pairs from the inside of an opening tag."""
    out: dict[str, str] = {}
    for m in _ATTR_RE.finditer(attr_text):
        value = m.group("dq") if m.group("dq") is not None else m.group("sq")
        out.setdefault(m.group("name").lower(), unescape(value))
    return out


def scan_markers(markup: str) -> Iterator[MarkerMatch]:
    """
    Lazily yield every component marker in a stored document, in order.
    Restartable: each call scans from the beginning with no retained state.
    """
    for m in _MARKER_RE.finditer(markup):
        if m.group("button") is not None:
            yield MarkerMatch(ComponentKind.BUTTON, m.group(0), m.start(), m.end())
            continue
        tag = _OPEN_TAG_RE.match(m.group(0))
        if tag and parse_attributes(tag.group("attrs")).get("src", "").strip():
            yield MarkerMatch(ComponentKind.IMAGE, m.group(0), m.start(), m.end())


def split(markup: str) -> Iterator[str | tuple[MarkerMatch, Component]]:
    """
    Yield the document as prose runs interleaved with (match, component)
    pairs. Markers that do not parse stay inside the prose. Empty prose runs
    are skipped.
    """
    cursor = 0
    for match in scan_markers(markup):
        component = parse(match.raw)
        if component is None:
            continue
        if match.start > cursor:
            yield markup[cursor:match.start]
        yield match, component
        cursor = match.end
    if cursor < len(markup):
        yield markup[cursor:]


# ---------------------------------------------------------------------------
# Button
# ---------------------------------------------------------------------------


def button_fields(attrs: ButtonAttributes) -> list[dict[str, str]]:
    """Named marker fields in a stable order. Absent optionals are omitted."""
    values = attrs.to_dict()
    fields = [{"name": "data-button", "value": "true"}]
    for key, name in BUTTON_FIELDS.items():
        value = values[key]
        if value is None:
            continue
        fields.append({"name": name, "value": _field_str(value)})
    return fields


def _serialize_button(attrs: ButtonAttributes, is_dark: bool) -> str:
    presentation = button_presentation(attrs, is_dark, preview_sizes)
    return chevron.render(BUTTON_MARKER_TEMPLATE, {
        "fields": button_fields(attrs),
        "style": button_style(presentation, interactive=True),
        "label": display_label(attrs),
    })


def _parse_button(raw: dict[str, str]) -> ButtonAttributes:
    partial = {key: raw[name] for key, name in BUTTON_FIELDS.items() if name in raw}
    attrs = normalize_button(partial)
    _log_degraded("button", partial, attrs.to_dict(), _COERCED_BUTTON_FIELDS)
    return attrs


# ---------------------------------------------------------------------------
# Image
# ---------------------------------------------------------------------------


def image_fields(attrs: ImageAttributes) -> list[dict[str, str]]:
    presentation = image_presentation(attrs)
    fields = [
        {"name": "src", "value": attrs.src},
        {"name": "alt", "value": attrs.alt},
    ]
    if not attrs.use_default_size and attrs.width is not None:
        fields.append({"name": "width", "value": f"{attrs.width}%"})
    for name, value in presentation.data_attrs.items():
        fields.append({"name": name, "value": value})
    fields.append({"name": "class", "value": presentation.css_class})
    fields.append({"name": "style", "value": presentation.style})
    return fields


def _serialize_image(attrs: ImageAttributes) -> str:
    return chevron.render(IMAGE_MARKER_TEMPLATE, {"fields": image_fields(attrs)})


def _parse_image(raw: dict[str, str]) -> ImageAttributes:
    partial: dict[str, Any] = {key: raw[name] for key, name in IMAGE_FIELDS.items() if name in raw}

    # Markup written by other tools may only carry sizing in the style attribute
    style = raw.get("style", "")
    if "width" not in partial:
        m = _STYLE_WIDTH_RE.search(style)
        if m:
            partial["width"] = m.group(1)
    if "aspect_ratio" not in partial:
        m = _STYLE_RATIO_RE.search(style)
        if m:
            partial["aspect_ratio"] = m.group(1).strip()

    attrs = normalize_image(partial)
    _log_degraded("image", partial, attrs.to_dict(), _COERCED_IMAGE_FIELDS)
    return attrs


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _field_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_ratio(value)
    return str(value)


def _log_degraded(kind: str, raw: dict[str, Any], parsed: dict[str, Any], coerced: tuple[str, ...]) -> None:
    degraded = []
    for key in coerced:
        if key not in raw:
            continue
        value = parsed[key]
        if value is None:
            # natural sizing drops width/aspect_ratio on purpose
            if not parsed.get("use_default_size"):
                degraded.append(key)
            continue
        canonical = _field_str(value)
        stored = str(raw[key]).strip().lower().removesuffix("%")
        if canonical.lower() != stored:
            degraded.append(key)
    if degraded:
        logger.warning("codec: %s marker has unusable %s; defaults applied", kind, ", ".join(degraded))
