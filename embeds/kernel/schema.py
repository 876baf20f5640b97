"""
Embeds Kernel — Component Attribute Schema

Defaults and normalization for every component kind.

normalize(kind, partial) merges explicit overrides with the schema defaults
and coerces loosely-typed input (numeric-looking strings, "true"/"false",
camelCase keys from the editor, "16:9" ratios) into canonical attributes.

Normalization is total: it never raises. Unknown keys are ignored, values
outside an enum fall back to the enum default, and numbers that do not parse
fall back to the attribute default. The only cross-field rule is for images:
natural sizing (use_default_size) clears width and aspect_ratio.
"""

from __future__ import annotations

import math
import re
from dataclasses import fields
from typing import Any

from embeds.kernel.types import (
    DEFAULT_COLOR,
    Alignment,
    ButtonAttributes,
    ButtonComponent,
    ButtonType,
    Component,
    ComponentKind,
    ImageAttributes,
    ImageComponent,
)

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

BUTTON_DEFAULTS: dict[str, Any] = {
    f.name: f.default for f in fields(ButtonAttributes)
}

IMAGE_DEFAULTS: dict[str, Any] = {
    "src": "",
    "alt": "Image",
    "width": None,
    "aspect_ratio": None,
    "alignment": Alignment.CENTER,
    "use_default_size": False,
}

# Editor-side (camelCase) attribute names accepted as aliases
FIELD_ALIASES: dict[str, str] = {
    "iconColor": "icon_color",
    "buttonType": "button_type",
    "backgroundColor": "background_color",
    "textColor": "text_color",
    "borderColor": "border_color",
    "hasBorder": "has_border",
    "hasShadow": "has_shadow",
    "aspectRatio": "aspect_ratio",
    "useDefaultSize": "use_default_size",
}

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_RATIO_PAIR_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*[:/]\s*(\d+(?:\.\d+)?)\s*$")


def defaults(kind: ComponentKind) -> dict[str, Any]:
    """Return a fresh copy of the default attribute values for a kind."""
    if kind == ComponentKind.BUTTON:
        return dict(BUTTON_DEFAULTS)
    return dict(IMAGE_DEFAULTS)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize(kind: ComponentKind, partial: dict[str, Any] | None = None) -> Component:
    """Build a fully-populated component of the given kind from partial input."""
    if kind == ComponentKind.BUTTON:
        return ButtonComponent(normalize_button(partial))
    return ImageComponent(normalize_image(partial))


def normalize_button(partial: dict[str, Any] | ButtonAttributes | None = None) -> ButtonAttributes:
    p = canonical_keys(partial)
    d = BUTTON_DEFAULTS
    return ButtonAttributes(
        text=_coerce_text(p.get("text"), d["text"]),
        icon=_coerce_optional_name(p.get("icon")),
        icon_color=_coerce_optional_name(p.get("icon_color")),
        button_type=_coerce_enum(p.get("button_type"), ButtonType, d["button_type"]),
        background_color=_coerce_color(p.get("background_color")),
        text_color=_coerce_color(p.get("text_color")),
        border_color=_coerce_color(p.get("border_color")),
        has_border=_coerce_bool(p.get("has_border"), d["has_border"]),
        width=_coerce_pixels(p.get("width"), d["width"]),
        height=_coerce_pixels(p.get("height"), d["height"]),
        has_shadow=_coerce_bool(p.get("has_shadow"), d["has_shadow"]),
    )


def normalize_image(partial: dict[str, Any] | ImageAttributes | None = None) -> ImageAttributes:
    p = canonical_keys(partial)
    use_default_size = _coerce_bool(p.get("use_default_size"), IMAGE_DEFAULTS["use_default_size"])

    width = None if use_default_size else coerce_percent(p.get("width"))
    aspect_ratio = None if use_default_size else coerce_ratio(p.get("aspect_ratio"))

    alt = _coerce_text(p.get("alt"), "")
    return ImageAttributes(
        src=_coerce_text(p.get("src"), "").strip(),
        alt=alt or IMAGE_DEFAULTS["alt"],
        width=width,
        aspect_ratio=aspect_ratio,
        alignment=_coerce_enum(p.get("alignment"), Alignment, IMAGE_DEFAULTS["alignment"]),
        use_default_size=use_default_size,
    )


def canonical_keys(partial: dict[str, Any] | ButtonAttributes | ImageAttributes | None) -> dict[str, Any]:
    """Map editor aliases onto snake_case field names. Snake_case wins on conflict."""
    if partial is None:
        return {}
    if isinstance(partial, ButtonAttributes | ImageAttributes):
        return partial.to_dict()
    out: dict[str, Any] = {}
    for key, value in partial.items():
        name = FIELD_ALIASES.get(key, key)
        if name != key and name in partial:
            continue
        out[name] = value
    return out


def merge(attrs: ButtonAttributes | ImageAttributes, changes: dict[str, Any]) -> dict[str, Any]:
    """Overlay partial changes on existing attributes, ready for normalize()."""
    merged = attrs.to_dict()
    merged.update(canonical_keys(changes))
    return merged


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def _coerce_text(value: Any, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    return str(value)


def _coerce_optional_name(value: Any) -> str | None:
    """Icon names and icon colors: empty, blank and the literal "null" mean absent."""
    if value is None or not isinstance(value, str):
        return None
    stripped = value.strip()
    if not stripped or stripped == "null":
        return None
    return stripped


def _coerce_color(value: Any) -> str:
    """Any non-empty string passes through; only the sentinel is special."""
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_COLOR
    return value.strip()


def _coerce_enum(value: Any, enum_type: type, default: Any) -> Any:
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        try:
            return enum_type(value.strip().lower())
        except ValueError:
            return default
    return default


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
    return default


def _coerce_pixels(value: Any, default: int) -> int:
    """Integer pixel sizes. "120", "120px" and 120.0 all become 120."""
    number: int | None = None
    if isinstance(value, bool):
        number = None
    elif isinstance(value, int):
        number = value
    elif isinstance(value, float):
        number = int(value) if math.isfinite(value) else None
    elif isinstance(value, str):
        m = _LEADING_INT_RE.match(value)
        number = int(m.group(1)) if m else None
    if number is None or number <= 0:
        return default
    return number


def coerce_percent(value: Any) -> int | None:
    """Image width as a percentage in (0, 100]. "75%", "75", 75 → 75."""
    if isinstance(value, str):
        value = value.strip().removesuffix("%")
    number = _coerce_float(value)
    if number is None:
        return None
    percent = round(number)
    if percent <= 0 or percent > 100:
        return None
    return percent


def coerce_ratio(value: Any) -> float | None:
    """Positive aspect ratio. Accepts 1.78, "1.78", "16:9" and "16/9"."""
    if isinstance(value, str):
        m = _RATIO_PAIR_RE.match(value)
        if m:
            num, den = float(m.group(1)), float(m.group(2))
            if den == 0:
                return None
            value = round(num / den, 4)
    number = _coerce_float(value)
    if number is None or number <= 0:
        return None
    return number


def _coerce_float(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None
