"""
Embeds Presentation — Button Style, Image Layout and Style Patch Tests

style_patch() lets a host restyle an existing <img> element in place: it
reports only the style, class and data attributes that changed, with None
marking a data attribute to remove.
"""

import pytest

from embeds.kernel.presentation import (
    aspect_ratio_preset,
    button_presentation,
    button_style,
    display_label,
    format_ratio,
    image_presentation,
    image_settings,
    style_patch,
)
from embeds.kernel.schema import normalize_button, normalize_image
from embeds.kernel.sizing import preview_sizes, render_sizes


def image(**attrs):
    return normalize_image({"src": "a.png", **attrs})


# ============================================================================
# Buttons
# ============================================================================


class TestButtonPresentation:
    def test_filled_uses_background_and_text(self):
        p = button_presentation(normalize_button({"background_color": "#111111", "text_color": "#eeeeee"}), False, preview_sizes)
        assert p.background == "#111111"
        assert p.color == "#eeeeee"

    def test_outline_is_transparent_with_border_color_text(self):
        attrs = normalize_button({"button_type": "outline", "border_color": "#ff00ff", "text_color": "#00ff00"})
        p = button_presentation(attrs, False, preview_sizes)
        assert p.background == "transparent"
        assert p.color == "#ff00ff"

    def test_size_variant_is_injected(self):
        attrs = normalize_button({"height": 40})
        assert button_presentation(attrs, False, preview_sizes).icon_size == 16
        assert button_presentation(attrs, False, render_sizes).icon_size == 22

    def test_interactive_style(self):
        p = button_presentation(normalize_button({}), False, preview_sizes)
        assert "cursor: pointer" in button_style(p, interactive=True)
        assert "cursor" not in button_style(p, interactive=False)
        assert button_style(p, interactive=False).endswith("font-size: 14px;")


class TestDisplayLabel:
    def test_icon_and_text(self):
        assert display_label(normalize_button({"icon": "Star", "text": "Rate"})) == "[Star] Rate"

    def test_text_only(self):
        assert display_label(normalize_button({"text": "Rate"})) == "Rate"

    def test_empty(self):
        assert display_label(normalize_button({})) == "Button"


# ============================================================================
# Images
# ============================================================================


class TestImagePresentation:
    def test_sized_left_floats(self):
        p = image_presentation(image(width=50, aspect_ratio=1.78, alignment="left"))
        assert "width: 50%;" in p.style
        assert "aspect-ratio: 1.78; object-fit: cover;" in p.style
        assert "float: left; margin: 0.5rem 1rem 0.5rem 0; clear: left;" in p.style
        assert p.css_class == "editor-image image-align-left"
        assert p.data_attrs == {
            "data-alignment": "left",
            "data-use-default-size": "false",
            "data-aspect-ratio": "1.78",
        }

    def test_natural_right_uses_margins(self):
        p = image_presentation(image(alignment="right", use_default_size=True))
        assert "float" not in p.style
        assert "margin: 1rem 0 1rem auto;" in p.style
        assert "data-aspect-ratio" not in p.data_attrs

    def test_center_is_the_same_either_way(self):
        sized = image_presentation(image(width=50))
        natural = image_presentation(image(use_default_size=True))
        assert sized.style.endswith("margin: 1rem auto; clear: both;")
        assert natural.style.endswith("margin: 1rem auto; clear: both;")

    def test_format_ratio(self):
        assert format_ratio(1.0) == "1"
        assert format_ratio(1.33) == "1.33"
        assert format_ratio(0.5625) == "0.5625"


class TestStylePatch:
    def test_first_patch_has_everything(self):
        attrs = image(width=75, aspect_ratio=1.33)
        patch = style_patch(None, attrs)
        full = image_presentation(attrs)
        assert patch.style == full.style
        assert patch.css_class == full.css_class
        assert patch.data_attrs == full.data_attrs

    def test_no_change_is_empty(self):
        attrs = image(width=75)
        assert style_patch(attrs, attrs).is_empty

    def test_width_change_touches_style_only(self):
        patch = style_patch(image(width=50), image(width=75))
        assert "width: 75%;" in patch.style
        assert patch.css_class is None
        assert patch.data_attrs == {}

    def test_alignment_change(self):
        patch = style_patch(image(alignment="center"), image(alignment="right"))
        assert patch.css_class == "editor-image image-align-right"
        assert patch.data_attrs == {"data-alignment": "right"}

    def test_switch_to_natural_removes_ratio(self):
        patch = style_patch(image(width=50, aspect_ratio=1.78), image(use_default_size=True))
        assert patch.data_attrs == {"data-aspect-ratio": None, "data-use-default-size": "true"}
        assert "aspect-ratio" not in patch.style
        assert "width: 50%" not in patch.style

    def test_alt_change_is_not_a_style_change(self):
        assert style_patch(image(alt="one"), image(alt="two")).is_empty


class TestImageSettings:
    def test_natural_image(self):
        assert image_settings(image(use_default_size=True)) == {
            "width_type": "default",
            "width_percent": 75,
            "aspect_ratio": 1.33,
            "aspect_ratio_preset": "4:3",
            "alignment": "center",
        }

    def test_sized_image(self):
        assert image_settings(image(width=50, aspect_ratio=1.78, alignment="left")) == {
            "width_type": 50,
            "width_percent": 50,
            "aspect_ratio": 1.78,
            "aspect_ratio_preset": "16:9",
            "alignment": "left",
        }

    def test_custom_ratio_has_no_preset(self):
        assert image_settings(image(width=50, aspect_ratio=2.4))["aspect_ratio_preset"] is None


class TestAspectRatioPreset:
    @pytest.mark.parametrize("ratio, label", [
        (1.0, "1:1"),
        (1.33, "4:3"),
        (1.7778, "16:9"),
        (0.75, "3:4"),
        (0.56, "9:16"),
        (1.5, None),
    ])
    def test_matches_presets(self, ratio, label):
        assert aspect_ratio_preset(ratio) == label
