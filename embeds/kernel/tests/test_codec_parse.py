"""
Embeds Codec — Parsing Tests

Tests for parse() against markers that were hand-edited, partially stripped
by other tools, or written by older versions. Parsing never raises: missing
or unusable fields fall back to schema defaults.
"""

import logging

from embeds.kernel.codec import parse, parse_attributes
from embeds.kernel.types import (
    Alignment,
    ButtonAttributes,
    ButtonComponent,
    ButtonType,
    ImageComponent,
)


# ============================================================================
# Not a component
# ============================================================================


class TestNotAComponent:
    def test_plain_text(self):
        assert parse("just some prose") is None

    def test_empty_string(self):
        assert parse("") is None

    def test_paragraph(self):
        assert parse("<p>hello</p>") is None

    def test_span_without_button_flag(self):
        assert parse('<span class="custom-button">Go</span>') is None

    def test_button_flag_false(self):
        assert parse('<span data-button="false" data-text="Go">Go</span>') is None

    def test_img_without_src(self):
        assert parse('<img alt="orphan">') is None

    def test_img_with_blank_src(self):
        assert parse('<img src="  " alt="orphan">') is None


# ============================================================================
# Buttons
# ============================================================================


class TestButtonDegraded:
    def test_bare_marker_is_all_defaults(self):
        assert parse('<span data-button="true">whatever</span>') == ButtonComponent(ButtonAttributes())

    def test_visible_label_is_ignored(self):
        component = parse('<span data-button="true" data-text="Real">[Star] Fake</span>')
        assert component.attrs.text == "Real"
        assert component.attrs.icon is None

    def test_unknown_fields_ignored(self):
        component = parse('<span data-button="true" data-text="Go" data-flavor="mint" id="x">Go</span>')
        assert component.attrs == ButtonAttributes(text="Go")

    def test_unparseable_numbers_fall_back(self):
        component = parse('<span data-button="true" data-width="wide" data-height="-5">Go</span>')
        assert component.attrs.width == 120
        assert component.attrs.height == 40

    def test_pixel_suffix_accepted(self):
        component = parse('<span data-button="true" data-width="150px" data-height="48">Go</span>')
        assert component.attrs.width == 150
        assert component.attrs.height == 48

    def test_unknown_button_type_is_filled(self):
        component = parse('<span data-button="true" data-button-type="ghost">Go</span>')
        assert component.attrs.button_type == ButtonType.FILLED

    def test_null_icon_is_absent(self):
        component = parse('<span data-button="true" data-icon="null" data-icon-color="">Go</span>')
        assert component.attrs.icon is None
        assert component.attrs.icon_color is None

    def test_booleans(self):
        component = parse('<span data-button="true" data-has-border="false" data-has-shadow="nope">Go</span>')
        assert component.attrs.has_border is False
        assert component.attrs.has_shadow is True

    def test_single_quotes_and_case(self):
        component = parse("<SPAN DATA-BUTTON='TRUE' DATA-TEXT='Hi' Data-Button-Type='OUTLINE'>Hi</SPAN>")
        assert isinstance(component, ButtonComponent)
        assert component.attrs.text == "Hi"
        assert component.attrs.button_type == ButtonType.OUTLINE

    def test_unterminated_open_tag(self):
        component = parse('<span data-button="true" data-text="Cut off"')
        assert component.attrs.text == "Cut off"

    def test_entities_decoded(self):
        component = parse('<span data-button="true" data-text="Fish &amp; Chips &lt;3">x</span>')
        assert component.attrs.text == "Fish & Chips <3"

    def test_unusable_field_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="embeds.kernel.codec"):
            parse('<span data-button="true" data-height="tall">Go</span>')
        assert "height" in caplog.text

    def test_clean_marker_is_not_logged(self, caplog, button_marker):
        with caplog.at_level(logging.WARNING, logger="embeds.kernel.codec"):
            parse(button_marker)
        assert caplog.text == ""


# ============================================================================
# Images
# ============================================================================


class TestImageDegraded:
    def test_src_only(self):
        component = parse('<img src="a.png">')
        assert isinstance(component, ImageComponent)
        assert component.attrs.alt == "Image"
        assert component.attrs.width is None
        assert component.attrs.aspect_ratio is None
        assert component.attrs.alignment == Alignment.CENTER
        assert component.attrs.use_default_size is False

    def test_self_closing(self):
        component = parse('<img src="a.png" alt="A" />')
        assert component.attrs.alt == "A"

    def test_width_from_style(self):
        component = parse('<img src="a.png" style="max-width: 100%; width: 40%; aspect-ratio: 16/9;">')
        assert component.attrs.width == 40
        assert component.attrs.aspect_ratio == 1.7778

    def test_attribute_wins_over_style(self):
        component = parse('<img src="a.png" width="60%" style="width: 40%;">')
        assert component.attrs.width == 60

    def test_out_of_range_width_dropped(self):
        assert parse('<img src="a.png" width="250%">').attrs.width is None
        assert parse('<img src="a.png" width="0">').attrs.width is None

    def test_bad_ratio_dropped(self):
        assert parse('<img src="a.png" data-aspect-ratio="wide">').attrs.aspect_ratio is None
        assert parse('<img src="a.png" data-aspect-ratio="16:0">').attrs.aspect_ratio is None

    def test_unknown_alignment_is_center(self):
        assert parse('<img src="a.png" data-alignment="justify">').attrs.alignment == Alignment.CENTER

    def test_default_size_discards_stale_sizing(self):
        component = parse('<img src="a.png" width="50%" data-aspect-ratio="1.5" data-use-default-size="true">')
        assert component.attrs.use_default_size is True
        assert component.attrs.width is None
        assert component.attrs.aspect_ratio is None

    def test_default_size_is_not_logged_as_degraded(self, caplog):
        with caplog.at_level(logging.WARNING, logger="embeds.kernel.codec"):
            parse('<img src="a.png" width="50%" data-use-default-size="true">')
        assert caplog.text == ""


class TestParseAttributes:
    def test_first_occurrence_wins(self):
        assert parse_attributes(' a="1" a="2"') == {"a": "1"}

    def test_mixed_quotes(self):
        assert parse_attributes(""" a="x" b='y'""") == {"a": "x", "b": "y"}

    def test_valueless_attributes_skipped(self):
        assert parse_attributes(' disabled src="a.png"') == {"src": "a.png"}
