"""
Embeds Codec — Scanner Tests

scan_markers() walks a stored document once, yielding every component
marker in document order with character offsets. split() builds on it to
interleave prose with decoded components.
"""

import types

from embeds.kernel.codec import encode, scan_markers, split
from embeds.kernel.types import ButtonComponent, ComponentKind, ImageComponent, MarkerMatch


class TestScanMarkers:
    def test_finds_markers_in_order(self, mixed_markup, button_marker, image_marker):
        matches = list(scan_markers(mixed_markup))
        assert [m.kind for m in matches] == [ComponentKind.BUTTON, ComponentKind.IMAGE]
        assert matches[0].raw == button_marker
        assert matches[1].raw == image_marker

    def test_offsets_slice_the_document(self, mixed_markup):
        for m in scan_markers(mixed_markup):
            assert mixed_markup[m.start:m.end] == m.raw

    def test_offsets_are_characters(self, button_marker):
        prefix = "<p>Ünïcödé — ✓ "
        markup = prefix + button_marker
        (match,) = scan_markers(markup)
        assert match.start == len(prefix)
        assert match.end == len(markup)

    def test_is_lazy(self, button_marker):
        scanner = scan_markers(button_marker * 3)
        assert isinstance(scanner, types.GeneratorType)
        first = next(scanner)
        assert first.start == 0

    def test_restartable(self, mixed_markup):
        assert list(scan_markers(mixed_markup)) == list(scan_markers(mixed_markup))

    def test_empty_document(self):
        assert list(scan_markers("")) == []

    def test_prose_only(self):
        assert list(scan_markers("<p>No components <span class='x'>here</span>.</p>")) == []

    def test_img_without_src_skipped(self, image_marker):
        markup = '<img alt="placeholder">' + image_marker
        matches = list(scan_markers(markup))
        assert len(matches) == 1
        assert matches[0].raw == image_marker

    def test_adjacent_buttons(self):
        a = encode(ComponentKind.BUTTON, {"text": "A"})
        b = encode(ComponentKind.BUTTON, {"text": "B"})
        matches = list(scan_markers(a + b))
        assert [m.raw for m in matches] == [a, b]
        assert matches[1].start == len(a)

    def test_many_markers(self):
        marker = encode(ComponentKind.BUTTON, {"text": "Go"})
        markup = "<p>x</p>".join([marker] * 200)
        assert sum(1 for _ in scan_markers(markup)) == 200


class TestSplit:
    def test_interleaves_prose_and_components(self, mixed_markup, button_marker, image_marker):
        pieces = list(split(mixed_markup))
        assert pieces[0] == "<h2>Getting started</h2><p>Grab the installer: "
        assert isinstance(pieces[1][0], MarkerMatch)
        assert isinstance(pieces[1][1], ButtonComponent)
        assert pieces[2] == " then continue.</p>"
        assert isinstance(pieces[3][1], ImageComponent)
        assert pieces[4] == "<p>That's it.</p>"
        assert len(pieces) == 5

    def test_reassembles_to_input(self, mixed_markup):
        out = "".join(p if isinstance(p, str) else p[0].raw for p in split(mixed_markup))
        assert out == mixed_markup

    def test_no_empty_prose_runs(self, button_marker):
        pieces = list(split(button_marker))
        assert len(pieces) == 1
        assert not isinstance(pieces[0], str)

    def test_prose_only(self):
        assert list(split("<p>hello</p>")) == ["<p>hello</p>"]

    def test_empty(self):
        assert list(split("")) == []
