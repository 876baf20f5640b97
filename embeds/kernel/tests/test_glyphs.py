"""
Embeds Glyphs — Lookup Tests

Known icons return their SVG path data; unknown names return the default
circle instead of failing.
"""

from embeds.kernel.glyphs import DEFAULT_GLYPH, GLYPH_PATHS, glyph_names, glyph_path, has_glyph


def test_known_glyph():
    assert glyph_path("Check") == '<path d="M20 6 9 17l-5-5"/>'


def test_unknown_glyph_falls_back_to_circle():
    assert glyph_path("NotARealIcon") == DEFAULT_GLYPH
    assert DEFAULT_GLYPH == '<circle cx="12" cy="12" r="2"/>'


def test_none_falls_back_to_circle():
    assert glyph_path(None) == DEFAULT_GLYPH


def test_catalog_is_sorted_and_complete():
    names = glyph_names()
    assert names == sorted(names)
    assert set(names) == set(GLYPH_PATHS)
    assert "FileDown" in names


def test_has_glyph():
    assert has_glyph("Star")
    assert not has_glyph("Nope")
    assert not has_glyph(None)
