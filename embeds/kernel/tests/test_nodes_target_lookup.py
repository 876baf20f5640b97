"""
Embeds Node Model — Target Lookup Tests

Kind-specific commands without an explicit node resolve their target through
a fallback chain: selected node → node inside the selection → node near the
cursor → last node of that kind.
"""

import pytest

from embeds.kernel import commands
from embeds.kernel.codec import encode
from embeds.kernel.config import settings
from embeds.kernel.nodes import current_image_settings, find_target, load, reduce
from embeds.kernel.types import ComponentKind


@pytest.fixture
def spread_document():
    """Two buttons far apart: node_1 at position 10, node_2 at position 311."""
    first = encode(ComponentKind.BUTTON, {"text": "First"})
    second = encode(ComponentKind.BUTTON, {"text": "Second"})
    return load("x" * 10 + first + "y" * 300 + second + "z" * 10)


def target_id(state, kind=ComponentKind.BUTTON):
    node = find_target(state, kind)
    return node.id if node else None


class TestFallbackChain:
    def test_selected_node_wins(self, spread_document):
        state = reduce(spread_document, commands.select("node_2")).state
        state = reduce(state, commands.set_selection(5, 20)).state
        assert target_id(state) == "node_2"

    def test_selection_range(self, spread_document):
        spread_document.selection = (5, 20)
        assert target_id(spread_document) == "node_1"
        spread_document.selection = (300, 320)
        assert target_id(spread_document) == "node_2"

    def test_collapsed_selection_uses_window(self, spread_document):
        spread_document.selection = (10, 10)
        assert target_id(spread_document) == "node_1"
        spread_document.selection = (250, 250)
        assert target_id(spread_document) == "node_2"

    def test_window_is_first_match(self, spread_document):
        spread_document.selection = (60, 60)
        assert target_id(spread_document) == "node_1"

    def test_last_node_when_nothing_near(self, spread_document):
        spread_document.selection = (160, 160)
        assert target_id(spread_document) == "node_2"

    def test_window_size_from_settings(self, spread_document, monkeypatch):
        monkeypatch.setattr(settings, "SELECTION_WINDOW", 5)
        spread_document.selection = (14, 14)
        assert target_id(spread_document) == "node_1"
        spread_document.selection = (20, 20)
        assert target_id(spread_document) == "node_2"

    def test_selected_node_of_other_kind_ignored(self, spread_document):
        spread_document.selected = "node_1"
        assert target_id(spread_document, ComponentKind.IMAGE) is None

    def test_no_nodes(self):
        assert target_id(load("<p>nothing here</p>")) is None


class TestCommandsUseChain:
    def test_attribute_command_hits_selected(self, spread_document):
        state = reduce(spread_document, commands.select("node_2")).state
        result = reduce(state, commands.make_command("button.set_text", {"text": "Changed"}))
        assert result.node_id == "node_2"

    def test_explicit_node_bypasses_chain(self, spread_document):
        state = reduce(spread_document, commands.select("node_2")).state
        result = reduce(state, commands.make_command("button.set_text", {"text": "Changed"}, node="node_1"))
        assert result.node_id == "node_1"


class TestCurrentImageSettings:
    def test_no_image(self, spread_document):
        assert current_image_settings(spread_document) is None

    def test_targeted_image(self, image_marker):
        assert current_image_settings(load(image_marker)) == {
            "width_type": 50,
            "width_percent": 50,
            "aspect_ratio": 1.78,
            "aspect_ratio_preset": "16:9",
            "alignment": "left",
        }
