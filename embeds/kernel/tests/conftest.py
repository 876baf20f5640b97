"""
Embeds kernel test configuration.

Shared fixtures for documents that mix prose with component markers.
"""

import pytest

from embeds.kernel.codec import encode
from embeds.kernel.types import ComponentKind


@pytest.fixture
def button_marker():
    return encode(ComponentKind.BUTTON, {"text": "Download", "icon": "FileDown"}, is_dark=False)


@pytest.fixture
def image_marker():
    return encode(ComponentKind.IMAGE, {
        "src": "https://cdn.example.com/diagram.png",
        "alt": "Architecture diagram",
        "width": 50,
        "aspect_ratio": 1.78,
        "alignment": "left",
    })


@pytest.fixture
def mixed_markup(button_marker, image_marker):
    return (
        "<h2>Getting started</h2>"
        f"<p>Grab the installer: {button_marker} then continue.</p>"
        f"{image_marker}"
        "<p>That's it.</p>"
    )
