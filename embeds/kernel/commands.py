"""
Embeds Kernel — Command Construction

Factory functions for building well-formed authoring commands.
Used by editor hosts to turn toolbar actions into commands for the node
model, and by tests to build commands concisely.
"""

from __future__ import annotations

from typing import Any

from embeds.kernel.types import Command, ComponentKind


def make_command(type: str, payload: dict[str, Any] | None = None, *, node: str | None = None) -> Command:
    """Build a Command, adding the explicit target node when given."""
    body = dict(payload or {})
    if node is not None:
        body["node"] = node
    return Command(type=type, payload=body)


def insert_button(attrs: dict[str, Any] | None = None, *, position: int | None = None) -> Command:
    return _insert(ComponentKind.BUTTON, attrs, position)


def insert_image(src: str, attrs: dict[str, Any] | None = None, *, position: int | None = None) -> Command:
    return _insert(ComponentKind.IMAGE, {**(attrs or {}), "src": src}, position)


def update(attrs: dict[str, Any], *, node: str | None = None, kind: ComponentKind | None = None) -> Command:
    payload: dict[str, Any] = {"attrs": attrs}
    if kind is not None:
        payload["kind"] = str(kind)
    return make_command("component.update", payload, node=node)


def select(node: str) -> Command:
    return make_command("component.select", node=node)


def remove(*, node: str | None = None, kind: ComponentKind | None = None) -> Command:
    payload = {"kind": str(kind)} if kind is not None else {}
    return make_command("component.remove", payload, node=node)


def set_selection(start: int, end: int | None = None) -> Command:
    return make_command("selection.set", {"from": start, "to": start if end is None else end})


def apply_image_changes(
    *,
    width: str | int = "default",
    aspect_ratio: float | None = None,
    alignment: str | None = None,
    node: str | None = None,
) -> Command:
    """The toolbar's "apply" action: width preset, ratio and alignment at once."""
    payload: dict[str, Any] = {"width": width}
    if aspect_ratio is not None:
        payload["aspect_ratio"] = aspect_ratio
    if alignment is not None:
        payload["alignment"] = alignment
    return make_command("image.apply_changes", payload, node=node)


def _insert(kind: ComponentKind, attrs: dict[str, Any] | None, position: int | None) -> Command:
    payload: dict[str, Any] = {"kind": str(kind), "attrs": attrs or {}}
    if position is not None:
        payload["position"] = position
    return Command(type="component.insert", payload=payload)
