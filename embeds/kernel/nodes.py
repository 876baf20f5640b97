"""
Embeds Kernel — Authoring Node Model

Pure function: (document, command) → CommandResult
No IO. Never throws. The input document is never modified.

A document is an ordered list of prose runs and component nodes. Each node
is an atom: it occupies exactly one position and cannot be split. Commands
replace a node's attributes and re-serialize only that node's marker; the
rest of the document is never reparsed.

Image updates also return a StylePatch so a host can restyle the existing
<img> element in place instead of recreating it.

Lifecycle per node: inserted → selected → updated (any number of times) → removed
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterator
from typing import Any

from embeds.kernel.codec import serialize, split
from embeds.kernel.config import settings
from embeds.kernel.presentation import image_settings, style_patch
from embeds.kernel.schema import canonical_keys, coerce_percent, coerce_ratio, defaults, merge, normalize
from embeds.kernel.types import (
    COMMAND_TYPES,
    DEFAULT_ASPECT_RATIO,
    WIDTH_PRESETS,
    ButtonAttributes,
    Command,
    CommandResult,
    Component,
    ComponentKind,
    ComponentNode,
    DocumentState,
    ImageAttributes,
    ImageComponent,
    NodeStatus,
    StylePatch,
    Warning,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def empty_document() -> DocumentState:
    return DocumentState()


def load(markup: str) -> DocumentState:
    """
    Rebuild the authoring document from stored markup.
    Each marker becomes a node; its stored text is kept verbatim until the
    node is first updated, so load → to_markup is lossless.
    """
    state = DocumentState()
    for piece in split(markup):
        if isinstance(piece, str):
            state.segments.append(piece)
            continue
        match, component = piece
        state.segments.append(ComponentNode(id=_next_node_id(state), component=component, marker=match.raw))
    return state


def to_markup(state: DocumentState) -> str:
    """Serialize the whole document for persistence."""
    return "".join(seg if isinstance(seg, str) else seg.marker for seg in state.segments)


def doc_size(state: DocumentState) -> int:
    return sum(len(seg) if isinstance(seg, str) else 1 for seg in state.segments)


def iter_nodes(state: DocumentState) -> Iterator[tuple[int, ComponentNode]]:
    """Yield (position, node) for every live node in document order."""
    pos = 0
    for seg in state.segments:
        if isinstance(seg, str):
            pos += len(seg)
            continue
        yield pos, seg
        pos += 1


def find_node(state: DocumentState, node_id: str) -> ComponentNode | None:
    for _, node in iter_nodes(state):
        if node.id == node_id:
            return node
    return None


def find_target(state: DocumentState, kind: ComponentKind) -> ComponentNode | None:
    """
    Resolve the node a kind-specific command should act on, in order:
      1. the explicitly selected node, if it is of this kind
      2. the first node of this kind inside the selection range
      3. the first node of this kind within the scan window around the cursor
      4. the last node of this kind anywhere in the document
    """
    nodes = [(pos, node) for pos, node in iter_nodes(state) if node.kind == kind]
    if not nodes:
        return None

    if state.selected:
        for _, node in nodes:
            if node.id == state.selected:
                return node

    start, end = state.selection
    for pos, node in nodes:
        if start <= pos < end:
            return node

    window = settings.SELECTION_WINDOW
    low, high = max(0, start - window), min(doc_size(state), start + window)
    for pos, node in nodes:
        if low <= pos < high:
            return node

    return nodes[-1][1]


def current_image_settings(state: DocumentState) -> dict[str, Any] | None:
    """Toolbar pre-fill for the image a command would currently target."""
    node = find_target(state, ComponentKind.IMAGE)
    if node is None:
        return None
    return image_settings(node.component.attrs)


def validate_command(type: str, payload: Any) -> list[str]:
    """
    Structural validation of a command before it reaches the reducer.
    Returns a list of error strings. Empty list = valid.
    Does NOT check whether the target node exists; reduce() does that.
    """
    errors: list[str] = []
    if type not in COMMAND_TYPES:
        errors.append(f"Unknown command type: {type}")
        return errors
    if not isinstance(payload, dict):
        errors.append("Payload must be a non-null object")
        return errors

    if "node" in payload and not isinstance(payload["node"], str):
        errors.append("'node' must be a string")

    validator = _VALIDATORS.get(type)
    if validator:
        errors.extend(validator(payload))
    return errors


def reduce(state: DocumentState, command: Command, *, is_dark: bool | None = None) -> CommandResult:
    """
    Apply one command to the document.
    Returns the new document + applied flag, or the untouched input on rejection.
    is_dark selects the theme baked into re-serialized markers.
    """
    if command.type not in COMMAND_TYPES:
        return _reject(state, command, "UNKNOWN_COMMAND", command.type)

    errors = validate_command(command.type, command.payload)
    if errors:
        return _reject(state, command, "INVALID_PAYLOAD", "; ".join(errors))

    doc = copy.deepcopy(state)

    handler = _HANDLERS.get(command.type)
    if handler is not None:
        result = handler(doc, command.payload, is_dark)
    else:
        result = _handle_attribute_command(doc, command, is_dark)

    if not result.applied:
        logger.info("nodes: rejected %s: %s", command.type, result.error)
        result.state = state
    return result


def replay(commands: list[Command], state: DocumentState | None = None) -> DocumentState:
    """Apply commands in order, skipping rejected ones."""
    doc = state if state is not None else empty_document()
    for command in commands:
        result = reduce(doc, command)
        if result.applied:
            doc = result.state
    return doc


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _reject(state: DocumentState, command: Command, code: str, msg: str) -> CommandResult:
    logger.info("nodes: rejected %s: %s: %s", command.type, code, msg)
    return CommandResult(state=state, applied=False, error=f"{code}: {msg}")


def _fail(doc: DocumentState, code: str, msg: str) -> CommandResult:
    return CommandResult(state=doc, applied=False, error=f"{code}: {msg}")


def _ok(
    doc: DocumentState,
    node: ComponentNode | None = None,
    patch: StylePatch | None = None,
    warnings: list[Warning] | None = None,
) -> CommandResult:
    return CommandResult(
        state=doc,
        applied=True,
        node_id=node.id if node else None,
        patch=patch,
        warnings=warnings or [],
    )


def _unknown_attributes(kind: ComponentKind, changes: dict[str, Any]) -> list[Warning]:
    """Keys normalize() will ignore, reported back instead of silently dropped."""
    unknown = sorted(set(canonical_keys(changes)) - set(defaults(kind)))
    if not unknown:
        return []
    return [Warning(
        code="UNKNOWN_ATTRIBUTE",
        message=f"{kind} has no attribute(s): {', '.join(unknown)}",
        details={"keys": unknown},
    )]


def _next_node_id(doc: DocumentState) -> str:
    node_id = f"node_{doc.next_id}"
    doc.next_id += 1
    return node_id


def _resolve_node(
    doc: DocumentState,
    payload: dict[str, Any],
    kind: ComponentKind | None,
) -> tuple[ComponentNode | None, CommandResult | None]:
    """Find the command's node, by explicit id or by the target fallback chain."""
    node_id = payload.get("node")
    if node_id:
        if node_id in doc.removed:
            return None, _fail(doc, "NODE_REMOVED", node_id)
        node = find_node(doc, node_id)
        if node is None:
            return None, _fail(doc, "UNKNOWN_NODE", node_id)
        if kind is not None and node.kind != kind:
            return None, _fail(doc, "WRONG_KIND", f"{node_id} is a {node.kind}, not a {kind}")
        return node, None

    if kind is None:
        return None, _fail(doc, "NO_TARGET", "command needs 'node' or 'kind'")
    node = find_target(doc, kind)
    if node is None:
        return None, _fail(doc, "NO_TARGET", f"no {kind} in document")
    return node, None


def _build_component(kind: ComponentKind, partial: dict[str, Any]) -> tuple[Component, str | None]:
    component = normalize(kind, partial)
    if isinstance(component, ImageComponent) and not component.attrs.src:
        return component, "image requires a non-empty 'src'"
    return component, None


def _update_node(
    doc: DocumentState,
    node: ComponentNode,
    changes: dict[str, Any],
    is_dark: bool | None,
) -> CommandResult:
    previous = node.component.attrs
    component, problem = _build_component(node.kind, merge(previous, changes))
    if problem:
        return _fail(doc, "MISSING_SRC", problem)

    node.component = component
    node.marker = serialize(component, is_dark=is_dark)
    node.status = NodeStatus.UPDATED

    patch = None
    if isinstance(component, ImageComponent):
        patch = style_patch(previous, component.attrs)
    return _ok(doc, node, patch, _unknown_attributes(node.kind, changes))


def _shift_left(pos: int, removed_at: int) -> int:
    return pos - 1 if pos > removed_at else pos


# ---------------------------------------------------------------------------
# Generic handlers
# ---------------------------------------------------------------------------


def _handle_insert(doc: DocumentState, p: dict[str, Any], is_dark: bool | None) -> CommandResult:
    kind = ComponentKind(p["kind"])
    component, problem = _build_component(kind, p.get("attrs") or {})
    if problem:
        return _fail(doc, "MISSING_SRC", problem)

    size = doc_size(doc)
    position = p.get("position", doc.selection[1])
    if not 0 <= position <= size:
        return _fail(doc, "INVALID_POSITION", f"{position} outside 0..{size}")

    node = ComponentNode(id=_next_node_id(doc), component=component, marker=serialize(component, is_dark=is_dark))
    _insert_segment(doc, position, node)

    after = position + 1
    doc.selection = (after, after)

    patch = style_patch(None, component.attrs) if isinstance(component, ImageComponent) else None
    return _ok(doc, node, patch, _unknown_attributes(kind, p.get("attrs") or {}))


def _handle_update(doc: DocumentState, p: dict[str, Any], is_dark: bool | None) -> CommandResult:
    kind = ComponentKind(p["kind"]) if p.get("kind") else None
    node, failure = _resolve_node(doc, p, kind)
    if failure:
        return failure
    return _update_node(doc, node, p["attrs"], is_dark)


def _handle_select(doc: DocumentState, p: dict[str, Any], is_dark: bool | None) -> CommandResult:
    node, failure = _resolve_node(doc, p, None)
    if failure:
        return failure
    for pos, candidate in iter_nodes(doc):
        if candidate is node:
            doc.selection = (pos, pos + 1)
            break
    doc.selected = node.id
    node.status = NodeStatus.SELECTED
    return _ok(doc, node)


def _handle_deselect(doc: DocumentState, p: dict[str, Any], is_dark: bool | None) -> CommandResult:
    doc.selected = None
    return _ok(doc)


def _handle_remove(doc: DocumentState, p: dict[str, Any], is_dark: bool | None) -> CommandResult:
    kind = ComponentKind(p["kind"]) if p.get("kind") else None
    node, failure = _resolve_node(doc, p, kind)
    if failure:
        return failure

    position = next(pos for pos, candidate in iter_nodes(doc) if candidate is node)
    index = next(i for i, seg in enumerate(doc.segments) if seg is node)
    del doc.segments[index]
    _merge_prose(doc, index)

    node.status = NodeStatus.REMOVED
    doc.removed.append(node.id)
    if doc.selected == node.id:
        doc.selected = None
    start, end = doc.selection
    doc.selection = (_shift_left(start, position), _shift_left(end, position))
    return _ok(doc, node)


def _handle_selection(doc: DocumentState, p: dict[str, Any], is_dark: bool | None) -> CommandResult:
    start, end = p["from"], p.get("to", p["from"])
    size = doc_size(doc)
    if not 0 <= start <= end <= size:
        return _fail(doc, "INVALID_POSITION", f"({start}, {end}) outside 0..{size}")
    doc.selection = (start, end)
    return _ok(doc)


def _insert_segment(doc: DocumentState, position: int, node: ComponentNode) -> None:
    pos = 0
    for index, seg in enumerate(doc.segments):
        if isinstance(seg, str):
            if position <= pos + len(seg):
                offset = position - pos
                pieces = [piece for piece in (seg[:offset], node, seg[offset:]) if piece != ""]
                doc.segments[index:index + 1] = pieces
                return
            pos += len(seg)
        else:
            if position <= pos:
                doc.segments.insert(index, node)
                return
            pos += 1
    doc.segments.append(node)


def _merge_prose(doc: DocumentState, index: int) -> None:
    """Join the prose runs on either side of a removed node."""
    if 0 < index < len(doc.segments):
        before, after = doc.segments[index - 1], doc.segments[index]
        if isinstance(before, str) and isinstance(after, str):
            doc.segments[index - 1:index + 1] = [before + after]


# ---------------------------------------------------------------------------
# Attribute commands
# ---------------------------------------------------------------------------


def _toggle(field: str) -> Callable[[Any, dict[str, Any]], dict[str, Any]]:
    def build(attrs: Any, p: dict[str, Any]) -> dict[str, Any]:
        return {field: not getattr(attrs, field)}

    return build


def _width_preset(attrs: ImageAttributes, p: dict[str, Any]) -> dict[str, Any]:
    preset = p["preset"]
    if preset == "default":
        return {"use_default_size": True}
    return {
        "use_default_size": False,
        "width": preset,
        "aspect_ratio": attrs.aspect_ratio or DEFAULT_ASPECT_RATIO,
    }


def _apply_image_changes(attrs: ImageAttributes, p: dict[str, Any]) -> dict[str, Any]:
    changes: dict[str, Any] = {"alignment": p.get("alignment", str(attrs.alignment))}
    width = p.get("width", "default")
    if width == "default":
        changes["use_default_size"] = True
        return changes
    changes.update({
        "use_default_size": False,
        "width": width,
        "aspect_ratio": p.get("aspect_ratio", attrs.aspect_ratio or DEFAULT_ASPECT_RATIO),
    })
    return changes


def _set_size(attrs: ButtonAttributes, p: dict[str, Any]) -> dict[str, Any]:
    return {key: p[key] for key in ("width", "height") if key in p}


# command → (kind, builder(attrs, payload) → attribute changes)
_ATTRIBUTE_COMMANDS: dict[str, tuple[ComponentKind, Callable[[Any, dict[str, Any]], dict[str, Any]]]] = {
    "button.set_text": (ComponentKind.BUTTON, lambda a, p: {"text": p["text"]}),
    "button.set_icon": (ComponentKind.BUTTON, lambda a, p: {"icon": p.get("icon")}),
    "button.set_icon_color": (ComponentKind.BUTTON, lambda a, p: {"icon_color": p.get("color")}),
    "button.set_type": (ComponentKind.BUTTON, lambda a, p: {"button_type": p["button_type"]}),
    "button.set_background_color": (ComponentKind.BUTTON, lambda a, p: {"background_color": p["color"]}),
    "button.set_text_color": (ComponentKind.BUTTON, lambda a, p: {"text_color": p["color"]}),
    "button.set_border_color": (ComponentKind.BUTTON, lambda a, p: {"border_color": p["color"]}),
    "button.toggle_border": (ComponentKind.BUTTON, _toggle("has_border")),
    "button.toggle_shadow": (ComponentKind.BUTTON, _toggle("has_shadow")),
    "button.set_size": (ComponentKind.BUTTON, _set_size),
    "image.set_alignment": (ComponentKind.IMAGE, lambda a, p: {"alignment": p["alignment"]}),
    "image.set_width": (ComponentKind.IMAGE, lambda a, p: {"width": p["width"], "use_default_size": False}),
    "image.set_aspect_ratio": (
        ComponentKind.IMAGE,
        lambda a, p: {"aspect_ratio": p["aspect_ratio"], "use_default_size": False},
    ),
    "image.set_width_preset": (ComponentKind.IMAGE, _width_preset),
    "image.use_default_size": (ComponentKind.IMAGE, lambda a, p: {"use_default_size": p.get("enabled", True)}),
    "image.apply_changes": (ComponentKind.IMAGE, _apply_image_changes),
}


def _handle_attribute_command(doc: DocumentState, command: Command, is_dark: bool | None) -> CommandResult:
    kind, build = _ATTRIBUTE_COMMANDS[command.type]
    node, failure = _resolve_node(doc, command.payload, kind)
    if failure:
        return failure
    return _update_node(doc, node, build(node.component.attrs, command.payload), is_dark)


# ---------------------------------------------------------------------------
# Payload validators
# ---------------------------------------------------------------------------


def _requires(*keys: str) -> Callable[[dict[str, Any]], list[str]]:
    def check(p: dict[str, Any]) -> list[str]:
        return [f"requires '{key}'" for key in keys if key not in p]

    return check


def _validate_kind(p: dict[str, Any], required: bool) -> list[str]:
    if "kind" not in p or p["kind"] is None:
        return ["requires 'kind'"] if required else []
    if not isinstance(p["kind"], str) or p["kind"] not in set(ComponentKind):
        return [f"Unknown component kind: {p['kind']}"]
    return []


def _validate_insert(p: dict[str, Any]) -> list[str]:
    errors = _validate_kind(p, required=True)
    if "attrs" in p and p["attrs"] is not None and not isinstance(p["attrs"], dict):
        errors.append("'attrs' must be an object")
    if "position" in p and (not isinstance(p["position"], int) or isinstance(p["position"], bool)):
        errors.append("'position' must be an integer")
    return errors


def _validate_update(p: dict[str, Any]) -> list[str]:
    errors = _validate_kind(p, required=False)
    if "attrs" not in p:
        errors.append("requires 'attrs'")
    elif not isinstance(p["attrs"], dict):
        errors.append("'attrs' must be an object")
    return errors


def _validate_selection(p: dict[str, Any]) -> list[str]:
    errors = []
    for key in ("from", "to"):
        if key in p and (not isinstance(p[key], int) or isinstance(p[key], bool)):
            errors.append(f"'{key}' must be an integer")
    if "from" not in p:
        errors.append("requires 'from'")
    return errors


def _validate_width_preset(p: dict[str, Any]) -> list[str]:
    if "preset" not in p:
        return ["requires 'preset'"]
    preset = p["preset"]
    if isinstance(preset, bool) or preset not in WIDTH_PRESETS:
        return [f"'preset' must be one of: {', '.join(map(str, WIDTH_PRESETS))}"]
    return []


def _validate_width(p: dict[str, Any]) -> list[str]:
    if "width" not in p:
        return ["requires 'width'"]
    if coerce_percent(p["width"]) is None:
        return [f"'width' must be a percentage in (0, 100], got {p['width']!r}"]
    return []


def _validate_aspect_ratio(p: dict[str, Any]) -> list[str]:
    if "aspect_ratio" not in p:
        return ["requires 'aspect_ratio'"]
    if coerce_ratio(p["aspect_ratio"]) is None:
        return [f"'aspect_ratio' must be a positive ratio, got {p['aspect_ratio']!r}"]
    return []


def _validate_apply_changes(p: dict[str, Any]) -> list[str]:
    errors = []
    if p.get("width", "default") != "default":
        errors.extend(_validate_width(p))
    if "aspect_ratio" in p:
        errors.extend(_validate_aspect_ratio(p))
    return errors


_VALIDATORS: dict[str, Callable[[dict[str, Any]], list[str]]] = {
    "component.insert": _validate_insert,
    "component.update": _validate_update,
    "component.select": _requires("node"),
    "component.remove": lambda p: _validate_kind(p, required=False),
    "selection.set": _validate_selection,
    "button.set_text": _requires("text"),
    "button.set_type": _requires("button_type"),
    "button.set_background_color": _requires("color"),
    "button.set_text_color": _requires("color"),
    "button.set_border_color": _requires("color"),
    "image.set_alignment": _requires("alignment"),
    "image.set_width": _validate_width,
    "image.set_aspect_ratio": _validate_aspect_ratio,
    "image.set_width_preset": _validate_width_preset,
    "image.apply_changes": _validate_apply_changes,
}

_HANDLERS: dict[str, Callable[[DocumentState, dict[str, Any], bool | None], CommandResult]] = {
    "component.insert": _handle_insert,
    "component.update": _handle_update,
    "component.select": _handle_select,
    "component.deselect": _handle_deselect,
    "component.remove": _handle_remove,
    "selection.set": _handle_selection,
}
