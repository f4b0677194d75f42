"""Render an export snapshot as a Luau module returning a table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rbxsync.domain.model import ResourceCategory

if TYPE_CHECKING:
    from rbxsync.domain.export import ExportSnapshot
    from rbxsync.domain.model import RemoteResource

_INDENT = "    "
_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def luau_string(value: str) -> str:
    escaped = "".join(_ESCAPES.get(char, char) for char in value)
    return f'"{escaped}"'


def _render_item(category: ResourceCategory, item: RemoteResource) -> str:
    fields = [f"name = {luau_string(item.name)}", f"id = {item.identifier}"]
    if category is not ResourceCategory.BADGE and item.price is not None:
        fields.append(f"price = {item.price}")
    return "{ " + ", ".join(fields) + " }"


def render_luau(snapshot: ExportSnapshot) -> str:
    lines = [
        "-- Generated by rbxsync export. Do not edit by hand.",
        f"-- Universe {snapshot.universe_id}",
        "return {",
    ]
    for category in ResourceCategory:
        items = snapshot.of(category)
        if not items:
            lines.append(f"{_INDENT}{category.value} = {{}},")
            continue
        lines.append(f"{_INDENT}{category.value} = {{")
        lines.extend(f"{_INDENT * 2}{_render_item(category, item)}," for item in items)
        lines.append(f"{_INDENT}}},")
    lines.append("}")
    return "\n".join(lines) + "\n"
