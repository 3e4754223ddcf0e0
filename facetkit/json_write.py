"""Write Python values described by shapes as JSON text."""

from __future__ import annotations

import io
from typing import Any, Optional, TextIO

from facetkit.peek import DefKind, PeekValue, ScalarKind, Shape, shape_of

__all__ = ["to_json", "to_json_string"]

_UNSUPPORTED = '"<unsupported type>"'

_DEBUG_ESCAPES = {
    "\t": "\\t",
    "\r": "\\r",
    "\n": "\\n",
    "\\": "\\\\",
    '"': '\\"',
    "'": "\\'",
    "\0": "\\0",
}


def _escape_debug(text: str) -> str:
    parts = []
    for ch in text:
        escaped = _DEBUG_ESCAPES.get(ch)
        if escaped is not None:
            parts.append(escaped)
        elif not ch.isprintable():
            parts.append(f"\\u{{{ord(ch):x}}}")
        else:
            parts.append(ch)
    return "".join(parts)


def _scalar_text(shape: Shape, data: Any) -> str:
    kind = shape.scalar if shape.kind is DefKind.SCALAR else None
    if kind is ScalarKind.UNIT:
        return "null"
    if kind is ScalarKind.BOOL:
        return "true" if data else "false"
    if kind is ScalarKind.U64:
        return str(int(data))
    if kind is ScalarKind.STRING:
        return f'"{_escape_debug(data)}"'
    return _UNSUPPORTED


def _write_value(out: TextIO, shape: Shape, data: Any, level: int, indent: bool) -> None:
    if shape.kind is DefKind.SCALAR:
        out.write(_scalar_text(shape, data))
        return
    if shape.kind is DefKind.STRUCT:
        entries = [
            (f'"{field.name}":', field.shape, getattr(data, field.name))
            for field in shape.fields
        ]
        _write_container(out, "{", "}", entries, level, indent)
        return
    if shape.kind is DefKind.LIST:
        assert shape.item is not None
        entries = [("", shape.item, item) for item in data]
        _write_container(out, "[", "]", entries, level, indent)
        return
    if shape.kind is DefKind.MAP:
        assert shape.key is not None and shape.value is not None
        entries = [
            (_scalar_text(shape.key, key) + ":", shape.value, value)
            for key, value in data.items()
        ]
        _write_container(out, "{", "}", entries, level, indent)
        return
    raise TypeError(f"unsupported peek type: {shape}")


def _write_container(
    out: TextIO,
    opening: str,
    closing: str,
    entries: list[tuple[str, Shape, Any]],
    level: int,
    indent: bool,
) -> None:
    out.write(opening)
    if indent:
        out.write("\n")
    for position, (prefix, shape, data) in enumerate(entries):
        if position:
            out.write(",")
            if indent:
                out.write("\n")
        if indent:
            out.write(" " * ((level + 1) * 2))
        if prefix:
            out.write(prefix)
            if indent:
                out.write(" ")
        _write_value(out, shape, data, level + 1, indent)
    if entries and indent:
        out.write("\n")
        out.write(" " * (level * 2))
    out.write(closing)


def _resolve(value: Any, tp: Any) -> tuple[Shape, Any]:
    if tp is None:
        if isinstance(value, PeekValue):
            return value.shape, value.data
        raise TypeError("a type is needed unless the value is a PeekValue")
    if isinstance(value, PeekValue):
        value = value.data
    return shape_of(tp), value


def to_json(value: Any, writer: TextIO, indent: bool = False, tp: Optional[Any] = None) -> None:
    """Serialize ``value`` of type ``tp`` as JSON to a text ``writer``.

    ``value`` may also be a ``PeekValue``, in which case ``tp`` may be omitted.
    """
    shape, data = _resolve(value, tp)
    _write_value(writer, shape, data, 0, indent)


def to_json_string(value: Any, indent: bool = False, tp: Optional[Any] = None) -> str:
    """Serialize ``value`` of type ``tp`` to a JSON string."""
    buffer = io.StringIO()
    to_json(value, buffer, indent, tp)
    return buffer.getvalue()