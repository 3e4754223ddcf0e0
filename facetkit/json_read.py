"""Read JSON text into Python values described by shapes."""

from __future__ import annotations

import dataclasses
import math
import struct
from typing import Any

from facetkit.jsonparser import JsonParseError, JsonParseErrorKind, JsonParser
from facetkit.peek import DefKind, ScalarKind, Shape, shape_of

__all__ = ["from_str", "JsonParseError", "JsonParseErrorKind"]

_WIDE_KINDS = (ScalarKind.U128, ScalarKind.I128)


def from_str(json: str, tp: Any) -> Any:
    """Deserialize ``json`` into a value of type ``tp``.

    ``tp`` may be anything ``shape_of`` accepts: dataclasses, named tuples,
    enums, ``list[...]``, ``dict[str, ...]``, scalar annotations or a shape.
    Raises ``JsonParseError`` when the input does not match.
    """
    parser = JsonParser(json)
    return _Reader(parser).read(shape_of(tp))


def _to_f32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


class _Reader:
    def __init__(self, parser: JsonParser) -> None:
        self._parser = parser

    def read(self, shape: Shape) -> Any:
        if shape.kind is DefKind.SCALAR:
            return self._read_scalar(shape)
        if shape.kind is DefKind.STRUCT:
            return self._read_struct(shape)
        if shape.kind is DefKind.LIST:
            return self._read_list(shape)
        if shape.kind is DefKind.MAP:
            return self._read_map(shape)
        if shape.kind is DefKind.ENUM:
            return self._read_enum(shape)
        raise TypeError(f"unsupported shape: {shape}")

    def _read_scalar(self, shape: Shape) -> Any:
        parser = self._parser
        kind = shape.scalar
        if kind is ScalarKind.STRING:
            return parser.parse_string()
        if kind is ScalarKind.BOOL:
            return parser.parse_bool()
        if kind is not None and kind.is_integer:
            if kind.signed:
                n = parser.parse_i64()
            else:
                n = parser.parse_u64()
            return n if kind in _WIDE_KINDS else kind.truncate(n)
        if kind is ScalarKind.F32:
            return _to_f32(parser.parse_f64())
        if kind is ScalarKind.F64:
            return parser.parse_f64()
        raise TypeError(f"Unknown scalar shape: {shape}")

    def _read_struct(self, shape: Shape) -> Any:
        parser = self._parser
        by_name = {field.name: field for field in shape.fields}
        values: dict[str, Any] = {}
        key = parser.expect_object_start()
        while key is not None:
            field = by_name.get(key)
            if field is None:
                raise parser.make_error(JsonParseErrorKind.UNKNOWN_FIELD, key)
            values[key] = self.read(field.shape)
            key = parser.parse_object_key()
        return self._build(shape, values)

    def _build(self, shape: Shape, values: dict[str, Any]) -> Any:
        tp = shape.py_type
        if dataclasses.is_dataclass(tp):
            optional = {
                f.name
                for f in dataclasses.fields(tp)
                if f.default is not dataclasses.MISSING
                or f.default_factory is not dataclasses.MISSING
            }
        else:
            optional = set(getattr(tp, "_field_defaults", {}))
        missing = [f.name for f in shape.fields if f.name not in values and f.name not in optional]
        if missing:
            raise self._parser.make_error(
                JsonParseErrorKind.CUSTOM,
                f"Missing field(s) for {shape.name}: {', '.join(missing)}",
            )
        return tp(**values)

    def _read_list(self, shape: Shape) -> list[Any]:
        parser = self._parser
        assert shape.item is not None
        items: list[Any] = []
        if not parser.expect_array_start():
            return items
        while parser.parse_array_element():
            items.append(self.read(shape.item))
        return items

    def _read_map(self, shape: Shape) -> dict[Any, Any]:
        parser = self._parser
        assert shape.key is not None and shape.value is not None
        if shape.key.scalar is not ScalarKind.STRING:
            raise TypeError(f"map keys must be strings: {shape}")
        result: dict[Any, Any] = {}
        key = parser.expect_object_start()
        while key is not None:
            result[key] = self.read(shape.value)
            key = parser.parse_object_key()
        return result

    def _read_enum(self, shape: Shape) -> Any:
        parser = self._parser
        name = parser.parse_string()
        if name not in shape.variants:
            raise parser.make_error(
                JsonParseErrorKind.CUSTOM, f"Invalid enum variant: {name}"
            )
        return shape.py_type[name]