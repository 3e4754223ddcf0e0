"""Decode MessagePack bytes into Python values described by shapes."""

from __future__ import annotations

import dataclasses
from typing import Any

from facetkit.msgpack_format import (
    MSGPACK_FIXMAP_MAX,
    MSGPACK_FIXMAP_MIN,
    MSGPACK_FIXSTR_MAX,
    MSGPACK_FIXSTR_MIN,
    MSGPACK_MAP16,
    MSGPACK_MAP32,
    MSGPACK_POSFIXINT_MAX,
    MSGPACK_POSFIXINT_MIN,
    MSGPACK_STR8,
    MSGPACK_STR16,
    MSGPACK_STR32,
    MSGPACK_UINT8,
    MSGPACK_UINT16,
    MSGPACK_UINT32,
    MSGPACK_UINT64,
    DecodeError,
    InsufficientData,
    InvalidData,
    UnexpectedType,
    UnknownField,
)
from facetkit.peek import DefKind, ScalarKind, Shape, shape_of

__all__ = ["Decoder", "from_bytes", "DecodeError"]


class Decoder:
    """Reads MessagePack values from a byte string, advancing ``offset``."""

    def __init__(self, data: bytes) -> None:
        self.input = bytes(data)
        self.offset = 0

    def _take(self, count: int) -> bytes:
        end = self.offset + count
        if end > len(self.input):
            raise InsufficientData()
        chunk = self.input[self.offset : end]
        self.offset = end
        return chunk

    def decode_u8(self) -> int:
        """Read one raw byte."""
        return self._take(1)[0]

    def decode_u16(self) -> int:
        """Read a raw big-endian 16-bit unsigned integer."""
        return int.from_bytes(self._take(2), "big")

    def decode_u32(self) -> int:
        """Read a raw big-endian 32-bit unsigned integer."""
        return int.from_bytes(self._take(4), "big")

    def decode_u64(self) -> int:
        """Read a MessagePack unsigned integer (positive fixint or uint8..uint64)."""
        prefix = self.decode_u8()
        if prefix == MSGPACK_UINT8:
            return self.decode_u8()
        if prefix == MSGPACK_UINT16:
            return self.decode_u16()
        if prefix == MSGPACK_UINT32:
            return self.decode_u32()
        if prefix == MSGPACK_UINT64:
            return int.from_bytes(self._take(8), "big")
        if MSGPACK_POSFIXINT_MIN <= prefix <= MSGPACK_POSFIXINT_MAX:
            return prefix
        raise UnexpectedType()

    def decode_string(self) -> str:
        """Read a MessagePack string (fixstr, str8, str16 or str32)."""
        prefix = self.decode_u8()
        if MSGPACK_FIXSTR_MIN <= prefix <= MSGPACK_FIXSTR_MAX:
            length = prefix & 0x1F
        elif prefix == MSGPACK_STR8:
            length = self.decode_u8()
        elif prefix == MSGPACK_STR16:
            length = self.decode_u16()
        elif prefix == MSGPACK_STR32:
            length = self.decode_u32()
        else:
            raise UnexpectedType()
        raw = self._take(length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidData() from None

    def decode_map_len(self) -> int:
        """Read a MessagePack map header and return its number of entries."""
        prefix = self.decode_u8()
        if MSGPACK_FIXMAP_MIN <= prefix <= MSGPACK_FIXMAP_MAX:
            return prefix & 0x0F
        if prefix == MSGPACK_MAP16:
            return self.decode_u16()
        if prefix == MSGPACK_MAP32:
            return self.decode_u32()
        raise UnexpectedType()


def from_bytes(data: bytes, tp: Any) -> Any:
    """Decode MessagePack ``data`` into a value of type ``tp``.

    Supported shapes are structs (encoded as maps keyed by field name),
    strings and 64-bit unsigned integers.
    """
    return _decode_value(Decoder(data), shape_of(tp))


def _decode_value(decoder: Decoder, shape: Shape) -> Any:
    if shape.kind is DefKind.SCALAR:
        if shape.scalar is ScalarKind.STRING:
            return decoder.decode_string()
        if shape.scalar is ScalarKind.U64:
            return decoder.decode_u64()
        raise TypeError(f"Unsupported scalar type: {shape}")
    if shape.kind is DefKind.STRUCT:
        return _decode_struct(decoder, shape)
    raise TypeError(f"Unsupported shape: {shape}")


def _decode_struct(decoder: Decoder, shape: Shape) -> Any:
    by_name = {field.name: field for field in shape.fields}
    values: dict[str, Any] = {}
    for _ in range(decoder.decode_map_len()):
        key = decoder.decode_string()
        field = by_name.get(key)
        if field is None:
            raise UnknownField(key)
        values[key] = _decode_value(decoder, field.shape)

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
        raise InvalidData(f"Missing field(s) for {shape.name}: {', '.join(missing)}")
    return tp(**values)