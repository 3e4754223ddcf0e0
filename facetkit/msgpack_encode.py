"""Encode Python values described by shapes as MessagePack bytes."""

from __future__ import annotations

from typing import Any

from facetkit.peek import DefKind, PeekValue, ScalarKind, Shape, shape_of

__all__ = ["to_bytes", "encode_str", "encode_uint", "encode_int", "encode_map_len"]

_U64_MAX = (1 << 64) - 1
_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1

_UNSIGNED = {ScalarKind.U8, ScalarKind.U16, ScalarKind.U32, ScalarKind.U64}
_SIGNED = {ScalarKind.I8, ScalarKind.I16, ScalarKind.I32, ScalarKind.I64}


def encode_str(s: str) -> bytes:
    """Encode a string in the smallest MessagePack string format."""
    raw = s.encode("utf-8")
    length = len(raw)
    if length <= 31:
        header = bytes([0xA0 | length])
    elif length <= 0xFF:
        header = bytes([0xD9, length])
    elif length <= 0xFFFF:
        header = b"\xda" + length.to_bytes(2, "big")
    elif length <= 0xFFFFFFFF:
        header = b"\xdb" + length.to_bytes(4, "big")
    else:
        raise ValueError("string too long for MessagePack")
    return header + raw


def encode_uint(n: int) -> bytes:
    """Encode a non-negative integer in the smallest unsigned format."""
    if n < 0 or n > _U64_MAX:
        raise ValueError(f"{n} is outside the unsigned 64-bit range")
    if n <= 0x7F:
        return bytes([n])
    if n <= 0xFF:
        return bytes([0xCC, n])
    if n <= 0xFFFF:
        return b"\xcd" + n.to_bytes(2, "big")
    if n <= 0xFFFFFFFF:
        return b"\xce" + n.to_bytes(4, "big")
    return b"\xcf" + n.to_bytes(8, "big")


def encode_int(n: int) -> bytes:
    """Encode a signed 64-bit integer; non-negative values use unsigned formats."""
    if n < _I64_MIN or n > _I64_MAX:
        raise ValueError(f"{n} is outside the signed 64-bit range")
    if n >= 0:
        return encode_uint(n)
    if n >= -32:
        return (n & 0xFF).to_bytes(1, "big")
    if n >= -128:
        return b"\xd0" + n.to_bytes(1, "big", signed=True)
    if n >= -32768:
        return b"\xd1" + n.to_bytes(2, "big", signed=True)
    if n >= -(1 << 31):
        return b"\xd2" + n.to_bytes(4, "big", signed=True)
    return b"\xd3" + n.to_bytes(8, "big", signed=True)


def encode_map_len(length: int) -> bytes:
    """Encode a map header for ``length`` entries."""
    if length < 0 or length > 0xFFFFFFFF:
        raise ValueError(f"invalid map length: {length}")
    if length <= 15:
        return bytes([0x80 | length])
    if length <= 0xFFFF:
        return b"\xde" + length.to_bytes(2, "big")
    return b"\xdf" + length.to_bytes(4, "big")


def to_bytes(value: Any, tp: Any) -> bytes:
    """Serialize ``value`` of type ``tp`` to MessagePack bytes."""
    if isinstance(value, PeekValue):
        value = value.data
    return b"".join(_encode(shape_of(tp), value))


def _check_range(kind: ScalarKind, n: int) -> int:
    if not kind.min_value <= n <= kind.max_value:
        raise ValueError(f"{n} does not fit in {kind.value}")
    return n


def _encode(shape: Shape, data: Any):
    if shape.kind is DefKind.SCALAR:
        kind = shape.scalar
        if kind is ScalarKind.STRING:
            yield encode_str(data)
        elif kind in _UNSIGNED:
            yield encode_uint(_check_range(kind, data))
        elif kind in _SIGNED:
            yield encode_int(_check_range(kind, data))
        else:
            raise TypeError(f"Unsupported scalar type: {shape}")
        return
    if shape.kind is DefKind.STRUCT:
        yield encode_map_len(len(shape.fields))
        for field in shape.fields:
            yield encode_str(field.name)
            yield from _encode(field.shape, getattr(data, field.name))
        return
    raise TypeError(f"Unsupported type: {shape}")