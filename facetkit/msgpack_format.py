"""MessagePack type tags and decoding errors."""

from __future__ import annotations

MSGPACK_NIL = 0xC0

MSGPACK_FALSE = 0xC2
MSGPACK_TRUE = 0xC3

MSGPACK_BIN8 = 0xC4
MSGPACK_BIN16 = 0xC5
MSGPACK_BIN32 = 0xC6

MSGPACK_EXT8 = 0xC7
MSGPACK_EXT16 = 0xC8
MSGPACK_EXT32 = 0xC9

MSGPACK_FLOAT32 = 0xCA
MSGPACK_FLOAT64 = 0xCB

MSGPACK_UINT8 = 0xCC
MSGPACK_UINT16 = 0xCD
MSGPACK_UINT32 = 0xCE
MSGPACK_UINT64 = 0xCF

MSGPACK_INT8 = 0xD0
MSGPACK_INT16 = 0xD1
MSGPACK_INT32 = 0xD2
MSGPACK_INT64 = 0xD3

MSGPACK_FIXEXT1 = 0xD4
MSGPACK_FIXEXT2 = 0xD5
MSGPACK_FIXEXT4 = 0xD6
MSGPACK_FIXEXT8 = 0xD7
MSGPACK_FIXEXT16 = 0xD8

MSGPACK_STR8 = 0xD9
MSGPACK_STR16 = 0xDA
MSGPACK_STR32 = 0xDB

MSGPACK_ARRAY16 = 0xDC
MSGPACK_ARRAY32 = 0xDD

MSGPACK_MAP16 = 0xDE
MSGPACK_MAP32 = 0xDF

MSGPACK_POSFIXINT_MIN = 0x00
MSGPACK_POSFIXINT_MAX = 0x7F

MSGPACK_NEGFIXINT_MIN = -0x20
MSGPACK_NEGFIXINT_MAX = -0x01

MSGPACK_FIXSTR_MIN = 0xA0
MSGPACK_FIXSTR_MAX = 0xBF

MSGPACK_FIXARRAY_MIN = 0x90
MSGPACK_FIXARRAY_MAX = 0x9F

MSGPACK_FIXMAP_MIN = 0x80
MSGPACK_FIXMAP_MAX = 0x8F


class DecodeError(ValueError):
    """Base class for MessagePack decoding failures."""

    default_message = "MessagePack decoding failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class UnexpectedType(DecodeError):
    """A MessagePack type did not match the expected type."""

    default_message = "Unexpected MessagePack type"


class InsufficientData(DecodeError):
    """The input ended before a complete value was decoded."""

    default_message = "Insufficient data to decode"


class InvalidData(DecodeError):
    """The MessagePack data is malformed or corrupted."""

    default_message = "Invalid MessagePack data"


class UnknownField(DecodeError):
    """A field name was not recognised."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Unknown field: {field}")