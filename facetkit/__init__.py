"""Shapes for Python types, read-only views of values, and JSON and MessagePack reading and writing."""

__version__ = "0.1.0"

__all__ = [
    "peek",
    "jsonparser",
    "json_read",
    "json_write",
    "msgpack_format",
    "msgpack_decode",
    "msgpack_encode",
]