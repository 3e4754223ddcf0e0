"""Shapes describing Python types, and read-only views over values of those types."""

from __future__ import annotations

import dataclasses
import enum
import functools
import json
import typing
from typing import Annotated, Any, Iterator, Optional


class ScalarKind(enum.Enum):
    """The primitive value kinds a shape can describe."""

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"
    F32 = "f32"
    F64 = "f64"
    BOOL = "bool"
    STRING = "String"
    UNIT = "()"

    @property
    def is_integer(self) -> bool:
        return self.value[0] in "ui" and self.value[1:].isdigit()

    @property
    def is_float(self) -> bool:
        return self in (ScalarKind.F32, ScalarKind.F64)

    @property
    def bits(self) -> int:
        if not (self.is_integer or self.is_float):
            raise TypeError(f"{self.value} has no bit width")
        return int(self.value[1:])

    @property
    def signed(self) -> bool:
        return self.value.startswith("i") or self.is_float

    @property
    def min_value(self) -> int:
        self._require_integer()
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        self._require_integer()
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def truncate(self, n: int) -> int:
        """Wrap an integer into this kind's range, as a two's-complement cast does."""
        self._require_integer()
        n &= (1 << self.bits) - 1
        if self.signed and n >= 1 << (self.bits - 1):
            n -= 1 << self.bits
        return n

    def _require_integer(self) -> None:
        if not self.is_integer:
            raise TypeError(f"{self.value} is not an integer kind")


U8 = Annotated[int, ScalarKind.U8]
U16 = Annotated[int, ScalarKind.U16]
U32 = Annotated[int, ScalarKind.U32]
U64 = Annotated[int, ScalarKind.U64]
U128 = Annotated[int, ScalarKind.U128]
I8 = Annotated[int, ScalarKind.I8]
I16 = Annotated[int, ScalarKind.I16]
I32 = Annotated[int, ScalarKind.I32]
I64 = Annotated[int, ScalarKind.I64]
I128 = Annotated[int, ScalarKind.I128]
F32 = Annotated[float, ScalarKind.F32]
F64 = Annotated[float, ScalarKind.F64]


class DefKind(enum.Enum):
    """What sort of definition a shape has."""

    SCALAR = "scalar"
    STRUCT = "struct"
    LIST = "list"
    MAP = "map"
    ENUM = "enum"


class FieldFlags(enum.Flag):
    """Per-field flags."""

    EMPTY = 0
    SENSITIVE = enum.auto()


@dataclasses.dataclass(frozen=True)
class Field:
    """A named field of a struct shape."""

    name: str
    shape: Shape
    flags: FieldFlags = FieldFlags.EMPTY


@dataclasses.dataclass(frozen=True)
class Shape:
    """A description of a type: its name, definition kind and components."""

    name: str
    kind: DefKind
    scalar: Optional[ScalarKind] = None
    fields: tuple[Field, ...] = ()
    item: Optional[Shape] = None
    key: Optional[Shape] = None
    value: Optional[Shape] = None
    variants: tuple[str, ...] = ()
    py_type: Any = None

    def is_type(self, tp: Any) -> bool:
        """Whether this shape is the shape of ``tp``."""
        try:
            return self == shape_of(tp)
        except TypeError:
            return False

    def type_name(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name


def shape_of(tp: Any) -> Shape:
    """Return the shape for a type, a scalar kind, or a shape (returned unchanged)."""
    if isinstance(tp, Shape):
        return tp
    return _build_shape(tp)


def _scalar(kind: ScalarKind) -> Shape:
    return Shape(name=kind.value, kind=DefKind.SCALAR, scalar=kind)


def _field_flags(annotation: Any, metadata: Any) -> FieldFlags:
    flags = FieldFlags.EMPTY
    if metadata.get("sensitive"):
        flags |= FieldFlags.SENSITIVE
    if typing.get_origin(annotation) is Annotated:
        if any(m is FieldFlags.SENSITIVE for m in typing.get_args(annotation)[1:]):
            flags |= FieldFlags.SENSITIVE
    return flags


def _annotation(owner: type, name: str, annotation: Any) -> Any:
    if isinstance(annotation, str):
        raise TypeError(
            f"field {owner.__name__}.{name} has a string annotation {annotation!r}; "
            "declare it with a real type"
        )
    return annotation


@functools.lru_cache(maxsize=None)
def _build_shape(tp: Any) -> Shape:
    if isinstance(tp, ScalarKind):
        return _scalar(tp)

    origin = typing.get_origin(tp)
    if origin is Annotated:
        base, *meta = typing.get_args(tp)
        kind = next((m for m in meta if isinstance(m, ScalarKind)), None)
        return _scalar(kind) if kind is not None else shape_of(base)

    if tp is None or tp is type(None):
        return _scalar(ScalarKind.UNIT)
    if tp is bool:
        return _scalar(ScalarKind.BOOL)
    if tp is int:
        return _scalar(ScalarKind.I64)
    if tp is float:
        return _scalar(ScalarKind.F64)
    if tp is str:
        return _scalar(ScalarKind.STRING)

    if origin is list:
        args = typing.get_args(tp)
        if len(args) != 1:
            raise TypeError(f"list type needs one item type: {tp!r}")
        item = shape_of(args[0])
        return Shape(name=f"list[{item.name}]", kind=DefKind.LIST, item=item, py_type=list)

    if origin is dict:
        args = typing.get_args(tp)
        if len(args) != 2:
            raise TypeError(f"dict type needs key and value types: {tp!r}")
        key, value = (shape_of(a) for a in args)
        return Shape(
            name=f"dict[{key.name}, {value.name}]",
            kind=DefKind.MAP,
            key=key,
            value=value,
            py_type=dict,
        )

    if isinstance(tp, type):
        if issubclass(tp, enum.Enum):
            return Shape(
                name=tp.__name__,
                kind=DefKind.ENUM,
                variants=tuple(tp.__members__),
                py_type=tp,
            )
        if dataclasses.is_dataclass(tp):
            fields = []
            for f in dataclasses.fields(tp):
                annotation = _annotation(tp, f.name, f.type)
                fields.append(
                    Field(
                        name=f.name,
                        shape=shape_of(annotation),
                        flags=_field_flags(annotation, f.metadata),
                    )
                )
            return Shape(
                name=tp.__name__, kind=DefKind.STRUCT, fields=tuple(fields), py_type=tp
            )
        if issubclass(tp, tuple) and hasattr(tp, "_fields"):
            annotations = getattr(tp, "__annotations__", {})
            fields = []
            for name in tp._fields:
                if name not in annotations:
                    raise TypeError(f"field {tp.__name__}.{name} has no annotation")
                annotation = _annotation(tp, name, annotations[name])
                fields.append(
                    Field(
                        name=name,
                        shape=shape_of(annotation),
                        flags=_field_flags(annotation, {}),
                    )
                )
            return Shape(
                name=tp.__name__, kind=DefKind.STRUCT, fields=tuple(fields), py_type=tp
            )

    raise TypeError(f"unsupported type: {tp!r}")


def peek(value: Any, tp: Any) -> PeekValue:
    """Return a read-only view of ``value``, described by the shape of ``tp``."""
    return _make_peek(value, shape_of(tp))


def _make_peek(data: Any, shape: Shape) -> PeekValue:
    if shape.kind is DefKind.STRUCT:
        return PeekStruct(data, shape)
    if shape.kind is DefKind.LIST:
        return PeekList(data, shape)
    if shape.kind is DefKind.MAP:
        return PeekMap(data, shape)
    return PeekValue(data, shape)


_ORDERED_SCALARS = {ScalarKind.BOOL, ScalarKind.STRING, ScalarKind.UNIT}


def _order(shape: Shape, a: Any, b: Any) -> Optional[int]:
    if shape.kind is DefKind.SCALAR:
        assert shape.scalar is not None
        if shape.scalar.is_float:
            return None
        if shape.scalar.is_integer or shape.scalar in _ORDERED_SCALARS:
            if shape.scalar is ScalarKind.UNIT:
                return 0
            return (a > b) - (a < b)
        return None
    if shape.kind is DefKind.LIST:
        assert shape.item is not None
        for x, y in zip(a, b):
            result = _order(shape.item, x, y)
            if result is None:
                return None
            if result:
                return result
        return (len(a) > len(b)) - (len(a) < len(b))
    return None


def _debug(shape: Shape, data: Any) -> str:
    if shape.kind is DefKind.SCALAR:
        kind = shape.scalar
        if kind is ScalarKind.STRING:
            return json.dumps(data, ensure_ascii=False)
        if kind is ScalarKind.BOOL:
            return "true" if data else "false"
        if kind is ScalarKind.UNIT:
            return "()"
        if kind is not None and kind.is_float:
            return repr(float(data))
        return str(data)
    if shape.kind is DefKind.LIST:
        assert shape.item is not None
        return "[" + ", ".join(_debug(shape.item, x) for x in data) + "]"
    if shape.kind is DefKind.MAP:
        assert shape.key is not None and shape.value is not None
        entries = ", ".join(
            f"{_debug(shape.key, k)}: {_debug(shape.value, v)}" for k, v in data.items()
        )
        return "{" + entries + "}"
    if shape.kind is DefKind.STRUCT:
        parts = []
        for field in shape.fields:
            if field.flags & FieldFlags.SENSITIVE:
                rendered = "[REDACTED]"
            else:
                rendered = _debug(field.shape, getattr(data, field.name))
            parts.append(f"{field.name}: {rendered}")
        if not parts:
            return shape.name
        return f"{shape.name} {{ {', '.join(parts)} }}"
    return data.name if isinstance(data, enum.Enum) else str(data)


class PeekValue:
    """A read-only view of a value together with its shape."""

    __slots__ = ("_data", "_shape")

    def __init__(self, data: Any, shape: Shape) -> None:
        self._data = data
        self._shape = shape

    @property
    def data(self) -> Any:
        return self._data

    @property
    def shape(self) -> Shape:
        return self._shape

    def eq(self, other: PeekValue) -> bool:
        """Whether both views have the same shape and equal values."""
        return self._shape == other._shape and self._data == other._data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PeekValue):
            return NotImplemented
        return self.eq(other)

    def __hash__(self) -> int:
        return hash(self._shape)

    def cmp(self, other: PeekValue) -> Optional[int]:
        """Total ordering as -1, 0 or 1; None where the shape has no total order."""
        if self._shape != other._shape:
            return None
        return _order(self._shape, self._data, other._data)

    def gt(self, other: PeekValue) -> bool:
        return self.cmp(other) == 1

    def gte(self, other: PeekValue) -> bool:
        return self.cmp(other) in (0, 1)

    def lt(self, other: PeekValue) -> bool:
        return self.cmp(other) == -1

    def lte(self, other: PeekValue) -> bool:
        return self.cmp(other) in (-1, 0)

    def display(self) -> Optional[str]:
        """User-facing text for scalars and enums; None for other shapes."""
        shape = self._shape
        if shape.kind is DefKind.ENUM:
            return _debug(shape, self._data)
        if shape.kind is not DefKind.SCALAR:
            return None
        if shape.scalar is ScalarKind.STRING:
            return str(self._data)
        return _debug(shape, self._data)

    def debug(self) -> str:
        """Developer-facing text for the value."""
        return _debug(self._shape, self._data)

    def wrap(self) -> PeekValue:
        """Return the most specific view for this value's shape."""
        return _make_peek(self._data, self._shape)

    def __str__(self) -> str:
        text = self.display()
        return text if text is not None else f"{self._shape.type_name()}(⋯)"

    def __repr__(self) -> str:
        return self.debug()


class PeekStruct(PeekValue):
    """A read-only view of a struct value."""

    __slots__ = ()

    def field_count(self) -> int:
        return len(self._shape.fields)

    def field_name(self, index: int) -> Optional[str]:
        field = self._field(index)
        return field.name if field is not None else None

    def field_value(self, index: int) -> Optional[PeekValue]:
        field = self._field(index)
        if field is None:
            return None
        return _make_peek(getattr(self._data, field.name), field.shape)

    def get_field(self, name: str) -> Optional[PeekValue]:
        for field in self._shape.fields:
            if field.name == name:
                return _make_peek(getattr(self._data, field.name), field.shape)
        return None

    def fields(self) -> Iterator[tuple[str, PeekValue]]:
        for field in self._shape.fields:
            yield field.name, _make_peek(getattr(self._data, field.name), field.shape)

    def fields_with_metadata(self) -> Iterator[tuple[int, str, PeekValue, FieldFlags]]:
        for index, field in enumerate(self._shape.fields):
            value = _make_peek(getattr(self._data, field.name), field.shape)
            yield index, field.name, value, field.flags

    def _field(self, index: int) -> Optional[Field]:
        if 0 <= index < len(self._shape.fields):
            return self._shape.fields[index]
        return None


class PeekList(PeekValue):
    """A read-only view of a list value."""

    __slots__ = ()

    def __len__(self) -> int:
        return len(self._data)

    def item_at(self, index: int) -> Optional[PeekValue]:
        if not 0 <= index < len(self._data):
            return None
        assert self._shape.item is not None
        return _make_peek(self._data[index], self._shape.item)

    def __iter__(self) -> Iterator[PeekValue]:
        assert self._shape.item is not None
        item_shape = self._shape.item
        return (_make_peek(item, item_shape) for item in self._data)


class PeekMap(PeekValue):
    """A read-only view of a map value."""

    __slots__ = ()

    def __len__(self) -> int:
        return len(self._data)

    def contains_key(self, key: Any) -> bool:
        return key in self._data

    def get(self, key: Any) -> Optional[PeekValue]:
        if key not in self._data:
            return None
        assert self._shape.value is not None
        return _make_peek(self._data[key], self._shape.value)

    def __iter__(self) -> Iterator[tuple[PeekValue, PeekValue]]:
        assert self._shape.key is not None and self._shape.value is not None
        key_shape, value_shape = self._shape.key, self._shape.value
        return (
            (_make_peek(k, key_shape), _make_peek(v, value_shape))
            for k, v in self._data.items()
        )