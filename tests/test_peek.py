import dataclasses
import enum
from typing import Annotated, NamedTuple

import pytest

from facetkit.peek import (
    DefKind,
    FieldFlags,
    PeekList,
    PeekMap,
    PeekStruct,
    PeekValue,
    ScalarKind,
    Shape,
    U8,
    U64,
    peek,
    shape_of,
)


@dataclasses.dataclass
class Person:
    name: str
    age: U64


@dataclasses.dataclass
class Login:
    user: str
    hidden: str = dataclasses.field(metadata={"sensitive": True})
    note: Annotated[str, FieldFlags.SENSITIVE] = "x"


@dataclasses.dataclass
class Outer:
    name: str
    inner: Person


class Point(NamedTuple):
    x: int
    y: int


class Color(enum.Enum):
    RED = 1
    GREEN = 2


def test_scalar_shapes():
    assert shape_of(str).scalar is ScalarKind.STRING
    assert shape_of(bool).scalar is ScalarKind.BOOL
    assert shape_of(U8).scalar is ScalarKind.U8
    assert shape_of(None).scalar is ScalarKind.UNIT
    assert shape_of(str).kind is DefKind.SCALAR


def test_shape_of_shape_is_identity():
    shape = shape_of(list[U8])
    assert shape_of(shape) is shape


def test_is_type():
    shape = shape_of(U64)
    assert shape.is_type(ScalarKind.U64)
    assert not shape.is_type(U8)
    assert not shape.is_type(object)


def test_container_shapes():
    lst = shape_of(list[U8])
    assert lst.kind is DefKind.LIST
    assert lst.item == shape_of(U8)
    mp = shape_of(dict[str, U64])
    assert mp.kind is DefKind.MAP
    assert mp.key == shape_of(str)
    assert mp.value == shape_of(U64)


def test_type_name_mentions_components():
    name = shape_of(dict[str, list[U8]]).type_name()
    assert ScalarKind.STRING.value in name
    assert ScalarKind.U8.value in name
    assert shape_of(Person).type_name() == "Person"


def test_struct_shape_fields_in_order():
    shape = shape_of(Person)
    assert shape.kind is DefKind.STRUCT
    assert [f.name for f in shape.fields] == ["name", "age"]
    assert shape.fields[1].shape.scalar is ScalarKind.U64


def test_sensitive_flags():
    flags = {f.name: f.flags for f in shape_of(Login).fields}
    assert flags["user"] is FieldFlags.EMPTY
    assert flags["hidden"] & FieldFlags.SENSITIVE
    assert flags["note"] & FieldFlags.SENSITIVE


def test_namedtuple_and_enum_shapes():
    assert [f.name for f in shape_of(Point).fields] == ["x", "y"]
    shape = shape_of(Color)
    assert shape.kind is DefKind.ENUM
    assert shape.variants == ("RED", "GREEN")


@pytest.mark.parametrize("tp", [object, list, dict, set[int]])
def test_unsupported_type_raises(tp):
    with pytest.raises(TypeError):
        shape_of(tp)


def test_scalar_kind_truncate_and_bounds():
    for kind in (ScalarKind.U8, ScalarKind.I8, ScalarKind.U16, ScalarKind.I64):
        assert kind.truncate(kind.max_value + 1) == kind.min_value
        assert kind.truncate(kind.max_value) == kind.max_value
        assert kind.truncate(kind.min_value) == kind.min_value
    with pytest.raises(TypeError):
        ScalarKind.STRING.truncate(1)


def test_peek_struct_fields():
    person = Person(name="Alice", age=30)
    view = peek(person, Person)
    assert isinstance(view, PeekStruct)
    assert view.field_count() == 2
    assert view.field_name(0) == "name"
    assert view.field_name(5) is None
    assert view.field_value(5) is None
    assert view.get_field("age").data == 30
    assert view.get_field("missing") is None
    assert [(n, v.data) for n, v in view.fields()] == [("name", "Alice"), ("age", 30)]


def test_fields_with_metadata():
    view = peek(Login(user="u", hidden="token"), Login)
    rows = list(view.fields_with_metadata())
    assert [r[0] for r in rows] == [0, 1, 2]
    assert [r[1] for r in rows] == ["user", "hidden", "note"]
    assert rows[1][3] & FieldFlags.SENSITIVE
    assert rows[1][2].data == "token"


def test_nested_struct_peek():
    view = peek(Outer(name="Outer", inner=Person("Bob", 42)), Outer)
    inner = view.get_field("inner")
    assert isinstance(inner, PeekStruct)
    assert inner.get_field("age").data == 42


def test_peek_list():
    view = peek([1, 2, 3], list[U8])
    assert isinstance(view, PeekList)
    assert len(view) == 3
    assert view.item_at(1).data == 2
    assert view.item_at(3) is None
    assert view.item_at(-1) is None
    assert [item.data for item in view] == [1, 2, 3]


def test_peek_map():
    data = {"a": 1, "b": 2}
    view = peek(data, dict[str, U64])
    assert isinstance(view, PeekMap)
    assert len(view) == 2
    assert view.contains_key("a")
    assert not view.contains_key("z")
    assert view.get("b").data == 2
    assert view.get("z") is None
    assert [(k.data, v.data) for k, v in view] == [("a", 1), ("b", 2)]


def test_eq_and_cmp():
    a = peek(5, U8)
    b = peek(7, U8)
    assert a.eq(peek(5, U8))
    assert a == peek(5, U8)
    assert not a.eq(peek(5, U64))
    assert a.cmp(b) == -1
    assert b.cmp(a) == 1
    assert a.cmp(a) == 0
    assert a.lt(b) and a.lte(b) and b.gt(a) and b.gte(a)
    assert not a.gt(b)


def test_cmp_unsupported_for_floats_and_mismatched_shapes():
    x = peek(1.0, float)
    y = peek(2.0, float)
    assert x.cmp(y) is None
    assert not x.lt(y)
    assert peek(1, U8).cmp(peek(1, U64)) is None


def test_list_ordering_is_lexicographic():
    short = peek([1, 2], list[U8])
    longer = peek([1, 2, 0], list[U8])
    assert short.lt(longer)
    assert peek([2], list[U8]).gt(longer)


def test_display_and_debug():
    assert peek("hi", str).display() == "hi"
    assert peek(True, bool).display() == "true"
    view = peek(Person("Alice", 30), Person)
    assert view.display() is None
    assert str(view).startswith("Person")
    assert "Alice" in view.debug()


def test_debug_redacts_sensitive():
    text = peek(Login(user="u", hidden="password"), Login).debug()
    assert "password" not in text
    assert "user" in text


def test_wrap_round_trip():
    base = PeekValue([1, 2], shape_of(list[U8]))
    wrapped = base.wrap()
    assert isinstance(wrapped, PeekList)
    assert wrapped.eq(base)
    assert isinstance(Shape, type) and wrapped.shape == base.shape