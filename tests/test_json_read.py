import dataclasses
import enum
import math
from typing import NamedTuple

import pytest

from facetkit.json_read import from_str
from facetkit.jsonparser import JsonParseError, JsonParseErrorKind
from facetkit.peek import F32, F64, I8, I16, I32, I64, U8, U16, U32, U64


@dataclasses.dataclass
class TestStruct:
    name: str
    age: U64


@dataclasses.dataclass
class TestStructWithMoreTypes:
    u8_val: U8
    u16_val: U16
    i8_val: I8
    i16_val: I16
    u32_val: U32
    i32_val: I32
    u64_val: U64
    i64_val: I64
    f32_val: F32
    f64_val: F64


@dataclasses.dataclass
class InnerStruct:
    value: I32


@dataclasses.dataclass
class OuterStruct:
    name: str
    inner: InnerStruct


@dataclasses.dataclass
class VecStruct:
    numbers: list[I32]
    names: list[str]


@dataclasses.dataclass
class OtherStruct:
    value: I32
    name: str


@dataclasses.dataclass
class HashmapStruct:
    data: dict[str, OtherStruct]


@dataclasses.dataclass
class WithDefault:
    name: str
    count: I32 = 7


class Point(NamedTuple):
    x: I32
    y: I32


class Color(enum.Enum):
    Red = 1
    Green = 2


@dataclasses.dataclass
class Paint:
    color: Color
    shiny: bool


def test_json_read_simple_struct():
    s = from_str('{"name": "Alice", "age": 30}', TestStruct)
    assert s.name == "Alice"
    assert s.age == 30


def test_json_read_vec():
    assert from_str("[1, 2, 3, 4, 5]", list[I32]) == [1, 2, 3, 4, 5]


def test_json_read_hashmap():
    m = from_str('{"key1": "value1", "key2": "value2", "key3": "value3"}', dict[str, str])
    assert m["key1"] == "value1"
    assert m["key2"] == "value2"
    assert m["key3"] == "value3"


def test_json_read_more_types():
    json = """{
        "u8_val": 255,
        "u16_val": 65535,
        "i8_val": -128,
        "i16_val": -32768,
        "u32_val": 4294967295,
        "i32_val": -2147483648,
        "u64_val": 18446744073709551615,
        "i64_val": -9223372036854775808,
        "f32_val": 3.141592653589793,
        "f64_val": 3.141592653589793
    }"""
    s = from_str(json, TestStructWithMoreTypes)
    assert s.u8_val == 255
    assert s.u16_val == 65535
    assert s.i8_val == -128
    assert s.i16_val == -32768
    assert s.u32_val == 4294967295
    assert s.i32_val == -2147483648
    assert s.u64_val == 18446744073709551615
    assert s.i64_val == -9223372036854775808
    assert abs(s.f32_val - 3.1415927) < 1.1920929e-07
    assert abs(s.f64_val - math.pi) < 2.220446049250313e-16


def test_from_json_with_nested_structs():
    json = """{
        "name": "Outer",
        "inner": {
            "value": 42
        }
    }"""
    s = from_str(json, OuterStruct)
    assert s.name == "Outer"
    assert s.inner.value == 42


def test_struct_with_vecs():
    json = """{
        "numbers": [1, 2, 3, 4, 5],
        "names": ["Alice", "Bob", "Charlie"]
    }"""
    s = from_str(json, VecStruct)
    assert s == VecStruct([1, 2, 3, 4, 5], ["Alice", "Bob", "Charlie"])


def test_struct_with_hashmap_of_structs():
    json = """{
        "data": {
            "first": {"value": 42, "name": "First Item"},
            "second": {"value": 84, "name": "Second Item"},
            "third": {"value": 126, "name": "Third Item"}
        }
    }"""
    s = from_str(json, HashmapStruct)
    assert len(s.data) == 3
    assert s.data["first"] == OtherStruct(42, "First Item")
    assert s.data["second"] == OtherStruct(84, "Second Item")
    assert s.data["third"] == OtherStruct(126, "Third Item")


def test_empty_collections():
    assert from_str("[]", list[I32]) == []
    assert from_str("{}", dict[str, I32]) == {}
    assert from_str('{"numbers": [], "names": ["a"]}', VecStruct) == VecStruct([], ["a"])


def test_named_tuple():
    assert from_str('{"x": 1, "y": -2}', Point) == Point(1, -2)


def test_enum_and_bool():
    assert from_str('{"color": "Green", "shiny": true}', Paint) == Paint(Color.Green, True)


def test_invalid_enum_variant():
    with pytest.raises(JsonParseError) as info:
        from_str('"Purple"', Color)
    assert info.value.kind is JsonParseErrorKind.CUSTOM
    assert info.value.detail == "Invalid enum variant: Purple"


def test_unknown_field():
    with pytest.raises(JsonParseError) as info:
        from_str('{"name": "Alice", "height": 3}', TestStruct)
    assert info.value.kind is JsonParseErrorKind.UNKNOWN_FIELD
    assert str(info.value) == "Unknown field: height"


def test_missing_field_reports_error():
    with pytest.raises(JsonParseError) as info:
        from_str('{"name": "Alice"}', TestStruct)
    assert info.value.kind is JsonParseErrorKind.CUSTOM
    assert "age" in info.value.detail


def test_default_field_may_be_omitted():
    assert from_str('{"name": "x"}', WithDefault) == WithDefault("x", 7)


def test_integer_narrowing_wraps():
    assert from_str("300", U8) == 44
    assert from_str("-129", I8) == 127


def test_negative_into_unsigned_fails():
    with pytest.raises(JsonParseError) as info:
        from_str("-1", U32)
    assert info.value.kind is JsonParseErrorKind.EXPECTED_NUMBER


def test_string_escapes():
    assert from_str(r'"a\nb\u0041"', str) == "a\nbA"


def test_wrong_token_for_struct():
    with pytest.raises(JsonParseError) as info:
        from_str("[1]", TestStruct)
    assert info.value.kind is JsonParseErrorKind.EXPECTED_OPENING_BRACE
    assert info.value.position == 0


def test_unterminated_object():
    with pytest.raises(JsonParseError) as info:
        from_str('{"name": "Alice"', TestStruct)
    assert info.value.kind is JsonParseErrorKind.UNEXPECTED_END_OF_INPUT


def test_non_string_map_keys_rejected():
    with pytest.raises(TypeError):
        from_str('{"1": 2}', dict[I32, I32])