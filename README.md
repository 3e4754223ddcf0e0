# facetkit

facetkit describes Python types by their *shape*: scalar, struct, list,
map or enum. With a shape it can give a read-only view of a value, read
JSON text into a value, write a value as JSON, and encode or decode
MessagePack.

It has no dependencies outside the standard library and no command-line
interface; it is used as a library.

## Shapes

`facetkit.peek.shape_of(tp)` builds a `Shape` for:

- `bool`, `str`, `None`, `int` (a signed 64-bit integer) and `float`
  (a 64-bit float);
- the fixed-width scalar annotations `U8`, `U16`, `U32`, `U64`, `U128`,
  `I8`, `I16`, `I32`, `I64`, `I128`, `F32` and `F64` from `facetkit.peek`;
- `list[...]` and `dict[..., ...]`;
- dataclasses and annotated named tuples (struct shapes);
- `enum.Enum` subclasses (enum shapes, by member name).

Any other type raises `TypeError`. `Shape.is_type(tp)` tells whether a
shape is the shape of `tp`.

A struct field can be marked sensitive, either with
`dataclasses.field(metadata={"sensitive": True})` or with
`Annotated[..., FieldFlags.SENSITIVE]`; its value is then shown as
`[REDACTED]` by `debug()`.

## Peeking

`peek(value, tp)` returns the view that fits the shape: `PeekStruct`,
`PeekList`, `PeekMap`, or `PeekValue` for scalars and enums.

```python
from dataclasses import dataclass
from facetkit.peek import U64, peek

@dataclass
class Person:
    name: str
    age: U64

view = peek(Person("Alice", 30), Person)
view.field_count()                   # 2
view.get_field("name").display()     # 'Alice'
[name for name, _ in view.fields()]  # ['name', 'age']
```

`PeekList` and `PeekMap` support `len()` and iteration (a map yields
pairs of key and value views); `PeekList.item_at`, `PeekMap.get` and
`PeekMap.contains_key` look up single entries. `PeekValue.cmp` returns
-1, 0 or 1 for integers, booleans, strings and lists of them, and `None`
for floats, structs, maps and values of different shapes; `gt`, `gte`,
`lt` and `lte` are built on it.

## JSON

```python
from facetkit.json_read import from_str
from facetkit.json_write import to_json_string

person = from_str('{"name": "Alice", "age": 30}', Person)
print(to_json_string(person, True, Person))
# {
#   "name": "Alice",
#   "age": 30
# }
```

`from_str(json, tp)` reads structs, lists, maps with string keys,
enums (as the member name in a string) and scalars. Integers are wrapped
into the width of their annotation. Unknown fields, missing fields
without a default and malformed input raise
`facetkit.jsonparser.JsonParseError`, which carries a `kind`
(`JsonParseErrorKind`) and a `position`; `with_context()` returns the
message, the surrounding input and a caret under the position.

`to_json(value, writer, indent, tp)` writes to any text stream and
`to_json_string(value, indent, tp)` returns a string. Either may be given
a `PeekValue` in place of the value and type.

## MessagePack

```python
from facetkit.msgpack_encode import to_bytes
from facetkit.msgpack_decode import from_bytes

data = to_bytes(Person("Alice", 30), Person)
from_bytes(data, Person)  # Person(name='Alice', age=30)
```

Structs are encoded as maps keyed by field name. The helpers
`encode_str`, `encode_uint`, `encode_int` and `encode_map_len` write the
most compact form the format allows, and `Decoder` reads raw integers,
strings and map headers. Decoding failures raise a subclass of
`facetkit.msgpack_format.DecodeError`: `UnexpectedType`,
`InsufficientData`, `InvalidData` or `UnknownField`.

## Limits

- The JSON writer writes only `None` as `null`, booleans, `U64`
  integers and strings as scalars; every other scalar is written as
  `"<unsupported type>"`, and enum values raise `TypeError`.
- The MessagePack encoder handles strings, integers from 8 to 64 bits
  and structs of them; values out of range raise `ValueError`.
- The MessagePack decoder handles only structs, strings and `U64`
  integers.
- There are no tuples, optional values or floats in MessagePack, and no
  floats or lists in the JSON writer beyond the scalars listed above.

## Running the tests

```
pip install -e .[test]
pytest
```