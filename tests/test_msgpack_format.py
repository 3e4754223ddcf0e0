import pytest

from facetkit.msgpack_format import (
    DecodeError,
    InsufficientData,
    InvalidData,
    UnexpectedType,
    UnknownField,
)


@pytest.mark.parametrize(
    "error_type, message",
    [
        (UnexpectedType, "Unexpected MessagePack type"),
        (InsufficientData, "Insufficient data to decode"),
        (InvalidData, "Invalid MessagePack data"),
    ],
)
def test_error_messages(error_type, message):
    assert str(error_type()) == message


@pytest.mark.parametrize(
    "error_type, message",
    [
        (UnexpectedType, "Unexpected MessagePack type"),
        (InsufficientData, "Insufficient data to decode"),
        (InvalidData, "Invalid MessagePack data"),
    ],
)
def test_errors_are_decode_errors(error_type, message):
    error = error_type()
    assert isinstance(error, DecodeError)
    assert str(error) == message


def test_unknown_field_carries_name():
    error = UnknownField("age")
    assert error.field == "age"
    assert str(error) == "Unknown field: age"


def test_unknown_field_is_decode_error_and_value_error():
    error = UnknownField("name")
    assert isinstance(error, ValueError)
    assert isinstance(error, DecodeError)
    assert str(error) == "Unknown field: name"
    assert error.field == "name"


def test_custom_message_overrides_default():
    assert str(InvalidData("bad utf-8")) == "bad utf-8"