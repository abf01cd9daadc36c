"""Tests for value and metadata conversion."""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from worker_kv.codec import decode_json, decode_metadata, encode_metadata, encode_value
from worker_kv.exceptions import DeserializationError, SerializationError


@dataclass
class Point:
    x: int
    y: int


class Profile(BaseModel):
    name: str
    age: int


class TestEncodeValue:
    """Tests for encode_value."""

    def test_string_passes_through(self):
        """Strings are not quoted as JSON."""
        assert encode_value("hello") == "hello"
        assert encode_value('"already quoted"') == '"already quoted"'
        assert encode_value("") == ""

    def test_bytes_decoded_as_utf8(self):
        """Bytes are stored as their UTF-8 text."""
        assert encode_value("héllo".encode()) == "héllo"
        assert encode_value(bytearray(b"abc")) == "abc"

    def test_invalid_utf8_raises(self):
        """Bytes that are not UTF-8 cannot be stored as text."""
        with pytest.raises(SerializationError, match="UTF-8"):
            encode_value(b"\xff\xfe")

    def test_structured_values_become_json(self):
        """Non-string values are rendered as compact JSON."""
        assert encode_value({"a": 1}) == '{"a":1}'
        assert encode_value([1, 2, 3]) == "[1,2,3]"
        assert encode_value(10) == "10"
        assert encode_value(None) == "null"

    def test_models_and_dataclasses(self):
        """Pydantic models and dataclasses serialize by field."""
        assert encode_value(Profile(name="ada", age=36)) == '{"name":"ada","age":36}'
        assert encode_value(Point(1, 2)) == '{"x":1,"y":2}'

    def test_circular_value_raises(self):
        """Self-referencing values raise SerializationError."""
        value: list = []
        value.append(value)
        with pytest.raises(SerializationError):
            encode_value(value)

    def test_unserializable_raises(self):
        """Unknown types raise SerializationError."""
        with pytest.raises(SerializationError) as exc_info:
            encode_value(object())
        assert exc_info.value.kind == "Serialization"


class TestMetadata:
    """Tests for metadata encoding and decoding."""

    def test_encode_to_jsonable(self):
        """Metadata becomes plain JSON-compatible data."""
        assert encode_metadata(10) == 10
        assert encode_metadata(Point(1, 2)) == {"x": 1, "y": 2}
        assert encode_metadata({"tags": ("a", "b")}) == {"tags": ["a", "b"]}

    def test_encode_unserializable_raises(self):
        """Unknown metadata types raise SerializationError."""
        with pytest.raises(SerializationError):
            encode_metadata({"handle": object()})

    def test_encode_circular_raises(self):
        """Self-referencing metadata raises SerializationError."""
        metadata: dict = {}
        metadata["self"] = metadata
        with pytest.raises(SerializationError) as exc_info:
            encode_metadata(metadata)
        assert exc_info.value.kind == "Serialization"

    def test_decode_into_type(self):
        """Metadata is validated into the requested type."""
        assert decode_metadata({"name": "ada", "age": 36}, Profile) == Profile(name="ada", age=36)
        assert decode_metadata([1, 2], list[int]) == [1, 2]

    def test_decode_without_type_returns_raw(self):
        """Without a type the raw JSON value is returned."""
        assert decode_metadata({"a": [1]}) == {"a": [1]}

    def test_decode_mismatch_raises(self):
        """Metadata of the wrong shape raises DeserializationError."""
        with pytest.raises(DeserializationError):
            decode_metadata({"name": "ada"}, Profile)


class TestDecodeJson:
    """Tests for decode_json."""

    def test_decode(self):
        """JSON text is parsed into the requested type."""
        assert decode_json('{"x":1,"y":2}', Point) == Point(1, 2)
        assert decode_json("[1,2,3]") == [1, 2, 3]

    def test_invalid_json_raises(self):
        """Malformed JSON raises DeserializationError."""
        with pytest.raises(DeserializationError):
            decode_json("not json")

    def test_deserialization_is_serialization_kind(self):
        """Decoding failures share the Serialization kind."""
        with pytest.raises(SerializationError) as exc_info:
            decode_json("{", dict)
        assert exc_info.value.kind == "Serialization"
