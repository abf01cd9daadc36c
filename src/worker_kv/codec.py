"""Conversion between application data and the store's text values and JSON metadata.

The store treats every value as opaque text. Strings are therefore sent
as-is; only non-string data is rendered as JSON, so a string never comes
back wrapped in quotes.
"""

from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json, to_jsonable_python

from worker_kv.exceptions import DeserializationError, SerializationError

T = TypeVar("T")


def encode_value(value: Any) -> str:
    """Convert a put value to the text stored under the key.

    Args:
        value: A string, UTF-8 bytes, or any JSON-serializable object
            (pydantic models and dataclasses included)

    Returns:
        The raw text to transmit

    Raises:
        SerializationError: If the value cannot be converted
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as e:
            raise SerializationError(f"value is not valid UTF-8: {e}") from e
    try:
        return to_json(value).decode("utf-8")
    except (PydanticSerializationError, ValueError) as e:
        raise SerializationError(str(e)) from e


def encode_metadata(metadata: Any) -> Any:
    """Convert metadata to a JSON-compatible value.

    Raises:
        SerializationError: If the metadata cannot be represented as JSON
    """
    try:
        return to_jsonable_python(metadata)
    except (PydanticSerializationError, ValueError) as e:
        raise SerializationError(str(e)) from e


def decode_json(text: str | bytes, type_: type[T] | Any = Any) -> T:
    """Parse JSON text into ``type_``.

    Raises:
        DeserializationError: If the text is not valid JSON for ``type_``
    """
    try:
        return TypeAdapter(type_).validate_json(text)
    except ValidationError as e:
        raise DeserializationError(str(e)) from e


def decode_metadata(raw: Any, type_: type[T] | Any = Any) -> T:
    """Validate a JSON metadata value into ``type_``.

    Raises:
        DeserializationError: If the metadata does not match ``type_``
    """
    try:
        return TypeAdapter(type_).validate_python(raw)
    except ValidationError as e:
        raise DeserializationError(str(e)) from e
