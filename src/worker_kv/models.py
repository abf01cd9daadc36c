"""Values and responses returned by KvStore operations."""

from dataclasses import dataclass
from typing import Any, NamedTuple, TypeVar

from pydantic import BaseModel, Field, model_validator

from worker_kv.codec import decode_json

T = TypeVar("T")


@dataclass(frozen=True)
class StoredValue:
    """A value fetched via a get request.

    The store only holds text; the caller picks the interpretation.
    """

    raw: str

    def as_string(self) -> str:
        """Get the value as a string."""
        return self.raw

    def as_bytes(self) -> bytes:
        """Get the value as UTF-8 bytes."""
        return self.raw.encode("utf-8")

    def as_json(self, type_: type[T] | Any = Any) -> T:
        """Parse the value as JSON into ``type_``.

        Raises:
            DeserializationError: If the text is not valid JSON for ``type_``
        """
        return decode_json(self.raw, type_)

    def __str__(self) -> str:
        return self.raw


class ValueWithMetadata(NamedTuple):
    """A value and its decoded metadata, fetched in one round trip."""

    value: StoredValue
    metadata: Any


class Key(BaseModel):
    """A key as observed by a list request.

    Eventual consistency means the snapshot may already be stale.
    """

    name: str
    expiration: int | None = Field(default=None, ge=0)  # unix seconds
    metadata: Any = None


class ListResponse(BaseModel):
    """One page of keys from a list request."""

    keys: list[Key] = Field(default_factory=list)
    list_complete: bool
    cursor: str | None = None

    @model_validator(mode="after")
    def _check_cursor(self) -> "ListResponse":
        if not self.list_complete and not self.cursor:
            raise ValueError("incomplete list response is missing its cursor")
        return self
