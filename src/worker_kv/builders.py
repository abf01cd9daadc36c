"""Fluent builders for put and list requests.

A builder accumulates optional parameters and sends them in a single round
trip when ``execute()`` is awaited. Each builder executes at most once.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from worker_kv.codec import encode_metadata
from worker_kv.exceptions import (
    DeserializationError,
    SerializationError,
    TransportError,
)
from worker_kv.models import ListResponse

if TYPE_CHECKING:
    from worker_kv.client import KvStore

# The store caps list pages at 1000 keys, which is also its default
MAX_LIST_LIMIT = 1000


def _check_unsigned(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer")
    if value < 0:
        raise ValueError(f"{name} must not be negative")
    return value


class _Request:
    """Shared single-use bookkeeping."""

    def __init__(self, store: "KvStore") -> None:
        self._store = store
        self._consumed = False

    def _ensure_usable(self) -> None:
        if self._consumed:
            raise RuntimeError(f"{type(self).__name__} has already been consumed")


class PutRequest(_Request):
    """A builder to configure put requests.

    Example:
        await store.put("key", "value").expiration_ttl(600).execute()
    """

    def __init__(self, store: "KvStore", key: str, value: str) -> None:
        super().__init__(store)
        self.key = key
        self.value = value
        self._expiration: int | None = None
        self._expiration_ttl: int | None = None
        self._metadata: Any = None
        self._has_metadata = False

    def expiration(self, expiration: int) -> "PutRequest":
        """Set when (as a unix timestamp) the key value pair expires.

        Setting both this and ``expiration_ttl`` is a caller error; both are
        forwarded and the store decides which applies.
        """
        self._ensure_usable()
        self._expiration = _check_unsigned("expiration", expiration)
        return self

    def expiration_ttl(self, expiration_ttl: int) -> "PutRequest":
        """Set how many seconds until the key value pair expires."""
        self._ensure_usable()
        self._expiration_ttl = _check_unsigned("expiration_ttl", expiration_ttl)
        return self

    def metadata(self, metadata: Any) -> "PutRequest":
        """Attach metadata to the key value pair.

        The metadata is serialized right away.

        Raises:
            SerializationError: If the metadata cannot be represented as JSON.
                The builder is consumed and cannot be used further.
        """
        self._ensure_usable()
        try:
            self._metadata = encode_metadata(metadata)
        except SerializationError:
            self._consumed = True
            raise
        self._has_metadata = True
        return self

    def options(self) -> dict[str, Any]:
        """Build the wire-level options object, omitting unset fields."""
        options: dict[str, Any] = {}
        if self._expiration is not None:
            options["expiration"] = self._expiration
        if self._expiration_ttl is not None:
            options["expirationTtl"] = self._expiration_ttl
        if self._has_metadata:
            options["metadata"] = self._metadata
        return options

    async def execute(self) -> None:
        """Put the value in the store.

        Raises:
            TransportError: If the round trip fails
        """
        self._ensure_usable()
        self._consumed = True
        options = self.options()
        await self._store._round_trip(
            "put",
            lambda binding: binding.put(self.key, self.value, options),
            key=self.key,
        )

    def __repr__(self) -> str:
        return f"PutRequest(key={self.key!r}, options={self.options()!r})"


class ListRequest(_Request):
    """A builder to configure list requests.

    The client never follows cursors on its own. To enumerate a store, loop
    until ``list_complete``:

        cursor = None
        while True:
            request = store.list().prefix("user:")
            if cursor:
                request = request.cursor(cursor)
            page = await request.execute()
            ...
            if page.list_complete:
                break
            cursor = page.cursor
    """

    def __init__(self, store: "KvStore") -> None:
        super().__init__(store)
        self._limit: int | None = None
        self._cursor: str | None = None
        self._prefix: str | None = None

    def limit(self, limit: int) -> "ListRequest":
        """Set the maximum number of keys returned (1 to 1000, default 1000)."""
        self._ensure_usable()
        _check_unsigned("limit", limit)
        if not 1 <= limit <= MAX_LIST_LIMIT:
            raise ValueError(f"limit must be between 1 and {MAX_LIST_LIMIT}")
        self._limit = limit
        return self

    def cursor(self, cursor: str) -> "ListRequest":
        """Resume from a cursor returned by a previous response.

        The cursor must be passed back verbatim.
        """
        self._ensure_usable()
        self._cursor = cursor
        return self

    def prefix(self, prefix: str) -> "ListRequest":
        """Only include keys that start with ``prefix``."""
        self._ensure_usable()
        self._prefix = prefix
        return self

    def options(self) -> dict[str, Any]:
        """Build the wire-level options object, omitting unset fields."""
        options: dict[str, Any] = {}
        if self._limit is not None:
            options["limit"] = self._limit
        if self._cursor is not None:
            options["cursor"] = self._cursor
        if self._prefix is not None:
            options["prefix"] = self._prefix
        return options

    async def execute(self) -> ListResponse:
        """List the keys in the store.

        Raises:
            TransportError: If the round trip fails or the reply is not a mapping
            DeserializationError: If the reply does not decode into a ListResponse
        """
        self._ensure_usable()
        self._consumed = True
        options = self.options()
        reply = await self._store._round_trip(
            "list", lambda binding: binding.list(options)
        )
        if not isinstance(reply, Mapping):
            raise TransportError(
                f"list returned {type(reply).__name__}, expected a mapping"
            )
        try:
            return ListResponse.model_validate(dict(reply))
        except ValidationError as e:
            raise DeserializationError(str(e)) from e

    def __repr__(self) -> str:
        return f"ListRequest(options={self.options()!r})"
