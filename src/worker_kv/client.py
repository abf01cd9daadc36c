"""KvStore: the client over a bound key-value store.

Example:
    store = KvStore.create("EXAMPLE")

    # Insert a new entry with some arbitrary serializable metadata.
    await store.put("example_key", "example_value").metadata([1, 2, 3, 4]).execute()

    # NOTE: writes can take a minute to become visible to other readers.
    pair = await store.get_with_metadata("example_key", list[int])
    value, metadata = pair
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from worker_kv.bindings import current_environment, lookup_binding
from worker_kv.builders import ListRequest, PutRequest
from worker_kv.codec import decode_metadata, encode_value
from worker_kv.exceptions import InvalidStoreError, KvError, MissingMetadataError, TransportError
from worker_kv.models import StoredValue, ValueWithMetadata
from worker_kv.observability import (
    OperationContext,
    Timer,
    emit_counter,
    emit_timer,
    get_logger,
)
from worker_kv.protocols import KVBinding

logger = get_logger(__name__)

T = TypeVar("T")


class KvStore:
    """A client bound to one named store.

    Instances hold no mutable state and may be shared across tasks. Every
    operation is exactly one round trip; nothing is cached or retried.
    """

    def __init__(self, binding: KVBinding, name: str = "") -> None:
        """Wrap an already resolved binding.

        Args:
            binding: The transport for the store
            name: Store name, used for logs and metrics
        """
        self._binding = binding
        self._name = name

    @classmethod
    def create(cls, name: str) -> "KvStore":
        """Create a KvStore bound to ``name`` in the current binding environment.

        Raises:
            InvalidStoreError: If no binding with that name exists
        """
        return cls.from_env(current_environment(), name)

    @classmethod
    def from_env(cls, env: Any, name: str) -> "KvStore":
        """Create a KvStore bound to ``name`` in an explicit environment.

        Args:
            env: A BindingEnvironment, a mapping, or an object with binding attributes
            name: The store name

        Raises:
            InvalidStoreError: If no binding with that name exists
        """
        binding = lookup_binding(env, name)
        if binding is None:
            raise InvalidStoreError(name)
        return cls(binding, name)

    @property
    def name(self) -> str:
        """The name this store was bound under."""
        return self._name

    @property
    def binding(self) -> KVBinding:
        """The underlying binding."""
        return self._binding

    async def get(self, key: str) -> StoredValue | None:
        """Fetch a value by key. Returns None if the key is absent.

        Raises:
            TransportError: If the round trip fails
        """
        raw = await self._round_trip("get", lambda binding: binding.get(key), key=key)
        if raw is None:
            return None
        if not isinstance(raw, str):
            raise TransportError(f"get returned {type(raw).__name__}, expected text")
        return StoredValue(raw)

    async def get_with_metadata(
        self,
        key: str,
        metadata_type: type[T] | Any = Any,
        *,
        require_metadata: bool = True,
    ) -> ValueWithMetadata | None:
        """Fetch a value and its metadata in one round trip.

        Args:
            key: The key to fetch
            metadata_type: Type to validate the metadata into
            require_metadata: If True, a key without metadata is an error.
                If False, such a key yields metadata=None.

        Returns:
            The (value, metadata) pair, or None if the key is absent

        Raises:
            TransportError: If the round trip fails
            MissingMetadataError: If the key exists without metadata and
                require_metadata is True
            DeserializationError: If the metadata does not match metadata_type
        """
        reply = await self._round_trip(
            "get_with_metadata", lambda binding: binding.get_with_metadata(key), key=key
        )
        if reply is None:
            return None
        if not isinstance(reply, Mapping):
            raise TransportError(
                f"get_with_metadata returned {type(reply).__name__}, expected a mapping"
            )

        raw = reply.get("value")
        if raw is None:
            return None
        if not isinstance(raw, str):
            raise TransportError(
                f"get_with_metadata returned a {type(raw).__name__} value, expected text"
            )

        raw_metadata = reply.get("metadata")
        if raw_metadata is None:
            if require_metadata:
                raise MissingMetadataError(key)
            return ValueWithMetadata(StoredValue(raw), None)

        return ValueWithMetadata(StoredValue(raw), decode_metadata(raw_metadata, metadata_type))

    def put(self, key: str, value: Any) -> PutRequest:
        """Start a put request. Nothing is sent until ``execute()``.

        Strings are stored untouched; bytes are stored as UTF-8 text; other
        values are stored as JSON.

        Raises:
            SerializationError: If the value cannot be encoded
        """
        return PutRequest(self, key, encode_value(value))

    def list(self) -> ListRequest:
        """Start a list request with no options set."""
        return ListRequest(self)

    async def delete(self, key: str) -> None:
        """Delete a key. Deleting an absent key succeeds.

        Raises:
            TransportError: If the round trip fails
        """
        await self._round_trip("delete", lambda binding: binding.delete(key), key=key)

    async def _round_trip(
        self,
        operation: str,
        call: Callable[[KVBinding], Awaitable[Any]],
        key: str | None = None,
    ) -> Any:
        """Perform one call across the transport boundary.

        Binding failures are raised as TransportError with the original
        exception chained.
        """
        context = {"key": key} if key is not None else None
        labels = {"store": self._name, "operation": operation}
        with OperationContext(self._name, operation):
            timer = Timer()
            try:
                with timer:
                    result = await call(self._binding)
            except KvError as e:
                logger.warning(
                    f"{operation} failed", context=context, error=e, duration_ms=timer.duration_ms
                )
                emit_timer("kv.operation", timer.duration_ms, {**labels, "outcome": "error"})
                emit_counter("kv.error", {**labels, "kind": e.kind})
                raise
            except Exception as e:
                error = TransportError(f"{type(e).__name__}: {e}")
                logger.warning(
                    f"{operation} failed",
                    context=context,
                    error=error,
                    duration_ms=timer.duration_ms,
                )
                emit_timer("kv.operation", timer.duration_ms, {**labels, "outcome": "error"})
                emit_counter("kv.error", {**labels, "kind": error.kind})
                raise error from e

            logger.debug(f"{operation} complete", context=context, duration_ms=timer.duration_ms)
            emit_timer("kv.operation", timer.duration_ms, {**labels, "outcome": "ok"})
        return result

    def __repr__(self) -> str:
        return f"KvStore(name={self._name!r})"
