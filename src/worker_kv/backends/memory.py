"""In-memory store binding."""

import asyncio
import base64
import binascii
import copy
import time
from dataclasses import dataclass
from typing import Any

DEFAULT_LIST_LIMIT = 1000


@dataclass
class StoredEntry:
    """A stored value with optional metadata and expiration."""

    value: str
    metadata: Any = None
    expiration: int | None = None  # unix seconds

    def is_expired(self, now: float | None = None) -> bool:
        """Check if this entry has expired."""
        if self.expiration is None:
            return False
        return (now if now is not None else time.time()) >= self.expiration


def encode_cursor(name: str) -> str:
    """Encode the resume point after ``name`` as an opaque cursor."""
    return base64.urlsafe_b64encode(name.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> str:
    """Decode a cursor produced by encode_cursor.

    Raises:
        ValueError: If the cursor was not produced by this binding
    """
    try:
        raw = base64.b64decode(cursor.encode("ascii"), altchars=b"-_", validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, UnicodeError) as e:
        raise ValueError(f"Invalid cursor: {cursor!r}") from e


class MemoryKVBinding:
    """In-memory store binding.

    Implements the same contract as a hosted namespace, minus propagation
    delay. Suitable for development and testing. Data is lost on restart.
    """

    def __init__(self, data: dict[str, str] | None = None, **kwargs: Any) -> None:
        """Initialize memory binding.

        Args:
            data: Optional initial key to value contents
            **kwargs: Ignored (for compatibility with other backends)
        """
        self._data: dict[str, StoredEntry] = {
            key: StoredEntry(value=value) for key, value in (data or {}).items()
        }
        self._lock = asyncio.Lock()

    def _live_entry(self, key: str) -> StoredEntry | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        if entry.is_expired():
            del self._data[key]
            return None
        return entry

    async def get(self, key: str) -> str | None:
        """Get a value by key."""
        async with self._lock:
            entry = self._live_entry(key)
            return entry.value if entry else None

    async def get_with_metadata(self, key: str) -> dict[str, Any]:
        """Get a value and its metadata by key.

        Mirrors the hosted API: an absent key yields null value and metadata.
        """
        async with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return {"value": None, "metadata": None}
            return {"value": entry.value, "metadata": copy.deepcopy(entry.metadata)}

    async def put(self, key: str, value: str, options: dict[str, Any] | None = None) -> None:
        """Store a value.

        ``expirationTtl`` takes precedence over ``expiration`` when both are given.
        """
        if not isinstance(value, str):
            raise TypeError(f"value must be str, got {type(value).__name__}")
        options = options or {}

        expiration = options.get("expiration")
        ttl = options.get("expirationTtl")
        if ttl is not None:
            expiration = int(time.time()) + int(ttl)

        entry = StoredEntry(
            value=value,
            metadata=copy.deepcopy(options.get("metadata")),
            expiration=int(expiration) if expiration is not None else None,
        )
        async with self._lock:
            self._data[key] = entry

    async def list(self, options: dict[str, Any] | None = None) -> dict[str, Any]:
        """List keys in lexicographic order, one page at a time."""
        options = options or {}
        prefix = options.get("prefix") or ""
        limit = options.get("limit") or DEFAULT_LIST_LIMIT
        cursor = options.get("cursor")
        after = decode_cursor(cursor) if cursor else None

        async with self._lock:
            now = time.time()
            # Clean up expired entries first
            expired = [k for k, v in self._data.items() if v.is_expired(now)]
            for k in expired:
                del self._data[k]

            names = sorted(
                k for k in self._data
                if k.startswith(prefix) and (after is None or k > after)
            )
            page = names[:limit]
            keys = []
            for name in page:
                entry = self._data[name]
                key: dict[str, Any] = {"name": name}
                if entry.expiration is not None:
                    key["expiration"] = entry.expiration
                if entry.metadata is not None:
                    key["metadata"] = copy.deepcopy(entry.metadata)
                keys.append(key)

        result: dict[str, Any] = {"keys": keys, "list_complete": len(names) <= limit}
        if not result["list_complete"]:
            result["cursor"] = encode_cursor(page[-1])
        return result

    async def delete(self, key: str) -> None:
        """Delete a key."""
        async with self._lock:
            self._data.pop(key, None)

    async def clear(self) -> None:
        """Clear all data. Useful for testing."""
        async with self._lock:
            self._data.clear()
