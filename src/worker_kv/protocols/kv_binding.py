"""KVBinding protocol for the transport side of a bound store."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KVBinding(Protocol):
    """Protocol for a resolved store binding (Workers KV namespace, fake, proxy)."""

    async def get(self, key: str) -> str | None:
        """Get a value by key. Returns None if not found."""
        ...

    async def get_with_metadata(self, key: str) -> dict[str, Any] | None:
        """Get ``{"value": ..., "metadata": ...}`` for a key.

        Returns None, or a value of None, if the key is not found.
        """
        ...

    async def put(self, key: str, value: str, options: dict[str, Any]) -> None:
        """Store a value.

        ``options`` may hold ``expiration``, ``expirationTtl`` and ``metadata``.
        """
        ...

    async def list(self, options: dict[str, Any]) -> dict[str, Any]:
        """List keys.

        ``options`` may hold ``limit``, ``cursor`` and ``prefix``. The reply is
        shaped ``{"keys": [...], "list_complete": bool, "cursor": str}``.
        """
        ...

    async def delete(self, key: str) -> None:
        """Delete a key. No-op if key doesn't exist."""
        ...
