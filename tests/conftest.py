"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from worker_kv.backends.memory import MemoryKVBinding
from worker_kv.client import KvStore


class RecordingBinding:
    """Binding that records every call and returns canned replies."""

    def __init__(self, **replies: Any) -> None:
        self.replies = replies
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    async def get(self, key: str) -> Any:
        self.calls.append(("get", (key,)))
        return self.replies.get("get")

    async def get_with_metadata(self, key: str) -> Any:
        self.calls.append(("get_with_metadata", (key,)))
        return self.replies.get("get_with_metadata")

    async def put(self, key: str, value: str, options: dict[str, Any]) -> None:
        self.calls.append(("put", (key, value, options)))

    async def list(self, options: dict[str, Any]) -> Any:
        self.calls.append(("list", (options,)))
        return self.replies.get("list", {"keys": [], "list_complete": True})

    async def delete(self, key: str) -> None:
        self.calls.append(("delete", (key,)))


class FailingBinding:
    """Binding whose every call raises."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or RuntimeError("connection reset")

    async def get(self, key: str) -> Any:
        raise self.error

    async def get_with_metadata(self, key: str) -> Any:
        raise self.error

    async def put(self, key: str, value: str, options: dict[str, Any]) -> None:
        raise self.error

    async def list(self, options: dict[str, Any]) -> Any:
        raise self.error

    async def delete(self, key: str) -> None:
        raise self.error


@pytest.fixture
def binding():
    """Create an empty memory binding."""
    return MemoryKVBinding()


@pytest.fixture
def store(binding):
    """Create a KvStore bound to the memory binding."""
    return KvStore(binding, "test")


@pytest.fixture
def sample_config_dict():
    """Sample configuration dictionary for testing."""
    return {
        "stores": [
            {"name": "SESSIONS", "backend": "memory"},
            {"name": "CACHE", "backend": "memory", "options": {"data": {"a": "b"}}},
        ],
        "logging": {"level": "DEBUG", "format": "text"},
    }


@pytest.fixture
def recording_binding():
    """Factory for bindings that record calls and return canned replies."""
    return RecordingBinding


@pytest.fixture
def failing_binding():
    """Factory for bindings whose every call raises."""
    return FailingBinding
