"""Binding backend discovery via Python entry points."""

from importlib.metadata import entry_points
from typing import Any

from worker_kv.backends.memory import MemoryKVBinding
from worker_kv.protocols import KVBinding

BINDING_GROUP = "worker_kv.bindings"

BUILTIN_BINDINGS: dict[str, Any] = {
    "memory": MemoryKVBinding,
}


def discover_bindings() -> dict[str, Any]:
    """Discover all available binding backends.

    Built-in backends are always present; entry points registered under
    ``worker_kv.bindings`` are added on top and may override them.

    Returns:
        Dictionary mapping backend names to their classes
    """
    backends = dict(BUILTIN_BINDINGS)
    for ep in entry_points(group=BINDING_GROUP):
        backends[ep.name] = ep.load()
    return backends


def get_binding_class(name: str) -> Any:
    """Get a binding backend class by name.

    Args:
        name: The backend name (e.g., "memory")

    Returns:
        The backend class

    Raises:
        ValueError: If the backend is not found
    """
    backends = discover_bindings()
    if name not in backends:
        available = ", ".join(sorted(backends.keys())) or "(none)"
        raise ValueError(f"Binding backend '{name}' not found. Available: {available}")
    return backends[name]


def create_binding(backend: str, **kwargs: Any) -> KVBinding:
    """Create a KVBinding instance.

    Args:
        backend: The backend name (e.g., "memory")
        **kwargs: Backend-specific configuration

    Returns:
        A KVBinding implementation
    """
    cls = get_binding_class(backend)
    return cls(**kwargs)
