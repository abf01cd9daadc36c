"""Binding environments: where store names resolve to bindings.

The hosting runtime owns binding discovery. An environment is the small
surface it exposes to the client: a name to binding lookup that can be made
current for a block of code, the same way request context is propagated for
logging.
"""

from collections.abc import Mapping
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from worker_kv.observability import configure_logging
from worker_kv.plugins import create_binding
from worker_kv.protocols import KVBinding

if TYPE_CHECKING:
    from worker_kv.config import Config


class BindingEnvironment:
    """A set of named store bindings.

    Example:
        with BindingEnvironment({"SESSIONS": MemoryKVBinding()}):
            store = KvStore.create("SESSIONS")
    """

    def __init__(self, bindings: Mapping[str, KVBinding] | None = None) -> None:
        self._bindings: dict[str, KVBinding] = dict(bindings or {})

    def get(self, name: str) -> KVBinding | None:
        """Get a binding by name. Returns None if not bound."""
        return self._bindings.get(name)

    def register(self, name: str, binding: KVBinding) -> None:
        """Bind ``binding`` under ``name``, replacing any existing binding."""
        if not name:
            raise ValueError("Binding name cannot be empty")
        self._bindings[name] = binding

    def unregister(self, name: str) -> None:
        """Remove a binding. No-op if not bound."""
        self._bindings.pop(name, None)

    def names(self) -> list[str]:
        """List bound store names."""
        return sorted(self._bindings)

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def __enter__(self) -> "BindingEnvironment":
        """Make this the current environment."""
        _env_stack.set(_env_stack.get() + (self,))
        return self

    def __exit__(self, *args: Any) -> None:
        """Restore the previous environment."""
        _env_stack.set(_env_stack.get()[:-1])

    async def __aenter__(self) -> "BindingEnvironment":
        return self.__enter__()

    async def __aexit__(self, *args: Any) -> None:
        self.__exit__(*args)


_default_env = BindingEnvironment()
# Entered environments, innermost last. Each task works on its own copy.
_env_stack: ContextVar[tuple[BindingEnvironment, ...]] = ContextVar(
    "binding_environments", default=()
)


def current_environment() -> BindingEnvironment:
    """Get the active environment, falling back to the process default."""
    stack = _env_stack.get()
    return stack[-1] if stack else _default_env


def register_binding(name: str, binding: KVBinding) -> None:
    """Register a binding in the process default environment."""
    _default_env.register(name, binding)


def unregister_binding(name: str) -> None:
    """Remove a binding from the process default environment."""
    _default_env.unregister(name)


def lookup_binding(env: Any, name: str) -> KVBinding | None:
    """Resolve ``name`` in an arbitrary environment object.

    Environments may be a BindingEnvironment, a mapping, or any object that
    exposes bindings as attributes.
    """
    if isinstance(env, BindingEnvironment):
        return env.get(name)
    if isinstance(env, Mapping):
        return env.get(name)
    return getattr(env, name, None)


def load_environment(config: "Config") -> BindingEnvironment:
    """Build an environment with one binding per configured store.

    Also applies the configured logging level and format to the
    ``worker_kv`` logger tree.

    Args:
        config: Loaded configuration

    Returns:
        A BindingEnvironment, not yet made current

    Raises:
        ValueError: If a store names an unknown backend
    """
    configure_logging(config.logging.level, config.logging.format)

    env = BindingEnvironment()
    for store in config.stores:
        env.register(store.name, create_binding(store.backend, **store.options))
    return env
