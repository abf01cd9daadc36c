"""worker-kv - a typed async client for Workers KV style key-value stores."""

from worker_kv.bindings import (
    BindingEnvironment,
    current_environment,
    load_environment,
    register_binding,
    unregister_binding,
)
from worker_kv.builders import ListRequest, PutRequest
from worker_kv.client import KvStore
from worker_kv.config import Config
from worker_kv.exceptions import (
    DeserializationError,
    InvalidStoreError,
    KvError,
    MissingMetadataError,
    SerializationError,
    TransportError,
)
from worker_kv.models import Key, ListResponse, StoredValue, ValueWithMetadata
from worker_kv.observability import (
    LogLevel,
    RequestContext,
    configure_logging,
    get_logger,
    register_metric_callback,
)
from worker_kv.protocols import KVBinding

__version__ = "0.1.0"
__all__ = [
    # Client
    "KvStore",
    "ListRequest",
    "PutRequest",
    # Models
    "Key",
    "ListResponse",
    "StoredValue",
    "ValueWithMetadata",
    # Bindings
    "BindingEnvironment",
    "KVBinding",
    "current_environment",
    "load_environment",
    "register_binding",
    "unregister_binding",
    # Errors
    "DeserializationError",
    "InvalidStoreError",
    "KvError",
    "MissingMetadataError",
    "SerializationError",
    "TransportError",
    # Configuration & observability
    "Config",
    "LogLevel",
    "RequestContext",
    "configure_logging",
    "get_logger",
    "register_metric_callback",
]
