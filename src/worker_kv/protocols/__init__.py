"""Protocol interfaces for pluggable bindings."""

from worker_kv.protocols.kv_binding import KVBinding

__all__ = [
    "KVBinding",
]
