"""worker-kv exceptions."""


class KvError(Exception):
    """Base exception for worker-kv.

    Every error carries a ``kind`` tag and formats as ``KvError::<Kind>: <detail>``.
    """

    kind = "KvError"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"KvError::{self.kind}: {detail}")


class TransportError(KvError):
    """The round trip to the store failed or returned an unusable reply."""

    kind = "Transport"


class SerializationError(KvError):
    """Structured data could not be encoded for the store."""

    kind = "Serialization"


class DeserializationError(SerializationError):
    """Data returned by the store could not be decoded."""

    pass


class InvalidStoreError(KvError):
    """No binding with the requested store name exists."""

    kind = "InvalidStore"

    def __init__(self, store_name: str) -> None:
        self.store_name = store_name
        super().__init__(store_name)


class MissingMetadataError(KvError):
    """Metadata was required but the key has none."""

    kind = "MissingMetadata"

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"metadata for key '{key}' was undefined or null")
