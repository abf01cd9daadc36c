"""Tests for the error taxonomy."""

import pytest

from worker_kv.exceptions import (
    DeserializationError,
    InvalidStoreError,
    KvError,
    MissingMetadataError,
    SerializationError,
    TransportError,
)


@pytest.mark.parametrize(
    ("error", "kind"),
    [
        (TransportError("boom"), "Transport"),
        (SerializationError("bad"), "Serialization"),
        (DeserializationError("bad"), "Serialization"),
        (InvalidStoreError("STORE"), "InvalidStore"),
        (MissingMetadataError("key"), "MissingMetadata"),
    ],
)
def test_kind_tags(error, kind):
    """Every error is a KvError with a kind tag in its message."""
    assert isinstance(error, KvError)
    assert error.kind == kind
    assert str(error).startswith(f"KvError::{kind}: ")


def test_invalid_store_message():
    """InvalidStoreError names the store."""
    assert str(InvalidStoreError("EXAMPLE")) == "KvError::InvalidStore: EXAMPLE"


def test_missing_metadata_message():
    """MissingMetadataError names the key."""
    error = MissingMetadataError("a")
    assert error.key == "a"
    assert "'a'" in str(error)
    assert "undefined or null" in str(error)
