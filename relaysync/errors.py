"""Exception types for checkpoint syncers.

Only ObjectNotFound is expected in normal operation, and it never leaves a
syncer: reads turn it into None. Everything else reaches the caller.
"""

from __future__ import annotations


class SyncerError(Exception):
    """Base class for checkpoint syncer failures."""


class InvalidStoreIdentity(SyncerError, ValueError):
    """Raised when a bucket name (or other store identity) is unusable."""


class SyncerConfigError(SyncerError):
    """Raised when a syncer cannot be configured: bad location string,
    missing or malformed credential file, unusable local root."""


class ObjectNotFound(SyncerError):
    """The object does not exist in the store."""

    def __init__(self, key: str, store: str):
        super().__init__(f"object '{key}' not found in {store}")
        self.key = key
        self.store = store


class DecodeFailure(SyncerError):
    """The object exists but its bytes are not the expected value."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"object '{key}' failed to decode: {reason}")
        self.key = key
        self.reason = reason


class TransportFailure(SyncerError):
    """Any backend failure other than not-found (auth, network, permission)."""

    def __init__(self, key: str, store: str, operation: str, detail: str):
        super().__init__(f"{operation} '{key}' in {store} failed: {detail}")
        self.key = key
        self.store = store
        self.operation = operation
        self.detail = detail


__all__ = [
    "DecodeFailure",
    "InvalidStoreIdentity",
    "ObjectNotFound",
    "SyncerConfigError",
    "SyncerError",
    "TransportFailure",
]
