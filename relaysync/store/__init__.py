"""Checkpoint stores: the syncer contract, its backends and builders."""

from .builder import GcsStorageClientBuilder, build_syncer
from .filesystem import LocalBackend
from .gcs import GcsBackend
from .interface import CheckpointSyncer, StorageBackend
from .keys import GCS_KEYS, LOCAL_KEYS, KeyNamingScheme, KeyTable, ObjectKind, StoreIdentity
from .syncer import ObjectSyncer

__all__ = [
    "GCS_KEYS",
    "LOCAL_KEYS",
    "CheckpointSyncer",
    "GcsBackend",
    "GcsStorageClientBuilder",
    "KeyNamingScheme",
    "KeyTable",
    "LocalBackend",
    "ObjectKind",
    "ObjectSyncer",
    "StorageBackend",
    "StoreIdentity",
    "build_syncer",
]
