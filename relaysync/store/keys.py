"""Object key naming for checkpoint stores.

Every backend describes its layout with one KeyTable: the object name for
each logical slot, and which slots live under the store's folder prefix.
The GCS table is the on-bucket layout existing deployments read, so its
names and its prefixing rules must not change:

  gcsLatestIndexKey                 latest index     (bucket root)
  checkpoint_{index}_with_id.json   checkpoints      (bucket root)
  {folder}/gcsMetadataKey           agent metadata
  {folder}/announcement.json        announcement
  gcsReorgFlagKey                   reorg flag       (bucket root)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from relaysync.errors import InvalidStoreIdentity
from relaysync.models import check_index


class ObjectKind(str, Enum):
    """Logical objects a syncer reads and writes."""

    LATEST_INDEX = "latest_index"
    CHECKPOINT = "checkpoint"
    METADATA = "metadata"
    ANNOUNCEMENT = "announcement"
    REORG_FLAG = "reorg_flag"


@dataclass(frozen=True)
class KeyTable:
    """Object names for one backend. `checkpoint` is a format string with
    an `{index}` field."""

    latest_index: str
    checkpoint: str
    metadata: str
    announcement: str
    reorg_flag: str
    prefixed: frozenset[ObjectKind] = field(default_factory=frozenset)

    def name_for(self, kind: ObjectKind, index: int | None = None) -> str:
        if kind is ObjectKind.CHECKPOINT:
            if index is None:
                raise ValueError("checkpoint keys need an index")
            return self.checkpoint.format(index=check_index(index))
        if index is not None:
            raise ValueError(f"{kind.value} keys take no index")
        return getattr(self, kind.value)


GCS_KEYS = KeyTable(
    latest_index="gcsLatestIndexKey",
    checkpoint="checkpoint_{index}_with_id.json",
    metadata="gcsMetadataKey",
    announcement="announcement.json",
    reorg_flag="gcsReorgFlagKey",
    prefixed=frozenset({ObjectKind.METADATA, ObjectKind.ANNOUNCEMENT}),
)

LOCAL_KEYS = KeyTable(
    latest_index="index.json",
    checkpoint="{index}_with_id.json",
    metadata="metadata_latest.json",
    announcement="announcement.json",
    reorg_flag="reorg_flag.json",
)


def object_path(folder: str | None, object_name: str) -> str:
    """Join a folder prefix and an object name; no folder leaves it as is."""
    if folder:
        return f"{folder.rstrip('/')}/{object_name}"
    return object_name


def validate_bucket_name(bucket: str) -> None:
    if not bucket:
        raise InvalidStoreIdentity("Bucket name must not be empty")
    if "/" in bucket:
        raise InvalidStoreIdentity(f"Bucket name '{bucket}' has an invalid symbol '/'")


@dataclass(frozen=True)
class StoreIdentity:
    """(bucket, folder) pair naming one logical store. Validated on creation."""

    bucket: str
    folder: str | None = None

    def __post_init__(self) -> None:
        validate_bucket_name(self.bucket)

    def __str__(self) -> str:
        if self.folder:
            return f"{self.bucket}/{self.folder.rstrip('/')}"
        return self.bucket


class KeyNamingScheme:
    """Maps logical objects to storage keys for one store."""

    def __init__(self, table: KeyTable, folder: str | None = None):
        self.table = table
        self.folder = folder or None

    def key(self, kind: ObjectKind, index: int | None = None) -> str:
        name = self.table.name_for(kind, index)
        if kind in self.table.prefixed:
            return object_path(self.folder, name)
        return name

    def latest_index(self) -> str:
        return self.key(ObjectKind.LATEST_INDEX)

    def checkpoint(self, index: int) -> str:
        return self.key(ObjectKind.CHECKPOINT, index)

    def metadata(self) -> str:
        return self.key(ObjectKind.METADATA)

    def announcement(self) -> str:
        return self.key(ObjectKind.ANNOUNCEMENT)

    def reorg_flag(self) -> str:
        return self.key(ObjectKind.REORG_FLAG)


__all__ = [
    "GCS_KEYS",
    "LOCAL_KEYS",
    "KeyNamingScheme",
    "KeyTable",
    "ObjectKind",
    "StoreIdentity",
    "object_path",
    "validate_bucket_name",
]
