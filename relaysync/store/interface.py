"""Checkpoint syncer protocols - pluggable storage interface.

CheckpointSyncer is what agents program against. StorageBackend is the
much smaller surface a new store has to provide; ObjectSyncer builds the
full syncer contract on top of it.

Implementations: GcsBackend (Google Cloud Storage), LocalBackend
(filesystem).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from relaysync.models import (
    AgentMetadata,
    ReorgEvent,
    SignedAnnouncement,
    SignedCheckpointWithMessageId,
)
from relaysync.store.keys import KeyNamingScheme


@runtime_checkable
class CheckpointSyncer(Protocol):
    """Reads and writes signed checkpoints and their companion objects."""

    async def latest_index(self) -> int | None:
        """Highest index this store claims to have published, None if never written."""
        ...

    async def write_latest_index(self, index: int) -> None:
        """Overwrite the latest index unconditionally."""
        ...

    async def update_latest_index(self, index: int) -> None:
        """Write `index` only if it is above the stored value (absent counts as 0).

        Read-then-write, not atomic: concurrent callers can lose a write but
        never move the index below what they read.
        """
        ...

    async def fetch_checkpoint(self, index: int) -> SignedCheckpointWithMessageId | None:
        ...

    async def write_checkpoint(self, checkpoint: SignedCheckpointWithMessageId) -> None:
        ...

    async def write_metadata(self, metadata: AgentMetadata) -> None:
        ...

    async def write_announcement(self, announcement: SignedAnnouncement) -> None:
        ...

    def announcement_location(self) -> str:
        """Where the announcement lives, whether or not it was written yet."""
        ...

    async def write_reorg_status(self, event: ReorgEvent) -> None:
        ...

    async def reorg_status(self) -> ReorgEvent | None:
        ...

    async def close(self) -> None:
        ...


@runtime_checkable
class StorageBackend(Protocol):
    """Raw object access for one store.

    get() raises ObjectNotFound for absent objects and TransportFailure for
    everything else; put() raises TransportFailure. Both already carry the
    key and store identity.
    """

    keys: KeyNamingScheme

    @property
    def store(self) -> str:
        """Human readable store identity used in errors and logs."""
        ...

    async def get(self, key: str) -> bytes:
        ...

    async def put(self, key: str, data: bytes, content_type: str = "application/json") -> None:
        ...

    def location(self, key: str) -> str:
        """URI of `key`, e.g. gs://bucket/key."""
        ...

    async def close(self) -> None:
        ...


__all__ = ["CheckpointSyncer", "StorageBackend"]
