"""CheckpointSyncer implementation shared by all storage backends.

The backend supplies raw object access, key layout and error
classification; this class supplies encoding, decoding, the not-found to
None mapping, latest-index monotonicity and write logging.

Encodings:
  latest index      JSON integer
  checkpoint        compact JSON
  announcement      compact JSON
  metadata          pretty JSON (2-space indent)
  reorg flag        pretty JSON (2-space indent)
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

import bittensor as bt
from pydantic import BaseModel, ValidationError

from relaysync.errors import DecodeFailure, ObjectNotFound
from relaysync.models import (
    INDEX_ADAPTER,
    AgentMetadata,
    ReorgEvent,
    SignedAnnouncement,
    SignedCheckpointWithMessageId,
    check_index,
)
from relaysync.store.interface import StorageBackend

M = TypeVar("M", bound=BaseModel)


class ObjectSyncer:
    """Checkpoint syncer over a StorageBackend.

    Holds no mutable state of its own, so one instance can be shared by
    any number of tasks.
    """

    def __init__(self, backend: StorageBackend, logger: Any = None):
        self.backend = backend
        self.keys = backend.keys
        # bt.logging unless the caller injects its own structured logger
        self.logger = logger if logger is not None else bt.logging

    def __repr__(self) -> str:
        return f"ObjectSyncer({self.backend!r})"

    async def close(self) -> None:
        await self.backend.close()

    # -- Raw object helpers --

    async def _read(self, key: str) -> bytes | None:
        try:
            return await self.backend.get(key)
        except ObjectNotFound:
            return None

    def _decode(self, key: str, data: bytes, model: type[M]) -> M:
        try:
            return model.model_validate_json(data)
        except ValidationError as e:
            raise DecodeFailure(key, str(e)) from e

    async def _write(self, name: str, key: str, encode: Callable[[], bytes], quiet: bool = False) -> None:
        path = self.backend.location(key)
        try:
            await self.backend.put(key, encode())
        except Exception as e:
            self.logger.error({"syncer_write": {"object": name, "path": path, "status": "failed", "error": str(e)}})
            raise
        entry = {"syncer_write": {"object": name, "path": path, "status": "ok"}}
        if quiet:
            self.logger.debug(entry)
        else:
            self.logger.info(entry)

    # -- Latest index --

    async def latest_index(self) -> int | None:
        key = self.keys.latest_index()
        data = await self._read(key)
        if data is None:
            return None
        try:
            return INDEX_ADAPTER.validate_json(data, strict=True)
        except ValidationError as e:
            raise DecodeFailure(key, str(e)) from e

    async def write_latest_index(self, index: int) -> None:
        check_index(index)
        await self._write(
            "latest_index",
            self.keys.latest_index(),
            lambda: INDEX_ADAPTER.dump_json(index),
            quiet=True,
        )

    async def update_latest_index(self, index: int) -> None:
        check_index(index)
        current = await self.latest_index()
        if index > (current or 0):
            await self.write_latest_index(index)

    # -- Checkpoints --

    async def fetch_checkpoint(self, index: int) -> SignedCheckpointWithMessageId | None:
        key = self.keys.checkpoint(index)
        data = await self._read(key)
        if data is None:
            return None
        return self._decode(key, data, SignedCheckpointWithMessageId)

    async def write_checkpoint(self, checkpoint: SignedCheckpointWithMessageId) -> None:
        await self._write(
            "checkpoint",
            self.keys.checkpoint(checkpoint.index),
            lambda: checkpoint.model_dump_json().encode(),
            quiet=True,
        )

    # -- Single-slot objects --

    async def write_metadata(self, metadata: AgentMetadata) -> None:
        await self._write("metadata", self.keys.metadata(), lambda: metadata.model_dump_json(indent=2).encode())

    async def write_announcement(self, announcement: SignedAnnouncement) -> None:
        await self._write("announcement", self.keys.announcement(), lambda: announcement.model_dump_json().encode())

    def announcement_location(self) -> str:
        return self.backend.location(self.keys.announcement())

    async def write_reorg_status(self, event: ReorgEvent) -> None:
        await self._write("reorg_flag", self.keys.reorg_flag(), lambda: event.model_dump_json(indent=2).encode())

    async def reorg_status(self) -> ReorgEvent | None:
        key = self.keys.reorg_flag()
        data = await self._read(key)
        if data is None:
            return None
        return self._decode(key, data, ReorgEvent)


__all__ = ["ObjectSyncer"]
