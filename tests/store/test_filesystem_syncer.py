"""Local filesystem syncer tests: same contract as GCS, different layout."""

from __future__ import annotations

import json
import os

import pytest

from relaysync.errors import DecodeFailure, TransportFailure
from relaysync.models import AgentMetadata
from relaysync.store.filesystem import LocalBackend
from relaysync.store.interface import CheckpointSyncer, StorageBackend
from relaysync.store.syncer import ObjectSyncer


@pytest.fixture
def store_dir(tmp_path):
    return tmp_path / "validator-1"


@pytest.fixture
def syncer(store_dir, logger):
    return ObjectSyncer(LocalBackend(store_dir), logger=logger)


class TestLocalBackend:

    def test_creates_root(self, store_dir):
        LocalBackend(store_dir)
        assert store_dir.is_dir()

    def test_is_storage_backend(self, store_dir):
        assert isinstance(LocalBackend(store_dir), StorageBackend)

    def test_location_is_file_uri(self, syncer, store_dir):
        assert syncer.announcement_location() == (store_dir / "announcement.json").as_uri()
        assert syncer.announcement_location().startswith("file:///")

    @pytest.mark.asyncio
    async def test_no_temp_files_left(self, syncer, store_dir, metadata):
        await syncer.write_metadata(metadata)
        await syncer.write_metadata(metadata)
        assert sorted(os.listdir(store_dir)) == ["metadata_latest.json"]

    @pytest.mark.asyncio
    async def test_key_under_a_file_reads_as_absent(self, store_dir):
        backend = LocalBackend(store_dir)
        await backend.put("index.json", b"1")
        syncer = ObjectSyncer(backend)
        # "index.json/x" can never exist because index.json is a file
        assert await syncer._read("index.json/x") is None

    @pytest.mark.asyncio
    async def test_unwritable_root_is_transport_failure(self, syncer, store_dir, logger):
        (store_dir / "metadata_latest.json").mkdir()
        with pytest.raises(TransportFailure) as exc_info:
            await syncer.write_metadata(AgentMetadata(git_sha="x"))
        assert exc_info.value.key == "metadata_latest.json"
        assert len(logger.at("error")) == 1


class TestContract:

    def test_implements_checkpoint_syncer(self, syncer):
        assert isinstance(syncer, CheckpointSyncer)

    @pytest.mark.asyncio
    async def test_fresh_store(self, syncer):
        assert await syncer.latest_index() is None
        assert await syncer.fetch_checkpoint(0) is None
        assert await syncer.reorg_status() is None

    @pytest.mark.asyncio
    async def test_checkpoint_round_trip(self, syncer, store_dir, checkpoint_factory):
        cp = checkpoint_factory(5)
        await syncer.write_checkpoint(cp)
        assert (store_dir / "5_with_id.json").is_file()
        assert await syncer.fetch_checkpoint(5) == cp
        assert await syncer.fetch_checkpoint(6) is None

    @pytest.mark.asyncio
    async def test_monotonic_updates(self, syncer, store_dir):
        for index in [5, 3, 9, 2]:
            await syncer.update_latest_index(index)
        assert await syncer.latest_index() == 9
        assert (store_dir / "index.json").read_bytes() == b"9"

    @pytest.mark.asyncio
    async def test_corrupt_index(self, syncer, store_dir):
        (store_dir / "index.json").write_text("nine")
        with pytest.raises(DecodeFailure):
            await syncer.latest_index()

    @pytest.mark.asyncio
    async def test_single_slot_files(self, syncer, store_dir, metadata, announcement_factory, reorg_factory):
        event = reorg_factory(4)
        await syncer.write_metadata(metadata)
        await syncer.write_announcement(announcement_factory(syncer.announcement_location()))
        await syncer.write_reorg_status(event)

        assert json.loads((store_dir / "metadata_latest.json").read_text()) == {"git_sha": "0123abcd"}
        announced = json.loads((store_dir / "announcement.json").read_text())
        assert announced["value"]["storage_location"] == syncer.announcement_location()
        assert await syncer.reorg_status() == event

    @pytest.mark.asyncio
    async def test_stores_isolated(self, tmp_path, checkpoint_factory):
        a = ObjectSyncer(LocalBackend(tmp_path / "a"))
        b = ObjectSyncer(LocalBackend(tmp_path / "b"))
        await a.write_checkpoint(checkpoint_factory(1))
        await a.update_latest_index(1)
        assert await b.fetch_checkpoint(1) is None
        assert await b.latest_index() is None
