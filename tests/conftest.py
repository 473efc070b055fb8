"""Shared fixtures: an in-memory GCS storage client and sample published values."""

from __future__ import annotations

import threading
import time
from collections import defaultdict

import pytest
from google.api_core.exceptions import NotFound, from_http_status

from relaysync.models import (
    AgentMetadata,
    Announcement,
    CheckpointWithMessageId,
    ReorgEvent,
    Signature,
    SignedAnnouncement,
    SignedCheckpointWithMessageId,
)


class FakeBlob:

    def __init__(self, gcs: "FakeStorageClient", bucket: str, name: str):
        self._gcs = gcs
        self.bucket = bucket
        self.name = name

    def download_as_bytes(self) -> bytes:
        self._gcs._request("GET", self.bucket, self.name)
        data = self._gcs.objects.get(self.bucket, {}).get(self.name)
        if data is None:
            raise NotFound(f"No such object: {self.bucket}/{self.name}")
        return data

    def upload_from_string(self, data, content_type: str = "text/plain") -> None:
        self._gcs._request("POST", self.bucket, self.name)
        self._gcs.objects[self.bucket][self.name] = bytes(data)
        self._gcs.content_types[(self.bucket, self.name)] = content_type


class FakeBucket:

    def __init__(self, gcs: "FakeStorageClient", name: str):
        self._gcs = gcs
        self.name = name

    def blob(self, name: str) -> FakeBlob:
        return FakeBlob(self._gcs, self.name, name)


class FakeStorageClient:
    """Stands in for google.cloud.storage.Client: blob download and upload.

    `objects[bucket][name]` holds stored bytes. `fail_with` makes every
    call raise the google-api-core error for that HTTP status. `delay`
    holds each call in its worker thread so concurrent tasks interleave.
    `requests` records (method, bucket, name) for every call seen.
    """

    def __init__(self):
        self.objects: dict[str, dict[str, bytes]] = defaultdict(dict)
        self.content_types: dict[tuple[str, str], str] = {}
        self.requests: list[tuple[str, str, str]] = []
        self.fail_with: int | None = None
        self.delay = 0.0
        self.closed = False
        self._lock = threading.Lock()

    def bucket(self, name: str) -> FakeBucket:
        return FakeBucket(self, name)

    def close(self) -> None:
        self.closed = True

    def _request(self, method: str, bucket: str, name: str) -> None:
        with self._lock:
            self.requests.append((method, bucket, name))
        if self.delay:
            time.sleep(self.delay)
        if self.fail_with is not None:
            raise from_http_status(self.fail_with, f"injected {self.fail_with}")


class RecordingLogger:
    """Stands in for bt.logging; keeps every structured entry."""

    def __init__(self):
        self.entries: list[tuple[str, object]] = []

    def _record(self, level: str, msg: object) -> None:
        self.entries.append((level, msg))

    def debug(self, msg):
        self._record("debug", msg)

    def info(self, msg):
        self._record("info", msg)

    def warning(self, msg):
        self._record("warning", msg)

    def error(self, msg):
        self._record("error", msg)

    def at(self, level: str) -> list[object]:
        return [m for lvl, m in self.entries if lvl == level]


H256_A = "0x" + "11" * 32
H256_B = "0x" + "22" * 32
H256_C = "0x" + "33" * 32


def make_checkpoint(index: int, root: str = H256_B) -> SignedCheckpointWithMessageId:
    return SignedCheckpointWithMessageId(
        value=CheckpointWithMessageId(
            merkle_tree_hook_address=H256_A,
            mailbox_domain=1,
            root=root,
            index=index,
            message_id=H256_C,
        ),
        signature=Signature(r="0x" + "aa" * 32, s="0x" + "bb" * 32, v=28),
    )


def make_announcement(storage_location: str) -> SignedAnnouncement:
    return SignedAnnouncement(
        value=Announcement(
            validator="0x" + "44" * 20,
            mailbox_address=H256_A,
            mailbox_domain=1,
            storage_location=storage_location,
        ),
        signature=Signature(r="0x01", s="0x02", v=27),
    )


def make_reorg_event(index: int = 10) -> ReorgEvent:
    return ReorgEvent(
        local_merkle_root=H256_B,
        canonical_merkle_root=H256_C,
        checkpoint_index=index,
        unix_timestamp=1_700_000_000,
        reorg_period=15,
    )


@pytest.fixture
def fake_gcs():
    return FakeStorageClient()


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def metadata():
    return AgentMetadata(git_sha="0123abcd")


@pytest.fixture
def checkpoint_factory():
    return make_checkpoint


@pytest.fixture
def announcement_factory():
    return make_announcement


@pytest.fixture
def reorg_factory():
    return make_reorg_event
