"""Syncer construction.

Store identity is validated before credentials are loaded and before any
client exists, so a bad bucket name never reaches the network. All
configuration failures are raised as exceptions the caller can handle:

    syncer = GcsStorageClientBuilder(NoAuth()).build("public-bucket")

    auth = ServiceAccountAuth(path="path/to/sac.json")
    syncer = GcsStorageClientBuilder(auth).build("my-bucket", "validator-1")
"""

from __future__ import annotations

from typing import Any

from google.cloud import storage as gcs

from relaysync.config import CheckpointSyncerConf, NoAuth
from relaysync.errors import SyncerConfigError
from relaysync.store.filesystem import LocalBackend
from relaysync.store.gcs import GcsBackend, storage_client_for
from relaysync.store.keys import StoreIdentity
from relaysync.store.syncer import ObjectSyncer


class GcsStorageClientBuilder:
    """Builds GCS-backed syncers for one auth flow."""

    def __init__(self, auth=None):
        self.auth = auth if auth is not None else NoAuth()

    def build(
        self,
        bucket: str,
        folder: str | None = None,
        *,
        logger: Any = None,
        client: gcs.Client | None = None,
    ) -> ObjectSyncer:
        """Build a syncer for `bucket`, optionally namespaced under `folder`.

        A prebuilt `client` skips credential loading for the auth flow.

        Raises:
            InvalidStoreIdentity: bucket name is empty or contains '/'.
            SyncerConfigError: credentials cannot be loaded.
        """
        identity = StoreIdentity(bucket, folder)
        if client is None:
            client = storage_client_for(self.auth)
        return ObjectSyncer(GcsBackend(identity, client), logger=logger)


def build_syncer(
    conf: CheckpointSyncerConf,
    *,
    logger: Any = None,
    client: gcs.Client | None = None,
) -> ObjectSyncer:
    """Build the syncer a parsed location describes."""
    if conf.kind == "gcs":
        if conf.bucket is None:
            raise SyncerConfigError("GCS syncer config has no bucket")
        return GcsStorageClientBuilder(conf.auth).build(
            conf.bucket, conf.folder, logger=logger, client=client,
        )

    if conf.path is None:
        raise SyncerConfigError("Local syncer config has no path")
    try:
        backend = LocalBackend(conf.path)
    except OSError as e:
        raise SyncerConfigError(f"Cannot use '{conf.path}' as a checkpoint store: {e}") from e
    return ObjectSyncer(backend, logger=logger)


__all__ = ["GcsStorageClientBuilder", "build_syncer"]
