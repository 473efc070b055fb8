"""Google Cloud Storage backend.

Objects are read and written through google-cloud-storage blobs. The
client library is blocking, so every call runs in a worker thread; the
library's authorized session owns credential refresh.

No retries here: a failed request is classified once and surfaced.
"""

from __future__ import annotations

import asyncio

import google.oauth2.credentials
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage as gcs
from google.oauth2 import service_account
from requests.exceptions import RequestException

from relaysync.config import NoAuth, ServiceAccountAuth, UserAccountAuth
from relaysync.errors import SyncerConfigError
from relaysync.store.classify import classify_gcs_error, read_error, write_error
from relaysync.store.keys import GCS_KEYS, KeyNamingScheme, StoreIdentity

READ_WRITE_SCOPE = "https://www.googleapis.com/auth/devstorage.read_write"

# Failure shapes a blob call can raise: API errors, credential refresh
# errors, and connection errors from the requests transport underneath.
_CLIENT_ERRORS = (GoogleAPIError, GoogleAuthError, RequestException)


def storage_client_for(auth) -> gcs.Client:
    """Build a storage client for an auth flow. Makes no network call.

    Raises:
        SyncerConfigError: credential file missing, unreadable or malformed.
    """
    if isinstance(auth, NoAuth):
        return gcs.Client.create_anonymous_client()

    try:
        if isinstance(auth, ServiceAccountAuth):
            credentials = service_account.Credentials.from_service_account_file(
                str(auth.path), scopes=[READ_WRITE_SCOPE],
            )
            return gcs.Client(project=credentials.project_id, credentials=credentials)
        if isinstance(auth, UserAccountAuth):
            credentials = google.oauth2.credentials.Credentials.from_authorized_user_file(
                str(auth.path), scopes=[READ_WRITE_SCOPE],
            )
            # object access needs no project
            return gcs.Client(project=None, credentials=credentials)
    except (OSError, ValueError, KeyError, GoogleAuthError) as e:
        raise SyncerConfigError(f"Failed to load {auth.kind} credentials from '{auth.path}': {e}") from e

    raise SyncerConfigError(f"Unsupported auth flow: {auth!r}")


class GcsBackend:
    """StorageBackend for one (bucket, folder) store in GCS."""

    scheme = "gs"

    def __init__(self, identity: StoreIdentity, client: gcs.Client):
        self.identity = identity
        self.keys = KeyNamingScheme(GCS_KEYS, identity.folder)
        self._client = client
        self._bucket = client.bucket(identity.bucket)

    @property
    def store(self) -> str:
        return f"gs://{self.identity}"

    def __repr__(self) -> str:
        return f"GcsBackend(bucket={self.identity.bucket!r}, folder={self.identity.folder!r})"

    async def close(self) -> None:
        close = getattr(self._client, "close", None)
        if close is not None:
            await asyncio.to_thread(close)

    async def get(self, key: str) -> bytes:
        blob = self._bucket.blob(key)
        try:
            return await asyncio.to_thread(blob.download_as_bytes)
        except _CLIENT_ERRORS as e:
            raise read_error(classify_gcs_error(e), key, self.store, e) from e

    async def put(self, key: str, data: bytes, content_type: str = "application/json") -> None:
        blob = self._bucket.blob(key)
        try:
            await asyncio.to_thread(blob.upload_from_string, data, content_type=content_type)
        except _CLIENT_ERRORS as e:
            raise write_error(key, self.store, e) from e

    def location(self, key: str) -> str:
        return f"gs://{self.identity.bucket}/{key}"


__all__ = ["GcsBackend", "storage_client_for"]
