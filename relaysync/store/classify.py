"""Classification of backend failures.

Reads must tell "the object is not there" apart from "the read failed".
The first read of a fresh store always hits a missing object, so treating
absence as an error would make every new store look broken. Each backend
has its own failure shapes; they all collapse into one ErrorKind here.
"""

from __future__ import annotations

from enum import Enum

from google.api_core.exceptions import BadRequest, GoogleAPICallError, NotFound
from google.auth.exceptions import GoogleAuthError

from relaysync.errors import ObjectNotFound, SyncerError, TransportFailure


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_IDENTIFIER = "invalid_identifier"
    OTHER = "other"

    @property
    def is_absent(self) -> bool:
        """Both not-found shapes read as an absent object."""
        return self is not ErrorKind.OTHER


def classify_gcs_error(exc: BaseException) -> ErrorKind:
    """Classify a failure from a google-cloud-storage blob read."""
    if isinstance(exc, NotFound):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, BadRequest):
        # a media read carries nothing but the bucket and object names
        return ErrorKind.INVALID_IDENTIFIER
    # Forbidden, throttling, server errors, credential refresh, connection errors
    return ErrorKind.OTHER


def classify_os_error(exc: BaseException) -> ErrorKind:
    """Classify a failure from the local filesystem."""
    if isinstance(exc, FileNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, NotADirectoryError):
        # a path component is a file: the key can never exist
        return ErrorKind.INVALID_IDENTIFIER
    return ErrorKind.OTHER


def describe_error(exc: BaseException) -> str:
    if isinstance(exc, GoogleAPICallError) and exc.code is not None:
        return f"HTTP {int(exc.code)}: {exc.message}"
    if isinstance(exc, GoogleAuthError):
        return f"credential error: {exc}"
    return f"{type(exc).__name__}: {exc}"


def read_error(kind: ErrorKind, key: str, store: str, exc: BaseException) -> SyncerError:
    """Error to raise for a failed read of `key`."""
    if kind.is_absent:
        return ObjectNotFound(key, store)
    return TransportFailure(key, store, "get", describe_error(exc))


def write_error(key: str, store: str, exc: BaseException) -> TransportFailure:
    """Error to raise for a failed write of `key`. Writes have no absent case."""
    return TransportFailure(key, store, "put", describe_error(exc))


__all__ = [
    "ErrorKind",
    "classify_gcs_error",
    "classify_os_error",
    "describe_error",
    "read_error",
    "write_error",
]
