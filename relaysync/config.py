"""Syncer configuration: auth flows and store locations.

A store is configured from a location string plus optional credentials:

  gs://{bucket}[/{folder}]    Google Cloud Storage
  file://{path}               local directory

GCS credentials come from env vars (service account key wins over a user
secret); with neither set the client is anonymous and can only read
public buckets.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, Literal, Mapping, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from relaysync.errors import SyncerConfigError

# Path to GCS users_secret file
GCS_USER_SECRET = "GCS_USER_SECRET"
# Path to GCS service account key
GCS_SERVICE_ACCOUNT_KEY = "GCS_SERVICE_ACCOUNT_KEY"
# Store location, e.g. gs://bucket/folder
CHECKPOINT_SYNCER_LOCATION = "RELAYSYNC_CHECKPOINT_SYNCER__LOCATION"


class NoAuth(BaseModel):
    """Anonymous access; read-only against public buckets."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


class ServiceAccountAuth(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["service_account"] = "service_account"
    path: Path


class UserAccountAuth(BaseModel):
    """Authorized-user secret file (as written by `gcloud auth application-default login`)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["user_account"] = "user_account"
    path: Path


AuthFlow = Annotated[
    Union[NoAuth, ServiceAccountAuth, UserAccountAuth],
    Field(discriminator="kind"),
]


def auth_from_env(environ: Optional[Mapping[str, str]] = None) -> NoAuth | ServiceAccountAuth | UserAccountAuth:
    env = os.environ if environ is None else environ
    service_account_key = env.get(GCS_SERVICE_ACCOUNT_KEY)
    if service_account_key:
        return ServiceAccountAuth(path=service_account_key)
    user_secret = env.get(GCS_USER_SECRET)
    if user_secret:
        return UserAccountAuth(path=user_secret)
    return NoAuth()


class CheckpointSyncerConf(BaseModel):
    """Where a syncer stores its objects and how it authenticates."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["gcs", "local"]
    bucket: Optional[str] = None
    folder: Optional[str] = None
    path: Optional[Path] = None
    auth: AuthFlow = Field(default_factory=NoAuth)

    @classmethod
    def from_location(cls, location: str, auth=None) -> CheckpointSyncerConf:
        """Parse a `gs://` or `file://` location string.

        Raises:
            SyncerConfigError: unknown scheme or missing bucket/path.
        """
        scheme, sep, rest = location.partition("://")
        if not sep:
            raise SyncerConfigError(f"Location '{location}' has no scheme")

        if scheme == "gs":
            bucket, _, folder = rest.partition("/")
            if not bucket:
                raise SyncerConfigError(f"Location '{location}' has no bucket")
            return cls(
                kind="gcs",
                bucket=bucket,
                folder=folder.strip("/") or None,
                auth=auth if auth is not None else NoAuth(),
            )

        if scheme == "file":
            if not rest:
                raise SyncerConfigError(f"Location '{location}' has no path")
            return cls(kind="local", path=Path(rest))

        raise SyncerConfigError(f"Unsupported location scheme '{scheme}' in '{location}'")

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        load_env_file: bool = False,
    ) -> CheckpointSyncerConf:
        """Build from RELAYSYNC_CHECKPOINT_SYNCER__LOCATION and GCS_* env vars."""
        if load_env_file:
            load_dotenv()
        env = os.environ if environ is None else environ

        location = env.get(CHECKPOINT_SYNCER_LOCATION, "")
        if not location:
            raise SyncerConfigError(f"{CHECKPOINT_SYNCER_LOCATION} is required")
        return cls.from_location(location, auth=auth_from_env(env))


__all__ = [
    "CHECKPOINT_SYNCER_LOCATION",
    "GCS_SERVICE_ACCOUNT_KEY",
    "GCS_USER_SECRET",
    "AuthFlow",
    "CheckpointSyncerConf",
    "NoAuth",
    "ServiceAccountAuth",
    "UserAccountAuth",
    "auth_from_env",
]
