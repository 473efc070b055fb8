"""Checkpoint publishing for cross-chain relaying agents.

Validators publish signed checkpoints, an announcement, agent metadata and
reorg flags to an object store; relayers read them back. Each logical
store (bucket + optional folder, or a local directory) is accessed through
one CheckpointSyncer.
"""

from .config import (
    CheckpointSyncerConf,
    NoAuth,
    ServiceAccountAuth,
    UserAccountAuth,
    auth_from_env,
)
from .errors import (
    DecodeFailure,
    InvalidStoreIdentity,
    ObjectNotFound,
    SyncerConfigError,
    SyncerError,
    TransportFailure,
)
from .models import (
    AgentMetadata,
    Announcement,
    CheckpointWithMessageId,
    ReorgEvent,
    Signature,
    SignedAnnouncement,
    SignedCheckpointWithMessageId,
)
from .store import CheckpointSyncer, GcsStorageClientBuilder, ObjectSyncer, build_syncer

__all__ = [
    "AgentMetadata",
    "Announcement",
    "CheckpointSyncer",
    "CheckpointSyncerConf",
    "CheckpointWithMessageId",
    "DecodeFailure",
    "GcsStorageClientBuilder",
    "InvalidStoreIdentity",
    "NoAuth",
    "ObjectNotFound",
    "ObjectSyncer",
    "ReorgEvent",
    "ServiceAccountAuth",
    "Signature",
    "SignedAnnouncement",
    "SignedCheckpointWithMessageId",
    "SyncerConfigError",
    "SyncerError",
    "TransportFailure",
    "UserAccountAuth",
    "auth_from_env",
    "build_syncer",
]
