"""Pydantic models for the values published through a checkpoint syncer.

Four kinds of value are stored:
- SignedCheckpointWithMessageId: one object per checkpoint index (append-only)
- AgentMetadata: single slot, overwritten on every write
- SignedAnnouncement: single slot, tells readers where checkpoints live
- ReorgEvent: single slot, flags that the origin chain reorganized
"""

from __future__ import annotations

from typing import Annotated, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# ---------------------------------------------------------------------------
# Primitive shapes
# ---------------------------------------------------------------------------

MAX_CHECKPOINT_INDEX = 2**32 - 1

H256_PATTERN = r"^0x[0-9a-fA-F]{64}$"
H160_PATTERN = r"^0x[0-9a-fA-F]{40}$"

CheckpointIndex = Annotated[int, Field(ge=0, le=MAX_CHECKPOINT_INDEX)]
H256 = Annotated[str, Field(pattern=H256_PATTERN)]
H160 = Annotated[str, Field(pattern=H160_PATTERN)]

# Validate latest-index objects with strict=True: only a bare JSON integer is accepted.
INDEX_ADAPTER: TypeAdapter[int] = TypeAdapter(CheckpointIndex)


def check_index(index: int) -> int:
    """Validate a caller-supplied checkpoint index. Raises ValueError."""
    if isinstance(index, bool) or not isinstance(index, int):
        raise ValueError(f"checkpoint index must be an int, got {type(index).__name__}")
    if not 0 <= index <= MAX_CHECKPOINT_INDEX:
        raise ValueError(f"checkpoint index {index} outside [0, {MAX_CHECKPOINT_INDEX}]")
    return index


class Signature(BaseModel):
    """ECDSA signature split into its r, s, v components."""

    model_config = ConfigDict(frozen=True)

    r: str
    s: str
    v: int


# ---------------------------------------------------------------------------
# Checkpoints
# ---------------------------------------------------------------------------


class CheckpointWithMessageId(BaseModel):
    """Merkle tree checkpoint plus the id of the message that produced it."""

    model_config = ConfigDict(frozen=True)

    merkle_tree_hook_address: H256
    mailbox_domain: int = Field(ge=0, le=MAX_CHECKPOINT_INDEX)
    root: H256
    index: CheckpointIndex
    message_id: H256


class SignedCheckpointWithMessageId(BaseModel):
    """A checkpoint as published by a validator. Immutable once written."""

    model_config = ConfigDict(frozen=True)

    value: CheckpointWithMessageId
    signature: Signature

    @property
    def index(self) -> int:
        return self.value.index


# ---------------------------------------------------------------------------
# Single-slot values
# ---------------------------------------------------------------------------


class AgentMetadata(BaseModel):
    """Build information of the publishing agent.

    Unknown fields are kept so newer agents can add to the object without
    older readers dropping them on a rewrite.
    """

    model_config = ConfigDict(extra="allow")

    git_sha: str


class Announcement(BaseModel):
    """Statement of where a validator publishes its checkpoints."""

    model_config = ConfigDict(frozen=True)

    validator: H160
    mailbox_address: H256
    mailbox_domain: int = Field(ge=0, le=MAX_CHECKPOINT_INDEX)
    storage_location: str


class SignedAnnouncement(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: Announcement
    signature: Signature


class ReorgEvent(BaseModel):
    """Raised by a validator that saw its local merkle root diverge from
    the canonical one at `checkpoint_index`."""

    model_config = ConfigDict(frozen=True)

    local_merkle_root: H256
    canonical_merkle_root: H256
    checkpoint_index: CheckpointIndex
    unix_timestamp: int = Field(ge=0)
    reorg_period: Union[int, str]


__all__ = [
    "MAX_CHECKPOINT_INDEX",
    "INDEX_ADAPTER",
    "AgentMetadata",
    "Announcement",
    "CheckpointIndex",
    "CheckpointWithMessageId",
    "ReorgEvent",
    "Signature",
    "SignedAnnouncement",
    "SignedCheckpointWithMessageId",
    "check_index",
]
