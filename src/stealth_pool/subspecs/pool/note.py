"""
Deposit notes.

A note is the depositor's secret receipt. Its commitment goes into the tree
publicly; the nullifier and secret stay private until a withdrawal proves
knowledge of them.

    commitment     = hash2(nullifier, secret)
    nullifier_hash = hash2(nullifier, 0)

Notes serialize to camelCase JSON with decimal-string field elements, the
format the withdrawal tooling reads.
"""

from __future__ import annotations

import secrets
import time

from pydantic import Field, model_validator

from stealth_pool.types import Bytes20, StrictBaseModel

from ..bn254 import FieldElement
from ..mimc import hash2_int

NOTE_RANDOM_BYTES = 31
"""Size of the random nullifier and secret. 248 bits is always below the field modulus."""


def commitment_for(nullifier: int, secret: int) -> int:
    """The leaf inserted into the tree for a note."""
    return hash2_int(nullifier, secret)


def nullifier_hash_for(nullifier: int) -> int:
    """The public value that marks a note as spent."""
    return hash2_int(nullifier, 0)


class Note(StrictBaseModel):
    """A deposit note with its derived public values."""

    nullifier: FieldElement = Field(repr=False)
    secret: FieldElement = Field(repr=False)
    commitment: FieldElement
    nullifier_hash: FieldElement
    denomination: int = Field(gt=0)
    pool_address: Bytes20
    leaf_index: int | None = Field(default=None, ge=0)
    """Set once the deposit is observed on chain."""
    created_at: int = Field(default=0, ge=0)
    """Unix timestamp of note creation."""

    @model_validator(mode="after")
    def check_derived_values(self) -> Note:
        """The commitment and nullifier hash must match the preimages."""
        if self.commitment != commitment_for(self.nullifier, self.secret):
            raise ValueError("commitment does not match nullifier and secret")
        if self.nullifier_hash != nullifier_hash_for(self.nullifier):
            raise ValueError("nullifier hash does not match nullifier")
        return self

    @classmethod
    def from_secrets(
        cls,
        nullifier: int,
        secret: int,
        denomination: int,
        pool_address: Bytes20,
        created_at: int | None = None,
    ) -> Note:
        """Build a note from its private values."""
        return cls(
            nullifier=nullifier,
            secret=secret,
            commitment=commitment_for(nullifier, secret),
            nullifier_hash=nullifier_hash_for(nullifier),
            denomination=denomination,
            pool_address=pool_address,
            created_at=int(time.time()) if created_at is None else created_at,
        )


def generate_note(denomination: int, pool_address: Bytes20) -> Note:
    """Create a note with fresh random nullifier and secret."""
    nullifier = int.from_bytes(secrets.token_bytes(NOTE_RANDOM_BYTES), "big")
    secret = int.from_bytes(secrets.token_bytes(NOTE_RANDOM_BYTES), "big")
    return Note.from_secrets(nullifier, secret, denomination, pool_address)
