"""Containers exchanged by the stealth address engine."""

from __future__ import annotations

from pydantic import Field

from stealth_pool.types import Bytes1, Bytes32, Bytes33, StrictBaseModel


class MetaAddress(StrictBaseModel):
    """
    A recipient's static, publishable stealth meta-address.

    Payers combine it with a fresh ephemeral key to derive a one-time
    destination. Publishing it reveals nothing about received payments.
    """

    spend_public_key: Bytes33
    """Compressed public key whose private half can spend stealth funds."""

    viewing_public_key: Bytes33
    """Compressed public key used by payers for ECDH."""


class MetaKeys(StrictBaseModel):
    """A meta-address together with the private keys that control it."""

    meta_address: MetaAddress

    spend_private_key: Bytes32 = Field(repr=False)
    """Private scalar for the spend key. Never logged."""

    viewing_private_key: Bytes32 = Field(repr=False)
    """Private scalar for the viewing key. Never logged."""


class EphemeralKeyPair(StrictBaseModel):
    """A single-use keypair generated by the payer for one payment."""

    private_key: Bytes32 = Field(repr=False)
    public_key: Bytes33


class StealthPayment(StrictBaseModel):
    """
    Everything a payer publishes alongside a stealth payment.

    The recipient needs `ephemeral_public_key` and `k` to re-derive the
    destination; `view_hint` lets them discard most foreign payments with
    a single ECDH.
    """

    stealth_address: str
    """EIP-55 checksummed EVM address of the one-time destination."""

    stealth_public_key: Bytes33
    """Compressed stealth public key `spend_pub + tweak * G`."""

    ephemeral_public_key: Bytes33
    view_hint: Bytes1
    k: int = Field(ge=0, lt=2**32)


class KeyValidation(StrictBaseModel):
    """Outcome of validating an encoded public key."""

    valid: bool
    reason: str | None = None
    """Why the key was rejected. None when `valid` is True."""


class Announcement(StrictBaseModel):
    """
    A `StealthPaymentReceived` event observed on a destination chain.

    Scanners test every announcement against the recipient's keys.
    """

    source_chain: str
    stealth_address: str
    amount: int = Field(ge=0)
    symbol: str
    ephemeral_public_key: Bytes33
    view_hint: Bytes1
    k: int = Field(ge=0, lt=2**32)
    block_number: int = Field(default=0, ge=0)
    transaction_hash: Bytes32 | None = None


class ScanMatch(StrictBaseModel):
    """An announcement confirmed to belong to the scanning recipient."""

    announcement: Announcement

    stealth_private_key: Bytes32 = Field(repr=False)
    """Private key controlling `announcement.stealth_address`."""
