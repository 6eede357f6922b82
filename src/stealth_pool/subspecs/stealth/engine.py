"""
Stealth address derivation and recovery.

A payer who knows a recipient's meta-address `(S, V)` picks an ephemeral
keypair `(e, E)` and a counter `k`, then computes:

    shared  = compress(e * V)                 (33 bytes)
    tweak   = SHA-256(shared || k_be32) mod n
    P       = S + tweak * G                   (stealth public key)
    address = keccak256(uncompressed(P)[1:])[12:]
    hint    = shared[0]

The recipient computes the same `shared` as `v * E` and spends with
`p = s + tweak mod n`, which satisfies `p * G = P`.

Every function here is pure: no I/O, no logging of key material.
"""

from __future__ import annotations

from stealth_pool.types import Bytes1, Bytes32, Bytes33, InvalidKey

from ..hashing import sha256
from ..secp256k1 import (
    COMPRESSED_PUBKEY_SIZE,
    G,
    N,
    compress_point,
    decode_point,
    ecdh_agree,
    generate_keypair,
    point_add,
    point_mul,
    private_key_from_scalar,
    public_key_from_private,
    scalar_from_private_key,
)
from .address import address_to_bytes, public_key_to_address
from .containers import (
    EphemeralKeyPair,
    KeyValidation,
    MetaAddress,
    MetaKeys,
    StealthPayment,
)

_COMPRESSED_TAGS = (0x02, 0x03)

MAX_COUNTER = 2**32 - 1
"""The largest payment counter; k is hashed as a big-endian uint32."""


def validate_public_key(public_key: bytes) -> KeyValidation:
    """
    Check that `public_key` is a 33-byte compressed point on secp256k1.

    Returns a result instead of raising so that callers can surface the
    reason to a user without a try/except.
    """
    if len(public_key) != COMPRESSED_PUBKEY_SIZE:
        return KeyValidation(
            valid=False,
            reason=f"expected {COMPRESSED_PUBKEY_SIZE} bytes, got {len(public_key)}",
        )
    if public_key[0] not in _COMPRESSED_TAGS:
        return KeyValidation(valid=False, reason=f"invalid prefix 0x{public_key[0]:02x}")
    try:
        decode_point(public_key)
    except InvalidKey:
        return KeyValidation(valid=False, reason="point is not on secp256k1")
    return KeyValidation(valid=True)


def _require_public_key(public_key: bytes, role: str) -> None:
    result = validate_public_key(public_key)
    if not result.valid:
        raise InvalidKey(f"{role}: {result.reason}")


def generate_meta_address() -> MetaKeys:
    """Generate fresh spend and viewing keypairs for a new recipient."""
    spend_private, spend_public = generate_keypair()
    viewing_private, viewing_public = generate_keypair()
    return MetaKeys(
        meta_address=MetaAddress(
            spend_public_key=spend_public,
            viewing_public_key=viewing_public,
        ),
        spend_private_key=spend_private,
        viewing_private_key=viewing_private,
    )


def generate_ephemeral_key_pair() -> EphemeralKeyPair:
    """Generate a single-use keypair for one payment."""
    private_key, public_key = generate_keypair()
    return EphemeralKeyPair(private_key=private_key, public_key=public_key)


def compute_tweak(shared_secret: bytes, k: int) -> int:
    """
    Derive the scalar tweak for a shared secret and counter.

    Raises:
        InvalidKey: If `k` does not fit in a uint32.
    """
    if not 0 <= k <= MAX_COUNTER:
        raise InvalidKey(f"k must fit in uint32, got {k}")
    k_bytes = k.to_bytes(4, "big")
    return int.from_bytes(sha256(bytes(shared_secret) + k_bytes), "big") % N


def view_hint_from_shared_secret(shared_secret: bytes) -> Bytes1:
    """
    The first byte of the compressed shared point.

    This is the point's parity tag (0x02 or 0x03), so it discards only about
    half of foreign payments. Matches are always confirmed by re-derivation.
    """
    return Bytes1(bytes(shared_secret)[:1])


def _stealth_public_key(spend_public_key: bytes, tweak: int) -> Bytes33:
    spend_point = decode_point(spend_public_key)
    stealth_point = point_add(spend_point, point_mul(tweak, G))
    if stealth_point is None:
        raise InvalidKey("stealth public key is the point at infinity")
    return compress_point(stealth_point)


def derive_stealth_address(
    meta_address: MetaAddress,
    ephemeral_private_key: bytes | None = None,
    k: int = 0,
) -> StealthPayment:
    """
    Derive a one-time stealth destination for a recipient.

    Args:
        meta_address: The recipient's published meta-address.
        ephemeral_private_key: Payer's single-use private key. A fresh one is
            generated when omitted.
        k: Counter distinguishing several payments under one ephemeral key.

    Returns:
        The stealth address plus the values the payer must publish.

    Raises:
        InvalidKey: If a meta-address key or the ephemeral key is malformed,
            or `k` does not fit in a uint32.
    """
    _require_public_key(meta_address.spend_public_key, "spend public key")
    _require_public_key(meta_address.viewing_public_key, "viewing public key")

    if ephemeral_private_key is None:
        ephemeral_private_key = generate_ephemeral_key_pair().private_key
    ephemeral_public_key = public_key_from_private(ephemeral_private_key)

    shared_secret = ecdh_agree(ephemeral_private_key, meta_address.viewing_public_key)
    tweak = compute_tweak(shared_secret, k)
    stealth_public_key = _stealth_public_key(meta_address.spend_public_key, tweak)

    return StealthPayment(
        stealth_address=public_key_to_address(stealth_public_key),
        stealth_public_key=stealth_public_key,
        ephemeral_public_key=ephemeral_public_key,
        view_hint=view_hint_from_shared_secret(shared_secret),
        k=int(k),
    )


def recover_stealth_private_key(
    viewing_private_key: bytes,
    spend_private_key: bytes,
    ephemeral_public_key: bytes,
    k: int,
) -> Bytes32:
    """
    Recover the private key controlling a stealth address.

    Raises:
        InvalidKey: If a key is malformed, `k` does not fit in a uint32,
            or the recovered scalar is zero.
    """
    _require_public_key(ephemeral_public_key, "ephemeral public key")

    shared_secret = ecdh_agree(viewing_private_key, ephemeral_public_key)
    tweak = compute_tweak(shared_secret, k)
    spend = scalar_from_private_key(spend_private_key)
    return private_key_from_scalar(spend + tweak)


def check_view_hint(
    viewing_private_key: bytes, ephemeral_public_key: bytes, view_hint: bytes
) -> bool:
    """
    Cheap pre-filter: does the announced hint match our shared secret?

    A malformed ephemeral key never matches.
    """
    try:
        shared_secret = ecdh_agree(viewing_private_key, ephemeral_public_key)
    except InvalidKey:
        return False
    return bytes(view_hint_from_shared_secret(shared_secret)) == bytes(view_hint)


def matches_stealth_address(
    viewing_private_key: bytes,
    spend_public_key: bytes,
    ephemeral_public_key: bytes,
    k: int,
    stealth_address: str,
) -> bool:
    """
    Confirm ownership of a stealth address by full re-derivation.

    Needs only the viewing private key, so a watch-only scanner can run
    without access to the spend key.
    """
    try:
        shared_secret = ecdh_agree(viewing_private_key, ephemeral_public_key)
        tweak = compute_tweak(shared_secret, k)
        expected = _stealth_public_key(spend_public_key, tweak)
        return address_to_bytes(public_key_to_address(expected)) == address_to_bytes(
            stealth_address
        )
    except (InvalidKey, ValueError):
        return False
