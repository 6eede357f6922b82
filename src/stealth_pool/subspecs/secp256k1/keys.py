"""
Key generation, scalar validation and ECDH for secp256k1.

Private keys are 32-byte big-endian scalars in [1, n). Public keys travel in
33-byte compressed form everywhere in the protocol: meta-addresses, the
ephemeral key published with each payment, and ECDH shared secrets.
"""

from __future__ import annotations

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from stealth_pool.types import Bytes32, Bytes33, InvalidKey

from .curve import G, N, PRIVATE_KEY_SIZE, compress_point, decode_point, point_mul


def scalar_from_private_key(private_key_bytes: bytes) -> int:
    """
    Interpret a 32-byte private key as a scalar.

    Raises:
        InvalidKey: If the key has the wrong length or is outside [1, n).
    """
    if len(private_key_bytes) != PRIVATE_KEY_SIZE:
        raise InvalidKey(
            f"private key must be {PRIVATE_KEY_SIZE} bytes, got {len(private_key_bytes)}"
        )

    scalar = int.from_bytes(private_key_bytes, "big")
    if not 0 < scalar < N:
        raise InvalidKey("private key scalar is outside [1, n)")
    return scalar


def private_key_from_scalar(scalar: int) -> Bytes32:
    """
    Encode a scalar as a 32-byte private key.

    Raises:
        InvalidKey: If the scalar is zero modulo n.
    """
    scalar %= N
    if scalar == 0:
        raise InvalidKey("derived private key is zero")
    return Bytes32(scalar.to_bytes(PRIVATE_KEY_SIZE, "big"))


def generate_keypair() -> tuple[Bytes32, Bytes33]:
    """
    Generate a new secp256k1 keypair from the operating system's CSPRNG.

    Returns:
        Tuple of (private_key_bytes, compressed_public_key_bytes).
    """
    private_key = ec.generate_private_key(ec.SECP256K1())

    private_bytes = private_key.private_numbers().private_value.to_bytes(PRIVATE_KEY_SIZE, "big")
    public_bytes = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.CompressedPoint,
    )

    return Bytes32(private_bytes), Bytes33(public_bytes)


def public_key_from_private(private_key_bytes: bytes) -> Bytes33:
    """Derive the compressed public key for a private key."""
    scalar = scalar_from_private_key(private_key_bytes)
    point = point_mul(scalar, G)
    # A scalar in [1, n) never maps to infinity.
    assert point is not None
    return compress_point(point)


def ecdh_agree(private_key_bytes: bytes, public_key_bytes: bytes) -> Bytes33:
    """
    Perform secp256k1 ECDH key agreement.

    Both parties compute the same shared secret from their private key
    and the other party's public key. The shared secret is the 33-byte
    compressed point `priv * pub`.

    Args:
        private_key_bytes: 32-byte secp256k1 private key scalar.
        public_key_bytes: 33-byte compressed or 65-byte uncompressed public key.

    Returns:
        33-byte shared secret (compressed point from ECDH).

    Raises:
        InvalidKey: If either key is malformed.
    """
    scalar = scalar_from_private_key(private_key_bytes)
    point = decode_point(public_key_bytes)
    result = point_mul(scalar, point)

    if result is None:
        raise InvalidKey("ECDH produced point at infinity")

    return compress_point(result)
