"""
secp256k1 group arithmetic.

Stealth addresses need two operations that high-level ECDH APIs hide:

- the full shared point (not just its x coordinate), compressed to 33 bytes
- point addition, to offset the spend key by `tweak * G`

Both are implemented here with affine coordinates. Parsing and validation of
encoded points is delegated to `cryptography`, which rejects points that are
not on the curve.

References:
- SEC 2: Recommended Elliptic Curve Domain Parameters, section 2.4.1
"""

from __future__ import annotations

from typing import Final, Tuple

from cryptography.hazmat.primitives.asymmetric import ec

from stealth_pool.types import Bytes33, Bytes65, InvalidKey

Point = Tuple[int, int]
"""An affine curve point (x, y). The point at infinity is represented by None."""

COMPRESSED_PUBKEY_SIZE: Final = 33
"""Compressed secp256k1 public key: 0x02/0x03 + 32-byte x coordinate."""

UNCOMPRESSED_PUBKEY_SIZE: Final = 65
"""Uncompressed secp256k1 public key: 0x04 + 32-byte x + 32-byte y."""

PRIVATE_KEY_SIZE: Final = 32
"""Private scalar size in bytes."""

P: Final = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
"""secp256k1 field prime."""

N: Final = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
"""secp256k1 curve order."""

G: Final[Point] = (
    0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
    0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
)
"""secp256k1 generator."""


def _modinv(a: int, m: int) -> int:
    """Compute modular inverse using Fermat's little theorem (m must be prime)."""
    return pow(a, m - 2, m)


def point_add(p1: Point | None, p2: Point | None) -> Point | None:
    """Add two secp256k1 curve points."""
    if p1 is None:
        return p2
    if p2 is None:
        return p1

    x1, y1 = p1
    x2, y2 = p2

    if x1 == x2 and y1 != y2:
        return None

    if x1 == x2:
        # Point doubling.
        lam = (3 * x1 * x1 * _modinv(2 * y1, P)) % P
    else:
        lam = ((y2 - y1) * _modinv(x2 - x1, P)) % P

    x3 = (lam * lam - x1 - x2) % P
    y3 = (lam * (x1 - x3) - y1) % P
    return (x3, y3)


def point_mul(k: int, point: Point | None) -> Point | None:
    """Scalar multiplication using double-and-add."""
    result = None
    addend = point
    k %= N
    while k:
        if k & 1:
            result = point_add(result, addend)
        addend = point_add(addend, addend)
        k >>= 1
    return result


def is_on_curve(point: Point) -> bool:
    """Check y^2 = x^3 + 7 (mod p)."""
    x, y = point
    return (y * y - x * x * x - 7) % P == 0


def compress_point(point: Point) -> Bytes33:
    """Encode a curve point as 33-byte compressed format."""
    x, y = point
    prefix = 0x02 if y % 2 == 0 else 0x03
    return Bytes33(bytes([prefix]) + x.to_bytes(32, "big"))


def uncompress_point(point: Point) -> Bytes65:
    """Encode a curve point as 65-byte uncompressed format."""
    x, y = point
    return Bytes65(b"\x04" + x.to_bytes(32, "big") + y.to_bytes(32, "big"))


def decode_point(data: bytes) -> Point:
    """
    Parse a compressed or uncompressed secp256k1 public key to (x, y).

    Raises:
        InvalidKey: If the encoding is malformed or the point is not on the curve.
    """
    if len(data) not in (COMPRESSED_PUBKEY_SIZE, UNCOMPRESSED_PUBKEY_SIZE):
        raise InvalidKey(f"public key must be 33 or 65 bytes, got {len(data)}")

    try:
        public_key = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), bytes(data))
    except ValueError as exc:
        # The library message describes the encoding, never the key itself.
        raise InvalidKey(f"not a point on secp256k1 ({exc})") from exc

    numbers = public_key.public_numbers()
    return (numbers.x, numbers.y)


def pubkey_to_uncompressed(public_key_bytes: bytes) -> Bytes65:
    """
    Convert any secp256k1 public key to uncompressed format.

    Args:
        public_key_bytes: 33-byte compressed or 65-byte uncompressed public key.

    Returns:
        65-byte uncompressed public key (0x04 || x || y).

    Raises:
        InvalidKey: If the encoding is malformed or the point is not on the curve.
    """
    return uncompress_point(decode_point(public_key_bytes))
