"""secp256k1 curve arithmetic, key generation and ECDH."""

from .curve import (
    COMPRESSED_PUBKEY_SIZE,
    G,
    N,
    P,
    Point,
    UNCOMPRESSED_PUBKEY_SIZE,
    compress_point,
    decode_point,
    is_on_curve,
    point_add,
    point_mul,
    pubkey_to_uncompressed,
    uncompress_point,
)
from .keys import (
    ecdh_agree,
    generate_keypair,
    private_key_from_scalar,
    public_key_from_private,
    scalar_from_private_key,
)

__all__ = [
    "P",
    "N",
    "G",
    "Point",
    "COMPRESSED_PUBKEY_SIZE",
    "UNCOMPRESSED_PUBKEY_SIZE",
    "point_add",
    "point_mul",
    "is_on_curve",
    "compress_point",
    "uncompress_point",
    "decode_point",
    "pubkey_to_uncompressed",
    "ecdh_agree",
    "generate_keypair",
    "private_key_from_scalar",
    "public_key_from_private",
    "scalar_from_private_key",
]
