"""
General-purpose digests.

Two digests appear in the protocol:

- SHA-256 derives the stealth tweak from an ECDH shared secret.
- keccak-256 is the EVM hash: it turns a public key into an account address
  and binds withdrawal parameters into `ext_data_hash`.

Neither is used inside the circuit; the tree uses MiMC instead.
"""

from __future__ import annotations

import hashlib

from Crypto.Hash import keccak

from stealth_pool.types import Bytes32

from ..bn254 import mod_field


def keccak256(data: bytes) -> Bytes32:
    """
    Compute the legacy keccak-256 digest used by the EVM.

    This is NOT SHA3-256: the padding byte differs.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return Bytes32(k.digest())


def sha256(data: bytes) -> Bytes32:
    """Compute the SHA-256 digest."""
    return Bytes32(hashlib.sha256(data).digest())


def to_field(digest: bytes) -> int:
    """
    Interpret a digest as a big-endian integer reduced into the BN254 scalar field.

    Reducing a uniform 256-bit value modulo a 254-bit prime skews the result
    slightly toward small values. The reduction mirrors what the pool contract
    does, so it is kept bit-for-bit.
    """
    return mod_field(int.from_bytes(digest, "big"))
