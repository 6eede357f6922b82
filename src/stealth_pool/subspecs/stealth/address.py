"""
EVM account addresses for stealth public keys.

An address is the trailing 20 bytes of keccak-256 over the 64-byte
uncompressed public key with its 0x04 tag removed. The string form uses the
EIP-55 mixed-case checksum.
"""

from __future__ import annotations

from stealth_pool.types import Bytes20

from ..hashing import keccak256
from ..secp256k1 import pubkey_to_uncompressed

ADDRESS_SIZE = 20
"""Number of trailing digest bytes kept as the address."""


def public_key_to_address_bytes(public_key: bytes) -> Bytes20:
    """
    Truncate keccak-256 of the untagged uncompressed key to 20 bytes.

    Raises:
        InvalidKey: If `public_key` is not an encoded secp256k1 point.
    """
    uncompressed = pubkey_to_uncompressed(public_key)
    digest = keccak256(bytes(uncompressed)[1:])
    return Bytes20(bytes(digest)[-ADDRESS_SIZE:])


def to_checksum_address(address: bytes | str) -> str:
    """
    Format a 20-byte address with the EIP-55 checksum.

    A hex letter is upper-cased when the matching nibble of
    keccak-256(lowercase hex address) is 8 or above.
    """
    raw = Bytes20(address)
    lower = raw.hex()
    digest = keccak256(lower.encode("ascii")).hex()
    return "0x" + "".join(
        char.upper() if int(digest[i], 16) >= 8 else char for i, char in enumerate(lower)
    )


def is_checksum_address(address: str) -> bool:
    """Return True when `address` is a well-formed, correctly checksummed address."""
    try:
        return to_checksum_address(address) == address
    except ValueError:
        return False


def public_key_to_address(public_key: bytes) -> str:
    """Derive the checksummed EVM address of a secp256k1 public key."""
    return to_checksum_address(public_key_to_address_bytes(public_key))


def address_to_bytes(address: str) -> Bytes20:
    """Parse a hex address string, ignoring its checksum casing."""
    return Bytes20(address.lower())
