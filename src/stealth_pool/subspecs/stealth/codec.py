"""
Text encoding of meta-addresses.

A meta-address is shared as a single string:

    st:meta:<66 hex chars spend key><66 hex chars viewing key>

Both keys are compressed points. Decoding validates each key.
"""

from __future__ import annotations

from stealth_pool.types import Bytes33, InvalidKey

from .containers import MetaAddress
from .engine import validate_public_key

META_ADDRESS_PREFIX = "st:meta:"
"""Scheme prefix for encoded meta-addresses."""

_KEY_HEX_LENGTH = 2 * Bytes33.LENGTH


def encode_meta_address(meta_address: MetaAddress) -> str:
    """Encode a meta-address as `st:meta:<spend><viewing>`."""
    return (
        META_ADDRESS_PREFIX
        + meta_address.spend_public_key.hex()
        + meta_address.viewing_public_key.hex()
    )


def decode_meta_address(encoded: str) -> MetaAddress:
    """
    Parse and validate an encoded meta-address.

    Raises:
        InvalidKey: If the prefix, length, hex or either key is invalid.
    """
    if not encoded.startswith(META_ADDRESS_PREFIX):
        raise InvalidKey(f"meta-address must start with {META_ADDRESS_PREFIX!r}")

    body = encoded[len(META_ADDRESS_PREFIX) :]
    if len(body) != 2 * _KEY_HEX_LENGTH:
        raise InvalidKey(f"meta-address body must be {2 * _KEY_HEX_LENGTH} hex chars")

    try:
        spend = Bytes33(body[:_KEY_HEX_LENGTH])
        viewing = Bytes33(body[_KEY_HEX_LENGTH:])
    except ValueError as exc:
        raise InvalidKey("meta-address is not valid hex") from exc

    for role, key in (("spend", spend), ("viewing", viewing)):
        result = validate_public_key(key)
        if not result.valid:
            raise InvalidKey(f"{role} public key: {result.reason}")

    return MetaAddress(spend_public_key=spend, viewing_public_key=viewing)
