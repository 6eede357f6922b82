"""
Tightly packed encoding, as produced by Solidity's `abi.encodePacked`.

Packed encoding concatenates values without padding or length prefixes:

- `string` / `bytes`: raw bytes, no length prefix
- `address`: 20 bytes
- `bytesN`: exactly N bytes
- `uintN`: N/8 bytes, big-endian

The encoding is ambiguous when two dynamic values sit next to each other.
The withdrawal binding packs up to three dynamic values (the destination
chain, the ephemeral key and a token symbol), each separated by fixed width
fields. Its digest is only ever recomputed from typed inputs, never decoded.
"""

from __future__ import annotations

from typing import Any, Sequence

from eth_abi.packed import encode_packed


def _plain(value: Any) -> Any:
    """Strip fixed-width byte and integer subclasses down to builtins."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return int(value)
    return value


def solidity_packed(types: Sequence[str], values: Sequence[Any]) -> bytes:
    """
    Concatenate the packed encodings of `values` according to `types`.

    Raises:
        ValueError: If the number of types and values differ.
        eth_abi.exceptions.EncodingError: If a value does not fit its type.
    """
    if len(types) != len(values):
        raise ValueError(f"Got {len(types)} types for {len(values)} values")
    return encode_packed(list(types), [_plain(value) for value in values])
