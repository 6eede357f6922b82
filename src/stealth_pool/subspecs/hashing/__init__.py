"""General-purpose digests and Solidity-style packing."""

from .digest import keccak256, sha256, to_field
from .packing import solidity_packed

__all__ = [
    "keccak256",
    "sha256",
    "to_field",
    "solidity_packed",
]
