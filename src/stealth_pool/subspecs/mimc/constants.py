"""
Round constants for the MiMC sponge permutation.

The constants follow the circomlib `MiMCSponge` derivation so that a tree
built here matches one built by the circuit:

    h_0 = keccak256("mimcsponge")
    h_i = keccak256(h_{i-1})
    c_i = int(h_i) mod r          for 1 <= i < ROUNDS - 1
    c_0 = c_{ROUNDS - 1} = 0
"""

from typing import Final, List

from ..bn254 import Fr
from ..hashing import keccak256

MIMC_SEED: Final = b"mimcsponge"
"""Seed string hashed to start the constant chain."""

MIMC_ROUNDS: Final = 220
"""Number of Feistel rounds."""


def generate_round_constants(seed: bytes = MIMC_SEED, rounds: int = MIMC_ROUNDS) -> List[Fr]:
    """
    Derive the round constants from a seed by iterated keccak-256.

    Args:
        seed: Seed bytes.
        rounds: Number of rounds (and therefore constants).

    Returns:
        One constant per round. The first and last are zero.
    """
    if rounds < 2:
        raise ValueError("MiMC requires at least two rounds")

    constants = [Fr.zero()] * rounds
    digest = keccak256(seed)
    for i in range(1, rounds - 1):
        digest = keccak256(digest)
        constants[i] = Fr(value=int.from_bytes(digest, "big"))
    return constants


ROUND_CONSTANTS: Final[List[Fr]] = generate_round_constants()
"""The 220 constants used by `MiMCSponge(2, 220, 1)`."""
