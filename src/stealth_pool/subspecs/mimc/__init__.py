"""Specification for the MiMC sponge permutation used by the commitment tree."""

from .constants import MIMC_ROUNDS, MIMC_SEED, ROUND_CONSTANTS, generate_round_constants
from .sponge import MIMC_SPONGE_PARAMS, MimcParams, hash2, hash2_int, permute

__all__ = [
    "permute",
    "hash2",
    "hash2_int",
    "MimcParams",
    "MIMC_SPONGE_PARAMS",
    "MIMC_ROUNDS",
    "MIMC_SEED",
    "ROUND_CONSTANTS",
    "generate_round_constants",
]
