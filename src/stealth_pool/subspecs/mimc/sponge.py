"""
The MiMC Feistel permutation used as the commitment tree hash.

The tree hash is the two-to-one compression used by the withdrawal circuit:
one call to the Feistel permutation over the BN254 scalar field with
exponent 5 and 220 rounds, keeping the left output lane.

The design is based on "MiMC: Efficient Encryption and Cryptographic Hashing
with Minimal Multiplicative Complexity" (https://eprint.iacr.org/2016/492),
in the Feistel form popularised by circomlib.
"""

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..bn254 import Fr
from .constants import MIMC_ROUNDS, ROUND_CONSTANTS

# =================================================================
# MiMC Parameter Definitions
# =================================================================

S_BOX_DEGREE = 5
"""
The S-box exponent `d`.

For fields where `gcd(d, r-1) = 1`, `x -> x^d` is a permutation.

For BN254, `d=5` is the smallest exponent that satisfies this.
"""


class MimcParams(BaseModel):
    """Parameters for a MiMC Feistel instance."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    rounds: int = Field(gt=1, description="Number of Feistel rounds.")
    round_constants: List[Fr] = Field(
        min_length=2,
        description="One additive constant per round.",
    )

    @model_validator(mode="after")
    def check_lengths(self) -> "MimcParams":
        """Ensures there is exactly one constant per round."""
        if len(self.round_constants) != self.rounds:
            raise ValueError("Number of round constants must equal the number of rounds.")
        return self


MIMC_SPONGE_PARAMS = MimcParams(rounds=MIMC_ROUNDS, round_constants=ROUND_CONSTANTS)
"""The circomlib `MiMCSponge` parameter set."""


def permute(
    x_left: Fr,
    x_right: Fr,
    key: Fr,
    params: MimcParams = MIMC_SPONGE_PARAMS,
) -> Tuple[Fr, Fr]:
    """
    Performs the full MiMC Feistel permutation on a two-lane state.

    Each round computes `t = xL + k + c_i` and feeds `t^5` into the right lane,
    then swaps the lanes. The final round does not swap.

    Args:
        x_left: Left lane input.
        x_right: Right lane input.
        key: The permutation key (zero for hashing).
        params: The object defining the permutation's configuration.

    Returns:
        The `(xL, xR)` lanes after the permutation.
    """
    last = params.rounds - 1

    for i, constant in enumerate(params.round_constants):
        t = x_left + key + constant
        t5 = t**S_BOX_DEGREE

        if i < last:
            x_left, x_right = x_right + t5, x_left
        else:
            x_right = x_right + t5

    return x_left, x_right


def hash2(left: Fr, right: Fr) -> Fr:
    """
    Compress two field elements into one.

    This is `MiMCSponge.hash(left, right, 0).xL`, the node hash of the
    commitment tree and the commitment/nullifier hash of a note.
    """
    x_left, _ = permute(left, right, Fr.zero())
    return x_left


def hash2_int(left: int, right: int) -> int:
    """Integer convenience wrapper around `hash2` for callers holding raw values."""
    return hash2(Fr(value=left), Fr(value=right)).value
