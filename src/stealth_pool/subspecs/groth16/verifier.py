"""
Groth16 verification over BN254.

A proof `(A, B, C)` is accepted for public inputs `x_1..x_n` when

    e(A, B) = e(alpha, beta) * e(vk_x, gamma) * e(C, delta)

with `vk_x = IC_0 + sum(x_i * IC_i)`. The check is evaluated as a single
product that must equal one:

    e(-A, B) * e(alpha, beta) * e(vk_x, gamma) * e(C, delta) == 1

Each Miller loop skips its final exponentiation; one final exponentiation
is applied to the product. Pairing arithmetic comes from py_ecc.
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence, Tuple

from py_ecc.optimized_bn128 import (
    FQ,
    FQ2,
    FQ12,
    Z1,
    add,
    b,
    b2,
    curve_order,
    field_modulus,
    final_exponentiate,
    is_inf,
    is_on_curve,
    multiply,
    neg,
    pairing,
)

from ..bn254 import SNARK_SCALAR_FIELD
from .containers import G1Point, G2Point, Groth16Proof, VerifyingKey

logger = logging.getLogger(__name__)

G1Jacobian = Tuple[FQ, FQ, FQ]
G2Jacobian = Tuple[FQ2, FQ2, FQ2]


class ProofVerifier(Protocol):
    """Anything that can check a withdrawal proof."""

    def verify(self, proof: Groth16Proof, public_inputs: Sequence[int]) -> bool:
        """Return True when `proof` is valid for `public_inputs`."""
        ...


def to_g1(point: G1Point) -> G1Jacobian:
    """
    Lift an affine G1 point into py_ecc's representation.

    `(0, 0)` encodes the point at infinity, as in the EVM precompiles.

    Raises:
        ValueError: If a coordinate is out of range or the point is off the curve.
    """
    x, y = point
    if not (0 <= x < field_modulus and 0 <= y < field_modulus):
        raise ValueError("G1 coordinate out of range")
    if x == 0 and y == 0:
        return Z1
    lifted = (FQ(x), FQ(y), FQ.one())
    if not is_on_curve(lifted, b):
        raise ValueError("G1 point is not on the curve")
    return lifted


def to_g2(point: G2Point) -> G2Jacobian:
    """
    Lift an affine G2 point into py_ecc's representation.

    Raises:
        ValueError: If a coordinate is out of range, the point is off the
            twist, or it lies outside the prime-order subgroup.
    """
    (x0, x1), (y0, y1) = point
    if not all(0 <= c < field_modulus for c in (x0, x1, y0, y1)):
        raise ValueError("G2 coordinate out of range")
    lifted = (FQ2([x0, x1]), FQ2([y0, y1]), FQ2.one())
    if not is_on_curve(lifted, b2):
        raise ValueError("G2 point is not on the twist")
    if not is_inf(multiply(lifted, curve_order)):
        raise ValueError("G2 point is not in the prime-order subgroup")
    return lifted


def compute_vk_x(vk: VerifyingKey, public_inputs: Sequence[int]) -> G1Jacobian:
    """Fold the public inputs into `IC_0 + sum(x_i * IC_i)`."""
    acc = to_g1(vk.ic[0])
    for value, point in zip(public_inputs, vk.ic[1:], strict=True):
        acc = add(acc, multiply(to_g1(point), value))
    return acc


def verify(vk: VerifyingKey, proof: Groth16Proof, public_inputs: Sequence[int]) -> bool:
    """
    Check a Groth16 proof.

    Args:
        vk: Verifying key of the circuit.
        proof: The proof to check.
        public_inputs: One field element per public input, in circuit order.

    Returns:
        True when the proof is valid. Malformed points and out-of-field
        inputs make the proof invalid rather than raising.

    Raises:
        ValueError: If the number of inputs does not match the key.
    """
    if len(public_inputs) != vk.n_public:
        raise ValueError(f"Expected {vk.n_public} public inputs, got {len(public_inputs)}")

    if not all(0 <= value < SNARK_SCALAR_FIELD for value in public_inputs):
        logger.debug("Rejecting proof: public input outside the scalar field")
        return False

    try:
        a = to_g1(proof.a)
        b_point = to_g2(proof.b)
        c = to_g1(proof.c)
    except ValueError as exc:
        logger.debug("Rejecting proof: %s", exc)
        return False

    vk_x = compute_vk_x(vk, public_inputs)

    product = FQ12.one()
    for g2_point, g1_point in (
        (b_point, neg(a)),
        (to_g2(vk.beta_2), to_g1(vk.alpha_1)),
        (to_g2(vk.gamma_2), vk_x),
        (to_g2(vk.delta_2), c),
    ):
        product = product * pairing(g2_point, g1_point, final_exponentiate=False)

    return final_exponentiate(product) == FQ12.one()


class Groth16Verifier:
    """`ProofVerifier` backed by a fixed verifying key."""

    def __init__(self, vk: VerifyingKey) -> None:
        self.vk = vk

    def verify(self, proof: Groth16Proof, public_inputs: Sequence[int]) -> bool:
        """Check `proof` against this verifier's key."""
        return verify(self.vk, proof, public_inputs)
