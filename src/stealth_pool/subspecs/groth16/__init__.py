"""Groth16 proof verification over BN254."""

from .containers import CircuitInputs, G1Point, G2Point, Groth16Proof, VerifyingKey
from .verifier import Groth16Verifier, ProofVerifier, compute_vk_x, to_g1, to_g2, verify

__all__ = [
    "CircuitInputs",
    "G1Point",
    "G2Point",
    "Groth16Proof",
    "Groth16Verifier",
    "ProofVerifier",
    "VerifyingKey",
    "compute_vk_x",
    "to_g1",
    "to_g2",
    "verify",
]
