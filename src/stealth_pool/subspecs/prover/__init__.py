"""Off-chain helpers that assemble withdrawal proofs."""

from .merkle_path import MerklePath, build_merkle_path, compute_root, verify_merkle_path
from .witness import PreparedWithdrawal, WithdrawalWitness, prepare_withdrawal

__all__ = [
    "MerklePath",
    "PreparedWithdrawal",
    "WithdrawalWitness",
    "build_merkle_path",
    "compute_root",
    "prepare_withdrawal",
    "verify_merkle_path",
]
