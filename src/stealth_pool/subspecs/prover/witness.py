"""
Withdrawal witness assembly.

Collects everything the withdrawal circuit needs: the public inputs the pool
will check and the private note and path that satisfy them. The circuit
input is produced in the JSON shape snarkjs expects, with every number as a
decimal string.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence, Tuple

from pydantic import Field

from stealth_pool.types import InvalidRelayerFee, RootMismatch, StrictBaseModel

from ..bn254 import FieldElement
from ..groth16 import CircuitInputs
from ..pool import Note, PoolConfig, WithdrawalRequest, compute_ext_data_hash
from ..stealth import StealthPayment, address_to_bytes
from .merkle_path import MerklePath, build_merkle_path

logger = logging.getLogger(__name__)


class WithdrawalWitness(StrictBaseModel):
    """Public and private inputs of one withdrawal proof."""

    root: FieldElement
    nullifier_hash: FieldElement
    ext_data_hash: FieldElement
    nullifier: FieldElement = Field(repr=False)
    secret: FieldElement = Field(repr=False)
    path_elements: Tuple[int, ...]
    path_indices: Tuple[int, ...]

    @property
    def public_inputs(self) -> CircuitInputs:
        """The three public inputs, in circuit order."""
        return CircuitInputs(
            root=self.root,
            nullifier_hash=self.nullifier_hash,
            ext_data_hash=self.ext_data_hash,
        )

    def to_circuit_input(self) -> dict[str, Any]:
        """The snarkjs `input.json` form."""
        return {
            "root": str(self.root),
            "nullifierHash": str(self.nullifier_hash),
            "extDataHash": str(self.ext_data_hash),
            "nullifier": str(self.nullifier),
            "secret": str(self.secret),
            "pathElements": [str(element) for element in self.path_elements],
            "pathIndices": [str(index) for index in self.path_indices],
        }


class PreparedWithdrawal(StrictBaseModel):
    """A withdrawal request together with the witness that proves it."""

    request: WithdrawalRequest
    witness: WithdrawalWitness
    path: MerklePath


def prepare_withdrawal(
    note: Note,
    leaves: Sequence[int],
    payment: StealthPayment,
    destination_chain: str,
    config: PoolConfig,
    on_chain_root: int,
    relayer_fee: int = 0,
    gas_value: int = 0,
) -> PreparedWithdrawal:
    """
    Build the request and witness for spending `note`.

    Args:
        note: The note being spent.
        leaves: Every deposited commitment, in leaf order.
        payment: The stealth destination the funds go to.
        destination_chain: Chain the dispatcher bridges to.
        config: The pool's deployment parameters.
        on_chain_root: The pool's latest root, read just before proving.
        relayer_fee: Fee paid to the submitting relayer.
        gas_value: Native value forwarded to the dispatcher.

    Raises:
        InvalidRelayerFee: If `relayer_fee` exceeds the denomination.
        CommitmentNotFound: If the note was never deposited.
        RootMismatch: If the rebuilt tree disagrees with the pool.
    """
    if relayer_fee > config.denomination:
        raise InvalidRelayerFee(relayer_fee, config.denomination)

    path = build_merkle_path(leaves, note.commitment, config.levels)
    if path.root != on_chain_root:
        raise RootMismatch(path.root, on_chain_root)

    request = WithdrawalRequest(
        root=path.root,
        nullifier_hash=note.nullifier_hash,
        relayer_fee=relayer_fee,
        destination_chain=destination_chain,
        stealth_address=address_to_bytes(payment.stealth_address),
        ephemeral_public_key=payment.ephemeral_public_key,
        view_hint=payment.view_hint,
        k=payment.k,
        gas_value=gas_value,
    )
    amount_to_bridge = config.denomination - relayer_fee
    ext_data_hash = compute_ext_data_hash(
        request, amount_to_bridge, config.bridge_address, config.dispatch
    )

    witness = WithdrawalWitness(
        root=path.root,
        nullifier_hash=note.nullifier_hash,
        ext_data_hash=ext_data_hash,
        nullifier=note.nullifier,
        secret=note.secret,
        path_elements=path.path_elements,
        path_indices=path.path_indices,
    )
    logger.info("Prepared withdrawal for leaf %d", path.leaf_index)
    return PreparedWithdrawal(request=request, witness=witness, path=path)
