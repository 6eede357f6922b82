"""
Withdrawal requests and the external data binding.

The proof's third public input, `ext_data_hash`, commits to every
withdrawal parameter that is not otherwise constrained by the circuit.
A relayer who alters the destination, fee or payout route therefore
invalidates the proof.

    ext_data_hash = keccak256(packed(
        string  destination_chain,
        address stealth_address,
        bytes   ephemeral_public_key,
        bytes1  view_hint,
        uint32  k,
        uint256 amount_to_bridge,
        uint256 relayer_fee,
        address bridge_address,
        string | bytes32 token_identifier,
    )) mod r
"""

from __future__ import annotations

from pydantic import Field

from stealth_pool.types import Bytes1, Bytes20, Bytes33, StrictBaseModel

from ..hashing import keccak256, solidity_packed, to_field
from .config import GmpDispatch, ItsDispatch

_BOUND_TYPES = ("string", "address", "bytes", "bytes1", "uint32", "uint256", "uint256", "address")


class WithdrawalRequest(StrictBaseModel):
    """Public parameters of one withdrawal, as submitted by the relayer."""

    root: int
    """A recent tree root the proof was built against."""

    nullifier_hash: int
    """`hash2(nullifier, 0)` of the note being spent."""

    relayer_fee: int = Field(ge=0)
    """Paid to the caller out of the denomination."""

    destination_chain: str
    stealth_address: Bytes20
    ephemeral_public_key: Bytes33
    view_hint: Bytes1
    k: int = Field(ge=0, lt=2**32)

    gas_value: int = Field(default=0, ge=0)
    """Native value forwarded to the dispatcher. Not bound by the proof."""


def compute_ext_data_hash(
    request: WithdrawalRequest,
    amount_to_bridge: int,
    bridge_address: Bytes20,
    dispatch: GmpDispatch | ItsDispatch,
) -> int:
    """Bind the withdrawal parameters into a single field element."""
    packed = solidity_packed(
        _BOUND_TYPES + (dispatch.packed_type,),
        (
            request.destination_chain,
            request.stealth_address,
            request.ephemeral_public_key,
            request.view_hint,
            request.k,
            amount_to_bridge,
            request.relayer_fee,
            bridge_address,
            dispatch.token_identifier,
        ),
    )
    return to_field(keccak256(packed))
