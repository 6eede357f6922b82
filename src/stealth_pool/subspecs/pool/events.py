"""Events emitted by the commitment pool."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from stealth_pool.types import Bytes20, StrictBaseModel

from ..bn254 import FieldElement


class DepositEvent(StrictBaseModel):
    """`Deposit(uint256 indexed commitment, uint32 leafIndex, uint256 timestamp)`."""

    commitment: FieldElement
    leaf_index: int = Field(ge=0, lt=2**32)
    timestamp: int = Field(ge=0)


class WithdrawalEvent(StrictBaseModel):
    """Emitted once a withdrawal has been paid out."""

    nullifier_hash: FieldElement
    relayer: Bytes20
    relayer_fee: int = Field(ge=0)
    amount_to_bridge: int = Field(ge=0)
    destination_chain: str
    stealth_address: Bytes20
    mode: Literal["gmp", "its"]
