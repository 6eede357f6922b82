"""
Bridge dispatcher adapter.

The pool hands every payout to a dispatcher, which moves the tokens to a
stealth address on the destination chain and publishes the data the
recipient needs to find them.

Call contract:
1. The pool approves the dispatcher for exactly `amount`.
2. The pool calls `send_to_stealth_address`.
3. The dispatcher pulls `amount` from the pool with `transfer_from`.

The call either fully succeeds or raises. A raise reverts the withdrawal.
"""

from __future__ import annotations

import logging
from typing import List, Protocol

from pydantic import Field

from stealth_pool.types import Bytes1, Bytes20, Bytes32, Bytes33, DispatchFailed, StrictBaseModel

from .token import TokenLedger

logger = logging.getLogger(__name__)


class BridgeDispatcher(Protocol):
    """What the pool needs from a bridge."""

    @property
    def address(self) -> Bytes20:
        """Account the pool approves before dispatching."""
        ...

    def send_to_stealth_address(
        self,
        sender: Bytes20,
        destination_chain: str,
        stealth_address: Bytes20,
        ephemeral_public_key: Bytes33,
        view_hint: Bytes1,
        k: int,
        token_identifier: str | Bytes32,
        amount: int,
        gas_value: int,
    ) -> None:
        """
        Pull `amount` from `sender` and deliver it to `stealth_address`.

        Args:
            sender: The calling pool. Tokens are pulled from this account.
            destination_chain: Name of the chain the funds are bridged to.
            stealth_address: One-time recipient address on that chain.
            ephemeral_public_key: Published so the recipient can find the payment.
            view_hint: One-byte scanning pre-filter.
            k: Derivation counter.
            token_identifier: Gateway symbol (GMP) or interchain token id (ITS).
            amount: Tokens to bridge.
            gas_value: Native value forwarded to pay for cross-chain execution.

        Raises:
            DispatchFailed: If the payout cannot be made.
        """
        ...


class Dispatch(StrictBaseModel):
    """One payout accepted by a dispatcher."""

    sender: Bytes20
    destination_chain: str
    stealth_address: Bytes20
    ephemeral_public_key: Bytes33
    view_hint: Bytes1
    k: int = Field(ge=0, lt=2**32)
    token_identifier: str | Bytes32
    amount: int = Field(ge=0)
    gas_value: int = Field(ge=0)


class InMemoryBridgeDispatcher:
    """
    Dispatcher that settles on a local ledger.

    Pulled tokens stay in the dispatcher's own account, standing in for funds
    locked on the source chain.
    """

    def __init__(self, ledger: TokenLedger, address: Bytes20) -> None:
        self._ledger = ledger
        self._address = Bytes20(address)
        self.dispatches: List[Dispatch] = []
        self.failure: str | None = None
        """When set, every dispatch fails with this reason."""

    @property
    def address(self) -> Bytes20:
        """Account the pool approves before dispatching."""
        return self._address

    def send_to_stealth_address(
        self,
        sender: Bytes20,
        destination_chain: str,
        stealth_address: Bytes20,
        ephemeral_public_key: Bytes33,
        view_hint: Bytes1,
        k: int,
        token_identifier: str | Bytes32,
        amount: int,
        gas_value: int,
    ) -> None:
        """Pull the tokens from the pool and record the payout."""
        if self.failure is not None:
            raise DispatchFailed(self.failure)
        if not destination_chain:
            raise DispatchFailed("destination chain is empty")

        self._ledger.transfer_from(
            spender=self._address, owner=sender, recipient=self._address, amount=amount
        )
        self.dispatches.append(
            Dispatch(
                sender=sender,
                destination_chain=destination_chain,
                stealth_address=stealth_address,
                ephemeral_public_key=ephemeral_public_key,
                view_hint=view_hint,
                k=k,
                token_identifier=token_identifier,
                amount=amount,
                gas_value=gas_value,
            )
        )
        logger.info(
            "Dispatched %d to %s on %s", amount, "0x" + stealth_address.hex(), destination_chain
        )
