"""
Fixed-denomination commitment pool.

Deposits
--------
A depositor pays exactly `denomination` tokens and appends a commitment to
the tree. The pool learns nothing else about the depositor's note.

Withdrawals
-----------
Anyone holding a note (or a relayer acting for them) can withdraw by
presenting a proof that:

- some leaf under a recent root is `hash2(nullifier, secret)`,
- `nullifier_hash = hash2(nullifier, 0)`,
- the proof was made for this exact `ext_data_hash`.

Checks run in a fixed order, and all of them complete before any state
changes:

1. root and nullifier hash are field elements
2. root is in the root history
3. nullifier hash is unspent
4. relayer fee does not exceed the denomination
5. ext_data_hash is computed from the request
6. the proof verifies against (root, nullifier_hash, ext_data_hash)

Effects follow: the nullifier is marked spent, the relayer fee is paid to
the caller, and the rest is handed to the bridge dispatcher. Any failure,
including one inside the dispatcher, reverts the whole withdrawal.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import FrozenSet, Iterator, List, Literal

from stealth_pool.types import (
    Bytes20,
    DispatchFailed,
    InvalidFieldElement,
    InvalidProof,
    InvalidRelayerFee,
    NullifierAlreadyUsed,
    PoolError,
    PoolNotConfiguredForMode,
    ReentrantCall,
    UnknownRoot,
)

from ..bn254 import is_field_element
from ..groth16 import Groth16Proof, ProofVerifier
from ..metrics import (
    deposits_total,
    proof_verification_seconds,
    tree_leaves,
    withdrawal_rejections_total,
    withdrawals_total,
)
from .config import PoolConfig
from .dispatcher import BridgeDispatcher
from .events import DepositEvent, WithdrawalEvent
from .ext_data import WithdrawalRequest, compute_ext_data_hash
from .host import HostChain
from .merkle_tree import MerkleTree

logger = logging.getLogger(__name__)

Mode = Literal["gmp", "its"]


def _short(value: int) -> str:
    """Abbreviated hex form of a public field element for log lines."""
    return f"{value:#066x}"[:12]


class CommitmentPool:
    """A shielded pool paying out to stealth addresses through a bridge."""

    def __init__(
        self,
        config: PoolConfig,
        host: HostChain,
        dispatcher: BridgeDispatcher,
        verifier: ProofVerifier,
    ) -> None:
        """
        Deploy an empty pool.

        Args:
            config: Denomination, tree shape and payout route.
            host: Ledger and clock the pool settles against.
            dispatcher: Bridge adapter receiving every payout.
            verifier: Checks withdrawal proofs.
        """
        if dispatcher.address != config.bridge_address:
            raise ValueError("dispatcher address does not match the configured bridge")

        self.config = config
        self.host = host
        self.dispatcher = dispatcher
        self.verifier = verifier

        self._tree = MerkleTree.empty(config.levels, config.root_history_size)
        self._nullifiers: FrozenSet[int] = frozenset()
        self._entered = False
        self.events: List[DepositEvent | WithdrawalEvent] = []

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def tree(self) -> MerkleTree:
        """Current tree state."""
        return self._tree

    @property
    def next_index(self) -> int:
        """Index the next deposit will occupy."""
        return self._tree.next_index

    def get_last_root(self) -> int:
        """Latest tree root."""
        return self._tree.get_last_root()

    def root_history(self) -> list[int]:
        """Every root a withdrawal may currently reference, oldest first."""
        return self._tree.root_history()

    def is_known_root(self, root: int) -> bool:
        """Whether `root` is still in the root history."""
        return self._tree.is_known_root(root)

    def is_spent(self, nullifier_hash: int) -> bool:
        """Whether a nullifier hash has been used."""
        return nullifier_hash in self._nullifiers

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    @contextmanager
    def _non_reentrant(self, entry_point: str) -> Iterator[None]:
        """Reject calls made while another entry point is still running."""
        if self._entered:
            raise ReentrantCall(entry_point)
        self._entered = True
        try:
            yield
        finally:
            self._entered = False

    def deposit(self, depositor: Bytes20, commitment: int) -> DepositEvent:
        """
        Pull one denomination from `depositor` and insert `commitment`.

        The depositor must have approved the pool for the denomination.

        Raises:
            InvalidFieldElement: If the commitment is not a field element.
            TreeFull: If the tree has no free leaf.
            InsufficientAllowance: If the pool may not pull the tokens.
            InsufficientBalance: If the depositor cannot cover the denomination.
            ReentrantCall: If called from inside another pool call.
        """
        with self._non_reentrant("deposit"), self.host.atomic():
            if not is_field_element(commitment):
                raise InvalidFieldElement("commitment")

            tree, leaf_index = self._tree.insert(commitment)

            pool = self.config.pool_address
            self.host.ledger.transfer_from(
                spender=pool, owner=depositor, recipient=pool, amount=self.config.denomination
            )

            event = DepositEvent(
                commitment=commitment,
                leaf_index=leaf_index,
                timestamp=self.host.block_timestamp(),
            )

            # Commit.
            self._tree = tree
            self.events.append(event)

        deposits_total.inc()
        tree_leaves.set(self._tree.next_index)
        logger.info("Deposit at leaf %d, root %s", leaf_index, _short(self._tree.root))
        return event

    def withdraw(
        self, caller: Bytes20, request: WithdrawalRequest, proof: Groth16Proof
    ) -> WithdrawalEvent:
        """Withdraw through whichever payout route the pool is configured for."""
        return self._withdraw(caller, request, proof, self.config.dispatch.mode)

    def withdraw_and_bridge_gmp(
        self, caller: Bytes20, request: WithdrawalRequest, proof: Groth16Proof
    ) -> WithdrawalEvent:
        """
        Withdraw and bridge by general message passing.

        Raises:
            PoolNotConfiguredForMode: If the pool pays out through ITS.
        """
        return self._withdraw(caller, request, proof, "gmp")

    def withdraw_and_bridge_its(
        self, caller: Bytes20, request: WithdrawalRequest, proof: Groth16Proof
    ) -> WithdrawalEvent:
        """
        Withdraw and bridge through the interchain token service.

        Raises:
            PoolNotConfiguredForMode: If the pool pays out through GMP.
        """
        return self._withdraw(caller, request, proof, "its")

    def _withdraw(
        self,
        caller: Bytes20,
        request: WithdrawalRequest,
        proof: Groth16Proof,
        mode: Mode,
    ) -> WithdrawalEvent:
        try:
            with self._non_reentrant(f"withdraw_and_bridge_{mode}"), self.host.atomic():
                event = self._apply_withdrawal(caller, request, proof, mode)
        except PoolError as exc:
            withdrawal_rejections_total.labels(reason=type(exc).__name__).inc()
            logger.warning("Withdrawal rejected: %s", exc.message)
            raise

        withdrawals_total.labels(mode=mode).inc()
        logger.info(
            "Withdrawal %s paid %d to %s on %s",
            _short(request.nullifier_hash),
            event.amount_to_bridge,
            "0x" + request.stealth_address.hex(),
            request.destination_chain,
        )
        return event

    def _apply_withdrawal(
        self,
        caller: Bytes20,
        request: WithdrawalRequest,
        proof: Groth16Proof,
        mode: Mode,
    ) -> WithdrawalEvent:
        config = self.config
        dispatch = config.dispatch
        if dispatch.mode != mode:
            raise PoolNotConfiguredForMode(mode, dispatch.mode)

        # Checks.
        if not is_field_element(request.root):
            raise InvalidFieldElement("root")
        if not is_field_element(request.nullifier_hash):
            raise InvalidFieldElement("nullifier_hash")
        if not self._tree.is_known_root(request.root):
            raise UnknownRoot()
        if request.nullifier_hash in self._nullifiers:
            raise NullifierAlreadyUsed()
        if request.relayer_fee > config.denomination:
            raise InvalidRelayerFee(request.relayer_fee, config.denomination)

        amount_to_bridge = config.denomination - request.relayer_fee
        ext_data_hash = compute_ext_data_hash(
            request, amount_to_bridge, config.bridge_address, dispatch
        )

        with proof_verification_seconds.time():
            valid = self.verifier.verify(
                proof, [request.root, request.nullifier_hash, ext_data_hash]
            )
        if not valid:
            raise InvalidProof()

        # Effects.
        nullifiers = self._nullifiers | {request.nullifier_hash}
        ledger = self.host.ledger
        pool = config.pool_address

        if request.relayer_fee > 0:
            ledger.transfer(pool, caller, request.relayer_fee)

        ledger.approve(pool, self.dispatcher.address, amount_to_bridge)
        try:
            self.dispatcher.send_to_stealth_address(
                sender=pool,
                destination_chain=request.destination_chain,
                stealth_address=request.stealth_address,
                ephemeral_public_key=request.ephemeral_public_key,
                view_hint=request.view_hint,
                k=request.k,
                token_identifier=dispatch.token_identifier,
                amount=amount_to_bridge,
                gas_value=request.gas_value,
            )
        except DispatchFailed:
            raise
        except Exception as exc:
            raise DispatchFailed(f"{type(exc).__name__}: {exc}") from exc

        event = WithdrawalEvent(
            nullifier_hash=request.nullifier_hash,
            relayer=caller,
            relayer_fee=request.relayer_fee,
            amount_to_bridge=amount_to_bridge,
            destination_chain=request.destination_chain,
            stealth_address=request.stealth_address,
            mode=mode,
        )

        # Commit.
        self._nullifiers = nullifiers
        self.events.append(event)
        return event
