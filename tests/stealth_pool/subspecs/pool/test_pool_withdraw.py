"""Tests for commitment pool withdrawals."""

from __future__ import annotations

import pytest

from stealth_pool.subspecs.bn254 import SNARK_SCALAR_FIELD
from stealth_pool.subspecs.metrics import withdrawal_rejections_total, withdrawals_total
from stealth_pool.subspecs.pool import WithdrawalEvent, compute_ext_data_hash
from stealth_pool.types import (
    DispatchFailed,
    InvalidFieldElement,
    InvalidProof,
    InvalidRelayerFee,
    NullifierAlreadyUsed,
    PoolNotConfiguredForMode,
    ReentrantCall,
    UnknownRoot,
)
from tests.stealth_pool.helpers import (
    BRIDGE_ADDRESS,
    DENOMINATION,
    DUMMY_PROOF,
    GMP,
    ITS,
    POOL_ADDRESS,
    RELAYER,
    STEALTH_ADDRESS,
    CrashingDispatcher,
    PoolHarness,
    RecordingVerifier,
    ReentrantDispatcher,
    make_harness,
    make_pool_config,
    make_request,
)

NULLIFIER_HASH = 777


def _funded(harness: PoolHarness, deposits: int = 1) -> PoolHarness:
    for commitment in range(1, deposits + 1):
        harness.deposit(commitment)
    return harness


@pytest.fixture
def harness() -> PoolHarness:
    """A GMP pool holding one deposit, with an accepting verifier."""
    return _funded(make_harness())


class TestWithdraw:
    """Tests for successful withdrawals."""

    def test_fee_and_bridge_split(self, harness: PoolHarness) -> None:
        """With D = 10 and fee = 1, the relayer gets 1 and 9 are bridged."""
        request = make_request(harness.pool.get_last_root(), NULLIFIER_HASH, relayer_fee=1)

        event = harness.pool.withdraw_and_bridge_gmp(RELAYER, request, DUMMY_PROOF)

        assert event.amount_to_bridge == 9
        assert harness.ledger.balance_of(RELAYER) == 1
        assert harness.ledger.balance_of(BRIDGE_ADDRESS) == 9
        assert harness.ledger.balance_of(POOL_ADDRESS) == 0
        assert harness.ledger.allowance(POOL_ADDRESS, BRIDGE_ADDRESS) == 0

    def test_dispatch_carries_request_fields(self, harness: PoolHarness) -> None:
        """The dispatcher receives the destination and announcement data."""
        request = make_request(harness.pool.get_last_root(), NULLIFIER_HASH, relayer_fee=1, k=3)

        harness.pool.withdraw(RELAYER, request, DUMMY_PROOF)

        (dispatch,) = harness.dispatcher.dispatches
        assert dispatch.sender == POOL_ADDRESS
        assert dispatch.destination_chain == "arbitrum-sepolia"
        assert dispatch.stealth_address == STEALTH_ADDRESS
        assert dispatch.ephemeral_public_key == request.ephemeral_public_key
        assert dispatch.view_hint == request.view_hint
        assert dispatch.k == 3
        assert dispatch.token_identifier == "TUSDC"
        assert dispatch.amount == 9

    def test_verifier_sees_bound_public_inputs(self, harness: PoolHarness) -> None:
        """The proof is checked against (root, nullifier hash, ext data hash)."""
        verifier = harness.verifier
        assert isinstance(verifier, RecordingVerifier)
        request = make_request(harness.pool.get_last_root(), NULLIFIER_HASH, relayer_fee=2)

        harness.pool.withdraw(RELAYER, request, DUMMY_PROOF)

        expected_hash = compute_ext_data_hash(request, DENOMINATION - 2, BRIDGE_ADDRESS, GMP)
        assert verifier.calls == [(DUMMY_PROOF, [request.root, NULLIFIER_HASH, expected_hash])]

    def test_nullifier_marked_spent_and_event_emitted(self, harness: PoolHarness) -> None:
        """A successful withdrawal spends the nullifier and records an event."""
        request = make_request(harness.pool.get_last_root(), NULLIFIER_HASH)

        event = harness.pool.withdraw(RELAYER, request, DUMMY_PROOF)

        assert harness.pool.is_spent(NULLIFIER_HASH)
        assert harness.pool.events[-1] == event
        assert event == WithdrawalEvent(
            nullifier_hash=NULLIFIER_HASH,
            relayer=RELAYER,
            relayer_fee=0,
            amount_to_bridge=DENOMINATION,
            destination_chain="arbitrum-sepolia",
            stealth_address=STEALTH_ADDRESS,
            mode="gmp",
        )

    def test_fee_equal_to_denomination_bridges_nothing(self, harness: PoolHarness) -> None:
        """The whole denomination may go to the relayer."""
        request = make_request(
            harness.pool.get_last_root(), NULLIFIER_HASH, relayer_fee=DENOMINATION
        )

        event = harness.pool.withdraw(RELAYER, request, DUMMY_PROOF)

        assert event.amount_to_bridge == 0
        assert harness.ledger.balance_of(RELAYER) == DENOMINATION

    def test_stale_root_still_accepted(self, harness: PoolHarness) -> None:
        """A root a few deposits old is still in the history."""
        stale_root = harness.pool.get_last_root()
        harness.deposit(2)
        harness.deposit(3)

        harness.pool.withdraw(RELAYER, make_request(stale_root, NULLIFIER_HASH), DUMMY_PROOF)
        assert harness.pool.is_spent(NULLIFIER_HASH)

    def test_its_pool_bridges_token_id(self) -> None:
        """An ITS pool passes its token id to the dispatcher."""
        harness = _funded(make_harness(make_pool_config(dispatch=ITS)))
        request = make_request(harness.pool.get_last_root(), NULLIFIER_HASH)

        event = harness.pool.withdraw_and_bridge_its(RELAYER, request, DUMMY_PROOF)

        assert event.mode == "its"
        assert harness.dispatcher.dispatches[0].token_identifier == ITS.token_id

    def test_withdrawal_metrics(self, harness: PoolHarness) -> None:
        """Successful withdrawals are counted per mode."""
        before = withdrawals_total.labels(mode="gmp")._value.get()

        harness.pool.withdraw(
            RELAYER, make_request(harness.pool.get_last_root(), NULLIFIER_HASH), DUMMY_PROOF
        )

        assert withdrawals_total.labels(mode="gmp")._value.get() == before + 1


class TestWithdrawRejections:
    """Tests for withdrawals that revert before any effect."""

    def test_double_spend_rejected(self) -> None:
        """A nullifier hash can be spent once."""
        harness = _funded(make_harness(), deposits=2)
        root = harness.pool.get_last_root()
        harness.pool.withdraw(RELAYER, make_request(root, NULLIFIER_HASH), DUMMY_PROOF)

        with pytest.raises(NullifierAlreadyUsed):
            harness.pool.withdraw(RELAYER, make_request(root, NULLIFIER_HASH), DUMMY_PROOF)

        assert harness.ledger.balance_of(POOL_ADDRESS) == DENOMINATION

    def test_unknown_root_rejected_before_proof(self, harness: PoolHarness) -> None:
        """A root outside the history fails without consulting the verifier."""
        verifier = harness.verifier
        assert isinstance(verifier, RecordingVerifier)

        with pytest.raises(UnknownRoot):
            harness.pool.withdraw(RELAYER, make_request(123456, NULLIFIER_HASH), DUMMY_PROOF)

        assert verifier.calls == []

    def test_excess_fee_rejected_before_proof(self, harness: PoolHarness) -> None:
        """A fee above the denomination fails before proof verification."""
        verifier = harness.verifier
        assert isinstance(verifier, RecordingVerifier)
        request = make_request(
            harness.pool.get_last_root(), NULLIFIER_HASH, relayer_fee=DENOMINATION + 1
        )

        with pytest.raises(InvalidRelayerFee):
            harness.pool.withdraw(RELAYER, request, DUMMY_PROOF)

        assert verifier.calls == []
        assert not harness.pool.is_spent(NULLIFIER_HASH)

    @pytest.mark.parametrize("field", ["root", "nullifier_hash"])
    def test_public_inputs_must_be_field_elements(self, harness: PoolHarness, field: str) -> None:
        """Root and nullifier hash >= r are rejected."""
        request = make_request(harness.pool.get_last_root(), NULLIFIER_HASH)
        request = request.model_copy(update={field: SNARK_SCALAR_FIELD})

        with pytest.raises(InvalidFieldElement):
            harness.pool.withdraw(RELAYER, request, DUMMY_PROOF)

    def test_invalid_proof_rejected(self) -> None:
        """A failing proof leaves the nullifier unspent and funds in place."""
        harness = _funded(make_harness(verifier=RecordingVerifier(result=False)))
        request = make_request(harness.pool.get_last_root(), NULLIFIER_HASH, relayer_fee=1)

        with pytest.raises(InvalidProof):
            harness.pool.withdraw(RELAYER, request, DUMMY_PROOF)

        assert not harness.pool.is_spent(NULLIFIER_HASH)
        assert harness.ledger.balance_of(POOL_ADDRESS) == DENOMINATION
        assert harness.ledger.balance_of(RELAYER) == 0

    def test_wrong_mode_rejected(self, harness: PoolHarness) -> None:
        """A GMP pool refuses the ITS entry point, and vice versa."""
        request = make_request(harness.pool.get_last_root(), NULLIFIER_HASH)

        with pytest.raises(PoolNotConfiguredForMode):
            harness.pool.withdraw_and_bridge_its(RELAYER, request, DUMMY_PROOF)

        assert not harness.pool.is_spent(NULLIFIER_HASH)
        harness.pool.withdraw_and_bridge_gmp(RELAYER, request, DUMMY_PROOF)
        assert harness.pool.is_spent(NULLIFIER_HASH)

    def test_rejections_counted_by_reason(self, harness: PoolHarness) -> None:
        """Rejected withdrawals are counted under the error name."""
        counter = withdrawal_rejections_total.labels(reason="UnknownRoot")
        before = counter._value.get()

        with pytest.raises(UnknownRoot):
            harness.pool.withdraw(RELAYER, make_request(1, NULLIFIER_HASH), DUMMY_PROOF)

        assert counter._value.get() == before + 1


class TestDispatchFailure:
    """Tests for withdrawals whose payout fails."""

    def test_dispatch_failure_reverts_everything(self, harness: PoolHarness) -> None:
        """Fee payment, approval and nullifier are all rolled back."""
        harness.dispatcher.failure = "gateway unavailable"
        request = make_request(harness.pool.get_last_root(), NULLIFIER_HASH, relayer_fee=1)
        events_before = list(harness.pool.events)

        with pytest.raises(DispatchFailed, match="gateway unavailable"):
            harness.pool.withdraw(RELAYER, request, DUMMY_PROOF)

        assert not harness.pool.is_spent(NULLIFIER_HASH)
        assert harness.ledger.balance_of(RELAYER) == 0
        assert harness.ledger.balance_of(POOL_ADDRESS) == DENOMINATION
        assert harness.ledger.allowance(POOL_ADDRESS, BRIDGE_ADDRESS) == 0
        assert harness.pool.events == events_before

    def test_withdrawal_succeeds_after_dispatcher_recovers(self, harness: PoolHarness) -> None:
        """A reverted withdrawal can be retried with the same nullifier."""
        request = make_request(harness.pool.get_last_root(), NULLIFIER_HASH, relayer_fee=1)
        harness.dispatcher.failure = "gateway unavailable"
        with pytest.raises(DispatchFailed):
            harness.pool.withdraw(RELAYER, request, DUMMY_PROOF)

        harness.dispatcher.failure = None
        event = harness.pool.withdraw(RELAYER, request, DUMMY_PROOF)

        assert event.amount_to_bridge == 9
        assert harness.pool.is_spent(NULLIFIER_HASH)

    def test_empty_destination_chain_fails_dispatch(self, harness: PoolHarness) -> None:
        """The dispatcher refuses to bridge to an unnamed chain."""
        request = make_request(harness.pool.get_last_root(), NULLIFIER_HASH, destination_chain="")

        with pytest.raises(DispatchFailed):
            harness.pool.withdraw(RELAYER, request, DUMMY_PROOF)

    def test_foreign_dispatcher_error_is_wrapped(self) -> None:
        """Arbitrary dispatcher errors surface as DispatchFailed and revert tokens."""
        harness = _funded(make_harness(dispatcher_class=CrashingDispatcher))
        request = make_request(harness.pool.get_last_root(), NULLIFIER_HASH)

        with pytest.raises(DispatchFailed) as exc_info:
            harness.pool.withdraw(RELAYER, request, DUMMY_PROOF)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert harness.ledger.balance_of(BRIDGE_ADDRESS) == 0
        assert harness.ledger.balance_of(POOL_ADDRESS) == DENOMINATION
        assert not harness.pool.is_spent(NULLIFIER_HASH)


class TestReentrancy:
    """Tests for the reentrancy guard."""

    def test_reentrant_deposit_from_dispatcher_is_rejected(self) -> None:
        """A dispatcher calling back into the pool aborts the withdrawal."""
        harness = _funded(make_harness(dispatcher_class=ReentrantDispatcher))
        dispatcher = harness.dispatcher
        assert isinstance(dispatcher, ReentrantDispatcher)
        dispatcher.pool = harness.pool
        request = make_request(harness.pool.get_last_root(), NULLIFIER_HASH)

        with pytest.raises(DispatchFailed) as exc_info:
            harness.pool.withdraw(RELAYER, request, DUMMY_PROOF)

        assert isinstance(exc_info.value.__cause__, ReentrantCall)
        assert harness.pool.next_index == 1
        assert not harness.pool.is_spent(NULLIFIER_HASH)

    def test_guard_released_after_rejection(self) -> None:
        """A failed call does not leave the pool locked."""
        harness = _funded(make_harness())
        with pytest.raises(UnknownRoot):
            harness.pool.withdraw(RELAYER, make_request(1, NULLIFIER_HASH), DUMMY_PROOF)

        harness.deposit(2)
        assert harness.pool.next_index == 2
