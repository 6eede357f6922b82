"""Tests for the in-memory token ledger and host transactions."""

from __future__ import annotations

import pytest

from stealth_pool.subspecs.pool import HostChain, TokenLedger
from stealth_pool.types import Bytes20, InsufficientAllowance, InsufficientBalance

ALICE = Bytes20(b"\x01" * 20)
BOB = Bytes20(b"\x02" * 20)
CAROL = Bytes20(b"\x03" * 20)


class TestLedger:
    """Tests for balances and allowances."""

    def test_mint_and_transfer(self) -> None:
        """Transfers move balance and preserve supply."""
        ledger = TokenLedger()
        ledger.mint(ALICE, 10)
        ledger.transfer(ALICE, BOB, 4)

        assert ledger.balance_of(ALICE) == 6
        assert ledger.balance_of(BOB) == 4
        assert ledger.total_supply == 10

    def test_transfer_more_than_balance(self) -> None:
        """Overdrawing raises and changes nothing."""
        ledger = TokenLedger()
        ledger.mint(ALICE, 3)

        with pytest.raises(InsufficientBalance):
            ledger.transfer(ALICE, BOB, 4)
        assert ledger.balance_of(ALICE) == 3

    def test_transfer_from_consumes_allowance(self) -> None:
        """A spender pulls within its allowance, which decreases."""
        ledger = TokenLedger()
        ledger.mint(ALICE, 10)
        ledger.approve(ALICE, BOB, 7)

        ledger.transfer_from(BOB, ALICE, CAROL, 5)

        assert ledger.balance_of(CAROL) == 5
        assert ledger.allowance(ALICE, BOB) == 2

    def test_transfer_from_beyond_allowance(self) -> None:
        """Pulling more than approved raises."""
        ledger = TokenLedger()
        ledger.mint(ALICE, 10)
        ledger.approve(ALICE, BOB, 1)

        with pytest.raises(InsufficientAllowance):
            ledger.transfer_from(BOB, ALICE, CAROL, 2)

    def test_negative_amounts_rejected(self) -> None:
        """Negative amounts are programming errors."""
        ledger = TokenLedger()
        with pytest.raises(ValueError):
            ledger.mint(ALICE, -1)
        with pytest.raises(ValueError):
            ledger.approve(ALICE, BOB, -1)


class TestHostChain:
    """Tests for transaction atomicity."""

    def test_atomic_restores_on_error(self) -> None:
        """Ledger changes inside a failing block are undone."""
        host = HostChain()
        host.ledger.mint(ALICE, 10)

        with pytest.raises(RuntimeError):
            with host.atomic():
                host.ledger.transfer(ALICE, BOB, 10)
                raise RuntimeError("revert")

        assert host.ledger.balance_of(ALICE) == 10
        assert host.ledger.balance_of(BOB) == 0

    def test_atomic_keeps_changes_on_success(self) -> None:
        """A block that completes keeps its changes."""
        host = HostChain()
        host.ledger.mint(ALICE, 10)

        with host.atomic():
            host.ledger.transfer(ALICE, BOB, 3)

        assert host.ledger.balance_of(BOB) == 3

    def test_clock_supplies_block_timestamp(self) -> None:
        """Block timestamps come from the injected clock."""
        host = HostChain(clock=lambda: 1234)
        assert host.block_timestamp() == 1234
