"""
In-memory ERC-20 style token ledger.

The pool holds deposits in a single fungible token. The ledger models the
calls the pool makes on it: pulling the denomination from a depositor,
paying a relayer, approving the bridge dispatcher, and the dispatcher
pulling the bridged amount.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from stealth_pool.types import Bytes20, InsufficientAllowance, InsufficientBalance


@dataclass(frozen=True, slots=True)
class LedgerSnapshot:
    """Copy of ledger state, used to undo a failed transaction."""

    balances: Dict[Bytes20, int]
    allowances: Dict[Tuple[Bytes20, Bytes20], int]


def _short(account: Bytes20) -> str:
    return "0x" + account.hex()[:8]


@dataclass
class TokenLedger:
    """Balances and allowances of one token."""

    symbol: str = "TUSDC"
    balances: Dict[Bytes20, int] = field(default_factory=dict)
    allowances: Dict[Tuple[Bytes20, Bytes20], int] = field(default_factory=dict)

    def balance_of(self, account: Bytes20) -> int:
        """Current balance of `account`."""
        return self.balances.get(Bytes20(account), 0)

    def allowance(self, owner: Bytes20, spender: Bytes20) -> int:
        """Amount `spender` may still pull from `owner`."""
        return self.allowances.get((Bytes20(owner), Bytes20(spender)), 0)

    @property
    def total_supply(self) -> int:
        """Sum of all balances."""
        return sum(self.balances.values())

    def mint(self, account: Bytes20, amount: int) -> None:
        """Create `amount` new tokens for `account`."""
        if amount < 0:
            raise ValueError("cannot mint a negative amount")
        account = Bytes20(account)
        self.balances[account] = self.balances.get(account, 0) + amount

    def transfer(self, sender: Bytes20, recipient: Bytes20, amount: int) -> None:
        """
        Move `amount` from `sender` to `recipient`.

        Raises:
            InsufficientBalance: If `sender` holds less than `amount`.
        """
        if amount < 0:
            raise ValueError("cannot transfer a negative amount")
        sender, recipient = Bytes20(sender), Bytes20(recipient)

        available = self.balances.get(sender, 0)
        if available < amount:
            raise InsufficientBalance(_short(sender), amount, available)

        self.balances[sender] = available - amount
        self.balances[recipient] = self.balances.get(recipient, 0) + amount

    def approve(self, owner: Bytes20, spender: Bytes20, amount: int) -> None:
        """Set the amount `spender` may pull from `owner`."""
        if amount < 0:
            raise ValueError("cannot approve a negative amount")
        self.allowances[(Bytes20(owner), Bytes20(spender))] = amount

    def transfer_from(
        self, spender: Bytes20, owner: Bytes20, recipient: Bytes20, amount: int
    ) -> None:
        """
        Pull `amount` from `owner` to `recipient` on behalf of `spender`.

        Raises:
            InsufficientAllowance: If `owner` approved `spender` for less.
            InsufficientBalance: If `owner` holds less than `amount`.
        """
        key = (Bytes20(owner), Bytes20(spender))
        allowed = self.allowances.get(key, 0)
        if allowed < amount:
            raise InsufficientAllowance(_short(key[0]), _short(key[1]), amount, allowed)

        self.transfer(owner, recipient, amount)
        self.allowances[key] = allowed - amount

    def snapshot(self) -> LedgerSnapshot:
        """Capture the current state."""
        return LedgerSnapshot(dict(self.balances), dict(self.allowances))

    def restore(self, snapshot: LedgerSnapshot) -> None:
        """Return to a previously captured state."""
        self.balances = dict(snapshot.balances)
        self.allowances = dict(snapshot.allowances)
