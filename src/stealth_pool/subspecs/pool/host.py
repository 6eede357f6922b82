"""
Host execution environment.

On chain, every call is a transaction: it either commits all of its effects
or none. `HostChain.atomic()` gives the pool the same guarantee for the
token ledger. Pool-internal state is immutable and is only swapped in at the
end of a successful call, so it needs no undo.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator

from .token import TokenLedger

logger = logging.getLogger(__name__)


def _wall_clock() -> int:
    return int(time.time())


@dataclass
class HostChain:
    """The ledger and clock a pool runs against."""

    ledger: TokenLedger = field(default_factory=TokenLedger)
    """Token balances, shared with the bridge dispatcher."""

    clock: Callable[[], int] = _wall_clock
    """Source of block timestamps in seconds."""

    def block_timestamp(self) -> int:
        """Timestamp of the current block."""
        return self.clock()

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """
        Run a block as one transaction.

        If the block raises, every ledger change made inside it is undone and
        the exception propagates unchanged.
        """
        snapshot = self.ledger.snapshot()
        try:
            yield
        except BaseException:
            self.ledger.restore(snapshot)
            logger.debug("Transaction reverted, ledger restored")
            raise
