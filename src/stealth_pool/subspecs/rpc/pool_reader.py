"""
Read-only view of a deployed commitment pool.

A withdrawer rebuilds the pool's Merkle tree from `Deposit` events, then
checks that the rebuilt root matches `getLastRoot()` before proving.
"""

from __future__ import annotations

import logging

from stealth_pool.types import Bytes20, RpcError

from ..stealth import to_checksum_address
from .abi import (
    DEPOSIT_TOPIC,
    GET_LAST_ROOT,
    NEXT_INDEX,
    DepositLog,
    decode_deposit_log,
    decode_uint,
    function_selector,
)
from .client import JsonRpcClient

logger = logging.getLogger(__name__)


class PoolReader:
    """Queries pool state through a JSON-RPC node."""

    def __init__(self, client: JsonRpcClient, pool_address: Bytes20, from_block: int = 0) -> None:
        """
        Args:
            client: Connected JSON-RPC client.
            pool_address: Address of the pool contract.
            from_block: Deployment block; logs before it are not queried.
        """
        self.client = client
        self.pool_address = pool_address
        self.from_block = from_block

    @property
    def address(self) -> str:
        """Checksummed pool address."""
        return to_checksum_address(self.pool_address)

    async def _call(self, signature: str) -> int:
        result = await self.client.call(
            "eth_call",
            [{"to": self.address, "data": function_selector(signature)}, "latest"],
        )
        return decode_uint(result)

    async def get_last_root(self) -> int:
        """Current root of the on-chain tree."""
        return await self._call(GET_LAST_ROOT)

    async def next_index(self) -> int:
        """Number of deposits the pool has accepted."""
        return await self._call(NEXT_INDEX)

    async def fetch_deposits(self, to_block: int | str = "latest") -> list[DepositLog]:
        """All `Deposit` events up to `to_block`, ordered by leaf index."""
        logs = await self.client.call(
            "eth_getLogs",
            [
                {
                    "address": self.address,
                    "topics": [DEPOSIT_TOPIC],
                    "fromBlock": hex(self.from_block),
                    "toBlock": to_block if isinstance(to_block, str) else hex(to_block),
                }
            ],
        )
        deposits = sorted((decode_deposit_log(log) for log in logs), key=lambda d: d.leaf_index)
        logger.debug("Fetched %d deposit events from %s", len(deposits), self.address)
        return deposits

    async def fetch_deposit_leaves(self) -> list[int]:
        """
        Commitments in insertion order, one per accepted deposit.

        Raises:
            RpcError: If the node's logs do not cover every leaf below `nextIndex`.
        """
        count = await self.next_index()
        deposits = await self.fetch_deposits()

        leaves: list[int | None] = [None] * count
        for deposit in deposits:
            if deposit.leaf_index < count:
                leaves[deposit.leaf_index] = deposit.commitment

        missing = [index for index, leaf in enumerate(leaves) if leaf is None]
        if missing:
            raise RpcError(
                f"Deposit history incomplete: {len(missing)} of {count} leaves missing, "
                f"first at index {missing[0]}"
            )

        logger.info("Loaded %d leaves from pool %s", count, self.address)
        return [leaf for leaf in leaves if leaf is not None]
