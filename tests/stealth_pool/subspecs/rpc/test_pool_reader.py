"""Tests for reading pool state over JSON-RPC."""

from __future__ import annotations

from typing import Any

import pytest

from stealth_pool.subspecs.rpc import PoolReader, function_selector
from stealth_pool.subspecs.stealth import to_checksum_address
from stealth_pool.types import RpcError
from tests.stealth_pool.helpers import (
    POOL_ADDRESS,
    FakeNode,
    deposit_log,
    run_async,
    uint_result,
)


def _node(next_index: int, logs: list[dict[str, Any]], root: int = 1234) -> FakeNode:
    answers = {
        function_selector("getLastRoot()"): uint_result(root),
        function_selector("nextIndex()"): uint_result(next_index),
    }
    node = FakeNode()
    node.on("eth_call", lambda params: answers[params[0]["data"]])
    node.on("eth_getLogs", lambda params: logs)
    return node


async def _read(node: FakeNode, action: str, from_block: int = 0) -> Any:
    async with node.client() as client:
        reader = PoolReader(client, POOL_ADDRESS, from_block=from_block)
        return await getattr(reader, action)()


class TestCalls:
    """Tests for contract reads."""

    def test_get_last_root(self) -> None:
        """getLastRoot is an eth_call against the pool at latest."""
        node = _node(0, [], root=987654321)

        assert run_async(_read(node, "get_last_root")) == 987654321
        [request] = node.requests
        assert request["params"] == [
            {"to": to_checksum_address(POOL_ADDRESS), "data": function_selector("getLastRoot()")},
            "latest",
        ]

    def test_next_index(self) -> None:
        """nextIndex is decoded as a uint."""
        assert run_async(_read(_node(5, []), "next_index")) == 5


class TestDeposits:
    """Tests for rebuilding the leaf list."""

    def test_logs_query_starts_at_deployment_block(self) -> None:
        """The log filter names the pool, the Deposit topic and the block range."""
        node = _node(0, [])
        run_async(_read(node, "fetch_deposits", from_block=300))

        [request] = node.requests
        query = request["params"][0]
        assert query["address"] == to_checksum_address(POOL_ADDRESS)
        assert query["fromBlock"] == hex(300)
        assert query["toBlock"] == "latest"

    def test_leaves_ordered_by_index(self) -> None:
        """Out-of-order logs are sorted into leaf order."""
        logs = [deposit_log(30, 2), deposit_log(10, 0), deposit_log(20, 1)]
        assert run_async(_read(_node(3, logs), "fetch_deposit_leaves")) == [10, 20, 30]

    def test_missing_leaf_detected(self) -> None:
        """A gap in the logs is an error, not a wrong tree."""
        logs = [deposit_log(10, 0), deposit_log(30, 2)]
        with pytest.raises(RpcError, match="first at index 1"):
            run_async(_read(_node(3, logs), "fetch_deposit_leaves"))

    def test_logs_past_next_index_ignored(self) -> None:
        """Deposits mined after the nextIndex read are left for next time."""
        logs = [deposit_log(10, 0), deposit_log(20, 1)]
        assert run_async(_read(_node(1, logs), "fetch_deposit_leaves")) == [10]
