"""Test helpers for stealth-pool unit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TypeVar

from .builders import (
    BLOCK_TIME,
    BRIDGE_ADDRESS,
    DENOMINATION,
    DEPOSITOR,
    GMP,
    ITS,
    PLACEHOLDER_EPHEMERAL_KEY,
    POOL_ADDRESS,
    RELAYER,
    STEALTH_ADDRESS,
    PoolHarness,
    Trapdoor,
    g1_point,
    g2_point,
    make_announcement,
    make_harness,
    make_pool_config,
    make_request,
)
from .mocks import DUMMY_PROOF, CrashingDispatcher, ReentrantDispatcher, RecordingVerifier
from .node import NO_WAIT, NODE_URL, FakeNode, announcement_log, deposit_log, uint_result

_T = TypeVar("_T")


def run_async(coro: Coroutine[object, object, _T]) -> _T:
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


__all__ = [
    # Builders
    "PoolHarness",
    "Trapdoor",
    "g1_point",
    "g2_point",
    "make_announcement",
    "make_harness",
    "make_pool_config",
    "make_request",
    # Mocks
    "CrashingDispatcher",
    "DUMMY_PROOF",
    "ReentrantDispatcher",
    "RecordingVerifier",
    # Constants
    "BLOCK_TIME",
    "BRIDGE_ADDRESS",
    "DENOMINATION",
    "DEPOSITOR",
    "GMP",
    "ITS",
    "PLACEHOLDER_EPHEMERAL_KEY",
    "POOL_ADDRESS",
    "RELAYER",
    "STEALTH_ADDRESS",
    # JSON-RPC node
    "FakeNode",
    "NODE_URL",
    "NO_WAIT",
    "announcement_log",
    "deposit_log",
    "uint_result",
    # Async utilities
    "run_async",
]
