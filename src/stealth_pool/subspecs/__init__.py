"""Subsystems of the stealth pool: cryptography, the pool itself, and wallet tooling."""

from .pool import CommitmentPool, PoolConfig
from .rpc import JsonRpcClient, PoolReader, RpcConfig
from .stealth import StealthScanner

__all__ = [
    "CommitmentPool",
    "JsonRpcClient",
    "PoolConfig",
    "PoolReader",
    "RpcConfig",
    "StealthScanner",
]
