"""Reusable type definitions for stealth payments and the commitment pool."""

from .base import StrictBaseModel
from .byte_arrays import (
    ZERO_HASH,
    BaseBytes,
    Bytes1,
    Bytes20,
    Bytes32,
    Bytes33,
    Bytes65,
)
from .exceptions import (
    CommitmentNotFound,
    DispatchFailed,
    InsufficientAllowance,
    InsufficientBalance,
    InvalidFieldElement,
    InvalidKey,
    InvalidProof,
    InvalidRelayerFee,
    NoteNotFound,
    NullifierAlreadyUsed,
    PoolError,
    PoolNotConfiguredForMode,
    ReentrantCall,
    RetryExhausted,
    RootMismatch,
    RpcError,
    StealthPoolError,
    TreeFull,
    UnknownRoot,
)

__all__ = [
    # Core types
    "BaseBytes",
    "Bytes1",
    "Bytes20",
    "Bytes32",
    "Bytes33",
    "Bytes65",
    "ZERO_HASH",
    "StrictBaseModel",
    # Exceptions
    "StealthPoolError",
    "PoolError",
    "InvalidFieldElement",
    "TreeFull",
    "UnknownRoot",
    "NullifierAlreadyUsed",
    "InvalidProof",
    "InvalidRelayerFee",
    "PoolNotConfiguredForMode",
    "DispatchFailed",
    "ReentrantCall",
    "InsufficientBalance",
    "InsufficientAllowance",
    "InvalidKey",
    "CommitmentNotFound",
    "RootMismatch",
    "NoteNotFound",
    "RpcError",
    "RetryExhausted",
]
