"""
Commitment pool.

Fixed-denomination deposits into an incremental Merkle tree, and
proof-gated withdrawals paid out to stealth addresses through a bridge.
"""

from .config import (
    DEFAULT_POOL_PRESET,
    DEFAULT_TREE_LEVELS,
    MAX_TREE_LEVELS,
    PROD_POOL_PRESET,
    ROOT_HISTORY_SIZE,
    TEST_POOL_PRESET,
    DispatchMode,
    GmpDispatch,
    ItsDispatch,
    PoolConfig,
)
from .dispatcher import BridgeDispatcher, Dispatch, InMemoryBridgeDispatcher
from .events import DepositEvent, WithdrawalEvent
from .ext_data import WithdrawalRequest, compute_ext_data_hash
from .host import HostChain
from .merkle_tree import MerkleTree, zero_hashes
from .note import Note, commitment_for, generate_note, nullifier_hash_for
from .pool import CommitmentPool
from .token import LedgerSnapshot, TokenLedger

__all__ = [
    "BridgeDispatcher",
    "CommitmentPool",
    "DEFAULT_POOL_PRESET",
    "DEFAULT_TREE_LEVELS",
    "DepositEvent",
    "Dispatch",
    "DispatchMode",
    "GmpDispatch",
    "HostChain",
    "InMemoryBridgeDispatcher",
    "ItsDispatch",
    "LedgerSnapshot",
    "MAX_TREE_LEVELS",
    "MerkleTree",
    "Note",
    "PROD_POOL_PRESET",
    "PoolConfig",
    "ROOT_HISTORY_SIZE",
    "TEST_POOL_PRESET",
    "TokenLedger",
    "WithdrawalEvent",
    "WithdrawalRequest",
    "commitment_for",
    "compute_ext_data_hash",
    "generate_note",
    "nullifier_hash_for",
    "zero_hashes",
]
