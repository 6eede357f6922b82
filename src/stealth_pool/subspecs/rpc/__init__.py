"""
JSON-RPC access to deployed contracts.

Reads pool state for withdrawers and announcement logs for scanners.
"""

from .abi import (
    DEPOSIT_EVENT,
    DEPOSIT_TOPIC,
    STEALTH_PAYMENT_EVENT,
    STEALTH_PAYMENT_TOPIC,
    DepositLog,
    decode_announcement_log,
    decode_deposit_log,
    event_topic,
    function_selector,
)
from .announcements import RpcAnnouncementSource
from .client import JsonRpcClient
from .config import RetryPolicy, RpcConfig
from .pool_reader import PoolReader
from .retry import retry_with_backoff

__all__ = [
    "DEPOSIT_EVENT",
    "DEPOSIT_TOPIC",
    "STEALTH_PAYMENT_EVENT",
    "STEALTH_PAYMENT_TOPIC",
    "DepositLog",
    "JsonRpcClient",
    "PoolReader",
    "RetryPolicy",
    "RpcAnnouncementSource",
    "RpcConfig",
    "decode_announcement_log",
    "decode_deposit_log",
    "event_topic",
    "function_selector",
    "retry_with_backoff",
]
