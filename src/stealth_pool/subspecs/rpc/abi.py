"""
Contract ABI pieces used by the off-chain tooling.

Only two read calls and two events are needed:

- `getLastRoot()` and `nextIndex()` on the pool.
- `Deposit(uint256 indexed commitment, uint32 leafIndex, uint256 timestamp)`
  from the pool, to rebuild the tree off-chain.
- `StealthPaymentReceived(string indexed sourceChain, address indexed stealthAddress,
  uint256 amount, string symbol, bytes ephemeralPubKey, bytes1 viewHint, uint32 k)`
  from the destination-chain receiver, to scan for incoming payments.

Indexed parameters live in the log topics. An indexed `string` is stored as
its keccak-256 hash, so the source chain name cannot be recovered from the
log and is reported as that hash.
"""

from __future__ import annotations

from typing import Any, Final

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from pydantic import Field

from stealth_pool.types import Bytes1, Bytes20, Bytes32, Bytes33, StrictBaseModel

from ..hashing import keccak256
from ..stealth import Announcement, to_checksum_address

GET_LAST_ROOT: Final = "getLastRoot()"
NEXT_INDEX: Final = "nextIndex()"

DEPOSIT_EVENT: Final = "Deposit(uint256,uint32,uint256)"
STEALTH_PAYMENT_EVENT: Final = (
    "StealthPaymentReceived(string,address,uint256,string,bytes,bytes1,uint32)"
)


def function_selector(signature: str) -> str:
    """First four bytes of the keccak-256 of a function signature, as 0x-hex."""
    return "0x" + keccak256(signature.encode())[:4].hex()


def event_topic(signature: str) -> str:
    """keccak-256 of an event signature, as 0x-hex."""
    return "0x" + keccak256(signature.encode()).hex()


DEPOSIT_TOPIC: Final = event_topic(DEPOSIT_EVENT)
STEALTH_PAYMENT_TOPIC: Final = event_topic(STEALTH_PAYMENT_EVENT)


def decode(types: list[str], data: bytes) -> tuple[Any, ...]:
    """ABI-decode `data`, reporting malformed input as `ValueError`."""
    try:
        return abi_decode(types, data)
    except DecodingError as exc:
        raise ValueError(f"undecodable ABI data: {exc}") from exc


def hex_to_bytes(value: str) -> bytes:
    """Decode a 0x-prefixed hex string as returned by a node."""
    return bytes.fromhex(value.removeprefix("0x"))


def hex_to_int(value: str) -> int:
    """Decode a node quantity (0x-prefixed hex integer)."""
    return int(value, 16)


def decode_uint(value: str) -> int:
    """Decode a single `uint` return value of an `eth_call`."""
    (result,) = decode(["uint256"], hex_to_bytes(value))
    return result


class DepositLog(StrictBaseModel):
    """A decoded `Deposit` event."""

    commitment: int = Field(ge=0)
    leaf_index: int = Field(ge=0)
    timestamp: int = Field(ge=0)
    block_number: int = Field(ge=0)


def _require_topic(log: dict[str, Any], topic: str, count: int) -> list[str]:
    topics = log.get("topics") or []
    if len(topics) != count or topics[0].lower() != topic:
        raise ValueError("log does not match the expected event")
    return topics


def decode_deposit_log(log: dict[str, Any]) -> DepositLog:
    """
    Decode a raw `Deposit` log from `eth_getLogs`.

    Raises:
        ValueError: If the log is not a well-formed `Deposit` event.
    """
    topics = _require_topic(log, DEPOSIT_TOPIC, 2)
    leaf_index, timestamp = decode(["uint32", "uint256"], hex_to_bytes(log["data"]))
    return DepositLog(
        commitment=hex_to_int(topics[1]),
        leaf_index=leaf_index,
        timestamp=timestamp,
        block_number=hex_to_int(log.get("blockNumber") or "0x0"),
    )


def decode_announcement_log(log: dict[str, Any]) -> Announcement:
    """
    Decode a raw `StealthPaymentReceived` log into an announcement.

    Raises:
        ValueError: If the log is not a well-formed announcement.
    """
    topics = _require_topic(log, STEALTH_PAYMENT_TOPIC, 3)
    amount, symbol, ephemeral_public_key, view_hint, k = decode(
        ["uint256", "string", "bytes", "bytes1", "uint32"],
        hex_to_bytes(log["data"]),
    )
    stealth_address = Bytes20(hex_to_bytes(topics[2])[-Bytes20.LENGTH :])
    transaction_hash = log.get("transactionHash")

    return Announcement(
        source_chain=topics[1].lower(),
        stealth_address=to_checksum_address(stealth_address),
        amount=amount,
        symbol=symbol,
        ephemeral_public_key=Bytes33(ephemeral_public_key),
        view_hint=Bytes1(view_hint),
        k=k,
        block_number=hex_to_int(log.get("blockNumber") or "0x0"),
        transaction_hash=None if transaction_hash is None else Bytes32(transaction_hash),
    )
