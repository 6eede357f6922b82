"""Tests for selectors, topics and log decoding."""

from __future__ import annotations

import pytest
from eth_abi import encode

from stealth_pool.subspecs.hashing import keccak256
from stealth_pool.subspecs.rpc import (
    DEPOSIT_TOPIC,
    decode_announcement_log,
    decode_deposit_log,
    event_topic,
    function_selector,
)
from stealth_pool.subspecs.rpc.abi import decode_uint
from stealth_pool.subspecs.secp256k1 import private_key_from_scalar, public_key_from_private
from stealth_pool.subspecs.stealth import MetaAddress, derive_stealth_address
from stealth_pool.types import Bytes32
from tests.stealth_pool.helpers import (
    announcement_log,
    deposit_log,
    make_announcement,
    uint_result,
)

META_ADDRESS = MetaAddress(
    spend_public_key=public_key_from_private(private_key_from_scalar(5)),
    viewing_public_key=public_key_from_private(private_key_from_scalar(7)),
)


class TestSignatures:
    """Known selectors and topics."""

    def test_function_selector(self) -> None:
        """ERC-20 transfer selector."""
        assert function_selector("transfer(address,uint256)") == "0xa9059cbb"

    def test_event_topic(self) -> None:
        """ERC-20 Transfer event topic."""
        assert event_topic("Transfer(address,address,uint256)") == (
            "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
        )

    def test_decode_uint(self) -> None:
        """A single uint256 return value."""
        assert decode_uint(uint_result(2**200 + 1)) == 2**200 + 1


class TestDepositLog:
    """Tests for Deposit event decoding."""

    def test_decodes_fields(self) -> None:
        """Commitment comes from the topic; index and time from the data."""
        log = decode_deposit_log(deposit_log(commitment=77, leaf_index=3, timestamp=99, block=12))

        assert log.commitment == 77
        assert log.leaf_index == 3
        assert log.timestamp == 99
        assert log.block_number == 12

    def test_wrong_event(self) -> None:
        """A log of another event is rejected."""
        raw = deposit_log(1, 0)
        raw["topics"][0] = event_topic("Transfer(address,address,uint256)")
        with pytest.raises(ValueError, match="expected event"):
            decode_deposit_log(raw)

    def test_truncated_data(self) -> None:
        """Short data is a decoding failure reported as ValueError."""
        raw = deposit_log(1, 0)
        raw["data"] = raw["data"][:40]
        with pytest.raises(ValueError):
            decode_deposit_log(raw)

    def test_topic_is_case_insensitive(self) -> None:
        """Nodes may return upper-case hex."""
        raw = deposit_log(1, 0)
        raw["topics"][0] = DEPOSIT_TOPIC.upper().replace("0X", "0x")
        assert decode_deposit_log(raw).leaf_index == 0


class TestAnnouncementLog:
    """Tests for StealthPaymentReceived event decoding."""

    def test_round_trips_announcement_fields(self) -> None:
        """Every non-indexed field and the stealth address decode exactly."""
        payment = derive_stealth_address(META_ADDRESS, private_key_from_scalar(9), 6)
        announcement = make_announcement(payment, block_number=55)

        decoded = decode_announcement_log(announcement_log(announcement))

        assert decoded.stealth_address == payment.stealth_address
        assert decoded.ephemeral_public_key == payment.ephemeral_public_key
        assert decoded.view_hint == payment.view_hint
        assert decoded.k == 6
        assert decoded.amount == announcement.amount
        assert decoded.symbol == "TUSDC"
        assert decoded.block_number == 55
        assert decoded.transaction_hash == Bytes32(b"\xab" * 32)

    def test_source_chain_is_topic_hash(self) -> None:
        """An indexed string is only available as its hash."""
        payment = derive_stealth_address(META_ADDRESS, private_key_from_scalar(9), 0)
        decoded = decode_announcement_log(announcement_log(make_announcement(payment)))
        assert decoded.source_chain == "0x" + keccak256(b"ethereum-sepolia").hex()

    def test_bad_ephemeral_key_length(self) -> None:
        """A key that is not 33 bytes cannot be an announcement."""
        payment = derive_stealth_address(META_ADDRESS, private_key_from_scalar(9), 0)
        raw = announcement_log(make_announcement(payment))
        raw["data"] = "0x" + encode(
            ["uint256", "string", "bytes", "bytes1", "uint32"],
            [1, "TUSDC", b"\x02" * 32, b"\x02", 0],
        ).hex()

        with pytest.raises(ValueError):
            decode_announcement_log(raw)

    def test_missing_topics(self) -> None:
        """Both indexed parameters must be present."""
        payment = derive_stealth_address(META_ADDRESS, private_key_from_scalar(9), 0)
        raw = announcement_log(make_announcement(payment))
        raw["topics"] = raw["topics"][:2]

        with pytest.raises(ValueError):
            decode_announcement_log(raw)
