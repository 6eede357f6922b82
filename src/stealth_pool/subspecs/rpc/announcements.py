"""Announcement source backed by `eth_getLogs` on a destination chain."""

from __future__ import annotations

import logging

from stealth_pool.types import Bytes20

from ..stealth import Announcement, to_checksum_address
from .abi import STEALTH_PAYMENT_TOPIC, decode_announcement_log
from .client import JsonRpcClient

logger = logging.getLogger(__name__)


class RpcAnnouncementSource:
    """
    Lists `StealthPaymentReceived` events emitted by one receiver contract.

    Satisfies the scanner's `AnnouncementSource` protocol. The scanner
    chooses the block ranges, so each call issues a single bounded query.
    Logs the node returns from outside that range are dropped.
    """

    def __init__(self, client: JsonRpcClient, receiver_address: Bytes20) -> None:
        self.client = client
        self.receiver_address = receiver_address

    async def fetch(self, from_block: int, to_block: int) -> list[Announcement]:
        """Return announcements emitted in blocks `[from_block, to_block]`."""
        logs = await self.client.call(
            "eth_getLogs",
            [
                {
                    "address": to_checksum_address(self.receiver_address),
                    "topics": [STEALTH_PAYMENT_TOPIC],
                    "fromBlock": hex(from_block),
                    "toBlock": hex(to_block),
                }
            ],
        )

        announcements: list[Announcement] = []
        for log in logs:
            try:
                announcement = decode_announcement_log(log)
            except ValueError as exc:
                # Undecodable logs cannot be ours; skip them and keep scanning.
                logger.warning(
                    "Skipping malformed announcement in tx %s: %s",
                    log.get("transactionHash"),
                    exc,
                )
                continue
            if not from_block <= announcement.block_number <= to_block:
                # Nodes are not trusted to honour the range filter.
                logger.warning(
                    "Skipping announcement from block %d outside [%d, %d]",
                    announcement.block_number,
                    from_block,
                    to_block,
                )
                continue
            announcements.append(announcement)
        return announcements
