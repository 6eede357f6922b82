"""
Stealth payment scanner.

Recipients find their payments by testing every `StealthPaymentReceived`
announcement against their keys. Testing is pure and independent per
announcement, so it fans out across workers.

Scanner Structure:
- Workers pull announcements from a job queue and test them. They hold no
  state; each outcome is pushed onto a result queue.
- A single owner drains the result queue. It alone appends matches and
  advances the checkpoint, so no state is shared between workers.

Testing an announcement:
1. View hint check (one ECDH). Rejects about half of foreign payments.
2. Full re-derivation of the stealth address. Rejects the rest.
3. Recovery of the stealth private key for confirmed matches.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, Protocol

from ..metrics import scan_candidates_total, scan_matches_total
from .containers import Announcement, MetaKeys, ScanMatch
from .engine import check_view_hint, matches_stealth_address, recover_stealth_private_key

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4
"""Number of concurrent scanning workers."""

DEFAULT_CHUNK_SIZE = 2_000
"""Blocks fetched per announcement query."""


class AnnouncementSource(Protocol):
    """Anything that can list announcements in a block range."""

    async def fetch(self, from_block: int, to_block: int) -> list[Announcement]:
        """Return announcements emitted in blocks `[from_block, to_block]`."""
        ...


def examine_announcement(keys: MetaKeys, announcement: Announcement) -> ScanMatch | None:
    """
    Test one announcement against a recipient's keys.

    Returns:
        A match carrying the stealth private key, or None for foreign payments.
    """
    scan_candidates_total.inc()

    if not check_view_hint(
        keys.viewing_private_key,
        announcement.ephemeral_public_key,
        announcement.view_hint,
    ):
        return None

    if not matches_stealth_address(
        keys.viewing_private_key,
        keys.meta_address.spend_public_key,
        announcement.ephemeral_public_key,
        announcement.k,
        announcement.stealth_address,
    ):
        return None

    stealth_private_key = recover_stealth_private_key(
        keys.viewing_private_key,
        keys.spend_private_key,
        announcement.ephemeral_public_key,
        announcement.k,
    )
    scan_matches_total.inc()
    return ScanMatch(announcement=announcement, stealth_private_key=stealth_private_key)


@dataclass(frozen=True, slots=True)
class _Outcome:
    """What a worker reports for one job."""

    position: int
    block_number: int
    match: ScanMatch | None


@dataclass
class StealthScanner:
    """
    Finds a recipient's payments among public announcements.

    The scanner object is the single owner of scan state: the matches found
    so far and the checkpoint (the highest block fully scanned).
    """

    keys: MetaKeys
    """Recipient keys. Only used inside workers, never logged."""

    workers: int = DEFAULT_WORKERS
    """Number of concurrent workers per batch."""

    checkpoint: int | None = None
    """Highest block number whose announcements have all been examined."""

    matches: list[ScanMatch] = field(default_factory=list)
    """Every match found since the scanner was created."""

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError("scanner needs at least one worker")

    async def _worker(
        self,
        jobs: asyncio.Queue[tuple[int, Announcement] | None],
        results: asyncio.Queue[_Outcome],
    ) -> None:
        """Test announcements until the stop sentinel arrives."""
        while True:
            job = await jobs.get()
            if job is None:
                return
            position, announcement = job

            # Curve arithmetic is CPU bound. Keep the event loop responsive.
            match = await asyncio.to_thread(examine_announcement, self.keys, announcement)
            await results.put(_Outcome(position, announcement.block_number, match))

    async def _collect(self, results: asyncio.Queue[_Outcome], expected: int) -> list[ScanMatch]:
        """Drain exactly `expected` outcomes and apply them to scanner state."""
        found: list[tuple[int, ScanMatch]] = []
        highest = self.checkpoint

        for _ in range(expected):
            outcome = await results.get()
            if highest is None or outcome.block_number > highest:
                highest = outcome.block_number
            if outcome.match is not None:
                found.append((outcome.position, outcome.match))

        # Report matches in announcement order regardless of completion order.
        batch = [match for _, match in sorted(found, key=lambda item: item[0])]
        self.matches.extend(batch)
        self.checkpoint = highest
        return batch

    async def scan(self, announcements: Iterable[Announcement]) -> list[ScanMatch]:
        """
        Examine a batch of announcements.

        Args:
            announcements: Announcements to test, in chain order.

        Returns:
            Matches from this batch, in the order they were given.
        """
        batch = list(announcements)
        if not batch:
            return []

        jobs: asyncio.Queue[tuple[int, Announcement] | None] = asyncio.Queue()
        results: asyncio.Queue[_Outcome] = asyncio.Queue()

        for position, announcement in enumerate(batch):
            jobs.put_nowait((position, announcement))
        worker_count = min(self.workers, len(batch))
        for _ in range(worker_count):
            jobs.put_nowait(None)

        async with asyncio.TaskGroup() as tg:
            for _ in range(worker_count):
                tg.create_task(self._worker(jobs, results))
            owner = tg.create_task(self._collect(results, len(batch)))

        found = owner.result()
        logger.info(
            "Scanned %d announcements up to block %s: %d matches",
            len(batch),
            self.checkpoint,
            len(found),
        )
        return found

    async def scan_source(
        self,
        source: AnnouncementSource,
        from_block: int,
        to_block: int,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> list[ScanMatch]:
        """
        Scan a block range in bounded chunks, advancing the checkpoint per chunk.

        Resuming from `checkpoint + 1` after an interruption never skips a block.
        """
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")

        found: list[ScanMatch] = []
        start = from_block
        while start <= to_block:
            end = min(start + chunk_size - 1, to_block)
            announcements = await source.fetch(start, end)
            logger.debug("Fetched %d announcements in blocks %d-%d", len(announcements), start, end)

            found.extend(await self.scan(announcements))
            self.checkpoint = end
            start = end + 1
        return found
