"""Tests for the announcement scanner."""

from __future__ import annotations

import pytest

from stealth_pool.subspecs.metrics import scan_candidates_total, scan_matches_total
from stealth_pool.subspecs.secp256k1 import private_key_from_scalar, public_key_from_private
from stealth_pool.subspecs.stealth import (
    Announcement,
    MetaAddress,
    MetaKeys,
    StealthScanner,
    derive_stealth_address,
    examine_announcement,
)
from tests.stealth_pool.helpers import make_announcement, run_async

KEYS = MetaKeys(
    meta_address=MetaAddress(
        spend_public_key=public_key_from_private(private_key_from_scalar(5)),
        viewing_public_key=public_key_from_private(private_key_from_scalar(7)),
    ),
    spend_private_key=private_key_from_scalar(5),
    viewing_private_key=private_key_from_scalar(7),
)

STRANGER = MetaAddress(
    spend_public_key=public_key_from_private(private_key_from_scalar(13)),
    viewing_public_key=public_key_from_private(private_key_from_scalar(17)),
)


def _ours(ephemeral: int, block_number: int, k: int = 0) -> Announcement:
    payment = derive_stealth_address(KEYS.meta_address, private_key_from_scalar(ephemeral), k)
    return make_announcement(payment, block_number)


def _theirs(ephemeral: int, block_number: int) -> Announcement:
    payment = derive_stealth_address(STRANGER, private_key_from_scalar(ephemeral), 0)
    return make_announcement(payment, block_number)


class FakeSource:
    """Announcement source backed by a list, recording every query."""

    def __init__(self, announcements: list[Announcement]) -> None:
        self.announcements = announcements
        self.queries: list[tuple[int, int]] = []

    async def fetch(self, from_block: int, to_block: int) -> list[Announcement]:
        """Announcements whose block lies in the range."""
        self.queries.append((from_block, to_block))
        return [a for a in self.announcements if from_block <= a.block_number <= to_block]


class TestExamineAnnouncement:
    """Tests for the per-announcement check."""

    def test_own_payment_matches_with_spendable_key(self) -> None:
        """A match carries the private key of the stealth address."""
        announcement = _ours(21, 1, k=3)
        match = examine_announcement(KEYS, announcement)

        assert match is not None
        assert match.announcement == announcement
        payment = derive_stealth_address(KEYS.meta_address, private_key_from_scalar(21), 3)
        assert public_key_from_private(match.stealth_private_key) == payment.stealth_public_key

    def test_foreign_payment_ignored(self) -> None:
        """Payments to other recipients are not matches."""
        assert examine_announcement(KEYS, _theirs(21, 1)) is None

    def test_tampered_counter_ignored(self) -> None:
        """An announcement with the wrong k fails re-derivation."""
        announcement = _ours(21, 1, k=3).model_copy(update={"k": 4})
        assert examine_announcement(KEYS, announcement) is None

    def test_counts_candidates_and_matches(self) -> None:
        """Every examined announcement is a candidate; only ours are matches."""
        candidates = scan_candidates_total._value.get()
        matches = scan_matches_total._value.get()

        examine_announcement(KEYS, _ours(21, 1))
        examine_announcement(KEYS, _theirs(22, 1))

        assert scan_candidates_total._value.get() == candidates + 2
        assert scan_matches_total._value.get() == matches + 1


class TestScan:
    """Tests for batch scanning."""

    def test_matches_in_announcement_order(self) -> None:
        """Matches come back in input order regardless of worker timing."""
        batch = [_ours(31, 1), _theirs(32, 2), _ours(33, 3), _theirs(34, 4), _ours(35, 5)]
        scanner = StealthScanner(KEYS, workers=3)

        found = run_async(scanner.scan(batch))

        assert [match.announcement for match in found] == [batch[0], batch[2], batch[4]]
        assert scanner.matches == found
        assert scanner.checkpoint == 5

    def test_empty_batch(self) -> None:
        """Nothing to scan leaves the checkpoint alone."""
        scanner = StealthScanner(KEYS)
        assert run_async(scanner.scan([])) == []
        assert scanner.checkpoint is None

    def test_matches_accumulate_across_batches(self) -> None:
        """The scanner keeps every match it has found."""
        scanner = StealthScanner(KEYS, workers=2)
        run_async(scanner.scan([_ours(41, 1)]))
        run_async(scanner.scan([_ours(42, 2), _theirs(43, 2)]))

        assert len(scanner.matches) == 2
        assert scanner.checkpoint == 2

    def test_needs_a_worker(self) -> None:
        """A scanner without workers is a configuration error."""
        with pytest.raises(ValueError):
            StealthScanner(KEYS, workers=0)


class TestScanSource:
    """Tests for chunked scanning of a block range."""

    def test_chunks_cover_range_without_gaps(self) -> None:
        """Queries tile the range exactly and the checkpoint reaches its end."""
        source = FakeSource([_ours(51, 3), _theirs(52, 7), _ours(53, 12)])
        scanner = StealthScanner(KEYS)

        found = run_async(scanner.scan_source(source, 0, 12, chunk_size=5))

        assert source.queries == [(0, 4), (5, 9), (10, 12)]
        assert [match.announcement.block_number for match in found] == [3, 12]
        assert scanner.checkpoint == 12

    def test_empty_chunks_still_advance_checkpoint(self) -> None:
        """A quiet range is recorded as scanned."""
        scanner = StealthScanner(KEYS)
        run_async(scanner.scan_source(FakeSource([]), 100, 199, chunk_size=50))
        assert scanner.checkpoint == 199

    def test_chunk_size_positive(self) -> None:
        """A zero chunk size is rejected."""
        scanner = StealthScanner(KEYS)
        with pytest.raises(ValueError):
            run_async(scanner.scan_source(FakeSource([]), 0, 1, chunk_size=0))
