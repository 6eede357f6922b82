"""
Abstract storage interface for wallet-side data.

Defines the Protocol that all note store implementations must follow.
Uses structural subtyping for flexibility.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from stealth_pool.subspecs.pool import Note
    from stealth_pool.types import Bytes20


class NoteStore(Protocol):
    """
    Protocol for note and scan progress storage.

    Notes hold spending secrets. Implementations keep them only in local
    storage and never log their contents.
    """

    # -------------------------------------------------------------------------
    # Note Operations
    # -------------------------------------------------------------------------

    def put_note(self, note: Note) -> None:
        """
        Store a note, replacing any note with the same commitment.

        Args:
            note: Note to store.
        """
        ...

    def get_note(self, commitment: int) -> Note | None:
        """
        Retrieve a note by its commitment.

        Returns:
            Note if found, None otherwise.
        """
        ...

    def list_notes(self, pool_address: Bytes20 | None = None) -> list[Note]:
        """
        List stored notes, oldest first.

        Args:
            pool_address: Restrict to notes of one pool.
        """
        ...

    def mark_leaf_index(self, commitment: int, leaf_index: int) -> Note:
        """
        Record where a note's deposit landed in the tree.

        Raises:
            NoteNotFound: If no note has this commitment.
        """
        ...

    def delete_note(self, commitment: int) -> bool:
        """
        Remove a note.

        Returns:
            True if a note was removed.
        """
        ...

    # -------------------------------------------------------------------------
    # Scan Checkpoint Operations
    # -------------------------------------------------------------------------

    def get_scan_checkpoint(self, source: str) -> int | None:
        """Highest block fully scanned for `source`, or None."""
        ...

    def put_scan_checkpoint(self, source: str, block_number: int) -> None:
        """Record scan progress for `source`."""
        ...
