"""
Incremental Merkle tree with root history.

The pool never stores its leaves. It keeps only what it needs to append:

- `filled_subtrees[i]`: the most recent left node at level `i`
- `zeros[i]`: the root of an empty subtree of height `i`

Appending leaf `n` walks from the leaf to the root, choosing at level `i`
whether the running hash is a left child (pair it with `zeros[i]`, and
remember it) or a right child (pair it with `filled_subtrees[i]`). That is
exactly `levels` hash calls.

Every new root is written into a fixed ring buffer. Withdrawals may prove
against any root still in the buffer, so a proof built against a slightly
stale tree stays valid while other deposits land.

State is immutable. `insert` returns a new tree and leaves the old one
untouched, so a failed transition never leaves a half-updated tree.
"""

from __future__ import annotations

from functools import cache
from typing import Tuple

from pydantic import Field

from stealth_pool.types import InvalidFieldElement, StrictBaseModel, TreeFull

from ..bn254 import is_field_element
from ..mimc import hash2_int
from .config import ROOT_HISTORY_SIZE


@cache
def zero_hashes(levels: int) -> Tuple[int, ...]:
    """
    Roots of empty subtrees for heights `0..levels`.

    `zeros[0]` is the empty leaf value `hash2(0, 0)`. The last entry is the
    root of the empty tree.
    """
    zeros = [hash2_int(0, 0)]
    for _ in range(levels):
        zeros.append(hash2_int(zeros[-1], zeros[-1]))
    return tuple(zeros)


class MerkleTree(StrictBaseModel):
    """Append-only commitment tree with a ring buffer of recent roots."""

    levels: int = Field(ge=1)
    """Tree depth."""

    next_index: int = Field(ge=0)
    """Index the next leaf will be written to."""

    filled_subtrees: Tuple[int, ...]
    """Latest left node per level, `levels` entries."""

    roots: Tuple[int, ...]
    """Ring buffer of roots. Zero marks a slot that was never written."""

    current_root_index: int = Field(ge=0)
    """Slot of the latest root in `roots`."""

    @classmethod
    def empty(cls, levels: int, root_history_size: int = ROOT_HISTORY_SIZE) -> MerkleTree:
        """Create an empty tree whose only known root is the empty root."""
        if root_history_size < 1:
            raise ValueError("root history must hold at least one root")

        zeros = zero_hashes(levels)
        roots = (zeros[levels],) + (0,) * (root_history_size - 1)
        return cls(
            levels=levels,
            next_index=0,
            filled_subtrees=zeros[:levels],
            roots=roots,
            current_root_index=0,
        )

    @property
    def capacity(self) -> int:
        """Total number of leaves."""
        return 1 << self.levels

    @property
    def root(self) -> int:
        """The latest root."""
        return self.roots[self.current_root_index]

    def get_last_root(self) -> int:
        """The latest root."""
        return self.root

    def root_history(self) -> list[int]:
        """Every root still in the buffer, oldest first."""
        size = len(self.roots)
        ordered = (self.roots[(self.current_root_index + 1 + i) % size] for i in range(size))
        return [root for root in ordered if root != 0]

    def is_known_root(self, root: int) -> bool:
        """
        Check whether `root` is one of the recent roots.

        Zero is never a known root, since it marks unwritten buffer slots.
        """
        if root == 0:
            return False
        return root in self.roots

    def insert(self, leaf: int) -> Tuple[MerkleTree, int]:
        """
        Append a leaf.

        Args:
            leaf: The commitment to insert.

        Returns:
            The new tree and the index the leaf was written to.

        Raises:
            InvalidFieldElement: If the leaf is not a field element.
            TreeFull: If every leaf slot is taken.
        """
        if not is_field_element(leaf):
            raise InvalidFieldElement("commitment")
        if self.next_index >= self.capacity:
            raise TreeFull(self.capacity)

        zeros = zero_hashes(self.levels)
        filled = list(self.filled_subtrees)

        index = self.next_index
        current = leaf
        for level in range(self.levels):
            if index % 2 == 0:
                left, right = current, zeros[level]
                filled[level] = current
            else:
                left, right = filled[level], current
            current = hash2_int(left, right)
            index //= 2

        # Overwrite the oldest slot with the new root.
        slot = (self.current_root_index + 1) % len(self.roots)
        roots = list(self.roots)
        roots[slot] = current

        updated = self.model_copy(
            update={
                "next_index": self.next_index + 1,
                "filled_subtrees": tuple(filled),
                "roots": tuple(roots),
                "current_root_index": slot,
            }
        )
        return updated, self.next_index
