"""
Merkle paths for withdrawal proofs.

The pool keeps no leaves, so the prover rebuilds the tree from the
`Deposit` events. Leaves past the last deposit are the empty leaf value,
and every missing right sibling is the matching empty-subtree root.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from pydantic import Field, model_validator

from stealth_pool.types import CommitmentNotFound, StrictBaseModel

from ..mimc import hash2_int
from ..pool.merkle_tree import zero_hashes


class MerklePath(StrictBaseModel):
    """Authentication path from one leaf to the root."""

    root: int
    leaf_index: int = Field(ge=0)
    path_elements: Tuple[int, ...]
    """Sibling at each level, leaf level first."""
    path_indices: Tuple[int, ...]
    """1 where the running node is a right child, else 0."""

    @model_validator(mode="after")
    def check_shape(self) -> MerklePath:
        """Elements and indices must cover the same levels."""
        if len(self.path_elements) != len(self.path_indices):
            raise ValueError("path_elements and path_indices differ in length")
        if any(bit not in (0, 1) for bit in self.path_indices):
            raise ValueError("path_indices must be bits")
        return self


def compute_root(leaves: Sequence[int], levels: int) -> int:
    """Root of a tree whose first leaves are `leaves` and the rest empty."""
    if len(leaves) > 1 << levels:
        raise ValueError(f"{len(leaves)} leaves do not fit in {levels} levels")

    zeros = zero_hashes(levels)
    layer = list(leaves)
    for level in range(levels):
        layer = _next_layer(layer, zeros[level])
    return layer[0]


def _next_layer(layer: Sequence[int], zero: int) -> list[int]:
    size = max(1, (len(layer) + 1) // 2)
    parents = []
    for i in range(size):
        left = layer[2 * i] if 2 * i < len(layer) else zero
        right = layer[2 * i + 1] if 2 * i + 1 < len(layer) else zero
        parents.append(hash2_int(left, right))
    return parents


def build_merkle_path(leaves: Sequence[int], commitment: int, levels: int) -> MerklePath:
    """
    Locate `commitment` among the deposit leaves and build its path.

    Args:
        leaves: Every deposited commitment, in leaf order.
        commitment: The note's commitment.
        levels: Tree depth.

    Raises:
        CommitmentNotFound: If the commitment was never deposited.
    """
    if len(leaves) > 1 << levels:
        raise ValueError(f"{len(leaves)} leaves do not fit in {levels} levels")
    try:
        leaf_index = list(leaves).index(commitment)
    except ValueError:
        raise CommitmentNotFound() from None

    zeros = zero_hashes(levels)
    elements: list[int] = []
    indices: list[int] = []

    layer = list(leaves)
    position = leaf_index
    for level in range(levels):
        sibling = position ^ 1
        elements.append(layer[sibling] if sibling < len(layer) else zeros[level])
        indices.append(position & 1)

        layer = _next_layer(layer, zeros[level])
        position >>= 1

    return MerklePath(
        root=layer[0],
        leaf_index=leaf_index,
        path_elements=tuple(elements),
        path_indices=tuple(indices),
    )


def verify_merkle_path(path: MerklePath, leaf: int) -> bool:
    """Recompute the root from `leaf` along `path` and compare."""
    current = leaf
    for sibling, is_right in zip(path.path_elements, path.path_indices, strict=True):
        current = hash2_int(sibling, current) if is_right else hash2_int(current, sibling)
    return current == path.root
