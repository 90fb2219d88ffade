"""Symmetry closure: group throws that are images of each other under the
pattern's symmetries and appoint one primary throw per group."""

from __future__ import annotations

import logging

from jugglr.core.notation.mhn.errors import PatternInternalError
from jugglr.core.notation.mhn.matrix import JugglingMatrix

logger = logging.getLogger(__name__)


class _UnionFind:
    """Disjoint sets over arena ids; the root is the smallest by ``key``."""

    def __init__(self, keys: dict[int, tuple[int, int, int, int]]) -> None:
        self._parent = {i: i for i in keys}
        self._keys = keys

    def find(self, item: int) -> int:
        root = item
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def union(self, a: int, b: int) -> bool:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        if self._keys[rb] < self._keys[ra]:
            ra, rb = rb, ra
        self._parent[rb] = ra
        return True


def resolve_primaries(matrix: JugglingMatrix) -> int:
    """Set every grid throw's ``primary`` to its class representative.

    Two throws are in one class when a declared symmetry maps one onto the
    other (cell ``(i + delay, perm(j), h or flipped h, slot)``). The
    representative is the class member with the smallest
    (index, juggler, hand, slot). Images past the lookahead horizon are
    skipped.

    Args:
        matrix: Populated juggling matrix

    Returns:
        Number of primary throws

    Raises:
        PatternInternalError: If an in-window image cell is empty
    """
    throws = list(matrix.iter_throws())
    for throw in throws:
        throw.primary = throw.id
        throw.source = None

    sets = _UnionFind({t.id: t.order_key for t in throws})

    for symmetry in matrix.symmetries:
        perm = symmetry.permutation
        for throw in throws:
            image_index = throw.index + symmetry.delay
            if image_index >= matrix.indexes:
                continue
            image_juggler, image_hand = perm.image_of(throw.juggler, throw.hand)
            image = matrix.cell(image_juggler, image_hand, image_index, throw.slot)
            if image is None:
                raise PatternInternalError(
                    reason=f"{symmetry.type.value} symmetry image of throw is missing",
                    juggler=throw.juggler,
                    hand=throw.hand,
                    index=throw.index,
                    slot=throw.slot,
                    state=matrix.describe(),
                )
            sets.union(throw.id, image.id)

    primaries = 0
    for throw in throws:
        throw.primary = sets.find(throw.id)
        if throw.is_primary:
            primaries += 1
            logger.debug(
                f"primary throw at j={throw.juggler}, h={throw.hand.name}, "
                f"i={throw.index}, slot={throw.slot}"
            )

    logger.debug(f"Resolved {primaries} primary throws from {len(throws)}")
    return primaries


__all__ = [
    "resolve_primaries",
]
