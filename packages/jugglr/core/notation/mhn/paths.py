"""Path assignment: wire sources to targets and number the objects."""

from __future__ import annotations

import logging
from collections import defaultdict

from jugglr.core.notation.mhn.errors import PatternError, PatternInternalError
from jugglr.core.notation.mhn.matrix import JugglingMatrix
from jugglr.core.notation.mhn.models import Throw

logger = logging.getLogger(__name__)


def assign_paths(matrix: JugglingMatrix) -> None:
    """Link every throw to the catch it fills and give each object a path number.

    Each class of symmetric throws lands in one common multiplex slot: the
    smallest slot that is free at the destination of every class member whose
    destination is inside the window. Path numbers follow source chains;
    each chain head gets the next number, starting at 1.

    Args:
        matrix: Matrix with primaries resolved

    Raises:
        PatternError: If too many objects land in one cell, or the pattern
            has more chains than declared paths
        PatternInternalError: If the pattern has fewer chains than declared
    """
    members: dict[int, list[Throw]] = defaultdict(list)
    for throw in matrix.iter_throws():
        members[throw.primary].append(throw)

    for primary in matrix.iter_throws():
        if not primary.is_primary:
            continue
        landing = [t for t in members[primary.id] if t.target_index < matrix.indexes]

        target_slot = _find_target_slot(matrix, landing)
        if target_slot is None:
            raise PatternError(
                reason=(
                    f"Too many objects landing on beat {primary.target_index + 1} "
                    f"for juggler {primary.target_juggler}, {primary.target_hand.label}"
                ),
                beat=primary.target_index + 1,
                juggler=primary.target_juggler,
                hand=primary.target_hand,
            )

        for throw in landing:
            target = matrix.cell(
                throw.target_juggler, throw.target_hand, throw.target_index, target_slot
            )
            if target is None:
                raise PatternInternalError(
                    reason="target cell vanished while wiring paths",
                    juggler=throw.juggler,
                    hand=throw.hand,
                    index=throw.index,
                    slot=throw.slot,
                )
            throw.target = target.id
            throw.target_slot = target_slot
            target.source = throw.id

    current_path = 1
    for throw in matrix.iter_throws():
        if throw.source is not None:
            throw.path_num = matrix.throw(throw.source).path_num
            continue
        if current_path > matrix.number_of_paths:
            raise PatternError(
                reason=(
                    f"more object chains than the {matrix.number_of_paths} declared paths"
                ),
                beat=throw.index + 1,
                juggler=throw.juggler,
                hand=throw.hand,
            )
        throw.path_num = current_path
        current_path += 1

    if current_path <= matrix.number_of_paths:
        raise PatternInternalError(
            reason=(
                f"only {current_path - 1} object chains for "
                f"{matrix.number_of_paths} declared paths"
            ),
            state=matrix.describe(),
        )
    logger.debug(f"Assigned {matrix.number_of_paths} paths")


def _find_target_slot(matrix: JugglingMatrix, landing: list[Throw]) -> int | None:
    for slot in range(matrix.max_occupancy):
        fits = True
        for throw in landing:
            target = matrix.cell(throw.target_juggler, throw.target_hand, throw.target_index, slot)
            if target is None or target.source is not None:
                fits = False
                break
        if fits:
            return slot
    return None


__all__ = [
    "assign_paths",
]
