"""Catch ordering for cells that catch more than one object at once."""

from __future__ import annotations

import logging

from jugglr.core.notation.mhn.matrix import JugglingMatrix
from jugglr.core.notation.mhn.models import Hand, Throw

logger = logging.getLogger(__name__)


def is_catch_order_incorrect(matrix: JugglingMatrix, first: Throw, second: Throw) -> bool:
    """Whether the catches before ``first`` and ``second`` should swap order.

    Higher throws are caught first; then catches from farther-away jugglers;
    then same-hand catches before crossing ones. This heuristic is not
    invariant under juggler symmetries and is kept that way on purpose.
    """
    src1 = matrix.source_of(first)
    src2 = matrix.source_of(second)

    # time in the air: catch higher throws first
    if src1.index > src2.index:
        return True
    if src1.index < src2.index:
        return False

    # catch from faraway jugglers first
    jdiff1 = abs(first.juggler - src1.juggler)
    jdiff2 = abs(second.juggler - src2.juggler)
    if jdiff1 < jdiff2:
        return True
    if jdiff1 > jdiff2:
        return False

    # catch from the same hand first
    hdiff1 = abs(first.hand - src1.hand)
    hdiff2 = abs(second.hand - src2.hand)
    return hdiff1 > hdiff2


def set_catch_order(matrix: JugglingMatrix) -> None:
    """Fill in ``catching`` and ``catch_num`` for every grid throw.

    A throw is catching when its source was not a hold. Catch numbers start
    in slot order, are refined pairwise among primary throws, and are then
    copied from each primary to its symmetric images.
    """
    for i in range(matrix.indexes):
        for j in range(1, matrix.number_of_jugglers + 1):
            for h in Hand:
                cell = matrix.slots(j, h, i)
                catches = 0
                for throw in cell:
                    throw.catching = not matrix.source_of(throw).is_hold
                    if throw.catching:
                        throw.catch_num = catches
                        catches += 1

                if catches < 2:
                    continue
                _order_catches(matrix, cell)

    for throw in matrix.iter_throws():
        if not throw.is_primary:
            throw.catch_num = matrix.primary_of(throw).catch_num


def _order_catches(matrix: JugglingMatrix, cell: list[Throw]) -> None:
    for pos1, throw1 in enumerate(cell):
        if not throw1.is_primary:
            break
        if not throw1.catching:
            continue
        for throw2 in cell[pos1 + 1 :]:
            if not throw2.is_primary:
                break
            if not throw2.catching:
                continue
            if throw1.catch_num < throw2.catch_num:
                switch = is_catch_order_incorrect(matrix, throw1, throw2)
            else:
                switch = is_catch_order_incorrect(matrix, throw2, throw1)
            if switch:
                throw1.catch_num, throw2.catch_num = throw2.catch_num, throw1.catch_num
                logger.debug(
                    f"Swapped catch order at j={throw1.juggler}, h={throw1.hand.name}, "
                    f"i={throw1.index}"
                )


__all__ = [
    "is_catch_order_incorrect",
    "set_catch_order",
]
