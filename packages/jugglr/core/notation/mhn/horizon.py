"""Horizon completion: give every throw a source, synthesizing virtual
throws before the start of the window where needed."""

from __future__ import annotations

import logging

from jugglr.core.notation.mhn.errors import PatternInternalError
from jugglr.core.notation.mhn.matrix import JugglingMatrix
from jugglr.core.notation.mhn.models import Hand, Throw

logger = logging.getLogger(__name__)


def add_throw_sources(matrix: JugglingMatrix) -> int:
    """Set ``source`` on every grid throw that still lacks one.

    Beats are scanned from last to first. A throw without a source borrows
    the source of the throw one period later in the same cell, shifted back
    a period; the copy is a virtual throw kept outside the grid.

    Returns:
        Number of virtual throws created

    Raises:
        PatternInternalError: If the throw one period later is missing or
            sourceless
    """
    created = 0
    for i in range(matrix.indexes - 1, -1, -1):
        for j in range(1, matrix.number_of_jugglers + 1):
            for h in Hand:
                for slot in range(matrix.max_occupancy):
                    throw = matrix.cell(j, h, i, slot)
                    if throw is None or throw.source is not None:
                        continue
                    ahead = (
                        matrix.cell(j, h, i + matrix.period, slot)
                        if i + matrix.period < matrix.indexes
                        else None
                    )
                    if ahead is None or ahead.source is None:
                        raise PatternInternalError(
                            reason="could not find the throw source one period ahead",
                            juggler=j,
                            hand=h,
                            index=i,
                            slot=slot,
                            state=matrix.describe(),
                        )
                    model = matrix.throw(ahead.source)
                    virtual = Throw(
                        juggler=model.juggler,
                        hand=model.hand,
                        index=model.index - matrix.period,
                        slot=model.slot,
                        target_juggler=j,
                        target_hand=h,
                        target_index=i,
                        target_slot=slot,
                        modifier=model.modifier,
                        hands_beat=-1,
                        primary=model.primary,
                        target=throw.id,
                        path_num=throw.path_num,
                    )
                    throw.source = matrix.add_virtual(virtual)
                    created += 1

    logger.debug(f"Added {created} virtual source throws")
    return created


__all__ = [
    "add_throw_sources",
]
