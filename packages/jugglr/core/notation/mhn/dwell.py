"""Dwell windows: how far back the same hand last threw."""

from __future__ import annotations

import logging

from jugglr.core.notation.mhn.constants import MAX_DWELL_WINDOW
from jugglr.core.notation.mhn.matrix import JugglingMatrix

logger = logging.getLogger(__name__)


def find_dwell_windows(matrix: JugglingMatrix) -> None:
    """Set ``dwell_window`` to 1 if the hand threw on the previous beat, else 2."""
    for throw in matrix.iter_throws():
        index = throw.index - 1
        if index < 0:
            index += matrix.period

        prev_beat_throw = False
        for slot in range(matrix.max_occupancy):
            prev = matrix.cell(throw.juggler, throw.hand, index, slot)
            if prev is not None and not prev.is_zero:
                prev_beat_throw = True

        throw.dwell_window = 1 if prev_beat_throw else MAX_DWELL_WINDOW


__all__ = [
    "find_dwell_windows",
]
