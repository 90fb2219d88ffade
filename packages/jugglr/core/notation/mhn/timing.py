"""Continuous timing: map beats to throw and catch times in seconds."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from jugglr.core.notation.mhn.constants import (
    BEATS_AIRTIME_MIN,
    BEATS_CATCH_THROW_MIN,
    BEATS_THROW_CATCH_MIN,
    DEFAULT_BPS,
    THROWS_PER_SEC,
    beats_one_throw_early,
    table_lookup,
)
from jugglr.core.notation.mhn.matrix import JugglingMatrix
from jugglr.core.notation.mhn.models import Hand

logger = logging.getLogger(__name__)


def calc_bps(matrix: JugglingMatrix) -> float:
    """Default tempo: average throws-per-second over all throws above 2.

    Args:
        matrix: Populated juggling matrix

    Returns:
        Beats per second (2.0 when no throw exceeds 2)
    """
    rates = [
        table_lookup(THROWS_PER_SEC, throw.throw_value)
        for throw in matrix.iter_throws()
        if throw.throw_value > 2
    ]
    if not rates:
        return DEFAULT_BPS
    return float(np.mean(rates))


def find_catch_throw_times(
    matrix: JugglingMatrix,
    bps: float,
    dwell: float,
    squeezebeats: float,
    dwell_array: Sequence[float] | None = None,
) -> None:
    """Assign ``throw_time`` and ``catch_time`` (seconds) to every grid throw.

    The catch time of a throw is the catch of that object just before it is
    thrown. Throws happen on the beat, except that a cell throwing a '1'
    throws slightly early. The first catch starts ``dwell`` beats before the
    throw and is then clamped, in order:

    1. no earlier than the previous throw from the hand plus a margin;
    2. if catching a '1', late enough to give it minimum airtime;
    3. early enough to leave a margin before this beat's throw.

    Simultaneous catches are spread across ``squeezebeats`` by catch number.
    With ``dwell_array`` (per-beat dwell from an external hand timing source,
    reused cyclically) throws stay on the beat and dwell comes from the array;
    the final margin still applies.
    """
    early = beats_one_throw_early(dwell)

    for k in range(matrix.indexes):
        for j in range(1, matrix.number_of_jugglers + 1):
            for h in Hand:
                cell = matrix.slots(j, h, k)
                if not cell:
                    continue
                first = cell[0]

                one_thrown = any(t.is_thrown_one for t in cell)
                for throw in cell:
                    if one_thrown and dwell_array is None:
                        throw.throw_time = (k - early) / bps
                    else:
                        throw.throw_time = k / bps
                throw_time = first.throw_time

                num_catches = 0
                one_caught = False
                for throw in cell:
                    if throw.catching:
                        num_catches += 1
                        if matrix.source_of(throw).is_thrown_one:
                            one_caught = True

                prev_index = k - first.dwell_window
                while prev_index < 0:
                    prev_index += matrix.period
                prev_one_thrown = any(
                    t.is_thrown_one for t in matrix.slots(j, h, prev_index)
                )

                first_catch = (k - dwell) / bps
                first_catch = max(
                    first_catch,
                    (
                        (k - first.dwell_window)
                        - (early if prev_one_thrown else 0.0)
                        + BEATS_THROW_CATCH_MIN
                    )
                    / bps,
                )
                if one_caught:
                    first_catch = max(first_catch, ((k - 1) - early + BEATS_AIRTIME_MIN) / bps)
                first_catch = min(first_catch, throw_time - BEATS_CATCH_THROW_MIN / bps)

                for throw in cell:
                    if dwell_array is not None:
                        catch_time = (k - dwell_array[k % len(dwell_array)]) / bps
                    else:
                        catch_time = first_catch
                    if num_catches > 1:
                        catch_time += throw.catch_num / (num_catches - 1) * (squeezebeats / bps)
                    throw.catch_time = min(catch_time, throw_time - BEATS_CATCH_THROW_MIN / bps)

    logger.debug(f"Assigned catch and throw times at {bps:.3f} beats/sec")


__all__ = [
    "calc_bps",
    "find_catch_throw_times",
]
