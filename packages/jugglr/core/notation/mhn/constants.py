"""Fixed tables and timing margins used when compiling MHN patterns.

Distances are in centimetres from the juggler's centre line; timing margins
are in beats unless the name says otherwise.
"""

from __future__ import annotations

from jugglr.core.utils.math import clamp

# Throw x offset for a same-hand throw, by throw value (values past 8 use 8)
SAME_THROW_X: tuple[float, ...] = (0.0, 20.0, 25.0, 12.0, 10.0, 7.5, 5.0, 5.0, 5.0)

# Throw x offset for a crossing throw, by throw value
CROSSING_THROW_X: tuple[float, ...] = (0.0, 17.0, 17.0, 12.0, 10.0, 18.0, 25.0, 25.0, 30.0)

# Catch x offset, by the value of the throw being caught
CATCH_X: tuple[float, ...] = (0.0, 17.0, 25.0, 30.0, 40.0, 45.0, 45.0, 50.0, 50.0)

# x offset for hands that never catch or throw
RESTING_X = 25.0

# Default tempo (beats per second), by throw value (values past 9 use 9)
THROWS_PER_SEC: tuple[float, ...] = (2.0, 2.0, 2.0, 2.9, 3.4, 4.1, 4.25, 5.0, 5.0, 5.5)
DEFAULT_BPS = 2.0

# Minimum flight for any throw
BEATS_AIRTIME_MIN = 0.3

# Minimum gap from a throw to the next catch in the same hand
BEATS_THROW_CATCH_MIN = 0.3

# Minimum gap from a catch to the next throw in the same hand
BEATS_CATCH_THROW_MIN = 0.02

# Longest stretch a hand may go without an event
SECS_EVENT_GAP_MAX = 0.5

# Never dwell more than this many beats
MAX_DWELL_WINDOW = 2


def beats_one_throw_early(dwell: float) -> float:
    """How early a '1' throw leaves the hand, in beats.

    Keeps the catch rhythm uniform in patterns containing 1 throws, so long as
    dwell <= 2 - BEATS_THROW_CATCH_MIN.
    """
    return max(0.0, dwell + BEATS_AIRTIME_MIN - 1.0)


def table_lookup(table: tuple[float, ...], value: int) -> float:
    """Look up a per-value table, clamping the value into range."""
    return table[clamp(value, 0, len(table) - 1)]
