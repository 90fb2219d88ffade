"""Math utilities for common operations."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

import numpy as np

Number = TypeVar("Number", int, float, np.number)


def clamp(value: Number, min_val: Number, max_val: Number) -> Number:
    """Clamp value to range [min_val, max_val].

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))


def lerp_point(
    start: Sequence[float],
    end: Sequence[float],
    t_start: float,
    t_end: float,
    t: float,
) -> tuple[float, ...]:
    """Linearly interpolate a point between two timed samples.

    Args:
        start: Coordinates at ``t_start``
        end: Coordinates at ``t_end``
        t_start: Time of the start sample
        t_end: Time of the end sample
        t: Time to interpolate at

    Returns:
        Interpolated coordinates, same length as ``start``
    """
    a = np.asarray(start, dtype=float)
    b = np.asarray(end, dtype=float)
    if t_end == t_start:
        return tuple(float(v) for v in a)
    result = a + (t - t_start) * (b - a) / (t_end - t_start)
    return tuple(float(v) for v in result)


def lcm(a: int, b: int) -> int:
    """Least common multiple of two positive integers."""
    return a * b // math.gcd(a, b)
