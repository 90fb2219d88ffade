"""Shared utilities for jugglr."""

from jugglr.core.utils.math import clamp, lcm, lerp_point

__all__ = [
    "clamp",
    "lcm",
    "lerp_point",
]
