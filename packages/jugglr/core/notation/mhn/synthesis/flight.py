"""Closed-form minimum flight durations and the tempo rescale factor.

No trajectory is simulated. A toss can take any positive time. A bounce
must hit the floor, which lies ``hand_height`` below the hands, with enough
speed that after ``bounces`` contacts (each keeping ``bounce_fraction`` of
the energy) it still rises back to hand height.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from jugglr.core.notation.mhn.models import BounceModifier, ForcedModifier, Modifier
from jugglr.core.notation.mhn.synthesis.images import EventImage, PatternImages, PatternLike
from jugglr.core.notation.mhn.synthesis.models import TransitionType

logger = logging.getLogger(__name__)


def min_duration(
    modifier: Modifier | None,
    *,
    gravity: float,
    bounce_fraction: float,
    hand_height: float,
) -> float:
    """Shortest physically possible flight for a throw, in seconds.

    Example:
        >>> from jugglr.core.notation.mhn.models import TossModifier
        >>> min_duration(TossModifier(), gravity=980, bounce_fraction=0.9, hand_height=100)
        0.0
    """
    if isinstance(modifier, ForcedModifier):
        modifier = BounceModifier(bounces=1, forced=True)
    if not isinstance(modifier, BounceModifier):
        return 0.0
    if modifier.bounces == 1 and modifier.forced and modifier.hyper:
        return 0.0

    g = gravity
    e = math.sqrt(bounce_fraction)
    rise_speed = math.sqrt(2.0 * g * hand_height)

    # impact speed at the first contact so the last rebound reaches the hands
    impact = rise_speed / e**modifier.bounces
    release = math.sqrt(max(impact**2 - 2.0 * g * hand_height, 0.0))

    if modifier.forced:
        # thrown downward
        t = (impact - release) / g
    else:
        # thrown upward, then falls past the hands
        t = (impact + release) / g

    speed = impact
    for _ in range(modifier.bounces - 1):
        t += 2.0 * e * speed / g
        speed *= e

    # final rise to hand height, caught on the way up
    return t + rise_speed / g


@dataclass(frozen=True)
class ThrowFlight:
    """Scheduled flight of one primary throw."""

    path: int
    t_throw: float
    duration: float
    min_duration: float


def throw_flights(
    pattern: PatternLike,
    *,
    gravity: float,
    bounce_fraction: float,
    hand_height: float,
) -> list[ThrowFlight]:
    """Pair each primary throw with the next catch of its path."""
    if not pattern.events:
        return []
    images = PatternImages.from_pattern(pattern)
    window = images.loop_duration * (images.loop_perm.order + 1)
    t_start = min(e.t for e in pattern.events)
    t_end = max(e.t for e in pattern.events) + window
    stream = images.between(t_start, t_end, include_end=True)

    flights = []
    for pos, image in enumerate(stream):
        if not image.is_primary:
            continue
        for tr in image.event.transitions:
            if tr.type != TransitionType.THROW:
                continue
            catch_t = _next_catch(stream, pos, tr.path, image.event.t)
            if catch_t is None:
                continue
            flights.append(
                ThrowFlight(
                    path=tr.path,
                    t_throw=image.event.t,
                    duration=catch_t - image.event.t,
                    min_duration=min_duration(
                        tr.modifier,
                        gravity=gravity,
                        bounce_fraction=bounce_fraction,
                        hand_height=hand_height,
                    ),
                )
            )
    return flights


def _next_catch(stream: list[EventImage], start: int, path: int, t_throw: float) -> float | None:
    for image in stream[start + 1 :]:
        if image.event.t <= t_throw:
            continue
        tr = image.event.path_transition(path)
        if tr is not None and tr.type == TransitionType.CATCH:
            return image.event.t
    return None


def scale_factor_to_fit(
    pattern: PatternLike,
    *,
    gravity: float,
    bounce_fraction: float,
    hand_height: float,
    margin: float,
) -> float:
    """Factor by which time must stretch so every throw is feasible.

    Returns 1.0 when all throws already fit; otherwise the largest
    ``min_duration / duration`` ratio times ``margin``.
    """
    factor = 1.0
    for flight in throw_flights(
        pattern, gravity=gravity, bounce_fraction=bounce_fraction, hand_height=hand_height
    ):
        if 0.0 < flight.duration < flight.min_duration:
            factor = max(factor, flight.min_duration / flight.duration)
    if factor > 1.0:
        factor *= margin
        logger.debug(f"Throws need {factor:.3f}x more time")
        return factor
    return 1.0


__all__ = [
    "ThrowFlight",
    "min_duration",
    "scale_factor_to_fit",
    "throw_flights",
]
