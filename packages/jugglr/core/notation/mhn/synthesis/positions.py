"""Positioning events: filling long gaps and locating deferred events."""

from __future__ import annotations

import logging

from jugglr.core.notation.mhn.constants import RESTING_X, SECS_EVENT_GAP_MAX
from jugglr.core.notation.mhn.errors import PatternInternalError
from jugglr.core.notation.mhn.models import Coordinate, Hand
from jugglr.core.notation.mhn.synthesis.images import PatternImages, PatternLike
from jugglr.core.notation.mhn.synthesis.models import Event, PatternDraft
from jugglr.core.utils.math import lerp_point

logger = logging.getLogger(__name__)


def resting_coordinate(hand: Hand) -> Coordinate:
    """Where an idle hand sits."""
    return Coordinate(x=RESTING_X).for_hand(hand)


def describe_draft(draft: PatternLike) -> str:
    """Text dump of a pattern's primary events for error reports."""
    lines = [f"jugglers={draft.number_of_jugglers} paths={draft.number_of_paths}"]
    for sym in draft.symmetries:
        lines.append(
            f"  {sym.type.value} delay={sym.delay:.4f} jugglers={sym.juggler_perm} "
            f"paths={sym.path_perm}"
        )
    for index, event in enumerate(draft.events):
        where = "deferred" if event.coordinate is None else event.coordinate.as_tuple()
        transitions = ", ".join(f"{tr.type.value}:{tr.path}" for tr in event.transitions)
        lines.append(
            f"  [{index}] t={event.t:.4f} j={event.juggler} {event.hand.label} "
            f"at {where} [{transitions}]"
        )
    return "\n".join(lines)


def add_gap_events(draft: PatternDraft, max_gap: float = SECS_EVENT_GAP_MAX) -> int:
    """Insert deferred events wherever a hand goes too long without one.

    Images are scanned over ``[-L, 2L]`` (L being the loop duration) per hand
    and juggler. A gap longer than ``max_gap`` is split into equal parts by
    ``int(gap / max_gap)`` new events; the scan then restarts, since new
    primaries create new images.

    Args:
        draft: Pattern being synthesized; modified in place
        max_gap: Longest allowed gap in seconds

    Returns:
        Number of events added
    """
    added = 0
    while True:
        gap_events = _find_gap(draft, max_gap)
        if not gap_events:
            break
        draft.events.extend(gap_events)
        added += len(gap_events)

    if added:
        logger.debug(f"Added {added} events to fill hand gaps over {max_gap}s")
    return added


def _find_gap(draft: PatternDraft, max_gap: float) -> list[Event]:
    images = PatternImages.from_pattern(draft)
    loop = images.loop_duration
    stream = images.between(-loop, 2.0 * loop, include_end=True)

    for hand in Hand:
        last: dict[int, Event] = {}
        for image in stream:
            event = image.event
            if event.hand != hand:
                continue
            start = last.get(event.juggler)
            if start is not None:
                gap = event.t - start.t
                if gap > max_gap:
                    count = int(gap / max_gap)
                    step = gap / (count + 1)
                    return [
                        Event(t=start.t + i * step, juggler=event.juggler, hand=hand)
                        for i in range(1, count + 1)
                    ]
            last[event.juggler] = event
    return []


def locate_deferred_events(draft: PatternDraft) -> int:
    """Give every deferred event a coordinate.

    The position is interpolated linearly between the latest located event of
    the same hand less than a loop before, and the earliest located event of
    the same hand less than a loop after. With nothing before, the hand rests.

    Returns:
        Number of events located

    Raises:
        PatternInternalError: If an earlier located event exists but no later one
    """
    located = 0
    for index in range(len(draft.events)):
        event = draft.events[index]
        if not event.deferred:
            continue

        images = PatternImages.from_pattern(draft)
        loop = images.loop_duration
        same_hand = [
            image.event
            for image in images.between(event.t - loop, event.t + loop)
            if image.event.juggler == event.juggler
            and image.event.hand == event.hand
            and not image.event.deferred
        ]

        before = [e for e in same_hand if event.t - loop < e.t < event.t]
        if not before:
            draft.events[index] = event.model_copy(
                update={"coordinate": resting_coordinate(event.hand)}
            )
            located += 1
            continue

        after = [e for e in same_hand if e.t >= event.t]
        if not after:
            raise PatternInternalError(
                reason=f"no located event after deferred event at t={event.t:.4f}",
                juggler=event.juggler,
                hand=event.hand,
                state=describe_draft(draft),
            )

        start, end = before[-1], after[0]
        x, y, z = lerp_point(
            start.coordinate.as_tuple(), end.coordinate.as_tuple(), start.t, end.t, event.t
        )
        draft.events[index] = event.model_copy(update={"coordinate": Coordinate(x=x, y=y, z=z)})
        located += 1

    if located:
        logger.debug(f"Located {located} deferred events")
    return located


__all__ = [
    "add_gap_events",
    "describe_draft",
    "locate_deferred_events",
    "resting_coordinate",
]
