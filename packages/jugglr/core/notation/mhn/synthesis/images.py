"""Expansion of primary events into their images under the pattern symmetries."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from jugglr.core.notation.mhn.errors import PatternError
from jugglr.core.notation.mhn.models import Hand, SymmetryType
from jugglr.core.notation.mhn.permutation import Permutation
from jugglr.core.notation.mhn.synthesis.models import Event, PathSymmetry
from jugglr.core.utils.math import lcm

logger = logging.getLogger(__name__)


class PatternLike(Protocol):
    number_of_jugglers: int
    number_of_paths: int

    @property
    def symmetries(self) -> Sequence[PathSymmetry]: ...

    @property
    def events(self) -> Sequence[Event]: ...


@dataclass(frozen=True)
class EventImage:
    """An event produced by applying symmetries to a primary event.

    Attributes:
        event: The image event (the primary itself when ``is_primary``).
        primary_index: Position of the primary in the pattern's event list.
        path_perm: Maps the primary's path numbers onto the image's.
        is_primary: Whether ``event`` is the untransformed primary.
    """

    event: Event
    primary_index: int
    path_perm: Permutation
    is_primary: bool

    @property
    def sort_key(self) -> tuple[float, int, int, int]:
        return (*self.event.sort_key, self.primary_index)


def delay_symmetry(symmetries: Sequence[PathSymmetry]) -> PathSymmetry:
    """The single DELAY symmetry that defines the loop.

    Raises:
        PatternError: If there is not exactly one DELAY symmetry
    """
    delays = [s for s in symmetries if s.type == SymmetryType.DELAY]
    if len(delays) != 1:
        raise PatternError(reason=f"need exactly one delay symmetry, found {len(delays)}")
    return delays[0]


class EventImages:
    """All images of one primary event.

    Images are indexed by loop number, entry within the loop, juggler and
    hand. SWITCH symmetries move an event to another juggler/hand at the same
    time; SWITCHDELAY symmetries also shift it by ``loop / entries * delta``.
    For each reachable (juggler, hand, entry) the closure records the path
    permutation from the primary; an image past the last entry wraps into
    the next loop through the inverse loop permutation.
    """

    def __init__(
        self,
        event: Event,
        primary_index: int,
        *,
        number_of_jugglers: int,
        number_of_paths: int,
        symmetries: Sequence[PathSymmetry],
    ) -> None:
        self.event = event
        self.primary_index = primary_index
        self.number_of_jugglers = number_of_jugglers
        self.number_of_paths = number_of_paths

        loop = delay_symmetry(symmetries)
        self.loop_duration = loop.delay
        self.loop_perm = loop.path_permutation
        self.entries = 1
        self._entries: dict[tuple[int, int, int], Permutation] = {}
        self._calc_array(symmetries)

    def _calc_array(self, symmetries: Sequence[PathSymmetry]) -> None:
        others = [s for s in symmetries if s.type != SymmetryType.DELAY]
        for sym in others:
            if sym.type == SymmetryType.SWITCHDELAY:
                self.entries = lcm(self.entries, sym.juggler_permutation.order)
        deltas = [
            0 if sym.type == SymmetryType.SWITCH else self.entries // sym.juggler_permutation.order
            for sym in others
        ]
        inverse_loop = self.loop_perm.inverse

        self._entries = {
            (self.event.juggler, int(self.event.hand), 0): Permutation.identity(self.number_of_paths)
        }
        changed = True
        while changed:
            changed = False
            for sym, delta in zip(others, deltas, strict=True):
                jperm = sym.juggler_permutation
                pperm = sym.path_permutation
                for (juggler, hand, entry), perm in list(self._entries.items()):
                    new_juggler, new_hand = jperm.image_of(juggler, hand)
                    new_perm = perm.composed_with(pperm)
                    new_entry = entry + delta
                    if new_entry >= self.entries:
                        new_perm = new_perm.composed_with(inverse_loop)
                        new_entry -= self.entries
                    key = (new_juggler, new_hand, new_entry)
                    existing = self._entries.get(key)
                    if existing is not None:
                        if existing != new_perm:
                            raise PatternError(reason="Symmetries inconsistent")
                    else:
                        self._entries[key] = new_perm
                        changed = True

    def image(self, loop: int, entry: int, juggler: int, hand: int) -> EventImage:
        """Build one image; ``(juggler, hand, entry)`` must be reachable."""
        if loop == 0 and entry == 0 and juggler == self.event.juggler and hand == self.event.hand:
            return EventImage(
                event=self.event,
                primary_index=self.primary_index,
                path_perm=Permutation.identity(self.number_of_paths),
                is_primary=True,
            )

        perm = self._entries[(juggler, hand, entry)].composed_with(self.loop_perm.power(loop))
        coordinate = self.event.coordinate
        if coordinate is not None and hand != self.event.hand:
            coordinate = coordinate.mirrored()
        event = self.event.model_copy(
            update={
                "t": self._time(loop, entry),
                "juggler": juggler,
                "hand": Hand(hand),
                "coordinate": coordinate,
                "transitions": tuple(
                    tr.model_copy(update={"path": perm.map(tr.path)})
                    for tr in self.event.transitions
                ),
            }
        )
        return EventImage(
            event=event, primary_index=self.primary_index, path_perm=perm, is_primary=False
        )

    def _time(self, loop: int, entry: int) -> float:
        return (
            self.event.t
            + loop * self.loop_duration
            + entry * (self.loop_duration / self.entries)
        )

    def between(self, t_start: float, t_end: float, include_end: bool = False) -> list[EventImage]:
        """Images with ``t_start <= t < t_end`` (``<=`` when ``include_end``)."""
        first = math.floor((t_start - self.event.t) / self.loop_duration) - 1
        last = math.ceil((t_end - self.event.t) / self.loop_duration) + 1
        result = []
        for loop in range(first, last + 1):
            for juggler, hand, entry in self._entries:
                t = self._time(loop, entry)
                if t < t_start or t > t_end or (t == t_end and not include_end):
                    continue
                result.append(self.image(loop, entry, juggler, hand))
        return result


class PatternImages:
    """Time-ordered images of every primary event of a pattern."""

    def __init__(
        self,
        *,
        number_of_jugglers: int,
        number_of_paths: int,
        symmetries: Sequence[PathSymmetry],
        events: Sequence[Event],
    ) -> None:
        loop = delay_symmetry(symmetries)
        self.loop_duration = loop.delay
        self.loop_perm = loop.path_permutation
        self.per_event = [
            EventImages(
                event,
                index,
                number_of_jugglers=number_of_jugglers,
                number_of_paths=number_of_paths,
                symmetries=symmetries,
            )
            for index, event in enumerate(events)
        ]

    @classmethod
    def from_pattern(cls, pattern: PatternLike) -> PatternImages:
        return cls(
            number_of_jugglers=pattern.number_of_jugglers,
            number_of_paths=pattern.number_of_paths,
            symmetries=pattern.symmetries,
            events=pattern.events,
        )

    def between(self, t_start: float, t_end: float, include_end: bool = False) -> list[EventImage]:
        images = [
            image
            for event_images in self.per_event
            for image in event_images.between(t_start, t_end, include_end)
        ]
        images.sort(key=lambda image: image.sort_key)
        return images


__all__ = [
    "EventImage",
    "EventImages",
    "PatternImages",
    "delay_symmetry",
]
