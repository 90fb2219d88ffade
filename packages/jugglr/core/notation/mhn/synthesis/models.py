"""Timed event models produced by event synthesis."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from jugglr.core.notation.mhn.models import Coordinate, Hand, Modifier, SymmetryType
from jugglr.core.notation.mhn.permutation import Permutation, SignedPermutation

if TYPE_CHECKING:
    from jugglr.core.notation.mhn.synthesis.images import EventImage


class TransitionType(str, Enum):
    """What happens to a path at an event."""

    THROW = "throw"
    CATCH = "catch"
    HOLDING = "holding"


class Transition(BaseModel):
    """One path's transition at an event.

    Attributes:
        type: Throw, catch or holding.
        path: Path (object) number, 1-based.
        modifier: Throw modifier; only set on throws.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: TransitionType
    path: int = Field(ge=1)
    modifier: Modifier | None = None


class Event(BaseModel):
    """Hand event at a moment in time.

    A ``coordinate`` of None marks a deferred position, to be filled in by
    interpolation between neighbouring events of the same hand.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    t: float = Field(description="Time in seconds")
    juggler: int = Field(ge=1)
    hand: Hand
    coordinate: Coordinate | None = None
    transitions: tuple[Transition, ...] = ()

    @property
    def deferred(self) -> bool:
        return self.coordinate is None

    @property
    def sort_key(self) -> tuple[float, int, int]:
        return (round(self.t, 9), self.juggler, int(self.hand))

    def path_transition(self, path: int) -> Transition | None:
        for tr in self.transitions:
            if tr.path == path:
                return tr
        return None

    def with_transition(self, transition: Transition) -> Event:
        return self.model_copy(update={"transitions": (*self.transitions, transition)})

    def without_transition(self, transition: Transition) -> Event:
        remaining = list(self.transitions)
        remaining.remove(transition)
        return self.model_copy(update={"transitions": tuple(remaining)})


class BodyPosition(BaseModel):
    """Juggler body keyframe."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    t: float
    juggler: int = Field(ge=1)
    x: float
    y: float
    z: float
    angle: float


class PathSymmetry(BaseModel):
    """Event-level symmetry with its validated path permutation.

    Attributes:
        type: DELAY, SWITCH or SWITCHDELAY.
        juggler_perm: Signed juggler permutation.
        path_perm: Image path of each path, ``path_perm[p - 1]``.
        delay: Time shift in seconds.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: SymmetryType
    juggler_perm: tuple[int, ...]
    path_perm: tuple[int, ...]
    delay: float = Field(ge=0.0)

    @property
    def juggler_permutation(self) -> SignedPermutation:
        return SignedPermutation.from_mapping(self.juggler_perm)

    @property
    def path_permutation(self) -> Permutation:
        return Permutation.from_mapping(self.path_perm)

    def scaled(self, scale: float) -> PathSymmetry:
        if self.delay <= 0:
            return self
        return self.model_copy(update={"delay": self.delay * scale})


class EventList(BaseModel):
    """Compiled pattern: primary events plus the symmetries that expand them.

    ``events`` holds one representative per symmetry class; ``loop_events()``
    expands them into every event of one loop for an animator to lay out.
    ``rescale_factor`` is above 1.0 when the tempo was slowed so every throw
    has enough flight time.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    bps: float = Field(gt=0.0)
    loop_duration: float = Field(gt=0.0, description="Seconds per loop")
    number_of_jugglers: int = Field(ge=1)
    number_of_paths: int = Field(ge=0)
    gravity: float
    bounce_fraction: float
    events: tuple[Event, ...]
    symmetries: tuple[PathSymmetry, ...]
    positions: tuple[BodyPosition, ...] = ()
    rescale_factor: float = Field(default=1.0, ge=1.0)

    def images(self, t_start: float, t_end: float) -> list[EventImage]:
        """All event images with ``t_start <= t < t_end``, time-sorted."""
        from jugglr.core.notation.mhn.synthesis.images import PatternImages

        return PatternImages.from_pattern(self).between(t_start, t_end)

    def loop_events(self) -> list[Event]:
        """Every event inside ``[0, loop_duration)``, time-sorted."""
        return [image.event for image in self.images(0.0, self.loop_duration)]


@dataclass
class PatternDraft:
    """Mutable working copy of a pattern while events are synthesized."""

    number_of_jugglers: int
    number_of_paths: int
    symmetries: list[PathSymmetry]
    events: list[Event] = field(default_factory=list)
    positions: list[BodyPosition] = field(default_factory=list)

    def copy(self) -> PatternDraft:
        return PatternDraft(
            number_of_jugglers=self.number_of_jugglers,
            number_of_paths=self.number_of_paths,
            symmetries=list(self.symmetries),
            events=list(self.events),
            positions=list(self.positions),
        )

    def scaled(self, scale: float) -> PatternDraft:
        """Copy with every time (events, keyframes, delays) multiplied by ``scale``."""
        return PatternDraft(
            number_of_jugglers=self.number_of_jugglers,
            number_of_paths=self.number_of_paths,
            symmetries=[s.scaled(scale) for s in self.symmetries],
            events=[e.model_copy(update={"t": e.t * scale}) for e in self.events],
            positions=[p.model_copy(update={"t": p.t * scale}) for p in self.positions],
        )


__all__ = [
    "BodyPosition",
    "Event",
    "EventList",
    "PathSymmetry",
    "PatternDraft",
    "Transition",
    "TransitionType",
]
