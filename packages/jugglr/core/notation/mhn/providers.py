"""Hand-path and body-path providers.

The pipeline only queries these per beat; where the tables come from (a
notation lexer, a file, a UI) is up to the caller. ``HandPathTable`` and
``BodyPathTable`` are simple in-memory implementations.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from jugglr.core.notation.mhn.models import Coordinate


@runtime_checkable
class HandPathProvider(Protocol):
    """Per-beat hand coordinates.

    Coordinate 0 of a beat is where the hand throws; ``catch_index`` is the
    coordinate where it catches. Coordinates are for the right hand.
    """

    def period(self, juggler: int) -> int: ...

    def number_of_coordinates(self, juggler: int, beat: int) -> int: ...

    def catch_index(self, juggler: int, beat: int) -> int: ...

    def coordinate(self, juggler: int, beat: int, index: int) -> Coordinate | None: ...


class BodyPose(BaseModel):
    """Juggler body position and facing angle (degrees)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 100.0
    angle: float = 0.0


@runtime_checkable
class BodyPathProvider(Protocol):
    """Per-beat body positions."""

    def period(self, juggler: int) -> int: ...

    def number_of_positions(self, juggler: int, beat: int) -> int: ...

    def position(self, juggler: int, beat: int, index: int) -> BodyPose | None: ...


class HandBeat(BaseModel):
    """Hand coordinates for one beat.

    Attributes:
        coordinates: Samples for the beat; ``None`` leaves a sample unspecified.
        catch_index: Which sample is the catch position.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    coordinates: tuple[Coordinate | None, ...] = Field(min_length=1)
    catch_index: int = Field(ge=0)

    @model_validator(mode="after")
    def _validate(self) -> HandBeat:
        if self.catch_index >= len(self.coordinates):
            raise ValueError("catch_index must point at one of the coordinates")
        if self.coordinates[0] is None or self.coordinates[self.catch_index] is None:
            raise ValueError("throw and catch coordinates must be specified")
        return self


class HandPathTable(BaseModel):
    """Hand paths per juggler; jugglers beyond the table reuse it cyclically.

    Example:
        >>> beat = HandBeat(
        ...     coordinates=(Coordinate(x=10), Coordinate(x=30)), catch_index=1
        ... )
        >>> table = HandPathTable(jugglers=((beat,),))
        >>> table.period(1), table.catch_index(1, 0)
        (1, 1)
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    jugglers: tuple[tuple[HandBeat, ...], ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _validate(self) -> HandPathTable:
        if any(not beats for beats in self.jugglers):
            raise ValueError("each juggler needs at least one hand beat")
        return self

    def _beats(self, juggler: int) -> tuple[HandBeat, ...]:
        return self.jugglers[(juggler - 1) % len(self.jugglers)]

    def _beat(self, juggler: int, beat: int) -> HandBeat:
        beats = self._beats(juggler)
        return beats[beat % len(beats)]

    def period(self, juggler: int) -> int:
        return len(self._beats(juggler))

    def number_of_coordinates(self, juggler: int, beat: int) -> int:
        return len(self._beat(juggler, beat).coordinates)

    def catch_index(self, juggler: int, beat: int) -> int:
        return self._beat(juggler, beat).catch_index

    def coordinate(self, juggler: int, beat: int, index: int) -> Coordinate | None:
        coordinates = self._beat(juggler, beat).coordinates
        if not 0 <= index < len(coordinates):
            return None
        return coordinates[index]


class BodyPathTable(BaseModel):
    """Body positions per juggler and beat; ``None`` entries are skipped."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    jugglers: tuple[tuple[tuple[BodyPose | None, ...], ...], ...] = Field(min_length=1)

    def _beats(self, juggler: int) -> tuple[tuple[BodyPose | None, ...], ...]:
        return self.jugglers[(juggler - 1) % len(self.jugglers)]

    def period(self, juggler: int) -> int:
        return len(self._beats(juggler))

    def number_of_positions(self, juggler: int, beat: int) -> int:
        beats = self._beats(juggler)
        return len(beats[beat % len(beats)])

    def position(self, juggler: int, beat: int, index: int) -> BodyPose | None:
        beats = self._beats(juggler)
        poses = beats[beat % len(beats)]
        if not 0 <= index < len(poses):
            return None
        return poses[index]


__all__ = [
    "BodyPathProvider",
    "BodyPathTable",
    "BodyPose",
    "HandBeat",
    "HandPathProvider",
    "HandPathTable",
]
