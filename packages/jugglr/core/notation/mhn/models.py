"""Core MHN data models: throws, throw modifiers and symmetries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from jugglr.core.notation.mhn.permutation import SignedPermutation


class Hand(IntEnum):
    """Hand index; right sorts before left."""

    RIGHT = 0
    LEFT = 1

    @property
    def other(self) -> Hand:
        return Hand(1 - self.value)

    @property
    def label(self) -> str:
        return "right hand" if self is Hand.RIGHT else "left hand"


class Coordinate(BaseModel):
    """Point in a juggler's local frame, in centimetres."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def mirrored(self) -> Coordinate:
        """Reflect across the juggler's centre line (right <-> left)."""
        return Coordinate(x=-self.x, y=self.y, z=self.z)

    def for_hand(self, hand: Hand) -> Coordinate:
        """Coordinates are authored for the right hand; mirror for the left."""
        return self.mirrored() if hand == Hand.LEFT else self

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


# ============================================================================
# Throw modifiers
# ============================================================================


class HoldModifier(BaseModel):
    """Object stays in the hand; no flight."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["hold"] = "hold"

    @property
    def code(self) -> str:
        return "H"


class TossModifier(BaseModel):
    """Ordinary toss."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["toss"] = "toss"

    @property
    def code(self) -> str:
        return "T"


class BounceModifier(BaseModel):
    """Bounce off the floor one or more times.

    Attributes:
        bounces: Number of floor contacts.
        forced: Thrown downward rather than dropped.
        hyper: Horizontal direction reverses at the bounce.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["bounce"] = "bounce"
    bounces: int = Field(default=1, ge=1)
    forced: bool = False
    hyper: bool = False

    @property
    def code(self) -> str:
        return "B" * self.bounces + ("F" if self.forced else "") + ("H" if self.hyper else "")


class ForcedModifier(BaseModel):
    """Single forced bounce (shorthand for a forced ``BounceModifier``)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["forced"] = "forced"

    @property
    def code(self) -> str:
        return "F"


Modifier = Annotated[
    HoldModifier | TossModifier | BounceModifier | ForcedModifier,
    Field(discriminator="kind"),
]


def is_hold(modifier: Modifier) -> bool:
    return isinstance(modifier, HoldModifier)


def modifier_from_code(code: str) -> Modifier:
    """Decode a notation modifier string ("T", "H", "B", "BBF", "F", ...).

    Raises:
        ValueError: If the code is not a known modifier
    """
    code = code.strip().upper() or "T"
    head = code[0]
    if head == "T" and code == "T":
        return TossModifier()
    if head == "H" and code == "H":
        return HoldModifier()
    if head == "F" and code == "F":
        return ForcedModifier()
    if head == "B" and set(code) <= {"B", "F", "H"}:
        return BounceModifier(
            bounces=code.count("B"),
            forced="F" in code,
            hyper="H" in code,
        )
    raise ValueError(f"Unknown throw modifier: {code!r}")


# ============================================================================
# Symmetries
# ============================================================================


class SymmetryType(str, Enum):
    """How a symmetry moves events in time.

    DELAY shifts time by a whole loop, SWITCH only relabels jugglers and
    hands, and SWITCHDELAY relabels and shifts by a fraction of the loop.
    """

    DELAY = "delay"
    SWITCH = "switch"
    SWITCHDELAY = "switchdelay"


class Symmetry(BaseModel):
    """Declared pattern symmetry.

    ``juggler_perm[j - 1]`` is the image of juggler ``j``; a negative image
    swaps hands. A one-juggler asynchronous pattern of odd length carries
    ``Symmetry(type=SymmetryType.SWITCHDELAY, delay=period // 2, juggler_perm=(-1,))``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: SymmetryType
    delay: int = Field(ge=0, description="Beat shift")
    juggler_perm: tuple[int, ...] = Field(description="Signed juggler permutation")

    @model_validator(mode="after")
    def _validate(self) -> Symmetry:
        # raises ValueError when the mapping is not a signed permutation
        SignedPermutation.from_mapping(self.juggler_perm)
        if self.type == SymmetryType.SWITCH and self.delay != 0:
            raise ValueError("switch symmetry cannot have a delay")
        if self.type != SymmetryType.SWITCH and self.delay == 0:
            raise ValueError(f"{self.type.value} symmetry needs a positive delay")
        return self

    @property
    def number_of_jugglers(self) -> int:
        return len(self.juggler_perm)

    @property
    def permutation(self) -> SignedPermutation:
        return SignedPermutation.from_mapping(self.juggler_perm)


# ============================================================================
# Throws
# ============================================================================


@dataclass
class Throw:
    """One throw (or hold) in the juggling matrix.

    Jugglers are 1-based; beat indexes are 0-based and negative for virtual
    throws synthesized before the window. ``primary``, ``source`` and
    ``target`` are arena ids into the owning ``JugglingMatrix``.
    """

    juggler: int
    hand: Hand
    index: int
    slot: int
    target_juggler: int
    target_hand: Hand
    target_index: int
    modifier: Modifier
    target_slot: int = -1
    hands_beat: int = -1

    # filled in by the pipeline
    id: int = -1
    primary: int = -1
    source: int | None = None
    target: int | None = None
    path_num: int = -1
    catching: bool = False
    catch_num: int = -1
    dwell_window: int = 0
    throw_time: float | None = None
    catch_time: float | None = None
    virtual: bool = False

    @property
    def throw_value(self) -> int:
        return self.target_index - self.index

    @property
    def is_zero(self) -> bool:
        return self.target_index == self.index

    @property
    def is_hold(self) -> bool:
        return is_hold(self.modifier)

    @property
    def is_thrown_one(self) -> bool:
        return not self.is_hold and self.throw_value == 1

    @property
    def is_primary(self) -> bool:
        return self.primary == self.id

    @property
    def order_key(self) -> tuple[int, int, int, int]:
        """Total order used to pick class representatives."""
        return (self.index, self.juggler, int(self.hand), self.slot)

    def __str__(self) -> str:
        return (
            f"({self.juggler},{self.hand.name[0]},{self.index},{self.slot})"
            f"->({self.target_juggler},{self.target_hand.name[0]},{self.target_index},"
            f"{self.target_slot}) {self.modifier.code} path={self.path_num}"
        )


__all__ = [
    "BounceModifier",
    "Coordinate",
    "ForcedModifier",
    "Hand",
    "HoldModifier",
    "Modifier",
    "Symmetry",
    "SymmetryType",
    "Throw",
    "TossModifier",
    "is_hold",
    "modifier_from_code",
]
