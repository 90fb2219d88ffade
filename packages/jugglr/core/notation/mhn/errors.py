"""Exceptions raised while compiling MHN patterns.

Two families: ``PatternError`` for patterns that are malformed or cannot be
juggled (the user's input is at fault), and ``PatternInternalError`` for
broken invariants (a defect in matrix population or the pipeline). Neither is
recovered from; later stages assume earlier invariants hold.
"""

from __future__ import annotations


def hand_label(hand: int) -> str:
    """Human-readable hand name for messages."""
    return "right hand" if hand == 0 else "left hand"


class MhnError(Exception):
    """Base class for all MHN compilation errors."""


class PatternError(MhnError):
    """Raised when a pattern is malformed or infeasible.

    Attributes:
        reason: What specifically is wrong with the pattern.
        beat: Offending beat, 1-based, if known.
        juggler: Offending juggler, 1-based, if known.
        hand: Offending hand (0 = right, 1 = left), if known.
    """

    def __init__(
        self,
        *,
        reason: str,
        beat: int | None = None,
        juggler: int | None = None,
        hand: int | None = None,
    ) -> None:
        self.reason = reason
        self.beat = beat
        self.juggler = juggler
        self.hand = hand
        parts = [f"Bad pattern: {reason}"]
        if beat is not None:
            parts.append(f"beat={beat}")
        if juggler is not None:
            parts.append(f"juggler={juggler}")
        if hand is not None:
            parts.append(hand_label(hand))
        super().__init__(" | ".join(parts))


class PatternInternalError(MhnError):
    """Raised when a pipeline invariant is violated.

    Carries full coordinate context plus, where available, a text dump of the
    partially built pattern for debugging.

    Attributes:
        reason: Which invariant broke.
        juggler: Juggler of the throw being processed, 1-based.
        hand: Hand of the throw being processed.
        index: Beat index of the throw being processed, 0-based.
        slot: Multiplex slot of the throw being processed.
        state: Dump of the matrix or event list at the time of failure.
    """

    def __init__(
        self,
        *,
        reason: str,
        juggler: int | None = None,
        hand: int | None = None,
        index: int | None = None,
        slot: int | None = None,
        state: str = "",
    ) -> None:
        self.reason = reason
        self.juggler = juggler
        self.hand = hand
        self.index = index
        self.slot = slot
        self.state = state
        parts = [f"Internal error: {reason}"]
        if juggler is not None:
            parts.append(f"juggler={juggler}")
        if hand is not None:
            parts.append(hand_label(hand))
        if index is not None:
            parts.append(f"index={index}")
        if slot is not None:
            parts.append(f"slot={slot}")
        super().__init__(" | ".join(parts))


__all__ = [
    "MhnError",
    "PatternError",
    "PatternInternalError",
    "hand_label",
]
