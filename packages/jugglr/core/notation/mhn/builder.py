"""Programmatic population of a ``JugglingMatrix``.

The builder takes already-tokenized throws; it does no text lexing.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from jugglr.core.notation.mhn.errors import PatternError, PatternInternalError
from jugglr.core.notation.mhn.matrix import JugglingMatrix
from jugglr.core.notation.mhn.models import (
    Hand,
    HoldModifier,
    Modifier,
    Symmetry,
    SymmetryType,
    Throw,
    TossModifier,
)

logger = logging.getLogger(__name__)


class MatrixBuilder:
    """Collects throws and symmetries, then builds a ``JugglingMatrix``.

    Example:
        >>> builder = MatrixBuilder(
        ...     number_of_jugglers=1, period=2, max_occupancy=1, indexes=6, number_of_paths=3
        ... )
        >>> builder.add_symmetry(Symmetry(type=SymmetryType.DELAY, delay=2, juggler_perm=(1,)))
        >>> for i in range(6):
        ...     hand = Hand.RIGHT if i % 2 == 0 else Hand.LEFT
        ...     builder.add_throw(
        ...         juggler=1, hand=hand, index=i,
        ...         target_juggler=1, target_hand=hand.other, target_index=i + 3,
        ...     )
        >>> matrix = builder.build()
    """

    def __init__(
        self,
        *,
        number_of_jugglers: int,
        period: int,
        max_occupancy: int,
        indexes: int,
        number_of_paths: int,
    ) -> None:
        if number_of_jugglers < 1 or period < 1 or max_occupancy < 1:
            raise ValueError("jugglers, period and max_occupancy must be positive")
        if indexes < period:
            raise ValueError(f"indexes ({indexes}) must cover at least one period ({period})")
        self.number_of_jugglers = number_of_jugglers
        self.period = period
        self.max_occupancy = max_occupancy
        self.indexes = indexes
        self.number_of_paths = number_of_paths
        self._throws: list[Throw] = []
        self._symmetries: list[Symmetry] = []

    def add_throw(
        self,
        *,
        juggler: int,
        hand: Hand,
        index: int,
        target_juggler: int,
        target_hand: Hand,
        target_index: int,
        slot: int = 0,
        modifier: Modifier | None = None,
        hands_beat: int = -1,
    ) -> Throw:
        """Queue one throw; returns the (not yet placed) ``Throw``."""
        throw = Throw(
            juggler=juggler,
            hand=Hand(hand),
            index=index,
            slot=slot,
            target_juggler=target_juggler,
            target_hand=Hand(target_hand),
            target_index=target_index,
            modifier=modifier if modifier is not None else TossModifier(),
            hands_beat=hands_beat,
        )
        self._throws.append(throw)
        return throw

    def add_symmetry(self, symmetry: Symmetry) -> None:
        if symmetry.number_of_jugglers != self.number_of_jugglers:
            raise ValueError(
                f"Symmetry covers {symmetry.number_of_jugglers} jugglers, "
                f"pattern has {self.number_of_jugglers}"
            )
        self._symmetries.append(symmetry)

    def build(self) -> JugglingMatrix:
        """Place all queued throws into a new matrix.

        Raises:
            PatternInternalError: If a throw lies outside the grid, targets a
                nonexistent juggler or an earlier beat, or two throws claim
                one cell
        """
        matrix = JugglingMatrix(
            number_of_jugglers=self.number_of_jugglers,
            number_of_paths=self.number_of_paths,
            period=self.period,
            max_occupancy=self.max_occupancy,
            indexes=self.indexes,
            symmetries=self._symmetries,
        )
        for throw in self._throws:
            if not 1 <= throw.target_juggler <= self.number_of_jugglers:
                raise PatternInternalError(
                    reason=f"target juggler {throw.target_juggler} does not exist",
                    juggler=throw.juggler,
                    hand=throw.hand,
                    index=throw.index,
                    slot=throw.slot,
                )
            if throw.target_index < throw.index:
                raise PatternInternalError(
                    reason="throw lands before it is thrown",
                    juggler=throw.juggler,
                    hand=throw.hand,
                    index=throw.index,
                    slot=throw.slot,
                )
            matrix.place(throw)

        logger.debug(
            f"Built matrix: {len(matrix.arena)} throws, {len(matrix.symmetries)} symmetries"
        )
        return matrix

    # ------------------------------------------------------------------
    # Vanilla asynchronous patterns
    # ------------------------------------------------------------------

    @classmethod
    def vanilla_async(
        cls,
        values: Sequence[int],
        hands_period: int | None = None,
        modifiers: Sequence[Modifier | None] | None = None,
    ) -> JugglingMatrix:
        """Build the matrix of a one-juggler asynchronous pattern.

        Hands alternate, right on even beats. Odd-length patterns are doubled
        and gain a hand-swapping SWITCHDELAY symmetry half a period long.

        Args:
            values: Throw values, one per beat (e.g. ``[5, 3, 1]``)
            hands_period: Period of an external hand-path table, if any;
                sets each throw's ``hands_beat``
            modifiers: Optional per-beat modifier overrides aligned with
                ``values`` (None keeps the default)

        Returns:
            Populated juggling matrix

        Raises:
            PatternError: If values are empty or negative, or their average
                is not a whole number of objects
        """
        values = list(values)
        if not values:
            raise PatternError(reason="pattern has no throws")
        for pos, value in enumerate(values):
            if value < 0:
                raise PatternError(reason=f"negative throw value {value}", beat=pos + 1)
        if sum(values) % len(values) != 0:
            raise PatternError(
                reason=f"average of throw values is not a whole number ({sum(values)}/{len(values)})"
            )
        if modifiers is not None and len(modifiers) != len(values):
            raise ValueError("modifiers must align with values")

        number_of_paths = sum(values) // len(values)
        overrides: list[Modifier | None] = (
            list(modifiers) if modifiers is not None else [None] * len(values)
        )
        symmetries: list[Symmetry] = []
        if len(values) % 2 == 1:
            symmetries.append(
                Symmetry(type=SymmetryType.SWITCHDELAY, delay=len(values), juggler_perm=(-1,))
            )
            values = values * 2
            overrides = overrides * 2
        period = len(values)
        symmetries.insert(0, Symmetry(type=SymmetryType.DELAY, delay=period, juggler_perm=(1,)))

        indexes = max(values) + period + 1
        builder = cls(
            number_of_jugglers=1,
            period=period,
            max_occupancy=1,
            indexes=indexes,
            number_of_paths=number_of_paths,
        )
        for symmetry in symmetries:
            builder.add_symmetry(symmetry)

        pending: list[Throw] = []
        for i in range(indexes):
            value = values[i % period]
            hand = Hand.RIGHT if i % 2 == 0 else Hand.LEFT
            target_hand = hand if value % 2 == 0 else hand.other
            modifier = overrides[i % period]
            if modifier is None:
                modifier = HoldModifier() if value <= 1 and target_hand == hand else TossModifier()
            throw = builder.add_throw(
                juggler=1,
                hand=hand,
                index=i,
                target_juggler=1,
                target_hand=target_hand,
                target_index=i + value,
                modifier=modifier,
                hands_beat=i % hands_period if hands_period else -1,
            )
            if value == 2 and overrides[i % period] is None:
                pending.append(throw)

        matrix = builder.build()
        _resolve_two_throws(matrix, pending)
        return matrix


def _resolve_two_throws(matrix: JugglingMatrix, pending: list[Throw]) -> None:
    """A same-hand 2 is held unless that hand makes a real throw next beat."""
    for throw in pending:
        do_hold = True
        if throw.index + 1 < matrix.indexes:
            for nxt in matrix.slots(throw.juggler, throw.hand, throw.index + 1):
                if nxt.target_index != throw.index + 1:
                    do_hold = False
                    break
        throw.modifier = HoldModifier() if do_hold else TossModifier()


__all__ = [
    "MatrixBuilder",
]
