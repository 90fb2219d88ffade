"""Sparse juggling matrix: an arena of throws plus a (juggler, hand, beat, slot) grid."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from jugglr.core.notation.mhn.errors import PatternInternalError
from jugglr.core.notation.mhn.models import Hand, Symmetry, Throw

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatrixCell:
    """One grid position yielded by ``JugglingMatrix.iter_cells``."""

    index: int
    juggler: int
    hand: Hand
    slot: int
    throw: Throw | None


class JugglingMatrix:
    """Owns every ``Throw`` of a pattern.

    Throws live in an arena and refer to each other by arena id, which keeps
    the primary/source/target graph (including virtual throws synthesized
    before beat 0) easy to inspect. Grid throws occupy cells
    ``[juggler][hand][index][slot]``; virtual throws live only in the arena.

    Attributes:
        number_of_jugglers: Jugglers in the pattern.
        number_of_paths: Declared number of objects.
        period: Beats before the pattern repeats.
        max_occupancy: Multiplex slots per cell.
        indexes: Beats covered by the grid (lookahead beyond one period).
        symmetries: Declared symmetries.
    """

    def __init__(
        self,
        *,
        number_of_jugglers: int,
        number_of_paths: int,
        period: int,
        max_occupancy: int,
        indexes: int,
        symmetries: list[Symmetry] | None = None,
    ) -> None:
        self.number_of_jugglers = number_of_jugglers
        self.number_of_paths = number_of_paths
        self.period = period
        self.max_occupancy = max_occupancy
        self.indexes = indexes
        self.symmetries: list[Symmetry] = list(symmetries or [])
        self.arena: list[Throw] = []
        self._grid: list[list[list[list[int | None]]]] = [
            [[[None] * max_occupancy for _ in range(indexes)] for _ in range(2)]
            for _ in range(number_of_jugglers)
        ]

    # ------------------------------------------------------------------
    # Arena and grid access
    # ------------------------------------------------------------------

    def place(self, throw: Throw) -> int:
        """Add a throw to the arena and put it in its grid cell."""
        if not self.in_grid(throw.juggler, throw.index, throw.slot):
            raise PatternInternalError(
                reason="throw lies outside the matrix",
                juggler=throw.juggler,
                hand=throw.hand,
                index=throw.index,
                slot=throw.slot,
            )
        if self._grid[throw.juggler - 1][throw.hand][throw.index][throw.slot] is not None:
            raise PatternInternalError(
                reason="two throws claim the same cell",
                juggler=throw.juggler,
                hand=throw.hand,
                index=throw.index,
                slot=throw.slot,
            )
        throw_id = self._append(throw)
        self._grid[throw.juggler - 1][throw.hand][throw.index][throw.slot] = throw_id
        return throw_id

    def add_virtual(self, throw: Throw) -> int:
        """Add a throw that lives outside the grid (e.g. before beat 0)."""
        throw.virtual = True
        return self._append(throw)

    def _append(self, throw: Throw) -> int:
        throw.id = len(self.arena)
        if throw.primary < 0:
            throw.primary = throw.id
        self.arena.append(throw)
        return throw.id

    def in_grid(self, juggler: int, index: int, slot: int) -> bool:
        return (
            1 <= juggler <= self.number_of_jugglers
            and 0 <= index < self.indexes
            and 0 <= slot < self.max_occupancy
        )

    def throw(self, throw_id: int) -> Throw:
        return self.arena[throw_id]

    def cell(self, juggler: int, hand: int, index: int, slot: int) -> Throw | None:
        """Throw at a grid position, or None for an empty cell."""
        throw_id = self._grid[juggler - 1][hand][index][slot]
        return None if throw_id is None else self.arena[throw_id]

    def slots(self, juggler: int, hand: int, index: int) -> list[Throw]:
        """Throws in a cell; slots fill contiguously from 0."""
        result: list[Throw] = []
        for slot in range(self.max_occupancy):
            throw = self.cell(juggler, hand, index, slot)
            if throw is None:
                break
            result.append(throw)
        return result

    def source_of(self, throw: Throw) -> Throw:
        if throw.source is None:
            raise PatternInternalError(
                reason="throw has no source",
                juggler=throw.juggler,
                hand=throw.hand,
                index=throw.index,
                slot=throw.slot,
                state=self.describe(),
            )
        return self.arena[throw.source]

    def primary_of(self, throw: Throw) -> Throw:
        return self.arena[throw.primary]

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def iter_cells(self) -> Iterator[MatrixCell]:
        """Visit grid cells in index, juggler, hand, slot order."""
        for i in range(self.indexes):
            for j in range(1, self.number_of_jugglers + 1):
                for h in Hand:
                    for slot in range(self.max_occupancy):
                        yield MatrixCell(i, j, h, slot, self.cell(j, h, i, slot))

    def iter_throws(self) -> Iterator[Throw]:
        """Visit grid throws in index, juggler, hand, slot order."""
        for cell in self.iter_cells():
            if cell.throw is not None:
                yield cell.throw

    @property
    def max_throw(self) -> int:
        return max((t.throw_value for t in self.iter_throws()), default=0)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def starting_state(self, beats: int) -> list[list[list[int]]]:
        """Objects in flight when the pattern starts.

        Returns a ``[juggler][hand][beat]`` count of objects landing on each
        of the first ``beats`` beats that were thrown before the pattern's
        first period began.
        """
        result = [[[0] * beats for _ in range(2)] for _ in range(self.number_of_jugglers)]
        for i in range(self.period, self.indexes):
            for j in range(1, self.number_of_jugglers + 1):
                for h in Hand:
                    for slot in range(self.max_occupancy):
                        throw = self.cell(j, h, i, slot)
                        if throw is None:
                            continue
                        if self.source_of(throw).index < self.period and i - self.period < beats:
                            result[j - 1][h][i - self.period] += 1
        return result

    def describe(self) -> str:
        """Text dump of the matrix for debugging and error reports."""
        lines = [
            f"jugglers={self.number_of_jugglers} paths={self.number_of_paths} "
            f"period={self.period} max_occupancy={self.max_occupancy} "
            f"indexes={self.indexes}",
            "symmetries: "
            + ", ".join(
                f"{s.type.value}(delay={s.delay}, perm={s.juggler_perm})" for s in self.symmetries
            ),
        ]
        for cell in self.iter_cells():
            if cell.throw is not None:
                lines.append(f"  {cell.throw}")
        return "\n".join(lines)


__all__ = [
    "JugglingMatrix",
    "MatrixCell",
]
