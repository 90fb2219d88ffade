"""MHN compile pipeline facade.

Runs the matrix resolution stages in order and hands the result to event
synthesis:

1. symmetry closure (primary throws)
2. path assignment
3. horizon completion (virtual source throws)
4. catch ordering
5. dwell windows
6. event synthesis (timing, events, holds, tempo rescale)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from jugglr.core.config.models import MhnConfig
from jugglr.core.notation.mhn.catches import set_catch_order
from jugglr.core.notation.mhn.dwell import find_dwell_windows
from jugglr.core.notation.mhn.horizon import add_throw_sources
from jugglr.core.notation.mhn.matrix import JugglingMatrix
from jugglr.core.notation.mhn.paths import assign_paths
from jugglr.core.notation.mhn.providers import BodyPathProvider, HandPathProvider
from jugglr.core.notation.mhn.symmetry import resolve_primaries
from jugglr.core.notation.mhn.synthesis.models import EventList
from jugglr.core.notation.mhn.synthesis.synthesizer import EventSynthesizer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MhnPipeline:
    """Compiles a populated juggling matrix into an ``EventList``.

    The matrix is resolved in place; callers that need the unresolved matrix
    must keep their own copy. Both errors raised here abort compilation:
    ``PatternError`` for a bad pattern and ``PatternInternalError`` for a
    broken invariant.

    Args:
        config: Tempo, dwell and flight parameters (defaults if None)
        hands: Optional per-beat hand coordinates
        bodies: Optional per-beat body positions

    Example:
        >>> from jugglr.core.notation.mhn.builder import MatrixBuilder
        >>> events = MhnPipeline().compile(MatrixBuilder.vanilla_async([5, 3, 1]))
        >>> events.number_of_paths
        3
    """

    def __init__(
        self,
        config: MhnConfig | None = None,
        hands: HandPathProvider | None = None,
        bodies: BodyPathProvider | None = None,
    ) -> None:
        self.config = config or MhnConfig()
        self.hands = hands
        self.bodies = bodies

    def build_juggling_matrix(self, matrix: JugglingMatrix) -> JugglingMatrix:
        """Run the resolution stages on a populated matrix.

        Returns:
            The same matrix, resolved
        """
        if self.hands is not None:
            for throw in matrix.iter_throws():
                if throw.hands_beat < 0:
                    throw.hands_beat = throw.index % self.hands.period(throw.juggler)

        self._run_stage("symmetry closure", resolve_primaries, matrix)
        self._run_stage("path assignment", assign_paths, matrix)
        self._run_stage("horizon completion", add_throw_sources, matrix)
        self._run_stage("catch ordering", set_catch_order, matrix)
        self._run_stage("dwell windows", find_dwell_windows, matrix)
        return matrix

    def compile(self, matrix: JugglingMatrix, bps: float | None = None) -> EventList:
        """Resolve the matrix and synthesize its events.

        Args:
            matrix: Populated juggling matrix
            bps: Tempo override; a tempo given here or in the config is
                never rescaled

        Returns:
            Compiled event list
        """
        start_time = time.perf_counter()
        self.build_juggling_matrix(matrix)
        synthesizer = EventSynthesizer(self.config, hands=self.hands, bodies=self.bodies)
        result = self._run_stage("event synthesis", synthesizer.synthesize, matrix, bps)

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"Compiled {len(result.events)} events for {result.number_of_paths} paths "
            f"at {result.bps:.3f} beats/sec in {duration_ms:.1f}ms"
        )
        return result

    def starting_state(self, matrix: JugglingMatrix, beats: int) -> list[list[list[int]]]:
        """Objects in flight when the pattern starts, per juggler, hand and beat.

        Resolves the matrix first if its sources are not yet known.
        """
        if any(throw.source is None for throw in matrix.iter_throws()):
            self.build_juggling_matrix(matrix)
        return matrix.starting_state(beats)

    @staticmethod
    def _run_stage(name: str, stage: Callable[..., T], *args: object) -> T:
        start_time = time.perf_counter()
        result = stage(*args)
        duration_ms = (time.perf_counter() - start_time) * 1000
        if isinstance(result, int) and not isinstance(result, bool):
            logger.debug(f"Stage {name}: {result} ({duration_ms:.1f}ms)")
        else:
            logger.debug(f"Stage {name} done ({duration_ms:.1f}ms)")
        return result


__all__ = [
    "MhnPipeline",
]
