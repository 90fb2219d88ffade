"""Event synthesis: turn a resolved juggling matrix into a timed event list."""

from __future__ import annotations

import logging

import numpy as np

from jugglr.core.config.models import MhnConfig
from jugglr.core.notation.mhn.constants import (
    CATCH_X,
    CROSSING_THROW_X,
    SAME_THROW_X,
    table_lookup,
)
from jugglr.core.notation.mhn.errors import PatternError, PatternInternalError
from jugglr.core.notation.mhn.matrix import JugglingMatrix
from jugglr.core.notation.mhn.models import Coordinate, Hand, Throw
from jugglr.core.notation.mhn.providers import BodyPathProvider, HandPathProvider
from jugglr.core.notation.mhn.synthesis.flight import scale_factor_to_fit
from jugglr.core.notation.mhn.synthesis.holds import fix_holds, select_primary_events
from jugglr.core.notation.mhn.synthesis.images import PatternImages, delay_symmetry
from jugglr.core.notation.mhn.synthesis.models import (
    BodyPosition,
    Event,
    EventList,
    PatternDraft,
    Transition,
    TransitionType,
)
from jugglr.core.notation.mhn.synthesis.positions import (
    add_gap_events,
    describe_draft,
    locate_deferred_events,
    resting_coordinate,
)
from jugglr.core.notation.mhn.synthesis.symmetries import build_path_symmetries
from jugglr.core.notation.mhn.timing import calc_bps, find_catch_throw_times

logger = logging.getLogger(__name__)


class EventSynthesizer:
    """Builds the final ``EventList`` for a matrix that has been through the
    resolution stages (primaries, paths, sources, catch order, dwell).

    Without hand paths, event positions come from fixed offset tables and any
    hand left idle too long gets interpolated positioning events. With hand
    paths, every position comes from the provider.

    Args:
        config: Tempo, dwell and flight parameters
        hands: Optional per-beat hand coordinates
        bodies: Optional per-beat body positions

    Example:
        >>> from jugglr.core.notation.mhn.builder import MatrixBuilder
        >>> from jugglr.core.notation.mhn.pipeline import MhnPipeline
        >>> pipeline = MhnPipeline()
        >>> matrix = pipeline.build_juggling_matrix(MatrixBuilder.vanilla_async([3]))
        >>> events = EventSynthesizer(MhnConfig()).synthesize(matrix)
        >>> events.number_of_paths
        3
    """

    def __init__(
        self,
        config: MhnConfig,
        hands: HandPathProvider | None = None,
        bodies: BodyPathProvider | None = None,
    ) -> None:
        self.config = config
        self.hands = hands
        self.bodies = bodies

    def synthesize(self, matrix: JugglingMatrix, bps: float | None = None) -> EventList:
        """Compile the matrix into primary events plus path symmetries.

        Args:
            matrix: Fully resolved juggling matrix
            bps: Tempo override; otherwise the configured or calculated tempo.
                A tempo given either way is never rescaled.

        Returns:
            Compiled event list

        Raises:
            PatternError: If the pattern cannot be turned into events
            PatternInternalError: If an invariant of the synthesis breaks
        """
        tempo_is_fixed = bps is not None or self.config.tempo_is_fixed
        if bps is None:
            bps = self.config.bps if self.config.bps is not None else calc_bps(matrix)
        logger.debug(f"Synthesizing events at {bps:.3f} beats/sec")

        symmetries = build_path_symmetries(matrix, bps)
        find_catch_throw_times(
            matrix,
            bps,
            self.config.dwell,
            self.config.squeezebeats,
            self.config.dwell_array,
        )

        draft = PatternDraft(
            number_of_jugglers=matrix.number_of_jugglers,
            number_of_paths=matrix.number_of_paths,
            symmetries=symmetries,
        )
        touched_hands: set[tuple[int, int]] = set()
        touched_paths: set[int] = set()
        for k in range(matrix.period):
            for j in range(1, matrix.number_of_jugglers + 1):
                for h in Hand:
                    first = matrix.cell(j, h, k, 0)
                    if first is None or not first.is_primary:
                        continue
                    self._add_cell_events(matrix, draft, first, bps, touched_hands, touched_paths)
        logger.debug(f"Emitted {len(draft.events)} primary events")

        self._add_body_positions(matrix, draft, bps)
        self._add_resting_events(draft, touched_hands)
        self._hold_untouched_paths(matrix, draft, touched_paths)

        snapshot = draft.copy()
        self._finish(draft)
        result = self._event_list(draft, bps)

        if not tempo_is_fixed:
            factor = scale_factor_to_fit(
                result,
                gravity=self.config.gravity,
                bounce_fraction=self.config.bounce_fraction,
                hand_height=self.config.hand_height,
                margin=self.config.rescale_margin,
            )
            if factor > 1.0:
                bps /= factor
                logger.info(f"Slowed tempo by {factor:.3f}x to {bps:.3f} beats/sec to fit throws")
                if self.hands is None:
                    locate_deferred_events(snapshot)
                    fix_holds(snapshot)
                    draft = snapshot.scaled(factor)
                    self._finish(draft)
                else:
                    draft = draft.scaled(factor)
                result = self._event_list(draft, bps, rescale_factor=factor)

        self._validate(result)
        return result

    # ------------------------------------------------------------------
    # Primary events
    # ------------------------------------------------------------------

    def _add_cell_events(
        self,
        matrix: JugglingMatrix,
        draft: PatternDraft,
        first: Throw,
        bps: float,
        touched_hands: set[tuple[int, int]],
        touched_paths: set[int],
    ) -> None:
        j, h, k = first.juggler, first.hand, first.index
        cell = matrix.slots(j, h, k)
        hands_beat = self._hands_beat(first)

        # on-beat event: throws, plus holds when hand paths are known
        transitions: list[Transition] = []
        throw_x: list[float] = []
        for throw in cell:
            if not throw.is_hold:
                if throw.is_zero:
                    raise PatternError(
                        reason=f"modifier {throw.modifier.code} on a 0 throw",
                        beat=k + 1,
                        juggler=j,
                        hand=h,
                    )
                transitions.append(
                    Transition(
                        type=TransitionType.THROW, path=throw.path_num, modifier=throw.modifier
                    )
                )
                table = SAME_THROW_X if throw.target_hand == h else CROSSING_THROW_X
                throw_x.append(table_lookup(table, throw.throw_value))
            elif self.hands is not None and not throw.is_zero:
                transitions.append(Transition(type=TransitionType.HOLDING, path=throw.path_num))
                touched_paths.add(throw.path_num)

        if self.hands is not None or throw_x:
            if self.hands is not None:
                coordinate = self._hand_coordinate(j, h, hands_beat, 0)
            else:
                coordinate = Coordinate(x=float(np.mean(throw_x))).for_hand(h)
            draft.events.append(
                Event(
                    t=first.throw_time,
                    juggler=j,
                    hand=h,
                    coordinate=coordinate,
                    transitions=tuple(transitions),
                )
            )
            for throw in matrix.iter_throws():
                if throw.primary == first.id:
                    touched_hands.add((throw.juggler, int(throw.hand)))

        # catch event(s) just before the throw
        catching = [throw for throw in cell if throw.catching]
        catch_x = [table_lookup(CATCH_X, k - matrix.source_of(throw).index) for throw in catching]
        touched_paths.update(throw.path_num for throw in catching)
        if self.hands is None and not catching:
            return

        if self.hands is not None:
            catch_beat = self._wrap_beat(j, hands_beat - 2)
            catch_index = self.hands.catch_index(j, catch_beat)
            catch_coordinate = self._hand_coordinate(j, h, catch_beat, catch_index)
        else:
            catch_coordinate = Coordinate(x=float(np.mean(catch_x))).for_hand(h)

        last_catch = 0.0
        if self.config.squeezebeats == 0.0 or len(catching) < 2:
            last_catch = first.catch_time
            catch_transitions: list[Transition] = []
            for throw in cell:
                if throw.catching:
                    catch_transitions.append(
                        Transition(type=TransitionType.CATCH, path=throw.path_num)
                    )
                elif self.hands is not None and throw.path_num != -1:
                    catch_transitions.append(
                        Transition(type=TransitionType.HOLDING, path=throw.path_num)
                    )
                    touched_paths.add(throw.path_num)
            draft.events.append(
                Event(
                    t=first.catch_time,
                    juggler=j,
                    hand=h,
                    coordinate=catch_coordinate,
                    transitions=tuple(catch_transitions),
                )
            )
        else:
            # squeezed catches, one event each; holds are filled in later
            for throw in catching:
                if throw.catch_num == len(catching) - 1:
                    last_catch = throw.catch_time
                draft.events.append(
                    Event(
                        t=throw.catch_time,
                        juggler=j,
                        hand=h,
                        coordinate=catch_coordinate,
                        transitions=(Transition(type=TransitionType.CATCH, path=throw.path_num),),
                    )
                )

        if self.hands is not None:
            self._add_hand_path_events(matrix, draft, first, bps, last_catch)

    def _add_hand_path_events(
        self,
        matrix: JugglingMatrix,
        draft: PatternDraft,
        first: Throw,
        bps: float,
        last_catch: float,
    ) -> None:
        """Hand-path samples from the last catch to the throw, then on to the
        next catch, spaced evenly in time."""
        j, h = first.juggler, first.hand
        hands_beat = self._hands_beat(first)

        catch_beat = self._wrap_beat(j, hands_beat - 2)
        catch_index = self.hands.catch_index(j, catch_beat)
        count = self.hands.number_of_coordinates(j, catch_beat) - catch_index
        for di in range(1, count):
            coordinate = self.hands.coordinate(j, catch_beat, catch_index + di)
            if coordinate is None:
                continue
            t = last_catch + di * (first.throw_time - last_catch) / count
            draft.events.append(
                Event(t=t, juggler=j, hand=h, coordinate=coordinate.for_hand(h))
            )

        next_catch = self._next_catch_time(matrix, first, last_catch, bps)
        count = self.hands.catch_index(j, hands_beat)
        for di in range(1, count):
            coordinate = self.hands.coordinate(j, hands_beat, di)
            if coordinate is None:
                continue
            t = first.throw_time + di * (next_catch - first.throw_time) / count
            draft.events.append(
                Event(t=t, juggler=j, hand=h, coordinate=coordinate.for_hand(h))
            )

    @staticmethod
    def _next_catch_time(
        matrix: JugglingMatrix, first: Throw, last_catch: float, bps: float
    ) -> float:
        next_catch = last_catch
        k = first.index + 1
        while next_catch == last_catch:
            wrap, index = divmod(k, matrix.indexes)
            if wrap > 1:
                raise PatternInternalError(
                    reason=f"no catch or hold after t={last_catch:.4f}",
                    juggler=first.juggler,
                    hand=first.hand,
                    index=first.index,
                    state=matrix.describe(),
                )
            for slot, throw in enumerate(matrix.slots(first.juggler, first.hand, index)):
                t = throw.catch_time + wrap * matrix.indexes / bps
                next_catch = t if slot == 0 else min(next_catch, t)
            k += 1
        return next_catch

    def _hands_beat(self, throw: Throw) -> int:
        if throw.hands_beat >= 0 or self.hands is None:
            return throw.hands_beat
        return throw.index % self.hands.period(throw.juggler)

    def _wrap_beat(self, juggler: int, beat: int) -> int:
        period = self.hands.period(juggler)
        while beat < 0:
            beat += period
        return beat

    def _hand_coordinate(self, juggler: int, hand: Hand, beat: int, index: int) -> Coordinate:
        coordinate = self.hands.coordinate(juggler, beat, index)
        if coordinate is None:
            raise PatternError(
                reason=f"hand path has no coordinate {index} on beat {beat + 1}",
                juggler=juggler,
                hand=hand,
            )
        return coordinate.for_hand(hand)

    # ------------------------------------------------------------------
    # Bodies, idle hands and idle paths
    # ------------------------------------------------------------------

    def _add_body_positions(self, matrix: JugglingMatrix, draft: PatternDraft, bps: float) -> None:
        if self.bodies is None:
            return
        for k in range(matrix.period):
            for j in range(1, matrix.number_of_jugglers + 1):
                beat = k % self.bodies.period(j)
                count = self.bodies.number_of_positions(j, beat)
                for z in range(count):
                    pose = self.bodies.position(j, beat, z)
                    if pose is None:
                        continue
                    draft.positions.append(
                        BodyPosition(
                            t=(k + z / count) / bps,
                            juggler=j,
                            x=pose.x,
                            y=pose.y,
                            z=pose.z,
                            angle=pose.angle,
                        )
                    )
        logger.debug(f"Added {len(draft.positions)} body positions")

    @staticmethod
    def _add_resting_events(draft: PatternDraft, touched_hands: set[tuple[int, int]]) -> None:
        for j in range(1, draft.number_of_jugglers + 1):
            for h in Hand:
                if (j, int(h)) not in touched_hands:
                    draft.events.append(
                        Event(t=-1.0, juggler=j, hand=h, coordinate=resting_coordinate(h))
                    )
                    logger.debug(f"Juggler {j} {h.label} rests")

    @staticmethod
    def _hold_untouched_paths(
        matrix: JugglingMatrix, draft: PatternDraft, touched_paths: set[int]
    ) -> None:
        """Put paths that never move into the hand that first holds them."""

        def mark(path: int) -> None:
            touched_paths.add(path)
            for sym in draft.symmetries:
                perm = sym.path_permutation
                for power in range(1, perm.order_of(path)):
                    touched_paths.add(perm.map(path, power))

        for path in range(1, draft.number_of_paths + 1):
            if path in touched_paths:
                mark(path)

        for path in range(1, draft.number_of_paths + 1):
            if path in touched_paths:
                continue
            juggler, hand = 1, Hand.LEFT
            for throw in matrix.iter_throws():
                if throw.path_num == path:
                    juggler, hand = throw.juggler, throw.hand
                    break

            for index, event in enumerate(draft.events):
                if event.juggler == juggler and event.hand == hand:
                    draft.events[index] = event.with_transition(
                        Transition(type=TransitionType.HOLDING, path=path)
                    )
                    mark(path)
            logger.debug(f"Path {path} never moves; held by juggler {juggler} {hand.label}")

    # ------------------------------------------------------------------
    # Finishing
    # ------------------------------------------------------------------

    def _finish(self, draft: PatternDraft) -> None:
        if self.hands is None:
            add_gap_events(draft, self.config.max_event_gap_secs)
        locate_deferred_events(draft)
        fix_holds(draft)
        select_primary_events(draft)

    def _event_list(self, draft: PatternDraft, bps: float, rescale_factor: float = 1.0) -> EventList:
        return EventList(
            bps=bps,
            loop_duration=delay_symmetry(draft.symmetries).delay,
            number_of_jugglers=draft.number_of_jugglers,
            number_of_paths=draft.number_of_paths,
            gravity=self.config.gravity,
            bounce_fraction=self.config.bounce_fraction,
            events=tuple(sorted(draft.events, key=lambda event: event.sort_key)),
            symmetries=tuple(draft.symmetries),
            positions=tuple(sorted(draft.positions, key=lambda p: (p.t, p.juggler))),
            rescale_factor=rescale_factor,
        )

    @staticmethod
    def _validate(result: EventList) -> None:
        images = PatternImages.from_pattern(result)
        window = images.loop_perm.order * images.loop_duration
        moved = {
            tr.path
            for image in images.between(0.0, window, include_end=True)
            for tr in image.event.transitions
        }
        missing = sorted(set(range(1, result.number_of_paths + 1)) - moved)
        if missing:
            raise PatternInternalError(
                reason=f"paths without any transition: {missing}",
                state=describe_draft(result),
            )


__all__ = [
    "EventSynthesizer",
]
