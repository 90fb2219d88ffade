"""Tests for path symmetries and symmetry images of events."""

from __future__ import annotations

import pytest

from jugglr.core.notation.mhn.builder import MatrixBuilder
from jugglr.core.notation.mhn.errors import PatternError
from jugglr.core.notation.mhn.models import Coordinate, Hand, SymmetryType
from jugglr.core.notation.mhn.pipeline import MhnPipeline
from jugglr.core.notation.mhn.synthesis.images import (
    EventImages,
    PatternImages,
    delay_symmetry,
)
from jugglr.core.notation.mhn.synthesis.models import (
    Event,
    EventList,
    PathSymmetry,
    Transition,
    TransitionType,
)
from jugglr.core.notation.mhn.synthesis.symmetries import build_path_symmetries

LOOP = PathSymmetry(type=SymmetryType.DELAY, juggler_perm=(1,), path_perm=(3, 1, 2), delay=1.0)
HAND_SWAP = PathSymmetry(
    type=SymmetryType.SWITCHDELAY, juggler_perm=(-1,), path_perm=(2, 3, 1), delay=0.5
)


def throw_event(t: float = 0.0, path: int = 1) -> Event:
    return Event(
        t=t,
        juggler=1,
        hand=Hand.RIGHT,
        coordinate=Coordinate(x=10.0),
        transitions=(Transition(type=TransitionType.THROW, path=path),),
    )


# ============================================================================
# Path symmetries
# ============================================================================


class TestBuildPathSymmetries:
    """Test suite for build_path_symmetries."""

    def test_odd_cascade(self):
        matrix = MhnPipeline().build_juggling_matrix(MatrixBuilder.vanilla_async([3]))
        delay, switch = build_path_symmetries(matrix, 2.0)

        assert delay.type == SymmetryType.DELAY
        assert delay.delay == pytest.approx(1.0)
        assert delay.path_perm == (3, 1, 2)
        assert switch.type == SymmetryType.SWITCHDELAY
        assert switch.delay == pytest.approx(0.5)
        assert switch.path_perm == (2, 3, 1)

    def test_passing(self, passing_matrix):
        MhnPipeline().build_juggling_matrix(passing_matrix)
        delay, switch = build_path_symmetries(passing_matrix, 3.0)
        assert delay.path_perm == (3, 1, 2)
        assert switch.path_perm == (2, 3, 1)
        assert switch.juggler_perm == (2, 1)

    def test_inconsistent_paths(self, passing_matrix):
        MhnPipeline().build_juggling_matrix(passing_matrix)
        passing_matrix.cell(1, Hand.RIGHT, 4, 0).path_num = 3
        with pytest.raises(PatternError, match="Bad pattern"):
            build_path_symmetries(passing_matrix, 3.0)

    def test_requires_one_delay(self, resolved_cascade):
        resolved_cascade.symmetries = []
        with pytest.raises(PatternError, match="exactly one delay symmetry"):
            build_path_symmetries(resolved_cascade, 2.9)


# ============================================================================
# Event images
# ============================================================================


class TestEventImages:
    """Test suite for EventImages."""

    def test_delay_symmetry_lookup(self):
        assert delay_symmetry([HAND_SWAP, LOOP]) is LOOP

    def test_missing_delay_symmetry(self):
        with pytest.raises(PatternError):
            delay_symmetry([HAND_SWAP])

    def test_images_within_one_loop(self):
        images = EventImages(
            throw_event(), 0, number_of_jugglers=1, number_of_paths=3, symmetries=[LOOP, HAND_SWAP]
        )
        assert images.entries == 2

        first, second = images.between(0.0, 1.0)
        assert first.is_primary
        assert first.event == throw_event()

        assert not second.is_primary
        assert second.event.t == pytest.approx(0.5)
        assert second.event.hand == Hand.LEFT
        assert second.event.coordinate.x == pytest.approx(-10.0)
        assert second.event.transitions[0].path == 2

    def test_next_loop_uses_loop_permutation(self):
        images = EventImages(
            throw_event(), 0, number_of_jugglers=1, number_of_paths=3, symmetries=[LOOP, HAND_SWAP]
        )
        image = images.image(1, 0, 1, Hand.RIGHT)
        assert image.event.t == pytest.approx(1.0)
        assert image.event.transitions[0].path == 3
        assert image.path_perm.map_inverse(3) == 1

    def test_end_of_window(self):
        images = EventImages(
            throw_event(), 0, number_of_jugglers=1, number_of_paths=3, symmetries=[LOOP, HAND_SWAP]
        )
        assert len(images.between(0.0, 1.0)) == 2
        assert len(images.between(0.0, 1.0, include_end=True)) == 3

    def test_negative_times(self):
        images = EventImages(
            throw_event(), 0, number_of_jugglers=1, number_of_paths=3, symmetries=[LOOP, HAND_SWAP]
        )
        times = [image.event.t for image in images.between(-1.0, 0.0)]
        assert times == pytest.approx([-1.0, -0.5])

    def test_inconsistent_symmetries(self):
        swap = HAND_SWAP.model_copy(update={"path_perm": (1, 2, 3)})
        with pytest.raises(PatternError, match="Symmetries inconsistent"):
            EventImages(
                throw_event(), 0, number_of_jugglers=1, number_of_paths=3, symmetries=[LOOP, swap]
            )


class TestPatternImages:
    """Test suite for PatternImages."""

    def test_images_sorted_by_time(self):
        images = PatternImages(
            number_of_jugglers=1,
            number_of_paths=3,
            symmetries=[LOOP, HAND_SWAP],
            events=[throw_event(0.25, path=2), throw_event(0.0)],
        )
        stream = images.between(0.0, 1.0)
        assert [image.event.t for image in stream] == pytest.approx([0.0, 0.25, 0.5, 0.75])
        assert [image.primary_index for image in stream] == [1, 0, 1, 0]

    def test_event_list_loop_events(self):
        events = EventList(
            bps=2.0,
            loop_duration=1.0,
            number_of_jugglers=1,
            number_of_paths=3,
            gravity=980.0,
            bounce_fraction=0.9,
            events=(throw_event(),),
            symmetries=(LOOP, HAND_SWAP),
        )
        loop = events.loop_events()
        assert [e.hand for e in loop] == [Hand.RIGHT, Hand.LEFT]
        assert len(events.images(-1.0, 1.0)) == 4
