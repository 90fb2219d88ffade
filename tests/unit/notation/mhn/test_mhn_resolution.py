"""Tests for the matrix resolution stages: primaries, paths, sources,
catch order and dwell windows."""

from __future__ import annotations

import pytest

from jugglr.core.notation.mhn.builder import MatrixBuilder
from jugglr.core.notation.mhn.catches import is_catch_order_incorrect, set_catch_order
from jugglr.core.notation.mhn.dwell import find_dwell_windows
from jugglr.core.notation.mhn.errors import PatternError, PatternInternalError
from jugglr.core.notation.mhn.horizon import add_throw_sources
from jugglr.core.notation.mhn.matrix import JugglingMatrix
from jugglr.core.notation.mhn.models import Hand, Symmetry, SymmetryType, Throw, TossModifier
from jugglr.core.notation.mhn.paths import assign_paths
from jugglr.core.notation.mhn.pipeline import MhnPipeline
from jugglr.core.notation.mhn.symmetry import resolve_primaries


def build_asymmetric_cascade(number_of_paths: int = 3) -> JugglingMatrix:
    """3-ball cascade with no declared symmetries."""
    builder = MatrixBuilder(
        number_of_jugglers=1,
        period=2,
        max_occupancy=1,
        indexes=6,
        number_of_paths=number_of_paths,
    )
    for i in range(6):
        hand = Hand.RIGHT if i % 2 == 0 else Hand.LEFT
        builder.add_throw(
            juggler=1,
            hand=hand,
            index=i,
            target_juggler=1,
            target_hand=hand.other,
            target_index=i + 3,
        )
    return builder.build()


# ============================================================================
# Symmetry closure
# ============================================================================


class TestResolvePrimaries:
    """Test suite for resolve_primaries."""

    def test_cascade_has_one_primary_per_hand(self, cascade_matrix):
        assert resolve_primaries(cascade_matrix) == 2
        primaries = [t for t in cascade_matrix.iter_throws() if t.is_primary]
        assert [(t.hand, t.index) for t in primaries] == [(Hand.RIGHT, 0), (Hand.LEFT, 1)]

    def test_primary_is_flattened(self, cascade_matrix):
        resolve_primaries(cascade_matrix)
        for throw in cascade_matrix.iter_throws():
            assert cascade_matrix.primary_of(throw).is_primary

    def test_symmetric_images_share_primary(self, passing_matrix):
        resolve_primaries(passing_matrix)
        for symmetry in passing_matrix.symmetries:
            perm = symmetry.permutation
            for throw in passing_matrix.iter_throws():
                if throw.index + symmetry.delay >= passing_matrix.indexes:
                    continue
                juggler, hand = perm.image_of(throw.juggler, throw.hand)
                image = passing_matrix.cell(juggler, hand, throw.index + symmetry.delay, 0)
                assert image.primary == throw.primary

    def test_odd_cascade_is_one_class(self):
        matrix = MatrixBuilder.vanilla_async([3])
        assert resolve_primaries(matrix) == 1

    def test_no_symmetries_keeps_every_throw(self):
        matrix = build_asymmetric_cascade()
        assert resolve_primaries(matrix) == 6

    def test_missing_image(self):
        builder = MatrixBuilder(
            number_of_jugglers=1, period=2, max_occupancy=1, indexes=4, number_of_paths=1
        )
        builder.add_symmetry(Symmetry(type=SymmetryType.DELAY, delay=2, juggler_perm=(1,)))
        builder.add_throw(
            juggler=1,
            hand=Hand.RIGHT,
            index=0,
            target_juggler=1,
            target_hand=Hand.RIGHT,
            target_index=2,
        )
        with pytest.raises(PatternInternalError, match="image of throw is missing"):
            resolve_primaries(builder.build())


# ============================================================================
# Path assignment
# ============================================================================


class TestAssignPaths:
    """Test suite for assign_paths."""

    def test_cascade_paths(self, cascade_matrix):
        resolve_primaries(cascade_matrix)
        assign_paths(cascade_matrix)
        paths = [t.path_num for t in cascade_matrix.iter_throws()]
        assert paths == [1, 2, 3, 1, 2, 3]
        assert set(paths) == {1, 2, 3}

    def test_path_follows_source(self, cascade_matrix):
        resolve_primaries(cascade_matrix)
        assign_paths(cascade_matrix)
        for throw in cascade_matrix.iter_throws():
            if throw.source is not None:
                assert cascade_matrix.source_of(throw).path_num == throw.path_num
            if throw.target is not None:
                assert cascade_matrix.throw(throw.target).source == throw.id

    def test_degenerate_path_count(self):
        matrix = build_asymmetric_cascade()
        resolve_primaries(matrix)
        assign_paths(matrix)
        assert {t.path_num for t in matrix.iter_throws()} == {1, 2, 3}

    def test_more_chains_than_paths(self):
        matrix = build_asymmetric_cascade(number_of_paths=2)
        resolve_primaries(matrix)
        with pytest.raises(PatternError, match="more object chains"):
            assign_paths(matrix)

    def test_fewer_chains_than_paths(self):
        matrix = build_asymmetric_cascade(number_of_paths=4)
        resolve_primaries(matrix)
        with pytest.raises(PatternInternalError, match="only 3 object chains"):
            assign_paths(matrix)

    def test_multiplex_second_class_takes_slot_one(self, multiplex_matrix):
        matrix = multiplex_matrix
        resolve_primaries(matrix)
        assign_paths(matrix)
        assert matrix.cell(1, Hand.RIGHT, 0, 0).target_slot == 0
        assert matrix.cell(1, Hand.RIGHT, 0, 1).target_slot == 1
        assert matrix.cell(1, Hand.RIGHT, 2, 1).target_slot == 1
        assert {t.path_num for t in matrix.iter_throws()} == {1, 2, 3, 4}

    def test_too_many_objects_landing(self, crowded_multiplex_matrix):
        matrix = crowded_multiplex_matrix
        resolve_primaries(matrix)
        with pytest.raises(PatternError, match="Too many objects landing on beat 5") as exc_info:
            assign_paths(matrix)
        assert exc_info.value.beat == 5
        assert exc_info.value.juggler == 1
        assert exc_info.value.hand == Hand.RIGHT
        assert "right hand" in str(exc_info.value)


# ============================================================================
# Horizon completion
# ============================================================================


class TestAddThrowSources:
    """Test suite for add_throw_sources."""

    def test_cascade_gets_virtual_sources(self, cascade_matrix):
        resolve_primaries(cascade_matrix)
        assign_paths(cascade_matrix)
        assert add_throw_sources(cascade_matrix) == 3

        for index, expected in ((0, -3), (1, -2), (2, -1)):
            hand = Hand.RIGHT if index % 2 == 0 else Hand.LEFT
            throw = cascade_matrix.cell(1, hand, index, 0)
            source = cascade_matrix.source_of(throw)
            assert source.virtual
            assert source.index == expected
            assert source.target == throw.id
            assert source.path_num == throw.path_num
            assert source.throw_value == 3

    def test_every_throw_has_source(self, resolved_cascade):
        for throw in resolved_cascade.iter_throws():
            assert throw.source is not None

    def test_missing_lookahead(self):
        builder = MatrixBuilder(
            number_of_jugglers=1, period=2, max_occupancy=1, indexes=2, number_of_paths=1
        )
        builder.add_throw(
            juggler=1,
            hand=Hand.RIGHT,
            index=0,
            target_juggler=1,
            target_hand=Hand.RIGHT,
            target_index=2,
        )
        matrix = builder.build()
        with pytest.raises(PatternInternalError, match="one period ahead"):
            add_throw_sources(matrix)


# ============================================================================
# Catch order
# ============================================================================


class TestCatchOrder:
    """Test suite for catch ordering."""

    def test_cascade_catches_once_per_beat(self, resolved_cascade):
        for throw in resolved_cascade.iter_throws():
            assert throw.catching
            assert throw.catch_num == 0

    def test_multiplex_catch_numbers(self, multiplex_matrix):
        matrix = multiplex_matrix
        MhnPipeline().build_juggling_matrix(matrix)
        for index in range(0, 7, 2):
            cell = matrix.slots(1, Hand.RIGHT, index)
            assert sorted(t.catch_num for t in cell) == [0, 1]

    def test_higher_throw_caught_first(self):
        matrix = JugglingMatrix(
            number_of_jugglers=1, number_of_paths=2, period=4, max_occupancy=2, indexes=5
        )

        def place(hand: Hand, index: int, slot: int, target_index: int) -> Throw:
            throw = Throw(
                juggler=1,
                hand=hand,
                index=index,
                slot=slot,
                target_juggler=1,
                target_hand=Hand.RIGHT,
                target_index=target_index,
                modifier=TossModifier(),
            )
            matrix.place(throw)
            return throw

        four = place(Hand.RIGHT, 0, 0, 4)
        three = place(Hand.LEFT, 1, 0, 4)
        first = place(Hand.RIGHT, 4, 0, 8)
        second = place(Hand.RIGHT, 4, 1, 8)
        four.source = four.id
        three.source = three.id
        first.source = three.id
        second.source = four.id

        # the 4 was thrown earlier, so it should be caught before the 3
        assert is_catch_order_incorrect(matrix, first, second)
        assert not is_catch_order_incorrect(matrix, second, first)

        set_catch_order(matrix)
        assert second.catch_num == 0
        assert first.catch_num == 1

    def test_holds_are_not_caught(self):
        matrix = MhnPipeline().build_juggling_matrix(MatrixBuilder.vanilla_async([4, 2]))
        held = matrix.cell(1, Hand.LEFT, 3, 0)
        assert not held.catching


# ============================================================================
# Dwell windows
# ============================================================================


class TestDwellWindows:
    """Test suite for find_dwell_windows."""

    def test_async_hands_rest_a_beat(self, resolved_cascade):
        assert {t.dwell_window for t in resolved_cascade.iter_throws()} == {2}

    def test_hand_throwing_every_beat(self):
        builder = MatrixBuilder(
            number_of_jugglers=1, period=1, max_occupancy=1, indexes=4, number_of_paths=1
        )
        for i in range(4):
            builder.add_throw(
                juggler=1,
                hand=Hand.RIGHT,
                index=i,
                target_juggler=1,
                target_hand=Hand.RIGHT,
                target_index=i + 1,
            )
        matrix = builder.build()
        find_dwell_windows(matrix)
        assert {t.dwell_window for t in matrix.iter_throws()} == {1}


# ============================================================================
# Scenarios
# ============================================================================


class TestPassingScenario:
    """Two jugglers passing with a juggler-swapping SWITCHDELAY symmetry."""

    def test_all_throws_share_one_primary(self, passing_matrix):
        MhnPipeline().build_juggling_matrix(passing_matrix)
        primaries = {t.primary for t in passing_matrix.iter_throws()}
        assert primaries == {passing_matrix.cell(1, Hand.RIGHT, 0, 0).id}

    def test_paths(self, passing_matrix):
        MhnPipeline().build_juggling_matrix(passing_matrix)
        paths = [t.path_num for t in passing_matrix.iter_throws()]
        assert paths == [1, 2, 3, 1, 2, 3]

    def test_starting_state(self, passing_matrix):
        state = MhnPipeline().starting_state(passing_matrix, 3)
        assert state[0][Hand.RIGHT] == [1, 0, 1]
        assert state[1][Hand.RIGHT] == [0, 1, 0]
        assert state[0][Hand.LEFT] == [0, 0, 0]
