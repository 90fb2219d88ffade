"""Shared pytest fixtures for jugglr tests."""

from __future__ import annotations

import logging

import pytest

from jugglr.core.config.models import MhnConfig
from jugglr.core.notation.mhn.builder import MatrixBuilder
from jugglr.core.notation.mhn.matrix import JugglingMatrix
from jugglr.core.notation.mhn.models import Hand, Symmetry, SymmetryType
from jugglr.core.notation.mhn.pipeline import MhnPipeline

# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture
def restore_root_logger():
    """Undo root logger changes made by configure_logging."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


# ============================================================================
# Config Fixtures
# ============================================================================


@pytest.fixture
def mhn_config() -> MhnConfig:
    """Default compile parameters."""
    return MhnConfig()


@pytest.fixture
def fixed_tempo_config() -> MhnConfig:
    """Compile parameters with a pinned tempo (no rescaling)."""
    return MhnConfig(bps=3.0)


@pytest.fixture
def pipeline(mhn_config: MhnConfig) -> MhnPipeline:
    """Pipeline without hand or body paths."""
    return MhnPipeline(config=mhn_config)


# ============================================================================
# Matrix Fixtures
# ============================================================================


@pytest.fixture
def cascade_matrix() -> JugglingMatrix:
    """3-ball cascade written with an even period (only the DELAY symmetry)."""
    return MatrixBuilder.vanilla_async([3, 3])


@pytest.fixture
def resolved_cascade(pipeline: MhnPipeline, cascade_matrix: JugglingMatrix) -> JugglingMatrix:
    """3-ball cascade after the resolution stages."""
    return pipeline.build_juggling_matrix(cascade_matrix)


def build_passing_matrix() -> JugglingMatrix:
    """Two jugglers passing a 3-object pattern.

    Juggler 1's right hand throws to juggler 2's right hand on even beats,
    and juggler 2's right hand throws back on odd beats. Juggler 2 repeats
    juggler 1 one beat later, so the pattern has a SWITCHDELAY symmetry that
    swaps the jugglers.
    """
    builder = MatrixBuilder(
        number_of_jugglers=2, period=2, max_occupancy=1, indexes=6, number_of_paths=3
    )
    builder.add_symmetry(Symmetry(type=SymmetryType.DELAY, delay=2, juggler_perm=(1, 2)))
    builder.add_symmetry(Symmetry(type=SymmetryType.SWITCHDELAY, delay=1, juggler_perm=(2, 1)))
    for i in range(6):
        thrower, catcher = (1, 2) if i % 2 == 0 else (2, 1)
        builder.add_throw(
            juggler=thrower,
            hand=Hand.RIGHT,
            index=i,
            target_juggler=catcher,
            target_hand=Hand.RIGHT,
            target_index=i + 3,
        )
    return builder.build()


@pytest.fixture
def passing_matrix() -> JugglingMatrix:
    """Two jugglers passing (SWITCHDELAY symmetry)."""
    return build_passing_matrix()


def build_multiplex_matrix(*, with_left_threes: bool = False) -> JugglingMatrix:
    """Right hand multiplexes two 4s every other beat, right to right.

    With ``with_left_threes`` the left hand also throws 3s on odd beats, so
    three objects land in the right hand on beat 5.
    """
    builder = MatrixBuilder(
        number_of_jugglers=1, period=2, max_occupancy=2, indexes=7, number_of_paths=4
    )
    builder.add_symmetry(Symmetry(type=SymmetryType.DELAY, delay=2, juggler_perm=(1,)))
    for i in range(0, 7, 2):
        for slot in (0, 1):
            builder.add_throw(
                juggler=1,
                hand=Hand.RIGHT,
                index=i,
                slot=slot,
                target_juggler=1,
                target_hand=Hand.RIGHT,
                target_index=i + 4,
            )
    if with_left_threes:
        for i in range(1, 7, 2):
            builder.add_throw(
                juggler=1,
                hand=Hand.LEFT,
                index=i,
                target_juggler=1,
                target_hand=Hand.RIGHT,
                target_index=i + 3,
            )
    return builder.build()


@pytest.fixture
def multiplex_matrix() -> JugglingMatrix:
    """Right hand multiplexing pairs of 4s."""
    return build_multiplex_matrix()


@pytest.fixture
def crowded_multiplex_matrix() -> JugglingMatrix:
    """Multiplex pattern with three objects landing in one hand."""
    return build_multiplex_matrix(with_left_threes=True)
