"""Tests for minimum flight durations and tempo rescaling."""

from __future__ import annotations

import pytest

from jugglr.core.notation.mhn.models import (
    BounceModifier,
    Coordinate,
    ForcedModifier,
    Hand,
    HoldModifier,
    SymmetryType,
    TossModifier,
)
from jugglr.core.notation.mhn.synthesis.flight import (
    min_duration,
    scale_factor_to_fit,
    throw_flights,
)
from jugglr.core.notation.mhn.synthesis.models import (
    Event,
    PathSymmetry,
    PatternDraft,
    Transition,
    TransitionType,
)

PHYSICS = {"gravity": 980.0, "bounce_fraction": 0.9, "hand_height": 100.0}


def one_object_draft(first_modifier) -> PatternDraft:
    """One object thrown right to left at t=0 and back at t=0.6."""

    def event(t: float, hand: Hand, type_: TransitionType, modifier=None) -> Event:
        return Event(
            t=t,
            juggler=1,
            hand=hand,
            coordinate=Coordinate(x=20.0).for_hand(hand),
            transitions=(Transition(type=type_, path=1, modifier=modifier),),
        )

    return PatternDraft(
        number_of_jugglers=1,
        number_of_paths=1,
        symmetries=[
            PathSymmetry(type=SymmetryType.DELAY, juggler_perm=(1,), path_perm=(1,), delay=1.0)
        ],
        events=[
            event(0.0, Hand.RIGHT, TransitionType.THROW, first_modifier),
            event(0.5, Hand.LEFT, TransitionType.CATCH),
            event(0.6, Hand.LEFT, TransitionType.THROW, TossModifier()),
            event(0.9, Hand.RIGHT, TransitionType.CATCH),
        ],
    )


class TestMinDuration:
    """Test suite for min_duration."""

    @pytest.mark.parametrize("modifier", [None, TossModifier(), HoldModifier()])
    def test_non_bounce_is_free(self, modifier):
        assert min_duration(modifier, **PHYSICS) == 0.0

    def test_single_bounce(self):
        assert min_duration(BounceModifier(), **PHYSICS) == pytest.approx(1.0785, abs=1e-3)

    def test_forced_bounce_is_quicker(self):
        lift = min_duration(BounceModifier(), **PHYSICS)
        forced = min_duration(BounceModifier(forced=True), **PHYSICS)
        assert forced == pytest.approx(0.7774, abs=1e-3)
        assert forced < lift

    def test_forced_shorthand(self):
        assert min_duration(ForcedModifier(), **PHYSICS) == pytest.approx(
            min_duration(BounceModifier(forced=True), **PHYSICS)
        )

    def test_forced_hyper_single_bounce(self):
        assert min_duration(BounceModifier(forced=True, hyper=True), **PHYSICS) == 0.0

    def test_more_bounces_take_longer(self):
        one = min_duration(BounceModifier(bounces=1), **PHYSICS)
        two = min_duration(BounceModifier(bounces=2), **PHYSICS)
        assert two == pytest.approx(2.1249, abs=1e-3)
        assert two > one


class TestScaleFactor:
    """Test suite for throw_flights and scale_factor_to_fit."""

    def test_throw_flights(self):
        flights = throw_flights(one_object_draft(BounceModifier()), **PHYSICS)
        assert [f.t_throw for f in flights] == pytest.approx([0.0, 0.6])
        assert [f.duration for f in flights] == pytest.approx([0.5, 0.3])
        assert flights[1].min_duration == 0.0

    def test_tosses_fit(self):
        assert scale_factor_to_fit(one_object_draft(TossModifier()), margin=1.01, **PHYSICS) == 1.0

    def test_short_bounce_needs_more_time(self):
        needed = min_duration(BounceModifier(), **PHYSICS) / 0.5
        factor = scale_factor_to_fit(one_object_draft(BounceModifier()), margin=1.0, **PHYSICS)
        assert factor == pytest.approx(needed)

    def test_margin_applies(self):
        draft = one_object_draft(BounceModifier())
        plain = scale_factor_to_fit(draft, margin=1.0, **PHYSICS)
        padded = scale_factor_to_fit(draft, margin=1.01, **PHYSICS)
        assert padded == pytest.approx(plain * 1.01)

    def test_scaled_draft_fits(self):
        draft = one_object_draft(BounceModifier())
        factor = scale_factor_to_fit(draft, margin=1.01, **PHYSICS)
        assert scale_factor_to_fit(draft.scaled(factor), margin=1.01, **PHYSICS) == 1.0
