"""Event synthesis: timed hand events from a resolved juggling matrix."""

from jugglr.core.notation.mhn.synthesis.flight import min_duration, scale_factor_to_fit
from jugglr.core.notation.mhn.synthesis.holds import fix_holds, select_primary_events
from jugglr.core.notation.mhn.synthesis.images import EventImage, EventImages, PatternImages
from jugglr.core.notation.mhn.synthesis.models import (
    BodyPosition,
    Event,
    EventList,
    PathSymmetry,
    PatternDraft,
    Transition,
    TransitionType,
)
from jugglr.core.notation.mhn.synthesis.positions import add_gap_events, locate_deferred_events
from jugglr.core.notation.mhn.synthesis.symmetries import build_path_symmetries
from jugglr.core.notation.mhn.synthesis.synthesizer import EventSynthesizer

__all__ = [
    "BodyPosition",
    "Event",
    "EventImage",
    "EventImages",
    "EventList",
    "EventSynthesizer",
    "PathSymmetry",
    "PatternDraft",
    "PatternImages",
    "Transition",
    "TransitionType",
    "add_gap_events",
    "build_path_symmetries",
    "fix_holds",
    "locate_deferred_events",
    "min_duration",
    "scale_factor_to_fit",
    "select_primary_events",
]
