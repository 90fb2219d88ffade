"""Multi-hand notation (MHN) pattern compiler.

Populate a ``JugglingMatrix`` (directly or with ``MatrixBuilder``) and run it
through ``MhnPipeline`` to get a timed ``EventList``.
"""

from jugglr.core.notation.mhn.builder import MatrixBuilder
from jugglr.core.notation.mhn.errors import MhnError, PatternError, PatternInternalError
from jugglr.core.notation.mhn.matrix import JugglingMatrix
from jugglr.core.notation.mhn.models import (
    BounceModifier,
    Coordinate,
    ForcedModifier,
    Hand,
    HoldModifier,
    Modifier,
    Symmetry,
    SymmetryType,
    Throw,
    TossModifier,
)
from jugglr.core.notation.mhn.pipeline import MhnPipeline
from jugglr.core.notation.mhn.providers import (
    BodyPathProvider,
    BodyPathTable,
    BodyPose,
    HandBeat,
    HandPathProvider,
    HandPathTable,
)
from jugglr.core.notation.mhn.synthesis import EventList, EventSynthesizer

__all__ = [
    "BodyPathProvider",
    "BodyPathTable",
    "BodyPose",
    "BounceModifier",
    "Coordinate",
    "EventList",
    "EventSynthesizer",
    "ForcedModifier",
    "Hand",
    "HandBeat",
    "HandPathProvider",
    "HandPathTable",
    "HoldModifier",
    "JugglingMatrix",
    "MatrixBuilder",
    "MhnError",
    "MhnPipeline",
    "Modifier",
    "PatternError",
    "PatternInternalError",
    "Symmetry",
    "SymmetryType",
    "Throw",
    "TossModifier",
]
