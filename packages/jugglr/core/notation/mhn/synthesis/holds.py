"""Holding-transition repair and primary-event selection."""

from __future__ import annotations

import logging

from jugglr.core.notation.mhn.errors import PatternInternalError
from jugglr.core.notation.mhn.synthesis.images import EventImage, PatternImages
from jugglr.core.notation.mhn.synthesis.models import (
    PatternDraft,
    Transition,
    TransitionType,
)
from jugglr.core.notation.mhn.synthesis.positions import describe_draft

logger = logging.getLogger(__name__)

# Holding location of a path that is in flight
AIR = (0, -1)


def fix_holds(draft: PatternDraft) -> int:
    """Add or remove HOLDING transitions until they match where objects are.

    Images are scanned forward from t=0 over twice the time it takes the
    loop permutation to return every path home. Each path's location is
    tracked as unknown, in the air, or in a (juggler, hand). A hand holding a
    path gets a HOLDING transition at every event until it throws; a HOLDING
    transition in a hand that does not hold the path is removed. Edits are
    made on the primary event and the scan restarts after each one.

    Paths seen only through holds are placed in a final "finishing" pass
    where holds alone establish the location.

    Args:
        draft: Pattern being synthesized; modified in place

    Returns:
        Number of edits made

    Raises:
        PatternInternalError: If transitions contradict each other or the
            scan stops converging
    """
    holds_only = [False] * draft.number_of_paths
    seen: set[int] = set()
    seen_finishing: set[int] = set()
    finishing = False
    edits = 0

    while True:
        key = hash(tuple(draft.events))
        if finishing:
            if key in seen_finishing:
                raise _internal_error(draft, "hold repair repeats a state while finishing")
            seen_finishing.add(key)
        else:
            if key in seen:
                raise _internal_error(draft, "hold repair repeats a state")
            seen.add(key)

        outcome = _scan(draft, holds_only)
        if outcome is None:
            edits += 1
            continue
        if any(outcome):
            holds_only = outcome
            finishing = True
            continue
        break

    if edits:
        logger.debug(f"Hold repair made {edits} edits")
    return edits


def _scan(draft: PatternDraft, holds_only: list[bool]) -> list[bool] | None:
    """One forward pass.

    Returns None after editing a primary (the caller rescans), otherwise the
    holds-only flag of every path for the end of the window.
    """
    images = PatternImages.from_pattern(draft)
    window = images.loop_perm.order * images.loop_duration * 2
    location: list[tuple[int, int] | None] = [None] * draft.number_of_paths

    for image in images.between(0.0, window, include_end=True):
        event = image.event
        here = (event.juggler, int(event.hand))
        to_hold = [p for p in range(1, draft.number_of_paths + 1) if location[p - 1] == here]

        for tr in event.transitions:
            if tr.path in to_hold:
                to_hold.remove(tr.path)
            loc = location[tr.path - 1]

            if tr.type == TransitionType.CATCH:
                if loc is not None and loc != AIR:
                    raise _internal_error(draft, f"path {tr.path} caught while held", image)
                location[tr.path - 1] = here
            elif tr.type == TransitionType.THROW:
                if loc is not None and loc != here:
                    raise _internal_error(
                        draft, f"path {tr.path} thrown from a hand not holding it", image
                    )
                location[tr.path - 1] = AIR
            else:
                if loc is not None and loc != here:
                    primary_path = image.path_perm.map_inverse(tr.path)
                    _edit_primary(draft, image, primary_path, remove=True)
                    return None
                if holds_only[tr.path - 1]:
                    location[tr.path - 1] = here

        for path in to_hold:
            primary_path = image.path_perm.map_inverse(path)
            existing = draft.events[image.primary_index].path_transition(primary_path)
            if existing is not None:
                if existing.type == TransitionType.HOLDING:
                    continue
                raise _internal_error(draft, f"path {primary_path} held and moving at once", image)
            _edit_primary(draft, image, primary_path, remove=False)
            return None

    return [loc is None for loc in location]


def _edit_primary(draft: PatternDraft, image: EventImage, path: int, *, remove: bool) -> None:
    primary = draft.events[image.primary_index]
    if remove:
        existing = primary.path_transition(path)
        if existing is None or existing.type != TransitionType.HOLDING:
            raise _internal_error(draft, f"stray hold of path {path} has no primary hold", image)
        draft.events[image.primary_index] = primary.without_transition(existing)
    else:
        draft.events[image.primary_index] = primary.with_transition(
            Transition(type=TransitionType.HOLDING, path=path)
        )


def _internal_error(
    draft: PatternDraft, reason: str, image: EventImage | None = None
) -> PatternInternalError:
    if image is None:
        return PatternInternalError(reason=reason, state=describe_draft(draft))
    return PatternInternalError(
        reason=f"{reason} at t={image.event.t:.4f}",
        juggler=image.event.juggler,
        hand=image.event.hand,
        state=describe_draft(draft),
    )


def select_primary_events(draft: PatternDraft) -> None:
    """Replace each primary by its earliest image inside the first loop.

    Raises:
        PatternInternalError: If some primary has no image in ``[0, L)``
    """
    images = PatternImages.from_pattern(draft)
    first_loop = images.between(0.0, images.loop_duration)
    chosen: dict[int, EventImage] = {}
    for image in first_loop:
        chosen.setdefault(image.primary_index, image)

    for index in range(len(draft.events)):
        image = chosen.get(index)
        if image is None:
            raise _internal_error(draft, f"event {index} has no image in the first loop")
        draft.events[index] = image.event


__all__ = [
    "fix_holds",
    "select_primary_events",
]
