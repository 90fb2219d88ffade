"""Path permutations induced by the declared symmetries."""

from __future__ import annotations

import logging

from jugglr.core.notation.mhn.errors import PatternError
from jugglr.core.notation.mhn.matrix import JugglingMatrix
from jugglr.core.notation.mhn.models import Symmetry, SymmetryType
from jugglr.core.notation.mhn.synthesis.models import PathSymmetry

logger = logging.getLogger(__name__)


def build_path_symmetries(matrix: JugglingMatrix, bps: float) -> list[PathSymmetry]:
    """Derive and validate the path permutation of every declared symmetry.

    Each in-window throw carrying an object is compared with its image under
    the symmetry; the image's path number is where the symmetry sends the
    throw's path.

    Args:
        matrix: Matrix with paths assigned
        bps: Tempo used to turn beat delays into seconds

    Returns:
        One ``PathSymmetry`` per declared symmetry, in declaration order

    Raises:
        PatternError: If an image is empty or carries no path, two throws
            disagree on where a path goes, the mapping is not a permutation,
            or there is not exactly one DELAY symmetry
    """
    delays = [s for s in matrix.symmetries if s.type == SymmetryType.DELAY]
    if len(delays) != 1:
        raise PatternError(reason=f"need exactly one delay symmetry, found {len(delays)}")

    result = []
    for symmetry in matrix.symmetries:
        path_map = _path_map(matrix, symmetry)
        result.append(
            PathSymmetry(
                type=symmetry.type,
                juggler_perm=symmetry.juggler_perm,
                path_perm=path_map,
                delay=symmetry.delay / bps,
            )
        )
        logger.debug(f"{symmetry.type.value} symmetry path map: {path_map}")
    return result


def _path_map(matrix: JugglingMatrix, symmetry: Symmetry) -> tuple[int, ...]:
    perm = symmetry.permutation
    mapping: dict[int, int] = {}

    for i in range(matrix.indexes - symmetry.delay):
        for j in range(1, matrix.number_of_jugglers + 1):
            for h in (0, 1):
                for slot in range(matrix.max_occupancy):
                    throw = matrix.cell(j, h, i, slot)
                    if throw is None or throw.path_num == -1:
                        continue
                    image_juggler, image_hand = perm.image_of(j, h)
                    image = matrix.cell(image_juggler, image_hand, i + symmetry.delay, slot)
                    if image is None or image.path_num == -1:
                        raise PatternError(
                            reason="bad pattern paths",
                            beat=i + 1,
                            juggler=j,
                            hand=h,
                        )
                    known = mapping.get(throw.path_num)
                    if known is None:
                        mapping[throw.path_num] = image.path_num
                    elif known != image.path_num:
                        raise PatternError(
                            reason=(
                                f"{symmetry.type.value} symmetry sends path {throw.path_num} "
                                f"to both {known} and {image.path_num}"
                            ),
                            beat=i + 1,
                            juggler=j,
                            hand=h,
                        )

    paths = range(1, matrix.number_of_paths + 1)
    result = tuple(mapping.get(p, 0) for p in paths)
    if sorted(result) != list(paths):
        raise PatternError(
            reason=f"{symmetry.type.value} symmetry does not permute the paths: {result}"
        )
    return result


__all__ = [
    "build_path_symmetries",
]
