"""Permutations of paths and signed permutations of jugglers.

Elements are numbered from 1. A ``SignedPermutation`` maps juggler ``j`` to
``±k``; a negative image means the juggler's hands are swapped as well.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from jugglr.core.utils.math import lcm


@dataclass(frozen=True)
class Permutation:
    """Permutation of the elements 1..n.

    Example:
        >>> p = Permutation.from_mapping([2, 3, 1])
        >>> p.map(1), p.order, p.cycle_of(1)
        (2, 3, (1, 2, 3))
    """

    mapping: tuple[int, ...]

    def __post_init__(self) -> None:
        if sorted(self.mapping) != list(range(1, len(self.mapping) + 1)):
            raise ValueError(f"Not a permutation of 1..{len(self.mapping)}: {self.mapping}")

    @classmethod
    def from_mapping(cls, mapping: Sequence[int]) -> Permutation:
        return cls(tuple(int(m) for m in mapping))

    @classmethod
    def identity(cls, size: int) -> Permutation:
        return cls(tuple(range(1, size + 1)))

    @property
    def size(self) -> int:
        return len(self.mapping)

    @property
    def is_identity(self) -> bool:
        return all(m == i + 1 for i, m in enumerate(self.mapping))

    def map(self, elem: int, power: int = 1) -> int:
        """Apply the permutation ``power`` times (the inverse if negative)."""
        if power < 0:
            return self.inverse.map(elem, -power)
        for _ in range(power):
            elem = self.mapping[elem - 1]
        return elem

    def map_inverse(self, elem: int) -> int:
        """Return the element that maps onto ``elem``."""
        return self.mapping.index(elem) + 1

    @property
    def inverse(self) -> Permutation:
        inv = [0] * self.size
        for i, m in enumerate(self.mapping):
            inv[m - 1] = i + 1
        return Permutation(tuple(inv))

    def composed_with(self, other: Permutation) -> Permutation:
        """Return the permutation applying ``self`` first, then ``other``."""
        if other.size != self.size:
            raise ValueError("Cannot compose permutations of different sizes")
        return Permutation(tuple(other.map(m) for m in self.mapping))

    def power(self, n: int) -> Permutation:
        """Return ``self`` composed with itself ``n`` times (inverse if negative)."""
        base = self if n >= 0 else self.inverse
        result = Permutation.identity(self.size)
        for _ in range(abs(n)):
            result = result.composed_with(base)
        return result

    def order_of(self, elem: int) -> int:
        """Length of the cycle containing ``elem``."""
        return len(self.cycle_of(elem))

    def cycle_of(self, elem: int) -> tuple[int, ...]:
        cycle = [elem]
        current = self.mapping[elem - 1]
        while current != elem:
            cycle.append(current)
            current = self.mapping[current - 1]
        return tuple(cycle)

    @property
    def order(self) -> int:
        """Times the permutation must be applied to reach the identity."""
        result = 1
        for elem in range(1, self.size + 1):
            result = lcm(result, self.order_of(elem))
        return result

    def __str__(self) -> str:
        return ",".join(str(m) for m in self.mapping)


@dataclass(frozen=True)
class SignedPermutation:
    """Permutation of jugglers where a negative image also swaps hands.

    ``mapping[j - 1]`` is the image of juggler ``j``; its absolute values must
    form a permutation of 1..n.

    Example:
        >>> swap_hands = SignedPermutation.from_mapping([-1])
        >>> swap_hands.map(1), swap_hands.order
        (-1, 2)
    """

    mapping: tuple[int, ...]

    def __post_init__(self) -> None:
        if sorted(abs(m) for m in self.mapping) != list(range(1, len(self.mapping) + 1)):
            raise ValueError(
                f"Not a signed permutation of 1..{len(self.mapping)}: {self.mapping}"
            )

    @classmethod
    def from_mapping(cls, mapping: Sequence[int]) -> SignedPermutation:
        return cls(tuple(int(m) for m in mapping))

    @classmethod
    def identity(cls, size: int) -> SignedPermutation:
        return cls(tuple(range(1, size + 1)))

    @property
    def size(self) -> int:
        return len(self.mapping)

    def map(self, elem: int) -> int:
        """Image of a signed juggler number."""
        image = self.mapping[abs(elem) - 1]
        return image if elem > 0 else -image

    def image_of(self, juggler: int, hand: int) -> tuple[int, int]:
        """Return the (juggler, hand) that (juggler, hand) maps onto."""
        image = self.map(juggler)
        if image < 0:
            return -image, 1 - hand
        return image, hand

    def order_of(self, elem: int) -> int:
        order = 1
        current = self.map(elem)
        while current != elem:
            current = self.map(current)
            order += 1
        return order

    @property
    def order(self) -> int:
        result = 1
        for elem in range(1, self.size + 1):
            result = lcm(result, self.order_of(elem))
        return result

    def __str__(self) -> str:
        return ",".join(str(m) for m in self.mapping)


__all__ = [
    "Permutation",
    "SignedPermutation",
]
