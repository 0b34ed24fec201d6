"""Deterministic PRNG used by every generation phase.

A small linear-congruential generator is used instead of ``random.Random`` so
that a given seed yields the same map across Python versions and platforms.
"""
from __future__ import annotations

from typing import List, Sequence, TypeVar

T = TypeVar("T")

_MULTIPLIER = 9301
_INCREMENT = 49297
_MODULUS = 233280


class SeededRandom:
    """Linear-congruential stream seeded from an integer."""

    __slots__ = ("_state",)

    def __init__(self, seed: int):
        self._state = int(seed)

    def random(self) -> float:
        """Return the next float in [0, 1)."""
        self._state = (self._state * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self._state / _MODULUS

    def rand_int(self, maximum: int) -> int:
        """Return an integer in [0, maximum); 0 when maximum <= 0."""
        if maximum <= 0:
            # Still advance the stream so call counts stay aligned.
            self.random()
            return 0
        return int(self.random() * maximum)


def shuffle(items: Sequence[T], rng: SeededRandom) -> List[T]:
    """Fisher-Yates shuffle returning a new list; ``items`` is left untouched."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.rand_int(i + 1)
        out[i], out[j] = out[j], out[i]
    return out


__all__ = ["SeededRandom", "shuffle"]
