"""Seedable pseudo-random generator shared by every stage of a generation run."""

from __future__ import annotations

import math
from typing import Optional, Tuple

MASK_32 = 0xFFFFFFFF
TWO_POW_32 = 4294967296


class UnseededGeneratorError(RuntimeError):
    """Raised when random numbers are requested before the generator was seeded."""


def _rotl32(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (32 - shift))) & MASK_32


class PRNG:
    """Four-word xorshift-style generator with reproducible output per seed.

    All state words are kept as unsigned 32-bit integers. The generator is
    owned by a single run and passed explicitly to the code that consumes it,
    so two runs with the same seed and the same call sequence always produce
    identical layouts.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._state: Optional[Tuple[int, int, int, int]] = None
        if seed is not None:
            self.seed(seed)

    def seed(self, seed: int) -> None:
        seed = int(seed)
        self._state = (
            seed & MASK_32,
            (seed * 31) & MASK_32,
            (seed * 37) & MASK_32,
            (seed * 41) & MASK_32,
        )

    @property
    def seeded(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> Tuple[int, int, int, int]:
        if self._state is None:
            raise UnseededGeneratorError("PRNG state requested before seeding")
        return self._state

    def next_uint32(self) -> int:
        """Advance the generator and return the raw 32-bit output."""
        if self._state is None:
            raise UnseededGeneratorError("PRNG used before seeding")
        a, b, c, d = self._state

        result = (_rotl32((a * 5) & MASK_32, 7) * 9) & MASK_32
        t = (b << 9) & MASK_32
        t2 = (c << 11) & MASK_32
        new_a = b ^ t
        new_b = c ^ t2
        new_c = d ^ (d >> 19)
        new_d = (t ^ t2 ^ ((new_a << 4) & MASK_32)) & MASK_32

        self._state = (new_a, new_b, new_c, new_d)
        return result

    def next(self) -> float:
        """Return a float in ``[0, 1)``."""
        return self.next_uint32() / TWO_POW_32

    def next_int(self, min_value: int, max_value: int) -> int:
        """Return an integer in ``[min_value, max_value]`` inclusive.

        Uses floor scaling of :meth:`next`, which is very slightly non-uniform
        at the range edges for large spans.
        """
        if max_value < min_value:
            raise ValueError(f"Empty integer range [{min_value}, {max_value}]")
        span = max_value - min_value + 1
        return int(math.floor(self.next() * span)) + min_value
