"""A small deterministic pseudo-random generator (Park-Miller)."""

from __future__ import annotations

_M = 2147483647  # 2**31 - 1
_A = 16807


class Random:
    """Lehmer-style generator producing values in [1, 2**31 - 2]."""

    def __init__(self, seed: int) -> None:
        value = seed & 0x7FFFFFFF
        if value in (0, _M):
            value = 1
        self._seed = value

    def next(self) -> int:
        """Advance the generator and return the new value."""
        product = self._seed * _A
        value = (product >> 31) + (product & _M)
        if value > _M:
            value -= _M
        self._seed = value
        return value

    def uniform(self, n: int) -> int:
        """Return a value uniformly distributed in [0, n - 1]."""
        if n <= 0:
            raise ValueError("n must be positive")
        return self.next() % n

    def one_in(self, n: int) -> bool:
        """Return True roughly once in every ``n`` calls."""
        if n <= 0:
            raise ValueError("n must be positive")
        return self.next() % n == 0

    def skewed(self, max_log: int) -> int:
        """Return a value in [0, 2**max_log - 1] biased towards small numbers."""
        if max_log < 0:
            raise ValueError("max_log must not be negative")
        return self.uniform(1 << self.uniform(max_log + 1))