"""PCG64 DXSM pseudo-random number generator."""

from __future__ import annotations

from dataclasses import dataclass

_MASK64 = (1 << 64) - 1
_MASK128 = (1 << 128) - 1
_MULTIPLIER = 15750249268501108917


@dataclass
class Pcg64:
    """A 128-bit linear congruential generator with DXSM output."""

    state: int = 0
    inc: int = 0

    def __post_init__(self) -> None:
        self.state &= _MASK128
        self.inc &= _MASK128

    @classmethod
    def seeded(cls, state: int = 0, inc: int = 0) -> Pcg64:
        """A generator from a seed, with an odd increment and one value drawn."""
        odd_inc = ((inc << 1) | 1) & _MASK128
        rng = cls(state + odd_inc, odd_inc)
        rng.pull()
        return rng

    def pull(self) -> int:
        """The next 64-bit output."""
        old = self.state
        self.state = (old * _MULTIPLIER + self.inc) & _MASK128
        hi = old >> 64
        lo = (old | 1) & _MASK64
        hi ^= hi >> 32
        hi = (hi * _MULTIPLIER) & _MASK64
        hi ^= hi >> 48
        return (hi * lo) & _MASK64