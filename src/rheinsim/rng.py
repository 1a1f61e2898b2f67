from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class RandomSource(Protocol):
    def uniform(self) -> float: ...

    def uniform_int(self, lo: int, hi: int) -> int: ...

    def normal(self, mean: float = 0.0, stddev: float = 1.0) -> float: ...


class NumpyRandomSource:
    """Seeded random source. The same seed replays the same sequence of draws."""

    def __init__(self, seed: int | None = 0):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self) -> float:
        return float(self._rng.random())

    def uniform_int(self, lo: int, hi: int) -> int:
        if hi < lo:
            raise ValueError(f"empty range [{lo}, {hi}]")
        return int(self._rng.integers(lo, hi, endpoint=True))

    def normal(self, mean: float = 0.0, stddev: float = 1.0) -> float:
        return float(self._rng.normal()) * stddev + mean
