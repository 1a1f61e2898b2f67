from collections import deque
from collections.abc import Iterable, Iterator

from rheinsim.common import round_half_up
from rheinsim.errors import ConfigurationError


class RollingHistory:
    """Bounded FIFO of the most recent inflow values, oldest first."""

    def __init__(self, capacity: int, values: Iterable[int] = ()):
        self._check(capacity)
        self._values: deque[int] = deque(values, maxlen=capacity)

    @staticmethod
    def _check(capacity: int) -> None:
        if capacity < 1:
            raise ConfigurationError(f"history length must be at least 1, got {capacity}")

    @property
    def capacity(self) -> int:
        return self._values.maxlen

    def append(self, value: int) -> None:
        self._values.append(value)

    def resize(self, capacity: int) -> None:
        """Change the capacity, keeping the newest samples in arrival order."""
        self._check(capacity)
        if capacity != self.capacity:
            self._values = deque(self._values, maxlen=capacity)

    def max(self) -> int:
        if not self._values:
            raise ValueError("cannot compute max of empty history")
        return max(self._values)

    def mean(self) -> int:
        if not self._values:
            raise ValueError("cannot compute mean of empty history")
        return round_half_up(sum(self._values) / len(self._values))

    def to_list(self) -> list[int]:
        return list(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"RollingHistory(capacity={self.capacity}, values={self.to_list()})"
