from collections.abc import Iterable
from dataclasses import dataclass, field

from rheinsim.errors import ConfigurationError
from rheinsim.rng import RandomSource

from .base import BaseNode
from .protocols import Discharges


@dataclass(eq=False)
class Source(BaseNode):
    """Headwater with no inflow; discharge is drawn from Normal(mean, stddev) each tick."""

    mean_discharge: int = 2000
    stddev_discharge: int = 350
    rng: RandomSource = field(kw_only=True, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.stddev_discharge < 0:
            raise ConfigurationError(f"stddev_discharge cannot be negative, got {self.stddev_discharge}")

    def consume(self, upstream: Iterable[Discharges]) -> None:
        self.discharge = int(self.rng.normal(self.mean_discharge, self.stddev_discharge))

    def __str__(self) -> str:
        return f"{self.name} {self.discharge}"
