from dataclasses import dataclass

from rheinsim.common import round_half_up
from rheinsim.config import RetentionBasinParams
from rheinsim.errors import ConfigurationError
from rheinsim.rng import RandomSource


@dataclass(frozen=True, eq=False)
class RetentionBasin:
    """An offered basin: volume it can divert and price per unit of that volume."""

    capacity: int
    cost_per_unit: float

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ConfigurationError(f"capacity must be positive, got {self.capacity}")
        if self.cost_per_unit <= 0:
            raise ConfigurationError(f"cost_per_unit must be positive, got {self.cost_per_unit}")

    @property
    def cost(self) -> int:
        return round_half_up(self.capacity * self.cost_per_unit)


class RetentionBasinCatalog:
    """Draws occasional retention-basin offers.

    With probability ``params.probability`` an offer is made. Capacity and unit
    cost come from a single standard-normal draw so larger basins are also
    dearer per unit. Draws that would give a non-positive basin make no offer.
    """

    def __init__(self, rng: RandomSource, params: RetentionBasinParams | None = None):
        self.rng = rng
        self.params = params if params is not None else RetentionBasinParams()

    def offer(self) -> RetentionBasin | None:
        if not self.rng.uniform() < self.params.probability:
            return None

        r = self.rng.normal()
        cost_per_unit = self.params.mean_unit_cost + r * self.params.stddev_unit_cost
        capacity = int(self.params.mean_capacity + r * self.params.stddev_capacity)
        if capacity <= 0 or cost_per_unit <= 0:
            return None
        return RetentionBasin(capacity=capacity, cost_per_unit=cost_per_unit)
