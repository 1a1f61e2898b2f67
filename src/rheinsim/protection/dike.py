from dataclasses import dataclass, field

from rheinsim.config import DikeCosts
from rheinsim.errors import CapacityExceededError, ConfigurationError

from .base import FloodProtection


@dataclass(eq=False)
class RaiseDike(FloodProtection):
    """Raise the dike of ``segment`` by ``capacity``.

    Costs ``length * 2 * (base_cost_per_km + capacity * cost_per_cubic_meter)``,
    both banks, with the per-kilometre price truncated to whole currency units.
    """

    costs: DikeCosts = field(default_factory=DikeCosts)

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ConfigurationError(f"capacity must be positive, got {self.capacity}")

    @property
    def cost_per_km(self) -> int:
        return int(self.costs.base_cost_per_km + self.capacity * self.costs.cost_per_cubic_meter)

    @property
    def cost(self) -> int:
        return self.segment.length * 2 * self.cost_per_km

    def _protected_length(self, within) -> int:
        # A higher dike protects the segment itself outright, threatened or not.
        return self.segment.length

    def _apply(self) -> None:
        requested = self.segment.dike_capacity + self.capacity
        if requested > self.segment.max_dike_capacity:
            raise CapacityExceededError(self.segment.name, requested, self.segment.max_dike_capacity)
        self.payer.withdraw_money(self.cost)
        self.segment.add_dike_capacity(self.capacity)
