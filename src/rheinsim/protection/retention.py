from dataclasses import dataclass, field

from rheinsim.retention import RetentionBasin

from .base import FloodProtection


@dataclass(eq=False)
class AddRetentionBasin(FloodProtection):
    """Build one of the retention basins currently offered on ``segment``."""

    capacity: int = field(init=False)
    basin: RetentionBasin

    def __post_init__(self) -> None:
        self.capacity = self.basin.capacity

    @property
    def cost(self) -> int:
        return self.basin.cost

    def _protected_length(self, within) -> int:
        return self.graph.downstream_length(
            self.segment,
            lambda s: (within is None or within(s)) and s.is_threatened(),
        )

    def _apply(self) -> None:
        self.payer.withdraw_money(self.cost)
        self.segment.add_retention_basin(self.basin)
        self.segment.remove_retention_offer(self.basin)
