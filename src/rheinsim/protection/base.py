import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from rheinsim.node import Segment

if TYPE_CHECKING:
    from rheinsim.agent import Steward
    from rheinsim.system import FlowGraph
    from rheinsim.system.graph import SegmentFilter


class ProtectionState(Enum):
    PROPOSED = auto()
    EXECUTED = auto()


@dataclass(eq=False)
class FloodProtection:
    """A priced investment on one segment, paid for by one steward.

    Variants declare ``capacity`` and ``cost`` and implement ``_apply``. The
    effectiveness metrics never mutate anything; a policy uses them to rank
    candidates. ``execute`` may run once.
    """

    segment: Segment
    payer: "Steward"
    capacity: int
    graph: "FlowGraph" = field(kw_only=True, repr=False)
    state: ProtectionState = field(default=ProtectionState.PROPOSED, init=False)

    @property
    def cost(self) -> int:
        raise NotImplementedError("Subclasses must implement cost")

    @property
    def cost_effectiveness(self) -> float:
        """Capacity gained per unit of cost."""
        cost = self.cost
        if cost == 0:
            return math.inf
        return self.capacity / cost

    @property
    def subbasin_cost_effectiveness(self) -> float:
        """Cost-effectiveness weighted over the downstream run the payer owns."""
        return self._weighted(self._owned_by_payer)

    @property
    def whole_basin_cost_effectiveness(self) -> float:
        """Cost-effectiveness weighted over the whole downstream run."""
        return self._weighted(None)

    def _owned_by_payer(self, segment: Segment) -> bool:
        return self.graph.owner(segment) is self.payer

    def _weighted(self, within: "SegmentFilter | None") -> float:
        total = self.graph.downstream_length(self.segment, within)
        protected = self._protected_length(within)
        if total == 0 or protected == 0:
            return 0.0
        return self.cost_effectiveness * protected / total

    def _protected_length(self, within: "SegmentFilter | None") -> int:
        raise NotImplementedError("Subclasses must implement _protected_length()")

    def execute(self) -> None:
        if self.state is ProtectionState.EXECUTED:
            raise RuntimeError(f"{self} has already been executed")
        self._apply()
        self.state = ProtectionState.EXECUTED
        self.segment.last_built = self

    def _apply(self) -> None:
        raise NotImplementedError("Subclasses must implement _apply()")

    def __str__(self) -> str:
        return (
            f"{type(self).__name__}[capacity={self.capacity},cost={self.cost},"
            f"segment={self.segment.name}, payer={self.payer.name}]"
        )
