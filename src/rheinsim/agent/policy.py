from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from rheinsim.config import DikeCosts
from rheinsim.errors import ConfigurationError
from rheinsim.node import Segment
from rheinsim.protection import AddRetentionBasin, FloodProtection, RaiseDike

if TYPE_CHECKING:
    from .steward import Steward

RANKING_METRICS = {
    "local": "cost_effectiveness",
    "subbasin": "subbasin_cost_effectiveness",
    "whole_basin": "whole_basin_cost_effectiveness",
}


@runtime_checkable
class PolicyEvaluator(Protocol):
    """Decision boundary used by stewards.

    ``generate`` proposes candidates for a steward's segments, keyed by the
    segment they target. ``select`` picks the one candidate to build on a
    segment, or None to build nothing.
    """

    def generate(self, steward: "Steward", segments: Sequence[Segment]) -> dict[Segment, list[FloodProtection]]: ...

    def select(self, segment: Segment, candidates: Sequence[FloodProtection]) -> FloodProtection | None: ...


def first_candidate(candidates: Sequence[FloodProtection]) -> FloodProtection | None:
    return candidates[0] if candidates else None


@dataclass(frozen=True)
class NullPolicy:
    """Never proposes anything."""

    def generate(self, steward: "Steward", segments: Sequence[Segment]) -> dict[Segment, list[FloodProtection]]:
        return {}

    def select(self, segment: Segment, candidates: Sequence[FloodProtection]) -> FloodProtection | None:
        return first_candidate(candidates)


@dataclass(frozen=True)
class CostEffectivenessPolicy:
    """Hand-written rules proposing dike raises and retention basins where the sub-basin is at risk.

    A segment gets candidates when it, or a segment downstream owned by the same
    steward, is threatened. Candidates the steward cannot afford, and dike raises
    beyond the segment's maximum capacity, are never proposed. Each segment's
    candidates are ranked by the configured metric, best first, cheaper first on
    ties; ``select`` takes the first.
    """

    dike_costs: DikeCosts = field(default_factory=DikeCosts)
    dike_increments: tuple[int, ...] = (500, 1000)
    ranking: str = "subbasin"

    def __post_init__(self) -> None:
        if self.ranking not in RANKING_METRICS:
            raise ConfigurationError(f"ranking must be one of {sorted(RANKING_METRICS)}, got '{self.ranking}'")
        if any(step <= 0 for step in self.dike_increments):
            raise ConfigurationError(f"dike_increments must be positive, got {self.dike_increments}")

    def generate(self, steward: "Steward", segments: Sequence[Segment]) -> dict[Segment, list[FloodProtection]]:
        proposals: dict[Segment, list[FloodProtection]] = {}
        for segment in segments:
            if not self.at_risk(steward, segment):
                continue
            candidates = [
                c for c in self._dike_raises(steward, segment) + self._retention_basins(steward, segment)
                if c.cost <= steward.balance
            ]
            if candidates:
                proposals[segment] = self.rank(candidates)
        return proposals

    def select(self, segment: Segment, candidates: Sequence[FloodProtection]) -> FloodProtection | None:
        return first_candidate(candidates)

    def at_risk(self, steward: "Steward", segment: Segment) -> bool:
        return any(
            s.is_threatened() for s in steward.graph.downstream_segments(segment) if steward.graph.owner(s) is steward
        )

    def rank(self, candidates: Sequence[FloodProtection]) -> list[FloodProtection]:
        metric = RANKING_METRICS[self.ranking]
        return sorted(candidates, key=lambda c: (-getattr(c, metric), c.cost))

    def _dike_raises(self, steward: "Steward", segment: Segment) -> list[FloodProtection]:
        return [
            RaiseDike(segment, steward, step, graph=steward.graph, costs=self.dike_costs)
            for step in self.dike_increments
            if segment.dike_capacity + step <= segment.max_dike_capacity
        ]

    def _retention_basins(self, steward: "Steward", segment: Segment) -> list[FloodProtection]:
        if segment.natural_dike:
            return []
        return [
            AddRetentionBasin(segment, steward, basin, graph=steward.graph)
            for basin in segment.possible_retention_basins
        ]
