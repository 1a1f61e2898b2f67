from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from rheinsim.errors import ConfigurationError

if TYPE_CHECKING:
    from rheinsim.node.segment import Segment


@runtime_checkable
class ThreatRule(Protocol):
    """Decides from a segment's recent inflows whether its dike is at risk.

    Overflow is always a threat; rules are consulted only when there is none.
    """

    def exceeds(self, segment: "Segment") -> bool: ...


@dataclass(frozen=True)
class PeakInflowThreat:
    """Threatened when the largest recent inflow, net of retention, reaches the safe capacity."""

    def exceeds(self, segment: "Segment") -> bool:
        return segment.history.max() - segment.retainable >= segment.safe_capacity


@dataclass(frozen=True)
class MovingAverageThreat:
    """Threatened when the rounded mean of recent inflows, net of retention, reaches the safe capacity."""

    def exceeds(self, segment: "Segment") -> bool:
        return segment.history.mean() - segment.retainable >= segment.safe_capacity


THREAT_RULES: dict[str, type[ThreatRule]] = {
    "peak": PeakInflowThreat,
    "moving_average": MovingAverageThreat,
}


def threat_rule(name: str) -> ThreatRule:
    try:
        return THREAT_RULES[name]()
    except KeyError:
        raise ConfigurationError(f"Unknown threat rule '{name}', expected one of {sorted(THREAT_RULES)}") from None
