from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING

import pandas as pd

from .graph import FlowGraph

if TYPE_CHECKING:
    from rheinsim.agent import ActionOutcome


@dataclass(frozen=True, slots=True)
class SegmentSnapshot:
    tick: int
    segment: str
    inflow: int
    retained: int
    overflow: int
    discharge: int
    dike_capacity: int
    retainable: int
    threatened: bool
    owner: str | None
    owner_balance: int | None


@dataclass(frozen=True, slots=True)
class ActionRecord:
    tick: int
    steward: str
    segment: str
    action: str
    capacity: int
    cost: int
    built: bool
    error: str | None


@dataclass
class SimulationTrace:
    """Per-tick record of every segment's state and every attempted investment."""

    snapshots: list[SegmentSnapshot] = field(default_factory=list)
    actions: list[ActionRecord] = field(default_factory=list)

    def record(self, tick: int, graph: FlowGraph, outcomes: list["ActionOutcome"]) -> None:
        for segment in graph.segments:
            owner = graph.owner(segment)
            self.snapshots.append(
                SegmentSnapshot(
                    tick=tick,
                    segment=segment.name,
                    inflow=segment.inflow,
                    retained=segment.retained,
                    overflow=segment.overflow,
                    discharge=segment.discharge,
                    dike_capacity=segment.dike_capacity,
                    retainable=segment.retainable,
                    threatened=segment.is_threatened(),
                    owner=owner.name if owner is not None else None,
                    owner_balance=owner.balance if owner is not None else None,
                )
            )
        for outcome in outcomes:
            self.actions.append(
                ActionRecord(
                    tick=tick,
                    steward=outcome.steward.name,
                    segment=outcome.segment.name,
                    action=type(outcome.action).__name__,
                    capacity=outcome.action.capacity,
                    cost=outcome.action.cost,
                    built=outcome.built,
                    error=str(outcome.error) if outcome.error is not None else None,
                )
            )

    def for_segment(self, name: str) -> list[SegmentSnapshot]:
        return [s for s in self.snapshots if s.segment == name]

    @property
    def ticks(self) -> list[int]:
        return sorted({s.tick for s in self.snapshots})

    def to_frame(self) -> pd.DataFrame:
        columns = list(SegmentSnapshot.__dataclass_fields__)
        return pd.DataFrame([asdict(s) for s in self.snapshots], columns=columns)

    def actions_frame(self) -> pd.DataFrame:
        columns = list(ActionRecord.__dataclass_fields__)
        return pd.DataFrame([asdict(a) for a in self.actions], columns=columns)

    def __len__(self) -> int:
        return len(self.snapshots)
