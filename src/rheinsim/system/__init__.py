from .basin import RiverBasin
from .graph import FlowGraph, GraphChange, GraphChanged
from .scheduler import EconomicScheduler, TopologyScheduler
from .trace import ActionRecord, SegmentSnapshot, SimulationTrace

__all__ = [
    "ActionRecord",
    "EconomicScheduler",
    "FlowGraph",
    "GraphChange",
    "GraphChanged",
    "RiverBasin",
    "SegmentSnapshot",
    "SimulationTrace",
    "TopologyScheduler",
]
