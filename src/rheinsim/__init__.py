"""
rheinsim

This package provides an agent-based simulation of a river basin's flood-protection economy.

Water enters the network at sources and travels downstream through river segments,
each of which retains, releases or overflows it according to its dikes and retention
basins. Stewards own segments, receive a stipend for every segment each tick and
invest in raising dikes or building retention basins when their stretch of river
is at risk.

Classes:
    RiverBasin: The main class for building and running a simulation.
    FlowGraph: The river network and the steward-segment ownership association.
    Segment: A river reach with dike, retention and threat state.
    Source: A headwater whose discharge is drawn from a normal distribution.
    Steward: An economic agent that owns segments and finances flood protection.
    RaiseDike, AddRetentionBasin: Priced flood-protection investments.
    TopologyScheduler: Feeds segments upstream to downstream once per tick.
    EconomicScheduler: Runs the stewards' two-phase investment cycle once per tick.
"""

from .agent import ActionOutcome, CostEffectivenessPolicy, NullPolicy, PolicyEvaluator, Steward
from .common import FieldChanged, Observable
from .config import DikeCosts, RetentionBasinParams, SimulationConfig
from .errors import (
    CapacityExceededError,
    ConfigurationError,
    CycleError,
    EconomicError,
    InsufficientFundsError,
    MultipleOutflowError,
    MultipleOwnerError,
    StructuralError,
    TopologyError,
)
from .node import BaseNode, MovingAverageThreat, PeakInflowThreat, RollingHistory, Segment, Source
from .protection import AddRetentionBasin, FloodProtection, ProtectionState, RaiseDike
from .retention import RetentionBasin, RetentionBasinCatalog
from .rng import NumpyRandomSource, RandomSource
from .system import EconomicScheduler, FlowGraph, RiverBasin, SimulationTrace, TopologyScheduler

__all__ = [
    # Core
    "RiverBasin",
    "FlowGraph",
    "TopologyScheduler",
    "EconomicScheduler",
    "SimulationTrace",
    "SimulationConfig",
    "DikeCosts",
    "RetentionBasinParams",
    # Nodes
    "BaseNode",
    "Segment",
    "Source",
    "RollingHistory",
    "PeakInflowThreat",
    "MovingAverageThreat",
    # Economy
    "Steward",
    "ActionOutcome",
    "PolicyEvaluator",
    "CostEffectivenessPolicy",
    "NullPolicy",
    "FloodProtection",
    "ProtectionState",
    "RaiseDike",
    "AddRetentionBasin",
    "RetentionBasin",
    "RetentionBasinCatalog",
    # Randomness
    "RandomSource",
    "NumpyRandomSource",
    # Observation
    "FieldChanged",
    "Observable",
    # Errors
    "StructuralError",
    "CycleError",
    "TopologyError",
    "MultipleOutflowError",
    "MultipleOwnerError",
    "EconomicError",
    "InsufficientFundsError",
    "CapacityExceededError",
    "ConfigurationError",
]

# Package version
__version__ = "0.1.0"
