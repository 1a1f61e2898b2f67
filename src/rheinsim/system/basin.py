import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Self

from rheinsim.agent import ActionOutcome, CostEffectivenessPolicy, PolicyEvaluator, Steward
from rheinsim.config import SimulationConfig
from rheinsim.node import BaseNode, Segment, Source, threat_rule
from rheinsim.retention import RetentionBasinCatalog
from rheinsim.rng import NumpyRandomSource, RandomSource

from .graph import FlowGraph
from .scheduler import EconomicScheduler, TopologyScheduler
from .trace import SimulationTrace

logger = logging.getLogger(__name__)

_SEGMENT_DEFAULTS = ("min_discharge", "max_dike_capacity", "safety_factor", "history_length")


@dataclass
class RiverBasin:
    """A complete run: flow network, stewards, schedulers and their shared collaborators.

    One tick is a full flow pass in topological order followed by the stewards'
    two-phase investment cycle.
    """

    config: SimulationConfig = field(default_factory=SimulationConfig)
    rng: RandomSource | None = None
    policy: PolicyEvaluator | None = None

    graph: FlowGraph = field(default_factory=FlowGraph, init=False, repr=False)
    catalog: RetentionBasinCatalog = field(init=False, repr=False)
    flow_scheduler: TopologyScheduler = field(init=False, repr=False)
    economic_scheduler: EconomicScheduler = field(init=False, repr=False)
    trace: SimulationTrace = field(default_factory=SimulationTrace, init=False, repr=False)
    tick_count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = NumpyRandomSource(self.config.seed)
        if self.policy is None:
            self.policy = CostEffectivenessPolicy(dike_costs=self.config.dike_costs)
        self.catalog = RetentionBasinCatalog(self.rng, self.config.retention_basins)
        self.flow_scheduler = TopologyScheduler(self.graph, self.catalog, self.config.steward_payment)
        self.economic_scheduler = EconomicScheduler(self.graph)

    # --- building ---

    def add_source(self, name: str, mean_discharge: int = 2000, stddev_discharge: int = 350) -> Source:
        source = Source(name, mean_discharge, stddev_discharge, rng=self.rng)
        self.graph.add_node(source)
        return source

    def add_segment(self, name: str, length: int, dike_capacity: int, retainable: int = 0, **overrides: Any) -> Segment:
        """Add a segment; settings not given fall back to the run configuration."""
        settings = {key: getattr(self.config, key) for key in _SEGMENT_DEFAULTS}
        settings["threat_rule"] = threat_rule(self.config.threat_rule)
        settings.update(overrides)
        segment = Segment(name, length, dike_capacity, retainable, **settings)
        self.graph.add_node(segment)
        return segment

    def add_steward(self, name: str, balance: int | None = None) -> Steward:
        if balance is None:
            balance = self.config.steward_start_balance
        steward = Steward(name, balance, graph=self.graph, policy=self.policy)
        self.graph.add_steward(steward)
        return steward

    def connect(self, upstream: BaseNode | str, downstream: BaseNode | str) -> None:
        self.graph.add_edge(self._resolve(upstream), self._resolve(downstream))

    def assign(self, steward: Steward | str, segment: Segment | str) -> None:
        if isinstance(steward, str):
            steward = self.graph.steward(steward)
        self.graph.assign(steward, self._resolve(segment))

    def _resolve(self, node: BaseNode | str) -> BaseNode:
        return self.graph.node(node) if isinstance(node, str) else node

    @property
    def order(self) -> list[BaseNode]:
        return self.flow_scheduler.order

    @property
    def segments(self) -> list[Segment]:
        return self.graph.segments

    @property
    def stewards(self) -> list[Steward]:
        return self.graph.stewards

    # --- running ---

    def tick(self) -> list[ActionOutcome]:
        t = self.tick_count
        self.flow_scheduler.tick(t)
        outcomes = self.economic_scheduler.step(t)
        self.trace.record(t, self.graph, outcomes)
        self.tick_count += 1
        return outcomes

    def simulate(self, ticks: int) -> SimulationTrace:
        if ticks < 0:
            raise ValueError("ticks must be non-negative")
        for _ in range(ticks):
            self.tick()
        logger.info("Simulated %d ticks over %d segments", ticks, len(self.graph.segments))
        return self.trace

    # --- loading ---

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        rng: RandomSource | None = None,
        policy: PolicyEvaluator | None = None,
    ) -> Self:
        """Build a basin from a network description.

        Keys: ``config`` (mapping for SimulationConfig), ``sources``,
        ``segments``, ``stewards`` (lists of keyword mappings with a ``name``),
        ``edges`` (``[upstream, downstream]`` name pairs) and ``ownership``
        (``[steward, segment]`` name pairs).
        """
        config = SimulationConfig.from_dict(data.get("config", {}))
        basin = cls(config=config, rng=rng, policy=policy)
        for spec in data.get("sources", []):
            basin.add_source(**spec)
        for spec in data.get("segments", []):
            basin.add_segment(**spec)
        for spec in data.get("stewards", []):
            basin.add_steward(**spec)
        for upstream, downstream in data.get("edges", []):
            basin.connect(upstream, downstream)
        for steward, segment in data.get("ownership", []):
            basin.assign(steward, segment)
        return basin

    @classmethod
    def from_json(
        cls,
        source: str | Path,
        rng: RandomSource | None = None,
        policy: PolicyEvaluator | None = None,
    ) -> Self:
        """Build a basin from a JSON string or a path to a JSON file."""
        if isinstance(source, Path) or not source.lstrip().startswith("{"):
            text = Path(source).read_text()
        else:
            text = source
        return cls.from_dict(json.loads(text), rng=rng, policy=policy)
