from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from rheinsim.agent import PolicyEvaluator
from rheinsim.config import SimulationConfig
from rheinsim.node import BaseNode, Discharges, Segment, Source
from rheinsim.protection import FloodProtection
from rheinsim.rng import RandomSource
from rheinsim.system import RiverBasin

# --- Test doubles ---


class ScriptedRandomSource:
    """RandomSource replaying fixed draws, then falling back to defaults.

    ``normals`` are standard-normal draws; ``normal(mean, stddev)`` scales them
    the same way NumpyRandomSource does. The default uniform is high enough that
    probability-gated events (such as retention offers) do not fire.
    """

    def __init__(
        self,
        uniforms: Iterable[float] = (),
        normals: Iterable[float] = (),
        ints: Iterable[int] = (),
        *,
        uniform_default: float = 0.999,
        normal_default: float = 0.0,
    ):
        self.uniforms = list(uniforms)
        self.normals = list(normals)
        self.ints = list(ints)
        self.uniform_default = uniform_default
        self.normal_default = normal_default
        self.calls: list[str] = []

    def uniform(self) -> float:
        self.calls.append("uniform")
        return self.uniforms.pop(0) if self.uniforms else self.uniform_default

    def uniform_int(self, lo: int, hi: int) -> int:
        self.calls.append("uniform_int")
        return self.ints.pop(0) if self.ints else lo

    def normal(self, mean: float = 0.0, stddev: float = 1.0) -> float:
        self.calls.append("normal")
        raw = self.normals.pop(0) if self.normals else self.normal_default
        return raw * stddev + mean


@dataclass(eq=False)
class FixedInflow(BaseNode):
    """Flow node releasing the same amount every tick."""

    amount: int = 0

    def __post_init__(self) -> None:
        super().__post_init__()
        self.discharge = self.amount

    def consume(self, upstream: Iterable[Discharges]) -> None:
        self.discharge = self.amount


@dataclass
class ScriptedPolicy:
    """Policy returning prepared candidates and recording every call."""

    proposals: dict[Segment, list[FloodProtection]] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)

    def generate(self, steward, segments: Sequence[Segment]) -> dict[Segment, list[FloodProtection]]:
        self.calls.append(("generate", steward.name))
        return {s: list(c) for s, c in self.proposals.items() if s in segments}

    def select(self, segment: Segment, candidates: Sequence[FloodProtection]) -> FloodProtection | None:
        self.calls.append(("select", segment.name))
        return candidates[0] if candidates else None


def make_segment(name: str = "segment", length: int = 100, dike_capacity: int = 1000, **kwargs) -> Segment:
    return Segment(name, length, dike_capacity, **kwargs)


def make_source(name: str = "source", mean: int = 2000, stddev: int = 0, rng: RandomSource | None = None) -> Source:
    return Source(name, mean, stddev, rng=rng if rng is not None else ScriptedRandomSource())


def make_inflow(name: str = "inflow", amount: int = 1000) -> FixedInflow:
    return FixedInflow(name, amount=amount)


# --- Scenarios ---

# --- Rhine scenario: (name, mean discharge, stddev) ---

RHINE_SOURCES = (
    ("Rhine (Basel)", 3817, 636),
    ("Neckar", 2017, 336),
    ("Main", 1507, 251),
    ("Lahn/Nahe", 1380, 230),
    ("Mosel", 3127, 521),
    ("Lippe/Ruhr/Sieg", 1732, 289),
)

# (name, length, dike capacity, retainable, overrides)
RHINE_SEGMENTS = (
    ("Oberrhein (Basel)", 256, 5000, 756, {}),
    ("Oberrhein (Neckar)", 50, 6000, 0, {}),
    ("Oberrhein (Main)", 66, 7200, 0, {}),
    ("Unterrhein", 54, 8000, 0, {"max_dike_capacity": 8000, "natural_dike": True}),
    ("Unterrhein (Lahn/Mosel)", 110, 10000, 0, {"max_dike_capacity": 10000, "natural_dike": True}),
    ("Unterrhein (Sieg/Ruhr/Lippe)", 142, 13300, 0, {}),
    ("Rijn", 148, 15000, 0, {}),
)

RHINE_EDGES = (
    ("Oberrhein (Basel)", "Oberrhein (Neckar)"),
    ("Oberrhein (Neckar)", "Oberrhein (Main)"),
    ("Oberrhein (Main)", "Unterrhein"),
    ("Unterrhein", "Unterrhein (Lahn/Mosel)"),
    ("Unterrhein (Lahn/Mosel)", "Unterrhein (Sieg/Ruhr/Lippe)"),
    ("Unterrhein (Sieg/Ruhr/Lippe)", "Rijn"),
    ("Rhine (Basel)", "Oberrhein (Basel)"),
    ("Neckar", "Oberrhein (Neckar)"),
    ("Main", "Oberrhein (Main)"),
    ("Lahn/Nahe", "Unterrhein (Lahn/Mosel)"),
    ("Mosel", "Unterrhein (Lahn/Mosel)"),
    ("Lippe/Ruhr/Sieg", "Unterrhein (Sieg/Ruhr/Lippe)"),
)

RHINE_STEWARDS = {
    "upper_rhine": ("Oberrhein (Basel)", "Oberrhein (Neckar)", "Oberrhein (Main)"),
    "lower_rhine": ("Unterrhein", "Unterrhein (Lahn/Mosel)", "Unterrhein (Sieg/Ruhr/Lippe)"),
    "rijn": ("Rijn",),
}


def make_rhine_basin(
    config: SimulationConfig | None = None,
    rng: RandomSource | None = None,
    policy: PolicyEvaluator | None = None,
) -> RiverBasin:
    """The Rhine from Basel to the Dutch border: six sources, seven segments, three stewards."""
    basin = RiverBasin(config=config or SimulationConfig(), rng=rng, policy=policy)
    for name, mean, stddev in RHINE_SOURCES:
        basin.add_source(name, mean, stddev)
    for name, length, dike_capacity, retainable, overrides in RHINE_SEGMENTS:
        basin.add_segment(name, length, dike_capacity, retainable, **overrides)
    for upstream, downstream in RHINE_EDGES:
        basin.connect(upstream, downstream)
    for steward, segments in RHINE_STEWARDS.items():
        basin.add_steward(steward)
        for segment in segments:
            basin.assign(steward, segment)
    return basin


def make_random_basin(
    rivers: int = 5,
    segments: int = 5,
    config: SimulationConfig | None = None,
    rng: RandomSource | None = None,
    policy: PolicyEvaluator | None = None,
) -> RiverBasin:
    """Independent rivers of chained segments, each fed by its own source and owned by its own steward.

    Discharge statistics, lengths and dike capacities are drawn from the basin's
    random source, and each segment starts with up to three retention offers.
    """
    if rivers < 1 or segments < 1:
        raise ValueError("rivers and segments must be at least 1")
    basin = RiverBasin(config=config or SimulationConfig(), rng=rng, policy=policy)
    draw = basin.rng

    for i in range(rivers):
        last = None
        for j in range(segments):
            source = basin.add_source(f"Source {i}-{j}", draw.uniform_int(1500, 4000), draw.uniform_int(250, 650))
            segment = basin.add_segment(
                f"Segment {i}-{j}",
                length=draw.uniform_int(50, 250),
                dike_capacity=draw.uniform_int(5, 15) * 1000,
            )
            for _ in range(3):
                segment.generate_retention_offer(basin.catalog)

            basin.connect(source, segment)
            if last is not None:
                basin.connect(last, segment)
            last = segment

            steward = basin.add_steward(f"Steward {i}-{j}")
            basin.assign(steward, segment)
    return basin
