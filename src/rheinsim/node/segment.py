from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from rheinsim.errors import CapacityExceededError, ConfigurationError

from .base import BaseNode
from .history import RollingHistory
from .protocols import Discharges
from .strategies import PeakInflowThreat, ThreatRule

if TYPE_CHECKING:
    from rheinsim.protection import FloodProtection
    from rheinsim.retention import RetentionBasin, RetentionBasinCatalog

MAX_RETENTION_OFFERS = 4


@dataclass(eq=False)
class Segment(BaseNode):
    """A river reach with a dike, optional retention basins and a rolling inflow history.

    Per tick the scheduler calls ``consume`` with the already-updated upstream
    nodes. The water balance is::

        water_left = max(min_discharge, inflow - retainable)
        retained   = inflow - water_left
        overflow   = max(0, water_left - dike_capacity)
        discharge  = water_left - (0 if natural_dike else overflow)

    With ``natural_dike`` the overflow is still reported but the full remaining
    water travels downstream.
    """

    __observed__: ClassVar[tuple[str, ...]] = (
        "name",
        "length",
        "dike_capacity",
        "retainable",
        "min_discharge",
        "natural_dike",
        "inflow",
        "retained",
        "overflow",
        "discharge",
    )

    length: int = 100
    dike_capacity: int = 1000
    retainable: int = 0
    min_discharge: int = 400
    max_dike_capacity: int = 20000
    natural_dike: bool = False
    safety_factor: float = 0.9
    history_length: int = 10
    threat_rule: ThreatRule = field(default_factory=PeakInflowThreat, repr=False)

    inflow: int = field(default=0, init=False)
    retained: int = field(default=0, init=False)
    overflow: int = field(default=0, init=False)
    history: RollingHistory = field(init=False, repr=False)
    possible_retention_basins: list["RetentionBasin"] = field(default_factory=list, init=False, repr=False)
    possible_actions: list["FloodProtection"] = field(default_factory=list, init=False, repr=False)
    last_built: "FloodProtection | None" = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.length <= 0:
            raise ConfigurationError(f"length must be positive, got {self.length}")
        if self.dike_capacity <= 0:
            raise ConfigurationError(f"dike_capacity must be positive, got {self.dike_capacity}")
        if self.max_dike_capacity < self.dike_capacity:
            raise ConfigurationError(
                f"max_dike_capacity ({self.max_dike_capacity}) cannot be below dike_capacity ({self.dike_capacity})"
            )
        if self.retainable < 0:
            raise ConfigurationError(f"retainable cannot be negative, got {self.retainable}")
        if self.min_discharge < 0:
            raise ConfigurationError(f"min_discharge cannot be negative, got {self.min_discharge}")
        if not 0.0 <= self.safety_factor <= 1.0:
            raise ConfigurationError(f"safety_factor must be between 0.0 and 1.0, got {self.safety_factor}")
        self.history = RollingHistory(self.history_length)

    # --- hydrology ---

    @property
    def water_left(self) -> int:
        return self.water_left_for(self.inflow)

    def water_left_for(self, inflow: int) -> int:
        return max(self.min_discharge, inflow - self.retainable)

    @property
    def safe_capacity(self) -> float:
        return self.safety_factor * self.dike_capacity

    def consume(self, upstream: Iterable[Discharges]) -> None:
        self._reset()

        inflow = sum(node.discharge for node in upstream)
        self.inflow = inflow
        self._remember(inflow)

        water_left = self.water_left_for(inflow)
        self.retained = inflow - water_left
        self.overflow = max(0, water_left - self.dike_capacity)
        self.discharge = water_left - (0 if self.natural_dike else self.overflow)

    def _reset(self) -> None:
        # Silent: observers see each derived field move from zero to its new value.
        for name in ("inflow", "retained", "overflow", "discharge"):
            object.__setattr__(self, name, 0)

    def resize_history(self, length: int) -> None:
        self.history.resize(length)
        self.history_length = length

    def _remember(self, inflow: int) -> None:
        if self.history.capacity != self.history_length:
            self.history.resize(self.history_length)
        self.history.append(inflow)

    def is_threatened(self) -> bool:
        if self.overflow > 0:
            return True
        if not self.history:
            return False
        return self.threat_rule.exceeds(self)

    # --- construction ---

    def add_dike_capacity(self, amount: int) -> None:
        if self.dike_capacity + amount > self.max_dike_capacity:
            raise CapacityExceededError(self.name, self.dike_capacity + amount, self.max_dike_capacity)
        self.dike_capacity += amount

    def add_retention_basin(self, basin: "RetentionBasin") -> None:
        self.retainable += basin.capacity

    # --- retention basin offers ---

    def accepts_retention_offers(self) -> bool:
        return not self.natural_dike and len(self.possible_retention_basins) < MAX_RETENTION_OFFERS

    def generate_retention_offer(self, catalog: "RetentionBasinCatalog") -> "RetentionBasin | None":
        """Ask the catalog for one new offer. Full or natural-dike segments do not draw."""
        if not self.accepts_retention_offers():
            return None
        basin = catalog.offer()
        if basin is not None:
            self.possible_retention_basins.append(basin)
        return basin

    def remove_retention_offer(self, basin: "RetentionBasin") -> bool:
        for i, offered in enumerate(self.possible_retention_basins):
            if offered is basin:
                del self.possible_retention_basins[i]
                return True
        return False

    def clear_retention_offers(self) -> None:
        self.possible_retention_basins.clear()

    # --- candidate actions ---

    def add_possible_action(self, action: "FloodProtection") -> None:
        self.possible_actions.append(action)

    def remove_possible_action(self, action: "FloodProtection") -> bool:
        if action in self.possible_actions:
            self.possible_actions.remove(action)
            return True
        return False

    def clear_possible_actions(self) -> None:
        self.possible_actions.clear()

    def __str__(self) -> str:
        threatened = "y" if self.is_threatened() else "n"
        return (
            f"{self.name} i{self.inflow}/o{self.overflow}/d{self.discharge}/r{self.retained} th {threatened}"
        )
