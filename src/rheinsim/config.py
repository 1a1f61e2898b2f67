from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, Self

from rheinsim.errors import ConfigurationError
from rheinsim.node.strategies import THREAT_RULES


@dataclass(frozen=True, slots=True)
class DikeCosts:
    """Rate constants pricing a dike raise: ``length * 2 * (base + delta * per_m3)``."""

    base_cost_per_km: float = 1000.0
    cost_per_cubic_meter: float = 10.0

    def __post_init__(self) -> None:
        if self.base_cost_per_km < 0:
            raise ConfigurationError(f"base_cost_per_km cannot be negative, got {self.base_cost_per_km}")
        if self.cost_per_cubic_meter < 0:
            raise ConfigurationError(f"cost_per_cubic_meter cannot be negative, got {self.cost_per_cubic_meter}")


@dataclass(frozen=True, slots=True)
class RetentionBasinParams:
    probability: float = 0.1
    mean_capacity: float = 116.0
    stddev_capacity: float = 23.0
    mean_unit_cost: float = 344.0
    stddev_unit_cost: float = 43.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.probability <= 1.0:
            raise ConfigurationError(f"probability must be between 0.0 and 1.0, got {self.probability}")
        if self.mean_capacity <= 0:
            raise ConfigurationError(f"mean_capacity must be positive, got {self.mean_capacity}")
        if self.mean_unit_cost <= 0:
            raise ConfigurationError(f"mean_unit_cost must be positive, got {self.mean_unit_cost}")
        if self.stddev_capacity < 0 or self.stddev_unit_cost < 0:
            raise ConfigurationError("standard deviations cannot be negative")


@dataclass(frozen=True, slots=True)
class SimulationConfig:
    """Named run parameters shared by the schedulers, the catalog and the policy."""

    steward_payment: int = 1000
    steward_start_balance: int = 200000
    dike_costs: DikeCosts = field(default_factory=DikeCosts)
    retention_basins: RetentionBasinParams = field(default_factory=RetentionBasinParams)
    history_length: int = 10
    safety_factor: float = 0.9
    min_discharge: int = 400
    max_dike_capacity: int = 20000
    threat_rule: str = "peak"
    seed: int | None = 0

    def __post_init__(self) -> None:
        if self.steward_payment < 0:
            raise ConfigurationError(f"steward_payment cannot be negative, got {self.steward_payment}")
        if self.steward_start_balance < 0:
            raise ConfigurationError(f"steward_start_balance cannot be negative, got {self.steward_start_balance}")
        if self.history_length < 1:
            raise ConfigurationError(f"history_length must be at least 1, got {self.history_length}")
        if not 0.0 <= self.safety_factor <= 1.0:
            raise ConfigurationError(f"safety_factor must be between 0.0 and 1.0, got {self.safety_factor}")
        if self.min_discharge < 0:
            raise ConfigurationError(f"min_discharge cannot be negative, got {self.min_discharge}")
        if self.max_dike_capacity <= 0:
            raise ConfigurationError(f"max_dike_capacity must be positive, got {self.max_dike_capacity}")
        if self.threat_rule not in THREAT_RULES:
            raise ConfigurationError(f"threat_rule must be one of {sorted(THREAT_RULES)}, got '{self.threat_rule}'")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build a config from a plain mapping, e.g. the ``config`` block of a network file."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")

        kwargs = dict(data)
        try:
            if isinstance(kwargs.get("dike_costs"), Mapping):
                kwargs["dike_costs"] = DikeCosts(**kwargs["dike_costs"])
            if isinstance(kwargs.get("retention_basins"), Mapping):
                kwargs["retention_basins"] = RetentionBasinParams(**kwargs["retention_basins"])
            return cls(**kwargs)
        except TypeError as e:
            raise ConfigurationError(str(e)) from e
