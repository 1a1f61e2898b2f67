import pytest

from rheinsim.config import DikeCosts, RetentionBasinParams, SimulationConfig
from rheinsim.errors import ConfigurationError


class TestDikeCosts:
    def test_defaults(self):
        costs = DikeCosts()
        assert costs.base_cost_per_km == 1000.0
        assert costs.cost_per_cubic_meter == 10.0

    def test_negative_rate_raises(self):
        with pytest.raises(ConfigurationError, match="base_cost_per_km"):
            DikeCosts(base_cost_per_km=-1.0)


class TestRetentionBasinParams:
    def test_defaults(self):
        params = RetentionBasinParams()
        assert params.probability == 0.1
        assert (params.mean_capacity, params.stddev_capacity) == (116.0, 23.0)
        assert (params.mean_unit_cost, params.stddev_unit_cost) == (344.0, 43.0)

    @pytest.mark.parametrize("probability", [-0.1, 1.5])
    def test_probability_out_of_range_raises(self, probability: float):
        with pytest.raises(ConfigurationError, match="probability"):
            RetentionBasinParams(probability=probability)

    def test_negative_stddev_raises(self):
        with pytest.raises(ConfigurationError, match="standard deviations"):
            RetentionBasinParams(stddev_capacity=-1.0)


class TestSimulationConfig:
    def test_defaults(self):
        config = SimulationConfig()
        assert config.steward_payment == 1000
        assert config.steward_start_balance == 200000
        assert config.history_length == 10
        assert config.safety_factor == 0.9
        assert config.threat_rule == "peak"

    def test_is_frozen(self):
        config = SimulationConfig()
        with pytest.raises(AttributeError):
            config.seed = 3

    @pytest.mark.parametrize(
        ("kwargs", "match"),
        [
            ({"steward_payment": -1}, "steward_payment"),
            ({"history_length": 0}, "history_length"),
            ({"safety_factor": 1.2}, "safety_factor"),
            ({"min_discharge": -5}, "min_discharge"),
            ({"max_dike_capacity": 0}, "max_dike_capacity"),
            ({"threat_rule": "gut_feeling"}, "threat_rule"),
        ],
    )
    def test_invalid_values_raise(self, kwargs: dict, match: str):
        with pytest.raises(ConfigurationError, match=match):
            SimulationConfig(**kwargs)

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            SimulationConfig(history_length=0)


class TestSimulationConfigFromDict:
    def test_empty_mapping_gives_defaults(self):
        assert SimulationConfig.from_dict({}) == SimulationConfig()

    def test_nested_mappings_are_converted(self):
        config = SimulationConfig.from_dict(
            {
                "steward_payment": 500,
                "dike_costs": {"base_cost_per_km": 2000.0},
                "retention_basins": {"probability": 0.5},
            }
        )
        assert config.steward_payment == 500
        assert config.dike_costs == DikeCosts(base_cost_per_km=2000.0)
        assert config.retention_basins.probability == 0.5

    def test_unknown_key_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown configuration keys"):
            SimulationConfig.from_dict({"steward_paymnet": 500})

    def test_unknown_nested_key_raises(self):
        with pytest.raises(ConfigurationError):
            SimulationConfig.from_dict({"dike_costs": {"per_km": 1.0}})
