import pytest

from rheinsim.config import DikeCosts
from rheinsim.errors import CapacityExceededError, ConfigurationError, InsufficientFundsError
from rheinsim.protection import ProtectionState, RaiseDike
from rheinsim.testing import make_inflow


class TestRaiseDikeCost:
    def test_cost_covers_both_banks(self, chain):
        raise_dike = RaiseDike(chain.a, chain.upper, 500, graph=chain.graph)
        assert raise_dike.cost_per_km == 6000
        assert raise_dike.cost == 100 * 2 * 6000

    def test_cost_uses_configured_rates(self, chain):
        costs = DikeCosts(base_cost_per_km=500.0, cost_per_cubic_meter=2.0)
        raise_dike = RaiseDike(chain.b, chain.upper, 1000, graph=chain.graph, costs=costs)
        assert raise_dike.cost == 50 * 2 * 2500

    def test_cost_per_km_is_truncated(self, chain):
        costs = DikeCosts(base_cost_per_km=0.0, cost_per_cubic_meter=0.75)
        raise_dike = RaiseDike(chain.a, chain.upper, 3, graph=chain.graph, costs=costs)
        assert raise_dike.cost_per_km == 2
        assert raise_dike.cost == 400

    @pytest.mark.parametrize("capacity", [0, -500])
    def test_non_positive_capacity_raises(self, chain, capacity: int):
        with pytest.raises(ConfigurationError, match="capacity must be positive"):
            RaiseDike(chain.a, chain.upper, capacity, graph=chain.graph)

    def test_str(self, chain):
        raise_dike = RaiseDike(chain.b, chain.upper, 500, graph=chain.graph)
        assert str(raise_dike) == "RaiseDike[capacity=500,cost=600000,segment=b, payer=upper]"


class TestRaiseDikeExecute:
    def test_raises_dike_and_charges_payer(self, chain):
        raise_dike = RaiseDike(chain.a, chain.upper, 500, graph=chain.graph)
        raise_dike.execute()
        assert chain.a.dike_capacity == 1500
        assert chain.upper.balance == 5_000_000 - 1_200_000
        assert raise_dike.state is ProtectionState.EXECUTED
        assert chain.a.last_built is raise_dike

    def test_starts_proposed(self, chain):
        raise_dike = RaiseDike(chain.a, chain.upper, 500, graph=chain.graph)
        assert raise_dike.state is ProtectionState.PROPOSED

    def test_capacity_exceeded_changes_nothing(self, chain):
        raise_dike = RaiseDike(chain.a, chain.upper, 1500, graph=chain.graph)
        with pytest.raises(CapacityExceededError) as exc_info:
            raise_dike.execute()
        assert exc_info.value.requested == 2500
        assert exc_info.value.maximum == 2000
        assert chain.a.dike_capacity == 1000
        assert chain.upper.balance == 5_000_000
        assert raise_dike.state is ProtectionState.PROPOSED
        assert chain.a.last_built is None

    def test_raise_to_exact_maximum_is_allowed(self, chain):
        RaiseDike(chain.a, chain.upper, 1000, graph=chain.graph).execute()
        assert chain.a.dike_capacity == 2000

    def test_insufficient_funds_changes_nothing(self, chain):
        chain.upper.balance = 1000
        raise_dike = RaiseDike(chain.a, chain.upper, 500, graph=chain.graph)
        with pytest.raises(InsufficientFundsError):
            raise_dike.execute()
        assert chain.a.dike_capacity == 1000
        assert chain.upper.balance == 1000

    def test_execute_twice_raises(self, chain):
        raise_dike = RaiseDike(chain.a, chain.upper, 500, graph=chain.graph)
        raise_dike.execute()
        with pytest.raises(RuntimeError, match="already been executed"):
            raise_dike.execute()
        assert chain.a.dike_capacity == 1500


class TestRaiseDikeEffectiveness:
    def test_cost_effectiveness(self, chain):
        raise_dike = RaiseDike(chain.a, chain.upper, 500, graph=chain.graph)
        assert raise_dike.cost_effectiveness == pytest.approx(500 / 1_200_000)

    def test_subbasin_weights_by_own_length_over_owned_run(self, chain):
        raise_dike = RaiseDike(chain.a, chain.upper, 500, graph=chain.graph)
        assert raise_dike.subbasin_cost_effectiveness == pytest.approx(raise_dike.cost_effectiveness * 100 / 150)

    def test_whole_basin_weights_over_entire_run(self, chain):
        raise_dike = RaiseDike(chain.a, chain.upper, 500, graph=chain.graph)
        assert raise_dike.whole_basin_cost_effectiveness == pytest.approx(raise_dike.cost_effectiveness * 100 / 400)

    def test_threat_status_does_not_matter(self, chain):
        raise_dike = RaiseDike(chain.a, chain.upper, 500, graph=chain.graph)
        before = raise_dike.subbasin_cost_effectiveness
        chain.a.consume([make_inflow(amount=5000)])
        assert raise_dike.subbasin_cost_effectiveness == before

    def test_payer_owning_nothing_downstream_scores_zero(self, chain):
        raise_dike = RaiseDike(chain.c, chain.upper, 500, graph=chain.graph)
        assert raise_dike.subbasin_cost_effectiveness == 0.0

    def test_metrics_do_not_mutate(self, chain):
        raise_dike = RaiseDike(chain.a, chain.upper, 500, graph=chain.graph)
        raise_dike.subbasin_cost_effectiveness
        raise_dike.whole_basin_cost_effectiveness
        assert chain.a.dike_capacity == 1000
        assert chain.upper.balance == 5_000_000
        assert raise_dike.state is ProtectionState.PROPOSED
