import pytest

from rheinsim.config import RetentionBasinParams, SimulationConfig
from rheinsim.system import RiverBasin


@pytest.fixture
def quiet_config() -> SimulationConfig:
    """No retention offers, so runs depend only on the flow."""
    return SimulationConfig(retention_basins=RetentionBasinParams(probability=0.0))


@pytest.fixture
def single_reach(quiet_config: SimulationConfig) -> RiverBasin:
    """spring (1500, no spread) -> reach (1 km, dike 1000), owned by keeper."""
    basin = RiverBasin(config=quiet_config)
    basin.add_source("spring", 1500, 0)
    basin.add_segment("reach", length=1, dike_capacity=1000)
    basin.add_steward("keeper")
    basin.connect("spring", "reach")
    basin.assign("keeper", "reach")
    return basin
