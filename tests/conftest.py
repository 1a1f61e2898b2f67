import pytest

from rheinsim.agent import Steward
from rheinsim.system import FlowGraph
from rheinsim.testing import ScriptedRandomSource


@pytest.fixture
def rng() -> ScriptedRandomSource:
    return ScriptedRandomSource()


@pytest.fixture
def graph() -> FlowGraph:
    return FlowGraph()


@pytest.fixture
def steward(graph: FlowGraph) -> Steward:
    s = Steward("steward", 200000, graph=graph)
    graph.add_steward(s)
    return s
