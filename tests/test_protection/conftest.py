from dataclasses import dataclass

import pytest

from rheinsim.agent import Steward
from rheinsim.node import Segment
from rheinsim.system import FlowGraph
from rheinsim.testing import make_segment


@dataclass
class Chain:
    graph: FlowGraph
    a: Segment
    b: Segment
    c: Segment
    upper: Steward
    lower: Steward


@pytest.fixture
def chain() -> Chain:
    """a -> b -> c; ``upper`` owns a and b, ``lower`` owns c."""
    graph = FlowGraph()
    a = make_segment("a", length=100, dike_capacity=1000, max_dike_capacity=2000)
    b = make_segment("b", length=50, dike_capacity=1000)
    c = make_segment("c", length=250, dike_capacity=1000)
    for segment in (a, b, c):
        graph.add_node(segment)
    graph.add_edge(a, b)
    graph.add_edge(b, c)

    upper = Steward("upper", 5_000_000, graph=graph)
    lower = Steward("lower", 5_000_000, graph=graph)
    graph.assign(upper, a)
    graph.assign(upper, b)
    graph.assign(lower, c)
    return Chain(graph, a, b, c, upper, lower)
