import logging
from typing import TYPE_CHECKING

from rheinsim.errors import MultipleOutflowError
from rheinsim.node import BaseNode, Segment
from rheinsim.retention import RetentionBasinCatalog

from .graph import FlowGraph, GraphChanged

if TYPE_CHECKING:
    from rheinsim.agent import ActionOutcome

logger = logging.getLogger(__name__)


class TopologyScheduler:
    """Feeds every flow node once per tick, upstream before downstream.

    The order is a topological sort of the flow network, cached and recomputed
    whenever the network changes or a node is renamed. Nodes that become ready
    at the same time are taken in name order, so a fixed network always gives
    the same schedule.
    """

    def __init__(self, graph: FlowGraph, catalog: RetentionBasinCatalog, steward_payment: int = 1000):
        self.graph = graph
        self.catalog = catalog
        self.steward_payment = steward_payment
        self._order = self.compute_order()
        graph.subscribe(self._on_graph_changed)

    @property
    def order(self) -> list[BaseNode]:
        return list(self._order)

    def _on_graph_changed(self, event: GraphChanged) -> None:
        self._order = self.compute_order()

    def compute_order(self) -> list[BaseNode]:
        for node in self.graph.nodes:
            if self.graph.out_degree(node) > 1:
                raise MultipleOutflowError(node.name, [n.name for n in self.graph.successors(node)])
        return self.graph.topological_order()

    def tick(self, t: int = 0) -> None:
        logger.debug("[%d] %s", t, type(self).__name__)
        for node in self._order:
            self.feed(node)
            if isinstance(node, Segment):
                self.pay_stewards(node)
                node.generate_retention_offer(self.catalog)
            logger.debug(" %s '%s'", type(node).__name__, node)

    def feed(self, node: BaseNode) -> None:
        upstream = [n for n in self.graph.predecessors(node) if isinstance(n, BaseNode)]
        node.consume(upstream)

    def pay_stewards(self, segment: Segment) -> None:
        for steward in self.graph.stewards_of(segment):
            steward.deposit_money(self.steward_payment)


class EconomicScheduler:
    """Runs every steward's two-phase investment cycle once per tick.

    All stewards generate candidates before any steward chooses, since a
    policy may look at segments other stewards have just been offered.
    """

    def __init__(self, graph: FlowGraph):
        self.graph = graph

    def step(self, t: int = 0) -> list["ActionOutcome"]:
        logger.debug("[%d] %s", t, type(self).__name__)
        stewards = self.graph.stewards

        for steward in stewards:
            logger.info(" I.  Steward '%s' (%d)", steward.name, steward.balance)
            steward.generate_possible_actions()

        outcomes: list[ActionOutcome] = []
        for steward in stewards:
            logger.info(" II. Steward '%s' (%d)", steward.name, steward.balance)
            outcomes.extend(steward.choose_actions())
        return outcomes
