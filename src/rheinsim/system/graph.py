from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

import networkx as nx

from rheinsim.common import FieldChanged
from rheinsim.errors import CycleError, MultipleOutflowError, MultipleOwnerError
from rheinsim.node import BaseNode, Segment

if TYPE_CHECKING:
    from rheinsim.agent import Steward

STEWARD = 0
SEGMENT = 1


class GraphChange(Enum):
    NODE_ADDED = auto()
    NODE_REMOVED = auto()
    EDGE_ADDED = auto()
    EDGE_REMOVED = auto()
    NODE_RENAMED = auto()


@dataclass(frozen=True, slots=True)
class GraphChanged:
    kind: GraphChange
    node: BaseNode
    target: BaseNode | None = None


GraphListener = Callable[[GraphChanged], None]
SegmentFilter = Callable[[Segment], bool]


def _by_name(nodes: Any) -> list:
    return sorted(nodes, key=lambda n: n.name)


@dataclass
class FlowGraph:
    """The river network plus the steward-segment ownership association.

    The flow network is a directed multigraph whose nodes are the node objects
    themselves. Ownership is a separate bipartite graph linking stewards to
    the segments they own; a segment has at most one owner.
    """

    _flow: nx.MultiDiGraph = field(default_factory=nx.MultiDiGraph, init=False, repr=False)
    _ownership: nx.Graph = field(default_factory=nx.Graph, init=False, repr=False)
    _names: dict[str, BaseNode] = field(default_factory=dict, init=False, repr=False)
    _listeners: list[GraphListener] = field(default_factory=list, init=False, repr=False)

    # --- change notification ---

    def subscribe(self, listener: GraphListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: GraphListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, kind: GraphChange, node: BaseNode, target: BaseNode | None = None) -> None:
        event = GraphChanged(kind=kind, node=node, target=target)
        for listener in list(self._listeners):
            listener(event)

    # --- flow network ---

    def add_node(self, node: BaseNode) -> None:
        if node.name in self._names:
            raise ValueError(f"Node '{node.name}' already exists")
        self._names[node.name] = node
        self._flow.add_node(node)
        node.subscribe(self._on_node_changed)
        self._notify(GraphChange.NODE_ADDED, node)

    def remove_node(self, node: BaseNode) -> None:
        self._require(node)
        del self._names[node.name]
        self._flow.remove_node(node)
        if node in self._ownership:
            self._ownership.remove_node(node)
        node.unsubscribe(self._on_node_changed)
        self._notify(GraphChange.NODE_REMOVED, node)

    def _on_node_changed(self, event: FieldChanged) -> None:
        if event.field != "name":
            return
        if event.new in self._names:
            raise ValueError(f"Node '{event.new}' already exists")
        self._names[event.new] = self._names.pop(event.old)
        try:
            self._notify(GraphChange.NODE_RENAMED, event.source)
        except Exception:
            self._names[event.old] = self._names.pop(event.new)
            raise

    def add_edge(self, upstream: BaseNode, downstream: BaseNode) -> None:
        self._require(upstream)
        self._require(downstream)
        self._flow.add_edge(upstream, downstream)
        self._notify(GraphChange.EDGE_ADDED, upstream, downstream)

    def remove_edge(self, upstream: BaseNode, downstream: BaseNode) -> None:
        if not self._flow.has_edge(upstream, downstream):
            raise ValueError(f"No edge from '{upstream.name}' to '{downstream.name}'")
        self._flow.remove_edge(upstream, downstream)
        self._notify(GraphChange.EDGE_REMOVED, upstream, downstream)

    def _require(self, node: BaseNode) -> None:
        if node not in self._flow:
            raise ValueError(f"Node '{node.name}' is not part of the flow network")

    def __contains__(self, node: object) -> bool:
        return node in self._flow

    def node(self, name: str) -> BaseNode:
        try:
            return self._names[name]
        except KeyError:
            raise KeyError(f"No node named '{name}'") from None

    @property
    def nodes(self) -> list[BaseNode]:
        return _by_name(n for n in self._flow.nodes if isinstance(n, BaseNode))

    @property
    def segments(self) -> list[Segment]:
        return [n for n in self.nodes if isinstance(n, Segment)]

    def predecessors(self, node: BaseNode) -> list[BaseNode]:
        return _by_name(self._flow.predecessors(node))

    def successors(self, node: BaseNode) -> list[BaseNode]:
        return _by_name(self._flow.successors(node))

    def out_edges(self, node: BaseNode) -> list[tuple[BaseNode, BaseNode]]:
        return [(u, v) for u, v in self._flow.out_edges(node)]

    def in_degree(self, node: BaseNode) -> int:
        return self._flow.in_degree(node)

    def out_degree(self, node: BaseNode) -> int:
        return self._flow.out_degree(node)

    def topological_order(self) -> list[BaseNode]:
        """Flow nodes upstream before downstream, ties broken by name."""
        try:
            return list(nx.lexicographical_topological_sort(self._flow, key=lambda n: n.name))
        except nx.NetworkXUnfeasible:
            # Everything on or below a cycle can never be placed.
            blocked: set[BaseNode] = set()
            for component in nx.strongly_connected_components(self._flow):
                if len(component) > 1 or any(self._flow.has_edge(n, n) for n in component):
                    blocked |= component
            for node in list(blocked):
                blocked |= nx.descendants(self._flow, node)
            raise CycleError(len(self._flow) - len(blocked), len(self._flow)) from None

    # --- ownership ---

    def add_steward(self, steward: "Steward") -> None:
        if steward in self._ownership:
            return
        if any(s.name == steward.name for s in self.stewards):
            raise ValueError(f"Steward '{steward.name}' already exists")
        self._ownership.add_node(steward, bipartite=STEWARD)

    def assign(self, steward: "Steward", segment: Segment) -> None:
        """Make ``steward`` the owner of ``segment``."""
        self._require(segment)
        if not isinstance(segment, Segment):
            raise TypeError(f"Only segments can be owned, got {type(segment).__name__}")
        owners = self.stewards_of(segment)
        if owners and steward not in owners:
            raise MultipleOwnerError(segment.name, [s.name for s in owners] + [steward.name])
        self.add_steward(steward)
        self._ownership.add_node(segment, bipartite=SEGMENT)
        self._ownership.add_edge(steward, segment)

    def unassign(self, steward: "Steward", segment: Segment) -> None:
        if not self._ownership.has_edge(steward, segment):
            raise ValueError(f"Steward '{steward.name}' does not own '{segment.name}'")
        self._ownership.remove_edge(steward, segment)

    @property
    def stewards(self) -> list["Steward"]:
        return _by_name(n for n, side in self._ownership.nodes(data="bipartite") if side == STEWARD)

    def steward(self, name: str) -> "Steward":
        for steward in self.stewards:
            if steward.name == name:
                return steward
        raise KeyError(f"No steward named '{name}'")

    def stewards_of(self, segment: Segment) -> list["Steward"]:
        if segment not in self._ownership:
            return []
        return _by_name(self._ownership.neighbors(segment))

    def owner(self, segment: Segment) -> "Steward | None":
        owners = self.stewards_of(segment)
        if len(owners) > 1:
            raise MultipleOwnerError(segment.name, [s.name for s in owners])
        return owners[0] if owners else None

    def segments_of(self, steward: "Steward") -> list[Segment]:
        if steward not in self._ownership:
            return []
        return _by_name(n for n in self._ownership.neighbors(steward) if isinstance(n, Segment))

    # --- walks ---

    def tributaries(self, segment: Segment) -> list[Segment]:
        return [n for n in self.predecessors(segment) if isinstance(n, Segment)]

    def downstream_segments(self, segment: Segment) -> list[Segment]:
        """The segment itself followed by every segment it drains into, down to the terminus."""
        run: list[Segment] = []
        seen: set[Segment] = set()
        current = segment
        while True:
            if current in seen:
                raise CycleError(len(run), len(self._flow))
            run.append(current)
            seen.add(current)
            following = [n for n in self.successors(current) if isinstance(n, Segment)]
            if not following:
                return run
            if len(following) > 1:
                raise MultipleOutflowError(current.name, [n.name for n in following])
            current = following[0]

    def downstream_length(self, segment: Segment, within: SegmentFilter | None = None) -> int:
        run = self.downstream_segments(segment)
        return sum(s.length for s in run if within is None or within(s))

    def upstream_offer(self, segment: Segment) -> Segment | None:
        """Nearest upstream segment holding a retention-basin offer, or None."""
        tributaries = self.tributaries(segment)
        for tributary in tributaries:
            if tributary.possible_retention_basins:
                return tributary
        for tributary in tributaries:
            found = self.upstream_offer(tributary)
            if found is not None:
                return found
        return None
