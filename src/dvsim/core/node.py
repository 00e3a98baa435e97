from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from dvsim.core.routing_table import Route, RoutingTable
from dvsim.core.types import Cost, NodeId


class Node:
    """A router: an id plus the routing table it exclusively owns."""

    def __init__(self, node_id: NodeId, node_ids: Iterable[NodeId]) -> None:
        self._id = node_id
        self._table = RoutingTable(node_id, node_ids)

    @property
    def node_id(self) -> NodeId:
        return self._id

    @property
    def table(self) -> RoutingTable:
        return self._table

    def add_route(self, destination: NodeId, next_hop: Optional[NodeId], cost: Cost) -> None:
        self._table.add_route(destination, next_hop, cost)

    def get_next_hop(self, destination: NodeId) -> Optional[NodeId]:
        return self._table.get_next_hop(destination)

    def get_path_cost(self, destination: NodeId) -> Cost:
        return self._table.get_path_cost(destination)

    def routes(self) -> List[Route]:
        return self._table.snapshot()

    def __repr__(self) -> str:
        return f"Node({self._id!r}, routes={len(self._table)})"


def route_tables(
    nodes: Mapping[NodeId, Node],
) -> Dict[NodeId, Dict[NodeId, Tuple[Optional[NodeId], Cost]]]:
    return {
        node_id: {r.destination: (r.next_hop, r.cost) for r in nodes[node_id].routes()}
        for node_id in sorted(nodes)
    }
