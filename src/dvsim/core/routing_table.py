from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from dvsim.core.types import INFINITE_COST, NO_HOP, UNKNOWN_COST, Cost, NodeId


@dataclass(frozen=True)
class Route:
    destination: NodeId
    next_hop: Optional[NodeId]
    cost: Cost

    @property
    def reachable(self) -> bool:
        return self.next_hop is not NO_HOP and self.cost < INFINITE_COST


class RoutingTable:
    """Per-router map of destination -> (next hop, cost).

    Every known node has exactly one entry. Unreachable destinations are
    kept with ``NO_HOP`` and ``INFINITE_COST`` rather than dropped.
    """

    def __init__(self, self_id: NodeId, node_ids: Iterable[NodeId] = ()) -> None:
        self.self_id = self_id
        self._table: Dict[NodeId, Tuple[Optional[NodeId], Cost]] = {}
        self.initialize(self_id, node_ids)

    def initialize(self, self_id: NodeId, node_ids: Iterable[NodeId]) -> None:
        self.self_id = self_id
        self._table.clear()
        for node in node_ids:
            self._table[node] = (NO_HOP, INFINITE_COST)
        self._table[self_id] = (self_id, 0)

    def add_route(self, destination: NodeId, next_hop: Optional[NodeId], cost: Cost) -> None:
        self._table[destination] = (next_hop, cost)

    def contains(self, destination: NodeId) -> bool:
        return destination in self._table

    def get_next_hop(self, destination: NodeId) -> Optional[NodeId]:
        entry = self._table.get(destination)
        if entry is None:
            return NO_HOP
        return entry[0]

    def get_path_cost(self, destination: NodeId) -> Cost:
        entry = self._table.get(destination)
        if entry is None:
            return UNKNOWN_COST
        return entry[1]

    def snapshot(self) -> List[Route]:
        return [
            Route(destination=dst, next_hop=hop, cost=cost)
            for dst, (hop, cost) in sorted(self._table.items(), key=lambda item: item[0])
        ]

    def __contains__(self, destination: object) -> bool:
        return destination in self._table

    def __len__(self) -> int:
        return len(self._table)
