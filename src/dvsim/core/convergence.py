"""Bellman-Ford fixed-point iteration with split horizon.

The engine mutates the routing tables of a node collection in place until
one full sweep over every (router, destination) pair changes nothing.
Neighbors are always scanned in ascending id order so that the outcome is
deterministic for a given topology.
"""

from __future__ import annotations

import hashlib
import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional

from dvsim.core.errors import ConvergenceError, InconsistentTopologyError
from dvsim.core.node import Node, route_tables
from dvsim.core.topology import Topology
from dvsim.core.types import NO_HOP, NodeId

_log = logging.getLogger("dvsim.convergence")


class TieBreak(str, Enum):
    FIRST_FOUND = "first_found"
    LOWEST_NEXT_HOP = "lowest_next_hop"


@dataclass(frozen=True)
class ConvergenceResult:
    sweeps: int
    updates: int
    route_hash: str


def hash_routes(tables: Mapping[NodeId, Mapping[NodeId, tuple]]) -> str:
    normalized: dict[str, dict[str, list]] = {}
    for node, routes in sorted(tables.items()):
        normalized[str(node)] = {}
        for dst, (hop, cost) in sorted(routes.items()):
            finite = cost if math.isfinite(cost) else None
            normalized[str(node)][str(dst)] = [None if hop is NO_HOP else str(hop), finite]
    payload = json.dumps(normalized, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def lookup_node(nodes: Mapping[NodeId, Node], node_id: NodeId) -> Node:
    try:
        return nodes[node_id]
    except KeyError:
        raise InconsistentTopologyError(node_id) from None


class ConvergenceEngine:
    def __init__(
        self,
        tie_break: TieBreak = TieBreak.FIRST_FOUND,
        split_horizon: bool = True,
        max_sweeps: Optional[int] = None,
    ) -> None:
        self.tie_break = TieBreak(tie_break)
        self.split_horizon = bool(split_horizon)
        self.max_sweeps = max_sweeps

    def sweep_limit(self, n_nodes: int) -> int:
        if self.max_sweeps is not None:
            return int(self.max_sweeps)
        return max(1, n_nodes) ** 3

    def converge(self, topology: Topology, nodes: Dict[NodeId, Node]) -> ConvergenceResult:
        """Iterate sweeps until a fixed point is reached.

        Raises ConvergenceError when the sweep limit is exhausted and
        InconsistentTopologyError when a topology node has no router.
        """
        for node_id in topology.nodes():
            lookup_node(nodes, node_id)

        limit = self.sweep_limit(len(nodes))
        sweeps = 0
        updates = 0
        while True:
            if sweeps >= limit:
                raise ConvergenceError(sweeps, limit)
            sweeps += 1
            changed = self.sweep(topology, nodes)
            updates += changed
            _log.debug("sweep %d: %d route updates", sweeps, changed)
            if changed == 0:
                break

        route_hash = hash_routes(route_tables(nodes))
        _log.debug("converged after %d sweeps (%d updates) hash=%s", sweeps, updates, route_hash[:12])
        return ConvergenceResult(sweeps=sweeps, updates=updates, route_hash=route_hash)

    def sweep(self, topology: Topology, nodes: Mapping[NodeId, Node]) -> int:
        changed = 0
        destinations = sorted(nodes)
        for router_id in destinations:
            router = lookup_node(nodes, router_id)
            links = topology.neighbors(router_id)
            for dst in destinations:
                if dst == router_id:
                    continue
                if self._relax(router, dst, links, nodes):
                    changed += 1
        return changed

    def _relax(
        self,
        router: Node,
        dst: NodeId,
        links: Mapping[NodeId, int],
        nodes: Mapping[NodeId, Node],
    ) -> bool:
        current_hop = router.get_next_hop(dst)
        current_cost = router.get_path_cost(dst)
        best_hop, best_cost = current_hop, current_cost

        for nbr in sorted(links):
            if nbr == dst:
                continue
            neighbor = lookup_node(nodes, nbr)
            if self.split_horizon and neighbor.get_next_hop(dst) == router.node_id:
                continue
            advertised = neighbor.get_path_cost(dst)
            # unreachable or unknown adverts never improve a route
            if advertised < 0 or not math.isfinite(advertised):
                continue
            candidate = links[nbr] + advertised
            if candidate < best_cost:
                best_hop, best_cost = nbr, candidate
            elif (
                self.tie_break is TieBreak.LOWEST_NEXT_HOP
                and candidate == best_cost
                and best_hop is not NO_HOP
                and nbr < best_hop
                # feasibility: the neighbor must be strictly closer, so
                # zero-cost links cannot close a loop
                and advertised < best_cost
            ):
                best_hop = nbr

        if best_hop == current_hop and best_cost == current_cost:
            return False
        router.add_route(dst, best_hop, best_cost)
        return True
