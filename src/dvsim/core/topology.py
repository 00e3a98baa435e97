from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set, Tuple

from dvsim.core.types import Link, NodeId


class Topology:
    """Undirected weighted graph of routers.

    Links are stored in both directions. A node id, once seen, is never
    forgotten: removing its last link leaves it known but isolated.
    """

    def __init__(self) -> None:
        self._adj: Dict[NodeId, Dict[NodeId, int]] = {}

    def add_node(self, node: NodeId) -> None:
        self._adj.setdefault(node, {})

    def nodes(self) -> List[NodeId]:
        return sorted(self._adj.keys())

    def neighbors(self, node: NodeId) -> Dict[NodeId, int]:
        return dict(self._adj.get(node, {}))

    def has_link(self, u: NodeId, v: NodeId) -> bool:
        return v in self._adj.get(u, {})

    def metric(self, u: NodeId, v: NodeId) -> Optional[int]:
        return self._adj.get(u, {}).get(v)

    def add_link(self, u: NodeId, v: NodeId, metric: int = 1) -> None:
        if u == v:
            raise ValueError(f"Self-loop on node {u} is not a link")
        if metric < 0:
            raise ValueError(f"Link {u}-{v} has negative cost {metric}")
        self.add_node(u)
        self.add_node(v)
        self._adj[u][v] = metric
        self._adj[v][u] = metric

    def remove_link(self, u: NodeId, v: NodeId) -> bool:
        existed = self.has_link(u, v)
        self._adj.get(u, {}).pop(v, None)
        self._adj.get(v, {}).pop(u, None)
        return existed

    def update_metric(self, u: NodeId, v: NodeId, metric: int) -> None:
        self.add_link(u, v, metric)

    def edge_list(self) -> List[Link]:
        edges: List[Link] = []
        seen: Set[Tuple[NodeId, NodeId]] = set()
        for u in self.nodes():
            for v, m in self._adj[u].items():
                key = tuple(sorted((u, v)))
                if key in seen:
                    continue
                seen.add(key)
                edges.append(Link(node1=key[0], node2=key[1], cost=m))
        return sorted(edges, key=lambda e: (e.node1, e.node2))

    def copy(self) -> "Topology":
        other = Topology()
        for n in self.nodes():
            other.add_node(n)
        for e in self.edge_list():
            other.add_link(e.node1, e.node2, e.cost)
        return other

    def __len__(self) -> int:
        return len(self._adj)

    @classmethod
    def from_links(cls, links: Iterable[Link]) -> "Topology":
        t = cls()
        for link in links:
            t.add_link(link.node1, link.node2, link.cost)
        return t
