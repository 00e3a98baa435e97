from __future__ import annotations

from typing import List, Mapping

from dvsim.core.convergence import lookup_node
from dvsim.core.errors import RoutingLoopError
from dvsim.core.node import Node
from dvsim.core.types import INFINITE_COST, NO_HOP, Message, MessageReport, NodeId


class MessageRouter:
    """Resolves messages into hop paths over converged routing tables."""

    def __init__(self, nodes: Mapping[NodeId, Node]) -> None:
        self._nodes = nodes

    def resolve(self, message: Message) -> MessageReport:
        source = lookup_node(self._nodes, message.source)
        lookup_node(self._nodes, message.destination)

        cost = source.get_path_cost(message.destination)
        if cost >= INFINITE_COST:
            return MessageReport(message=message, cost=INFINITE_COST, hops=None)

        return MessageReport(message=message, cost=cost, hops=tuple(self.path(message.source, message.destination)))

    def path(self, source: NodeId, destination: NodeId) -> List[NodeId]:
        """Source plus intermediate hops, excluding the destination."""
        hops: List[NodeId] = []
        seen = set()
        current = source
        while current != destination:
            if current in seen or current is NO_HOP:
                raise RoutingLoopError(source, destination, hops + [current])
            seen.add(current)
            hops.append(current)
            current = lookup_node(self._nodes, current).get_next_hop(destination)
        return hops

    def resolve_all(self, messages: List[Message]) -> List[MessageReport]:
        return [self.resolve(m) for m in messages]
