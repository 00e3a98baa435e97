from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from dvsim.core.node import Node
from dvsim.core.topology import Topology
from dvsim.core.types import ChangeRecord, NodeId

_log = logging.getLogger("dvsim.changes")


class ChangeAction(str, Enum):
    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"
    NOOP = "noop"


@dataclass(frozen=True)
class ChangeOutcome:
    change: ChangeRecord
    action: ChangeAction
    previous_cost: Optional[int] = None


def build_nodes(topology: Topology) -> Dict[NodeId, Node]:
    """Create a fresh router per known node, seeded with its direct links."""
    node_ids = topology.nodes()
    nodes = {node_id: Node(node_id, node_ids) for node_id in node_ids}
    for link in topology.edge_list():
        nodes[link.node1].add_route(link.node2, link.node2, link.cost)
        nodes[link.node2].add_route(link.node1, link.node1, link.cost)
    return nodes


class ChangeApplier:
    """Applies change records to a topology and rebuilds the router set.

    Routers are never patched in place: after every edit the whole
    collection is discarded and reseeded from the current links.
    """

    def __init__(self, topology: Topology) -> None:
        self.topology = topology

    def apply(self, change: ChangeRecord) -> ChangeOutcome:
        u, v = change.node1, change.node2
        self.topology.add_node(u)
        self.topology.add_node(v)
        previous = self.topology.metric(u, v)

        if change.is_removal:
            removed = self.topology.remove_link(u, v)
            action = ChangeAction.REMOVED if removed else ChangeAction.NOOP
        else:
            self.topology.update_metric(u, v, int(change.cost))
            if previous is None:
                action = ChangeAction.ADDED
            elif previous == change.cost:
                action = ChangeAction.NOOP
            else:
                action = ChangeAction.UPDATED

        _log.info("change %s-%s cost=%s: %s", u, v, change.cost, action.value)
        return ChangeOutcome(change=change, action=action, previous_cost=previous)

    def rebuild(self) -> Dict[NodeId, Node]:
        return build_nodes(self.topology)
