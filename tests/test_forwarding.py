from __future__ import annotations

import pytest

from dvsim.core.changes import build_nodes
from dvsim.core.convergence import ConvergenceEngine
from dvsim.core.errors import InconsistentTopologyError, RoutingLoopError
from dvsim.core.forwarding import MessageRouter
from dvsim.core.topology import Topology
from dvsim.core.types import INFINITE_COST, Link, Message


def _router(links) -> MessageRouter:
    topology = Topology.from_links(links)
    nodes = build_nodes(topology)
    ConvergenceEngine().converge(topology, nodes)
    return MessageRouter(nodes)


def test_message_follows_converged_next_hops() -> None:
    router = _router([Link(1, 2, 1), Link(2, 3, 1), Link(1, 3, 5)])
    report = router.resolve(Message(1, 3, "hello"))

    assert report.reachable
    assert report.cost == 2
    assert report.hops == (1, 2)


def test_message_to_self_has_only_source_hop() -> None:
    router = _router([Link(1, 2, 1)])
    report = router.resolve(Message(1, 1, "loopback"))

    assert report.cost == 0
    assert report.hops == ()


def test_unreachable_message() -> None:
    router = _router([Link(1, 2, 1), Link(3, 4, 1)])
    report = router.resolve(Message(1, 4, "lost"))

    assert not report.reachable
    assert report.cost == INFINITE_COST
    assert report.hops is None


def test_unknown_node_fails_fast() -> None:
    router = _router([Link(1, 2, 1)])

    with pytest.raises(InconsistentTopologyError):
        router.resolve(Message(1, 9, "nowhere"))
    with pytest.raises(InconsistentTopologyError):
        router.resolve(Message(9, 1, "nowhere"))


def test_corrupted_tables_raise_routing_loop() -> None:
    topology = Topology.from_links([Link(1, 2, 1), Link(2, 3, 1)])
    nodes = build_nodes(topology)
    nodes[1].add_route(3, 2, 2)
    nodes[2].add_route(3, 1, 3)

    with pytest.raises(RoutingLoopError):
        MessageRouter(nodes).resolve(Message(1, 3, "spin"))
