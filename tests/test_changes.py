from __future__ import annotations

from dvsim.core.changes import ChangeAction, ChangeApplier, build_nodes
from dvsim.core.convergence import ConvergenceEngine
from dvsim.core.node import route_tables
from dvsim.core.topology import Topology
from dvsim.core.types import INFINITE_COST, NO_HOP, ChangeRecord, Link


def _line() -> Topology:
    return Topology.from_links([Link(1, 2, 1), Link(2, 3, 1)])


def test_removing_missing_link_is_noop_and_tables_unchanged() -> None:
    topology = _line()
    engine = ConvergenceEngine()
    before = build_nodes(topology)
    first = engine.converge(topology, before)

    applier = ChangeApplier(topology)
    outcome = applier.apply(ChangeRecord(1, 3, None))
    after = applier.rebuild()
    second = engine.converge(topology, after)

    assert outcome.action is ChangeAction.NOOP
    assert route_tables(after) == route_tables(before)
    assert second.route_hash == first.route_hash


def test_add_update_and_remove_actions() -> None:
    topology = _line()
    applier = ChangeApplier(topology)

    assert applier.apply(ChangeRecord(1, 3, 4)).action is ChangeAction.ADDED
    updated = applier.apply(ChangeRecord(3, 1, 6))
    assert updated.action is ChangeAction.UPDATED
    assert updated.previous_cost == 4
    assert applier.apply(ChangeRecord(1, 3, 6)).action is ChangeAction.NOOP
    assert applier.apply(ChangeRecord(3, 1, None)).action is ChangeAction.REMOVED
    assert not topology.has_link(1, 3)


def test_change_endpoints_become_known_nodes() -> None:
    topology = _line()
    applier = ChangeApplier(topology)
    applier.apply(ChangeRecord(1, 4, None))
    nodes = applier.rebuild()
    ConvergenceEngine().converge(topology, nodes)

    assert sorted(nodes) == [1, 2, 3, 4]
    for other in (1, 2, 3):
        assert nodes[4].get_path_cost(other) == INFINITE_COST
        assert nodes[4].get_next_hop(other) is NO_HOP
        assert nodes[other].get_path_cost(4) == INFINITE_COST
    assert nodes[4].get_path_cost(4) == 0


def test_rebuild_discards_stale_routes() -> None:
    topology = Topology.from_links([Link(1, 2, 1), Link(2, 3, 1), Link(1, 3, 5)])
    applier = ChangeApplier(topology)
    nodes = applier.rebuild()
    ConvergenceEngine().converge(topology, nodes)
    assert nodes[1].get_path_cost(3) == 2

    applier.apply(ChangeRecord(2, 3, None))
    rebuilt = applier.rebuild()
    assert rebuilt is not nodes
    ConvergenceEngine().converge(topology, rebuilt)

    assert rebuilt[1].get_next_hop(3) == 3
    assert rebuilt[1].get_path_cost(3) == 5
    assert rebuilt[2].get_next_hop(3) == 1
    assert rebuilt[2].get_path_cost(3) == 6


def test_cost_increase_reroutes() -> None:
    topology = Topology.from_links([Link(1, 2, 1), Link(2, 3, 1), Link(1, 3, 5)])
    applier = ChangeApplier(topology)
    applier.apply(ChangeRecord(1, 3, 1))
    applier.apply(ChangeRecord(1, 2, 10))
    nodes = applier.rebuild()
    ConvergenceEngine().converge(topology, nodes)

    assert nodes[1].get_next_hop(2) == 3
    assert nodes[1].get_path_cost(2) == 2
