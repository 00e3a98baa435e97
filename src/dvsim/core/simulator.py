from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from dvsim.core.changes import ChangeApplier, ChangeOutcome, build_nodes
from dvsim.core.convergence import ConvergenceEngine, ConvergenceResult
from dvsim.core.forwarding import MessageRouter
from dvsim.core.logging import RoundTrace
from dvsim.core.node import Node
from dvsim.core.routing_table import Route
from dvsim.core.topology import Topology
from dvsim.core.types import ChangeRecord, Message, MessageReport, NodeId

_log = logging.getLogger("dvsim.simulator")


@dataclass
class RoundResult:
    index: int
    convergence: ConvergenceResult
    tables: Dict[NodeId, List[Route]]
    reports: List[MessageReport]
    outcome: Optional[ChangeOutcome] = None

    @property
    def change(self) -> Optional[ChangeRecord]:
        return self.outcome.change if self.outcome else None


@dataclass
class SimulationResult:
    rounds: List[RoundResult] = field(default_factory=list)

    @property
    def route_hashes(self) -> List[str]:
        return [r.convergence.route_hash for r in self.rounds]


class Simulator:
    """Replays topology changes against a converging distance-vector network.

    Round 0 is the initial topology; every change record then yields one
    more round: apply the change, rebuild all routers, reconverge, and
    resolve every message against the new tables.
    """

    def __init__(
        self,
        topology: Topology,
        messages: Iterable[Message] = (),
        changes: Iterable[ChangeRecord] = (),
        engine: ConvergenceEngine | None = None,
        trace: RoundTrace | None = None,
    ) -> None:
        self.topology = topology
        self.messages = list(messages)
        self.changes = list(changes)
        self.engine = engine or ConvergenceEngine()
        self.trace = trace or RoundTrace(path=None)
        self.applier = ChangeApplier(topology)
        self.nodes: Dict[NodeId, Node] = {}

    def run(self) -> SimulationResult:
        result = SimulationResult()
        try:
            for round_result in self.iter_rounds():
                result.rounds.append(round_result)
        finally:
            self.trace.close()
        return result

    def iter_rounds(self) -> Iterator[RoundResult]:
        self.nodes = build_nodes(self.topology)
        yield self._finish_round(0, outcome=None)
        for idx, change in enumerate(self.changes, start=1):
            outcome = self.applier.apply(change)
            self.trace.change_applied(idx, outcome)
            self.nodes = self.applier.rebuild()
            yield self._finish_round(idx, outcome=outcome)

    def _finish_round(self, index: int, outcome: Optional[ChangeOutcome]) -> RoundResult:
        convergence = self.engine.converge(self.topology, self.nodes)
        tables = {node_id: self.nodes[node_id].routes() for node_id in sorted(self.nodes)}
        reports = MessageRouter(self.nodes).resolve_all(self.messages)

        _log.info(
            "round %d: %d nodes converged in %d sweeps, %d/%d messages unreachable",
            index,
            len(self.nodes),
            convergence.sweeps,
            sum(1 for r in reports if not r.reachable),
            len(reports),
        )
        self.trace.round_converged(
            index,
            nodes=len(self.nodes),
            links=len(self.topology.edge_list()),
            convergence=convergence,
            reports=reports,
        )
        return RoundResult(
            index=index,
            convergence=convergence,
            tables=tables,
            reports=reports,
            outcome=outcome,
        )
