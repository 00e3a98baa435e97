"""Distance-vector routing engine: tables, topology, convergence, forwarding."""

from dvsim.core.changes import ChangeAction, ChangeApplier, ChangeOutcome, build_nodes
from dvsim.core.convergence import ConvergenceEngine, ConvergenceResult, TieBreak, hash_routes
from dvsim.core.errors import (
    ConfigError,
    ConvergenceError,
    DvsimError,
    InconsistentTopologyError,
    InputFileError,
    ParseError,
    RoutingLoopError,
)
from dvsim.core.forwarding import MessageRouter
from dvsim.core.node import Node, route_tables
from dvsim.core.routing_table import Route, RoutingTable
from dvsim.core.simulator import RoundResult, SimulationResult, Simulator
from dvsim.core.topology import Topology
from dvsim.core.types import (
    INFINITE_COST,
    NO_HOP,
    UNKNOWN_COST,
    ChangeRecord,
    Link,
    Message,
    MessageReport,
    NodeId,
)

__all__ = [
    "INFINITE_COST",
    "NO_HOP",
    "UNKNOWN_COST",
    "ChangeAction",
    "ChangeApplier",
    "ChangeOutcome",
    "ChangeRecord",
    "ConfigError",
    "ConvergenceEngine",
    "ConvergenceError",
    "ConvergenceResult",
    "DvsimError",
    "InconsistentTopologyError",
    "InputFileError",
    "Link",
    "Message",
    "MessageReport",
    "MessageRouter",
    "Node",
    "NodeId",
    "ParseError",
    "RoundResult",
    "Route",
    "RoutingLoopError",
    "RoutingTable",
    "SimulationResult",
    "Simulator",
    "TieBreak",
    "Topology",
    "build_nodes",
    "hash_routes",
    "route_tables",
]
