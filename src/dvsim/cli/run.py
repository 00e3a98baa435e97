from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from dvsim.config import SimulationConfig, config_from_dict, load_config
from dvsim.core.convergence import TieBreak
from dvsim.core.errors import ConfigError
from dvsim.core.logging import RoundTrace
from dvsim.core.simulator import SimulationResult, Simulator
from dvsim.core.topology import Topology
from dvsim.core.types import ChangeRecord, Message
from dvsim.eval.metrics import write_summary
from dvsim.io.output import write_output
from dvsim.io.parsers import read_changes, read_messages, read_topology

_log = logging.getLogger("dvsim.run")


def load_effective_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> SimulationConfig:
    """Load the YAML config (if any) and apply command-line overrides.

    Override keys: ``topology``, ``messages``, ``changes``, ``output``,
    ``trace``, ``summary``, ``tie_break``, ``split_horizon``, ``max_sweeps``.
    Paths given on the command line stay relative to the working directory.
    """
    cfg = load_config(config_path) if config_path else config_from_dict({})
    if not overrides:
        return cfg

    inputs = replace(
        cfg.inputs,
        **{k: overrides[k] for k in ("topology", "messages", "changes") if k in overrides},
    )
    engine = cfg.engine
    if "tie_break" in overrides:
        engine = replace(engine, tie_break=TieBreak(overrides["tie_break"]))
    if "split_horizon" in overrides:
        engine = replace(engine, split_horizon=bool(overrides["split_horizon"]))
    if "max_sweeps" in overrides:
        if int(overrides["max_sweeps"]) <= 0:
            raise ConfigError("--max-sweeps must be > 0")
        engine = replace(engine, max_sweeps=int(overrides["max_sweeps"]))
    return replace(
        cfg,
        inputs=inputs,
        engine=engine,
        **{k: overrides[k] for k in ("output", "trace", "summary") if k in overrides},
    )


def build_topology(cfg: SimulationConfig) -> Topology:
    if not cfg.inputs.topology:
        raise ConfigError("No topology given: pass a topology file or set inputs.topology")
    return Topology.from_links(read_topology(cfg.inputs.topology, cfg.wire))


def load_messages(cfg: SimulationConfig) -> List[Message]:
    if not cfg.inputs.messages:
        return []
    return read_messages(cfg.inputs.messages, cfg.wire)


def load_changes(cfg: SimulationConfig) -> List[ChangeRecord]:
    if not cfg.inputs.changes:
        return []
    return read_changes(cfg.inputs.changes, cfg.wire)


def run_simulation(cfg: SimulationConfig) -> SimulationResult:
    topology = build_topology(cfg)
    messages = load_messages(cfg)
    changes = load_changes(cfg)
    _log.info(
        "simulating %d nodes, %d links, %d messages, %d changes (tie_break=%s split_horizon=%s)",
        len(topology),
        len(topology.edge_list()),
        len(messages),
        len(changes),
        cfg.engine.tie_break.value,
        cfg.engine.split_horizon,
    )

    simulator = Simulator(
        topology=topology,
        messages=messages,
        changes=changes,
        engine=cfg.engine.build(),
        trace=RoundTrace(cfg.trace),
    )
    result = simulator.run()
    write_output(cfg.output, result.rounds, cfg.wire)
    if cfg.summary:
        write_summary(cfg.summary, result)
    return result
