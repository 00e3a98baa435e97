from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from dvsim.core.simulator import SimulationResult


def compute_metrics(result: SimulationResult) -> Dict[str, Any]:
    """Per-round convergence figures plus run totals.

    ``hash_changes`` counts rounds whose routing state differs from the
    round before, so a no-op change that leaves every table intact does
    not count.
    """
    rounds: List[Dict[str, Any]] = []
    hash_changes = 0
    prev_hash = None
    for r in result.rounds:
        change = r.change
        route_hash = r.convergence.route_hash
        if prev_hash is not None and route_hash != prev_hash:
            hash_changes += 1
        prev_hash = route_hash
        rounds.append(
            {
                "round": r.index,
                "change": None if change is None else [change.node1, change.node2, change.cost],
                "action": r.outcome.action.value if r.outcome else None,
                "sweeps": r.convergence.sweeps,
                "updates": r.convergence.updates,
                "route_hash": route_hash,
                "unreachable_messages": sum(1 for rep in r.reports if not rep.reachable),
            }
        )
    return {
        "rounds": len(result.rounds),
        "total_sweeps": sum(r.convergence.sweeps for r in result.rounds),
        "total_updates": sum(r.convergence.updates for r in result.rounds),
        "hash_changes": hash_changes,
        "per_round": rounds,
    }


def write_summary(path: str | Path, result: SimulationResult) -> Dict[str, Any]:
    metrics = compute_metrics(result)
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(metrics, indent=2, ensure_ascii=False, sort_keys=True) + "\n", encoding="utf-8")
    return metrics
