from __future__ import annotations

import json
import math
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from dvsim.core.types import MessageReport

if TYPE_CHECKING:
    from dvsim.core.changes import ChangeOutcome
    from dvsim.core.convergence import ConvergenceResult


class RoundTrace:
    """JSON-lines trace of a simulation run, one row per applied change and
    one per converged round. A ``None`` path disables it.

    Costs that are infinite are written as ``null`` so every row stays
    valid JSON.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path else None
        self._fh = None
        if self._path:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self._path.open("w", encoding="utf-8")

    @property
    def enabled(self) -> bool:
        return self._fh is not None

    def change_applied(self, index: int, outcome: "ChangeOutcome") -> None:
        change = outcome.change
        self._write(
            {
                "event": "change_applied",
                "round": index,
                "node1": change.node1,
                "node2": change.node2,
                "cost": change.cost,
                "previous_cost": outcome.previous_cost,
                "action": outcome.action.value,
            }
        )

    def round_converged(
        self,
        index: int,
        nodes: int,
        links: int,
        convergence: "ConvergenceResult",
        reports: List[MessageReport],
    ) -> None:
        self._write(
            {
                "event": "round_converged",
                "round": index,
                "nodes": nodes,
                "links": links,
                "sweeps": convergence.sweeps,
                "updates": convergence.updates,
                "route_hash": convergence.route_hash,
                "unreachable_messages": sum(1 for r in reports if not r.reachable),
                "reports": [_report_row(r) for r in reports],
            }
        )

    def close(self) -> None:
        if self._fh:
            self._fh.close()
            self._fh = None

    def _write(self, row: Dict[str, Any]) -> None:
        if not self._fh:
            return
        self._fh.write(json.dumps(row, sort_keys=True, default=str) + "\n")
        self._fh.flush()


def _report_row(report: MessageReport) -> Dict[str, Any]:
    return {
        "from": report.message.source,
        "to": report.message.destination,
        "cost": _finite_or_none(report.cost),
        "hops": list(report.hops) if report.hops is not None else None,
    }


def _finite_or_none(cost: Optional[float]) -> Optional[float]:
    if cost is None or not math.isfinite(cost):
        return None
    return cost
