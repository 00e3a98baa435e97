from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List

from dvsim.core.routing_table import Route
from dvsim.core.simulator import RoundResult
from dvsim.core.types import MessageReport, NodeId
from dvsim.io.wire import DEFAULT_WIRE, WireFormat

_log = logging.getLogger("dvsim.io")


def format_tables(tables: Dict[NodeId, List[Route]], wire: WireFormat = DEFAULT_WIRE) -> List[str]:
    lines: List[str] = []
    for node_id in sorted(tables):
        for route in tables[node_id]:
            lines.append(
                f"{route.destination} {wire.format_hop(route.next_hop)} {wire.format_cost(route.cost)}"
            )
        lines.append("")
    return lines


def format_report(report: MessageReport) -> str:
    msg = report.message
    head = f"from {msg.source} to {msg.destination}"
    if not report.reachable:
        return f"{head} cost infinite hops unreachable message {msg.content}"
    hops = "".join(f"{h} " for h in report.hops or ())
    return f"{head} cost {int(report.cost)} hops {hops}message {msg.content}"


def format_reports(reports: Iterable[MessageReport]) -> List[str]:
    lines: List[str] = []
    for report in reports:
        lines.append(format_report(report))
        lines.append("")
    return lines


def format_round(round_result: RoundResult, wire: WireFormat = DEFAULT_WIRE) -> List[str]:
    return format_tables(round_result.tables, wire) + format_reports(round_result.reports)


def write_output(
    path: str | Path,
    rounds: Iterable[RoundResult],
    wire: WireFormat = DEFAULT_WIRE,
) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with p.open("w", encoding="utf-8") as f:
        for round_result in rounds:
            for line in format_round(round_result, wire):
                f.write(line + "\n")
            count += 1
    _log.info("wrote %d rounds to %s", count, p)
    return p
