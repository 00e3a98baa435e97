from __future__ import annotations

import json
from pathlib import Path

from dvsim.core.changes import ChangeAction
from dvsim.core.logging import RoundTrace
from dvsim.core.simulator import Simulator
from dvsim.core.topology import Topology
from dvsim.core.types import ChangeRecord, Link, Message
from dvsim.eval.metrics import compute_metrics, write_summary
from dvsim.io.output import format_round, write_output

ROUND_CONNECTED = """\
1 1 0
2 2 1
3 2 2

1 1 1
2 2 0
3 3 1

1 2 2
2 2 1
3 3 0

from 1 to 3 cost 2 hops 1 2 message hello

from 3 to 1 cost 2 hops 3 2 message hi there

"""

ROUND_SPLIT = """\
1 1 0
2 2 1
3 -1 9999

1 1 1
2 2 0
3 -1 9999

1 -1 9999
2 -1 9999
3 3 0

from 1 to 3 cost infinite hops unreachable message hello

from 3 to 1 cost infinite hops unreachable message hi there

"""


def _simulator(trace: RoundTrace | None = None) -> Simulator:
    return Simulator(
        topology=Topology.from_links([Link(1, 2, 1), Link(2, 3, 1), Link(1, 3, 5)]),
        messages=[Message(1, 3, "hello"), Message(3, 1, "hi there")],
        changes=[ChangeRecord(1, 3, None), ChangeRecord(2, 3, None)],
        trace=trace,
    )


def test_rounds_follow_change_sequence() -> None:
    result = _simulator().run()

    assert [r.index for r in result.rounds] == [0, 1, 2]
    assert result.rounds[0].change is None
    assert result.rounds[1].outcome.action is ChangeAction.REMOVED
    assert result.rounds[1].change == ChangeRecord(1, 3, None)
    # dropping the expensive direct link leaves the shortest paths intact
    assert result.route_hashes[0] == result.route_hashes[1]
    assert result.route_hashes[1] != result.route_hashes[2]


def test_output_text_matches_wire_format(tmp_path: Path) -> None:
    result = _simulator().run()

    assert "\n".join(format_round(result.rounds[0])) + "\n" == ROUND_CONNECTED
    out = write_output(tmp_path / "out" / "output.txt", result.rounds)
    assert out.read_text(encoding="utf-8") == ROUND_CONNECTED * 2 + ROUND_SPLIT


def test_simulation_is_deterministic() -> None:
    run1 = _simulator().run()
    run2 = _simulator().run()
    assert run1.route_hashes == run2.route_hashes


def test_trace_records_changes_and_rounds(tmp_path: Path) -> None:
    trace = tmp_path / "trace.jsonl"
    _simulator(RoundTrace(trace)).run()

    rows = [json.loads(line) for line in trace.read_text(encoding="utf-8").splitlines()]
    assert [row["event"] for row in rows] == [
        "round_converged",
        "change_applied",
        "round_converged",
        "change_applied",
        "round_converged",
    ]
    assert rows[1]["action"] == "removed"
    assert rows[1]["previous_cost"] == 5
    assert rows[-1]["unreachable_messages"] == 2
    assert rows[0]["reports"][0] == {"from": 1, "to": 3, "cost": 2, "hops": [1, 2]}
    assert rows[-1]["reports"][0]["cost"] is None


def test_metrics_summarize_rounds() -> None:
    metrics = compute_metrics(_simulator().run())

    assert metrics["rounds"] == 3
    assert metrics["hash_changes"] == 1
    assert [r["unreachable_messages"] for r in metrics["per_round"]] == [0, 0, 2]
    assert metrics["per_round"][2]["change"] == [2, 3, None]
    assert metrics["total_sweeps"] == sum(r["sweeps"] for r in metrics["per_round"])


def test_noop_change_does_not_count_as_hash_change(tmp_path: Path) -> None:
    sim = Simulator(
        topology=Topology.from_links([Link(1, 2, 1), Link(2, 3, 1)]),
        changes=[ChangeRecord(1, 2, 1), ChangeRecord(2, 3, 4)],
    )
    result = sim.run()
    summary = tmp_path / "nested" / "summary.json"
    metrics = write_summary(summary, result)

    assert [r["action"] for r in metrics["per_round"]] == [None, "noop", "updated"]
    assert metrics["hash_changes"] == 1
    assert json.loads(summary.read_text(encoding="utf-8")) == metrics


def test_node_stranded_by_change_is_unreachable() -> None:
    sim = Simulator(
        topology=Topology.from_links([Link(1, 2, 1), Link(2, 4, 1)]),
        messages=[Message(1, 4, "anyone?")],
        changes=[ChangeRecord(2, 4, None)],
    )
    result = sim.run()

    assert result.rounds[0].reports[0].hops == (1, 2)
    report = result.rounds[1].reports[0]
    assert not report.reachable
    routes = {r.destination: r for r in result.rounds[1].tables[4]}
    assert not routes[1].reachable
    assert routes[4].cost == 0
