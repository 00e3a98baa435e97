from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Dict, List, Optional

from dvsim.cli.run import load_effective_config, run_simulation
from dvsim.config import load_yaml_config, validate_config
from dvsim.core.convergence import TieBreak
from dvsim.core.errors import ConfigError, DvsimError
from dvsim.eval.metrics import compute_metrics

_log = logging.getLogger("dvsim.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dvsim", description="Distance-vector routing convergence simulator"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="Run a simulation and write the routing trace")
    p_run.add_argument("topology", nargs="?", help="Topology file: '<node1> <node2> <cost>' per line.")
    p_run.add_argument("messages", nargs="?", help="Message file: '<src> <dst> <text>' per line.")
    p_run.add_argument("changes", nargs="?", help="Change file: '<node1> <node2> <cost>' per line.")
    p_run.add_argument("output", nargs="?", help="Output file (default: output.txt).")
    p_run.add_argument("--config", help="YAML scenario/config file.")
    p_run.add_argument("--trace", help="Write a JSONL event trace to this path.")
    p_run.add_argument("--summary", help="Write a JSON run summary to this path.")
    p_run.add_argument("--tie-break", choices=[t.value for t in TieBreak])
    p_run.add_argument("--no-split-horizon", action="store_true")
    p_run.add_argument("--max-sweeps", type=int)

    p_validate = sub.add_parser("validate", help="Validate a config file")
    p_validate.add_argument("--config", required=True)

    return parser


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key in ("topology", "messages", "changes", "output", "trace", "summary"):
        if getattr(args, key):
            out[key] = getattr(args, key)
    if args.tie_break:
        out["tie_break"] = args.tie_break
    if args.no_split_horizon:
        out["split_horizon"] = False
    if args.max_sweeps is not None:
        out["max_sweeps"] = args.max_sweeps
    return out


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "validate":
        try:
            errors = validate_config(load_yaml_config(args.config))
        except ConfigError as exc:
            errors = [str(exc)]
        if errors:
            print(json.dumps({"ok": False, "errors": errors}, ensure_ascii=False, indent=2))
            return 1
        print(json.dumps({"ok": True}, ensure_ascii=False, indent=2))
        return 0

    try:
        cfg = load_effective_config(args.config, _overrides(args))
        result = run_simulation(cfg)
    except DvsimError as exc:
        _log.error("%s", exc)
        return 1

    print(json.dumps(compute_metrics(result), indent=2, ensure_ascii=False, sort_keys=True))
    return 0
