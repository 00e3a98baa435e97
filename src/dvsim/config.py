from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from dvsim.core.convergence import ConvergenceEngine, TieBreak
from dvsim.core.errors import ConfigError
from dvsim.io.wire import ID_TYPES, WireFormat

DEFAULT_OUTPUT = "output.txt"

_WIRE_DEFAULTS = {"infinite_cost": 9999, "no_hop": -1, "remove_cost": -999}


@dataclass(frozen=True)
class InputPaths:
    topology: Optional[str] = None
    messages: Optional[str] = None
    changes: Optional[str] = None


@dataclass(frozen=True)
class EngineConfig:
    tie_break: TieBreak = TieBreak.FIRST_FOUND
    split_horizon: bool = True
    max_sweeps: Optional[int] = None

    def build(self) -> ConvergenceEngine:
        return ConvergenceEngine(
            tie_break=self.tie_break,
            split_horizon=self.split_horizon,
            max_sweeps=self.max_sweeps,
        )


@dataclass(frozen=True)
class SimulationConfig:
    inputs: InputPaths = field(default_factory=InputPaths)
    output: str = DEFAULT_OUTPUT
    engine: EngineConfig = field(default_factory=EngineConfig)
    wire: WireFormat = field(default_factory=WireFormat)
    trace: Optional[str] = None
    summary: Optional[str] = None


def validate_config(cfg: Dict[str, Any]) -> list[str]:
    errors: list[str] = []

    for section in ("inputs", "engine", "wire"):
        if not isinstance(cfg.get(section, {}), dict):
            errors.append(f"'{section}' must be a dict")

    engine = cfg.get("engine", {})
    if isinstance(engine, dict):
        tie_break = engine.get("tie_break", TieBreak.FIRST_FOUND.value)
        if not isinstance(tie_break, str) or tie_break not in {t.value for t in TieBreak}:
            errors.append(f"engine.tie_break must be one of {[t.value for t in TieBreak]}")
        max_sweeps = _as_int(engine.get("max_sweeps"))
        if engine.get("max_sweeps") is not None:
            if max_sweeps is None:
                errors.append("engine.max_sweeps must be an integer")
            elif max_sweeps <= 0:
                errors.append("engine.max_sweeps must be > 0")

    wire = cfg.get("wire", {})
    if isinstance(wire, dict):
        if wire.get("id_type", "int") not in ID_TYPES:
            errors.append(f"wire.id_type must be one of {list(ID_TYPES)}")
        sentinels: Dict[str, int] = {}
        for key, default in _WIRE_DEFAULTS.items():
            value = _as_int(wire.get(key, default))
            if value is None:
                errors.append(f"wire.{key} must be an integer")
            else:
                sentinels[key] = value
        remove_cost = sentinels.get("remove_cost")
        if remove_cost is not None and remove_cost >= 0:
            errors.append("wire.remove_cost must be negative")
        if remove_cost is not None and sentinels.get("infinite_cost") == remove_cost:
            errors.append("wire.infinite_cost and wire.remove_cost must differ")

    return errors


def config_from_dict(raw: Dict[str, Any], base_dir: str | Path | None = None) -> SimulationConfig:
    errors = validate_config(raw)
    if errors:
        raise ConfigError("Invalid config: " + "; ".join(errors))

    inputs_raw = dict(raw.get("inputs", {}))
    engine_raw = dict(raw.get("engine", {}))
    wire_raw = dict(raw.get("wire", {}))

    return SimulationConfig(
        inputs=InputPaths(
            topology=_resolve(inputs_raw.get("topology"), base_dir),
            messages=_resolve(inputs_raw.get("messages"), base_dir),
            changes=_resolve(inputs_raw.get("changes"), base_dir),
        ),
        output=_resolve(raw.get("output"), base_dir) or DEFAULT_OUTPUT,
        engine=EngineConfig(
            tie_break=TieBreak(engine_raw.get("tie_break", TieBreak.FIRST_FOUND.value)),
            split_horizon=bool(engine_raw.get("split_horizon", True)),
            max_sweeps=_as_int(engine_raw.get("max_sweeps")),
        ),
        wire=WireFormat(
            id_type=str(wire_raw.get("id_type", "int")),
            **{key: int(wire_raw.get(key, default)) for key, default in _WIRE_DEFAULTS.items()},
        ),
        trace=_resolve(raw.get("trace"), base_dir),
        summary=_resolve(raw.get("summary"), base_dir),
    )


def load_yaml_config(path: str | Path) -> Dict[str, Any]:
    cfg_path = Path(path)
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {cfg_path}: {exc}") from exc
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Malformed YAML in {cfg_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {cfg_path}")
    return data


def load_config(path: str | Path) -> SimulationConfig:
    cfg_path = Path(path)
    return config_from_dict(load_yaml_config(cfg_path), base_dir=cfg_path.resolve().parent)


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _resolve(value: Any, base_dir: str | Path | None) -> Optional[str]:
    if value in (None, ""):
        return None
    p = Path(str(value))
    if base_dir is not None and not p.is_absolute():
        p = Path(base_dir) / p
    return str(p)
