from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml


# Power-set enumeration (discrete spaces, final topologies) is 2^n in the carrier size.
DEFAULT_MAX_POWER_SET_CARRIER = 16

REPORT_FORMATS = ("object", "json", "table")


@dataclass(frozen=True)
class LimitsConfig:
    max_power_set_carrier: int = DEFAULT_MAX_POWER_SET_CARRIER


@dataclass(frozen=True)
class ReportConfig:
    format: str = "table"  # "object" | "json" | "table"


@dataclass(frozen=True)
class EngineConfig:
    limits: LimitsConfig
    report: ReportConfig


def _require(d: Mapping[str, Any], key: str) -> Any:
    if key not in d:
        raise KeyError(f"Missing required config key: {key}")
    return d[key]


def _get(d: Mapping[str, Any], key: str, default: Any) -> Any:
    return d[key] if key in d else default


def default_engine_config() -> EngineConfig:
    return EngineConfig(limits=LimitsConfig(), report=ReportConfig())


def engine_config_from_dict(data: Mapping[str, Any]) -> EngineConfig:
    ldict = dict(_get(data, "limits", {}) or {})
    limits = LimitsConfig(
        max_power_set_carrier=int(_get(ldict, "max_power_set_carrier", DEFAULT_MAX_POWER_SET_CARRIER)),
    )
    if limits.max_power_set_carrier < 0:
        raise ValueError("limits.max_power_set_carrier must be >= 0")

    rdict = dict(_get(data, "report", {}) or {})
    report = ReportConfig(format=str(_get(rdict, "format", "table")))
    if report.format not in REPORT_FORMATS:
        raise ValueError(f"Unknown report.format={report.format!r} (use one of {REPORT_FORMATS})")

    return EngineConfig(limits=limits, report=report)


def load_engine_config(path: str | Path) -> EngineConfig:
    data = load_yaml(path)
    return engine_config_from_dict(data)


def load_yaml(path: str | Path) -> Dict[str, Any]:
    path = Path(path)
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML file {path} must contain a mapping at the top level")
    return data
