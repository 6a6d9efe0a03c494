from __future__ import annotations

import argparse
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .config import REPORT_FORMATS, EngineConfig, _get, _require, default_engine_config, load_engine_config, load_yaml
from .continuity import ContinuousMap, continuity_witness
from .generators import discrete, from_base, from_subbase, indiscrete
from .registry import ContinuityRegistry
from .space import Space, contains, dedupe, format_point, topology_violations

GENERATORS = ("discrete", "indiscrete", "base", "subbase")


def eq_value(a: Any, b: Any) -> bool:
    """Structural equality of YAML values."""
    return a == b


@dataclass
class CheckOutcome:
    ok: bool = True
    lines: List[str] = field(default_factory=list)
    spaces: Dict[str, Space] = field(default_factory=dict)
    registry: ContinuityRegistry = field(default_factory=ContinuityRegistry)

    def fail(self, line: str) -> None:
        self.ok = False
        self.lines.append(line)


def build_space(name: str, decl: Mapping[str, Any], *, max_carrier: int) -> Space:
    carrier = dedupe(eq_value, _require(decl, "carrier") or [])
    if "opens" in decl:
        return Space.build(carrier, decl["opens"] or [])

    generator = str(_require(decl, "generator"))
    if generator == "discrete":
        return discrete(carrier, max_carrier=max_carrier)
    if generator == "indiscrete":
        return indiscrete(carrier)
    if generator == "base":
        return from_base(eq_value, carrier, _require(decl, "sets") or [])
    if generator == "subbase":
        return from_subbase(eq_value, carrier, _require(decl, "sets") or [])
    raise ValueError(f"space {name!r}: unknown generator {generator!r} (use one of {GENERATORS})")


def _mapping_fn(tag: str, mapping: Mapping[Any, Any]):
    def fn(x: Any) -> Any:
        if x not in mapping:
            raise KeyError(f"map {tag!r} has no image for {x!r}")
        return mapping[x]

    return fn


def check_document(doc: Mapping[str, Any], cfg: Optional[EngineConfig] = None) -> CheckOutcome:
    """Validate every declared space, then certify every declared map between them."""
    cfg = cfg or default_engine_config()
    out = CheckOutcome()

    for name, decl in (_get(doc, "spaces", {}) or {}).items():
        try:
            space = build_space(name, decl, max_carrier=cfg.limits.max_power_set_carrier)
        except (KeyError, ValueError) as e:
            out.fail(f"[finite_top] space {name}: cannot build ({e})")
            continue
        violations = topology_violations(eq_value, space)
        if violations:
            out.fail(f"[finite_top] space {name}: NOT a topology")
            out.lines.extend(f"  - {v}" for v in violations)
            continue
        out.spaces[name] = space
        out.lines.append(f"[finite_top] space {name}: ok ({space.size} points, {len(space.opens)} opens)")

    for index, decl in enumerate(_get(doc, "maps", []) or []):
        try:
            tag = str(_require(decl, "tag"))
            source_name = _require(decl, "source")
            target_name = _require(decl, "target")
            mapping = dict(_require(decl, "mapping") or {})
        except (KeyError, TypeError, ValueError) as e:
            out.fail(f"[finite_top] map #{index}: cannot read ({e})")
            continue
        if any(e.tag == tag for e in out.registry.entries()):
            out.fail(f"[finite_top] map {tag}: duplicate tag")
            continue
        if source_name not in out.spaces or target_name not in out.spaces:
            out.fail(f"[finite_top] map {tag}: source or target space is missing or invalid")
            continue
        source, target = out.spaces[source_name], out.spaces[target_name]
        fn = _mapping_fn(tag, mapping)

        outside = [x for x in source.carrier if x not in mapping or not contains(eq_value, target.carrier, mapping[x])]
        if outside:
            shown = ", ".join(format_point(source, x) for x in outside)
            out.fail(f"[finite_top] map {tag}: no image in {target_name} for {shown}")
            continue

        witness = continuity_witness(source, target, eq_value, eq_value, fn)
        if not witness.holds:
            out.fail(f"[finite_top] map {tag}: NOT continuous")
            out.lines.extend(f"  - {line}" for line in witness.describe(source, target))
            continue
        out.registry.register(
            tag,
            ContinuousMap(source=source, target=target, eq_source=eq_value, eq_target=eq_value, fn=fn, witness=witness),
        )
        out.lines.append(f"[finite_top] map {tag}: continuous")
    return out


def main() -> None:
    ap = argparse.ArgumentParser(description="Check finite topological spaces and continuous maps from YAML.")
    ap.add_argument("--spaces", type=str, required=True, help="YAML file declaring spaces and maps")
    ap.add_argument("--config", type=str, default=None, help="Engine config YAML (limits, report format)")
    ap.add_argument("--format", type=str, default=None, choices=REPORT_FORMATS, help="Override report.format")
    args = ap.parse_args()

    cfg = load_engine_config(Path(args.config)) if args.config else default_engine_config()
    fmt = args.format or cfg.report.format

    outcome = check_document(load_yaml(Path(args.spaces)), cfg)
    for line in outcome.lines:
        print(line)

    if len(outcome.registry):
        summary = outcome.registry.summarize(fmt)
        print(summary if isinstance(summary, str) else json.dumps(summary, indent=2, sort_keys=True, default=str))
    if not outcome.ok:
        raise SystemExit(1)
    print("[finite_top] all spaces and maps OK")


if __name__ == "__main__":
    main()
