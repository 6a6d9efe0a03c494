from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd

from .config import REPORT_FORMATS
from .continuity import ContinuousMap


@dataclass(frozen=True)
class RegistryEntry:
    tag: str
    morphism: ContinuousMap


@dataclass(frozen=True)
class RegistryResult:
    """Outcome of re-checking one registered map.

    `holds` is the verdict recorded at construction, `verified` the verdict of re-running
    the check now, `failures` the violating opens as text.
    """
    tag: str
    holds: bool
    verified: bool
    failures: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.holds and self.verified


class ContinuityRegistry:
    """Ordered, append-only collection of tagged continuous maps checked as a batch."""

    def __init__(self) -> None:
        self._entries: List[RegistryEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def register(self, tag: str, morphism: ContinuousMap) -> RegistryEntry:
        if any(e.tag == tag for e in self._entries):
            raise ValueError(f"Continuity registry already has a map tagged {tag!r}")
        entry = RegistryEntry(tag=tag, morphism=morphism)
        self._entries.append(entry)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def entries(self) -> List[RegistryEntry]:
        return list(self._entries)

    def run_all(self) -> List[RegistryResult]:
        results: List[RegistryResult] = []
        for e in self._entries:
            m = e.morphism
            results.append(
                RegistryResult(
                    tag=e.tag,
                    holds=m.witness.holds,
                    verified=m.witness.verify(),
                    failures=tuple(m.witness.describe(m.source, m.target)),
                )
            )
        return results

    def to_frame(self, results: Optional[List[RegistryResult]] = None) -> pd.DataFrame:
        rows = []
        for r in (self.run_all() if results is None else results):
            rows.append({
                "tag": r.tag,
                "holds": r.holds,
                "verified": r.verified,
                "status": "ok" if r.ok else "FAIL",
                "failures": "; ".join(r.failures),
            })
        return pd.DataFrame(rows, columns=["tag", "holds", "verified", "status", "failures"])

    def summarize(self, fmt: str = "table") -> Union[Dict[str, Any], str]:
        """Pass/fail summary as a plain dict ("object"), a JSON string or a text table."""
        if fmt not in REPORT_FORMATS:
            raise ValueError(f"Unknown summary format {fmt!r} (use one of {REPORT_FORMATS})")
        results = self.run_all()
        passed = sum(1 for r in results if r.ok)
        summary: Dict[str, Any] = {
            "total": len(results),
            "passed": passed,
            "failed": len(results) - passed,
            "results": [asdict(r) for r in results],
        }
        if fmt == "object":
            return summary
        if fmt == "json":
            return json.dumps(summary, indent=2, sort_keys=True)

        df = self.to_frame(results)
        footer = f"{passed}/{len(results)} maps continuous"
        if df.empty:
            return footer
        return df.to_string(index=False) + "\n" + footer
