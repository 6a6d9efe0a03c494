"""Shared plumbing for the factorization checks of products, equalizers and pullbacks.

Every `factor_through_*` builds its report with these helpers so that legs are
re-verified the same way and any failure lands on the mediator entry as text.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from .continuity import ContinuousMap
from .space import Eq, Space, format_point
from .universal import UniversalEntry, make_leg, make_mediator


def first_disagreement(
    eq: Eq,
    points: Sequence[Any],
    f: Callable[[Any], Any],
    g: Callable[[Any], Any],
) -> Optional[Tuple[Any, Any, Any]]:
    """First (x, f(x), g(x)) with f(x) != g(x) under `eq`, or None when they agree."""
    for x in points:
        fx = f(x)
        gx = g(x)
        if not eq(fx, gx):
            return x, fx, gx
    return None


def require_agreement(
    eq: Eq,
    points: Sequence[Any],
    f: Callable[[Any], Any],
    g: Callable[[Any], Any],
    *,
    message: str,
    domain: Optional[Space] = None,
    codomain: Optional[Space] = None,
) -> None:
    """Raise ValueError(`message` + the offending point) unless f and g agree on `points`."""
    bad = first_disagreement(eq, points, f, g)
    if bad is None:
        return
    x, fx, gx = bad
    raise ValueError(
        f"{message} at {format_point(domain, x)} "
        f"({format_point(codomain, fx)} vs {format_point(codomain, gx)})"
    )


def canonical_legs(legs: Iterable[Tuple[str, ContinuousMap]]) -> List[UniversalEntry]:
    """Report entries for the canonical legs, each re-verified against its live spaces."""
    entries: List[UniversalEntry] = []
    for name, arrow in legs:
        if arrow.witness.verify():
            entries.append(make_leg(name, arrow))
        else:
            entries.append(make_leg(name, arrow, holds=False, failure=f"{name} is not continuous."))
    return entries


def failed_mediator(name: str, error: Exception, metadata: Any = None) -> UniversalEntry:
    failure = str(error) or type(error).__name__
    return make_mediator(name, None, metadata, holds=False, failure=failure)
