from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

Eq = Callable[[Any, Any], bool]
Subset = Tuple[Any, ...]


@dataclass(frozen=True, eq=False)
class Space:
    """Finite topological space: a carrier plus an explicit list of open subsets.

    The topology axioms are a checkable property (see `is_topology`), not an invariant:
    any carrier/opens pair can be built and then validated. Spaces compare by identity,
    which is what composition and the universal constructions use to match shapes.
    `show` only affects diagnostics.
    """

    carrier: Tuple[Any, ...]
    opens: Tuple[Subset, ...]
    show: Optional[Callable[[Any], str]] = None

    @classmethod
    def build(
        cls,
        carrier: Iterable[Any],
        opens: Iterable[Iterable[Any]],
        *,
        show: Optional[Callable[[Any], str]] = None,
    ) -> "Space":
        return cls(
            carrier=tuple(carrier),
            opens=tuple(tuple(U) for U in opens),
            show=show,
        )

    @property
    def size(self) -> int:
        return len(self.carrier)

    def with_show(self, show: Optional[Callable[[Any], str]]) -> "Space":
        if show is None:
            return self
        return Space(carrier=self.carrier, opens=self.opens, show=show)


# ---------------------------------------------------------------------------
# Set operations routed through an equality witness
# ---------------------------------------------------------------------------


def contains(eq: Eq, items: Iterable[Any], x: Any) -> bool:
    return any(eq(item, x) for item in items)


def dedupe(eq: Eq, items: Iterable[Any]) -> List[Any]:
    out: List[Any] = []
    for item in items:
        if not contains(eq, out, item):
            out.append(item)
    return out


def is_subset(eq: Eq, A: Iterable[Any], B: Sequence[Any]) -> bool:
    return all(contains(eq, B, a) for a in A)


def eq_sets(eq: Eq, A: Sequence[Any], B: Sequence[Any]) -> bool:
    """Set equality under `eq` (multiplicity and order are ignored)."""
    return is_subset(eq, A, B) and is_subset(eq, B, A)


def dedupe_sets(eq: Eq, sets: Iterable[Sequence[Any]]) -> List[Subset]:
    unique: List[Subset] = []
    for candidate in sets:
        if not any(eq_sets(eq, existing, candidate) for existing in unique):
            unique.append(tuple(candidate))
    return unique


def union(eq: Eq, A: Sequence[Any], B: Sequence[Any]) -> Subset:
    return tuple(dedupe(eq, list(A) + list(B)))


def intersection(eq: Eq, A: Sequence[Any], B: Sequence[Any]) -> Subset:
    return tuple(a for a in dedupe(eq, A) if contains(eq, B, a))


def complement(eq: Eq, carrier: Sequence[Any], subset: Sequence[Any]) -> Subset:
    return tuple(x for x in carrier if not contains(eq, subset, x))


class SubsetCodec:
    """Bit-mask encoding of subsets of a finite carrier.

    Points are located through the equality witness, so two subsets get the same mask
    exactly when they are equal as sets under `eq`. Bit i stands for the i-th point of
    the deduplicated carrier.
    """

    def __init__(self, eq: Eq, carrier: Iterable[Any]):
        self.eq = eq
        self.carrier: Tuple[Any, ...] = tuple(dedupe(eq, carrier))
        self.full = (1 << len(self.carrier)) - 1

    def __len__(self) -> int:
        return len(self.carrier)

    def index_of(self, x: Any) -> Optional[int]:
        for i, point in enumerate(self.carrier):
            if self.eq(point, x):
                return i
        return None

    def try_encode(self, subset: Iterable[Any]) -> Optional[int]:
        mask = 0
        for x in subset:
            i = self.index_of(x)
            if i is None:
                return None
            mask |= 1 << i
        return mask

    def encode(self, subset: Iterable[Any]) -> int:
        mask = self.try_encode(subset)
        if mask is None:
            raise ValueError("Subset contains points outside the carrier")
        return mask

    def decode(self, mask: int) -> Subset:
        return tuple(x for i, x in enumerate(self.carrier) if (mask >> i) & 1)


# ---------------------------------------------------------------------------
# Diagnostics formatting
# ---------------------------------------------------------------------------


def format_point(space: Optional[Space], value: Any) -> str:
    if space is not None and space.show is not None:
        return space.show(value)
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return str(value)


def format_subset(space: Optional[Space], subset: Iterable[Any]) -> str:
    labels = [format_point(space, x) for x in subset]
    if not labels:
        return "∅"
    return "{" + ", ".join(labels) + "}"


# ---------------------------------------------------------------------------
# Topology axioms
# ---------------------------------------------------------------------------


def topology_violations(eq: Eq, space: Space) -> List[str]:
    """List every failed topology axiom of `space` under `eq` (empty list = topology).

    Checks: every open lies in the carrier, ∅ and the carrier are open, and the union and
    intersection of every pair of opens is again listed. O(|opens|^2) pairs.
    """
    codec = SubsetCodec(eq, space.carrier)
    violations: List[str] = []
    masks: List[int] = []
    for i, U in enumerate(space.opens):
        m = codec.try_encode(U)
        if m is None:
            violations.append(f"open #{i} {format_subset(space, U)} is not contained in the carrier")
            continue
        masks.append(m)

    present = set(masks)
    if 0 not in present:
        violations.append("the empty set is not open")
    if codec.full not in present:
        violations.append("the carrier is not open")

    unique = list(dict.fromkeys(masks))
    for i, a in enumerate(unique):
        for b in unique[i + 1:]:
            if (a | b) not in present:
                violations.append(
                    f"union of {format_subset(space, codec.decode(a))} and "
                    f"{format_subset(space, codec.decode(b))} is not open"
                )
            if (a & b) not in present:
                violations.append(
                    f"intersection of {format_subset(space, codec.decode(a))} and "
                    f"{format_subset(space, codec.decode(b))} is not open"
                )
    return violations


def is_topology(eq: Eq, space: Space) -> bool:
    return not topology_violations(eq, space)


def is_open(eq: Eq, space: Space, subset: Sequence[Any]) -> bool:
    return any(eq_sets(eq, U, subset) for U in space.opens)
