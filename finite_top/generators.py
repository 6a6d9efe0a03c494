from __future__ import annotations

from collections import deque
from typing import Any, Deque, Iterable, List, NamedTuple, Sequence

import numpy as np

from .config import DEFAULT_MAX_POWER_SET_CARRIER
from .space import Eq, Space, SubsetCodec, contains, dedupe, format_subset


class ProductPoint(NamedTuple):
    x: Any
    y: Any


class SumPoint(NamedTuple):
    tag: str  # "inl" | "inr"
    value: Any


def inl(value: Any) -> SumPoint:
    return SumPoint("inl", value)


def inr(value: Any) -> SumPoint:
    return SumPoint("inr", value)


def pair_eq(eq_x: Eq, eq_y: Eq) -> Eq:
    """Componentwise equality witness for `ProductPoint`s."""

    def eq(a: ProductPoint, b: ProductPoint) -> bool:
        return eq_x(a.x, b.x) and eq_y(a.y, b.y)

    return eq


def sum_eq(eq_x: Eq, eq_y: Eq) -> Eq:
    """Equality witness for `SumPoint`s: same side, equal payload on that side."""

    def eq(a: SumPoint, b: SumPoint) -> bool:
        if a.tag != b.tag:
            return False
        if a.tag == "inl":
            return eq_x(a.value, b.value)
        return eq_y(a.value, b.value)

    return eq


def eq_structural(a: Any, b: Any) -> bool:
    return a == b


def _popcount(mask: int) -> int:
    return bin(mask).count("1")


def _ordered(masks: Iterable[int]) -> List[int]:
    # smaller sets first, then by carrier position
    return sorted(set(masks), key=lambda m: (_popcount(m), m))


def close_under_union_intersection(seeds: Iterable[int]) -> List[int]:
    """Least family of masks containing `seeds` and closed under pairwise | and &.

    Worklist saturation: every newly discovered mask is combined with everything seen so
    far. Terminates because there are at most 2^n masks over an n-point carrier.
    """
    seen: set[int] = set()
    found: List[int] = []
    queue: Deque[int] = deque()

    def push(m: int) -> None:
        if m not in seen:
            seen.add(m)
            found.append(m)
            queue.append(m)

    for m in seeds:
        push(int(m))
    while queue:
        a = queue.popleft()
        for b in list(found):
            push(a | b)
            push(a & b)
    return found


def close_under_intersection(seeds: Iterable[int], full: int) -> List[int]:
    """Finite-intersection closure; the empty intersection is `full` (the carrier)."""
    seen: set[int] = set()
    found: List[int] = []
    queue: Deque[int] = deque()

    def push(m: int) -> None:
        if m not in seen:
            seen.add(m)
            found.append(m)
            queue.append(m)

    push(full)
    for m in seeds:
        push(int(m))
    while queue:
        a = queue.popleft()
        for b in list(found):
            push(a & b)
    return found


def _space_from_masks(codec: SubsetCodec, masks: Iterable[int], show=None) -> Space:
    return Space.build(codec.carrier, [codec.decode(m) for m in _ordered(masks)], show=show)


def _encode_family(codec: SubsetCodec, sets: Iterable[Sequence[Any]], *, what: str) -> List[int]:
    masks: List[int] = []
    for S in sets:
        m = codec.try_encode(S)
        if m is None:
            raise ValueError(f"{what}: {format_subset(None, S)} contains points outside the carrier")
        masks.append(m)
    return masks


def power_set_masks(n: int, *, max_carrier: int = DEFAULT_MAX_POWER_SET_CARRIER) -> np.ndarray:
    """Boolean membership table of all 2^n subsets: row m has bit i of m in column i."""
    if n > int(max_carrier):
        raise ValueError(
            f"Power-set enumeration over {n} points exceeds max_carrier={max_carrier} (2^{n} subsets)"
        )
    masks = np.arange(1 << n, dtype=np.int64)
    return ((masks[:, None] >> np.arange(n, dtype=np.int64)) & 1).astype(bool)


def discrete(
    carrier: Iterable[Any],
    *,
    eq: Eq = eq_structural,
    max_carrier: int = DEFAULT_MAX_POWER_SET_CARRIER,
) -> Space:
    """Discrete topology: every subset is open (2^n opens, enumerated by bit mask).

    Duplicate carrier points are dropped under `eq` (plain `==` by default) first.
    """
    points = dedupe(eq, carrier)
    table = power_set_masks(len(points), max_carrier=max_carrier)
    opens = [tuple(points[int(i)] for i in np.flatnonzero(row)) for row in table]
    return Space.build(points, opens)


def indiscrete(carrier: Iterable[Any], *, eq: Eq = eq_structural) -> Space:
    """Indiscrete topology {∅, carrier}; a single open set when the carrier is empty."""
    points = dedupe(eq, carrier)
    if not points:
        return Space.build(points, [()])
    return Space.build(points, [(), tuple(points)])


def from_base(eq: Eq, carrier: Iterable[Any], base: Iterable[Sequence[Any]]) -> Space:
    """Topology generated by `base`: ∅, the carrier and the base sets, closed under ∪ and ∩."""
    codec = SubsetCodec(eq, carrier)
    seeds = [0, codec.full] + _encode_family(codec, base, what="from_base")
    return _space_from_masks(codec, close_under_union_intersection(seeds))


def from_subbase(eq: Eq, carrier: Iterable[Any], subbase: Iterable[Sequence[Any]]) -> Space:
    """Topology generated by a subbasis: finite intersections first, then `from_base`."""
    codec = SubsetCodec(eq, carrier)
    seeds = _encode_family(codec, subbase, what="from_subbase")
    base_masks = close_under_intersection(seeds, codec.full)
    return from_base(eq, codec.carrier, [codec.decode(m) for m in base_masks])


def product(eq_x: Eq, eq_y: Eq, tx: Space, ty: Space) -> Space:
    """Product topology on X×Y: generated by the boxes U×V, closed as in `from_base`.

    The closure is seeded with ∅ and the whole of X×Y as well as the boxes, so the
    result is a topology even when a factor does not list its own carrier as open.
    """
    cx = SubsetCodec(eq_x, tx.carrier)
    cy = SubsetCodec(eq_y, ty.carrier)
    ny = len(cy)
    points = [ProductPoint(x, y) for x in cx.carrier for y in cy.carrier]
    codec = SubsetCodec(pair_eq(eq_x, eq_y), points)

    u_masks = _encode_family(cx, tx.opens, what="product (left factor)")
    v_masks = _encode_family(cy, ty.opens, what="product (right factor)")
    boxes: List[int] = [0, codec.full]
    for mu in u_masks:
        for mv in v_masks:
            box = 0
            for i in range(len(cx)):
                if (mu >> i) & 1:
                    box |= mv << (i * ny)
            boxes.append(box)
    return _space_from_masks(codec, close_under_union_intersection(boxes))


def coproduct(eq_x: Eq, eq_y: Eq, tx: Space, ty: Space) -> Space:
    """Disjoint union X⊔Y: opens are exactly inl(U) ∪ inr(V)."""
    cx = SubsetCodec(eq_x, tx.carrier)
    cy = SubsetCodec(eq_y, ty.carrier)
    nx_ = len(cx)
    points = [inl(x) for x in cx.carrier] + [inr(y) for y in cy.carrier]
    codec = SubsetCodec(sum_eq(eq_x, eq_y), points)

    u_masks = _encode_family(cx, tx.opens, what="coproduct (left summand)")
    v_masks = _encode_family(cy, ty.opens, what="coproduct (right summand)")
    opens = [mu | (mv << nx_) for mu in u_masks for mv in v_masks]
    return _space_from_masks(codec, opens)


def subspace(eq: Eq, space: Space, subset: Iterable[Any]) -> Space:
    """Subspace topology on `subset`: opens are U ∩ subset for U open in `space`."""
    points = dedupe(eq, subset)
    for s in points:
        if not contains(eq, space.carrier, s):
            raise ValueError(f"subspace: point {s!r} is not in the ambient carrier")
    codec = SubsetCodec(eq, points)
    masks = []
    for U in space.opens:
        masks.append(codec.encode([s for s in codec.carrier if contains(eq, U, s)]))
    return _space_from_masks(codec, masks, show=space.show)
