from __future__ import annotations

from typing import Any, List, Sequence, Tuple

import networkx as nx

from .space import Eq, Space, Subset, SubsetCodec, format_point


def _open_masks(codec: SubsetCodec, space: Space) -> List[int]:
    # Opens with points outside the carrier are skipped; `topology_violations` reports them.
    masks: List[int] = []
    for U in space.opens:
        m = codec.try_encode(U)
        if m is not None and m not in masks:
            masks.append(m)
    return masks


def _subset_mask(codec: SubsetCodec, subset: Sequence[Any]) -> int:
    # Points of `subset` outside the carrier cannot affect closure/interior.
    mask = 0
    for x in subset:
        i = codec.index_of(x)
        if i is not None:
            mask |= 1 << i
    return mask


def is_compact(space: Space) -> bool:
    """Every finite space is compact."""
    return True


def neighborhoods(eq: Eq, space: Space, point: Any) -> List[Subset]:
    """Open sets containing `point`, in the order the space lists them."""
    return [tuple(U) for U in space.opens if any(eq(u, point) for u in U)]


def is_hausdorff(eq: Eq, space: Space) -> bool:
    """T2: every pair of distinct points has disjoint open neighbourhoods."""
    codec = SubsetCodec(eq, space.carrier)
    masks = _open_masks(codec, space)
    n = len(codec)
    around = [[m for m in masks if (m >> i) & 1] for i in range(n)]
    for i in range(n):
        for j in range(i + 1, n):
            if not any((u & v) == 0 for u in around[i] for v in around[j]):
                return False
    return True


def is_connected(eq: Eq, space: Space) -> bool:
    """False exactly when some open set other than ∅ and the carrier has an open complement."""
    codec = SubsetCodec(eq, space.carrier)
    masks = set(_open_masks(codec, space))
    full = codec.full
    for m in masks:
        if m == 0 or m == full:
            continue
        if (full & ~m) in masks:
            return False
    return True


def closed_sets(eq: Eq, space: Space) -> List[Subset]:
    codec = SubsetCodec(eq, space.carrier)
    full = codec.full
    return [codec.decode(full & ~m) for m in _open_masks(codec, space)]


def closure(eq: Eq, space: Space, subset: Sequence[Any]) -> Subset:
    """Points every neighbourhood of which meets `subset`."""
    codec = SubsetCodec(eq, space.carrier)
    masks = _open_masks(codec, space)
    s = _subset_mask(codec, subset)
    out = 0
    for i in range(len(codec)):
        if all(m & s for m in masks if (m >> i) & 1):
            out |= 1 << i
    return codec.decode(out)


def interior(eq: Eq, space: Space, subset: Sequence[Any]) -> Subset:
    """Union of the open sets contained in `subset`."""
    codec = SubsetCodec(eq, space.carrier)
    s = _subset_mask(codec, subset)
    out = 0
    for m in _open_masks(codec, space):
        if (m & ~s) == 0:
            out |= m
    return codec.decode(out)


def boundary(eq: Eq, space: Space, subset: Sequence[Any]) -> Subset:
    cl = closure(eq, space, subset)
    inner = interior(eq, space, subset)
    return tuple(x for x in cl if not any(eq(x, y) for y in inner))


def _specialization_indices(codec: SubsetCodec, space: Space) -> List[Tuple[int, int]]:
    masks = _open_masks(codec, space)
    n = len(codec)
    pairs: List[Tuple[int, int]] = []
    for i in range(n):
        around = [m for m in masks if (m >> i) & 1]
        for j in range(n):
            if all((m >> j) & 1 for m in around):
                pairs.append((i, j))
    return pairs


def specialization_order(eq: Eq, space: Space) -> List[Tuple[Any, Any]]:
    """Pairs (x, y) such that every open set containing x also contains y.

    Reflexive and transitive; antisymmetric exactly when the space is T0.
    """
    codec = SubsetCodec(eq, space.carrier)
    return [(codec.carrier[i], codec.carrier[j]) for i, j in _specialization_indices(codec, space)]


def specialization_graph(eq: Eq, space: Space) -> nx.DiGraph:
    """Specialization preorder as a DiGraph on carrier indices.

    Nodes carry `point` and `label` attributes; an edge i -> j means every open set
    containing point i also contains point j. Self-loops are omitted.
    """
    codec = SubsetCodec(eq, space.carrier)
    G = nx.DiGraph()
    for i, x in enumerate(codec.carrier):
        G.add_node(i, point=x, label=format_point(space, x))
    G.add_edges_from((i, j) for i, j in _specialization_indices(codec, space) if i != j)
    return G
