from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Sequence

import numpy as np

from .config import DEFAULT_MAX_POWER_SET_CARRIER
from .errors import AxiomViolation
from .generators import from_subbase, power_set_masks
from .space import Eq, Space, SubsetCodec, contains, topology_violations


@dataclass(frozen=True)
class InitialLeg:
    """A map out of the prospective carrier into an existing space."""
    target: Space
    eq_target: Eq
    fn: Callable[[Any], Any]


@dataclass(frozen=True)
class FinalLeg:
    """A map from an existing space into the prospective carrier."""
    source: Space
    eq_source: Eq
    fn: Callable[[Any], Any]


def preimage(points: Iterable[Any], fn: Callable[[Any], Any], eq_target: Eq, V: Sequence[Any]) -> List[Any]:
    """{x in points : fn(x) ∈ V}, membership decided by `eq_target`."""
    return [x for x in points if contains(eq_target, V, fn(x))]


def initial_topology(eq: Eq, carrier: Iterable[Any], legs: Sequence[InitialLeg]) -> Space:
    """Coarsest topology on `carrier` making every leg continuous.

    The subbasis is every preimage of every open of every leg's target.
    """
    points = list(carrier)
    subbase: List[List[Any]] = []
    for leg in legs:
        for V in leg.target.opens:
            subbase.append(preimage(points, leg.fn, leg.eq_target, V))
    return from_subbase(eq, points, subbase)


def final_topology(
    eq: Eq,
    carrier: Iterable[Any],
    legs: Sequence[FinalLeg],
    *,
    max_carrier: int = DEFAULT_MAX_POWER_SET_CARRIER,
) -> Space:
    """Finest topology on `carrier` making every leg continuous.

    Enumerates all 2^n candidate subsets and keeps those whose preimage under every leg is
    open in that leg's source. Exponential in |carrier|; refuses carriers above `max_carrier`.
    """
    codec = SubsetCodec(eq, carrier)
    table = power_set_masks(len(codec), max_carrier=max_carrier)

    # per leg: the source's open masks, and each source point's image index in the carrier
    leg_data = []
    for leg in legs:
        src = SubsetCodec(leg.eq_source, leg.source.carrier)
        open_masks = set()
        for U in leg.source.opens:
            m = src.try_encode(U)
            if m is not None:
                open_masks.add(m)
        image_index = [codec.index_of(leg.fn(x)) for x in src.carrier]
        leg_data.append((open_masks, image_index))

    keep: List[int] = []
    for m, row in enumerate(table):
        members = np.flatnonzero(row)
        member_set = set(int(i) for i in members)
        ok = True
        for open_masks, image_index in leg_data:
            pre = 0
            for j, idx in enumerate(image_index):
                if idx is not None and idx in member_set:
                    pre |= 1 << j
            if pre not in open_masks:
                ok = False
                break
        if ok:
            keep.append(m)

    if 0 not in keep:
        keep.insert(0, 0)
    if codec.full not in keep:
        keep.append(codec.full)

    space = Space.build(codec.carrier, [codec.decode(m) for m in keep])
    violations = topology_violations(eq, space)
    if violations:
        raise AxiomViolation("final_topology: candidate opens do not form a topology", violations)
    return space
