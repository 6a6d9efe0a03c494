from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, List, Optional, Sequence, Tuple

from .continuity import ContinuousMap, make_continuous_map
from .errors import RelationLawViolation
from .initial_final import FinalLeg, final_topology
from .space import Eq, Space, contains, dedupe, eq_sets, format_point, format_subset

Relation = Callable[[Any, Any], bool]
EquivalenceClass = Tuple[Any, ...]


@dataclass(frozen=True)
class QuotientResult:
    space: Space
    projection: ContinuousMap


@dataclass(frozen=True)
class RelationQuotient:
    space: Space
    projection: ContinuousMap
    eq_class: Eq
    classes: Tuple[EquivalenceClass, ...]


def quotient_by_map(
    source: Space,
    eq_source: Eq,
    carrier: Sequence[Any],
    eq_target: Eq,
    fn: Callable[[Any], Any],
    *,
    show_target: Optional[Callable[[Any], str]] = None,
) -> QuotientResult:
    """Quotient topology on `carrier` induced by a surjection `fn` out of `source`.

    Images are snapped to their representative in the (deduplicated) carrier; `fn` must land
    in and onto the carrier.
    """
    canonical = dedupe(eq_target, carrier)

    def select(value: Any) -> Any:
        for candidate in canonical:
            if eq_target(candidate, value):
                return candidate
        raise ValueError(
            f"quotient_by_map: map produced {format_point(None, value)} outside the quotient carrier"
        )

    def projection_fn(x: Any) -> Any:
        return select(fn(x))

    images = [projection_fn(x) for x in source.carrier]
    for q in canonical:
        if not contains(eq_target, images, q):
            raise ValueError(
                f"quotient_by_map: map must be surjective, {format_point(None, q)} has no preimage"
            )

    topology = final_topology(
        eq_target,
        canonical,
        [FinalLeg(source=source, eq_source=eq_source, fn=projection_fn)],
    ).with_show(show_target)
    projection = make_continuous_map(source, topology, eq_source, eq_target, projection_fn)
    return QuotientResult(space=topology, projection=projection)


def check_equivalence_relation(eq: Eq, carrier: Sequence[Any], relation: Relation) -> None:
    """Raise `RelationLawViolation` naming the first failed law (O(n^3) for transitivity)."""
    for x in carrier:
        if not relation(x, x):
            raise RelationLawViolation(
                "reflexivity", f"relation must be reflexive, fails at {format_point(None, x)}"
            )
    for x in carrier:
        for y in carrier:
            if relation(x, y) and not relation(y, x):
                raise RelationLawViolation(
                    "symmetry",
                    f"relation must be symmetric, fails at ({format_point(None, x)}, {format_point(None, y)})",
                )
    for x in carrier:
        for y in carrier:
            if not relation(x, y):
                continue
            for z in carrier:
                if relation(y, z) and not relation(x, z):
                    raise RelationLawViolation(
                        "transitivity",
                        "relation must be transitive, fails at "
                        f"({format_point(None, x)}, {format_point(None, y)}, {format_point(None, z)})",
                    )
    for x in carrier:
        for y in carrier:
            if eq(x, y) and not relation(x, y):
                raise RelationLawViolation(
                    "ambient-agreement",
                    f"relation must respect the ambient equality at ({format_point(None, x)}, {format_point(None, y)})",
                )


def class_of(eq: Eq, carrier: Sequence[Any], relation: Relation, seed: Any) -> EquivalenceClass:
    """Breadth-first saturation of `relation` from `seed` over `carrier`."""
    visited: List[Any] = []
    queue: Deque[Any] = deque([seed])
    while queue:
        current = queue.popleft()
        if contains(eq, visited, current):
            continue
        visited.append(current)
        for candidate in carrier:
            if relation(current, candidate) and not contains(eq, visited, candidate):
                queue.append(candidate)
    return tuple(visited)


def equivalence_classes(eq: Eq, carrier: Sequence[Any], relation: Relation) -> List[EquivalenceClass]:
    """Partition `carrier` into relation classes, in order of first appearance."""
    classes: List[EquivalenceClass] = []
    covered: List[Any] = []
    for point in carrier:
        if contains(eq, covered, point):
            continue
        cls = class_of(eq, carrier, relation, point)
        classes.append(cls)
        covered.extend(cls)
    return classes


def _default_show_class(source: Space) -> Callable[[EquivalenceClass], str]:
    def show(cls: EquivalenceClass) -> str:
        return format_subset(source, cls)

    return show


def quotient_by_relation(
    source: Space,
    eq_source: Eq,
    relation: Relation,
    *,
    show_class: Optional[Callable[[EquivalenceClass], str]] = None,
) -> RelationQuotient:
    """Collapse the classes of an equivalence relation and transport the final topology.

    Points of the quotient are the classes themselves (tuples of source points); two
    classes are equal when they have the same members under `eq_source`.
    """
    check_equivalence_relation(eq_source, source.carrier, relation)
    classes = equivalence_classes(eq_source, source.carrier, relation)

    def eq_class(A: EquivalenceClass, B: EquivalenceClass) -> bool:
        return eq_sets(eq_source, A, B)

    def locate_class(point: Any) -> EquivalenceClass:
        for cls in classes:
            if any(relation(point, member) for member in cls):
                return cls
        raise ValueError(
            f"quotient_by_relation: no equivalence class for {format_point(source, point)}"
        )

    result = quotient_by_map(
        source,
        eq_source,
        classes,
        eq_class,
        locate_class,
        show_target=show_class or _default_show_class(source),
    )
    return RelationQuotient(
        space=result.space,
        projection=result.projection,
        eq_class=eq_class,
        classes=tuple(classes),
    )
