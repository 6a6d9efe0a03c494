from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple

from .continuity import ContinuousMap, compose, make_continuous_map, maps_equal
from .errors import ShapeMismatch
from .generators import subspace
from .limits import canonical_legs, failed_mediator, require_agreement
from .partitions import UnionFind
from .quotient import EquivalenceClass, quotient_by_relation
from .space import Eq, Space, SubsetCodec, format_point, format_subset
from .universal import UniversalEntry, UniversalPropertyReport, make_mediator, make_report


@dataclass(frozen=True)
class EqualizerWitness:
    space: Space
    equalize: ContinuousMap


@dataclass(frozen=True)
class CoequalizerWitness:
    space: Space
    coequalize: ContinuousMap
    eq_class: Eq
    classes: Tuple[EquivalenceClass, ...]


@dataclass(frozen=True)
class EqualizerMediatorMetadata:
    reproduces_fork: bool


@dataclass(frozen=True)
class CoequalizerMediatorMetadata:
    respects_classes: bool


@dataclass(frozen=True)
class Comparison:
    """Mutually inverse mediators between two (co)equalizers of the same pair."""
    forward: ContinuousMap
    backward: ContinuousMap


def _assert_parallel_pair(f: ContinuousMap, g: ContinuousMap, *, where: str) -> None:
    if f.source is not g.source or f.target is not g.target:
        raise ShapeMismatch(f"{where}: expected a parallel pair with matching domain and codomain topologies.")
    if f.eq_source is not g.eq_source or f.eq_target is not g.eq_target:
        raise ShapeMismatch(f"{where}: expected a parallel pair with consistent equality witnesses.")


# ---------------------------------------------------------------------------
# Equalizer
# ---------------------------------------------------------------------------


def equalizer(f: ContinuousMap, g: ContinuousMap) -> EqualizerWitness:
    """Subspace of the shared domain on which f and g agree, with its inclusion."""
    _assert_parallel_pair(f, g, where="equalizer")
    eq_x, eq_y = f.eq_source, f.eq_target
    agreement = [x for x in f.source.carrier if eq_y(f.fn(x), g.fn(x))]
    space = subspace(eq_x, f.source, agreement)

    def include(x: Any) -> Any:
        return x

    equalize = make_continuous_map(space, f.source, eq_x, eq_x, include)
    return EqualizerWitness(space=space, equalize=equalize)


def factor_through_equalizer(
    f: ContinuousMap,
    g: ContinuousMap,
    inclusion: ContinuousMap,
    fork: ContinuousMap,
) -> UniversalPropertyReport:
    """Factor a fork W → X (with f∘fork = g∘fork) through the equalizer inclusion.

    The mediator sends each w to the unique equalizer point the inclusion maps onto
    fork(w). Never raises: every failure is reported on the mediator entry.
    """
    legs: List[UniversalEntry] = []
    try:
        _assert_parallel_pair(f, g, where="factor_through_equalizer")
        legs = canonical_legs([("equalizer inclusion", inclusion)])
        if inclusion.target is not f.source or inclusion.eq_target is not f.eq_source:
            raise ShapeMismatch(
                "factor_through_equalizer: inclusion must land in the parallel pair's domain."
            )
        if fork.target is not f.source or fork.eq_target is not f.eq_source:
            raise ShapeMismatch(
                "factor_through_equalizer: fork codomain must match the parallel pair's domain."
            )
        f_fn, g_fn, fork_fn = f.fn, g.fn, fork.fn
        require_agreement(
            f.eq_target,
            fork.source.carrier,
            lambda w: f_fn(fork_fn(w)),
            lambda w: g_fn(fork_fn(w)),
            message="factor_through_equalizer: fork does not commute with the parallel pair",
            domain=fork.source,
            codomain=f.target,
        )

        eq_x = f.eq_source
        candidates = inclusion.source.carrier
        inc_fn = inclusion.fn

        def mediator_fn(w: Any) -> Any:
            image = fork_fn(w)
            for candidate in candidates:
                if eq_x(inc_fn(candidate), image):
                    return candidate
            raise ValueError(
                "factor_through_equalizer: fork lands outside the equalizer at "
                f"{format_point(fork.source, w)} -> {format_point(f.source, image)}."
            )

        mediator = make_continuous_map(fork.source, inclusion.source, fork.eq_source, inclusion.eq_source, mediator_fn)
        if not maps_equal(eq_x, fork.source.carrier, compose(inclusion, mediator).fn, fork_fn):
            raise ValueError("factor_through_equalizer: constructed mediator does not reproduce the supplied fork.")
        entry = make_mediator("equalizer mediator", mediator, EqualizerMediatorMetadata(reproduces_fork=True))
    except Exception as error:
        entry = failed_mediator("equalizer mediator", error, EqualizerMediatorMetadata(reproduces_fork=False))
    return make_report(legs, [entry])


def _identity_fn(x: Any) -> Any:
    return x


def equalizer_comparison(
    f: ContinuousMap,
    g: ContinuousMap,
    first: ContinuousMap,
    second: ContinuousMap,
) -> Comparison:
    """Canonical isomorphism between two equalizer inclusions of the same pair."""
    forward_report = factor_through_equalizer(f, g, second, first)
    if forward_report.mediator is None:
        raise ValueError(
            f"equalizer_comparison: unable to construct forward mediator ({'; '.join(forward_report.failures)})."
        )
    backward_report = factor_through_equalizer(f, g, first, second)
    if backward_report.mediator is None:
        raise ValueError(
            f"equalizer_comparison: unable to construct backward mediator ({'; '.join(backward_report.failures)})."
        )
    forward = forward_report.mediator
    backward = backward_report.mediator

    if not maps_equal(first.eq_source, first.source.carrier, compose(backward, forward).fn, _identity_fn):
        raise ValueError("equalizer_comparison: backward ∘ forward is not the identity on the first equalizer.")
    if not maps_equal(second.eq_source, second.source.carrier, compose(forward, backward).fn, _identity_fn):
        raise ValueError("equalizer_comparison: forward ∘ backward is not the identity on the second equalizer.")
    return Comparison(forward=forward, backward=backward)


# ---------------------------------------------------------------------------
# Coequalizer
# ---------------------------------------------------------------------------


def coequalizer(f: ContinuousMap, g: ContinuousMap) -> CoequalizerWitness:
    """Quotient of the shared codomain by the equivalence generated by f(x) ~ g(x)."""
    _assert_parallel_pair(f, g, where="coequalizer")
    target = f.target
    codec = SubsetCodec(f.eq_target, target.carrier)
    uf = UnionFind(len(codec))

    def locate(value: Any) -> int:
        i = codec.index_of(value)
        if i is None:
            raise ValueError(f"coequalizer: map lands outside the codomain at {format_point(target, value)}")
        return i

    for x in f.source.carrier:
        uf.union(locate(f.fn(x)), locate(g.fn(x)))

    def relation(a: Any, b: Any) -> bool:
        return uf.same(locate(a), locate(b))

    def show_class(cls: EquivalenceClass) -> str:
        return format_subset(target, cls)

    q = quotient_by_relation(target, f.eq_target, relation, show_class=show_class)
    if not maps_equal(q.eq_class, f.source.carrier, compose(q.projection, f).fn, compose(q.projection, g).fn):
        raise ValueError("coequalizer: induced projection does not coequalize the parallel pair.")
    return CoequalizerWitness(space=q.space, coequalize=q.projection, eq_class=q.eq_class, classes=q.classes)


def factor_through_coequalizer(
    f: ContinuousMap,
    g: ContinuousMap,
    coequalize: ContinuousMap,
    cocone: ContinuousMap,
) -> UniversalPropertyReport:
    """Factor a cocone Y → Z (with cocone∘f = cocone∘g) through the coequalizer projection.

    The mediator evaluates the cocone on a representative of each class after checking it
    is constant on the class. Never raises.
    """
    legs: List[UniversalEntry] = []
    try:
        _assert_parallel_pair(f, g, where="factor_through_coequalizer")
        legs = canonical_legs([("coequalizer projection", coequalize)])
        if coequalize.source is not f.target or coequalize.eq_source is not f.eq_target:
            raise ShapeMismatch(
                "factor_through_coequalizer: coequalizer source must match the parallel pair codomain."
            )
        if cocone.source is not f.target or cocone.eq_source is not f.eq_target:
            raise ShapeMismatch(
                "factor_through_coequalizer: cocone source must match the parallel pair codomain."
            )
        require_agreement(
            cocone.eq_target,
            f.source.carrier,
            compose(cocone, f).fn,
            compose(cocone, g).fn,
            message="factor_through_coequalizer: cocone does not coequalize the parallel pair",
            domain=f.source,
            codomain=cocone.target,
        )

        eq_z = cocone.eq_target
        cocone_fn = cocone.fn

        def mediator_fn(cls: EquivalenceClass) -> Any:
            if not cls:
                raise ValueError("factor_through_coequalizer: empty equivalence class encountered.")
            image = cocone_fn(cls[0])
            for member in cls:
                if not eq_z(image, cocone_fn(member)):
                    raise ValueError(
                        f"factor_through_coequalizer: cocone is not constant on {format_subset(f.target, cls)}."
                    )
            return image

        mediator = make_continuous_map(
            coequalize.target, cocone.target, coequalize.eq_target, cocone.eq_target, mediator_fn
        )
        if not maps_equal(eq_z, coequalize.source.carrier, compose(mediator, coequalize).fn, cocone_fn):
            raise ValueError("factor_through_coequalizer: constructed mediator does not reproduce the cocone.")
        entry = make_mediator("coequalizer mediator", mediator, CoequalizerMediatorMetadata(respects_classes=True))
    except Exception as error:
        entry = failed_mediator("coequalizer mediator", error, CoequalizerMediatorMetadata(respects_classes=False))
    return make_report(legs, [entry])


def coequalizer_comparison(
    f: ContinuousMap,
    g: ContinuousMap,
    first: ContinuousMap,
    second: ContinuousMap,
) -> Comparison:
    """Canonical isomorphism between two coequalizer projections of the same pair."""
    forward_report = factor_through_coequalizer(f, g, first, second)
    if forward_report.mediator is None:
        raise ValueError(
            f"coequalizer_comparison: unable to construct forward mediator ({'; '.join(forward_report.failures)})."
        )
    backward_report = factor_through_coequalizer(f, g, second, first)
    if backward_report.mediator is None:
        raise ValueError(
            f"coequalizer_comparison: unable to construct backward mediator ({'; '.join(backward_report.failures)})."
        )
    forward = forward_report.mediator
    backward = backward_report.mediator

    if not maps_equal(first.eq_target, first.target.carrier, compose(backward, forward).fn, _identity_fn):
        raise ValueError("coequalizer_comparison: backward ∘ forward is not the identity on the first coequalizer.")
    if not maps_equal(second.eq_target, second.target.carrier, compose(forward, backward).fn, _identity_fn):
        raise ValueError("coequalizer_comparison: forward ∘ backward is not the identity on the second coequalizer.")
    return Comparison(forward=forward, backward=backward)
