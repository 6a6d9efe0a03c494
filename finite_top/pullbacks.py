from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from .continuity import ContinuousMap, compose, make_continuous_map, maps_equal
from .errors import ShapeMismatch
from .generators import ProductPoint, SumPoint, subspace
from .limits import canonical_legs, failed_mediator, require_agreement
from .partitions import UnionFind
from .products import coproduct_structure, product_structure
from .quotient import EquivalenceClass, quotient_by_relation
from .space import Eq, Space, SubsetCodec, format_point
from .universal import UniversalEntry, UniversalPropertyReport, make_mediator, make_report


@dataclass(frozen=True)
class PullbackWitness:
    space: Space
    eq: Eq
    proj1: ContinuousMap
    proj2: ContinuousMap


@dataclass(frozen=True)
class PushoutWitness:
    space: Space
    eq: Eq
    inl: ContinuousMap
    inr: ContinuousMap


@dataclass(frozen=True)
class LegsMediatorMetadata:
    reproduces_left_leg: bool
    reproduces_right_leg: bool


def _describe_sum_point(left: Space, right: Space, point: SumPoint) -> str:
    if point.tag == "inl":
        return f"inl({format_point(left, point.value)})"
    return f"inr({format_point(right, point.value)})"


# ---------------------------------------------------------------------------
# Pullback
# ---------------------------------------------------------------------------


def _assert_cospan(f: ContinuousMap, g: ContinuousMap) -> None:
    if f.target is not g.target:
        raise ShapeMismatch("pullback: expected cospan legs to land in the same codomain topology.")
    if f.eq_target is not g.eq_target:
        raise ShapeMismatch("pullback: expected cospan legs to share the same codomain equality witness.")


def pullback(f: ContinuousMap, g: ContinuousMap) -> PullbackWitness:
    """X ×_Z Y = {(x, y) : f(x) = g(y)} as a subspace of X×Y, with both projections."""
    _assert_cospan(f, g)
    structure = product_structure(f.eq_source, g.eq_source, f.source, g.source)
    eq_z = f.eq_target
    fibre = [p for p in structure.space.carrier if eq_z(f.fn(p.x), g.fn(p.y))]
    space = subspace(structure.eq, structure.space, fibre)

    def first(p: ProductPoint) -> Any:
        return p.x

    def second(p: ProductPoint) -> Any:
        return p.y

    proj1 = make_continuous_map(space, f.source, structure.eq, f.eq_source, first)
    proj2 = make_continuous_map(space, g.source, structure.eq, g.eq_source, second)
    if not maps_equal(eq_z, space.carrier, compose(f, proj1).fn, compose(g, proj2).fn):
        raise ValueError("pullback: induced projections do not equalise the cospan.")
    return PullbackWitness(space=space, eq=structure.eq, proj1=proj1, proj2=proj2)


def _assert_pullback_witness(f: ContinuousMap, g: ContinuousMap, witness: PullbackWitness) -> None:
    if witness.proj1.source is not witness.space or witness.proj2.source is not witness.space:
        raise ShapeMismatch("factor_through_pullback: pullback projections must originate at the pullback topology.")
    if witness.proj1.target is not f.source or witness.proj2.target is not g.source:
        raise ShapeMismatch("factor_through_pullback: projection codomains must match the cospan domains.")
    if witness.proj1.eq_source is not witness.eq or witness.proj2.eq_source is not witness.eq:
        raise ShapeMismatch(
            "factor_through_pullback: projection equality witnesses must match the pullback equality witness."
        )
    if witness.proj1.eq_target is not f.eq_source or witness.proj2.eq_target is not g.eq_source:
        raise ShapeMismatch(
            "factor_through_pullback: projection codomain equality witnesses must match the cospan domain witnesses."
        )


def factor_through_pullback(
    f: ContinuousMap,
    g: ContinuousMap,
    witness: PullbackWitness,
    left: ContinuousMap,
    right: ContinuousMap,
) -> UniversalPropertyReport:
    """Factor a commuting cone (left: W → X, right: W → Y) through the pullback. Never raises."""
    legs: List[UniversalEntry] = []
    reproduces_left = reproduces_right = False
    try:
        _assert_cospan(f, g)
        _assert_pullback_witness(f, g, witness)
        legs = canonical_legs([("pullback projection 1", witness.proj1), ("pullback projection 2", witness.proj2)])
        if left.source is not right.source:
            raise ShapeMismatch("factor_through_pullback: cone legs must share a common domain topology.")
        if left.eq_source is not right.eq_source:
            raise ShapeMismatch("factor_through_pullback: cone legs must share the same domain equality witness.")
        require_agreement(
            f.eq_target,
            left.source.carrier,
            compose(f, left).fn,
            compose(g, right).fn,
            message="factor_through_pullback: supplied cone does not commute with the cospan",
            domain=left.source,
            codomain=f.target,
        )

        eq_pb = witness.eq
        candidates = witness.space.carrier
        left_fn, right_fn = left.fn, right.fn

        def mediator_fn(w: Any) -> ProductPoint:
            target = ProductPoint(left_fn(w), right_fn(w))
            for candidate in candidates:
                if eq_pb(candidate, target):
                    return candidate
            raise ValueError(
                "factor_through_pullback: cone lands outside the pullback at "
                f"{format_point(left.source, w)} -> ({format_point(left.target, target.x)}, "
                f"{format_point(right.target, target.y)})."
            )

        mediator = make_continuous_map(left.source, witness.space, left.eq_source, eq_pb, mediator_fn)
        if not maps_equal(left.eq_target, left.source.carrier, compose(witness.proj1, mediator).fn, left_fn):
            raise ValueError("factor_through_pullback: constructed mediator does not reproduce the left cone leg.")
        reproduces_left = True
        if not maps_equal(right.eq_target, right.source.carrier, compose(witness.proj2, mediator).fn, right_fn):
            raise ValueError("factor_through_pullback: constructed mediator does not reproduce the right cone leg.")
        reproduces_right = True
        entry = make_mediator(
            "pullback mediator", mediator, LegsMediatorMetadata(reproduces_left, reproduces_right)
        )
    except Exception as error:
        entry = failed_mediator(
            "pullback mediator", error, LegsMediatorMetadata(reproduces_left, reproduces_right)
        )
    return make_report(legs, [entry])


# ---------------------------------------------------------------------------
# Pushout
# ---------------------------------------------------------------------------


def _assert_span(f: ContinuousMap, g: ContinuousMap) -> None:
    if f.source is not g.source:
        raise ShapeMismatch("pushout: span legs must share the same domain topology.")
    if f.eq_source is not g.eq_source:
        raise ShapeMismatch("pushout: span legs must share the same domain equality witness.")


def pushout(f: ContinuousMap, g: ContinuousMap) -> PushoutWitness:
    """Y ⊔_X Z: the coproduct Y⊔Z modulo inl(f(x)) ~ inr(g(x)), with both injections."""
    _assert_span(f, g)
    structure = coproduct_structure(f.eq_target, g.eq_target, f.target, g.target)
    codec = SubsetCodec(structure.eq, structure.space.carrier)
    uf = UnionFind(len(codec))

    def locate(point: SumPoint) -> int:
        i = codec.index_of(point)
        if i is None:
            raise ValueError("pushout: coproduct point lies outside the ambient coproduct carrier.")
        return i

    inl_fn, inr_fn = structure.inl.fn, structure.inr.fn
    for x in f.source.carrier:
        uf.union(locate(inl_fn(f.fn(x))), locate(inr_fn(g.fn(x))))

    def relation(a: SumPoint, b: SumPoint) -> bool:
        return uf.same(locate(a), locate(b))

    def show_class(cls: EquivalenceClass) -> str:
        labels = [_describe_sum_point(f.target, g.target, p) for p in cls]
        return "{" + ", ".join(labels) + "}" if labels else "∅"

    q = quotient_by_relation(structure.space, structure.eq, relation, show_class=show_class)
    inl = compose(q.projection, structure.inl)
    inr = compose(q.projection, structure.inr)
    if not maps_equal(q.eq_class, f.source.carrier, compose(inl, f).fn, compose(inr, g).fn):
        raise ValueError("pushout: induced injections do not coequalise the span.")
    return PushoutWitness(space=q.space, eq=q.eq_class, inl=inl, inr=inr)


def _assert_pushout_witness(f: ContinuousMap, g: ContinuousMap, witness: PushoutWitness) -> None:
    if witness.inl.target is not witness.space or witness.inr.target is not witness.space:
        raise ShapeMismatch("factor_through_pushout: pushout injections must land in the pushout topology.")
    if witness.inl.source is not f.target or witness.inr.source is not g.target:
        raise ShapeMismatch("factor_through_pushout: injection domains must match the span codomains.")
    if witness.inl.eq_target is not witness.eq or witness.inr.eq_target is not witness.eq:
        raise ShapeMismatch(
            "factor_through_pushout: injection codomain witnesses must match the pushout equality witness."
        )
    if witness.inl.eq_source is not f.eq_target or witness.inr.eq_source is not g.eq_target:
        raise ShapeMismatch(
            "factor_through_pushout: injection domain witnesses must match the span codomain witnesses."
        )


def _assert_cocone(f: ContinuousMap, g: ContinuousMap, left: ContinuousMap, right: ContinuousMap) -> None:
    if left.target is not right.target:
        raise ShapeMismatch("factor_through_pushout: cocone legs must land in the same topology.")
    if left.eq_target is not right.eq_target:
        raise ShapeMismatch("factor_through_pushout: cocone legs must share the same codomain equality witness.")
    if left.source is not f.target or left.eq_source is not f.eq_target:
        raise ShapeMismatch("factor_through_pushout: left cocone leg must originate at the left span codomain.")
    if right.source is not g.target or right.eq_source is not g.eq_target:
        raise ShapeMismatch("factor_through_pushout: right cocone leg must originate at the right span codomain.")


def factor_through_pushout(
    f: ContinuousMap,
    g: ContinuousMap,
    witness: PushoutWitness,
    left: ContinuousMap,
    right: ContinuousMap,
) -> UniversalPropertyReport:
    """Factor a commuting cocone (left: Y → W, right: Z → W) through the pushout. Never raises."""
    legs: List[UniversalEntry] = []
    reproduces_left = reproduces_right = False
    try:
        _assert_span(f, g)
        _assert_pushout_witness(f, g, witness)
        legs = canonical_legs([("pushout injection left", witness.inl), ("pushout injection right", witness.inr)])
        _assert_cocone(f, g, left, right)
        require_agreement(
            left.eq_target,
            f.source.carrier,
            compose(left, f).fn,
            compose(right, g).fn,
            message="factor_through_pushout: cocone does not commute with the span",
            domain=f.source,
            codomain=left.target,
        )

        eq_w = left.eq_target
        left_fn, right_fn = left.fn, right.fn

        def evaluate(point: SumPoint) -> Any:
            if point.tag == "inl":
                return left_fn(point.value)
            return right_fn(point.value)

        def mediator_fn(cls: EquivalenceClass) -> Any:
            if not cls:
                raise ValueError("factor_through_pushout: encountered an empty equivalence class.")
            image = evaluate(cls[0])
            for member in cls:
                if not eq_w(image, evaluate(member)):
                    label = ", ".join(_describe_sum_point(f.target, g.target, p) for p in cls)
                    raise ValueError(f"factor_through_pushout: cocone is not constant on {{{label}}}.")
            return image

        mediator = make_continuous_map(witness.space, left.target, witness.eq, eq_w, mediator_fn)
        if not maps_equal(eq_w, f.target.carrier, compose(mediator, witness.inl).fn, left_fn):
            raise ValueError("factor_through_pushout: constructed mediator does not reproduce the left cocone leg.")
        reproduces_left = True
        if not maps_equal(eq_w, g.target.carrier, compose(mediator, witness.inr).fn, right_fn):
            raise ValueError("factor_through_pushout: constructed mediator does not reproduce the right cocone leg.")
        reproduces_right = True
        entry = make_mediator(
            "pushout mediator", mediator, LegsMediatorMetadata(reproduces_left, reproduces_right)
        )
    except Exception as error:
        entry = failed_mediator(
            "pushout mediator", error, LegsMediatorMetadata(reproduces_left, reproduces_right)
        )
    return make_report(legs, [entry])
