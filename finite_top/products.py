from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from .continuity import NOTE_STRUCTURED, ContinuousMap, compose, make_continuous_map
from .errors import ShapeMismatch
from .generators import ProductPoint, SumPoint, coproduct, inl, inr, pair_eq, product, sum_eq
from .limits import canonical_legs, failed_mediator, require_agreement
from .space import Eq, Space
from .universal import UniversalEntry, UniversalPropertyReport, make_mediator, make_report


@dataclass(frozen=True)
class ProductStructure:
    space: Space
    eq: Eq
    proj1: ContinuousMap
    proj2: ContinuousMap


@dataclass(frozen=True)
class CoproductStructure:
    space: Space
    eq: Eq
    inl: ContinuousMap
    inr: ContinuousMap


@dataclass(frozen=True)
class ProductMediatorMetadata:
    reproduces_first: bool
    reproduces_second: bool


@dataclass(frozen=True)
class CoproductMediatorMetadata:
    reproduces_left: bool
    reproduces_right: bool


def _first(p: ProductPoint) -> Any:
    return p.x


def _second(p: ProductPoint) -> Any:
    return p.y


def product_structure(eq_x: Eq, eq_y: Eq, tx: Space, ty: Space) -> ProductStructure:
    """X×Y with its two projections, each certified continuous."""
    space = product(eq_x, eq_y, tx, ty)
    eq = pair_eq(eq_x, eq_y)
    return ProductStructure(
        space=space,
        eq=eq,
        proj1=make_continuous_map(space, tx, eq, eq_x, _first, note=NOTE_STRUCTURED),
        proj2=make_continuous_map(space, ty, eq, eq_y, _second, note=NOTE_STRUCTURED),
    )


def coproduct_structure(eq_x: Eq, eq_y: Eq, tx: Space, ty: Space) -> CoproductStructure:
    """X⊔Y with its two injections, each certified continuous."""
    space = coproduct(eq_x, eq_y, tx, ty)
    eq = sum_eq(eq_x, eq_y)
    return CoproductStructure(
        space=space,
        eq=eq,
        inl=make_continuous_map(tx, space, eq_x, eq, inl, note=NOTE_STRUCTURED),
        inr=make_continuous_map(ty, space, eq_y, eq, inr, note=NOTE_STRUCTURED),
    )


def pairing(
    f: ContinuousMap,
    g: ContinuousMap,
    structure: Optional[ProductStructure] = None,
) -> ContinuousMap:
    """⟨f, g⟩: Z → X×Y, z ↦ (f(z), g(z))."""
    if f.source is not g.source:
        raise ShapeMismatch("pairing: domain topology mismatch")
    if f.eq_source is not g.eq_source:
        raise ShapeMismatch("pairing: domain equality mismatch")
    if structure is None:
        structure = product_structure(f.eq_target, g.eq_target, f.target, g.target)
    elif structure.proj1.target is not f.target or structure.proj2.target is not g.target:
        raise ShapeMismatch("pairing: product factors do not match the codomains of the legs")
    elif structure.proj1.eq_target is not f.eq_target or structure.proj2.eq_target is not g.eq_target:
        raise ShapeMismatch("pairing: product factor equalities do not match the legs")

    f_fn, g_fn = f.fn, g.fn

    def fn(z: Any) -> ProductPoint:
        return ProductPoint(f_fn(z), g_fn(z))

    return make_continuous_map(f.source, structure.space, f.eq_source, structure.eq, fn, note=NOTE_STRUCTURED)


def copairing(
    f: ContinuousMap,
    g: ContinuousMap,
    structure: Optional[CoproductStructure] = None,
) -> ContinuousMap:
    """[f, g]: X⊔Y → Z, case split on the summand tag."""
    if f.target is not g.target:
        raise ShapeMismatch("copairing: codomain topology mismatch")
    if f.eq_target is not g.eq_target:
        raise ShapeMismatch("copairing: codomain equality mismatch")
    if structure is None:
        structure = coproduct_structure(f.eq_source, g.eq_source, f.source, g.source)
    elif structure.inl.source is not f.source or structure.inr.source is not g.source:
        raise ShapeMismatch("copairing: coproduct summands do not match the domains of the legs")
    elif structure.inl.eq_source is not f.eq_source or structure.inr.eq_source is not g.eq_source:
        raise ShapeMismatch("copairing: coproduct summand equalities do not match the legs")

    f_fn, g_fn = f.fn, g.fn

    def fn(s: SumPoint) -> Any:
        if s.tag == "inl":
            return f_fn(s.value)
        return g_fn(s.value)

    return make_continuous_map(structure.space, f.target, structure.eq, f.eq_target, fn, note=NOTE_STRUCTURED)


def factor_through_product(
    structure: ProductStructure,
    f: ContinuousMap,
    g: ContinuousMap,
) -> UniversalPropertyReport:
    """Build ⟨f, g⟩ and confirm proj1∘⟨f,g⟩ = f and proj2∘⟨f,g⟩ = g pointwise. Never raises."""
    legs: List[UniversalEntry] = []
    first = second = False
    try:
        legs = canonical_legs([("projection 1", structure.proj1), ("projection 2", structure.proj2)])
        mediator = pairing(f, g, structure)
        require_agreement(
            f.eq_target,
            f.source.carrier,
            compose(structure.proj1, mediator).fn,
            f.fn,
            message="factor_through_product: projection 1 ∘ mediator does not reproduce the first leg",
            domain=f.source,
            codomain=f.target,
        )
        first = True
        require_agreement(
            g.eq_target,
            g.source.carrier,
            compose(structure.proj2, mediator).fn,
            g.fn,
            message="factor_through_product: projection 2 ∘ mediator does not reproduce the second leg",
            domain=g.source,
            codomain=g.target,
        )
        second = True
        entry = make_mediator("product mediator", mediator, ProductMediatorMetadata(first, second))
    except Exception as error:
        entry = failed_mediator("product mediator", error, ProductMediatorMetadata(first, second))
    return make_report(legs, [entry])


def factor_through_coproduct(
    structure: CoproductStructure,
    f: ContinuousMap,
    g: ContinuousMap,
) -> UniversalPropertyReport:
    """Build [f, g] and confirm [f,g]∘inl = f and [f,g]∘inr = g pointwise. Never raises."""
    legs: List[UniversalEntry] = []
    left = right = False
    try:
        legs = canonical_legs([("injection left", structure.inl), ("injection right", structure.inr)])
        mediator = copairing(f, g, structure)
        require_agreement(
            f.eq_target,
            f.source.carrier,
            compose(mediator, structure.inl).fn,
            f.fn,
            message="factor_through_coproduct: mediator ∘ inl does not reproduce the left leg",
            domain=f.source,
            codomain=f.target,
        )
        left = True
        require_agreement(
            g.eq_target,
            g.source.carrier,
            compose(mediator, structure.inr).fn,
            g.fn,
            message="factor_through_coproduct: mediator ∘ inr does not reproduce the right leg",
            domain=g.source,
            codomain=g.target,
        )
        right = True
        entry = make_mediator("coproduct mediator", mediator, CoproductMediatorMetadata(left, right))
    except Exception as error:
        entry = failed_mediator("coproduct mediator", error, CoproductMediatorMetadata(left, right))
    return make_report(legs, [entry])
