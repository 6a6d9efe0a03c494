"""Standard catalogue of certified maps, registered for batch re-verification."""
from __future__ import annotations

from typing import Any

from .continuity import inclusion_map, make_continuous_map
from .equalizers import coequalizer, factor_through_coequalizer
from .generators import discrete, indiscrete, subspace
from .products import copairing, coproduct_structure, pairing, product_structure
from .pullbacks import factor_through_pullback, factor_through_pushout, pullback, pushout
from .registry import ContinuityRegistry
from .space import Space
from .universal import UniversalPropertyReport


def eq_num(a: Any, b: Any) -> bool:
    return a == b


def _require_mediator(report: UniversalPropertyReport, what: str):
    if report.mediator is None:
        reason = "; ".join(report.failures) or "unknown reason"
        raise ValueError(f"Failed to build {what} mediator: {reason}")
    return report.mediator


def register_continuity_packs(registry: ContinuityRegistry) -> ContinuityRegistry:
    X = (0, 1, 2)
    Y = (10, 20, 30)
    Z = (42, 99)

    TXd = discrete(X)
    TYd = discrete(Y)
    TZd = discrete(Z)
    TXi = indiscrete(X)

    TS = subspace(eq_num, TXd, (0, 2))
    registry.register("Top/cont/subspace-inclusion:S↪X", inclusion_map(eq_num, TS, TXd))

    prod = product_structure(eq_num, eq_num, TXd, TYd)
    registry.register("Top/cont/proj1:X×Y→X", prod.proj1)
    registry.register("Top/cont/proj2:X×Y→Y", prod.proj2)

    coprod = coproduct_structure(eq_num, eq_num, TXd, TYd)
    registry.register("Top/cont/inl:X→X⊔Y", coprod.inl)
    registry.register("Top/cont/inr:Y→X⊔Y", coprod.inr)

    left_fold = make_continuous_map(TXd, TZd, eq_num, eq_num, lambda x: 42 if x == 0 else 99)
    right_fold = make_continuous_map(TYd, TZd, eq_num, eq_num, lambda y: 42 if y == 10 else 99)
    registry.register("Top/cont/copair:X⊔Y→Z", copairing(left_fold, right_fold, coprod))

    f = make_continuous_map(TZd, TXd, eq_num, eq_num, lambda z: 0 if z == 42 else 1)
    g = make_continuous_map(TZd, TYd, eq_num, eq_num, lambda z: 20)
    registry.register("Top/cont/pair:Z→X×Y", pairing(f, g, prod))

    registry.register(
        "Top/cont/to-indiscrete:Z→Xi",
        make_continuous_map(TZd, TXi, eq_num, eq_num, lambda z: 2),
    )

    # Coequalizer of 0 ↦ 7|9, 1 ↦ 8|10 glues {7, 9} and {8, 10}.
    TXq = discrete((0, 1))
    TYq = discrete((7, 8, 9, 10))
    qf = make_continuous_map(TXq, TYq, eq_num, eq_num, lambda x: 7 if x == 0 else 8)
    qg = make_continuous_map(TXq, TYq, eq_num, eq_num, lambda x: 9 if x == 0 else 10)
    coeq = coequalizer(qf, qg)
    registry.register("Top/cont/coequalize:Y→Y∼", coeq.coequalize)
    axes = discrete((0, 1))
    categorize = make_continuous_map(TYq, axes, eq_num, eq_num, lambda y: 0 if y in (7, 9) else 1)
    registry.register(
        "Top/cont/coequalizer-mediator:Y∼→axes",
        _require_mediator(factor_through_coequalizer(qf, qg, coeq.coequalize, categorize), "coequalizer"),
    )

    pull_a = discrete((0, 1, 2))
    pull_b = discrete((10, 11, 12))
    parity = discrete((0, 1))
    to_parity_a = make_continuous_map(pull_a, parity, eq_num, eq_num, lambda x: x % 2)
    to_parity_b = make_continuous_map(pull_b, parity, eq_num, eq_num, lambda y: (y - 10) % 2)
    pb = pullback(to_parity_a, to_parity_b)
    registry.register("Top/cont/pullback:π₁", pb.proj1)
    registry.register("Top/cont/pullback:π₂", pb.proj2)
    cone_domain = discrete((0, 1, 2))
    cone_left = make_continuous_map(cone_domain, pull_a, eq_num, eq_num, lambda w: w)
    cone_right = make_continuous_map(cone_domain, pull_b, eq_num, eq_num, lambda w: 10 + w)
    registry.register(
        "Top/cont/pullback-mediator:W→PB",
        _require_mediator(
            factor_through_pullback(to_parity_a, to_parity_b, pb, cone_left, cone_right), "pullback"
        ),
    )

    span_source = discrete((0, 1))
    span_left = make_continuous_map(span_source, TXd, eq_num, eq_num, lambda s: 0 if s == 0 else 1)
    span_right = make_continuous_map(span_source, TYd, eq_num, eq_num, lambda s: 10 if s == 0 else 30)
    po = pushout(span_left, span_right)
    registry.register("Top/cont/pushout:inl", po.inl)
    registry.register("Top/cont/pushout:inr", po.inr)
    registry.register(
        "Top/cont/pushout-mediator:P→Z",
        _require_mediator(factor_through_pushout(span_left, span_right, po, left_fold, right_fold), "pushout"),
    )

    components = Space.build((0, 1, 2, 3), [(), (0, 1), (2, 3), (0, 1, 2, 3)])
    registry.register(
        "Top/cont/components:constant",
        make_continuous_map(components, discrete((0, 1)), eq_num, eq_num, lambda x: 0 if x < 2 else 1),
    )
    return registry
