"""Tests for products, coproducts and their factorizations."""

import pytest

from finite_top.continuity import NOTE_STRUCTURED, make_continuous_map
from finite_top.errors import ShapeMismatch
from finite_top.generators import ProductPoint, discrete, inl, inr
from finite_top.products import (
    copairing,
    coproduct_structure,
    factor_through_coproduct,
    factor_through_product,
    pairing,
    product_structure,
)


@pytest.fixture
def spaces():
    return discrete([0, 1, 2]), discrete([10, 20, 30]), discrete([42, 99])


class TestProduct:
    def test_projections(self, eq, spaces):
        X, Y, _ = spaces
        prod = product_structure(eq, eq, X, Y)
        assert len(prod.space.carrier) == 9
        assert prod.proj1(ProductPoint(2, 30)) == 2
        assert prod.proj2(ProductPoint(2, 30)) == 30
        assert prod.proj1.witness.diagnostics.note == NOTE_STRUCTURED

    def test_pairing(self, eq, spaces):
        X, Y, Z = spaces
        f = make_continuous_map(Z, X, eq, eq, lambda z: 0 if z == 42 else 1)
        g = make_continuous_map(Z, Y, eq, eq, lambda z: 20)
        paired = pairing(f, g)
        assert paired(42) == ProductPoint(0, 20)
        assert paired.witness.holds

    def test_pairing_needs_common_domain(self, eq, spaces):
        X, Y, Z = spaces
        f = make_continuous_map(Z, X, eq, eq, lambda z: 0)
        g = make_continuous_map(X, Y, eq, eq, lambda x: 10)
        with pytest.raises(ShapeMismatch):
            pairing(f, g)

    def test_factor_through_product(self, eq, spaces):
        X, Y, Z = spaces
        prod = product_structure(eq, eq, X, Y)
        f = make_continuous_map(Z, X, eq, eq, lambda z: 0 if z == 42 else 1)
        g = make_continuous_map(Z, Y, eq, eq, lambda z: 20)
        report = factor_through_product(prod, f, g)
        assert report.holds
        assert [leg.name for leg in report.legs] == ["projection 1", "projection 2"]
        assert report.mediators[0].name == "product mediator"
        assert report.mediators[0].metadata.reproduces_first
        assert report.mediators[0].metadata.reproduces_second
        assert report.mediator(99) == ProductPoint(1, 20)

    def test_factor_through_mismatched_product_reports(self, eq, spaces):
        X, Y, Z = spaces
        other = product_structure(eq, eq, Y, X)
        f = make_continuous_map(Z, X, eq, eq, lambda z: 0)
        g = make_continuous_map(Z, Y, eq, eq, lambda z: 10)
        report = factor_through_product(other, f, g)
        assert not report.holds
        assert report.mediator is None
        assert "product factors do not match" in report.failures[0]


class TestCoproduct:
    def test_injections(self, eq, spaces):
        X, Y, _ = spaces
        coprod = coproduct_structure(eq, eq, X, Y)
        assert coprod.inl(1) == inl(1)
        assert coprod.inr(10) == inr(10)
        assert len(coprod.space.carrier) == 6

    def test_copairing(self, eq, spaces):
        X, Y, Z = spaces
        f = make_continuous_map(X, Z, eq, eq, lambda x: 42 if x == 0 else 99)
        g = make_continuous_map(Y, Z, eq, eq, lambda y: 42 if y == 10 else 99)
        copaired = copairing(f, g)
        assert copaired(inl(0)) == 42
        assert copaired(inr(20)) == 99

    def test_copairing_needs_common_codomain(self, eq, spaces):
        X, Y, Z = spaces
        f = make_continuous_map(X, Z, eq, eq, lambda x: 42)
        g = make_continuous_map(Y, X, eq, eq, lambda y: 0)
        with pytest.raises(ShapeMismatch):
            copairing(f, g)

    def test_factor_through_coproduct(self, eq, spaces):
        X, Y, Z = spaces
        coprod = coproduct_structure(eq, eq, X, Y)
        f = make_continuous_map(X, Z, eq, eq, lambda x: 42 if x == 0 else 99)
        g = make_continuous_map(Y, Z, eq, eq, lambda y: 42 if y == 10 else 99)
        report = factor_through_coproduct(coprod, f, g)
        assert report.holds
        assert [leg.name for leg in report.legs] == ["injection left", "injection right"]
        meta = report.mediators[0].metadata
        assert meta.reproduces_left and meta.reproduces_right

    def test_factor_through_coproduct_never_raises(self, eq, spaces):
        X, Y, Z = spaces
        coprod = coproduct_structure(eq, eq, X, Y)
        f = make_continuous_map(X, Z, eq, eq, lambda x: 42)
        g = make_continuous_map(Y, X, eq, eq, lambda y: 0)
        report = factor_through_coproduct(coprod, f, g)
        assert not report.holds
        assert report.failures
