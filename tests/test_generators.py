"""Tests for the topology generators."""

import numpy as np
import pytest

from finite_top.generators import (
    ProductPoint,
    SumPoint,
    close_under_intersection,
    close_under_union_intersection,
    coproduct,
    discrete,
    from_base,
    from_subbase,
    indiscrete,
    inl,
    inr,
    pair_eq,
    power_set_masks,
    product,
    subspace,
    sum_eq,
)
from finite_top.space import eq_sets, is_open, is_topology


def has_open(eq, space, subset):
    return any(eq_sets(eq, U, subset) for U in space.opens)


class TestMaskClosure:
    def test_union_intersection_closure(self):
        assert sorted(close_under_union_intersection([0b001, 0b010])) == [0b000, 0b001, 0b010, 0b011]

    def test_intersection_closure_adds_full(self):
        assert sorted(close_under_intersection([0b011, 0b110], 0b111)) == [0b010, 0b011, 0b110, 0b111]

    def test_power_set_table(self):
        table = power_set_masks(2)
        assert table.shape == (4, 2)
        assert table.dtype == np.bool_
        assert table[3].tolist() == [True, True]

    def test_power_set_limit(self):
        with pytest.raises(ValueError):
            power_set_masks(5, max_carrier=4)


class TestDiscreteIndiscrete:
    def test_depot_hub_discrete(self, eq, depots):
        assert len(depots.opens) == 4
        for subset in ([], ["Depot"], ["Hub"], ["Depot", "Hub"]):
            assert has_open(eq, depots, subset)
        assert is_topology(eq, depots)

    def test_discrete_mask_order(self):
        space = discrete(["a", "b"])
        assert space.opens == ((), ("a",), ("b",), ("a", "b"))

    def test_discrete_refuses_large_carrier(self):
        with pytest.raises(ValueError):
            discrete(range(6), max_carrier=5)

    def test_weather_indiscrete(self, weather):
        assert weather.opens == ((), ("Sunny", "Rainy"))

    def test_empty_indiscrete(self, eq):
        space = indiscrete([])
        assert space.opens == ((),)
        assert is_topology(eq, space)

    def test_dedupe_with_witness(self):
        space = discrete([0, 3, 1], eq=lambda a, b: a % 3 == b % 3)
        assert space.carrier == (0, 1)

    def test_dedupe_without_witness(self, eq):
        space = discrete([1, 1])
        assert space.carrier == (1,)
        assert space.opens == ((), (1,))
        assert is_topology(eq, space)

    def test_indiscrete_dedupe_without_witness(self):
        space = indiscrete(["a", "a"])
        assert space.carrier == ("a",)
        assert space.opens == ((), ("a",))


class TestBaseSubbase:
    def test_from_base_closes(self, eq):
        space = from_base(eq, [0, 1, 2], [[0], [1]])
        assert is_topology(eq, space)
        assert has_open(eq, space, [0, 1])
        assert not has_open(eq, space, [2])

    def test_from_base_orders_by_size(self, eq):
        space = from_base(eq, ["a", "b", "c"], [["a", "b"], ["a"]])
        assert space.opens == ((), ("a",), ("a", "b"), ("a", "b", "c"))

    def test_from_base_rejects_outside_points(self, eq):
        with pytest.raises(ValueError, match="outside the carrier"):
            from_base(eq, [0, 1], [[2]])

    def test_from_subbase_intersections(self, eq):
        space = from_subbase(eq, [0, 1, 2], [[0, 1], [1, 2]])
        assert is_topology(eq, space)
        assert has_open(eq, space, [1])
        assert len(space.opens) == 5

    def test_from_subbase_empty(self, eq):
        space = from_subbase(eq, [0, 1], [])
        assert space.opens == ((), (0, 1))


class TestProductCoproduct:
    def test_product_of_sierpinski(self, eq, sierpinski):
        space = product(eq, eq, sierpinski, sierpinski)
        peq = pair_eq(eq, eq)
        assert len(space.carrier) == 4
        assert is_topology(peq, space)
        assert is_open(peq, space, [ProductPoint(1, 1)])
        assert is_open(peq, space, [ProductPoint(1, 0), ProductPoint(1, 1)])
        assert not is_open(peq, space, [ProductPoint(0, 0)])
        # boxes {1}×S, S×{1} and their union and intersection, plus ∅ and the carrier
        assert len(space.opens) == 6

    def test_product_of_discretes_is_discrete(self, eq, two_point):
        space = product(eq, eq, two_point, two_point)
        assert len(space.opens) == 16

    def test_product_includes_carrier_when_factor_omits_it(self, eq, two_point):
        from finite_top.space import Space

        no_carrier = Space.build([0, 1], [[], [1]])
        space = product(eq, eq, no_carrier, two_point)
        assert is_open(pair_eq(eq, eq), space, space.carrier)

    def test_coproduct_opens(self, eq, sierpinski, weather):
        space = coproduct(eq, eq, sierpinski, weather)
        seq = sum_eq(eq, eq)
        assert len(space.opens) == len(sierpinski.opens) * len(weather.opens)
        assert is_topology(seq, space)
        assert is_open(seq, space, [inl(1), inr("Sunny"), inr("Rainy")])
        assert not is_open(seq, space, [inr("Sunny")])

    def test_sum_points(self, eq):
        seq = sum_eq(eq, eq)
        assert inl(0) == SumPoint("inl", 0)
        assert not seq(inl(0), inr(0))
        assert seq(inr(0), SumPoint("inr", 0))


class TestSubspace:
    def test_subspace_of_sierpinski(self, eq, sierpinski):
        sub = subspace(eq, sierpinski, [1])
        assert sub.opens == ((), (1,))

    def test_subspace_rejects_outside_points(self, eq, sierpinski):
        with pytest.raises(ValueError):
            subspace(eq, sierpinski, [5])

    def test_subspace_keeps_show(self, eq):
        from finite_top.space import Space

        space = Space.build([0, 1], [[], [0, 1]], show=lambda x: f"p{x}")
        assert subspace(eq, space, [0]).show is space.show
