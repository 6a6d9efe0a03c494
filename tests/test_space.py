"""Tests for the space model, set helpers and the topology axiom checker."""

import pytest

from finite_top.space import (
    Space,
    SubsetCodec,
    complement,
    dedupe,
    dedupe_sets,
    eq_sets,
    format_point,
    format_subset,
    intersection,
    is_open,
    is_topology,
    topology_violations,
    union,
)


def mod3(a, b):
    return a % 3 == b % 3


class TestSetHelpers:
    def test_dedupe_uses_witness(self):
        assert dedupe(mod3, [0, 3, 1, 4, 2]) == [0, 1, 2]

    def test_eq_sets_ignores_order_and_multiplicity(self, eq):
        assert eq_sets(eq, (1, 2, 2), (2, 1))
        assert not eq_sets(eq, (1, 2), (1,))

    def test_eq_sets_under_custom_witness(self):
        assert eq_sets(mod3, (0, 1), (4, 3))

    def test_dedupe_sets(self, eq):
        assert dedupe_sets(eq, [(1, 2), (2, 1), (), (1,)]) == [(1, 2), (), (1,)]

    def test_union_intersection_complement(self, eq):
        assert union(eq, (1, 2), (2, 3)) == (1, 2, 3)
        assert intersection(eq, (1, 2, 3), (3, 2)) == (2, 3)
        assert complement(eq, (1, 2, 3), (2,)) == (1, 3)


class TestSubsetCodec:
    def test_encode_decode(self, eq):
        codec = SubsetCodec(eq, ["a", "b", "c"])
        assert codec.encode(["c", "a"]) == 0b101
        assert codec.decode(0b110) == ("b", "c")
        assert codec.full == 0b111
        assert len(codec) == 3

    def test_carrier_is_deduplicated(self):
        codec = SubsetCodec(mod3, [0, 3, 1])
        assert codec.carrier == (0, 1)
        assert codec.encode([3]) == 0b01

    def test_outside_points(self, eq):
        codec = SubsetCodec(eq, [0, 1])
        assert codec.try_encode([2]) is None
        with pytest.raises(ValueError):
            codec.encode([0, 2])


class TestTopologyAxioms:
    def test_sierpinski_is_topology(self, eq, sierpinski):
        assert is_topology(eq, sierpinski)
        assert topology_violations(eq, sierpinski) == []

    def test_missing_empty_set(self, eq):
        space = Space.build([0, 1], [[1], [0, 1]])
        assert topology_violations(eq, space) == ["the empty set is not open"]

    def test_missing_carrier(self, eq):
        space = Space.build([0, 1], [[], [1]])
        assert "the carrier is not open" in topology_violations(eq, space)

    def test_missing_union(self, eq):
        space = Space.build([0, 1, 2], [[], [0], [1], [0, 1, 2]])
        assert topology_violations(eq, space) == ["union of {0} and {1} is not open"]

    def test_missing_intersection(self, eq):
        space = Space.build([0, 1, 2], [[], [0, 1], [1, 2], [0, 1, 2]])
        violations = topology_violations(eq, space)
        assert "intersection of {0, 1} and {1, 2} is not open" in violations
        assert not is_topology(eq, space)

    def test_open_outside_carrier(self, eq):
        space = Space.build([0, 1], [[], [2], [0, 1]])
        assert "open #1 {2} is not contained in the carrier" in topology_violations(eq, space)

    def test_opens_compared_as_sets(self, eq):
        space = Space.build([0, 1], [[], [1, 0], [0, 1, 1]])
        assert is_topology(eq, space)

    def test_witness_decides_membership(self):
        space = Space.build([0, 1], [[], [3, 4]])
        assert is_topology(mod3, space)

    def test_is_open(self, eq, sierpinski):
        assert is_open(eq, sierpinski, [1])
        assert not is_open(eq, sierpinski, [0])


class TestFormatting:
    def test_json_fallback(self):
        assert format_point(None, "Depot") == '"Depot"'
        assert format_point(None, 3) == "3"

    def test_str_fallback(self):
        assert format_point(None, {1, 2}) == str({1, 2})

    def test_show_wins(self):
        space = Space.build([0], [[], [0]], show=lambda x: f"p{x}")
        assert format_point(space, 0) == "p0"
        assert format_subset(space, [0]) == "{p0}"

    def test_empty_subset(self):
        assert format_subset(None, []) == "∅"

    def test_spaces_compare_by_identity(self):
        a = Space.build([0], [[], [0]])
        b = Space.build([0], [[], [0]])
        assert a is not b
        assert a != b
        assert a == a
