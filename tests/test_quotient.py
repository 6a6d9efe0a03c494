"""Tests for quotients by maps and by equivalence relations."""

import pytest

from finite_top.errors import RelationLawViolation
from finite_top.generators import from_base
from finite_top.quotient import (
    check_equivalence_relation,
    class_of,
    equivalence_classes,
    quotient_by_map,
    quotient_by_relation,
)
from finite_top.space import format_point, is_topology


def parity(a, b):
    return a % 2 == b % 2


class TestQuotientByMap:
    def test_discrete_source(self, eq, three_point):
        q = quotient_by_map(three_point, eq, ["lo", "hi"], eq, lambda x: "lo" if x < 2 else "hi")
        assert len(q.space.opens) == 4
        assert q.projection(1) == "lo"
        assert q.projection.source is three_point
        assert q.projection.target is q.space

    def test_must_be_surjective(self, eq, three_point):
        with pytest.raises(ValueError, match="surjective"):
            quotient_by_map(three_point, eq, ["lo", "hi", "mid"], eq, lambda x: "lo" if x < 2 else "hi")

    def test_must_land_in_carrier(self, eq, three_point):
        with pytest.raises(ValueError, match="outside the quotient carrier"):
            quotient_by_map(three_point, eq, ["lo"], eq, lambda x: "zzz")

    def test_images_snap_to_carrier_representatives(self, three_point):
        def mod3(a, b):
            return a % 3 == b % 3

        q = quotient_by_map(three_point, lambda a, b: a == b, [0, 1], mod3, lambda x: x + 3 if x < 2 else 4)
        assert q.projection(0) == 0
        assert q.projection(2) == 1


class TestRelationLaws:
    def test_reflexivity(self, eq):
        with pytest.raises(RelationLawViolation) as excinfo:
            check_equivalence_relation(eq, [0, 1], lambda a, b: False)
        assert excinfo.value.law == "reflexivity"

    def test_symmetry(self, eq):
        with pytest.raises(RelationLawViolation) as excinfo:
            check_equivalence_relation(eq, [0, 1], lambda a, b: a <= b)
        assert excinfo.value.law == "symmetry"

    def test_transitivity(self, eq):
        with pytest.raises(RelationLawViolation) as excinfo:
            check_equivalence_relation(eq, [0, 1, 2], lambda a, b: abs(a - b) <= 1)
        assert excinfo.value.law == "transitivity"

    def test_ambient_agreement(self):
        def mod3(a, b):
            return a % 3 == b % 3

        with pytest.raises(RelationLawViolation) as excinfo:
            check_equivalence_relation(mod3, [0, 3], lambda a, b: a == b)
        assert excinfo.value.law == "ambient-agreement"

    def test_unknown_law_name(self):
        with pytest.raises(ValueError):
            RelationLawViolation("associativity", "nope")

    def test_parity_is_equivalence(self, eq):
        check_equivalence_relation(eq, [0, 1, 2, 3], parity)


class TestClasses:
    def test_class_of(self, eq):
        assert class_of(eq, [0, 1, 2, 3], parity, 0) == (0, 2)

    def test_equivalence_classes(self, eq):
        assert equivalence_classes(eq, [0, 1, 2, 3], parity) == [(0, 2), (1, 3)]


class TestQuotientByRelation:
    def test_parity_quotient_of_discrete(self, eq):
        from finite_top.generators import discrete

        source = discrete([0, 1, 2, 3])
        q = quotient_by_relation(source, eq, parity)
        assert q.classes == ((0, 2), (1, 3))
        assert len(q.space.opens) == 4
        assert q.projection(2) == (0, 2)
        assert q.eq_class((2, 0), (0, 2))
        assert is_topology(q.eq_class, q.space)

    def test_glued_points_lose_opens(self, eq):
        source = from_base(eq, [0, 1, 2], [[0]])

        def relation(a, b):
            return a == b or {a, b} == {1, 2}

        q = quotient_by_relation(source, eq, relation)
        assert q.classes == ((0,), (1, 2))
        assert [len(U) for U in q.space.opens] == [0, 1, 2]
        assert q.space.opens[1] == ((0,),)

    def test_default_labels(self, eq, three_point):
        q = quotient_by_relation(three_point, eq, lambda a, b: True)
        assert format_point(q.space, q.classes[0]) == "{0, 1, 2}"

    def test_custom_labels(self, eq, three_point):
        q = quotient_by_relation(three_point, eq, lambda a, b: True, show_class=lambda cls: "*")
        assert format_point(q.space, q.classes[0]) == "*"

    def test_rejects_non_equivalence(self, eq, three_point):
        with pytest.raises(RelationLawViolation):
            quotient_by_relation(three_point, eq, lambda a, b: a <= b)
