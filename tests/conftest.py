"""Shared spaces and maps for the finite_top tests."""

import pytest

from finite_top.generators import discrete, indiscrete
from finite_top.space import Space


def eq_num(a, b):
    return a == b


@pytest.fixture
def eq():
    return eq_num


@pytest.fixture
def depots():
    return discrete(["Depot", "Hub"])


@pytest.fixture
def weather():
    return indiscrete(["Sunny", "Rainy"])


@pytest.fixture
def sierpinski():
    return Space.build([0, 1], [[], [1], [0, 1]])


@pytest.fixture
def two_point():
    return discrete([0, 1])


@pytest.fixture
def three_point():
    return discrete([0, 1, 2])
