r"""
Common set-up for all tests.

Defines fixtures for reference cost matrices and an exhaustive solver that is
used as an oracle for small matrices.
"""

from __future__ import annotations

import itertools
import typing as T

import pytest


def brute_force_minimum(values: T.Sequence[T.Sequence[float]]) -> float:
    """
    Smallest total cost over every matching that covers the smaller dimension.
    """
    rows, cols = len(values), len(values[0])
    if rows > cols:
        values = [list(col) for col in zip(*values)]
        rows, cols = cols, rows

    return min(
        sum(values[row][col] for row, col in enumerate(perm))
        for perm in itertools.permutations(range(cols), rows)
    )


@pytest.fixture(scope="session")
def brute_force() -> T.Callable[[T.Sequence[T.Sequence[float]]], float]:
    return brute_force_minimum


@pytest.fixture()
def example_costs() -> list[list[int]]:
    return [
        [250, 400, 350],
        [400, 600, 350],
        [200, 400, 250],
    ]


@pytest.fixture()
def example_reduced() -> list[list[int]]:
    return [
        [0, 150, 100],
        [50, 250, 0],
        [0, 200, 50],
    ]
