r"""
Tests for ``kuhnmunkres.solver``.
"""

from __future__ import annotations

import math
import time

import numpy as np
import pytest
import scipy.optimize
import torch
from hypothesis import given, settings
from hypothesis import strategies as st

import kuhnmunkres as km


@st.composite
def cost_lists(draw, max_size: int = 6, elements=st.integers(0, 50)):
    rows = draw(st.integers(1, max_size))
    cols = draw(st.integers(1, max_size))
    return draw(
        st.lists(
            st.lists(elements, min_size=cols, max_size=cols),
            min_size=rows,
            max_size=rows,
        )
    )


def total_cost(values, pairs) -> float:
    return sum(values[row][col] for row, col in pairs)


def assert_valid_assignment(values, pairs) -> None:
    rows, cols = len(values), len(values[0])

    assert len(pairs) == min(rows, cols)
    assert len({row for row, _ in pairs}) == len(pairs)
    assert len({col for _, col in pairs}) == len(pairs)
    assert all(0 <= row < rows and 0 <= col < cols for row, col in pairs)
    assert pairs == sorted(pairs)


def test_solve_example(example_costs):
    pairs = km.solve(example_costs)

    assert pairs == [(0, 1), (1, 2), (2, 0)]
    assert total_cost(example_costs, pairs) == 950


def test_solve_small_example(brute_force):
    values = [[4, 1, 3], [2, 0, 5], [3, 2, 2]]
    pairs = km.solve(km.Matrix(values))

    assert_valid_assignment(values, pairs)
    assert total_cost(values, pairs) == brute_force(values)
    assert total_cost(values, pairs) == 5


def test_solve_single():
    assert km.solve([[7]]) == [(0, 0)]
    assert km.solve([[0.0]]) == [(0, 0)]


@pytest.mark.parametrize(
    ["values", "expected"],
    [
        ([[1, 1], [2, 2]], 3),
        ([[0] * 5] * 3 + [[1] * 5] * 2, 2),
        ([[0.0] * 5] * 3 + [[1.0] * 5] * 2, 2.0),
        ([[1.0] * 5] * 3 + [[0.0] * 5] * 2, 3.0),
    ],
    ids=("equal-rows:2", "equal-rows:5", "equal-rows:5f", "equal-rows:5f-inv"),
)
def test_solve_equal_rows(values, expected):
    pairs = km.solve(values)

    assert_valid_assignment(values, pairs)
    assert total_cost(values, pairs) == expected


@pytest.mark.parametrize("size", [1, 2, 5, 8])
@pytest.mark.parametrize("value", [0, 3, 2.5])
def test_solve_all_equal(size, value):
    values = [[value] * size for _ in range(size)]
    pairs = km.solve(values)

    assert_valid_assignment(values, pairs)
    assert total_cost(values, pairs) == size * value


def test_solve_random10():
    values = np.array(
        [
            [612, 643, 717, 2, 946, 534, 242, 235, 376, 839],
            [224, 141, 799, 180, 386, 745, 592, 822, 421, 42],
            [241, 369, 831, 67, 258, 549, 615, 529, 458, 524],
            [231, 649, 287, 910, 12, 820, 31, 92, 217, 555],
            [912, 81, 568, 241, 292, 653, 417, 652, 630, 788],
            [32, 822, 788, 166, 122, 690, 304, 568, 449, 214],
            [441, 469, 584, 633, 213, 414, 498, 500, 317, 391],
            [798, 581, 183, 420, 16, 748, 35, 516, 639, 356],
            [351, 921, 67, 33, 592, 775, 780, 335, 464, 788],
            [771, 455, 950, 25, 22, 576, 969, 122, 86, 74],
        ]
    )
    pairs = km.solve(km.Matrix(values))

    assert_valid_assignment(values.tolist(), pairs)
    assert total_cost(values, pairs) == 1071


@pytest.mark.parametrize(
    ["values", "expected"],
    [
        ([[0, 1, 5], [3, 9, 2]], [(0, 0), (1, 2)]),
        ([[6, 5, 1], [2, 8, 9]], [(0, 2), (1, 0)]),
        ([[0, 7], [4, 1], [2, 5]], [(0, 0), (1, 1)]),
        ([[5, 9], [1, 9], [3, 0]], [(1, 0), (2, 1)]),
    ],
    ids=("wide", "wide-reversed", "tall", "tall-skip"),
)
def test_solve_rectangular(values, expected):
    pairs = km.solve(values)

    assert_valid_assignment(values, pairs)
    assert pairs == expected


def test_solve_leaves_matrix_untouched(example_costs):
    mat = km.Matrix(example_costs)
    km.Solver().solve(mat)

    assert mat.tolist() == example_costs


def test_solve_invalid_input():
    with pytest.raises(km.DimensionError):
        km.solve([[1, 2], [3]])
    with pytest.raises(km.DimensionError):
        km.solve([])
    with pytest.raises(ValueError):
        km.solve([[-1]])


@settings(deadline=None)
@given(values=cost_lists())
def test_solve_optimal(values, brute_force):
    pairs = km.solve(values)

    assert_valid_assignment(values, pairs)
    assert total_cost(values, pairs) == brute_force(values)


@settings(deadline=None)
@given(
    values=cost_lists(
        elements=st.floats(0, 1e3, allow_nan=False, allow_infinity=False)
    )
)
def test_solve_optimal_float(values, brute_force):
    pairs = km.solve(values)

    assert_valid_assignment(values, pairs)
    assert total_cost(values, pairs) == pytest.approx(brute_force(values))


@settings(deadline=None, max_examples=50)
@given(values=cost_lists(max_size=12, elements=st.integers(0, 1000)))
def test_solve_matches_scipy(values):
    pairs = km.solve(values)

    row_ind, col_ind = scipy.optimize.linear_sum_assignment(np.asarray(values))
    expected = sum(values[row][col] for row, col in zip(row_ind, col_ind))

    assert_valid_assignment(values, pairs)
    assert total_cost(values, pairs) == expected


@settings(deadline=None)
@given(values=cost_lists())
def test_solve_deterministic(values):
    solver = km.Solver()

    assert solver.solve(values) == solver.solve(values)
    assert km.solve(values) == km.solve(km.Matrix(values))


@settings(deadline=None)
@given(values=cost_lists(), data=st.data())
def test_solve_row_shift(values, data, brute_force):
    shift = data.draw(st.integers(1, 100))
    row = data.draw(st.integers(0, len(values) - 1))

    shifted = [list(r) for r in values]
    shifted[row] = [v + shift for v in shifted[row]]

    pairs = km.solve(values)
    pairs_shifted = km.solve(shifted)

    used = sum(1 for r, _ in pairs if r == row)
    assert total_cost(shifted, pairs) == total_cost(values, pairs) + used * shift
    assert total_cost(shifted, pairs_shifted) == brute_force(shifted)

    if len(values) <= len(values[0]):
        # every row is assigned, so the original pairs remain optimal
        assert total_cost(shifted, pairs_shifted) == total_cost(shifted, pairs)


@settings(deadline=None)
@given(values=cost_lists(), data=st.data())
def test_solve_col_shift(values, data, brute_force):
    shift = data.draw(st.integers(1, 100))
    col = data.draw(st.integers(0, len(values[0]) - 1))

    shifted = [[v + shift if c == col else v for c, v in enumerate(r)] for r in values]

    pairs = km.solve(values)
    pairs_shifted = km.solve(shifted)

    assert total_cost(shifted, pairs_shifted) == brute_force(shifted)

    if len(values[0]) <= len(values):
        assert total_cost(shifted, pairs_shifted) == total_cost(shifted, pairs)


def test_solve_verbose(capsys, example_costs):
    pairs = km.Solver(verbose=True).solve(example_costs)

    out = capsys.readouterr().out
    assert pairs == [(0, 1), (1, 2), (2, 0)]
    assert "row_reduction -> star_zeros" in out
    assert "total cost: 950" in out

    km.Solver().solve(example_costs)
    assert capsys.readouterr().out == ""


def test_solve_disallowed():
    values = [[250, 400, 350], [400, 600, math.inf], [200, 400, 250]]

    assert km.solve(values) == [(0, 1), (1, 0), (2, 2)]


@pytest.mark.parametrize(
    "values",
    [
        [[1, 1, 1], [math.inf, math.inf, math.inf], [1, 1, 1]],
        [[1, math.inf], [1, math.inf]],
        [[1, math.inf, math.inf], [math.inf, 1, math.inf], [1, math.inf, math.inf]],
        [[math.inf, 1], [math.inf, 2], [math.inf, 3]],
    ],
    ids=("blocked-row", "blocked-col", "no-complete", "tall-blocked"),
)
def test_solve_unsolvable(values):
    with pytest.raises(km.UnsolvableError):
        km.solve(values)


def test_solve_unsolvable_lenient():
    values = [[1, math.inf, math.inf], [math.inf, 1, math.inf], [1, math.inf, math.inf]]

    pairs = km.solve(values, strict=False)

    assert len(pairs) == 2
    assert all(not math.isinf(values[row][col]) for row, col in pairs)
    assert total_cost(values, pairs) == 2


@settings(deadline=None)
@given(values=cost_lists(elements=st.one_of(st.integers(0, 50), st.just(math.inf))))
def test_solve_disallowed_scipy(values):
    try:
        row_ind, col_ind = scipy.optimize.linear_sum_assignment(np.array(values))
    except ValueError:
        with pytest.raises(km.UnsolvableError):
            km.solve(values)
        return

    pairs = km.solve(values)

    assert_valid_assignment(values, pairs)
    assert total_cost(values, pairs) == np.array(values)[row_ind, col_ind].sum()


@pytest.mark.parametrize("size", [10, 50, 100])
def test_solve_timing(size):
    values = torch.arange(size)[:, None] * torch.arange(size)[None, :]
    mat = km.Matrix(values)

    solve_time = time.process_time()
    pairs = km.solve(mat)
    solve_time = (time.process_time() - solve_time) * 1e3  # ms

    print(f"- Solve time [{size}, {size}]: {solve_time:.3f} ms")

    assert_valid_assignment(values.tolist(), pairs)

    row_ind, col_ind = scipy.optimize.linear_sum_assignment(values.numpy())
    assert total_cost(values.tolist(), pairs) == values.numpy()[row_ind, col_ind].sum()
