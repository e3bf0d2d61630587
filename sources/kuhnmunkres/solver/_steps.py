r"""
The six steps of the Kuhn-Munkres algorithm.

Each step reads and updates a :class:`SolverState` and returns the step that
follows it. All scans over the weights run in row-major order, which makes the
outcome deterministic for a given matrix.
"""

from __future__ import annotations

import torch

from ..consts import MARK_NONE, MARK_PRIME, MARK_STAR
from ._state import SolverState, Step

__all__ = [
    "step_row_reduction",
    "step_star_zeros",
    "step_cover_columns",
    "step_prime_zeros",
    "step_augment_path",
    "step_adjust_weights",
]


@torch.no_grad()
def step_row_reduction(state: SolverState) -> Step:
    """
    For each row, subtract the smallest element in that row from every element
    in that row.
    """
    state.weights -= state.weights.min(dim=1, keepdim=True).values

    return Step.STAR_ZEROS


@torch.no_grad()
def step_star_zeros(state: SolverState) -> Step:
    """
    Star every zero that has no starred zero in its row or column.
    """
    rows, cols = state.weights.shape
    row_done = [False] * rows
    col_done = [False] * cols

    for row, col in state.zeros().nonzero().tolist():
        if row_done[row] or col_done[col]:
            continue
        state.marks[row, col] = MARK_STAR
        row_done[row] = True
        col_done[col] = True

    return Step.COVER_COLUMNS


@torch.no_grad()
def step_cover_columns(state: SolverState) -> Step:
    """
    Cover each column containing a starred zero. When as many columns are covered
    as there are rows, the starred zeros form a complete assignment.
    """
    state.cols_covered |= (state.marks == MARK_STAR).any(dim=0)

    if int(state.cols_covered.sum()) >= state.size:
        return Step.DONE
    return Step.PRIME_ZEROS


@torch.no_grad()
def step_prime_zeros(state: SolverState) -> Step:
    """
    Prime uncovered zeros. When the row of a primed zero contains a starred zero,
    cover that row and uncover the column of the star, then continue. Otherwise,
    the primed zero starts an augmenting path.

    When no uncovered zeros are left, the weights must be adjusted.
    """
    zeros = state.zeros()

    while True:
        found = (zeros & state.uncovered()).nonzero()
        if found.shape[0] == 0:
            return Step.ADJUST_WEIGHTS

        row, col = found[0].tolist()
        state.marks[row, col] = MARK_PRIME

        star_col = state.find_star_in_row(row)
        if star_col is None:
            state.path_start = (row, col)
            return Step.AUGMENT_PATH

        state.rows_covered[row] = True
        state.cols_covered[star_col] = False


@torch.no_grad()
def step_augment_path(state: SolverState) -> Step:
    """
    Construct a series of alternating primed and starred zeros, starting at the
    primed zero found by :func:`step_prime_zeros`. Each primed zero is followed by
    the starred zero in its column (if any), and each starred zero by the primed
    zero in its row. Then unstar each starred zero of the series, star each primed
    zero, erase all primes and uncover every line.
    """
    if state.path_start is None:
        msg = "No primed zero to start the augmenting path from!"
        raise RuntimeError(msg)

    row, col = state.path_start
    path = [(row, col)]

    while True:
        star_row = state.find_star_in_col(col)
        if star_row is None:
            break
        path.append((star_row, col))

        prime_col = state.find_prime_in_row(star_row)
        if prime_col is None:
            msg = f"Starred zero in row {star_row} has no primed zero in its row!"
            raise RuntimeError(msg)
        path.append((star_row, prime_col))
        col = prime_col

    for row, col in path:
        state.marks[row, col] = MARK_NONE if state.is_star(row, col) else MARK_STAR

    state.clear_primes()
    state.clear_covers()
    state.path_start = None

    return Step.COVER_COLUMNS


@torch.no_grad()
def step_adjust_weights(state: SolverState) -> Step:
    """
    Add the smallest uncovered value to every element of each covered row, and
    subtract it from every element of each uncovered column.
    """
    min_val = state.weights[state.uncovered()].min()

    state.weights[state.rows_covered] += min_val
    state.weights[:, ~state.cols_covered] -= min_val

    return Step.PRIME_ZEROS
