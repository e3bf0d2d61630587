from __future__ import annotations

import typing as T

import torch
from torch import Tensor

from ..errors import UnsolvableError
from ..matrix import Matrix
from ._state import SolverState, Step
from ._steps import (
    step_adjust_weights,
    step_augment_path,
    step_cover_columns,
    step_prime_zeros,
    step_row_reduction,
    step_star_zeros,
)

__all__ = ["Solver", "solve", "replace_disallowed"]

StepFunction: T.TypeAlias = T.Callable[[SolverState], Step]


def replace_disallowed(weights: Tensor) -> Tensor:
    """
    Replace infinite (disallowed) weights by a finite cost that exceeds the total
    cost of any assignment over the finite weights. An optimal assignment then
    only uses disallowed pairs when no assignment without them exists.
    """
    disallowed = torch.isinf(weights)
    if not disallowed.any():
        return weights

    weights = weights.to(torch.float64)
    finite = weights[~disallowed]
    top = finite.max().item() if finite.numel() > 0 else 0.0
    sentinel = top * min(weights.shape) + 1.0

    return torch.where(disallowed, torch.full_like(weights, sentinel), weights)


class Solver:
    """
    Solves the linear assignment problem over a :class:`Matrix` with the
    Kuhn-Munkres (Hungarian) algorithm.

    Every call to :meth:`solve` works on a fresh :class:`SolverState`, so that
    a solver holds no state between calls.
    """

    steps: T.Final[T.Mapping[Step, StepFunction]] = {
        Step.ROW_REDUCTION: step_row_reduction,
        Step.STAR_ZEROS: step_star_zeros,
        Step.COVER_COLUMNS: step_cover_columns,
        Step.PRIME_ZEROS: step_prime_zeros,
        Step.AUGMENT_PATH: step_augment_path,
        Step.ADJUST_WEIGHTS: step_adjust_weights,
    }

    verbose: bool

    def __init__(self, verbose: bool = False):
        """
        Parameters
        ----------
        verbose, optional
            Print every step transition and the resulting assignment.
        """
        self.verbose = verbose

    def solve(
        self,
        matrix: Matrix | T.Sequence[T.Sequence[T.Any]],
        strict: bool = True,
    ) -> T.List[T.Tuple[int, int]]:
        """
        Find the assignment of minimal total cost.

        Parameters
        ----------
        matrix
            Cost matrix (NxM). Anything other than a :class:`Matrix` is converted
            first, which validates it.
        strict, optional
            When set, raise if the assignment cannot avoid a disallowed pair.
            Otherwise, such pairs are left out of the result.

        Returns
        -------
            List of ``min(N, M)`` pairs ``(row, col)``, sorted by row. Fewer pairs
            are returned only when ``strict`` is unset and disallowed pairs were
            dropped.

        Raises
        ------
        UnsolvableError
            If ``strict`` is set and no assignment avoids the disallowed pairs.
        """
        if not isinstance(matrix, Matrix):
            matrix = Matrix(matrix)

        disallowed = matrix.disallowed()
        if strict:
            _check_solvable(disallowed)

        weights = replace_disallowed(matrix.tensor())
        transposed = matrix.rows() > matrix.columns()
        if transposed:
            weights = weights.t().contiguous()

        state = SolverState.from_weights(weights)
        self.run(state)

        pairs = state.starred()
        if transposed:
            pairs = [(row, col) for col, row in pairs]
        pairs.sort()

        blocked = [(row, col) for row, col in pairs if disallowed[row, col]]
        if blocked and strict:
            msg = f"No assignment avoids the disallowed pairs, optimum uses {blocked}!"
            raise UnsolvableError(msg)
        pairs = [pair for pair in pairs if pair not in blocked]

        if self.verbose:
            total = sum(matrix.get(row, col) for row, col in pairs)
            print(f"Munkres assignment completed with total cost: {total}")
            for row, col in pairs:
                print(f"- match: row {row} -> col {col} (cost: {matrix.get(row, col)})")

        return pairs

    def run(self, state: SolverState, step: Step = Step.ROW_REDUCTION) -> Step:
        """
        Drive the state machine from ``step`` until it is done.
        """
        while step is not Step.DONE:
            next_step = self.steps[step](state)
            if self.verbose:
                covered = int(state.cols_covered.sum())
                print(
                    f" - {step.name.lower()} -> {next_step.name.lower()} "
                    f"({covered}/{state.size} columns covered)"
                )
            step = next_step

        return step


def _check_solvable(disallowed: Tensor) -> None:
    # Lines of the smaller dimension must all be assigned.
    dim = 1 if disallowed.shape[0] <= disallowed.shape[1] else 0
    blocked = disallowed.all(dim=dim).nonzero().flatten().tolist()
    if blocked:
        name = "Rows" if dim == 1 else "Columns"
        msg = f"{name} {blocked} only hold disallowed pairs!"
        raise UnsolvableError(msg)


def solve(
    matrix: Matrix | T.Sequence[T.Sequence[T.Any]],
    strict: bool = True,
) -> T.List[T.Tuple[int, int]]:
    """
    See :meth:`Solver.solve`.
    """
    return Solver().solve(matrix, strict=strict)
