r"""
State that is shared between the steps of the solver during a single solve.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as T

import torch
from torch import Tensor

from ..consts import MARK_NONE, MARK_PRIME, MARK_STAR

__all__ = ["Step", "SolverState"]


class Step(enum.Enum):
    """
    Steps of the Kuhn-Munkres algorithm. The solver starts at
    :attr:`ROW_REDUCTION` and runs until :attr:`DONE` is reached.
    """

    ROW_REDUCTION = 1
    STAR_ZEROS = 2
    COVER_COLUMNS = 3
    PRIME_ZEROS = 4
    AUGMENT_PATH = 5
    ADJUST_WEIGHTS = 6
    DONE = 7


@dataclasses.dataclass(eq=False)
class SolverState:
    """
    Working copy of the weights with the mark mask and line covers.

    The weights must have at most as many rows as columns, such that every row
    is assigned when the solver is done.
    """

    weights: Tensor
    marks: Tensor
    rows_covered: Tensor
    cols_covered: Tensor
    path_start: T.Optional[T.Tuple[int, int]] = None

    @classmethod
    def from_weights(cls, weights: Tensor) -> SolverState:
        rows, cols = weights.shape
        if rows > cols:
            msg = f"Expected at most as many rows as columns, got shape {(rows, cols)}!"
            raise ValueError(msg)

        return cls(
            weights=weights,
            marks=torch.full((rows, cols), MARK_NONE, dtype=torch.int8),
            rows_covered=torch.zeros(rows, dtype=torch.bool),
            cols_covered=torch.zeros(cols, dtype=torch.bool),
        )

    @property
    def size(self) -> int:
        """
        Amount of assignments in a complete solution.
        """
        return min(self.weights.shape)

    def zeros(self) -> Tensor:
        return self.weights == 0

    def uncovered(self) -> Tensor:
        """
        Mask of cells where neither the row nor the column is covered.
        """
        return ~self.rows_covered[:, None] & ~self.cols_covered[None, :]

    def is_star(self, row: int, col: int) -> bool:
        return bool(self.marks[row, col] == MARK_STAR)

    def is_prime(self, row: int, col: int) -> bool:
        return bool(self.marks[row, col] == MARK_PRIME)

    def find_star_in_row(self, row: int) -> T.Optional[int]:
        return _first_index(self.marks[row] == MARK_STAR)

    def find_star_in_col(self, col: int) -> T.Optional[int]:
        return _first_index(self.marks[:, col] == MARK_STAR)

    def find_prime_in_row(self, row: int) -> T.Optional[int]:
        return _first_index(self.marks[row] == MARK_PRIME)

    def clear_primes(self) -> None:
        self.marks[self.marks == MARK_PRIME] = MARK_NONE

    def clear_covers(self) -> None:
        self.rows_covered.zero_()
        self.cols_covered.zero_()

    def starred(self) -> T.List[T.Tuple[int, int]]:
        """
        Starred cells in row-major order.
        """
        return [(row, col) for row, col in (self.marks == MARK_STAR).nonzero().tolist()]


def _first_index(mask: Tensor) -> T.Optional[int]:
    index = mask.nonzero()
    if index.shape[0] == 0:
        return None
    return int(index[0, 0])
