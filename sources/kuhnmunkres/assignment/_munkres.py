"""
PyTorch front-end to the Kuhn-Munkres state machine for solving the assignment
problem.
"""

from __future__ import annotations

from typing import Tuple

import torch
import torch.fx
import typing_extensions as TX
from torch import Tensor

from ..matrix import Matrix
from ..solver import Solver
from ._base import Assignment
from ._utils import pairs_to_tensor, unmatched_indices

__all__ = ["Munkres", "munkres_assignment"]


class Munkres(Assignment):
    r"""
    Implements the Hungarian algorithm for solving a linear assignment problem.
    """

    @TX.override
    def _assign(self, cost_matrix: Tensor) -> Tuple[Tensor, Tensor, Tensor]:
        """
        Solves the assignment problem using the Hungarian algorithm.

        Parameters
        ----------
        cost_matrix
            Cost matrix

        Returns
        -------
            Tuple of matches, unmatched rows and unmatched columns.
        """
        return munkres_assignment(cost_matrix)


@torch.no_grad()
def munkres_assignment(
    cost_matrix: torch.Tensor,
) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
    """
    Perform linear assignment using the Kuhn-Munkres state machine. The cost
    matrix must be non-negative. Infinite costs mark pairs that are never matched.
    """

    device = cost_matrix.device

    pairs = Solver().solve(Matrix(cost_matrix), strict=False)

    matches = pairs_to_tensor(pairs, device=device)
    unmatch_row = unmatched_indices(cost_matrix.shape[0], matches[:, 0])
    unmatch_col = unmatched_indices(cost_matrix.shape[1], matches[:, 1])

    return matches, unmatch_row, unmatch_col


torch.fx.wrap("munkres_assignment")
