r"""
Various utilities for converting and scoring assignments.
"""

from __future__ import annotations

import typing as T

import torch
from torch import Tensor

__all__ = ["pairs_to_tensor", "unmatched_indices", "gather_total_cost"]


def pairs_to_tensor(
    pairs: T.Sequence[T.Tuple[int, int]], device: torch.device | str | None = None
) -> Tensor:
    """
    Convert a list of ``(row, col)`` pairs to a ``(K, 2)`` tensor of indices.
    An empty list yields a tensor of shape ``(0, 2)``.
    """
    return torch.tensor(list(pairs), dtype=torch.long, device=device).view(-1, 2)


def unmatched_indices(size: int, matched: Tensor) -> Tensor:
    """
    Indices in ``[0, size)`` that do not occur in ``matched``.
    """
    idx = torch.arange(size, device=matched.device)
    return idx[~torch.isin(idx, matched)]


def gather_total_cost(
    cost_matrix: Tensor, assignment: Tensor | T.Sequence[T.Tuple[int, int]]
) -> Tensor:
    """
    Gather the total cost of an assignment by summing the assigned entries of the
    cost matrix.

    Parameters
    ----------
    cost_matrix: Tensor[N, M]
        The cost matrix.
    assignment: Tensor[K, 2]
        Row-column pairs, either as a tensor or as a list of tuples.

    Returns
    -------
    Tensor[]
        The total cost of the assignment.
    """
    if not isinstance(assignment, Tensor):
        assignment = pairs_to_tensor(assignment, device=cost_matrix.device)

    return cost_matrix[assignment[:, 0], assignment[:, 1]].sum()
