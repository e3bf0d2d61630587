from __future__ import annotations

import math
from abc import abstractmethod
from typing import Tuple

import torch

from ..errors import DimensionError

__all__ = ["Assignment"]


class Assignment(torch.nn.Module):
    """
    Solves a linear assignment problem (LAP).
    """

    threshold: float

    def __init__(self, threshold: float = math.inf):
        """
        Parameters
        ----------
        threshold, optional
            Pairs with a cost at or above this value are disallowed before solving,
            such that their row and column are left unmatched unless another
            pair is available.
        """
        super().__init__()

        self.threshold = threshold

    def extra_repr(self) -> str:
        return f"threshold={self.threshold}"

    def forward(
        self, cost_matrix: torch.Tensor
    ) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
        """
        Solve the cost matrix

        Parameters
        ----------
        cost_matrix
            Cost matrix (NxM) to solve

        Returns
        -------
            Tuple of matches (N_match x 2), unmatched rows and
            unmatched columns
        """
        if cost_matrix.ndim != 2:
            msg = f"Expected a cost matrix of shape (N, M), got {tuple(cost_matrix.shape)}!"
            raise DimensionError(msg)

        if min(cost_matrix.shape) == 0:
            return self._no_match(cost_matrix)

        if torch.isnan(cost_matrix).any():
            msg = "Costs must not be NaN!"
            raise ValueError(msg)

        cost_matrix = torch.where(cost_matrix < self.threshold, cost_matrix, torch.inf)

        return self._assign(cost_matrix)

    @staticmethod
    def _no_match(
        cost_matrix: torch.Tensor,
    ) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
        cs_num, ds_num = cost_matrix.shape
        device = cost_matrix.device
        return (
            torch.empty((0, 2), dtype=torch.long, device=device),
            torch.arange(cs_num, dtype=torch.long, device=device),
            torch.arange(ds_num, dtype=torch.long, device=device),
        )

    @abstractmethod
    def _assign(
        self, cost_matrix: torch.Tensor
    ) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
        raise NotImplementedError
