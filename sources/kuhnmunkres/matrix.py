r"""
Dense cost matrix that is consumed by the solver.
"""

from __future__ import annotations

import math
import numbers
import operator
import typing as T

import numpy as np
import torch
from torch import Tensor

from .errors import DimensionError

__all__ = ["Matrix"]

_INTEGER_DTYPES: T.Final = (
    torch.uint8,
    torch.int8,
    torch.int16,
    torch.int32,
    torch.int64,
)


def _rows_to_tensor(values: T.Iterable[T.Iterable[T.Any]]) -> Tensor:
    try:
        rows = [list(row) for row in values]
    except TypeError:
        msg = "Expected a two-dimensional sequence of costs!"
        raise DimensionError(msg) from None

    if len(rows) == 0:
        msg = "Cost matrix must have at least one row!"
        raise DimensionError(msg)

    width = len(rows[0])
    for index, row in enumerate(rows):
        if len(row) != width:
            msg = (
                f"Row {index} has {len(row)} columns, but row 0 has {width} columns!"
            )
            raise DimensionError(msg)

    return _array_to_tensor(np.asarray(rows))


def _array_to_tensor(array: np.ndarray) -> Tensor:
    if array.dtype.kind in "iu":
        array = array.astype(np.int64)
    elif array.dtype.kind != "f":
        msg = f"Costs must be integer or floating point numbers, got {array.dtype}!"
        raise ValueError(msg)
    elif array.dtype.itemsize > 8:
        array = array.astype(np.float64)

    return torch.from_numpy(np.array(array, copy=True))


def _check_tensor(data: Tensor) -> Tensor:
    if data.ndim != 2:
        msg = f"Expected a two-dimensional cost matrix, got {data.ndim} dimensions!"
        raise DimensionError(msg)
    if min(data.shape) == 0:
        msg = f"Cost matrix must not have a zero dimension, got shape {tuple(data.shape)}!"
        raise DimensionError(msg)

    if data.dtype in _INTEGER_DTYPES:
        data = data.to(torch.int64)
    elif not data.dtype.is_floating_point:
        msg = f"Costs must be integer or floating point numbers, got {data.dtype}!"
        raise ValueError(msg)
    elif torch.isnan(data).any():
        msg = "Costs must not be NaN!"
        raise ValueError(msg)

    if (data < 0).any():
        msg = "Costs must be non-negative!"
        raise ValueError(msg)

    return data


def _check_value(value: T.Any) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        msg = f"Cost must be a real number, got {type(value).__name__}!"
        raise ValueError(msg)
    if math.isnan(value):
        msg = "Cost must not be NaN!"
        raise ValueError(msg)
    if value < 0:
        msg = f"Cost must be non-negative, got {value}!"
        raise ValueError(msg)


def _fits_dtype(value: int | float, dtype: torch.dtype) -> bool:
    """
    Whether ``value`` is stored in ``dtype`` without turning into another number.
    """
    if math.isinf(value):
        return dtype.is_floating_point
    if dtype.is_floating_point:
        return abs(value) <= torch.finfo(dtype).max
    if not isinstance(value, numbers.Integral) and not float(value).is_integer():
        return False
    return value <= torch.iinfo(dtype).max


class Matrix:
    """
    An ``n x m`` grid of non-negative costs. An infinite cost marks a disallowed
    pair, which the solver never assigns.

    The shape is fixed at construction. Values are stored in a CPU tensor of
    dtype ``int64`` for integral input, or the input's floating point dtype
    otherwise. The solver works on a copy, so a matrix is never modified by
    solving it.
    """

    __slots__ = ("_data",)

    def __init__(self, values: Tensor | np.ndarray | T.Sequence[T.Sequence[T.Any]]):
        """
        Parameters
        ----------
        values
            Rectangular sequence of rows, or a two-dimensional array or tensor.

        Raises
        ------
        DimensionError
            If the rows are of inconsistent length, or either dimension is zero.
        ValueError
            If a cost is negative, NaN or not a number.
        """
        if isinstance(values, Matrix):
            data = values._data.clone()
        elif isinstance(values, Tensor):
            data = values.detach().cpu().clone()
        elif isinstance(values, np.ndarray):
            if values.ndim != 2:
                msg = f"Expected a two-dimensional cost matrix, got {values.ndim} dimensions!"
                raise DimensionError(msg)
            data = _array_to_tensor(values)
        else:
            data = _rows_to_tensor(values)

        self._data = _check_tensor(data)

    @classmethod
    def from_fn(
        cls, rows: int, columns: int, fn: T.Callable[[int, int], T.Any]
    ) -> Matrix:
        """
        Build a matrix where the cost at ``(row, col)`` is ``fn(row, col)``.
        """
        return cls([[fn(row, col) for col in range(columns)] for row in range(rows)])

    def rows(self) -> int:
        return self._data.shape[0]

    def columns(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows(), self.columns()

    @property
    def dtype(self) -> torch.dtype:
        return self._data.dtype

    def get(self, row: int, col: int) -> int | float:
        row, col = self._check_index(row, col)
        return self._data[row, col].item()

    def set(self, row: int, col: int, value: int | float) -> None:
        row, col = self._check_index(row, col)
        _check_value(value)

        if not _fits_dtype(value, self._data.dtype):
            self._data = self._data.to(torch.float64)

        self._data[row, col] = value

    def is_disallowed(self, row: int, col: int) -> bool:
        row, col = self._check_index(row, col)
        return bool(torch.isinf(self._data[row, col]))

    def disallowed(self) -> Tensor:
        """
        Mask of the pairs with an infinite cost.
        """
        return torch.isinf(self._data)

    def tensor(self) -> Tensor:
        """
        Return a copy of the costs as a tensor.
        """
        return self._data.clone()

    def tolist(self) -> list[list[int | float]]:
        return self._data.tolist()

    def _check_index(self, row: int, col: int) -> tuple[int, int]:
        row, col = operator.index(row), operator.index(col)
        if not 0 <= row < self.rows():
            msg = f"Row index {row} out of range for matrix with {self.rows()} rows!"
            raise IndexError(msg)
        if not 0 <= col < self.columns():
            msg = (
                f"Column index {col} out of range for matrix with "
                f"{self.columns()} columns!"
            )
            raise IndexError(msg)
        return row, col

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(torch.equal(self._data, other._data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.tolist()!r})"
