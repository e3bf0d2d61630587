r"""
Kuhn-Munkres
============

This module implements the Kuhn-Munkres (Hungarian) algorithm, which solves the
rectangular linear assignment problem over a cost matrix.

.. math::

    Solver: Matrix \rightarrow Assignment

Terminology
-----------

- **Assignment**: A set of (row, column) pairs, each index used at most once.

- **Starred zero**: A zero cell that is tentatively included in the assignment.

- **Primed zero**: A zero cell marked while searching for an augmenting path.

- **Covered line**: A row or column that is excluded from the search for uncovered
    zeros.
"""

from __future__ import annotations

__version__ = "1.0.0"

from . import assignment, consts, solver
from .errors import *
from .matrix import *
from .solver import Solver, Step, solve
