"""
This package implements the Kuhn-Munkres (Hungarian) algorithm as an explicit
state machine over a working copy of the cost matrix.
"""

from __future__ import annotations

from ._solver import *
from ._state import *
from ._steps import *
