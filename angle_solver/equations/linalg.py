"""Gauss-Jordan elimination and numeric cleanup shared by both equation solvers."""

from __future__ import annotations

import logging
from typing import List, Tuple

import numpy as np

from ..config import SolverConfig
from ..logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)


def gauss_jordan(matrix: np.ndarray, *, pivot_eps: float, zero_eps: float = 0.0) -> Tuple[np.ndarray, List[int]]:
    """Reduce the augmented matrix ``[A | b]`` to RREF.

    Pivots are only taken in the coefficient columns, so an inconsistent row
    stays as zeros with a nonzero constant.  Returns the reduced copy and the
    pivot column of each leading row.
    """

    reduced = np.array(matrix, dtype=float, copy=True)
    if reduced.ndim != 2 or reduced.shape[0] == 0 or reduced.shape[1] < 2:
        return reduced, []
    rows, cols = reduced.shape
    pivots: List[int] = []
    r = 0
    for lead in range(cols - 1):
        if r >= rows:
            break
        candidates = np.flatnonzero(np.abs(reduced[r:, lead]) >= pivot_eps)
        if candidates.size == 0:
            continue
        i = r + int(candidates[0])
        if i != r:
            reduced[[r, i]] = reduced[[i, r]]
        reduced[r] /= reduced[r, lead]
        for other in range(rows):
            if other != r and abs(reduced[other, lead]) >= pivot_eps:
                reduced[other] -= reduced[other, lead] * reduced[r]
        pivots.append(lead)
        r += 1

    if zero_eps > 0:
        reduced[np.abs(reduced) < zero_eps] = 0.0
    return reduced, pivots


def inconsistent_rows(reduced: np.ndarray, eps: float) -> List[int]:
    """Rows reading ``0 = c`` with ``c`` nonzero."""

    if reduced.size == 0:
        return []
    coefficients = np.abs(reduced[:, :-1])
    zero_rows = np.all(coefficients <= eps, axis=1)
    return [int(i) for i in np.flatnonzero(zero_rows & (np.abs(reduced[:, -1]) > eps))]


def format_number(value: float, config: SolverConfig) -> float:
    """Snap near-integers and round to ``config.round_decimals`` places."""

    if abs(value) < config.zero_eps:
        return 0.0
    nearest = round(value)
    if abs(value - nearest) < config.snap_eps:
        value = float(nearest)
    return round(value, config.round_decimals)


def format_constant(value: float) -> str:
    """Render a constant for an equation string without exponent or trailing zeros."""

    return np.format_float_positional(float(value), trim="-")


apply_debug_logging(globals(), logger=logger)


__all__ = ["format_constant", "format_number", "gauss_jordan", "inconsistent_rows"]
