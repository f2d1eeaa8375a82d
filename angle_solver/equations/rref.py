"""Pure Gauss-Jordan solver with solution classification."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..config import SolverConfig, get_solver_config
from ..logging_utils import apply_debug_logging
from ..types import Classification, EquationSolverResult
from .linalg import format_number, gauss_jordan, inconsistent_rows

logger = logging.getLogger(__name__)


@dataclass
class PartialSolution:
    classification: Classification
    unique: Dict[str, float] = field(default_factory=dict)
    free: List[str] = field(default_factory=list)
    info: str = ""


def extract_partial_solution(
    reduced: np.ndarray, variables: Sequence[str], config: SolverConfig
) -> PartialSolution:
    """Classify a reduced system and read off the variables it pins down.

    A pivot variable only counts as uniquely determined when its row has no
    other nonzero coefficient; pivots still tied to free variables are left out
    of ``unique``.
    """

    eps = config.rref_zero_eps
    if inconsistent_rows(reduced, eps):
        return PartialSolution("none", info="No solution: inconsistent system")

    n = len(variables)
    pivot_cols: List[int] = []
    unique: Dict[str, float] = {}
    for i, row in enumerate(reduced):
        coefficients = row[:n]
        for j in range(n):
            if j in pivot_cols or abs(coefficients[j] - 1) >= eps:
                continue
            column = np.delete(reduced[:, j], i)
            if np.any(np.abs(column) > eps):
                continue
            pivot_cols.append(j)
            if np.all(np.abs(np.delete(coefficients, j)) <= eps):
                unique[variables[j]] = format_number(float(row[-1]), config)
            break

    free = [variables[j] for j in range(n) if j not in pivot_cols]
    if not free:
        return PartialSolution("unique", unique=unique, info="Unique solution")
    return PartialSolution(
        "infinite",
        unique=unique,
        free=free,
        info=f"Infinite solutions; free variables: {', '.join(free)}",
    )


def solve_with_equations_rref(
    variables: Sequence[str],
    matrix: np.ndarray,
    targets: Sequence[str],
    config: Optional[SolverConfig] = None,
) -> EquationSolverResult:
    config = config or get_solver_config()
    start = time.perf_counter()
    variables = list(variables)

    if matrix.size == 0 or not variables:
        partial = PartialSolution("unique" if not variables else "infinite", free=list(variables))
    else:
        reduced, _ = gauss_jordan(matrix, pivot_eps=config.rref_pivot_eps, zero_eps=config.rref_pivot_eps)
        partial = extract_partial_solution(reduced, variables, config)
    if partial.classification == "none":
        logger.warning("RREF solver: %s", partial.info)

    solution = dict(partial.unique)
    solved = bool(targets) and all(t in solution for t in targets)
    all_solved = all(v in solution for v in variables)
    execution_time = (time.perf_counter() - start) * 1000.0
    logger.info(
        "RREF solver: %d variable(s), classification=%s, %d determined",
        len(variables),
        partial.classification,
        len(solution),
    )
    return EquationSolverResult(
        solved=solved,
        all_solved=all_solved,
        score=len(variables),
        execution_time=execution_time,
        solution=solution,
        classification=partial.classification,
        free_variables=partial.free,
    )


apply_debug_logging(globals(), logger=logger)


__all__ = ["PartialSolution", "extract_partial_solution", "solve_with_equations_rref"]
