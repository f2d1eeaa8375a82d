"""Substitution first, Gauss-Jordan for what is left, then a final sweep."""

from __future__ import annotations

import logging
import math
import time
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..config import SolverConfig, get_solver_config
from ..logging_utils import apply_debug_logging
from ..types import EquationSolverResult
from .linalg import format_number, gauss_jordan
from .parser import LinearEquation, collect_variables, parse_equation

logger = logging.getLogger(__name__)

_ROW_EPS = 1e-9
_COEFF_EPS = 1e-10


def substitute(equations: List[LinearEquation]) -> Tuple[List[LinearEquation], Dict[str, float]]:
    """Solve ``x = c`` equations one at a time and fold them into the rest.

    ``equations`` is consumed; the remaining equations are returned.
    """

    solution: Dict[str, float] = {}
    changed = True
    while changed:
        changed = False
        for i, equation in enumerate(equations):
            if len(equation.coefficients) != 1:
                continue
            (variable, coefficient), = equation.coefficients.items()
            if coefficient != 1:
                continue
            value = equation.constant
            solution[variable] = value
            del equations[i]
            for other in equations:
                k = other.coefficients.pop(variable, None)
                if k is not None:
                    other.constant -= k * value
            changed = True
            break
    return equations, solution


def build_matrix(equations: Sequence[LinearEquation]) -> Tuple[List[str], np.ndarray]:
    variables = sorted({v for eq in equations for v in eq.coefficients})
    index = {v: i for i, v in enumerate(variables)}
    matrix = np.zeros((len(equations), len(variables) + 1), dtype=float)
    for row, equation in enumerate(equations):
        for variable, coefficient in equation.coefficients.items():
            matrix[row, index[variable]] = coefficient
        matrix[row, -1] = equation.constant
    return variables, matrix


def read_solved_rows(reduced: np.ndarray, variables: Sequence[str]) -> Dict[str, float]:
    """Values of variables whose row has a unit coefficient and nothing else."""

    known: Dict[str, float] = {}
    n = len(variables)
    for row in reduced:
        coefficients = row[:n]
        for i in range(n):
            if abs(coefficients[i] - 1) >= _ROW_EPS:
                continue
            others = np.delete(coefficients, i)
            if np.all(np.abs(others) < _ROW_EPS):
                known[variables[i]] = float(row[-1])
    return known


def final_evaluate(equations: Sequence[LinearEquation], known: Dict[str, float]) -> None:
    """Solve any equation left with a single unknown, until nothing changes."""

    progress = True
    while progress:
        progress = False
        for equation in equations:
            unknowns = [v for v in equation.coefficients if v not in known]
            if len(unknowns) != 1:
                continue
            variable = unknowns[0]
            coefficient = equation.coefficients[variable]
            if abs(coefficient) < _COEFF_EPS:
                continue
            rhs = equation.constant - sum(
                c * known[name] for name, c in equation.coefficients.items() if name != variable
            )
            result = rhs / coefficient
            if math.isfinite(result):
                known[variable] = result
                progress = True


def solve_with_equation_hybrid(
    equations: Sequence[str],
    targets: Sequence[str],
    config: Optional[SolverConfig] = None,
) -> EquationSolverResult:
    config = config or get_solver_config()
    start = time.perf_counter()
    variables = sorted(collect_variables(equations), key=len, reverse=True)
    variable_set = set(variables)
    parsed = [parse_equation(eq, validator=variable_set.__contains__) for eq in equations]

    reduced_equations, known = substitute(parsed)
    reduced_vars, matrix = build_matrix(reduced_equations)
    if matrix.shape[0] > 0 and reduced_vars:
        reduced, _ = gauss_jordan(matrix, pivot_eps=config.hybrid_pivot_eps)
        known.update(read_solved_rows(reduced, reduced_vars))

    final_evaluate(reduced_equations, known)
    solution = {name: format_number(value, config) for name, value in known.items()}

    solved = bool(targets) and all(t in solution for t in targets)
    all_solved = len(solution) == len(variables)
    execution_time = (time.perf_counter() - start) * 1000.0
    logger.info(
        "Hybrid solver: %d equation(s), %d variable(s), %d solved",
        len(equations),
        len(variables),
        len(solution),
    )
    return EquationSolverResult(
        solved=solved,
        all_solved=all_solved,
        score=len(variables),
        execution_time=execution_time,
        solution=solution,
    )


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "build_matrix",
    "final_evaluate",
    "read_solved_rows",
    "solve_with_equation_hybrid",
    "substitute",
]
