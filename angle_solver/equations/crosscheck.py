"""Independent check of the two linear solvers using SciPy's dense routines."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

import numpy as np
from scipy import linalg

from ..types import SymbolConflict

logger = logging.getLogger(__name__)


@dataclass
class CrossCheckReport:
    determined: Dict[str, float] = field(default_factory=dict)
    consistent: bool = True
    conflicts: List[SymbolConflict] = field(default_factory=list)
    mismatches: List[str] = field(default_factory=list)


def determined_variables(
    variables: Sequence[str], matrix: np.ndarray, *, tol: float = 1e-9
) -> Dict[str, float]:
    """Variables fixed by ``[A | b]`` regardless of the free directions.

    A variable is determined when every null-space vector of ``A`` has a zero
    component for it; its value is then read from a least-squares solution.
    Returns nothing for an inconsistent system.
    """

    if matrix.size == 0 or not variables:
        return {}
    a = matrix[:, :-1]
    b = matrix[:, -1]
    x, _, _, _ = linalg.lstsq(a, b)
    if not np.allclose(a @ x, b, atol=1e-6):
        logger.warning("Cross-check: least-squares residual is not zero, system is inconsistent")
        return {}
    kernel = linalg.null_space(a)
    determined: Dict[str, float] = {}
    for i, name in enumerate(variables):
        if kernel.size == 0 or np.all(np.abs(kernel[i]) <= tol):
            determined[name] = float(x[i])
    return determined


def cross_check(
    variables: Sequence[str],
    matrix: np.ndarray,
    hybrid: Mapping[str, float],
    rref: Mapping[str, float],
    *,
    tolerance: float = 1e-6,
    reference_tolerance: float = 1e-4,
    null_space_tolerance: float = 1e-9,
) -> CrossCheckReport:
    """Compare both solvers with each other and with the least-squares reference.

    ``conflicts`` lists symbols the two solvers both solved but disagree on;
    ``mismatches`` lists determined symbols where either solver strays from the
    reference by more than ``reference_tolerance``.
    """

    report = CrossCheckReport(determined=determined_variables(variables, matrix, tol=null_space_tolerance))
    for name in sorted(set(hybrid) & set(rref)):
        if abs(hybrid[name] - rref[name]) > tolerance:
            report.conflicts.append({"symbol": name, "hybrid": hybrid[name], "rref": rref[name]})
    for name, reference in report.determined.items():
        for solution in (hybrid, rref):
            if name in solution and abs(solution[name] - reference) > reference_tolerance:
                report.mismatches.append(name)
                break
    report.consistent = not report.conflicts and not report.mismatches
    if report.conflicts:
        logger.warning("Cross-check: solvers disagree on %s", [c["symbol"] for c in report.conflicts])
    if report.mismatches:
        logger.warning("Cross-check: solver values differ from the least-squares reference on %s", report.mismatches)
    return report


__all__ = ["CrossCheckReport", "cross_check", "determined_variables"]
