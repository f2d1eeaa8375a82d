"""Run the theorem engine and the equation solvers side by side and merge their results."""

from __future__ import annotations

import copy
import logging
from typing import List, Optional

from .config import SolverConfig, get_solver_config
from .equations import EquationOutcome, solve_with_equations
from .equations.parser import EquationParseError
from .logging_utils import debug_log_call
from .model import GeometryModel
from .partitions import Relations
from .theorems import solve_with_theorems
from .types import AgreementReport, AngleConflict, SolveOptions, SolverResults, empty_agreement

logger = logging.getLogger(__name__)


def compare_strategies(
    original: GeometryModel,
    by_theorems: GeometryModel,
    by_equations: GeometryModel,
    equations: EquationOutcome,
    tolerance: float,
) -> AgreementReport:
    """Compare the values each strategy derived for angles that were unknown on input."""

    report = empty_agreement()
    conflicts: List[AngleConflict] = []
    for before, theorem_angle, equation_angle in zip(original.angles, by_theorems.angles, by_equations.angles):
        if before.known_value is not None:
            continue
        t_value = theorem_angle.known_value
        e_value = equation_angle.known_value
        if t_value is None or e_value is None:
            continue
        report["compared"] += 1
        if abs(t_value - e_value) > tolerance:
            conflicts.append({"angle": before.name, "theorems": t_value, "equations": e_value})

    report["conflicts"] = conflicts
    report["solver_conflicts"] = list(equations.cross_check.conflicts)
    report["mismatches"] = list(equations.cross_check.mismatches)
    report["determined"] = sorted(equations.cross_check.determined)
    report["agreed"] = not conflicts and not report["solver_conflicts"] and not report["mismatches"]
    for conflict in conflicts:
        logger.warning(
            "Strategies disagree on %s: theorems=%s equations=%s",
            conflict["angle"],
            conflict["theorems"],
            conflict["equations"],
        )
    for symbol in report["mismatches"]:
        logger.warning("Equation solvers stray from the least-squares reference on %s", symbol)
    return report


@debug_log_call(logger, name="angle_solver.solve", log_result=False)
def solve(model: GeometryModel, options: Optional[SolveOptions] = None) -> SolverResults:
    """Solve the target angles of ``model``.

    The input model is never mutated; each strategy works on its own deep copy.
    Returns an all-false result when no angle is marked as a target.
    """

    options = options or SolveOptions()
    config: SolverConfig = options.config or get_solver_config()
    if not model.target_angles():
        logger.info("No target angles; nothing to solve")
        return SolverResults()

    theorem_model = copy.deepcopy(model)
    logger.info("Running theorem engine over %d angle(s)", len(theorem_model.angles))
    theorems = solve_with_theorems(theorem_model, options, relations=Relations(theorem_model, config))

    equation_model = copy.deepcopy(model)
    logger.info("Running equation solvers")
    try:
        equations = solve_with_equations(equation_model, options, relations=Relations(equation_model, config))
    except EquationParseError as exc:
        logger.error("Equation strategy failed: %s", exc)
        equations = EquationOutcome()

    hybrid = equations.hybrid
    rref = equations.rref
    results = SolverResults(
        theorems=theorems,
        equation_hybrid=hybrid,
        equation_rref=rref,
        solved_angles_with_equations=dict(equations.solved_angles),
        solved=theorems.solved or hybrid.solved or rref.solved,
        score=theorems.score or hybrid.score or rref.score,
        execution_time=theorems.execution_time + hybrid.execution_time + rref.execution_time,
        agreement=compare_strategies(model, theorem_model, equation_model, equations, config.agreement_tolerance),
        equations=list(equations.equations),
        simplified_equations=list(equations.simplified.equations),
        symbol_to_names={s: list(n) for s, n in equations.simplified.symbol_to_names.items()},
    )
    logger.info(
        "Solve finished: solved=%s score=%d time=%.2fms agreed=%s",
        results.solved,
        results.score,
        results.execution_time,
        results.agreement["agreed"],
    )
    return results


__all__ = ["compare_strategies", "solve"]
