"""Equation strategy: extract, simplify, solve twice and write the values back."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..config import SolverConfig, get_solver_config
from ..model import GeometryModel
from ..partitions import Relations
from ..types import EquationSolverResult, SolveOptions
from .crosscheck import CrossCheckReport, cross_check
from .export import clean_equations_for_wolfram, generate_wolfram_url
from .extract import extract_equation_tokens, extract_equations, render_equation
from .hybrid import solve_with_equation_hybrid
from .parser import EquationParseError, equations_to_augmented_matrix, parse_equation
from .rref import solve_with_equations_rref
from .simplify import SimplifiedSystem, simplify_equations

logger = logging.getLogger(__name__)


@dataclass
class EquationOutcome:
    hybrid: EquationSolverResult = field(default_factory=EquationSolverResult)
    rref: EquationSolverResult = field(default_factory=EquationSolverResult)
    equations: List[str] = field(default_factory=list)
    simplified: SimplifiedSystem = field(default_factory=SimplifiedSystem)
    solved_angles: Dict[str, float] = field(default_factory=dict)
    cross_check: CrossCheckReport = field(default_factory=CrossCheckReport)


def solve_with_equations(
    model: GeometryModel,
    options: Optional[SolveOptions] = None,
    *,
    relations: Optional[Relations] = None,
) -> EquationOutcome:
    """Solve ``model`` as a linear system and write determined values into it.

    Raises :class:`EquationParseError` when an extracted equation cannot be
    parsed.
    """

    options = options or SolveOptions()
    config: SolverConfig = options.config or get_solver_config()
    relations = relations or Relations(model, config)

    tokens = extract_equation_tokens(model, relations, config)
    simplified = simplify_equations(tokens, model, relations)
    targets = sorted({simplified.name_to_symbol[a.name] for a in model.target_angles()})

    hybrid = solve_with_equation_hybrid(simplified.equations, targets, config)
    variables, matrix = equations_to_augmented_matrix(simplified.equations)
    rref = solve_with_equations_rref(variables, matrix, targets, config)
    report = cross_check(
        variables,
        matrix,
        hybrid.solution,
        rref.solution,
        tolerance=config.agreement_tolerance,
        reference_tolerance=config.reference_tolerance,
        null_space_tolerance=config.null_space_tolerance,
    )

    solution = dict(hybrid.solution)
    solution.update(rref.solution)

    by_name: Dict[str, list] = {}
    for angle in model.angles:
        by_name.setdefault(angle.name, []).append(angle)

    solved_angles: Dict[str, float] = {}
    for symbol, value in solution.items():
        for name in simplified.symbol_to_names.get(symbol, []):
            for angle in by_name.get(name, []):
                if angle.known_value is None:
                    if not 0 < value <= 180:
                        logger.warning("Equation value %s = %s for %s is out of range", symbol, value, name)
                        continue
                    angle.value = value
                    solved_angles[name] = value
                options.set_angle(angle, f"Solved by equations, {symbol} = {value}°", "equation")

    logger.info(
        "Equation solver: %d equation(s), %d after simplification, %d angle(s) solved",
        len(tokens),
        len(simplified.equations),
        len(solved_angles),
    )
    return EquationOutcome(
        hybrid=hybrid,
        rref=rref,
        equations=[render_equation(t) for t in tokens],
        simplified=simplified,
        solved_angles=solved_angles,
        cross_check=report,
    )


__all__ = [
    "EquationOutcome",
    "EquationParseError",
    "clean_equations_for_wolfram",
    "extract_equations",
    "generate_wolfram_url",
    "parse_equation",
    "simplify_equations",
    "solve_with_equation_hybrid",
    "solve_with_equations",
    "solve_with_equations_rref",
]
