"""Fixed-point loop applying the theorem rules in a fixed order."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Tuple

from ..config import SolverConfig, get_solver_config
from ..geometry import triangle_angles
from ..model import GeometryModel, Triangle
from ..partitions import Relations
from ..types import SetAngleCallback, SolveOptions, TheoremSolverResult
from ..validation import validate_angle_value
from .composed import apply_composed_angles
from .context import RuleContext, RuleOutcome
from .full_circle import apply_full_angle_sum
from .mirror import apply_mirror_angle
from .same_angles import apply_same_angles
from .same_label import apply_same_label_angles
from .supplementary import apply_supplementary_angles
from .triangle_sum import apply_triangle_angle_sum

logger = logging.getLogger(__name__)


class RuleKind(str, Enum):
    SAME_LABEL = "same_label_angles"
    SAME_ANGLES = "same_angles"
    SUPPLEMENTARY = "supplementary_angles"
    FULL_CIRCLE = "full_angle_sum"
    TRIANGLE_SUM = "triangle_angle_sum"
    COMPOSED = "composed_angles"
    MIRROR = "mirror_angle"


@dataclass(frozen=True)
class Rule:
    """One theorem: a pure ``apply`` plus the score earned when it changes something."""

    kind: RuleKind
    score: int
    apply: Callable[[RuleContext], RuleOutcome]

    @property
    def name(self) -> str:
        return self.kind.value


RULES: Tuple[Rule, ...] = (
    Rule(RuleKind.SAME_LABEL, 1, apply_same_label_angles),
    Rule(RuleKind.SAME_ANGLES, 0, apply_same_angles),
    Rule(RuleKind.SUPPLEMENTARY, 2, apply_supplementary_angles),
    Rule(RuleKind.FULL_CIRCLE, 3, apply_full_angle_sum),
    Rule(RuleKind.TRIANGLE_SUM, 3, apply_triangle_angle_sum),
    Rule(RuleKind.COMPOSED, 2, apply_composed_angles),
    Rule(RuleKind.MIRROR, 1, apply_mirror_angle),
)


def are_all_triangles_valid(model: GeometryModel, triangles: Sequence[Triangle], tolerance: float) -> bool:
    """True when every complete triangle is solved and sums to 180° within ``tolerance``."""

    if not triangles:
        return False
    found_valid = False
    for triangle in triangles:
        angles = triangle_angles(triangle, model.angles, model.lines)
        if len(angles) != 3:
            continue
        values = [a.known_value for a in angles]
        if any(v is None for v in values):
            return False
        if abs(sum(values) - 180.0) > tolerance:  # type: ignore[arg-type]
            return False
        found_valid = True
    return found_valid


def commit_outcome(
    model: GeometryModel,
    relations: Relations,
    rule: Rule,
    outcome: RuleOutcome,
    set_angle: SetAngleCallback,
    solved_angles: Dict[str, float],
) -> bool:
    """Write validated assignments into ``model``; returns whether anything changed."""

    if not outcome.assignments:
        return outcome.changed
    committed = 0
    for assignment in outcome.assignments:
        angle = assignment.angle
        if assignment.label is not None and not angle.label:
            angle.label = assignment.label
            committed += 1
        if assignment.value is None or angle.known_value is not None:
            continue
        result = validate_angle_value(angle, assignment.value, model, relations)
        if not result.valid:
            logger.debug("%s: dropped %s = %s (%s)", rule.name, angle.name, assignment.value, result.violation)
            continue
        angle.value = assignment.value
        solved_angles[angle.name] = assignment.value
        committed += 1
        logger.debug("%s: %s = %s", rule.name, angle.name, assignment.value)
        set_angle(angle, assignment.reason, rule.name)
    return committed > 0


def solve_with_theorems(
    model: GeometryModel,
    options: Optional[SolveOptions] = None,
    *,
    rules: Sequence[Rule] = RULES,
    relations: Optional[Relations] = None,
) -> TheoremSolverResult:
    """Apply ``rules`` until nothing changes, the targets are solved or the cap is hit.

    ``model`` is mutated in place.  Hitting ``max_iterations`` is logged and the
    partial result is returned.
    """

    options = options or SolveOptions()
    config: SolverConfig = options.config or get_solver_config()
    max_iterations = options.max_iterations if options.max_iterations is not None else config.max_iterations
    relations = relations or Relations(model, config)

    start = time.perf_counter()
    targets = model.target_angles()
    solved_angles: Dict[str, float] = {}
    changes_made = True
    iterations = 0
    score = 0

    while changes_made and iterations < max_iterations:
        changes_made = False
        iterations += 1

        if all(a.known_value is not None for a in model.angles):
            break
        unsolved_targets = [a for a in targets if a.known_value is None]
        if not unsolved_targets and are_all_triangles_valid(
            model, model.triangles, config.triangle_check_tolerance
        ):
            break

        for rule in rules:
            ctx = RuleContext(model, relations, config)
            outcome = rule.apply(ctx)
            if commit_outcome(model, relations, rule, outcome, options.set_angle, solved_angles):
                changes_made = True
                score += rule.score

    if iterations >= max_iterations:
        logger.warning("Reached max iterations (%d); returning partial results", iterations)

    solved = bool(targets) and all(a.known_value is not None for a in targets)
    all_solved = bool(model.angles) and all(a.known_value is not None for a in model.angles)
    execution_time = (time.perf_counter() - start) * 1000.0
    logger.info(
        "Theorem solver finished: iterations=%d solved=%s all_solved=%s score=%d",
        iterations,
        solved,
        all_solved,
        score,
    )
    return TheoremSolverResult(
        solved=solved,
        all_solved=all_solved,
        score=score,
        execution_time=execution_time,
        iterations=iterations,
        changes_made=changes_made,
        solved_angles=solved_angles,
    )


__all__ = [
    "RULES",
    "Rule",
    "RuleKind",
    "are_all_triangles_valid",
    "commit_outcome",
    "solve_with_theorems",
]
