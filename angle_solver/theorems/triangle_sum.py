"""Interior angles of a triangle sum to 180°."""

from __future__ import annotations

import logging

from ..geometry import (
    is_equilateral_by_circles,
    is_equilateral_by_label,
    isosceles_vertex_angle,
    triangle_angles,
)
from .context import RuleContext, RuleOutcome

logger = logging.getLogger(__name__)

TRIANGLE_SUM = 180.0


def apply_triangle_angle_sum(ctx: RuleContext) -> RuleOutcome:
    for triangle in ctx.triangles:
        angles = triangle_angles(triangle, ctx.angles, ctx.lines)
        if len(angles) != 3:
            logger.warning("Triangle does not have exactly 3 angles (%s)", ",".join(triangle))
            continue

        remaining = ctx.unknown(angles)
        if not remaining:
            continue
        known = ctx.known_sum(angles)
        if len(remaining) == 1:
            value = TRIANGLE_SUM - known
            ctx.propose(
                remaining[0],
                value,
                f"only 1 angle was unknown in triangle ({','.join(triangle)}) "
                f"so {remaining[0].name} can be calculated as {value}°",
            )
            continue

        labels = [ctx.label_of(a) for a in angles]
        if is_equilateral_by_label(labels) or is_equilateral_by_circles(triangle, ctx.circles):
            ctx.propose_all(
                [(a, TRIANGLE_SUM / 3) for a in remaining],
                "Equilateral triangle base angle calculated as 180° / 3",
            )
            continue

        if len(remaining) == 2 and ctx.label_of(remaining[0]) and (
            ctx.label_of(remaining[0]) == ctx.label_of(remaining[1])
        ):
            value = (TRIANGLE_SUM - known) / 2
            if value > 0:
                ctx.propose_all([(a, value) for a in remaining], "Isosceles triangle base angles calculated")
            continue

        for circle in ctx.circles:
            apex = isosceles_vertex_angle(angles, circle, triangle)
            if apex is None:
                continue
            apex_value = ctx.value_of(apex)
            if apex_value is not None:
                base = (TRIANGLE_SUM - apex_value) / 2
                if base <= 0:
                    break
                if ctx.propose_all(
                    [(a, base) for a in remaining],
                    f"Isosceles triangle base angle calculated as (180° - {apex_value}°) / 2",
                ):
                    break
                continue
            if len(remaining) != 2:
                continue
            known_base = next(
                (a for a in angles if a.point_id != apex.point_id and ctx.is_known(a)), None
            )
            if known_base is None:
                continue
            base_value = ctx.value_of(known_base)
            proposals = [
                (a, TRIANGLE_SUM - 2 * base_value if a.point_id == apex.point_id else base_value)
                for a in remaining
            ]
            if any(value <= 0 for _, value in proposals):
                continue
            if ctx.propose_all(
                proposals,
                "Isosceles triangle base angle was given, the rest follows from the triangle angle sum",
            ):
                break
    return ctx.outcome()


__all__ = ["apply_triangle_angle_sum"]
