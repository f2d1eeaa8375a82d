"""Angles spanning a straight line at a vertex sum to 180°."""

from __future__ import annotations

import logging
from typing import List, Set, Tuple

from ..model import Angle
from ..partitions import contiguous_splits
from .context import RuleContext, RuleOutcome, solve_group_sum

logger = logging.getLogger(__name__)

STRAIGHT_ANGLE = 180.0


def supplementary_groups(ctx: RuleContext) -> List[Tuple[List[Angle], float]]:
    """Spanning paths and their sub-slices whose complement is already known."""

    groups: List[Tuple[List[Angle], float]] = []
    for path in ctx.relations.supplementary_paths(ctx.config.supplementary_tolerance):
        groups.append((path.angles, STRAIGHT_ANGLE))
        for subset, complement in contiguous_splits(path.angles):
            if ctx.unknown(complement):
                continue
            sum_to = STRAIGHT_ANGLE - ctx.known_sum(complement)
            if 0 < sum_to <= STRAIGHT_ANGLE:
                groups.append((subset, sum_to))

    unique: List[Tuple[List[Angle], float]] = []
    seen: Set[Tuple[Tuple[str, ...], float]] = set()
    for angles, sum_to in groups:
        key = (tuple(sorted(a.id for a in angles)), sum_to)
        if key in seen:
            continue
        seen.add(key)
        unique.append((angles, sum_to))
    return unique


def apply_supplementary_angles(ctx: RuleContext) -> RuleOutcome:
    groups = supplementary_groups(ctx)
    logger.debug("Supplementary: %d candidate group(s)", len(groups))
    for angles, sum_to in groups:
        solve_group_sum(
            ctx,
            angles,
            sum_to,
            f"Supplementary angles sum to {sum_to}°, so {{angle}} = {{value}}°",
        )
    return ctx.outcome()


__all__ = ["apply_supplementary_angles", "supplementary_groups"]
