"""Angles going once around a vertex sum to 360°."""

from __future__ import annotations

from typing import List

from ..model import Angle
from ..partitions import cyclic_splits
from .context import RuleContext, RuleOutcome, solve_group_sum

FULL_ANGLE = 360.0


def _vertical_pairs(ctx: RuleContext, cycle: List[Angle]) -> None:
    for a1, a2 in ((cycle[0], cycle[2]), (cycle[1], cycle[3])):
        v1, v2 = ctx.value_of(a1), ctx.value_of(a2)
        if v1 is not None and v2 is None:
            ctx.propose(a2, v1, f"Vertical angles: {a2.name} = {a1.name} = {v1}°")
        elif v2 is not None and v1 is None:
            ctx.propose(a1, v2, f"Vertical angles: {a1.name} = {a2.name} = {v2}°")

    for i in range(4):
        a1, a2, a3, a4 = (cycle[(i + k) % 4] for k in range(4))
        if ctx.unknown([a1, a2]) or len(ctx.unknown([a3, a4])) != 2:
            continue
        label = ctx.label_of(a3)
        if not label or ctx.label_of(a4) != label:
            continue
        remaining = FULL_ANGLE - ctx.known_sum([a1, a2])
        value = remaining / 2
        if 0 < value < 180:
            ctx.propose_all(
                [(a3, value), (a4, value)],
                f"360° - ({a1.name} + {a2.name}) = {remaining}°, same label, each = {value}°",
            )


def apply_full_angle_sum(ctx: RuleContext) -> RuleOutcome:
    for vertex, cycle in ctx.relations.full_circles.items():
        partitions = ctx.relations.circle_partitions.get(vertex, [cycle])
        for partition in partitions:
            solve_group_sum(
                ctx,
                partition,
                FULL_ANGLE,
                f"Angles at {vertex} sum to 360°: {{angle}} = {{value}}°",
                upper=FULL_ANGLE,
            )

        for partition in partitions:
            for subset, complement in cyclic_splits(partition):
                if ctx.unknown(complement):
                    continue
                sum_to = FULL_ANGLE - ctx.known_sum(complement)
                if 0 < sum_to < FULL_ANGLE:
                    solve_group_sum(
                        ctx,
                        subset,
                        sum_to,
                        f"Angles at {vertex} sum to {sum_to}°: {{angle}} = {{value}}°",
                        upper=FULL_ANGLE,
                    )

        if len(cycle) == 4:
            _vertical_pairs(ctx, cycle)

        label = ctx.label_of(cycle[0])
        if label and all(ctx.label_of(a) == label and not ctx.is_known(a) for a in cycle):
            value = FULL_ANGLE / len(cycle)
            if value < 180:
                ctx.propose_all(
                    [(a, value) for a in cycle],
                    f"{len(cycle)} same-label angles around vertex sum to 360°, each = {value}°",
                )
    return ctx.outcome()


__all__ = ["apply_full_angle_sum"]
