"""Vertical angles at a crossing of two lines are equal."""

from __future__ import annotations

from .context import RuleContext, RuleOutcome

FULL_ANGLE = 360.0


def apply_mirror_angle(ctx: RuleContext) -> RuleOutcome:
    for crossing in ctx.relations.crossings:
        for a1, a2 in crossing.pairs:
            v1, v2 = ctx.value_of(a1), ctx.value_of(a2)
            if v1 is not None and v2 is None:
                ctx.propose(a2, v1, f"Mirror angle: {a2.name} = {v1}° (mirrors {a1.name})")
            elif v2 is not None and v1 is None:
                ctx.propose(a1, v2, f"Mirror angle: {a1.name} = {v2}° (mirrors {a2.name})")

        if len(crossing.pairs) != 2:
            continue
        unsolved = [pair for pair in crossing.pairs if len(ctx.unknown(pair)) == 2]
        solved = [pair for pair in crossing.pairs if not ctx.unknown(pair)]
        if len(unsolved) != 1 or len(solved) != 1:
            continue
        value = (FULL_ANGLE - ctx.known_sum(solved[0])) / 2
        if value <= 0:
            continue
        ctx.propose_all(
            [(a, value) for a in unsolved[0]],
            f"Mirror angle: (360° - {ctx.known_sum(solved[0])}°) / 2 = {value}° (deduced)",
        )
    return ctx.outcome()


__all__ = ["apply_mirror_angle"]
