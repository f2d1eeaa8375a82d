"""A composed angle equals the sum of the consecutive angles inside it."""

from __future__ import annotations

from .context import RuleContext, RuleOutcome, solve_group_sum


def apply_composed_angles(ctx: RuleContext) -> RuleOutcome:
    for group in ctx.relations.composed:
        parent_value = ctx.value_of(group.parent)
        if parent_value is not None:
            solve_group_sum(
                ctx,
                group.children,
                parent_value,
                f"Composed angle: {group.parent.name} - known children, {{angle}} = {{value}}°",
            )
            continue
        if ctx.unknown(group.children):
            continue
        total = ctx.known_sum(group.children)
        if 0 < total <= 180:
            ctx.propose(group.parent, total, f"Composed angle: sum of children = {total}°")
    return ctx.outcome()


__all__ = ["apply_composed_angles"]
