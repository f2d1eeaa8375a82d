"""Angles sharing a label share a value."""

from __future__ import annotations

from typing import Dict

from .context import RuleContext, RuleOutcome


def apply_same_label_angles(ctx: RuleContext) -> RuleOutcome:
    label_values: Dict[str, float] = {}
    unsolved = []
    for angle in ctx.angles:
        label = ctx.label_of(angle)
        if not label:
            continue
        value = ctx.value_of(angle)
        if value is not None:
            label_values[label] = value
        else:
            unsolved.append(angle)

    for angle in unsolved:
        label = ctx.label_of(angle)
        value = label_values.get(label)
        if value is None:
            continue
        # The validator vetoes composed children that expect a derived value.
        ctx.propose(angle, value, f"this label ({label}) was already defined {value}°")
    return ctx.outcome()


__all__ = ["apply_same_label_angles"]
