"""Geometrically identical angles at one vertex share label and value."""

from __future__ import annotations

from ..geometry import find_same_angle_groups
from .context import RuleContext, RuleOutcome


def apply_same_angles(ctx: RuleContext) -> RuleOutcome:
    for vertex_angles in ctx.model.angles_by_vertex().values():
        if len(vertex_angles) < 2:
            continue
        for group in find_same_angle_groups(vertex_angles, ctx.lines):
            labelled = next((a for a in group if ctx.label_of(a)), None)
            if labelled is not None:
                label = ctx.label_of(labelled)
                for angle in group:
                    ctx.propose_label(angle, label, f"same angle as {labelled.name}")

            known = next((a for a in group if ctx.is_known(a)), None)
            if known is None:
                continue
            value = ctx.value_of(known)
            for angle in group:
                if angle is known:
                    continue
                ctx.propose(angle, value, f"same angle {angle.name} has value {value}° by same angles group")
    return ctx.outcome()


__all__ = ["apply_same_angles"]
