"""Derive linear equations over angle names from the diagram's relationships.

Equations are kept as token tuples such as
``("∠ABC", "+", "∠BCA", "+", "∠CAB", "=", "180")`` so that simplification
can substitute whole tokens.  :func:`render_equation` joins them into the
``lhs=rhs`` text form.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..config import SolverConfig, get_solver_config
from ..geometry import (
    find_base_angle,
    find_same_angle_groups,
    is_equilateral_by_circles,
    is_equilateral_by_label,
    isosceles_vertex_angle,
)
from ..model import Angle, GeometryModel
from ..partitions import Relations, contiguous_splits
from .linalg import format_constant

logger = logging.getLogger(__name__)

EquationTokens = Tuple[str, ...]


class LabelToken(str):
    """A label used as a variable, kept apart from numeric and name tokens."""


def _sum(angles: Sequence[Angle]) -> List[str]:
    tokens: List[str] = []
    for angle in angles:
        if tokens:
            tokens.append("+")
        tokens.append(angle.name)
    return tokens


def _equation(lhs: Sequence[str], rhs: Sequence[str]) -> EquationTokens:
    return tuple(lhs) + ("=",) + tuple(rhs)


def render_equation(tokens: Sequence[str]) -> str:
    return "".join(tokens)


def _triangles(relations: Relations, out: List[EquationTokens]) -> None:
    for _, angles in relations.triangles:
        out.append(_equation(_sum(angles), ["180"]))


def _supplementary(relations: Relations, config: SolverConfig, out: List[EquationTokens]) -> None:
    for path in relations.supplementary_paths(config.extraction_supplementary_tolerance):
        out.append(_equation(_sum(path.angles), ["180"]))
        for subset, complement in contiguous_splits(path.angles):
            values = [a.known_value for a in complement]
            if any(v is None for v in values):
                continue
            sum_to = 180.0 - sum(values)  # type: ignore[arg-type]
            if 0 < sum_to <= 180:
                out.append(_equation(_sum(subset), [format_constant(sum_to)]))


def _composed(relations: Relations, out: List[EquationTokens]) -> None:
    for group in relations.composed:
        out.append(_equation([group.parent.name], _sum(group.children)))
        parent_value = group.parent.known_value
        unknown = [c for c in group.children if c.known_value is None]
        if parent_value is None or len(unknown) != 1 or len(unknown) == len(group.children):
            continue
        value = parent_value - sum(c.known_value for c in group.children if c.known_value is not None)
        if value > 0:
            out.append(_equation([unknown[0].name], [format_constant(value)]))


def _same_angles(model: GeometryModel, out: List[EquationTokens]) -> None:
    for vertex_angles in model.angles_by_vertex().values():
        if len(vertex_angles) < 2:
            continue
        for group in find_same_angle_groups(vertex_angles, model.lines):
            for other in group[1:]:
                out.append(_equation([group[0].name], [other.name]))


def _labels_by_name(model: GeometryModel) -> Dict[str, List[Angle]]:
    grouped: Dict[str, List[Angle]] = {}
    for angle in model.angles:
        if angle.label:
            grouped.setdefault(angle.label, []).append(angle)
    return grouped


def _same_labels(model: GeometryModel, out: List[EquationTokens]) -> None:
    for angles in _labels_by_name(model).values():
        for other in angles[1:]:
            out.append(_equation([angles[0].name], [other.name]))


def _isosceles(model: GeometryModel, relations: Relations, out: List[EquationTokens]) -> None:
    added: Set[Tuple[str, str]] = set()

    def _equal(a1: Angle, a2: Angle) -> None:
        key = tuple(sorted((a1.name, a2.name)))
        if key not in added:
            added.add(key)  # type: ignore[arg-type]
            out.append(_equation([a1.name], [a2.name]))

    for circle in model.circles:
        center = circle.center_point
        on_circle = circle.points_on_line
        for i in range(len(on_circle)):
            for j in range(i + 1, len(on_circle)):
                p1, p2 = on_circle[i], on_circle[j]
                base1 = find_base_angle(model.angles, p1, center, p2, model.lines)
                base2 = find_base_angle(model.angles, p2, center, p1, model.lines)
                if base1 is None or base2 is None:
                    continue
                _equal(base1, base2)
                apex = find_base_angle(model.angles, center, p1, p2, model.lines)
                if apex is not None:
                    out.append(_equation([apex.name], ["180", "-", base1.name, "-", base2.name]))

    for triangle, angles in relations.triangles:
        labels = [a.label or "" for a in angles]
        if is_equilateral_by_label(labels) or is_equilateral_by_circles(triangle, model.circles):
            _equal(angles[0], angles[1])
            _equal(angles[1], angles[2])
            out.append(_equation([angles[0].name], ["60"]))
            continue

        for circle in model.circles:
            apex = isosceles_vertex_angle(angles, circle, triangle)
            if apex is None:
                continue
            bases = [a for a in angles if a.point_id != apex.point_id]
            if len(bases) == 2:
                _equal(bases[0], bases[1])
                break

        by_label: Dict[str, List[Angle]] = {}
        for angle in angles:
            if angle.label:
                by_label.setdefault(angle.label, []).append(angle)
        for same in by_label.values():
            if len(same) == 2:
                _equal(same[0], same[1])


def _mirror(relations: Relations, out: List[EquationTokens]) -> None:
    for crossing in relations.crossings:
        for a1, a2 in crossing.pairs:
            out.append(_equation([a1.name], [a2.name]))
        if len(crossing.pairs) != 2:
            continue
        out.append(_equation(_sum(crossing.angles), ["360"]))
        if crossing.adjacent is not None:
            out.append(_equation(_sum(crossing.adjacent), ["180"]))


def _full_circles(relations: Relations, out: List[EquationTokens]) -> None:
    for vertex, cycle in relations.full_circles.items():
        out.append(_equation(_sum(cycle), ["360"]))
        seen = {tuple(sorted(a.name for a in cycle))}
        for partition in relations.circle_partitions.get(vertex, []):
            key = tuple(sorted(a.name for a in partition))
            if key in seen:
                continue
            seen.add(key)
            out.append(_equation(_sum(partition), ["360"]))


def _known_values(model: GeometryModel, out: List[EquationTokens]) -> None:
    for angle in model.angles:
        value = angle.known_value
        if value is not None:
            out.append(_equation([angle.name], [format_constant(value)]))


def _label_assignments(model: GeometryModel, out: List[EquationTokens]) -> None:
    for angle in model.angles:
        if angle.label:
            out.append(_equation([angle.name], [LabelToken(angle.label)]))


def extract_equation_tokens(
    model: GeometryModel, relations: Relations, config: SolverConfig
) -> List[EquationTokens]:
    """All equations implied by the diagram, in category order, without duplicates."""

    out: List[EquationTokens] = []
    _triangles(relations, out)
    _supplementary(relations, config, out)
    _composed(relations, out)
    _same_angles(model, out)
    _same_labels(model, out)
    _isosceles(model, relations, out)
    _mirror(relations, out)
    _full_circles(relations, out)
    _known_values(model, out)
    _label_assignments(model, out)

    unique: List[EquationTokens] = []
    seen: Set[EquationTokens] = set()
    for tokens in out:
        if tokens in seen:
            continue
        seen.add(tokens)
        unique.append(tokens)
    logger.debug("Extracted %d equation(s) (%d before deduplication)", len(unique), len(out))
    return unique


def extract_equations(
    model: GeometryModel, relations: Optional[Relations] = None, config: Optional[SolverConfig] = None
) -> List[str]:
    config = config or get_solver_config()
    relations = relations or Relations(model, config)
    return [render_equation(tokens) for tokens in extract_equation_tokens(model, relations, config)]


__all__ = [
    "EquationTokens",
    "LabelToken",
    "extract_equation_tokens",
    "extract_equations",
    "render_equation",
]
