"""Consistency checks run before a proposed angle value is committed."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from .model import Angle
from .partitions import Relations

logger = logging.getLogger(__name__)


class ValueView(Protocol):
    """Anything exposing the current values and labels of the model's angles."""

    angles: Sequence[Angle]

    def value_of(self, angle: Angle) -> Optional[float]:
        ...

    def label_of(self, angle: Angle) -> str:
        ...


@dataclass
class ValidationResult:
    valid: bool
    violation: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid


_OK = ValidationResult(valid=True)


def _mismatch(value: float, expected: float, tolerance: float) -> bool:
    return abs(value - expected) > tolerance


def _check_label(angle: Angle, value: float, view: ValueView, tolerance: float) -> Optional[str]:
    label = view.label_of(angle)
    if not label:
        return None
    for other in view.angles:
        if other.id == angle.id or view.label_of(other) != label:
            continue
        other_value = view.value_of(other)
        if other_value is not None and _mismatch(value, other_value, tolerance):
            return f"label {label} already solved as {other_value} on {other.name}"
    return None


def _check_composed(
    angle: Angle, value: float, view: ValueView, relations: Relations, tolerance: float
) -> Optional[str]:
    for group in relations.composed:
        if group.parent.id == angle.id:
            values = [view.value_of(child) for child in group.children]
            if all(v is not None for v in values):
                expected = sum(values)  # type: ignore[arg-type]
                if _mismatch(value, expected, tolerance):
                    return f"composed parent expects {expected} from its children"
            continue
        if not any(child.id == angle.id for child in group.children):
            continue
        parent_value = view.value_of(group.parent)
        if parent_value is None:
            continue
        others = [view.value_of(c) for c in group.children if c.id != angle.id]
        if all(v is not None for v in others):
            expected = parent_value - sum(others)  # type: ignore[arg-type]
            if _mismatch(value, expected, tolerance):
                return f"composed child expects {expected} from parent {group.parent.name}"
    return None


def _check_triangles(
    angle: Angle, value: float, view: ValueView, relations: Relations, tolerance: float
) -> Optional[str]:
    for triangle, angles in relations.triangles:
        if not any(a.id == angle.id for a in angles):
            continue
        others = [view.value_of(a) for a in angles if a.id != angle.id]
        if len(others) != 2 or any(v is None for v in others):
            continue
        expected = 180.0 - sum(others)  # type: ignore[arg-type]
        if _mismatch(value, expected, tolerance):
            return f"triangle {''.join(triangle)} expects {expected}"
    return None


def _check_full_circle(
    angle: Angle, value: float, view: ValueView, relations: Relations, tolerance: float
) -> Optional[str]:
    cycle = relations.full_circles.get(angle.point_id)
    if not cycle or not any(a.id == angle.id for a in cycle):
        return None
    others = [view.value_of(a) for a in cycle if a.id != angle.id]
    if any(v is None for v in others):
        return None
    expected = 360.0 - sum(others)  # type: ignore[arg-type]
    if _mismatch(value, expected, tolerance):
        return f"full circle at {angle.point_id} expects {expected}"
    return None


def validate_angle_value(
    angle: Angle,
    value: float,
    view: ValueView,
    relations: Relations,
    *,
    tolerance: Optional[float] = None,
) -> ValidationResult:
    """Check ``value`` for ``angle`` against every relationship already pinned down.

    Only fully determined relationships can reject a value; partially known
    ones are left to later passes.  Never mutates ``view``.
    """

    if tolerance is None:
        tolerance = relations.config.validation_tolerance
    if value <= 0 or value > 180:
        return ValidationResult(False, f"value {value} outside (0, 180]")

    for check in (
        lambda: _check_label(angle, value, view, tolerance),
        lambda: _check_composed(angle, value, view, relations, tolerance),
        lambda: _check_triangles(angle, value, view, relations, tolerance),
        lambda: _check_full_circle(angle, value, view, relations, tolerance),
    ):
        violation = check()
        if violation:
            logger.debug("Rejected %s = %s: %s", angle.name, value, violation)
            return ValidationResult(False, violation)
    return _OK


__all__ = ["ValidationResult", "ValueView", "validate_angle_value"]
